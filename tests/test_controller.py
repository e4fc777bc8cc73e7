"""
Tests for device_notes.controller.

The controller runs headless against ``FakeDeviceService``; the confirmation
prompt is a scripted callable.
"""

from unittest.mock import MagicMock

import pytest

from device_notes.controller import (
    ControllerState,
    NotesAction,
    NotesController,
    NotesOutcome,
    format_outcome,
)
from device_notes.core.errors import DeviceLookupError, NotesWriteError

from .conftest import FakeDeviceService


def _never_called(prompt: str) -> bool:
    raise AssertionError(f"unexpected prompt: {prompt}")


class TestRead:
    def test_reports_existing_note(self, fake_service: FakeDeviceService) -> None:
        outcome = NotesController(fake_service, _never_called).run("VM-1874-39")

        assert outcome == NotesOutcome("VM-1874-39", "dev-1", NotesAction.READ, "Laddstation: 33", "Laddstation: 33")
        assert format_outcome(outcome) == "Device 'VM-1874-39' has note 'Laddstation: 33'."

    @pytest.mark.parametrize("notes", [None, ""])
    def test_no_notes_argument_never_writes(self, fake_service: FakeDeviceService, notes: object) -> None:
        NotesController(fake_service, _never_called).run("VM-1874-39", notes)  # type: ignore[arg-type]
        assert fake_service.call_names() == ["resolve", "get"]

    def test_reports_missing_note(self) -> None:
        service = FakeDeviceService({"VM-2": "dev-2"})
        outcome = NotesController(service, _never_called).run("VM-2")
        assert format_outcome(outcome) == "Device 'VM-2' has no notes set."


class TestWrite:
    def test_accepting_overwrite(self, fake_service: FakeDeviceService) -> None:
        confirm = MagicMock(return_value=True)

        outcome = NotesController(fake_service, confirm).run("VM-1874-39", "Laddstation: 99")

        prompt = confirm.call_args.args[0]
        assert "'Laddstation: 33'" in prompt and "'Laddstation: 99'" in prompt
        assert fake_service.calls == [
            ("resolve", "VM-1874-39"),
            ("get", "dev-1"),
            ("set", "dev-1", "Laddstation: 99"),
            ("get", "dev-1"),
        ]
        assert outcome.action is NotesAction.UPDATED
        assert outcome.previous == "Laddstation: 33"
        assert format_outcome(outcome) == "Device 'VM-1874-39' note updated to 'Laddstation: 99'."

    def test_declining_overwrite(self, fake_service: FakeDeviceService) -> None:
        outcome = NotesController(fake_service, lambda prompt: False).run("VM-1874-39", "Laddstation: 99")

        assert "set" not in fake_service.call_names()
        assert fake_service.notes["dev-1"] == "Laddstation: 33"
        assert outcome.action is NotesAction.UNCHANGED
        assert format_outcome(outcome) == "Note on device 'VM-1874-39' was not changed."

    def test_empty_note_written_without_prompt(self) -> None:
        service = FakeDeviceService({"VM-2": "dev-2"})

        outcome = NotesController(service, _never_called).run("VM-2", "first note")

        assert service.call_names() == ["resolve", "get", "set", "get"]
        assert outcome.current == "first note"

    def test_read_your_write(self, fake_service: FakeDeviceService) -> None:
        controller = NotesController(fake_service, lambda prompt: True)
        controller.run("VM-1874-39", "Laddstation: 99")
        assert controller.run("VM-1874-39").current == "Laddstation: 99"

    def test_setting_twice_same_as_once(self, fake_service: FakeDeviceService) -> None:
        controller = NotesController(fake_service, lambda prompt: True)
        first = controller.run("VM-1874-39", "Laddstation: 99")
        second = controller.run("VM-1874-39", "Laddstation: 99")
        assert first.current == second.current == "Laddstation: 99"

    def test_what_if_never_writes(self, fake_service: FakeDeviceService) -> None:
        outcome = NotesController(fake_service, lambda prompt: True, what_if=True).run("VM-1874-39", "Laddstation: 99")

        assert fake_service.call_names() == ["resolve", "get"]
        assert outcome.action is NotesAction.WHAT_IF
        assert format_outcome(outcome) == "What if: would set note on device 'VM-1874-39' to 'Laddstation: 99'."

    def test_what_if_respects_decline(self, fake_service: FakeDeviceService) -> None:
        outcome = NotesController(fake_service, lambda prompt: False, what_if=True).run("VM-1874-39", "x")
        assert outcome.action is NotesAction.UNCHANGED


class TestFailures:
    def test_unknown_device_stops_before_read(self) -> None:
        service = FakeDeviceService({})
        with pytest.raises(DeviceLookupError):
            NotesController(service, _never_called).run("VM-0000", "x")
        assert service.call_names() == ["resolve"]

    def test_blank_name_makes_no_calls(self, fake_service: FakeDeviceService) -> None:
        with pytest.raises(DeviceLookupError):
            NotesController(fake_service, _never_called).run("")
        assert fake_service.calls == []

    def test_write_failure_propagates_without_reread(self, fake_service: FakeDeviceService) -> None:
        fake_service.set_notes = MagicMock(side_effect=NotesWriteError("denied"))  # type: ignore[method-assign]
        controller = NotesController(fake_service, lambda prompt: True)

        with pytest.raises(NotesWriteError):
            controller.run("VM-1874-39", "x")

        assert fake_service.call_names() == ["resolve", "get"]
        assert controller.state is ControllerState.IDLE


def test_state_returns_to_idle(fake_service: FakeDeviceService) -> None:
    controller = NotesController(fake_service, _never_called)
    controller.run("VM-1874-39")
    assert controller.state is ControllerState.IDLE
