from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from device_notes.core.errors import DeviceLookupError

logger = logging.getLogger(__name__)


class NotesBackend(Protocol):
    def resolve_device_id(self, device_name: str) -> str: ...

    def get_notes(self, device_id: str) -> str: ...

    def set_notes(self, device_id: str, value: str) -> None: ...


class ControllerState(enum.Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    READING = "reading"
    WRITING = "writing"
    REPORTING = "reporting"


class NotesAction(enum.Enum):
    READ = "read"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    WHAT_IF = "what_if"


@dataclass(frozen=True)
class NotesOutcome:
    device_name: str
    device_id: str
    action: NotesAction
    previous: str
    current: str


class NotesController:
    """Reads the note of one device, or overwrites it after confirmation.

    ``confirm`` is only called when a non-empty note would be replaced; it
    receives the prompt text and returns True to go ahead.
    """

    def __init__(self, service: NotesBackend, confirm: Callable[[str], bool], what_if: bool = False) -> None:
        self.service = service
        self.confirm = confirm
        self.what_if = what_if
        self.state = ControllerState.IDLE

    def _enter(self, state: ControllerState) -> None:
        logger.debug("controller %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self, device_name: str, notes: Optional[str] = None) -> NotesOutcome:
        if not device_name or not device_name.strip():
            raise DeviceLookupError("a device name is required")
        try:
            self._enter(ControllerState.RESOLVING)
            device_id = self.service.resolve_device_id(device_name)
            if notes:
                outcome = self._write(device_name, device_id, notes)
            else:
                self._enter(ControllerState.READING)
                current = self.service.get_notes(device_id)
                outcome = NotesOutcome(device_name, device_id, NotesAction.READ, current, current)
            self._enter(ControllerState.REPORTING)
            return outcome
        finally:
            self._enter(ControllerState.IDLE)

    def _write(self, device_name: str, device_id: str, notes: str) -> NotesOutcome:
        self._enter(ControllerState.READING)
        existing = self.service.get_notes(device_id)
        if existing and not self.confirm(overwrite_prompt(device_name, existing, notes)):
            return NotesOutcome(device_name, device_id, NotesAction.UNCHANGED, existing, existing)
        if self.what_if:
            return NotesOutcome(device_name, device_id, NotesAction.WHAT_IF, existing, notes)

        self._enter(ControllerState.WRITING)
        self.service.set_notes(device_id, notes)
        self._enter(ControllerState.READING)
        current = self.service.get_notes(device_id)
        return NotesOutcome(device_name, device_id, NotesAction.UPDATED, existing, current)


def overwrite_prompt(device_name: str, existing: str, new: str) -> str:
    return (
        f"Device {device_name!r} already has the note {existing!r}.\n"
        f"Replace it with {new!r}?"
    )


def format_outcome(outcome: NotesOutcome) -> str:
    name = outcome.device_name
    if outcome.action is NotesAction.READ:
        if not outcome.current:
            return f"Device {name!r} has no notes set."
        return f"Device {name!r} has note {outcome.current!r}."
    if outcome.action is NotesAction.UPDATED:
        return f"Device {name!r} note updated to {outcome.current!r}."
    if outcome.action is NotesAction.WHAT_IF:
        return f"What if: would set note on device {name!r} to {outcome.current!r}."
    return f"Note on device {name!r} was not changed."
