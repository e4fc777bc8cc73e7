from __future__ import annotations

from typing import Optional, Sequence


class DeviceNotesError(Exception):
    """Base class for every failure the tool reports to the user."""


class AuthError(DeviceNotesError):
    """No authenticated session could be established."""


class DeviceLookupError(DeviceNotesError, LookupError):
    """A device name could not be resolved to a device id."""


class DeviceNotFoundError(DeviceLookupError):
    def __init__(self, device_name: str) -> None:
        super().__init__(f"no device named {device_name!r} was found")
        self.device_name = device_name


class AmbiguousDeviceError(DeviceLookupError):
    def __init__(self, device_name: str, device_ids: Sequence[str]) -> None:
        ids = ", ".join(device_ids)
        super().__init__(f"{len(device_ids)} devices are named {device_name!r} ({ids})")
        self.device_name = device_name
        self.device_ids = list(device_ids)


class NotesReadError(DeviceNotesError):
    """The notes field of a device could not be read."""


class NotesWriteError(DeviceNotesError):
    """The notes field of a device could not be updated."""


class GraphRequestError(DeviceNotesError):
    """A request to the device management API failed.

    ``status_code`` is None when no HTTP response was received at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        parts = []
        if self.status_code is not None:
            parts.append(f"HTTP {self.status_code}")
        if self.code:
            parts.append(self.code)
        prefix = " ".join(parts)
        return f"{prefix}: {self.message}" if prefix else self.message
