from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from device_notes.core.config import Settings
from device_notes.core.errors import (
    AmbiguousDeviceError,
    DeviceLookupError,
    DeviceNotFoundError,
    GraphRequestError,
    NotesReadError,
    NotesWriteError,
)
from device_notes.schemas.device import DeviceCollection
from device_notes.services.graph_client import GraphClient

logger = logging.getLogger(__name__)


def odata_quote(value: str) -> str:
    """Quote a string literal for an OData ``$filter`` expression."""
    return "'" + value.replace("'", "''") + "'"


class DeviceService:
    """Resolves device names and reads/writes the notes property of a device."""

    def __init__(self, client: GraphClient, settings: Optional[Settings] = None) -> None:
        self.client = client
        self.settings = settings or client.settings

    def _device_path(self, device_id: str) -> str:
        return f"{self.settings.devices_path}/{device_id}"

    def resolve_device_id(self, device_name: str) -> str:
        if not device_name or not device_name.strip():
            raise DeviceLookupError("a device name is required")
        name_prop = self.settings.device_name_property
        params = {
            "$filter": f"{name_prop} eq {odata_quote(device_name)}",
            "$select": f"id,{name_prop}",
        }
        try:
            data = self.client.get(self.settings.devices_path, params=params)
            collection = DeviceCollection.model_validate(data)
        except GraphRequestError as exc:
            raise DeviceLookupError(f"could not look up device {device_name!r}: {exc}") from exc
        except ValidationError as exc:
            raise DeviceLookupError(f"unexpected device list for {device_name!r}: {exc}") from exc

        matches = collection.value
        if collection.next_link:
            logger.debug("lookup of %r returned more than one page, only the first is inspected", device_name)
        if not matches:
            raise DeviceNotFoundError(device_name)
        if len(matches) > 1:
            raise AmbiguousDeviceError(device_name, [d.id for d in matches])
        logger.debug("device %r resolved to %s", device_name, matches[0].id)
        return matches[0].id

    def get_notes(self, device_id: str) -> str:
        prop = self.settings.notes_property
        try:
            data = self.client.get(self._device_path(device_id), params={"$select": prop})
        except GraphRequestError as exc:
            raise NotesReadError(f"could not read notes of device {device_id}: {exc}") from exc
        value = data.get(prop)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise NotesReadError(f"notes of device {device_id} is not a string: {value!r}")
        return value

    def set_notes(self, device_id: str, value: str) -> None:
        try:
            self.client.patch(self._device_path(device_id), {self.settings.notes_property: value})
        except GraphRequestError as exc:
            raise NotesWriteError(f"could not update notes of device {device_id}: {exc}") from exc
        logger.debug("notes of device %s patched (%d chars)", device_id, len(value))
