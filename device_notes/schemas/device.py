from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ManagedDevice(BaseModel):
    """One record of the device collection, as returned by a filtered query."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    device_name: Optional[str] = Field(default=None, alias="deviceName")
    notes: Optional[str] = None


class DeviceCollection(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    value: list[ManagedDevice] = Field(default_factory=list)
    next_link: Optional[str] = Field(default=None, alias="@odata.nextLink")
