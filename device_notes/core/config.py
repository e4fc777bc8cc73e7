from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tool configuration loaded from environment variables.

    Credentials should come from the environment (or a local ``.env``),
    never from the command line.
    """

    # Directory / sign-in
    tenant_id: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    auth_flow: Literal["client_credentials", "device_code"] = "client_credentials"
    authority_host: str = "https://login.microsoftonline.com"
    scope: str = "https://graph.microsoft.com/.default"

    # Device management API; notes is only exposed on beta
    graph_base_url: str = "https://graph.microsoft.com"
    graph_api_version: str = "beta"
    devices_path: str = "deviceManagement/managedDevices"
    device_name_property: str = "deviceName"
    notes_property: str = "notes"

    request_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(env_prefix="DEVICE_NOTES_", env_file=".env", extra="ignore")

    @field_validator("authority_host", "graph_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("graph_api_version", "devices_path")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        return value.strip("/")

    @field_validator("request_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return value

    @property
    def api_root(self) -> str:
        return f"{self.graph_base_url}/{self.graph_api_version}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
