from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None

    model_config = ConfigDict(extra="ignore")


class DeviceCodeResponse(BaseModel):
    device_code: str
    user_code: str
    verification_uri: str
    expires_in: int = 900
    interval: int = 5
    message: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    def instructions(self) -> str:
        if self.message:
            return self.message
        return f"To sign in, open {self.verification_uri} and enter the code {self.user_code}."


class TokenErrorResponse(BaseModel):
    error: str
    error_description: Optional[str] = None

    model_config = ConfigDict(extra="ignore")
