from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import requests
from pydantic import ValidationError

from device_notes.core.config import Settings, get_settings
from device_notes.core.errors import AuthError
from device_notes.core.security import mask_token, token_expires_at
from device_notes.schemas.auth import DeviceCodeResponse, TokenErrorResponse, TokenResponse

logger = logging.getLogger(__name__)

DEVICE_CODE_GRANT = "urn:ietf:params:oauth:grant-type:device_code"


@dataclass(frozen=True)
class GraphSession:
    """Authenticated context shared by every call of one run."""

    access_token: str
    token_type: str = "Bearer"
    expires_at: Optional[datetime] = None
    tenant_id: Optional[str] = None

    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"{self.token_type} {self.access_token}"}


def _default_notify(message: str) -> None:
    print(message, file=sys.stderr)


class TokenProvider:
    """Obtains a :class:`GraphSession` from the directory's OAuth2 endpoints."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http: Optional[requests.Session] = None,
        notify: Callable[[str], None] = _default_notify,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or get_settings()
        self._http = http or requests.Session()
        self._notify = notify
        self._sleep = sleep
        self._clock = clock

    @property
    def token_url(self) -> str:
        return f"{self.settings.authority_host}/{self.settings.tenant_id}/oauth2/v2.0/token"

    @property
    def device_code_url(self) -> str:
        return f"{self.settings.authority_host}/{self.settings.tenant_id}/oauth2/v2.0/devicecode"

    def ensure_ready(self) -> None:
        """Fail early when the configuration cannot support the chosen flow."""
        missing = []
        if not self.settings.tenant_id:
            missing.append("tenant_id")
        if not self.settings.client_id:
            missing.append("client_id")
        if self.settings.auth_flow == "client_credentials" and not self.settings.client_secret:
            missing.append("client_secret")
        if missing:
            names = ", ".join(f"DEVICE_NOTES_{name.upper()}" for name in missing)
            raise AuthError(f"{self.settings.auth_flow} sign-in is not configured, missing {names}")

    def acquire_session(self) -> GraphSession:
        self.ensure_ready()
        if self.settings.auth_flow == "device_code":
            token = self._device_code_token()
        else:
            token = self._client_credentials_token()
        session = self._build_session(token)
        logger.debug(
            "signed in to tenant %s, token %s expires %s",
            session.tenant_id,
            mask_token(session.access_token),
            session.expires_at.isoformat() if session.expires_at else "unknown",
        )
        return session

    # ---- flows ----
    def _client_credentials_token(self) -> TokenResponse:
        logger.debug("requesting app-only token from %s", self.token_url)
        data = self._post_form(self.token_url, {
            "grant_type": "client_credentials",
            "client_id": self.settings.client_id or "",
            "client_secret": self.settings.client_secret or "",
            "scope": self.settings.scope,
        })
        return self._parse_token(data)

    def _device_code_token(self) -> TokenResponse:
        data = self._post_form(self.device_code_url, {
            "client_id": self.settings.client_id or "",
            "scope": self.settings.scope,
        })
        try:
            code = DeviceCodeResponse.model_validate(data)
        except ValidationError as exc:
            raise AuthError(f"unexpected device code response: {exc}") from exc
        self._notify(code.instructions())

        interval = max(code.interval, 1)
        deadline = self._clock() + code.expires_in
        while self._clock() < deadline:
            self._sleep(interval)
            data = self._post_form(self.token_url, {
                "grant_type": DEVICE_CODE_GRANT,
                "client_id": self.settings.client_id or "",
                "device_code": code.device_code,
            }, allow_error=True)
            if "access_token" in data:
                return self._parse_token(data)
            error = data.get("error")
            if error == "authorization_pending":
                continue
            if error == "slow_down":
                interval += 5
                continue
            raise AuthError(self._describe_error(data, "device code sign-in failed"))
        raise AuthError("device code expired before sign-in completed")

    # ---- helpers ----
    def _post_form(self, url: str, form: dict[str, str], allow_error: bool = False) -> dict[str, Any]:
        try:
            resp = self._http.post(url, data=form, timeout=self.settings.request_timeout_seconds)
        except requests.RequestException as exc:
            raise AuthError(f"could not reach {url}: {exc}") from exc
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if resp.ok:
            return data
        # token endpoint answers 400 while a device code is still pending
        if allow_error and resp.status_code == 400 and "error" in data:
            return data
        raise AuthError(self._describe_error(data, f"token endpoint returned HTTP {resp.status_code}"))

    def _parse_token(self, data: dict[str, Any]) -> TokenResponse:
        try:
            return TokenResponse.model_validate(data)
        except ValidationError as exc:
            raise AuthError("token response did not contain an access token") from exc

    def _describe_error(self, data: dict[str, Any], fallback: str) -> str:
        try:
            err = TokenErrorResponse.model_validate(data)
        except ValidationError:
            return fallback
        if err.error_description:
            # AAD puts trace ids on following lines
            return f"{err.error}: {err.error_description.splitlines()[0]}"
        return err.error

    def _build_session(self, token: TokenResponse) -> GraphSession:
        if token.expires_in:
            expires_at: Optional[datetime] = datetime.now(timezone.utc) + timedelta(seconds=token.expires_in)
        else:
            expires_at = token_expires_at(token.access_token)
        return GraphSession(
            access_token=token.access_token,
            token_type=token.token_type or "Bearer",
            expires_at=expires_at,
            tenant_id=self.settings.tenant_id,
        )
