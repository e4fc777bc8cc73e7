from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from device_notes.core.config import Settings, get_settings
from device_notes.core.errors import GraphRequestError
from device_notes.services.auth import GraphSession

logger = logging.getLogger(__name__)


class GraphClient:
    """Thin JSON client for the device management REST API."""

    def __init__(self, session: GraphSession, settings: Optional[Settings] = None, http: Optional[requests.Session] = None) -> None:
        self.settings = settings or get_settings()
        self._session = session
        self._http = http or requests.Session()
        self._http.headers.update(session.authorization_header())
        self._http.headers.update({"Accept": "application/json"})

    def __enter__(self) -> "GraphClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def url(self, path: str) -> str:
        return f"{self.settings.api_root}/{path.lstrip('/')}"

    def get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        resp = self._request("GET", path, params=params)
        try:
            data = resp.json()
        except ValueError as exc:
            raise GraphRequestError("response body is not JSON", status_code=resp.status_code) from exc
        if not isinstance(data, dict):
            raise GraphRequestError("response body is not a JSON object", status_code=resp.status_code)
        return data

    def patch(self, path: str, payload: Dict[str, Any]) -> None:
        self._request("PATCH", path, json=payload)

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self.url(path)
        logger.debug("%s %s params=%s", method, url, kwargs.get("params"))
        try:
            resp = self._http.request(method, url, timeout=self.settings.request_timeout_seconds, **kwargs)
        except requests.RequestException as exc:
            raise GraphRequestError(f"{method} {url} failed: {exc}") from exc
        logger.debug("%s %s -> %s", method, url, resp.status_code)
        if not resp.ok:
            raise _error_from_response(resp)
        return resp


def _error_from_response(resp: requests.Response) -> GraphRequestError:
    code = None
    message = resp.reason or "request failed"
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        code = body["error"].get("code")
        message = body["error"].get("message") or message
    return GraphRequestError(message, status_code=resp.status_code, code=code)
