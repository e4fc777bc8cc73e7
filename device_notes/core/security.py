from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

import jwt


def decode_token_claims(token: str) -> dict[str, Any]:
    """Read the claims of an access token without verifying it.

    The token was just issued to us over TLS; verification is the resource
    server's job. Opaque (non-JWT) tokens yield an empty dict.
    """
    try:
        return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.PyJWTError:
        return {}


def token_expires_at(token: str) -> Optional[datetime]:
    exp = decode_token_claims(token).get("exp")
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc)


def mask_token(token: str) -> str:
    return token[:4] + "***" + token[-4:] if len(token) > 8 else "***"
