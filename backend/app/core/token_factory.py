"""Pure functions for creating and decoding admin session tokens (HS256 JWT).

No classes, no state. The login endpoint issues a token; the auth
dependencies decode it from the Authorization header or the session cookie.
"""

import hashlib
import hmac
import base64
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

ISSUER = "riseup"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded session claims. Immutable."""
    sub: str
    role: str
    exp: datetime


def create_token(
    subject: str,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    expires_hours: int = 12,
) -> str:
    """Create a signed session token.

    Args:
        subject: User id of the dashboard account.
        role: ``"admin"`` or ``"editor"``.
        secret: HMAC signing key.
        algorithm: Only HS256 supported.
        expires_hours: Hours until expiry.
    """
    if algorithm != "HS256":
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    now = time.time()
    claims = {
        "sub": subject,
        "role": role,
        "iat": int(now),
        "exp": int(now + expires_hours * 3600),
        "iss": ISSUER,
    }

    segments = [
        _b64encode(json.dumps({"alg": "HS256", "typ": "JWT"}).encode()),
        _b64encode(json.dumps(claims).encode()),
    ]
    signature = hmac.new(secret.encode(), b".".join(segments), hashlib.sha256).digest()
    segments.append(_b64encode(signature))
    return b".".join(segments).decode()


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[TokenPayload]:
    """Decode and validate a session token.

    Returns ``None`` on any failure (bad signature, wrong issuer, expired,
    malformed) so callers decide what absence means for them.
    """
    if algorithm != "HS256":
        return None
    try:
        parts = token.encode().split(b".")
        if len(parts) != 3:
            return None

        expected_sig = hmac.new(secret.encode(), parts[0] + b"." + parts[1], hashlib.sha256).digest()
        if not hmac.compare_digest(expected_sig, _b64decode(parts[2])):
            return None

        claims = json.loads(_b64decode(parts[1]))
        if claims.get("iss") != ISSUER:
            return None

        exp = claims.get("exp", 0)
        if time.time() > exp:
            return None

        return TokenPayload(
            sub=claims.get("sub", ""),
            role=claims.get("role", ""),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (json.JSONDecodeError, KeyError, ValueError, IndexError, TypeError):
        return None


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(data: bytes) -> bytes:
    padding = 4 - len(data) % 4
    if padding != 4:
        data += b"=" * padding
    return base64.urlsafe_b64decode(data)
