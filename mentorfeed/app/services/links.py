"""Signing and verifying session tokens and app links.

Uses HMAC-SHA256 and the lifetime (exp) inside the payload.
"""
# app/services/links.py
import time, hmac, hashlib, base64, json
from typing import Optional
from mentorfeed.app.core.config import settings

def _b64u_encode(b: bytes) -> str:
    return base64.urlsafe_b64encode(b).rstrip(b"=").decode()

def _b64u_decode(s: str) -> bytes:
    pad = "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode(s + pad)

def sign_token(payload: dict, ttl_sec: int) -> str:
    """Sign a token with TTL.

    Args:
        payload: Arbitrary data (for example, `sub`).
        ttl_sec: Lifetime in seconds (will be recorded in the `exp` field).

    Returns:
        str: A token of the form `<b64(data)>.<b64(sig)>`.
    """
    data = payload | {"exp": int(time.time()) + int(ttl_sec)}
    raw = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode()
    sig = hmac.new(settings.SECRET_KEY.encode(), raw, hashlib.sha256).digest()
    return f"{_b64u_encode(raw)}.{_b64u_encode(sig)}"

def verify_token(token: str) -> Optional[dict]:
    """Verify the signature of the token and its validity period.

    Args:
        token: The token string.

    Returns:
        dict | None: Decoded data on success, otherwise None.
    """
    try:
        raw_b64, sig_b64 = token.split(".", 1)
        raw = _b64u_decode(raw_b64)
        sig = _b64u_decode(sig_b64)
    except (ValueError, TypeError):
        return None

    expected = hmac.new(settings.SECRET_KEY.encode(), raw, hashlib.sha256).digest()
    if not hmac.compare_digest(sig, expected):
        return None

    try:
        data = json.loads(raw.decode())
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict) or data.get("exp", 0) < int(time.time()):
        return None
    return data

def issue_session_token(user_id: str) -> str:
    return sign_token({"sub": user_id, "kind": "session"}, ttl_sec=settings.SESSION_TTL)

def dashboard_url(role: str) -> str:
    return f"{settings.APP_URL.rstrip('/')}/{role}/dashboard"

def feedback_url(event_id: str, mentee_id: str) -> str:
    return f"{settings.APP_URL.rstrip('/')}/mentor/events/{event_id}/mentees/{mentee_id}/submit-feedback"

def sign_in_url() -> str:
    return f"{settings.APP_URL.rstrip('/')}/auth/signin"
