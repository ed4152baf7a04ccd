from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from registry_api.core.settings import AppSettings, get_app_settings


# PUBLIC_INTERFACE
def create_access_token(
    subject: str,
    expires_minutes: Optional[int] = None,
    extra: Optional[Dict[str, Any]] = None,
    settings: Optional[AppSettings] = None,
) -> str:
    """Create a signed access token whose subject is the caller identity."""
    settings = settings or get_app_settings()
    now = datetime.now(tz=timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: Dict[str, Any] = {"sub": subject, "iat": now, "exp": expire, "type": "access"}
    if extra:
        payload.update(extra)
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# PUBLIC_INTERFACE
def decode_token(token: str, settings: Optional[AppSettings] = None) -> Dict[str, Any]:
    """Decode and validate a JWT; raises JWTError if invalid/expired."""
    settings = settings or get_app_settings()
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


# PUBLIC_INTERFACE
def get_token_subject(token: str, settings: Optional[AppSettings] = None) -> Optional[str]:
    """Return 'sub' from a token or None when token is invalid."""
    try:
        payload = decode_token(token, settings)
        return payload.get("sub")
    except JWTError:
        return None
