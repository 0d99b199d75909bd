import os
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .errors import UnauthenticatedError

AUTH_SECRET_KEY = os.getenv("AUTH_SECRET_KEY", "")
AUTH_ALGORITHM = os.getenv("AUTH_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 30)))

bearer_scheme = HTTPBearer(auto_error=False)


def _secret_key() -> str:
    if not AUTH_SECRET_KEY:
        raise RuntimeError("AUTH_SECRET_KEY is not configured")
    return AUTH_SECRET_KEY


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims: dict[str, Any] = {"sub": user_id, "exp": expire}
    return jwt.encode(claims, _secret_key(), algorithm=AUTH_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by ``token``."""
    try:
        payload = jwt.decode(token, _secret_key(), algorithms=[AUTH_ALGORITHM])
    except JWTError as exc:
        raise UnauthenticatedError("Invalid or expired token") from exc
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise UnauthenticatedError("Invalid or expired token")
    return user_id


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthenticatedError()
    return decode_access_token(credentials.credentials)
