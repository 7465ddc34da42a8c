import uuid
from datetime import datetime, timedelta, timezone

import jwt

from videohub.core import config

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _encode(claims: dict, secret: str, expires_minutes: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, secret, algorithm=config.JWT_ALGORITHM)


def _decode(token: str, secret: str, token_type: str) -> dict:
    payload = jwt.decode(token, secret, algorithms=[config.JWT_ALGORITHM])
    if payload.get("type") != token_type:
        raise jwt.InvalidTokenError(f"Expected a {token_type} token")
    return payload


def create_access_token(user, expires_minutes: int | None = None) -> str:
    claims = {
        "sub": str(user.id),
        "type": ACCESS_TOKEN_TYPE,
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
    }
    return _encode(
        claims,
        config.ACCESS_TOKEN_SECRET,
        expires_minutes or config.ACCESS_TOKEN_EXPIRES_MINUTES,
    )


def create_refresh_token(user, expires_minutes: int | None = None) -> str:
    return _encode(
        {"sub": str(user.id), "type": REFRESH_TOKEN_TYPE},
        config.REFRESH_TOKEN_SECRET,
        expires_minutes or config.REFRESH_TOKEN_EXPIRES_MINUTES,
    )


def decode_access_token(token: str) -> dict:
    return _decode(token, config.ACCESS_TOKEN_SECRET, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> dict:
    return _decode(token, config.REFRESH_TOKEN_SECRET, REFRESH_TOKEN_TYPE)
