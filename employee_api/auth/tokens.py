# employee_api/auth/tokens.py - JWT helpers for access and refresh tokens

from datetime import datetime, timedelta, timezone
import secrets

import jwt

from employee_api.auth.models import AccessTokenPayload, RefreshTokenPayload
from employee_api.auth.roles import Role
from employee_api.config import get_settings

JWT_ALGORITHM = "HS256"


class JWTDecodeError(Exception):
    """Raised when a JWT cannot be decoded/validated."""


class InvalidJWTTypeError(JWTDecodeError):
    """Raised when a JWT has a valid signature but unsupported type."""


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def access_token_ttl() -> timedelta:
    return timedelta(minutes=get_settings().access_token_ttl_minutes)


def refresh_token_ttl() -> timedelta:
    return timedelta(days=get_settings().refresh_token_ttl_days)


def sign_access_token(user_id: int, role: Role, *, now: datetime | None = None) -> str:
    """Short-lived token carrying identity and the role as of mint time."""
    settings = get_settings()
    issued_at = now or _now_utc()
    payload = {
        "type": "access",
        "sub": str(user_id),
        "user_id": user_id,
        "role": Role(role).value,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + access_token_ttl()).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_access_secret, algorithm=JWT_ALGORITHM)


def sign_refresh_token(user_id: int, *, now: datetime | None = None) -> str:
    """Long-lived token carrying identity only; role is re-read on refresh."""
    settings = get_settings()
    issued_at = now or _now_utc()
    payload = {
        "type": "refresh",
        "sub": str(user_id),
        "user_id": user_id,
        "jti": secrets.token_hex(16),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + refresh_token_ttl()).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_refresh_secret, algorithm=JWT_ALGORITHM)


def _decode(token: str, secret: str, expected_type: str) -> dict:
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError as exc:
        raise JWTDecodeError(str(exc)) from exc

    token_type = payload.get("type")
    if token_type != expected_type:
        raise InvalidJWTTypeError(f"Unsupported JWT type: {token_type}")
    return payload


def decode_access_token(token: str) -> AccessTokenPayload:
    """
    Decode an access token.
    Raises JWTDecodeError for invalid/expired signatures and payloads.
    """
    payload = _decode(token, get_settings().jwt_access_secret, "access")
    role = Role.parse(payload.get("role"))
    if role is None:
        raise JWTDecodeError(f"Unknown role claim: {payload.get('role')}")
    try:
        return AccessTokenPayload(
            sub=payload["sub"],
            user_id=int(payload["user_id"]),
            role=role,
            exp=payload.get("exp"),
            iat=payload.get("iat"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise JWTDecodeError(f"Malformed JWT claims: {exc}") from exc


def decode_refresh_token(token: str) -> RefreshTokenPayload:
    payload = _decode(token, get_settings().jwt_refresh_secret, "refresh")
    try:
        return RefreshTokenPayload(
            sub=payload["sub"],
            user_id=int(payload["user_id"]),
            jti=payload.get("jti"),
            exp=payload.get("exp"),
            iat=payload.get("iat"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise JWTDecodeError(f"Malformed JWT claims: {exc}") from exc
