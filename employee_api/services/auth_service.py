from __future__ import annotations

import logging
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client

from employee_api.auth.passwords import hash_password, verify_password
from employee_api.auth.roles import LEAST_PRIVILEGED, Role
from employee_api.auth.tokens import (
    JWTDecodeError,
    decode_refresh_token,
    refresh_token_ttl,
    sign_access_token,
    sign_refresh_token,
)
from employee_api.config import get_settings
from employee_api.database import UNIQUE_VIOLATION
from employee_api.services import credentials
from employee_api.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    ValidationError,
)
from employee_api.utils.time import parse_timestamp, utc_now

logger = logging.getLogger(__name__)

# Roles a caller may pick for themselves at registration.
SELF_REGISTRATION_ROLES = frozenset({Role.DIRECTOR, Role.MANAGER, Role.EMPLOYEE})


def clamp_requested_role(requested_role: str | None) -> Role:
    """Unrecognized or disallowed roles fall back to the least-privileged tier."""
    role = Role.parse(requested_role)
    if role is None or role not in SELF_REGISTRATION_ROLES:
        return LEAST_PRIVILEGED
    return role


def _issue_session(client: Client, user: dict[str, Any]) -> dict[str, Any]:
    """Mint both tokens and persist the refresh row. Prior rows are left alone."""
    role = Role.parse(user.get("role"), default=LEAST_PRIVILEGED)
    issued_at = utc_now()
    access_token = sign_access_token(user["id"], role, now=issued_at)
    refresh_token = sign_refresh_token(user["id"], now=issued_at)
    credentials.insert_refresh_token(
        client,
        token=refresh_token,
        user_id=user["id"],
        expires_at=issued_at + refresh_token_ttl(),
    )
    return {
        "user": credentials.redact_user(user),
        "access_token": access_token,
        "refresh_token": refresh_token,
    }


def register(
    client: Client,
    *,
    email: str,
    password: str,
    requested_role: str | None = None,
) -> dict[str, Any]:
    email = email.strip()
    if not email or not password:
        raise ValidationError("Email and password required")

    if credentials.get_user_by_email(client, email) is not None:
        raise ConflictError("User already exists")

    try:
        user = credentials.create_user(
            client,
            email=email,
            password_hash=hash_password(password),
            role=clamp_requested_role(requested_role),
            provider="local",
        )
    except APIError as exc:
        # Lost a race with a concurrent registration for the same email.
        if exc.code == UNIQUE_VIOLATION:
            raise ConflictError("User already exists") from exc
        raise
    logger.info("User registered", extra={"user_id": user["id"], "role": user["role"]})
    return _issue_session(client, user)


def login(client: Client, *, email: str, password: str) -> dict[str, Any]:
    """
    Password login. Unknown email, federated-only accounts, inactive
    accounts and wrong passwords all raise the same InvalidCredentialsError.
    """
    user = credentials.get_user_by_email(client, email.strip())
    if user is None or not user.get("password_hash") or user.get("is_active") is False:
        raise InvalidCredentialsError()
    if not verify_password(password, user["password_hash"]):
        raise InvalidCredentialsError()
    return _issue_session(client, user)


def federated_login(
    client: Client,
    *,
    email: str | None,
    display_name: str | None = None,
) -> dict[str, Any]:
    """
    Simplified third-party login: the identity provider is trusted to have
    verified ``email``. First sight creates a passwordless employee account;
    afterwards the existing row is reused as-is.
    """
    email = (email or "").strip()
    if not email:
        raise ValidationError("Email required")

    user = credentials.get_user_by_email(client, email)
    if user is None:
        try:
            user = credentials.create_user(
                client,
                email=email,
                password_hash="",
                role=LEAST_PRIVILEGED,
                provider="google",
                provider_id=email,
            )
        except APIError as exc:
            if exc.code != UNIQUE_VIOLATION:
                raise
            user = credentials.get_user_by_email(client, email)
            if user is None:
                raise
        else:
            logger.info(
                "Federated user created",
                extra={"user_id": user["id"], "display_name": display_name},
            )
    return _issue_session(client, user)


def refresh(client: Client, *, refresh_token: str) -> dict[str, str]:
    """
    Mint a new access token from a stored refresh token. The role comes
    from the user row as it is now, not from any earlier token.
    """
    stored = credentials.get_refresh_token(client, refresh_token)
    if stored is None or stored.get("revoked"):
        raise InvalidRefreshTokenError()

    try:
        payload = decode_refresh_token(refresh_token)
    except JWTDecodeError:
        raise InvalidRefreshTokenError()

    expires_at = parse_timestamp(stored.get("expires_at"))
    if expires_at is not None and expires_at <= utc_now():
        raise InvalidRefreshTokenError()
    if payload.user_id != stored["user_id"]:
        raise InvalidRefreshTokenError()

    user = credentials.get_user_by_id(client, stored["user_id"])
    if user is None:
        raise InvalidRefreshTokenError()

    role = Role.parse(user.get("role"), default=LEAST_PRIVILEGED)
    return {"access_token": sign_access_token(user["id"], role)}


def logout(client: Client, *, refresh_token: str | None) -> dict[str, bool]:
    """Revoke every row holding this token. Unknown tokens are a no-op."""
    if refresh_token:
        revoked = credentials.revoke_refresh_token(client, refresh_token)
        logger.info("Refresh token revoked", extra={"rows": revoked})
    return {"ok": True}


def change_password(
    client: Client,
    *,
    user_id: int,
    current_password: str,
    new_password: str,
) -> dict[str, Any]:
    # TODO: revoke outstanding refresh tokens once the frontend re-logs in after a change.
    user = credentials.get_user_by_id(client, user_id, columns="id, password_hash")
    if user is None:
        return {"success": False, "message": "User not found"}
    if not verify_password(current_password, user.get("password_hash")):
        return {"success": False, "message": "Current password is incorrect"}

    credentials.update_user(client, user_id, {"password_hash": hash_password(new_password)})
    return {"success": True, "message": "Password changed successfully"}


def forgot_password(*, email: str) -> dict[str, Any]:
    # No mail transport is wired up; the response never reveals whether the account exists.
    logger.info("Password reset requested", extra={"email": email})
    return {"ok": True, "message": "If this email exists, reset link sent."}


def reset_password(client: Client, *, email: str, new_password: str) -> dict[str, Any]:
    """
    Set a new password from email alone. There is no proof of mailbox
    possession, so this only runs with INSECURE_PASSWORD_RESET enabled.
    """
    if not get_settings().insecure_password_reset:
        raise ForbiddenError("Password reset without a reset token is disabled")
    if not email.strip() or not new_password:
        raise ValidationError("Email and new password required")

    user = credentials.get_user_by_email(client, email.strip())
    if user is None:
        return {"ok": True}

    credentials.update_user(client, user["id"], {"password_hash": hash_password(new_password)})
    logger.warning("Password reset without token", extra={"user_id": user["id"]})
    return {"ok": True, "message": "Password updated."}
