from __future__ import annotations

from datetime import datetime
from typing import Any

from supabase import Client

from employee_api.auth.roles import Role
from employee_api.utils.time import iso_now

USER_PUBLIC_COLUMNS = "id, email, role, provider, provider_id, is_active, created_at, updated_at"
USER_AUTH_COLUMNS = "id, email, role, provider, is_active, password_hash"


def redact_user(user: dict[str, Any]) -> dict[str, Any]:
    """The only user shape returned by auth flows; the digest never leaves."""
    role = Role.parse(user.get("role"), default=Role.EMPLOYEE)
    return {"id": user["id"], "email": user["email"], "role": role.value}


def public_user(user: dict[str, Any]) -> dict[str, Any]:
    data = {key: value for key, value in user.items() if key != "password_hash"}
    role = Role.parse(data.get("role"), default=Role.EMPLOYEE)
    data["role"] = role.value
    return data


def get_user_by_email(client: Client, email: str) -> dict[str, Any] | None:
    result = (
        client.table("users")
        .select(USER_AUTH_COLUMNS)
        .eq("email", email)
        .limit(1)
        .execute()
    )
    return result.data[0] if result.data else None


def get_user_by_id(
    client: Client,
    user_id: int,
    *,
    columns: str = USER_PUBLIC_COLUMNS,
) -> dict[str, Any] | None:
    result = client.table("users").select(columns).eq("id", user_id).limit(1).execute()
    return result.data[0] if result.data else None


def create_user(
    client: Client,
    *,
    email: str,
    password_hash: str,
    role: Role,
    provider: str = "local",
    provider_id: str | None = None,
) -> dict[str, Any]:
    now = iso_now()
    row = {
        "email": email,
        "password_hash": password_hash,
        "role": role.value,
        "provider": provider,
        "provider_id": provider_id,
        "is_active": True,
        "created_at": now,
        "updated_at": now,
    }
    result = client.table("users").insert(row).execute()
    return result.data[0]


def update_user(client: Client, user_id: int, fields: dict[str, Any]) -> dict[str, Any] | None:
    update = {**fields, "updated_at": iso_now()}
    result = client.table("users").update(update).eq("id", user_id).execute()
    return result.data[0] if result.data else None


def delete_user(client: Client, user_id: int) -> bool:
    result = client.table("users").delete().eq("id", user_id).execute()
    return bool(result.data)


def list_users(client: Client, *, roles: list[Role] | None = None) -> list[dict[str, Any]]:
    query = client.table("users").select(USER_PUBLIC_COLUMNS)
    if roles is not None:
        values = [role.value for role in roles]
        # Legacy "admin" rows rank as manager.
        if Role.MANAGER in roles:
            values.append("admin")
        query = query.in_("role", values)
    result = query.order("created_at", desc=True).execute()
    return [public_user(row) for row in result.data or []]


def insert_refresh_token(
    client: Client,
    *,
    token: str,
    user_id: int,
    expires_at: datetime,
) -> dict[str, Any]:
    row = {
        "token": token,
        "user_id": user_id,
        "expires_at": expires_at.isoformat(),
        "revoked": False,
        "created_at": iso_now(),
    }
    result = client.table("refresh_tokens").insert(row).execute()
    return result.data[0]


def get_refresh_token(client: Client, token: str) -> dict[str, Any] | None:
    result = (
        client.table("refresh_tokens")
        .select("id, token, user_id, expires_at, revoked")
        .eq("token", token)
        .limit(1)
        .execute()
    )
    return result.data[0] if result.data else None


def revoke_refresh_token(client: Client, token: str) -> int:
    result = (
        client.table("refresh_tokens")
        .update({"revoked": True})
        .eq("token", token)
        .execute()
    )
    return len(result.data or [])
