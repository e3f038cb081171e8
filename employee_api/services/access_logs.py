from __future__ import annotations

from typing import Any

from supabase import Client

from employee_api.auth.models import AuthContext
from employee_api.services import credentials
from employee_api.utils.pagination import PaginatedResponse, PaginationParams
from employee_api.utils.time import iso_now


def log_access(
    client: Client,
    auth: AuthContext,
    *,
    action: str,
    details: str | None = None,
    ip_address: str | None = None,
) -> dict[str, Any]:
    user = credentials.get_user_by_id(client, auth.user_id, columns="id, email")
    row = {
        "user_id": auth.user_id,
        "user_email": user["email"] if user else "unknown",
        "action": action,
        "details": details or None,
        "ip_address": ip_address,
        "created_at": iso_now(),
    }
    result = client.table("access_logs").insert(row).execute()
    return result.data[0]


def list_access_logs(
    client: Client,
    *,
    pagination: PaginationParams,
    user_id: int | None = None,
    action: str | None = None,
) -> PaginatedResponse:
    query = client.table("access_logs").select("*", count="exact")
    if user_id is not None:
        query = query.eq("user_id", user_id)
    if action:
        query = query.eq("action", action)
    result = (
        query.order("created_at", desc=True)
        .order("id", desc=True)
        .range(pagination.offset, pagination.range_end)
        .execute()
    )
    items = result.data or []
    total = result.count if result.count is not None else len(items)
    return PaginatedResponse.create(items, total, pagination)
