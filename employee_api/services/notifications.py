from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from employee_api.models.notification import NotificationCreate
from employee_api.services import credentials
from employee_api.utils.exceptions import NotFoundError
from employee_api.utils.pagination import PaginatedResponse, PaginationParams
from employee_api.utils.time import iso_now

logger = logging.getLogger(__name__)


def create_notification(client: Client, payload: NotificationCreate) -> dict[str, Any]:
    user = credentials.get_user_by_id(client, payload.user_id, columns="id, email")
    if user is None:
        raise NotFoundError("User", payload.user_id)

    now = iso_now()
    row = {
        **payload.model_dump(),
        "user_email": user["email"],
        "is_read": False,
        "read_at": None,
        "created_at": now,
        "updated_at": now,
    }
    result = client.table("notifications").insert(row).execute()
    return result.data[0]


def notify_user(
    client: Client,
    *,
    user_id: int | None,
    title: str,
    message: str,
    type: str = "INFO",
    link_to: str | None = None,
) -> dict[str, Any] | None:
    """
    Best-effort notification write. Never raises to callers.
    """
    if user_id is None:
        return None
    try:
        return create_notification(
            client,
            NotificationCreate(user_id=user_id, title=title, message=message, type=type, link_to=link_to),
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception(
            "Failed to write notification",
            extra={"user_id": user_id, "type": type, "error": str(exc)},
        )
        return None


def list_notifications(
    client: Client,
    *,
    user_id: int,
    type: str | None = None,
    is_read: bool | None = None,
    pagination: PaginationParams,
) -> PaginatedResponse:
    query = client.table("notifications").select("*", count="exact").eq("user_id", user_id)
    if type:
        query = query.eq("type", type)
    if is_read is not None:
        query = query.eq("is_read", is_read)
    result = (
        query.order("created_at", desc=True)
        .order("id", desc=True)
        .range(pagination.offset, pagination.range_end)
        .execute()
    )
    items = result.data or []
    total = result.count if result.count is not None else len(items)
    return PaginatedResponse.create(items, total, pagination)


def mark_notification_as_read(client: Client, *, user_id: int, notification_id: int) -> dict[str, Any]:
    now = iso_now()
    result = (
        client.table("notifications")
        .update({"is_read": True, "read_at": now, "updated_at": now})
        .eq("id", notification_id)
        .eq("user_id", user_id)
        .execute()
    )
    if not result.data:
        raise NotFoundError("Notification", notification_id)
    return result.data[0]


def mark_all_notifications_as_read(client: Client, *, user_id: int) -> int:
    now = iso_now()
    result = (
        client.table("notifications")
        .update({"is_read": True, "read_at": now, "updated_at": now})
        .eq("user_id", user_id)
        .eq("is_read", False)
        .execute()
    )
    return len(result.data or [])
