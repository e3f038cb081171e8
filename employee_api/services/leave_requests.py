from __future__ import annotations

from typing import Any

from supabase import Client

from employee_api.auth.models import AuthContext
from employee_api.models.leave_request import LeaveRequestCreate
from employee_api.services.employees import ensure_employee_for_user, get_my_employee
from employee_api.services.notifications import notify_user
from employee_api.utils.exceptions import NotFoundError
from employee_api.utils.pagination import PaginatedResponse, PaginationParams
from employee_api.utils.time import iso_now


def create_leave_request(
    client: Client,
    auth: AuthContext,
    payload: LeaveRequestCreate,
) -> dict[str, Any]:
    employee = ensure_employee_for_user(client, auth)
    now = iso_now()
    row = {
        "employee_id": employee["id"],
        "start_date": payload.start_date.isoformat(),
        "end_date": payload.end_date.isoformat(),
        "type": payload.type,
        "reason": payload.reason,
        "status": "pending",
        "admin_note": None,
        "approver_id": None,
        "approved_at": None,
        "created_at": now,
        "updated_at": now,
    }
    result = client.table("leave_requests").insert(row).execute()
    return result.data[0]


def _attach_employee_names(client: Client, requests: list[dict[str, Any]]) -> list[dict[str, Any]]:
    employee_ids = sorted({row["employee_id"] for row in requests if row.get("employee_id") is not None})
    names: dict[int, str] = {}
    if employee_ids:
        result = client.table("employees").select("id, name").in_("id", employee_ids).execute()
        names = {row["id"]: row["name"] for row in result.data or []}
    return [{**row, "employee_name": names.get(row.get("employee_id"))} for row in requests]


def list_leave_requests(
    client: Client,
    *,
    status: str | None,
    pagination: PaginationParams,
) -> PaginatedResponse:
    query = client.table("leave_requests").select("*", count="exact")
    if status:
        query = query.eq("status", status)
    result = (
        query.order("created_at", desc=True)
        .order("id", desc=True)
        .range(pagination.offset, pagination.range_end)
        .execute()
    )
    items = _attach_employee_names(client, result.data or [])
    total = result.count if result.count is not None else len(items)
    return PaginatedResponse.create(items, total, pagination)


def my_leave_requests(
    client: Client,
    auth: AuthContext,
    *,
    pagination: PaginationParams,
) -> PaginatedResponse:
    employee = get_my_employee(client, auth)
    if employee is None:
        return PaginatedResponse.create([], 0, pagination)
    result = (
        client.table("leave_requests")
        .select("*", count="exact")
        .eq("employee_id", employee["id"])
        .order("created_at", desc=True)
        .order("id", desc=True)
        .range(pagination.offset, pagination.range_end)
        .execute()
    )
    items = result.data or []
    total = result.count if result.count is not None else len(items)
    return PaginatedResponse.create(items, total, pagination)


def update_leave_request_status(
    client: Client,
    auth: AuthContext,
    *,
    leave_request_id: int,
    status: str,
    admin_note: str | None = None,
) -> dict[str, Any]:
    now = iso_now()
    update: dict[str, Any] = {
        "status": status,
        "admin_note": admin_note or None,
        "approver_id": auth.user_id,
        "approved_at": now if status == "approved" else None,
        "updated_at": now,
    }
    result = client.table("leave_requests").update(update).eq("id", leave_request_id).execute()
    if not result.data:
        raise NotFoundError("Leave request", leave_request_id)
    leave_request = result.data[0]

    employee = (
        client.table("employees")
        .select("id, user_id")
        .eq("id", leave_request["employee_id"])
        .limit(1)
        .execute()
    )
    if employee.data:
        notify_user(
            client,
            user_id=employee.data[0].get("user_id"),
            title=f"Leave request {status}",
            message=admin_note or f"Your leave request #{leave_request_id} was {status}.",
            type="APPROVAL",
            link_to="/leave-requests",
        )
    return leave_request
