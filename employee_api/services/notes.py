from __future__ import annotations

from typing import Any

from supabase import Client

from employee_api.auth.models import AuthContext
from employee_api.models.note import NoteCreate
from employee_api.services.employees import get_employee, get_my_employee
from employee_api.utils.exceptions import ForbiddenError, NotFoundError
from employee_api.utils.pagination import PaginatedResponse, PaginationParams
from employee_api.utils.time import iso_now


def send_note(client: Client, auth: AuthContext, payload: NoteCreate) -> dict[str, Any]:
    to_employee_id = None if payload.to_all else payload.to_employee_id
    if to_employee_id is not None:
        get_employee(client, to_employee_id)

    now = iso_now()
    row = {
        "message": payload.message,
        "from_user_id": auth.user_id,
        "to_employee_id": to_employee_id,
        "to_all": payload.to_all,
        "is_read": False,
        "created_at": now,
        "updated_at": now,
    }
    result = client.table("notes").insert(row).execute()
    return result.data[0]


def _page_of_notes(query, pagination: PaginationParams) -> PaginatedResponse:
    result = (
        query.order("created_at", desc=True)
        .order("id", desc=True)
        .range(pagination.offset, pagination.range_end)
        .execute()
    )
    items = result.data or []
    total = result.count if result.count is not None else len(items)
    return PaginatedResponse.create(items, total, pagination)


def list_notes(
    client: Client,
    *,
    pagination: PaginationParams,
    employee_id: int | None = None,
) -> PaginatedResponse:
    query = client.table("notes").select("*", count="exact")
    if employee_id is not None:
        query = query.eq("to_employee_id", employee_id)
    return _page_of_notes(query, pagination)


def my_notes(client: Client, auth: AuthContext, *, pagination: PaginationParams) -> PaginatedResponse:
    """Notes addressed to the caller's employee record or to everyone."""
    employee = get_my_employee(client, auth)
    query = client.table("notes").select("*", count="exact")
    if employee is None:
        query = query.eq("to_all", True)
    else:
        query = query.or_(f"to_employee_id.eq.{employee['id']},to_all.is.true")
    return _page_of_notes(query, pagination)


def mark_note_as_read(client: Client, auth: AuthContext, note_id: int) -> dict[str, Any]:
    found = client.table("notes").select("*").eq("id", note_id).limit(1).execute()
    if not found.data:
        raise NotFoundError("Note", note_id)
    note = found.data[0]

    if not auth.is_manager_or_above and not note.get("to_all"):
        employee = get_my_employee(client, auth)
        if employee is None or employee["id"] != note.get("to_employee_id"):
            raise ForbiddenError("Note is addressed to another employee")

    result = (
        client.table("notes")
        .update({"is_read": True, "updated_at": iso_now()})
        .eq("id", note_id)
        .execute()
    )
    if not result.data:
        raise NotFoundError("Note", note_id)
    return result.data[0]
