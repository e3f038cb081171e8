from __future__ import annotations

import csv
import io
import logging
from typing import Any

from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError
from supabase import Client

from employee_api.auth.models import AuthContext
from employee_api.database import UNIQUE_VIOLATION
from employee_api.models.employee import (
    EmployeeCreate,
    EmployeeFilter,
    EmployeeImportRow,
    EmployeeUpdate,
    ProfileUpdate,
)
from employee_api.services import credentials
from employee_api.utils.exceptions import ConflictError, NotFoundError, ValidationError
from employee_api.utils.pagination import PaginatedResponse, PaginationParams, resolve_sort
from employee_api.utils.time import iso_now

logger = logging.getLogger(__name__)

EMPLOYEE_SORT_COLUMNS = {
    "NAME": "name",
    "AGE": "age",
    "ATTENDANCE": "attendance",
    "CREATED_AT": "created_at",
}

EXPORT_COLUMNS = ["name", "email", "age", "role", "status", "location", "attendance"]


def _raise_if_duplicate_email(exc: APIError) -> None:
    if exc.code == UNIQUE_VIOLATION:
        raise ConflictError("An employee with this email or user already exists") from exc


def list_employees(
    client: Client,
    *,
    filters: EmployeeFilter,
    pagination: PaginationParams,
    sort_by: str | None = None,
    sort_order: str | None = None,
) -> PaginatedResponse:
    query = client.table("employees").select("*", count="exact")
    if filters.name_contains:
        query = query.ilike("name", f"%{filters.name_contains.strip()}%")
    if filters.class_name:
        query = query.eq("class_name", filters.class_name)
    if filters.status:
        query = query.eq("status", filters.status)
    if filters.role_not:
        query = query.neq("role", filters.role_not)

    column, desc = resolve_sort(sort_by, sort_order, EMPLOYEE_SORT_COLUMNS)
    result = (
        query.order(column, desc=desc)
        .order("id", desc=desc)
        .range(pagination.offset, pagination.range_end)
        .execute()
    )
    items = result.data or []
    total = result.count if result.count is not None else len(items)
    return PaginatedResponse.create(items, total, pagination)


def get_employee(client: Client, employee_id: int) -> dict[str, Any]:
    result = client.table("employees").select("*").eq("id", employee_id).limit(1).execute()
    if not result.data:
        raise NotFoundError("Employee", employee_id)
    return result.data[0]


def create_employee(client: Client, payload: EmployeeCreate) -> dict[str, Any]:
    now = iso_now()
    row = {**payload.model_dump(), "created_at": now, "updated_at": now}
    try:
        result = client.table("employees").insert(row).execute()
    except APIError as exc:
        _raise_if_duplicate_email(exc)
        raise
    return result.data[0]


def update_employee(client: Client, employee_id: int, payload: EmployeeUpdate) -> dict[str, Any]:
    update = payload.model_dump(exclude_none=True)
    if not update:
        raise ValidationError("No fields provided for update")
    update["updated_at"] = iso_now()
    try:
        result = client.table("employees").update(update).eq("id", employee_id).execute()
    except APIError as exc:
        _raise_if_duplicate_email(exc)
        raise
    if not result.data:
        raise NotFoundError("Employee", employee_id)
    return result.data[0]


def delete_employee(client: Client, employee_id: int) -> bool:
    result = client.table("employees").delete().eq("id", employee_id).execute()
    if not result.data:
        raise NotFoundError("Employee", employee_id)
    return True


def terminate_employee(client: Client, employee_id: int) -> dict[str, Any]:
    result = (
        client.table("employees")
        .update({"status": "terminated", "updated_at": iso_now()})
        .eq("id", employee_id)
        .execute()
    )
    if not result.data:
        raise NotFoundError("Employee", employee_id)
    return result.data[0]


def find_employee_for_user(
    client: Client,
    *,
    user_id: int,
    email: str | None,
) -> dict[str, Any] | None:
    """Match by the persisted user link first, then by email."""
    result = client.table("employees").select("*").eq("user_id", user_id).limit(1).execute()
    if result.data:
        return result.data[0]
    if not email:
        return None
    result = client.table("employees").select("*").eq("email", email).limit(1).execute()
    if not result.data:
        return None
    employee = result.data[0]
    # A record already linked to someone else is never claimed by email.
    if employee.get("user_id") not in (None, user_id):
        return None
    return employee


def _provision_row(user: dict[str, Any]) -> dict[str, Any]:
    now = iso_now()
    email = user.get("email") or ""
    return {
        "name": email.split("@", 1)[0] or "New employee",
        "email": email or None,
        "user_id": user["id"],
        "age": 0,
        "class_name": "Unassigned",
        "subjects": [],
        "attendance": 0,
        "role": user.get("role") or "employee",
        "status": "active",
        "location": "",
        "last_login": "",
        "flagged": False,
        "created_at": now,
        "updated_at": now,
    }


def ensure_employee_for_user(client: Client, auth: AuthContext) -> dict[str, Any]:
    """
    Upsert-by-identity for self-service writes.

    Returns the caller's employee record, linking an email match to the
    user or creating a record with conservative defaults when none exists.
    ``employees.user_id`` is unique: if a concurrent request provisions
    first, the insert fails with a unique violation and the winner's row
    is read back once. An email already held by another user's record is
    never claimed; the new record is created without it.
    """
    user = credentials.get_user_by_id(client, auth.user_id)
    if user is None:
        raise NotFoundError("User", auth.user_id)

    employee = find_employee_for_user(client, user_id=user["id"], email=user.get("email"))
    if employee is not None:
        if employee.get("user_id") is None:
            linked = (
                client.table("employees")
                .update({"user_id": user["id"], "updated_at": iso_now()})
                .eq("id", employee["id"])
                .execute()
            )
            if linked.data:
                return linked.data[0]
        return employee

    row = _provision_row(user)
    try:
        result = client.table("employees").insert(row).execute()
    except APIError as exc:
        if exc.code != UNIQUE_VIOLATION:
            raise
        employee = find_employee_for_user(client, user_id=user["id"], email=user.get("email"))
        if employee is not None:
            logger.info("Employee provisioned concurrently; re-reading", extra={"user_id": user["id"]})
            return employee
        # The email is held by a record linked to another user.
        logger.info("Employee email already claimed; provisioning without it", extra={"user_id": user["id"]})
        result = client.table("employees").insert({**row, "email": None}).execute()

    logger.info("Employee record provisioned", extra={"user_id": user["id"]})
    return result.data[0]


def get_my_employee(client: Client, auth: AuthContext) -> dict[str, Any] | None:
    """Read-only lookup; never provisions."""
    user = credentials.get_user_by_id(client, auth.user_id)
    if user is None:
        return None
    return find_employee_for_user(client, user_id=user["id"], email=user.get("email"))


def update_my_profile(client: Client, auth: AuthContext, payload: ProfileUpdate) -> dict[str, Any]:
    employee = ensure_employee_for_user(client, auth)
    update = payload.model_dump(exclude_none=True)
    if not update:
        return employee
    update["updated_at"] = iso_now()
    try:
        result = client.table("employees").update(update).eq("id", employee["id"]).execute()
    except APIError as exc:
        _raise_if_duplicate_email(exc)
        raise
    if not result.data:
        raise NotFoundError("Employee", employee["id"])
    return result.data[0]


def export_employees_csv(client: Client) -> str:
    result = (
        client.table("employees")
        .select(", ".join(EXPORT_COLUMNS))
        .order("created_at", desc=True)
        .execute()
    )
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in result.data or []:
        writer.writerow({column: row.get(column) for column in EXPORT_COLUMNS})
    return buffer.getvalue()


def bulk_import_employees(client: Client, rows: list[dict[str, Any]]) -> dict[str, Any]:
    """Upsert each row by email. Bad rows are reported, not fatal."""
    imported = 0
    errors: list[dict[str, Any]] = []
    for index, raw in enumerate(rows):
        try:
            row = EmployeeImportRow.model_validate(raw)
        except PydanticValidationError as exc:
            errors.append({"row": index, "email": raw.get("email"), "error": str(exc.errors()[0]["msg"])})
            continue

        now = iso_now()
        record = {**row.model_dump(), "updated_at": now}
        existing = client.table("employees").select("id").eq("email", row.email).limit(1).execute()
        try:
            if existing.data:
                client.table("employees").update(record).eq("id", existing.data[0]["id"]).execute()
            else:
                record.update({"class_name": "Unassigned", "subjects": [], "last_login": "", "created_at": now})
                client.table("employees").insert(record).execute()
        except APIError as exc:
            errors.append({"row": index, "email": row.email, "error": exc.message or "Store error"})
            continue
        imported += 1

    logger.info("Bulk employee import finished", extra={"imported": imported, "failed": len(errors)})
    return {"imported": imported, "errors": errors}
