from __future__ import annotations

import csv
from datetime import date
import io

import pytest
from postgrest.exceptions import APIError

from conftest import auth_for, make_employee, make_user
from employee_api.models.employee import EmployeeCreate, EmployeeFilter, EmployeeUpdate, ProfileUpdate
from employee_api.models.leave_request import LeaveRequestCreate
from employee_api.services import employees, leave_requests
from employee_api.utils.exceptions import ConflictError, NotFoundError, ValidationError
from employee_api.utils.pagination import PaginationParams


def _seed_ordered(db, count: int) -> list[dict]:
    return [
        make_employee(db, f"Person {index}", created_at=f"2026-01-{index + 1:02d}T00:00:00+00:00")
        for index in range(count)
    ]


def test_create_then_get_returns_same_fields(db):
    payload = EmployeeCreate(
        name="Grace Hopper",
        email="grace@example.com",
        age=45,
        class_name="Research",
        subjects=["COBOL", "Compilers"],
        attendance=98,
        location="Arlington",
    )

    created = employees.create_employee(db, payload)
    fetched = employees.get_employee(db, created["id"])

    assert fetched == created
    for field, value in payload.model_dump().items():
        assert fetched[field] == value


def test_get_missing_employee_raises_not_found(db):
    with pytest.raises(NotFoundError) as exc_info:
        employees.get_employee(db, 404)
    assert exc_info.value.detail == "Employee with ID '404' not found"


def test_consecutive_pages_are_disjoint_and_ordered(db):
    seeded = _seed_ordered(db, 7)
    newest_first = [row["id"] for row in reversed(seeded)]

    page_one = employees.list_employees(
        db, filters=EmployeeFilter(), pagination=PaginationParams(page=1, page_size=3)
    )
    page_two = employees.list_employees(
        db, filters=EmployeeFilter(), pagination=PaginationParams(page=2, page_size=3)
    )

    first_ids = [row["id"] for row in page_one.items]
    second_ids = [row["id"] for row in page_two.items]
    assert not set(first_ids) & set(second_ids)
    assert first_ids + second_ids == newest_first[:6]
    assert page_one.total == 7
    assert page_one.total_pages == 3


def test_page_past_the_end_is_empty(db):
    _seed_ordered(db, 2)

    page = employees.list_employees(db, filters=EmployeeFilter(), pagination=PaginationParams(page=5, page_size=10))

    assert page.items == []
    assert page.total == 2


def test_unknown_sort_key_falls_back_to_newest_first(db):
    seeded = _seed_ordered(db, 3)

    page = employees.list_employees(
        db,
        filters=EmployeeFilter(),
        pagination=PaginationParams(),
        sort_by="SHOE_SIZE",
        sort_order="ASC",
    )

    assert [row["id"] for row in page.items] == [row["id"] for row in reversed(seeded)]


def test_sort_by_name_ascending(db):
    make_employee(db, "Charlie")
    make_employee(db, "Alice")
    make_employee(db, "Bob")

    page = employees.list_employees(
        db, filters=EmployeeFilter(), pagination=PaginationParams(), sort_by="name", sort_order="asc"
    )

    assert [row["name"] for row in page.items] == ["Alice", "Bob", "Charlie"]


def test_filters_combine(db):
    make_employee(db, "Ada Lovelace", class_name="Research", status="active")
    make_employee(db, "Adam Smith", class_name="Finance", status="active")
    make_employee(db, "Adele Goldberg", class_name="Research", status="terminated")
    make_employee(db, "Adrian Kay", class_name="Research", role="manager")

    page = employees.list_employees(
        db,
        filters=EmployeeFilter(name_contains="ad", class_name="Research", status="active", role_not="manager"),
        pagination=PaginationParams(),
    )

    assert [row["name"] for row in page.items] == ["Ada Lovelace"]


def test_page_size_is_capped():
    with pytest.raises(ValueError):
        PaginationParams(page=1, page_size=101)
    with pytest.raises(ValueError):
        PaginationParams(page=0)


def test_update_requires_fields_and_existing_row(db):
    employee = make_employee(db, "Linus")

    with pytest.raises(ValidationError):
        employees.update_employee(db, employee["id"], EmployeeUpdate())
    with pytest.raises(NotFoundError):
        employees.update_employee(db, 999, EmployeeUpdate(age=40))

    updated = employees.update_employee(db, employee["id"], EmployeeUpdate(age=40, flagged=True))
    assert updated["age"] == 40
    assert updated["flagged"] is True
    assert updated["name"] == "Linus"


def test_terminate_and_delete(db):
    employee = make_employee(db, "Temp")

    assert employees.terminate_employee(db, employee["id"])["status"] == "terminated"
    assert employees.delete_employee(db, employee["id"]) is True
    with pytest.raises(NotFoundError):
        employees.delete_employee(db, employee["id"])
    with pytest.raises(NotFoundError):
        employees.terminate_employee(db, employee["id"])


def test_ensure_provisions_once_with_defaults(db):
    user = make_user(db, "new.hire@example.com")
    auth = auth_for(user)

    first = employees.ensure_employee_for_user(db, auth)
    second = employees.ensure_employee_for_user(db, auth)

    assert first["id"] == second["id"]
    assert len(db.rows("employees")) == 1
    assert first["user_id"] == user["id"]
    assert first["name"] == "new.hire"
    assert first["age"] == 0
    assert first["class_name"] == "Unassigned"
    assert first["status"] == "active"


def test_ensure_links_existing_record_by_email(db):
    user = make_user(db, "linked@example.com")
    existing = make_employee(db, "Linked", email="linked@example.com")

    employee = employees.ensure_employee_for_user(db, auth_for(user))

    assert employee["id"] == existing["id"]
    assert employee["user_id"] == user["id"]
    assert len(db.rows("employees")) == 1


def test_ensure_rereads_after_concurrent_provisioning(db, monkeypatch: pytest.MonkeyPatch):
    user = make_user(db, "racer@example.com")
    winner = make_employee(db, "Racer", email="racer@example.com", user_id=user["id"])
    real_find = employees.find_employee_for_user
    calls = []

    def _find_missing_first(client, *, user_id, email):
        calls.append(user_id)
        if len(calls) == 1:
            return None
        return real_find(client, user_id=user_id, email=email)

    monkeypatch.setattr(employees, "find_employee_for_user", _find_missing_first)

    employee = employees.ensure_employee_for_user(db, auth_for(user))

    assert employee["id"] == winner["id"]
    assert len(calls) == 2
    assert len(db.rows("employees")) == 1


def test_ensure_propagates_other_store_errors(db):
    user = make_user(db, "broken@example.com")
    db.fail_on("employees", "insert", APIError({"code": "42501", "message": "permission denied"}))

    with pytest.raises(APIError):
        employees.ensure_employee_for_user(db, auth_for(user))


def test_get_my_employee_never_provisions(db):
    user = make_user(db, "reader@example.com")

    assert employees.get_my_employee(db, auth_for(user)) is None
    assert db.rows("employees") == []


def test_update_my_profile_provisions_then_applies(db):
    user = make_user(db, "self@example.com")

    updated = employees.update_my_profile(db, auth_for(user), ProfileUpdate(name="Self Service", location="Lisbon"))

    assert updated["name"] == "Self Service"
    assert updated["location"] == "Lisbon"
    assert updated["user_id"] == user["id"]


def test_export_csv_has_header_and_rows(db):
    make_employee(db, "Export Me", age=33)

    rows = list(csv.DictReader(io.StringIO(employees.export_employees_csv(db))))

    assert len(rows) == 1
    assert list(rows[0]) == employees.EXPORT_COLUMNS
    assert rows[0]["name"] == "Export Me"
    assert rows[0]["age"] == "33"


def test_bulk_import_upserts_by_email_and_reports_bad_rows(db):
    existing = make_employee(db, "Old Name", email="known@example.com")

    result = employees.bulk_import_employees(
        db,
        [
            {"name": "New Name", "email": "known@example.com", "age": 41},
            {"name": "Fresh", "email": "fresh@example.com"},
            {"name": "", "email": "bad@example.com"},
        ],
    )

    assert result["imported"] == 2
    assert [error["row"] for error in result["errors"]] == [2]
    by_email = {row["email"]: row for row in db.rows("employees")}
    assert by_email["known@example.com"]["id"] == existing["id"]
    assert by_email["known@example.com"]["name"] == "New Name"
    assert by_email["fresh@example.com"]["class_name"] == "Unassigned"


def test_email_match_never_claims_another_users_record(db):
    alice = make_user(db, "alice@example.com")
    bob = make_user(db, "bob@example.com")
    alice_record = employees.ensure_employee_for_user(db, auth_for(alice))
    leave_requests.create_leave_request(
        db,
        auth_for(alice),
        LeaveRequestCreate(start_date=date(2026, 5, 4), end_date=date(2026, 5, 5), reason="private"),
    )
    employees.update_my_profile(db, auth_for(alice), ProfileUpdate(email="bob@example.com"))

    assert employees.get_my_employee(db, auth_for(bob)) is None
    assert leave_requests.my_leave_requests(db, auth_for(bob), pagination=PaginationParams()).items == []

    bob_record = employees.ensure_employee_for_user(db, auth_for(bob))

    assert bob_record["id"] != alice_record["id"]
    assert bob_record["user_id"] == bob["id"]
    assert bob_record["email"] is None
    assert employees.get_employee(db, alice_record["id"])["user_id"] == alice["id"]


def test_profile_email_taken_by_another_record_conflicts(db):
    make_employee(db, "Taken", email="taken@example.com")
    user = make_user(db, "mover@example.com")

    with pytest.raises(ConflictError) as exc_info:
        employees.update_my_profile(db, auth_for(user), ProfileUpdate(email="taken@example.com"))

    assert exc_info.value.status_code == 409


def test_admin_writes_with_duplicate_email_conflict(db):
    existing = make_employee(db, "Existing", email="dup@example.com")
    other = make_employee(db, "Other", email="other@example.com")

    with pytest.raises(ConflictError):
        employees.create_employee(
            db, EmployeeCreate(name="Copy", email="dup@example.com", age=20, class_name="Ops")
        )
    with pytest.raises(ConflictError):
        employees.update_employee(db, other["id"], EmployeeUpdate(email=existing["email"]))
    assert len(db.rows("employees")) == 2
