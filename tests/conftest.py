from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any, Callable

import pytest
from postgrest.exceptions import APIError

from employee_api.auth.models import AuthContext
from employee_api.auth.roles import Role
from employee_api.config import get_settings

UNIQUE_COLUMNS = {
    "users": ("email",),
    "refresh_tokens": ("token",),
    "employees": ("email", "user_id"),
}


def _matches_value(stored: Any, raw: str) -> bool:
    if raw in ("true", "false"):
        return stored is (raw == "true")
    if raw == "null":
        return stored is None
    return str(stored) == raw


def _parse_or(expression: str) -> Callable[[dict], bool]:
    clauses = []
    for part in expression.split(","):
        column, operator, raw = part.split(".", 2)
        if operator not in ("eq", "is"):
            raise AssertionError(f"Unsupported or_ operator: {operator}")
        clauses.append((column, raw))
    return lambda row: any(_matches_value(row.get(column), raw) for column, raw in clauses)


class _Query:
    def __init__(self, table: "_TableStub", action: str, payload: Any = None, count: str | None = None):
        self.table = table
        self.action = action
        self.payload = payload
        self.count = count
        self.columns = "*"
        self._filters: list[Callable[[dict], bool]] = []
        self._orders: list[tuple[str, bool]] = []
        self._range: tuple[int, int] | None = None
        self._limit: int | None = None

    def eq(self, column: str, value: Any):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def ilike(self, column: str, pattern: str):
        needle = pattern.strip("%").lower()
        self._filters.append(lambda row: needle in (row.get(column) or "").lower())
        return self

    def in_(self, column: str, values: list[Any]):
        allowed = list(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def or_(self, expression: str):
        self._filters.append(_parse_or(expression))
        return self

    def order(self, column: str, desc: bool = False):
        self._orders.append((column, desc))
        return self

    def range(self, start: int, end: int):
        self._range = (start, end)
        return self

    def limit(self, size: int):
        self._limit = size
        return self

    def _matching(self) -> list[dict]:
        return [row for row in self.table.rows if all(check(row) for check in self._filters)]

    def _project(self, row: dict) -> dict:
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        names = [name.strip() for name in self.columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    def execute(self):
        if self.action == "select":
            return self._execute_select()
        if self.action == "insert":
            return SimpleNamespace(data=self.table.insert_rows(self.payload), count=None)
        if self.action == "update":
            return SimpleNamespace(data=self.table.update_rows(self._matching(), self.payload), count=None)
        if self.action == "delete":
            return SimpleNamespace(data=self.table.delete_rows(self._matching()), count=None)
        raise AssertionError(f"Unexpected action: {self.action}")

    def _execute_select(self):
        rows = self._matching()
        # Stable sorts applied from the last key to the first give a multi-key order.
        for column, desc in reversed(self._orders):
            rows = sorted(
                rows,
                key=lambda row: (row.get(column) is None, row.get(column)),
                reverse=desc,
            )
        total = len(rows)
        if self._range is not None:
            start, end = self._range
            rows = rows[start : end + 1]
        if self._limit is not None:
            rows = rows[: self._limit]
        return SimpleNamespace(
            data=[self._project(row) for row in rows],
            count=total if self.count == "exact" else None,
        )


class _TableStub:
    def __init__(self, name: str, failures: dict[str, Exception]):
        self.name = name
        self.rows: list[dict] = []
        self._next_id = 1
        self._failures = failures

    def select(self, columns: str = "*", count: str | None = None):
        query = _Query(self, "select", count=count)
        query.columns = columns
        return query

    def insert(self, payload: dict | list[dict]):
        return _Query(self, "insert", payload=payload)

    def update(self, payload: dict):
        return _Query(self, "update", payload=payload)

    def delete(self):
        return _Query(self, "delete")

    def _check_failure(self, action: str) -> None:
        failure = self._failures.get(f"{self.name}.{action}")
        if failure is not None:
            raise failure

    def _check_unique(self, candidate: dict, ignore: dict | None = None) -> None:
        for column in UNIQUE_COLUMNS.get(self.name, ()):
            value = candidate.get(column)
            if value is None:
                continue
            for row in self.rows:
                if row is not ignore and row.get(column) == value:
                    raise APIError(
                        {
                            "code": "23505",
                            "message": f'duplicate key value violates unique constraint "{self.name}_{column}_key"',
                            "details": None,
                            "hint": None,
                        }
                    )

    def insert_rows(self, payload: dict | list[dict]) -> list[dict]:
        self._check_failure("insert")
        rows = payload if isinstance(payload, list) else [payload]
        inserted = []
        for raw in rows:
            row = copy.deepcopy(raw)
            row.setdefault("id", self._next_id)
            self._check_unique(row)
            self._next_id = max(self._next_id, row["id"]) + 1
            self.rows.append(row)
            inserted.append(copy.deepcopy(row))
        return inserted

    def update_rows(self, rows: list[dict], payload: dict) -> list[dict]:
        self._check_failure("update")
        updated = []
        for row in rows:
            self._check_unique({**row, **payload}, ignore=row)
            row.update(copy.deepcopy(payload))
            updated.append(copy.deepcopy(row))
        return updated

    def delete_rows(self, rows: list[dict]) -> list[dict]:
        self._check_failure("delete")
        removed = [copy.deepcopy(row) for row in rows]
        self.rows = [row for row in self.rows if row not in rows]
        return removed


class FakeSupabase:
    """In-memory stand-in for the Supabase client covering the query builder calls the services use."""

    def __init__(self):
        self.tables: dict[str, _TableStub] = {}
        self.failures: dict[str, Exception] = {}

    def table(self, name: str) -> _TableStub:
        if name not in self.tables:
            self.tables[name] = _TableStub(name, self.failures)
        return self.tables[name]

    def rows(self, name: str) -> list[dict]:
        return copy.deepcopy(self.table(name).rows)

    def fail_on(self, table: str, action: str, exc: Exception | None = None) -> None:
        self.failures[f"{table}.{action}"] = exc or RuntimeError(f"{table}.{action} unavailable")


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SUPABASE_URL", "http://localhost:54321")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-role-key")
    monkeypatch.setenv("JWT_ACCESS_SECRET", "test-access-secret")
    monkeypatch.setenv("JWT_REFRESH_SECRET", "test-refresh-secret")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("INSECURE_PASSWORD_RESET", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


def make_user(db: FakeSupabase, email: str, role: str = "employee", **fields: Any) -> dict:
    row = {
        "email": email,
        "password_hash": "",
        "role": role,
        "provider": "local",
        "provider_id": None,
        "is_active": True,
        "created_at": "2026-01-01T00:00:00+00:00",
        "updated_at": "2026-01-01T00:00:00+00:00",
        **fields,
    }
    return db.table("users").insert_rows(row)[0]


def make_employee(db: FakeSupabase, name: str, **fields: Any) -> dict:
    row = {
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "user_id": None,
        "age": 30,
        "class_name": "Engineering",
        "subjects": [],
        "attendance": 90,
        "role": "employee",
        "status": "active",
        "location": "Remote",
        "last_login": "",
        "flagged": False,
        "created_at": "2026-01-01T00:00:00+00:00",
        "updated_at": "2026-01-01T00:00:00+00:00",
        **fields,
    }
    return db.table("employees").insert_rows(row)[0]


def auth_for(user: dict) -> AuthContext:
    return AuthContext(user_id=user["id"], role=Role.parse(user["role"], default=Role.EMPLOYEE))
