from __future__ import annotations

import pytest

from conftest import auth_for, make_user
from employee_api.auth.roles import Role
from employee_api.services import users
from employee_api.utils.exceptions import NotFoundError, ValidationError


def test_get_me_hides_password_hash(db):
    user = make_user(db, "me@example.com", password_hash="$2b$04$digest")

    me = users.get_me(db, auth_for(user))

    assert me["email"] == "me@example.com"
    assert "password_hash" not in me


def test_admin_users_scope_depends_on_caller(db):
    director = make_user(db, "d@example.com", role="director")
    manager = make_user(db, "m@example.com", role="manager")
    make_user(db, "legacy@example.com", role="admin")
    make_user(db, "e@example.com")

    seen_by_director = {row["email"] for row in users.admin_users(db, auth_for(director))}
    seen_by_manager = users.admin_users(db, auth_for(manager))

    assert len(seen_by_director) == 4
    assert {row["email"] for row in seen_by_manager} == {"m@example.com", "legacy@example.com", "e@example.com"}
    assert {row["role"] for row in seen_by_manager} == {"manager", "employee"}


def test_update_user_role(db):
    target = make_user(db, "t@example.com")

    updated = users.update_user_role(db, user_id=target["id"], role=Role.MANAGER)

    assert updated["role"] == "manager"
    with pytest.raises(NotFoundError):
        users.update_user_role(db, user_id=999, role=Role.MANAGER)


def test_director_cannot_delete_self(db):
    director = make_user(db, "d@example.com", role="director")

    with pytest.raises(ValidationError):
        users.delete_user(db, auth_for(director), director["id"])
    assert len(db.rows("users")) == 1


def test_delete_user(db):
    director = make_user(db, "d@example.com", role="director")
    target = make_user(db, "t@example.com")

    assert users.delete_user(db, auth_for(director), target["id"]) is True
    assert [row["email"] for row in users.all_users(db)] == ["d@example.com"]
    with pytest.raises(NotFoundError):
        users.delete_user(db, auth_for(director), target["id"])
