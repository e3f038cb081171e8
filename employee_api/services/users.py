from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from employee_api.auth.models import AuthContext
from employee_api.auth.roles import Role
from employee_api.services import credentials
from employee_api.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def get_me(client: Client, auth: AuthContext) -> dict[str, Any]:
    user = credentials.get_user_by_id(client, auth.user_id)
    if user is None:
        raise NotFoundError("User", auth.user_id)
    return credentials.public_user(user)


def admin_users(client: Client, auth: AuthContext) -> list[dict[str, Any]]:
    """Directors see everyone; managers see managers and employees only."""
    if auth.is_director:
        return credentials.list_users(client)
    return credentials.list_users(client, roles=[Role.MANAGER, Role.EMPLOYEE])


def all_users(client: Client) -> list[dict[str, Any]]:
    return credentials.list_users(client)


def update_user_role(client: Client, *, user_id: int, role: Role) -> dict[str, Any]:
    """
    Takes effect for new access tokens; outstanding ones keep their
    snapshotted role until they expire or are refreshed.
    """
    user = credentials.update_user(client, user_id, {"role": role.value})
    if user is None:
        raise NotFoundError("User", user_id)
    logger.info("User role changed", extra={"user_id": user_id, "role": role.value})
    return credentials.public_user(user)


def delete_user(client: Client, auth: AuthContext, user_id: int) -> bool:
    if user_id == auth.user_id:
        raise ValidationError("Directors cannot delete their own account")
    if not credentials.delete_user(client, user_id):
        raise NotFoundError("User", user_id)
    logger.info("User deleted", extra={"user_id": user_id, "deleted_by": auth.user_id})
    return True
