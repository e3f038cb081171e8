# employee_api/auth/__init__.py - Authentication module

from employee_api.auth.dependencies import (
    get_admin_auth,
    get_auth_context,
    get_current_auth,
    get_director_auth,
    get_manager_auth,
)
from employee_api.auth.models import AuthContext
from employee_api.auth.roles import Role

__all__ = [
    "get_admin_auth",
    "get_auth_context",
    "get_current_auth",
    "get_director_auth",
    "get_manager_auth",
    "AuthContext",
    "Role",
]
