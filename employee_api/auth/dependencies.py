# employee_api/auth/dependencies.py - bearer token -> AuthContext, role guards

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from employee_api.auth.models import AuthContext
from employee_api.auth.roles import (
    require_admin_tier,
    require_authenticated,
    require_director,
    require_manager_or_above,
)
from employee_api.auth.tokens import JWTDecodeError, decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def build_auth_context(token: str | None) -> AuthContext | None:
    """
    Resolve identity from a raw access token.
    Never raises: absent, malformed, expired and wrongly typed tokens all
    degrade to ``None``; each operation decides whether that is acceptable.
    """
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except JWTDecodeError as exc:
        logger.debug("Access token rejected", extra={"reason": str(exc)})
        return None
    return AuthContext(user_id=payload.user_id, role=payload.role)


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthContext | None:
    return build_auth_context(credentials.credentials if credentials else None)


async def get_current_auth(
    auth: AuthContext | None = Depends(get_auth_context),
) -> AuthContext:
    return require_authenticated(auth)


async def get_director_auth(
    auth: AuthContext | None = Depends(get_auth_context),
) -> AuthContext:
    return require_director(auth)


async def get_manager_auth(
    auth: AuthContext | None = Depends(get_auth_context),
) -> AuthContext:
    return require_manager_or_above(auth)


async def get_admin_auth(
    auth: AuthContext | None = Depends(get_auth_context),
) -> AuthContext:
    return require_admin_tier(auth)
