# employee_api/auth/models.py - AuthContext, token payloads

from pydantic import BaseModel

from employee_api.auth.roles import Role


class AccessTokenPayload(BaseModel):
    sub: str
    user_id: int
    role: Role
    type: str = "access"
    exp: int | None = None
    iat: int | None = None


class RefreshTokenPayload(BaseModel):
    sub: str
    user_id: int
    type: str = "refresh"
    jti: str | None = None
    exp: int | None = None
    iat: int | None = None


class AuthContext(BaseModel):
    """Request-scoped identity decoded from a verified access token."""

    user_id: int
    role: Role

    @property
    def is_director(self) -> bool:
        return self.role is Role.DIRECTOR

    @property
    def is_manager_or_above(self) -> bool:
        return self.role.at_least(Role.MANAGER)
