# employee_api/routers/users.py - User account administration endpoints

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from supabase import Client

from employee_api.auth import (
    AuthContext,
    Role,
    get_current_auth,
    get_director_auth,
    get_manager_auth,
)
from employee_api.database import get_db
from employee_api.routers._responses import DataEnvelope, ErrorEnvelope
from employee_api.services import users

router = APIRouter()


class UserIdRequest(BaseModel):
    id: int


class UpdateRoleRequest(BaseModel):
    id: int
    role: Role

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, value):
        if isinstance(value, str):
            role = Role.parse(value)
            if role is None:
                raise ValueError(f"Unknown role: {value}")
            return role
        return value


@router.post("/me", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def me(
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=users.get_me(client, auth))


@router.post("/admin-users", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def admin_users(
    auth: AuthContext = Depends(get_manager_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=users.admin_users(client, auth))


@router.post("/all", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def all_users(
    _: AuthContext = Depends(get_director_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=users.all_users(client))


@router.post(
    "/update-role",
    response_model=DataEnvelope,
    responses={403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def update_user_role(
    payload: UpdateRoleRequest,
    _: AuthContext = Depends(get_director_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=users.update_user_role(client, user_id=payload.id, role=payload.role))


@router.post(
    "/delete",
    response_model=DataEnvelope,
    responses={400: {"model": ErrorEnvelope}, 403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def delete_user(
    payload: UserIdRequest,
    auth: AuthContext = Depends(get_director_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=users.delete_user(client, auth, payload.id))
