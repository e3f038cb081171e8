# employee_api/routers/auth.py - Authentication endpoints

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from supabase import Client

from employee_api.auth import AuthContext, get_current_auth
from employee_api.database import get_db
from employee_api.routers._responses import DataEnvelope, ErrorEnvelope
from employee_api.services import auth_service, users

router = APIRouter()


class RegisterRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class FederatedLoginRequest(BaseModel):
    email: str | None = None
    name: str | None = None


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class LogoutRequest(BaseModel):
    refresh_token: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    email: str = Field(min_length=1)
    new_password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=1)


class SessionResponse(BaseModel):
    user: dict
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@router.post(
    "/register",
    response_model=DataEnvelope,
    responses={400: {"model": ErrorEnvelope}, 409: {"model": ErrorEnvelope}},
)
async def register(payload: RegisterRequest, client: Client = Depends(get_db)) -> DataEnvelope:
    """Create a local account and start a session."""
    session = auth_service.register(
        client,
        email=payload.email,
        password=payload.password,
        requested_role=payload.role,
    )
    return DataEnvelope(data=SessionResponse(**session).model_dump())


@router.post("/login", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def login(payload: LoginRequest, client: Client = Depends(get_db)) -> DataEnvelope:
    """Email/password login."""
    session = auth_service.login(client, email=payload.email, password=payload.password)
    return DataEnvelope(data=SessionResponse(**session).model_dump())


@router.post("/google", response_model=DataEnvelope, responses={400: {"model": ErrorEnvelope}})
async def federated_login(
    payload: FederatedLoginRequest,
    client: Client = Depends(get_db),
) -> DataEnvelope:
    """Login with an identity asserted by the external provider."""
    session = auth_service.federated_login(client, email=payload.email, display_name=payload.name)
    return DataEnvelope(data=SessionResponse(**session).model_dump())


@router.post("/refresh", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def refresh(payload: RefreshRequest, client: Client = Depends(get_db)) -> DataEnvelope:
    return DataEnvelope(data=auth_service.refresh(client, refresh_token=payload.refresh_token))


@router.post("/logout", response_model=DataEnvelope)
async def logout(payload: LogoutRequest, client: Client = Depends(get_db)) -> DataEnvelope:
    return DataEnvelope(data=auth_service.logout(client, refresh_token=payload.refresh_token))


@router.post("/forgot-password", response_model=DataEnvelope)
async def forgot_password(payload: ForgotPasswordRequest) -> DataEnvelope:
    return DataEnvelope(data=auth_service.forgot_password(email=payload.email))


@router.post("/reset-password", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def reset_password(
    payload: ResetPasswordRequest,
    client: Client = Depends(get_db),
) -> DataEnvelope:
    result = auth_service.reset_password(
        client,
        email=payload.email,
        new_password=payload.new_password,
    )
    return DataEnvelope(data=result)


@router.post("/change-password", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def change_password(
    payload: ChangePasswordRequest,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    result = auth_service.change_password(
        client,
        user_id=auth.user_id,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return DataEnvelope(data=result)


@router.post("/me", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def me(
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    """Protected endpoint used for auth verification."""
    return DataEnvelope(data=users.get_me(client, auth))
