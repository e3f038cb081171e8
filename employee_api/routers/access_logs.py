# employee_api/routers/access_logs.py - Access audit endpoints

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from supabase import Client

from employee_api.auth import AuthContext, get_admin_auth, get_current_auth
from employee_api.database import get_db
from employee_api.routers._responses import DataEnvelope, ErrorEnvelope
from employee_api.services import access_logs
from employee_api.utils.pagination import PaginationParams

router = APIRouter()


class AccessLogCreateRequest(BaseModel):
    action: str = Field(min_length=1)
    details: str | None = None


class AccessLogListRequest(BaseModel):
    user_id: int | None = None
    action: str | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=100)


@router.post("/log", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def log_access(
    payload: AccessLogCreateRequest,
    request: Request,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    entry = access_logs.log_access(
        client,
        auth,
        action=payload.action,
        details=payload.details,
        ip_address=request.client.host if request.client else None,
    )
    return DataEnvelope(data=entry)


@router.post("/list", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def list_access_logs(
    payload: AccessLogListRequest,
    _: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    page = access_logs.list_access_logs(
        client,
        pagination=PaginationParams(page=payload.page, page_size=payload.page_size),
        user_id=payload.user_id,
        action=payload.action,
    )
    return DataEnvelope(data=page.model_dump())
