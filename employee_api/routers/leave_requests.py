# employee_api/routers/leave_requests.py - Leave request endpoints

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from supabase import Client

from employee_api.auth import AuthContext, get_admin_auth, get_current_auth
from employee_api.database import get_db
from employee_api.models.leave_request import LeaveRequestCreate, LeaveStatus
from employee_api.routers._responses import DataEnvelope, ErrorEnvelope
from employee_api.services import leave_requests
from employee_api.utils.pagination import PaginationParams

router = APIRouter()


class LeaveRequestListRequest(BaseModel):
    status: LeaveStatus | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=25, ge=1, le=100)


class MyLeaveRequestsRequest(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=25, ge=1, le=100)


class LeaveRequestStatusRequest(BaseModel):
    id: int
    status: LeaveStatus
    admin_note: str | None = None


@router.post("/create", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def create_leave_request(
    payload: LeaveRequestCreate,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=leave_requests.create_leave_request(client, auth, payload))


@router.post("/list", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def list_leave_requests(
    payload: LeaveRequestListRequest,
    _: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    page = leave_requests.list_leave_requests(
        client,
        status=payload.status,
        pagination=PaginationParams(page=payload.page, page_size=payload.page_size),
    )
    return DataEnvelope(data=page.model_dump())


@router.post("/mine", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def my_leave_requests(
    payload: MyLeaveRequestsRequest = MyLeaveRequestsRequest(),
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    page = leave_requests.my_leave_requests(
        client,
        auth,
        pagination=PaginationParams(page=payload.page, page_size=payload.page_size),
    )
    return DataEnvelope(data=page.model_dump())


@router.post(
    "/status",
    response_model=DataEnvelope,
    responses={403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def update_leave_request_status(
    payload: LeaveRequestStatusRequest,
    auth: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    result = leave_requests.update_leave_request_status(
        client,
        auth,
        leave_request_id=payload.id,
        status=payload.status,
        admin_note=payload.admin_note,
    )
    return DataEnvelope(data=result)
