# employee_api/routers/notifications.py - Notification endpoints

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from supabase import Client

from employee_api.auth import AuthContext, get_current_auth, get_manager_auth
from employee_api.database import get_db
from employee_api.models.notification import NotificationCreate, NotificationType
from employee_api.routers._responses import DataEnvelope, ErrorEnvelope
from employee_api.services import notifications
from employee_api.utils.pagination import PaginationParams

router = APIRouter()


class NotificationListRequest(BaseModel):
    type: NotificationType | None = None
    is_read: bool | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class NotificationReadRequest(BaseModel):
    id: int


@router.post("/list", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def list_notifications(
    payload: NotificationListRequest,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    page = notifications.list_notifications(
        client,
        user_id=auth.user_id,
        type=payload.type,
        is_read=payload.is_read,
        pagination=PaginationParams(page=payload.page, page_size=payload.page_size),
    )
    return DataEnvelope(data=page.model_dump())


@router.post("/read", response_model=DataEnvelope, responses={404: {"model": ErrorEnvelope}})
async def mark_notification_as_read(
    payload: NotificationReadRequest,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    result = notifications.mark_notification_as_read(
        client,
        user_id=auth.user_id,
        notification_id=payload.id,
    )
    return DataEnvelope(data=result)


@router.post("/read-all", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def mark_all_notifications_as_read(
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    updated = notifications.mark_all_notifications_as_read(client, user_id=auth.user_id)
    return DataEnvelope(data={"updated": updated})


@router.post(
    "/create",
    response_model=DataEnvelope,
    responses={403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def create_notification(
    payload: NotificationCreate,
    _: AuthContext = Depends(get_manager_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=notifications.create_notification(client, payload))
