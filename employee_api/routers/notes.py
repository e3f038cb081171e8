# employee_api/routers/notes.py - Note endpoints

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from supabase import Client

from employee_api.auth import AuthContext, get_admin_auth, get_current_auth
from employee_api.database import get_db
from employee_api.models.note import NoteCreate
from employee_api.routers._responses import DataEnvelope, ErrorEnvelope
from employee_api.services import notes
from employee_api.utils.pagination import PaginationParams

router = APIRouter()


class NoteListRequest(BaseModel):
    employee_id: int | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=25, ge=1, le=100)


class MyNotesRequest(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=25, ge=1, le=100)


class NoteReadRequest(BaseModel):
    id: int


@router.post(
    "/send",
    response_model=DataEnvelope,
    responses={403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def send_note(
    payload: NoteCreate,
    auth: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=notes.send_note(client, auth, payload))


@router.post("/list", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def list_notes(
    payload: NoteListRequest,
    _: AuthContext = Depends(get_admin_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    page = notes.list_notes(
        client,
        pagination=PaginationParams(page=payload.page, page_size=payload.page_size),
        employee_id=payload.employee_id,
    )
    return DataEnvelope(data=page.model_dump())


@router.post("/mine", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def my_notes(
    payload: MyNotesRequest = MyNotesRequest(),
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    page = notes.my_notes(
        client,
        auth,
        pagination=PaginationParams(page=payload.page, page_size=payload.page_size),
    )
    return DataEnvelope(data=page.model_dump())


@router.post(
    "/read",
    response_model=DataEnvelope,
    responses={403: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def mark_note_as_read(
    payload: NoteReadRequest,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=notes.mark_note_as_read(client, auth, payload.id))
