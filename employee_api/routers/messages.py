# employee_api/routers/messages.py - Direct message endpoints

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from supabase import Client

from employee_api.auth import AuthContext, get_current_auth
from employee_api.database import get_db
from employee_api.models.message import MessageCreate
from employee_api.routers._responses import DataEnvelope, ErrorEnvelope
from employee_api.services import messages

router = APIRouter()


class ConversationRequest(BaseModel):
    conversation_id: str = Field(min_length=1)


@router.post(
    "/send",
    response_model=DataEnvelope,
    responses={400: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def send_message(
    payload: MessageCreate,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=messages.send_message(client, auth, payload))


@router.post("/conversations", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def my_conversations(
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=messages.my_conversations(client, auth))


@router.post("/list", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def list_messages(
    payload: ConversationRequest,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=messages.list_messages(client, auth, payload.conversation_id))


@router.post("/read", response_model=DataEnvelope, responses={403: {"model": ErrorEnvelope}})
async def mark_conversation_as_read(
    payload: ConversationRequest,
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    updated = messages.mark_conversation_as_read(client, auth, payload.conversation_id)
    return DataEnvelope(data={"updated": updated})


@router.post("/stats", response_model=DataEnvelope, responses={401: {"model": ErrorEnvelope}})
async def message_stats(
    auth: AuthContext = Depends(get_current_auth),
    client: Client = Depends(get_db),
) -> DataEnvelope:
    return DataEnvelope(data=messages.message_stats(client, auth))
