from __future__ import annotations

from typing import Any

from supabase import Client

from employee_api.auth.models import AuthContext
from employee_api.models.message import ConversationSummary, MessageCreate
from employee_api.services import credentials
from employee_api.services.notifications import notify_user
from employee_api.utils.exceptions import ForbiddenError, NotFoundError, ValidationError
from employee_api.utils.time import iso_now


def conversation_id_for(user_a: int, user_b: int) -> str:
    """Stable id for the pair regardless of who writes first."""
    low, high = sorted((user_a, user_b))
    return f"{low}-{high}"


def _participants(conversation_id: str) -> tuple[int, int] | None:
    parts = conversation_id.split("-")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def send_message(client: Client, auth: AuthContext, payload: MessageCreate) -> dict[str, Any]:
    if payload.recipient_id == auth.user_id:
        raise ValidationError("Cannot send a message to yourself")

    sender = credentials.get_user_by_id(client, auth.user_id)
    if sender is None:
        raise NotFoundError("User", auth.user_id)
    recipient = credentials.get_user_by_id(client, payload.recipient_id)
    if recipient is None:
        raise NotFoundError("User", payload.recipient_id)

    sender = credentials.public_user(sender)
    recipient = credentials.public_user(recipient)
    now = iso_now()
    row = {
        "conversation_id": conversation_id_for(sender["id"], recipient["id"]),
        "sender_id": sender["id"],
        "sender_email": sender["email"],
        "sender_role": sender["role"],
        "recipient_id": recipient["id"],
        "recipient_email": recipient["email"],
        "recipient_role": recipient["role"],
        "subject": payload.subject,
        "message": payload.message,
        "message_type": "direct",
        "priority": payload.priority,
        "reply_to_id": payload.reply_to_id,
        "is_read": False,
        "read_at": None,
        "created_at": now,
        "updated_at": now,
    }
    result = client.table("messages").insert(row).execute()
    message = result.data[0]

    notify_user(
        client,
        user_id=recipient["id"],
        title=f"New message from {sender['email']}",
        message=payload.subject or payload.message[:120],
        type="MESSAGE",
        link_to="/messages",
    )
    return message


def my_conversations(client: Client, auth: AuthContext) -> list[dict[str, Any]]:
    result = (
        client.table("messages")
        .select("*")
        .or_(f"sender_id.eq.{auth.user_id},recipient_id.eq.{auth.user_id}")
        .order("created_at", desc=True)
        .order("id", desc=True)
        .execute()
    )

    summaries: dict[str, ConversationSummary] = {}
    for row in result.data or []:
        conversation_id = row["conversation_id"]
        incoming = row.get("recipient_id") == auth.user_id
        summary = summaries.get(conversation_id)
        if summary is None:
            # Rows arrive newest first, so the first one seen is the latest.
            summary = ConversationSummary(
                conversation_id=conversation_id,
                participant=row["sender_email"] if incoming else (row.get("recipient_email") or ""),
                participant_id=row["sender_id"] if incoming else row.get("recipient_id"),
                participant_role=row["sender_role"] if incoming else (row.get("recipient_role") or ""),
                last_message=row["message"],
                last_message_time=row["created_at"],
                unread_count=0,
            )
            summaries[conversation_id] = summary
        if incoming and not row.get("is_read"):
            summary.unread_count += 1

    return [summary.model_dump() for summary in summaries.values()]


def list_messages(client: Client, auth: AuthContext, conversation_id: str) -> list[dict[str, Any]]:
    participants = _participants(conversation_id)
    if participants is None or auth.user_id not in participants:
        raise ForbiddenError("Not a participant in this conversation")
    result = (
        client.table("messages")
        .select("*")
        .eq("conversation_id", conversation_id)
        .order("created_at", desc=False)
        .order("id", desc=False)
        .execute()
    )
    return result.data or []


def mark_conversation_as_read(client: Client, auth: AuthContext, conversation_id: str) -> int:
    now = iso_now()
    result = (
        client.table("messages")
        .update({"is_read": True, "read_at": now, "updated_at": now})
        .eq("conversation_id", conversation_id)
        .eq("recipient_id", auth.user_id)
        .eq("is_read", False)
        .execute()
    )
    return len(result.data or [])


def message_stats(client: Client, auth: AuthContext) -> dict[str, int]:
    result = (
        client.table("messages")
        .select("id", count="exact")
        .eq("recipient_id", auth.user_id)
        .eq("is_read", False)
        .execute()
    )
    unread = result.count if result.count is not None else len(result.data or [])
    return {"unread": unread}
