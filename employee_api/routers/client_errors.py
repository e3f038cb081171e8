# employee_api/routers/client_errors.py - Browser error reports

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from employee_api.auth import AuthContext, get_auth_context

logger = logging.getLogger(__name__)

router = APIRouter()


class ClientErrorReport(BaseModel):
    message: str = "Unknown client error"
    stack: str | None = None
    source: str | None = None
    metadata: dict[str, Any] | None = None
    url: str | None = None
    user_agent: str | None = None
    timestamp: str | None = None


@router.post("")
async def report_client_error(
    payload: ClientErrorReport,
    auth: AuthContext | None = Depends(get_auth_context),
) -> dict[str, bool]:
    """Log a frontend error report. Always answers ok."""
    logger.warning(
        "Client error reported",
        extra={
            "source": payload.source or "unknown",
            "client_message": payload.message,
            "url": payload.url,
            "user_id": auth.user_id if auth else None,
            "client_timestamp": payload.timestamp,
        },
    )
    return {"ok": True}
