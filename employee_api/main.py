# employee_api/main.py - FastAPI app entry point

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from employee_api.config import get_settings
from employee_api.database import create_supabase_client
from employee_api.routers import (
    access_logs,
    auth,
    client_errors,
    employees,
    health,
    leave_requests,
    messages,
    notes,
    notifications,
    users,
)
from employee_api.routers._responses import error_response

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.db = create_supabase_client(settings)
    logger.info("Store handle ready", extra={"supabase_url": settings.supabase_url})
    yield
    app.state.db = None


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="employee-poc-api",
        description="Employee records, leave and messaging with role-scoped access",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(_: Request, exc: HTTPException):
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return error_response("Internal server error", 500)

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(employees.router, prefix="/api/employees", tags=["employees"])
    app.include_router(
        leave_requests.router,
        prefix="/api/leave-requests",
        tags=["leave-requests"],
    )
    app.include_router(notes.router, prefix="/api/notes", tags=["notes"])
    app.include_router(messages.router, prefix="/api/messages", tags=["messages"])
    app.include_router(
        notifications.router,
        prefix="/api/notifications",
        tags=["notifications"],
    )
    app.include_router(access_logs.router, prefix="/api/access-logs", tags=["access-logs"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(
        client_errors.router,
        prefix="/api/client-errors",
        tags=["client-errors"],
    )
    return app
