# employee_api/database.py - Supabase store handle

from fastapi import Request
from supabase import Client, create_client

from employee_api.config import Settings

UNIQUE_VIOLATION = "23505"


def create_supabase_client(settings: Settings) -> Client:
    """Build the store handle. Called once by the application lifespan."""
    return create_client(settings.supabase_url, settings.supabase_service_key)


def get_db(request: Request) -> Client:
    """FastAPI dependency returning the handle owned by the running app."""
    client = getattr(request.app.state, "db", None)
    if client is None:
        raise RuntimeError("Store handle is not initialised; is the app lifespan running?")
    return client
