#!/usr/bin/env python3
"""
Seed the first director account, or promote an existing user to director.

Required environment variables:
- SUPABASE_URL
- SUPABASE_SERVICE_KEY
- DIRECTOR_EMAIL
- DIRECTOR_PASSWORD
"""

import os
import sys

from employee_api.auth.passwords import hash_password
from employee_api.auth.roles import Role
from employee_api.config import get_settings
from employee_api.database import create_supabase_client
from employee_api.services import credentials


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def main() -> int:
    email = _required_env("DIRECTOR_EMAIL").strip()
    password = _required_env("DIRECTOR_PASSWORD")

    client = create_supabase_client(get_settings())

    existing = credentials.get_user_by_email(client, email)
    if existing:
        if Role.parse(existing.get("role")) is Role.DIRECTOR:
            print(f"director already exists for {email}")
            return 0
        credentials.update_user(client, existing["id"], {"role": Role.DIRECTOR.value, "is_active": True})
        print(f"promoted to director: {email}")
        return 0

    credentials.create_user(
        client,
        email=email,
        password_hash=hash_password(password),
        role=Role.DIRECTOR,
    )
    print(f"seeded director: {email}")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:  # noqa: BLE001
        print(f"seed_director failed: {exc}", file=sys.stderr)
        raise SystemExit(1)
