# employee_api/auth/passwords.py - bcrypt digests

import bcrypt

from employee_api.config import get_settings

# bcrypt only reads the first 72 bytes of input.
_BCRYPT_MAX_BYTES = 72


def _encode(raw_password: str) -> bytes:
    return raw_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(raw_password: str) -> str:
    rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(_encode(raw_password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(raw_password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(raw_password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt digest.
        return False
