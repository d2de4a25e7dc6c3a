"""Salted scrypt password hashing.

Stored form is ``<hex key>.<salt>`` where the salt is 32 hex characters used
as-is (its ASCII bytes) for key derivation. Derivation runs in a worker thread
so the event loop keeps serving other requests.
"""

import asyncio
import hashlib
import hmac
import secrets

SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
KEY_LENGTH = 64
SALT_BYTES = 16


def _derive_key(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("ascii"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
    )


async def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    salt = secrets.token_hex(SALT_BYTES)
    key = await asyncio.to_thread(_derive_key, password, salt)
    return f"{key.hex()}.{salt}"


async def verify_password(password: str, stored: str | None) -> bool:
    """Check a password against a stored hash in constant time.

    Malformed or missing stored values never verify.
    """
    if not stored:
        return False
    parts = stored.split(".")
    if len(parts) != 2 or not parts[1]:
        return False
    hashed, salt = parts
    try:
        expected = bytes.fromhex(hashed)
        supplied = await asyncio.to_thread(_derive_key, password, salt)
    except ValueError:
        return False
    if len(expected) != KEY_LENGTH:
        return False
    return hmac.compare_digest(expected, supplied)
