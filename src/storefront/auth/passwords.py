"""
storefront.auth.passwords

Password hashing via passlib.
"""

from __future__ import annotations

from passlib.context import CryptContext

# pbkdf2_sha256 is pure-python in passlib, no native bcrypt backend required.
_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    # Malformed or empty stored hashes count as a mismatch.
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        return False
