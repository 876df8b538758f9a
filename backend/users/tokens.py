"""Password hashing, bearer session tokens and invite tokens."""

from __future__ import annotations

import secrets
from typing import Any, Optional

import jwt
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.utils import timezone

from users.constants import INVITE_TOKEN_BYTES, SESSION_TOKEN_TTL

__all__ = [
    "InvalidToken",
    "hash_password",
    "verify_password",
    "issue_session_token",
    "parse_session_token",
    "generate_invite_token",
]


class InvalidToken(Exception):
    """Session token with a bad signature, bad shape or past its expiry."""


def hash_password(plaintext: str) -> str:
    return make_password(plaintext)


def verify_password(plaintext: str, hashed: Optional[str]) -> bool:
    if plaintext is None or not hashed:
        return False
    return check_password(plaintext, hashed)


def issue_session_token(user: Any, now=None) -> str:
    issued_at = now or timezone.now()
    payload = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "iat": issued_at,
        "exp": issued_at + SESSION_TOKEN_TTL,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def parse_session_token(token: str) -> dict:
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidToken(str(exc)) from exc
    if not isinstance(claims.get("id"), int):
        raise InvalidToken("Token payload is malformed")
    return claims


def generate_invite_token() -> str:
    return secrets.token_hex(INVITE_TOKEN_BYTES)
