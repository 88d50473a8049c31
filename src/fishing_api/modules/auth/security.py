"""Password hashing and JWT helpers for the auth module.

Access and refresh tokens share one encoder and differ only by the ``type``
claim; refresh tokens are additionally stored server side as a SHA-256 hash.
"""

from __future__ import annotations

import hashlib
from datetime import timedelta
from time import time
from uuid import UUID, uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from fishing_api.common.errors import InvalidToken

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

TOKEN_KIND_ACCESS = "access"
TOKEN_KIND_REFRESH = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    # Accounts created without a password can never log in.
    return bool(password_hash) and pwd_context.verify(password, password_hash)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_token(
    *,
    user_id: UUID,
    kind: str,
    secret: str,
    algorithm: str,
    ttl: timedelta,
) -> str:
    issued_at = int(time())
    claims = {
        "sub": str(user_id),
        "type": kind,
        "jti": str(uuid4()),
        "iat": issued_at,
        "exp": issued_at + int(ttl.total_seconds()),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def read_token(token: str, *, kind: str, secret: str, algorithm: str) -> UUID:
    """Decode ``token`` and return its subject, checking the token kind."""
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as exc:
        raise InvalidToken("Invalid or expired token.") from exc
    if claims.get("type") != kind:
        raise InvalidToken(f"Expected a {kind} token.")
    try:
        return UUID(str(claims.get("sub")))
    except ValueError as exc:
        raise InvalidToken("Invalid token subject.") from exc
