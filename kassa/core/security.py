"""
kassa/core/security.py

Purpose: Credentials and bearer tokens

- bcrypt password hashing
- Signed access tokens (JWT) carrying the user id
"""

from datetime import datetime, timedelta
from typing import Optional

import bcrypt
import jwt

from kassa.core.config import settings
from kassa.core.exceptions import AuthenticationError


def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    return bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash stored in the database
        return False


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """
    Issues a signed bearer token for the user.

    Args:
        user_id: Subject of the token
        expires_minutes: Lifetime override, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded token string
    """
    now = datetime.utcnow()
    lifetime = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Validates a bearer token and returns its user id.

    Raises:
        AuthenticationError: If the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Sesi Anda telah berakhir. Silakan masuk kembali.")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Token tidak valid.")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token tidak valid.")
    return user_id
