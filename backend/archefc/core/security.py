"""
Password hashing and bearer token helpers.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from archefc.core.config import settings
from archefc.exceptions import AuthenticationError

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    user_id: int,
    role: str,
    secret_key: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a signed token identifying a user and their role.

    Args:
        user_id: Database id of the user
        role: ADMIN, STAFF or USER
        secret_key: Signing key (default: settings.SECRET_KEY)
        expires_delta: Lifetime (default: settings.ACCESS_TOKEN_EXPIRE_HOURS)

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    expires_delta = expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret_key or settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str, secret_key: Optional[str] = None) -> Dict[str, Any]:
    """
    Verify a token's signature and expiry.

    Raises:
        AuthenticationError: If the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(token, secret_key or settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    if "sub" not in payload:
        raise AuthenticationError("Invalid token")
    return payload
