"""
Authentication Service
Login, registration and token verification for club accounts.
"""
from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from archefc.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from archefc.exceptions import AuthenticationError, ConflictError
from archefc.models import User
from archefc.schemas import AuthResponse, LoginRequest, RegisterRequest, UserOut
from archefc.services.repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Authenticates users and issues bearer tokens."""

    def __init__(self, db: Session) -> None:
        self.users = UserRepository(db)

    def login(self, credentials: LoginRequest) -> AuthResponse:
        """
        Check a username/password pair.

        Unknown users and wrong passwords get the same error so that
        usernames cannot be probed.
        """
        user = self.users.get_by_username(credentials.username)
        if user is None or not verify_password(credentials.password, user.password):
            logger.info(f"Failed login for {credentials.username}")
            raise AuthenticationError("Invalid username or password")

        logger.info(f"User {user.username} logged in")
        return self._auth_response(user)

    def register(self, data: RegisterRequest, role: str = "USER") -> AuthResponse:
        """Create an account and log it in."""
        if self.users.get_by_username(data.username) is not None:
            raise ConflictError(
                "A user with this username already exists",
                details={"username": data.username},
            )

        try:
            user = self.users.create({
                "username": data.username,
                "email": data.email,
                "password": hash_password(data.password),
                "role": role,
                "first_name": data.first_name,
                "last_name": data.last_name,
            })
        except IntegrityError:
            raise ConflictError(
                "A user with this username already exists",
                details={"username": data.username},
            )

        logger.info(f"Registered user {user.username} ({user.role})")
        return self._auth_response(user)

    def verify_token(self, token: str) -> User:
        """
        Resolve the user a bearer token belongs to.

        Raises:
            AuthenticationError: If the token is invalid or the user no longer exists
        """
        payload = decode_access_token(token)
        user: Optional[User] = None
        try:
            user = self.users.get(int(payload["sub"]))
        except (TypeError, ValueError):
            pass
        if user is None:
            raise AuthenticationError("User not found")
        return user

    @staticmethod
    def _auth_response(user: User) -> AuthResponse:
        return AuthResponse(
            token=create_access_token(user.id, user.role),
            user=UserOut.model_validate(user),
        )
