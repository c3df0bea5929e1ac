from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from archefc.database import get_db
from archefc.exceptions import AuthenticationError, AuthorizationError
from archefc.models import User
from archefc.services.auth_service import AuthService
from archefc.services.fff import FFFAPIService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_fff_service(request: Request) -> FFFAPIService:
    """FFF service built once at startup and kept on the application state."""
    return request.app.state.fff_service


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Resolve the caller from the `Authorization: Bearer <token>` header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing token")
    return auth_service.verify_token(credentials.credentials)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != "ADMIN":
        raise AuthorizationError("Admin role required")
    return user
