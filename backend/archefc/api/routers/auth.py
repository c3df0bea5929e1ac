"""Login and registration endpoints"""
from fastapi import APIRouter, Depends, status

from archefc.api.deps import get_auth_service, get_current_user
from archefc.models import User
from archefc.schemas import AuthResponse, LoginRequest, RegisterRequest, UserOut
from archefc.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=AuthResponse)
def login(credentials: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    return auth_service.login(credentials)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Self-registration always creates a USER account."""
    return auth_service.register(data)


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user
