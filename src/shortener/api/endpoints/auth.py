from fastapi import APIRouter, Depends, status

from src.shortener.api.deps import get_auth_service
from src.shortener.schemas.user import AuthResponse, LoginRequest, RegisterRequest
from src.shortener.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(credentials: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new user.

    Returns the created user and an access token. Responds 409 if the email
    is already registered.
    """
    return auth_service.register(credentials.email, credentials.password)


@router.post("/login", response_model=AuthResponse)
def login(credentials: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Login with email and password.

    Returns a JWT access token for use in authenticating subsequent requests.
    """
    return auth_service.login(credentials.email, credentials.password)
