from datetime import timedelta
from typing import Optional

from src.shortener.core.config import Settings, settings as default_settings, logger
from src.shortener.core.exceptions import NotFoundError, UnauthorizedError
from src.shortener.core.security import create_access_token, decode_access_token, verify_password
from src.shortener.schemas.user import AuthResponse, UserRead
from src.shortener.services.user_service import UserService

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Registration, login and bearer token authentication."""

    def __init__(self, user_service: UserService, settings: Settings = default_settings):
        self.user_service = user_service
        self.settings = settings

    def _issue(self, user: UserRead) -> AuthResponse:
        token = create_access_token(
            {"sub": user.id, "email": user.email},
            expires_delta=timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        return AuthResponse(user=user, access_token=token)

    def register(self, email: str, password: str) -> AuthResponse:
        user = self.user_service.create(email, password)
        return self._issue(user)

    def login(self, email: str, password: str) -> AuthResponse:
        """
        Authenticate with email and password.

        Raises:
            UnauthorizedError: With the same message whether the email is
                unknown or the password is wrong
        """
        user = self.validate_user(email, password)
        if user is None:
            logger.info("Login failed")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return self._issue(user)

    def validate_user(self, email: str, password: str) -> Optional[UserRead]:
        user = self.user_service.get_by_email(email)
        if user is None:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return UserRead.model_validate(user)

    def authenticate_token(self, token: str) -> UserRead:
        """
        Resolve a bearer token to the active user it was issued for.

        Raises:
            UnauthorizedError: If the token is invalid or the user is gone
        """
        payload = decode_access_token(token)
        try:
            return self.user_service.get_by_id(payload["sub"])
        except NotFoundError as e:
            logger.warning(f"Token subject not found: {payload['sub']}")
            raise UnauthorizedError() from e
