from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from src.shortener.core.config import Settings, get_settings, get_redis, logger
from src.shortener.core.exceptions import UnauthorizedError
from src.shortener.db.session import get_db
from src.shortener.schemas.user import UserRead
from src.shortener.services.auth_service import AuthService
from src.shortener.services.url_service import URLService
from src.shortener.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_cache():
    return get_redis()


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_auth_service(
    user_service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(user_service, settings)


def get_url_service(
    db: Session = Depends(get_db),
    cache=Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> URLService:
    return URLService(db, cache, settings)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserRead:
    """
    Get the current authenticated user from the bearer token.

    Raises:
        UnauthorizedError: If the token is missing, invalid or its user is gone
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    return auth_service.authenticate_token(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[UserRead]:
    """
    Like get_current_user, but a missing or invalid token means anonymous.
    """
    if credentials is None:
        return None
    try:
        return auth_service.authenticate_token(credentials.credentials)
    except UnauthorizedError:
        logger.warning("Ignoring invalid bearer token on optional-auth route")
        return None
