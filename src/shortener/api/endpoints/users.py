from fastapi import APIRouter, Depends

from src.shortener.api.deps import get_current_user, get_user_service
from src.shortener.schemas.user import UserRead
from src.shortener.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=UserRead)
def read_users_me(
    current_user: UserRead = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    """
    Get current authenticated user information.

    Requires authentication.
    """
    return user_service.get_by_id(current_user.id)
