from typing import Optional

from fastapi import APIRouter, Depends, status

from src.shortener.api.deps import get_current_user, get_optional_user, get_url_service
from src.shortener.schemas.url import URLCreate, URLRead, URLUpdate, Message
from src.shortener.schemas.user import UserRead
from src.shortener.services.url_service import URLService

router = APIRouter()


@router.post("/shorten", response_model=URLRead, status_code=status.HTTP_201_CREATED)
def create_link(
    url: URLCreate,
    url_service: URLService = Depends(get_url_service),
    current_user: Optional[UserRead] = Depends(get_optional_user),
):
    """
    Create a shortened URL.

    Authentication is optional. With a valid bearer token the URL is owned
    by the caller; otherwise it is created anonymously.
    """
    owner_id = current_user.id if current_user else None
    return url_service.create_short_url(url.original_url, owner_id)


@router.get("/urls", response_model=list[URLRead])
def list_links(
    url_service: URLService = Depends(get_url_service),
    current_user: UserRead = Depends(get_current_user),
):
    """
    List the caller's URLs, newest first.

    Requires authentication.
    """
    return url_service.list_for_owner(current_user.id)


@router.put("/urls/{url_id}", response_model=URLRead)
def update_link(
    url_id: str,
    url_update: URLUpdate,
    url_service: URLService = Depends(get_url_service),
    current_user: UserRead = Depends(get_current_user),
):
    """
    Change the destination of a shortened URL.

    Requires authentication. Only the owner may update.
    """
    return url_service.update(url_id, url_update.original_url, current_user.id)


@router.delete("/urls/{url_id}", response_model=Message)
def delete_link(
    url_id: str,
    url_service: URLService = Depends(get_url_service),
    current_user: UserRead = Depends(get_current_user),
):
    """
    Soft-delete a shortened URL.

    Requires authentication. Only the owner may delete.
    """
    return url_service.soft_delete(url_id, current_user.id)
