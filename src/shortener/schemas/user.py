from pydantic import AfterValidator, BaseModel, Field
from pydantic.networks import validate_email
from datetime import datetime
from typing import Annotated

from src.shortener.schemas.url import CamelModel


def _check_email(value: str) -> str:
    # Validate the format but keep the address exactly as given
    validate_email(value)
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class LoginRequest(BaseModel):
    email: Email
    password: str = Field(..., min_length=1)


class RegisterRequest(LoginRequest):
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=1, max_length=72)


class UserRead(CamelModel):
    id: str
    email: str
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    user: UserRead
    access_token: str
    token_type: str = "bearer"
