from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime


class CamelModel(BaseModel):
    """Base schema exposing camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class URLCreate(CamelModel):
    original_url: str = Field(..., description="Absolute http(s) URL to shorten")


class URLUpdate(CamelModel):
    original_url: str = Field(..., description="New destination URL")


class URLRead(CamelModel):
    id: str
    original_url: str
    short_url: str
    short_code: str
    click_count: int
    created_at: datetime
    updated_at: datetime


class Message(BaseModel):
    message: str
