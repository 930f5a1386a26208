from sqlalchemy import Column, String, ForeignKey
from src.shortener.db.base import BaseModel


class Click(BaseModel):
    """One recorded redirect. Never updated or deleted."""

    __tablename__ = "clicks"

    url_id = Column(String(36), ForeignKey("short_urls.id"), nullable=False, index=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(512), nullable=True)
