from sqlalchemy import Column, String, Integer, ForeignKey, Index, Text, text
from src.shortener.db.base import SoftDeleteModel


class ShortURL(SoftDeleteModel):
    __tablename__ = "short_urls"
    __table_args__ = (
        # Codes are unique among active rows only; retired codes stay on disk
        Index(
            "uq_short_urls_active_short_code",
            "short_code",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    original_url = Column(Text, nullable=False)
    short_code = Column(String(16), nullable=False)
    click_count = Column(Integer, default=0, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
