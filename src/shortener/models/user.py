from sqlalchemy import Column, String
from src.shortener.db.base import SoftDeleteModel


class User(SoftDeleteModel):
    __tablename__ = "users"

    email = Column(String(320), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
