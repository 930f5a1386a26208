from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional

from src.shortener.core.config import logger
from src.shortener.core.exceptions import ConflictError, NotFoundError
from src.shortener.core.security import get_password_hash
from src.shortener.models.user import User
from src.shortener.schemas.user import UserRead


class UserService:
    """Owns user records. Password hashes never leave this service."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, email: str, password: str) -> UserRead:
        """
        Register a new user.

        Args:
            email: Email address, stored as given
            password: Plain text password, stored hashed

        Returns:
            The created user without its password

        Raises:
            ConflictError: If any user, active or soft-deleted, has this email
        """
        if self.db.query(User).filter(User.email == email).first():
            logger.info(f"Registration rejected, email already in use: {email}")
            raise ConflictError("A user with this email already exists")

        db_user = User(email=email, hashed_password=get_password_hash(password))
        self.db.add(db_user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("A user with this email already exists") from e
        self.db.refresh(db_user)

        logger.info(f"User registered: {db_user.id}")
        return UserRead.model_validate(db_user)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get an active user by email, including the password hash.

        Only meant for credential checks inside the auth layer.
        """
        return (
            self.db.query(User)
            .filter(User.email == email, User.deleted_at.is_(None))
            .first()
        )

    def get_by_id(self, user_id: str) -> UserRead:
        """
        Get an active user by id.

        Raises:
            NotFoundError: If the user does not exist or was soft-deleted
        """
        user = (
            self.db.query(User)
            .filter(User.id == user_id, User.deleted_at.is_(None))
            .first()
        )
        if user is None:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)
