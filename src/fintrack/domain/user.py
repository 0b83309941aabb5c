"""User domain service."""

from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import User
from fintrack.domain.errors import ConflictError, NotFoundError, ValidationError, user_not_found


class UserService:
    """Service for managing users."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, name: str, email: Optional[str] = None) -> User:
        """Create a new user.

        Args:
            name: Display name
            email: Optional email, unique across users

        Returns:
            Created user

        Raises:
            ValidationError: If name is empty
            ConflictError: If the email is already taken
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("User name cannot be empty")
        if email is not None:
            email = email.strip() or None
        if email is not None and self.db.get_user_by_email(email) is not None:
            raise ConflictError(f"User with email '{email}' already exists")

        user_id = self.db.create_user(name=name, email=email)
        return self.db.get_user(user_id)

    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID, or None if not found."""
        return self.db.get_user(user_id)

    def require_user(self, user_id: int) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        return user

    def list_users(self) -> list[User]:
        """List all users."""
        return self.db.list_users()
