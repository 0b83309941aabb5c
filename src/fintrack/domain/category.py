"""Category domain service."""

from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import Category
from fintrack.domain.errors import ConflictError, NotFoundError, ValidationError, category_not_found

DEFAULT_CATEGORY_ICON = "tag"
DEFAULT_CATEGORY_COLOR = "#6B7280"

# (name, icon, color)
DEFAULT_CATEGORIES = [
    ("Food", "utensils", "#EF4444"),
    ("Transport", "bus", "#F59E0B"),
    ("Leisure", "gamepad", "#8B5CF6"),
    ("Health", "heartbeat", "#10B981"),
    ("Education", "graduation-cap", "#3B82F6"),
    ("Other", "ellipsis-h", "#6B7280"),
]


class CategoryService:
    """Service for managing expense categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        user_id: int,
        name: str,
        icon: str = DEFAULT_CATEGORY_ICON,
        color: str = DEFAULT_CATEGORY_COLOR,
    ) -> Category:
        """Create a category.

        Args:
            user_id: Owner of the category
            name: Category name, unique per user
            icon: Icon name
            color: Display color

        Returns:
            Created category

        Raises:
            ValidationError: If name is empty
            ConflictError: If the user already has a category with this name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if self.db.get_category_by_name(user_id, name) is not None:
            raise ConflictError(f"Category '{name}' already exists")

        category_id = self.db.create_category(user_id=user_id, name=name, icon=icon, color=color)
        return self.db.get_category(category_id)

    def get_category(self, user_id: int, category_id: int) -> Optional[Category]:
        """Get category by ID, or None if not found or owned by another user."""
        category = self.db.get_category(category_id)
        if category is None or category.user_id != user_id:
            return None
        return category

    def require_category(self, user_id: int, category_id: int) -> Category:
        """Get category by ID.

        Raises:
            NotFoundError: If not found or owned by another user
        """
        category = self.get_category(user_id, category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def get_category_by_name(self, user_id: int, name: str) -> Optional[Category]:
        return self.db.get_category_by_name(user_id, name)

    def list_categories(self, user_id: int) -> list[Category]:
        """List a user's categories by name."""
        return self.db.list_categories(user_id)

    def init_default_categories(self, user_id: int) -> list[Category]:
        """Create the default category set, skipping names that already exist.

        Returns:
            The categories that were created
        """
        created = []
        for name, icon, color in DEFAULT_CATEGORIES:
            if self.db.get_category_by_name(user_id, name) is not None:
                continue
            created.append(self.create_category(user_id, name, icon=icon, color=color))
        return created
