"""Category catalogue shared by all users."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..domain.storage import StorageProvider, StorageUnit
from ..errors import ConflictError, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models import Category
from ..models.category import CATEGORY_TYPES
from .records import category_record

logger = get_logger("categories")

# (name, type, icon, color)
DEFAULT_CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    ("Salary", "income", "briefcase", "#10b981"),
    ("Investments", "income", "trending-up", "#22c55e"),
    ("Food", "expense", "utensils", "#f97316"),
    ("Housing", "expense", "home", "#6366f1"),
    ("Transport", "expense", "car", "#0ea5e9"),
    ("Health", "expense", "heart", "#ef4444"),
    ("Leisure", "expense", "film", "#a855f7"),
    ("Education", "expense", "book", "#eab308"),
    ("Transfers", "both", "repeat", "#64748b"),
    ("Other", "both", "tag", "#94a3b8"),
)


def validate_category_type(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in CATEGORY_TYPES:
        raise ValidationError(
            f"Invalid category type: {value!r}",
            details={"field": "category_type", "allowed": list(CATEGORY_TYPES)},
        )
    return value


@dataclass
class CategoryInput:
    name: str
    category_type: str = "expense"
    icon: Optional[str] = None
    color: Optional[str] = None
    is_default: bool = False

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("name is required", details={"field": "name"})
        validate_category_type(self.category_type)


@dataclass
class CategoryPatch:
    name: Optional[str] = None
    category_type: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_default: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.name is not None:
            self.name = self.name.strip()
            if not self.name:
                raise ValidationError("name cannot be blank", details={"field": "name"})
        validate_category_type(self.category_type)

    def supplied(self) -> dict[str, Any]:
        return {key: value for key, value in vars(self).items() if value is not None}


class CategoryService:
    def __init__(self, storage: StorageProvider):
        self.storage = storage

    @staticmethod
    def _require(unit: StorageUnit, category_id: int) -> Category:
        category = unit.find_category(category_id)
        if category is None:
            raise NotFoundError.for_entity("Category", category_id)
        return category

    @staticmethod
    def _ensure_unique_name(unit: StorageUnit, name: str, *, exclude_id: Optional[int] = None) -> None:
        existing = unit.categories.get_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(
                f"A category named {name!r} already exists", details={"id": existing.id}
            )

    def list_categories(self, category_type: Optional[str] = None) -> list[dict[str, Any]]:
        validate_category_type(category_type)
        return self.storage.run_atomic(
            lambda unit: [
                category_record(c) for c in unit.categories.list_all(category_type=category_type)
            ]
        )

    def get_category(self, category_id: int) -> dict[str, Any]:
        return self.storage.run_atomic(
            lambda unit: category_record(self._require(unit, category_id))
        )

    def create_category(self, data: CategoryInput) -> dict[str, Any]:
        def _create(unit: StorageUnit) -> dict[str, Any]:
            self._ensure_unique_name(unit, data.name)
            category = Category(
                name=data.name,
                category_type=data.category_type,
                is_default=data.is_default,
            )
            if data.icon:
                category.icon = data.icon
            if data.color:
                category.color = data.color
            return category_record(unit.categories.add(category))

        record = self.storage.run_atomic(_create)
        logger.info("Category created", extra={"category_id": record["id"]})
        return record

    def update_category(self, category_id: int, patch: CategoryPatch) -> dict[str, Any]:
        changes = patch.supplied()

        def _update(unit: StorageUnit) -> dict[str, Any]:
            category = self._require(unit, category_id)
            if "name" in changes and changes["name"] != category.name:
                self._ensure_unique_name(unit, changes["name"], exclude_id=category_id)
            for key, value in changes.items():
                setattr(category, key, value)
            return category_record(unit.categories.add(category))

        return self.storage.run_atomic(_update)

    def delete_category(self, category_id: int) -> dict[str, Any]:
        def _delete(unit: StorageUnit) -> None:
            category = self._require(unit, category_id)
            if category.is_default:
                raise ConflictError(
                    "Default categories cannot be deleted", details={"category_id": category_id}
                )
            if unit.transactions.count_for_category(category_id) > 0:
                raise ConflictError(
                    "Cannot delete a category that still has transactions",
                    details={"category_id": category_id},
                )
            unit.categories.delete(category)

        self.storage.run_atomic(_delete)
        logger.info("Category deleted", extra={"category_id": category_id})
        return {"deleted": True, "id": category_id}

    def seed_default_categories(self) -> int:
        """Insert any missing default category; returns how many were added."""

        def _seed(unit: StorageUnit) -> int:
            added = 0
            for name, category_type, icon, color in DEFAULT_CATEGORIES:
                if unit.categories.get_by_name(name) is not None:
                    continue
                unit.categories.add(
                    Category(
                        name=name,
                        category_type=category_type,
                        icon=icon,
                        color=color,
                        is_default=True,
                    )
                )
                added += 1
            return added

        added = self.storage.run_atomic(_seed)
        if added:
            logger.info("Default categories seeded", extra={"added": added})
        return added
