"""SQLModel implementation of the category repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ...models.category import Category


class SQLModelCategoryRepository:
    """Category queries bound to the session of the current unit."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, category_id: int) -> Optional[Category]:
        return self.session.get(Category, category_id)

    def get_by_name(self, name: str) -> Optional[Category]:
        statement = select(Category).where(func.lower(Category.name) == name.strip().lower())
        return self.session.exec(statement).first()

    def list_all(self, *, category_type: Optional[str] = None) -> list[Category]:
        """List categories; a type filter also matches categories usable for both."""
        statement = select(Category)
        if category_type:
            statement = statement.where(
                or_(Category.category_type == category_type, Category.category_type == "both")
            )
        statement = statement.order_by(Category.is_default.desc(), Category.name)  # type: ignore
        return list(self.session.exec(statement).all())

    def get_many(self, category_ids: set[int]) -> dict[int, Category]:
        if not category_ids:
            return {}
        statement = select(Category).where(Category.id.in_(category_ids))  # type: ignore
        return {c.id: c for c in self.session.exec(statement).all() if c.id is not None}

    def add(self, category: Category) -> Category:
        self.session.add(category)
        self.session.flush()
        self.session.refresh(category)
        return category

    def delete(self, category: Category) -> None:
        self.session.delete(category)
        self.session.flush()
