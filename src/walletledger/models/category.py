"""Ledger category definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction

CATEGORY_TYPES = ("income", "expense", "both")


class Category(SQLModel, table=True):
    """Transaction category shared by every user."""

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True, nullable=False, max_length=64)
    category_type: str = Field(default="expense", nullable=False, max_length=16)
    icon: str = Field(default="tag", max_length=32)
    color: str = Field(default="#6366f1", max_length=7)
    is_default: bool = Field(default=False, nullable=False)

    transactions: list["Transaction"] = Relationship(
        back_populates="category",
        sa_relationship=relationship("Transaction", back_populates="category"),
    )
