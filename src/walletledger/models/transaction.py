"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .category import Category
    from .user import User
    from .wallet import Wallet


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(SQLModel, table=True):
    """A single income, expense or transfer recorded against one wallet."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    wallet_id: int = Field(foreign_key="wallet.id", nullable=False, index=True)
    category_id: int = Field(foreign_key="category.id", nullable=False, index=True)
    amount: Decimal = Field(
        max_digits=12, decimal_places=2, description="Always positive; direction comes from type"
    )
    transaction_type: str = Field(nullable=False, max_length=16, index=True)
    transaction_date: datetime = Field(nullable=False, index=True)
    description: str = Field(default="", max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1024)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    category: "Category" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Category", back_populates="transactions"),
    )
    wallet: "Wallet" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Wallet", back_populates="transactions"),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="transactions"))
