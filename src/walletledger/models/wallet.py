"""Wallet model holding the cached running balance."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction
    from .user import User

WALLET_TYPES = ("cash", "bank", "credit", "investment")


class Wallet(SQLModel, table=True):
    """A user-owned pot of money whose balance tracks its transactions."""

    __tablename__: ClassVar[str] = "wallet"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    wallet_type: str = Field(default="cash", nullable=False, max_length=16, index=True)
    icon: str = Field(default="wallet", max_length=32)
    color: str = Field(default="#3b82f6", max_length=7)
    # Derived from transactions; only the ledger engine or an explicit override writes it.
    balance: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    is_default: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    transactions: list["Transaction"] = Relationship(
        back_populates="wallet",
        sa_relationship=relationship("Transaction", back_populates="wallet"),
    )
    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="wallets"))
