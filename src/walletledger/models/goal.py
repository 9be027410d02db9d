"""Savings goals and the achievements they award."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Goal(SQLModel, table=True):
    """A savings target the user contributes towards."""

    __tablename__: ClassVar[str] = "goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=128)
    description: str = Field(default="", max_length=1024)
    current_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    target_amount: Decimal = Field(max_digits=12, decimal_places=2)
    deadline: Optional[date] = Field(default=None)
    icon: str = Field(default="target", max_length=32)
    color: str = Field(default="#10b981", max_length=7)
    is_completed: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="goals"))

    @property
    def progress(self) -> float:
        """Percentage of the target reached, clamped to [0, 100]."""

        if self.target_amount <= 0:
            return 100.0
        ratio = float(self.current_amount / self.target_amount) * 100
        return min(max(0.0, ratio), 100.0)


class Achievement(SQLModel, table=True):
    """Reward recorded when the user hits a milestone."""

    __tablename__: ClassVar[str] = "achievement"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    goal_id: Optional[int] = Field(default=None, foreign_key="goal.id", index=True)
    title: str = Field(nullable=False, max_length=128)
    description: str = Field(default="", max_length=1024)
    icon: str = Field(default="trophy", max_length=32)
    points: int = Field(default=10, nullable=False)
    # one of: savings, investment, budget, goals, streak
    category: str = Field(default="goals", nullable=False, max_length=16, index=True)
    achieved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
