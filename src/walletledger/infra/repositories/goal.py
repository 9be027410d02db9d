"""SQLModel implementation of the goal and achievement repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...errors import StorageError
from ...models.goal import Achievement, Goal
from ._relative import increment_column


class SQLModelGoalRepository:
    """Goal and achievement queries bound to the session of the current unit."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, goal_id: int, *, user_id: int, lock: bool = False) -> Optional[Goal]:
        statement = select(Goal).where(Goal.id == goal_id).where(Goal.user_id == user_id)
        if lock:
            statement = statement.with_for_update()
        return self.session.exec(statement).first()

    def list_for_user(self, user_id: int) -> list[Goal]:
        statement = (
            select(Goal)
            .where(Goal.user_id == user_id)
            .order_by(Goal.created_at.desc(), Goal.id.desc())  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def list_active(self, user_id: int, *, limit: int = 5) -> list[Goal]:
        """Open goals, nearest deadline first; goals without a deadline go last."""
        statement = (
            select(Goal)
            .where(Goal.user_id == user_id)
            .where(Goal.is_completed.is_(False))  # type: ignore
            .order_by(
                Goal.deadline.is_(None),  # type: ignore
                Goal.deadline,
                Goal.created_at.desc(),  # type: ignore
            )
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def add(self, goal: Goal) -> Goal:
        self.session.add(goal)
        self.session.flush()
        self.session.refresh(goal)
        return goal

    def increment(self, goal_id: int, amount: Decimal) -> Goal:
        """Add ``amount`` to ``current_amount`` in the database and reload the row."""
        matched = increment_column(self.session, Goal, goal_id, "current_amount", amount)
        goal = self.session.get(Goal, goal_id)
        if matched != 1 or goal is None:
            raise StorageError(f"Goal {goal_id} vanished during contribution")
        self.session.refresh(goal)
        return goal

    def delete(self, goal: Goal) -> None:
        for achievement in self.session.exec(
            select(Achievement).where(Achievement.goal_id == goal.id)
        ).all():
            achievement.goal_id = None
            self.session.add(achievement)
        self.session.delete(goal)
        self.session.flush()

    def add_achievement(self, achievement: Achievement) -> Achievement:
        self.session.add(achievement)
        self.session.flush()
        self.session.refresh(achievement)
        return achievement

    def list_achievements(self, user_id: int) -> list[Achievement]:
        statement = (
            select(Achievement)
            .where(Achievement.user_id == user_id)
            .order_by(Achievement.achieved_at.desc(), Achievement.id.desc())  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def count_achievements_for_goal(self, goal_id: int) -> int:
        statement = (
            select(func.count()).select_from(Achievement).where(Achievement.goal_id == goal_id)
        )
        return int(self.session.exec(statement).one())
