"""Savings goals, contributions and the achievements they award."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Optional

from ..domain.ledger import UNSET, reject_nulls, require_positive, supplied_fields, to_amount
from ..domain.storage import StorageProvider, StorageUnit
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models import Achievement, Goal
from .records import achievement_record, goal_record

logger = get_logger("goals")

GOAL_REACHED_POINTS = 50


@dataclass
class GoalInput:
    title: str
    target_amount: Decimal
    description: str = ""
    deadline: Optional[date] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    def __post_init__(self) -> None:
        self.title = (self.title or "").strip()
        if not self.title:
            raise ValidationError("title is required", details={"field": "title"})
        self.target_amount = require_positive(
            to_amount(self.target_amount, field_name="target_amount"), field_name="target_amount"
        )


@dataclass
class GoalPatch:
    """Partial update; UNSET keeps the stored value, None clears ``deadline``."""

    NULLABLE: ClassVar[frozenset[str]] = frozenset({"deadline"})

    title: Optional[str] = UNSET
    description: Optional[str] = UNSET
    target_amount: Optional[Decimal] = UNSET
    deadline: Optional[date] = UNSET
    icon: Optional[str] = UNSET
    color: Optional[str] = UNSET

    def __post_init__(self) -> None:
        reject_nulls(self, self.NULLABLE)
        if self.title is not UNSET:
            self.title = self.title.strip()
            if not self.title:
                raise ValidationError("title cannot be blank", details={"field": "title"})
        if self.target_amount is not UNSET:
            self.target_amount = require_positive(
                to_amount(self.target_amount, field_name="target_amount"),
                field_name="target_amount",
            )

    def supplied(self) -> dict[str, Any]:
        return supplied_fields(self)


def _award_if_reached(unit: StorageUnit, goal: Goal) -> bool:
    """Mark a goal completed and record one achievement on the first crossing.

    A goal that is already completed is left alone. A goal reopened by a raised
    target completes again without a second achievement.
    """

    if goal.is_completed or goal.current_amount < goal.target_amount:
        return False
    goal.is_completed = True
    unit.goals.add(goal)
    if unit.goals.count_achievements_for_goal(goal.id) > 0:
        return False
    unit.goals.add_achievement(
        Achievement(
            user_id=goal.user_id,
            goal_id=goal.id,
            title="Goal reached",
            description=f"You reached your goal: {goal.title}",
            icon="trophy",
            points=GOAL_REACHED_POINTS,
            category="goals",
        )
    )
    return True


class GoalService:
    """Goal CRUD plus atomic contributions."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def _require(self, unit: StorageUnit, goal_id: int, owner_id: int, *, lock: bool = False) -> Goal:
        goal = unit.find_goal(goal_id, owner_id, lock=lock)
        if goal is None:
            raise NotFoundError.for_entity("Goal", goal_id)
        return goal

    def list_goals(self, owner_id: int) -> list[dict[str, Any]]:
        return self.storage.run_atomic(
            lambda unit: [goal_record(g) for g in unit.goals.list_for_user(owner_id)]
        )

    def get_goal(self, goal_id: int, owner_id: int) -> dict[str, Any]:
        return self.storage.run_atomic(
            lambda unit: goal_record(self._require(unit, goal_id, owner_id))
        )

    def create_goal(self, owner_id: int, data: GoalInput) -> dict[str, Any]:
        def _create(unit: StorageUnit) -> dict[str, Any]:
            goal = Goal(
                user_id=owner_id,
                title=data.title,
                description=data.description,
                target_amount=data.target_amount,
                deadline=data.deadline,
            )
            if data.icon:
                goal.icon = data.icon
            if data.color:
                goal.color = data.color
            return goal_record(unit.goals.add(goal))

        record = self.storage.run_atomic(_create)
        logger.info("Goal created", extra={"user_id": owner_id, "goal_id": record["id"]})
        return record

    def update_goal(self, goal_id: int, owner_id: int, patch: GoalPatch) -> dict[str, Any]:
        """Apply field changes.

        Lowering the target to or below progress completes the goal; raising it
        above progress reopens a completed one.
        """

        changes = patch.supplied()

        def _update(unit: StorageUnit) -> dict[str, Any]:
            goal = self._require(unit, goal_id, owner_id, lock=True)
            for key, value in changes.items():
                setattr(goal, key, value)
            if goal.is_completed and goal.current_amount < goal.target_amount:
                goal.is_completed = False
            unit.goals.add(goal)
            _award_if_reached(unit, goal)
            return goal_record(goal)

        return self.storage.run_atomic(_update)

    def delete_goal(self, goal_id: int, owner_id: int) -> dict[str, Any]:
        def _delete(unit: StorageUnit) -> None:
            unit.goals.delete(self._require(unit, goal_id, owner_id, lock=True))

        self.storage.run_atomic(_delete)
        logger.info("Goal deleted", extra={"user_id": owner_id, "goal_id": goal_id})
        return {"deleted": True, "id": goal_id}

    def contribute(self, goal_id: int, owner_id: int, amount: Any) -> dict[str, Any]:
        """Add ``amount`` to the goal, completing it when the target is reached."""

        value = require_positive(to_amount(amount))

        def _contribute(unit: StorageUnit) -> tuple[dict[str, Any], bool]:
            self._require(unit, goal_id, owner_id, lock=True)
            goal = unit.increment_goal(goal_id, value)
            awarded = _award_if_reached(unit, goal)
            return goal_record(goal), awarded

        record, awarded = self.storage.run_atomic(_contribute)
        logger.info(
            "Goal contribution recorded",
            extra={
                "user_id": owner_id,
                "goal_id": goal_id,
                "amount": str(value),
                "completed_now": awarded,
            },
        )
        return record

    def list_achievements(self, owner_id: int) -> list[dict[str, Any]]:
        return self.storage.run_atomic(
            lambda unit: [achievement_record(a) for a in unit.goals.list_achievements(owner_id)]
        )
