"""Goal contributions, completion and the single completion achievement."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from walletledger.errors import NotFoundError, StorageError, ValidationError
from walletledger.extensions import build_services
from walletledger.infra.storage import SQLModelStorage, SQLModelUnit
from walletledger.services.goals import GOAL_REACHED_POINTS, GoalInput, GoalPatch


def _achievement_count(storage, goal_id: int) -> int:
    return storage.run_atomic(lambda unit: unit.goals.count_achievements_for_goal(goal_id))


def test_contribution_increments_current_amount(services, user_id, goal_factory):
    goal = goal_factory(target="100.00")

    updated = services.goals.contribute(goal["id"], user_id, "12.50")

    assert updated["current_amount"] == Decimal("12.50")
    assert updated["progress"] == 12.5
    assert updated["is_completed"] is False


def test_crossing_target_completes_goal_once(services, storage, user_id, goal_factory):
    goal = goal_factory(target="100.00")
    services.goals.contribute(goal["id"], user_id, "85")

    reached = services.goals.contribute(goal["id"], user_id, "20")

    assert reached["current_amount"] == Decimal("105.00")
    assert reached["is_completed"] is True
    assert reached["progress"] == 100.0
    achievements = services.goals.list_achievements(user_id)
    assert len(achievements) == 1
    assert achievements[0]["goal_id"] == goal["id"]
    assert achievements[0]["points"] == GOAL_REACHED_POINTS
    assert achievements[0]["category"] == "goals"

    again = services.goals.contribute(goal["id"], user_id, "5")

    assert again["current_amount"] == Decimal("110.00")
    assert again["is_completed"] is True
    assert _achievement_count(storage, goal["id"]) == 1


def test_exact_target_completes_goal(services, storage, user_id, goal_factory):
    goal = goal_factory(target="50.00")

    reached = services.goals.contribute(goal["id"], user_id, "50")

    assert reached["is_completed"] is True
    assert _achievement_count(storage, goal["id"]) == 1


@pytest.mark.parametrize("amount", ["0", "-1", "nope", None])
def test_non_positive_contribution_rejected(services, user_id, goal_factory, amount):
    goal = goal_factory()

    with pytest.raises(ValidationError):
        services.goals.contribute(goal["id"], user_id, amount)

    assert services.goals.get_goal(goal["id"], user_id)["current_amount"] == Decimal("0.00")


def test_contribution_to_foreign_goal_is_not_found(services, other_user_id, goal_factory):
    goal = goal_factory()

    with pytest.raises(NotFoundError):
        services.goals.contribute(goal["id"], other_user_id, "10")


def test_lowering_target_completes_goal(services, storage, user_id, goal_factory):
    goal = goal_factory(target="200.00")
    services.goals.contribute(goal["id"], user_id, "120")

    updated = services.goals.update_goal(
        goal["id"], user_id, GoalPatch(target_amount=Decimal("100"))
    )

    assert updated["is_completed"] is True
    assert _achievement_count(storage, goal["id"]) == 1

    services.goals.update_goal(goal["id"], user_id, GoalPatch(title="Renamed"))
    assert _achievement_count(storage, goal["id"]) == 1


def test_raising_target_reopens_goal_without_second_achievement(
    services, storage, user_id, goal_factory
):
    goal = goal_factory(target="100.00")
    services.goals.contribute(goal["id"], user_id, "100")

    raised = services.goals.update_goal(
        goal["id"], user_id, GoalPatch(target_amount=Decimal("150"))
    )
    assert raised["is_completed"] is False

    again = services.goals.contribute(goal["id"], user_id, "60")

    assert again["is_completed"] is True
    assert again["current_amount"] == Decimal("160.00")
    assert _achievement_count(storage, goal["id"]) == 1
    assert len(services.goals.list_achievements(user_id)) == 1


def test_oversized_contribution_rejected(services, user_id, goal_factory):
    goal = goal_factory()

    with pytest.raises(ValidationError, match="too large"):
        services.goals.contribute(goal["id"], user_id, "12345678901234567.89")
    with pytest.raises(ValidationError, match="too large"):
        GoalInput(title="Moon", target_amount="10000000000")

    assert services.goals.get_goal(goal["id"], user_id)["current_amount"] == Decimal("0.00")


def test_deadline_can_be_cleared(services, user_id, goal_factory):
    goal = goal_factory("Bike", target="800", deadline=date(2026, 12, 1))

    services.goals.update_goal(goal["id"], user_id, GoalPatch(title="Road bike"))
    assert services.goals.get_goal(goal["id"], user_id)["deadline"] == date(2026, 12, 1)

    cleared = services.goals.update_goal(goal["id"], user_id, GoalPatch(deadline=None))
    assert cleared["deadline"] is None
    assert cleared["title"] == "Road bike"


@pytest.mark.parametrize("field", ["title", "description", "target_amount", "icon", "color"])
def test_goal_patch_rejects_null_for_required_field(field):
    with pytest.raises(ValidationError, match="cannot be null"):
        GoalPatch(**{field: None})


def test_goal_crud(services, user_id, goal_factory):
    goal = goal_factory("Bike", target="800", deadline=date(2026, 12, 1))
    assert services.goals.get_goal(goal["id"], user_id)["deadline"] == date(2026, 12, 1)

    services.goals.update_goal(goal["id"], user_id, GoalPatch(description="Road bike"))
    assert [g["title"] for g in services.goals.list_goals(user_id)] == ["Bike"]

    assert services.goals.delete_goal(goal["id"], user_id) == {"deleted": True, "id": goal["id"]}
    with pytest.raises(NotFoundError):
        services.goals.get_goal(goal["id"], user_id)


def test_deleting_completed_goal_keeps_achievement(services, user_id, goal_factory):
    goal = goal_factory(target="10")
    services.goals.contribute(goal["id"], user_id, "10")

    services.goals.delete_goal(goal["id"], user_id)

    achievements = services.goals.list_achievements(user_id)
    assert len(achievements) == 1
    assert achievements[0]["goal_id"] is None


@pytest.mark.parametrize("target", ["0", "-10"])
def test_goal_requires_positive_target(target):
    with pytest.raises(ValidationError):
        GoalInput(title="Bad", target_amount=target)


def test_goal_requires_title():
    with pytest.raises(ValidationError):
        GoalInput(title="   ", target_amount=Decimal("10"))


class BrokenIncrementUnit(SQLModelUnit):
    def increment_goal(self, goal_id, amount):
        raise OperationalError("UPDATE goal", {}, Exception("disk I/O error"))


def test_failed_contribution_changes_nothing(config, services, user_id, goal_factory):
    goal = goal_factory()
    broken = build_services(
        config,
        storage_factory=lambda factory: SQLModelStorage(factory, unit_factory=BrokenIncrementUnit),
    )
    try:
        with pytest.raises(StorageError):
            broken.goals.contribute(goal["id"], user_id, "10")
    finally:
        broken.engine.dispose()

    assert services.goals.get_goal(goal["id"], user_id)["current_amount"] == Decimal("0.00")
