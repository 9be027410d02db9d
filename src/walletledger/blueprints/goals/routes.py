"""Goal and achievement routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_services
from ...identity import current_user_id
from ...services.goals import GoalInput, GoalPatch
from .._helpers import as_date, json_body, patch_fields, require
from . import bp


@bp.get("")
def list_goals():
    goals = get_services().goals.list_goals(current_user_id())
    return jsonify({"status": "success", "count": len(goals), "goals": goals})


@bp.get("/achievements")
def list_achievements():
    achievements = get_services().goals.list_achievements(current_user_id())
    total_points = sum(item["points"] for item in achievements)
    return jsonify(
        {
            "status": "success",
            "count": len(achievements),
            "total_points": total_points,
            "achievements": achievements,
        }
    )


@bp.get("/<int:goal_id>")
def get_goal(goal_id: int):
    goal = get_services().goals.get_goal(goal_id, current_user_id())
    return jsonify({"status": "success", "goal": goal})


@bp.post("")
def create_goal():
    owner_id = current_user_id()
    body = json_body()
    data = GoalInput(
        title=require(body, "title"),
        target_amount=require(body, "target_amount"),
        description=body.get("description") or "",
        deadline=as_date(body.get("deadline"), "deadline"),
        icon=body.get("icon"),
        color=body.get("color"),
    )
    goal = get_services().goals.create_goal(owner_id, data)
    return jsonify({"status": "success", "goal": goal}), 201


@bp.patch("/<int:goal_id>")
def update_goal(goal_id: int):
    owner_id = current_user_id()
    body = json_body()
    patch = GoalPatch(
        **patch_fields(
            body,
            {
                "title": None,
                "description": None,
                "target_amount": None,
                "deadline": as_date,
                "icon": None,
                "color": None,
            },
        )
    )
    goal = get_services().goals.update_goal(goal_id, owner_id, patch)
    return jsonify({"status": "success", "goal": goal})


@bp.delete("/<int:goal_id>")
def delete_goal(goal_id: int):
    result = get_services().goals.delete_goal(goal_id, current_user_id())
    return jsonify({"status": "success", **result})


@bp.post("/<int:goal_id>/contribute")
def contribute(goal_id: int):
    owner_id = current_user_id()
    body = json_body()
    goal = get_services().goals.contribute(goal_id, owner_id, require(body, "amount"))
    return jsonify({"status": "success", "goal": goal})
