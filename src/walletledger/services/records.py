"""Plain-record shapes returned to the HTTP layer."""

from __future__ import annotations

from typing import Any

from ..models import Achievement, Category, Goal, Transaction, Wallet


def wallet_record(wallet: Wallet) -> dict[str, Any]:
    return {
        "id": wallet.id,
        "user_id": wallet.user_id,
        "name": wallet.name,
        "wallet_type": wallet.wallet_type,
        "icon": wallet.icon,
        "color": wallet.color,
        "balance": wallet.balance,
        "is_default": wallet.is_default,
        "created_at": wallet.created_at,
    }


def wallet_summary(wallet: Wallet) -> dict[str, Any]:
    return {"id": wallet.id, "name": wallet.name, "icon": wallet.icon}


def category_record(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "category_type": category.category_type,
        "icon": category.icon,
        "color": category.color,
        "is_default": category.is_default,
    }


def category_summary(category: Category) -> dict[str, Any]:
    return {"id": category.id, "name": category.name, "icon": category.icon, "color": category.color}


def transaction_record(transaction: Transaction, *, joined: bool = True) -> dict[str, Any]:
    """Serialize a transaction; ``joined`` adds category and wallet summaries."""

    record: dict[str, Any] = {
        "id": transaction.id,
        "user_id": transaction.user_id,
        "wallet_id": transaction.wallet_id,
        "category_id": transaction.category_id,
        "amount": transaction.amount,
        "transaction_type": transaction.transaction_type,
        "transaction_date": transaction.transaction_date,
        "description": transaction.description,
        "notes": transaction.notes,
        "created_at": transaction.created_at,
        "updated_at": transaction.updated_at,
    }
    if joined:
        record["category"] = category_summary(transaction.category) if transaction.category else None
        record["wallet"] = wallet_summary(transaction.wallet) if transaction.wallet else None
    return record


def goal_record(goal: Goal) -> dict[str, Any]:
    return {
        "id": goal.id,
        "user_id": goal.user_id,
        "title": goal.title,
        "description": goal.description,
        "current_amount": goal.current_amount,
        "target_amount": goal.target_amount,
        "deadline": goal.deadline,
        "icon": goal.icon,
        "color": goal.color,
        "is_completed": goal.is_completed,
        "progress": round(goal.progress, 2),
        "created_at": goal.created_at,
    }


def achievement_record(achievement: Achievement) -> dict[str, Any]:
    return {
        "id": achievement.id,
        "goal_id": achievement.goal_id,
        "title": achievement.title,
        "description": achievement.description,
        "icon": achievement.icon,
        "points": achievement.points,
        "category": achievement.category,
        "achieved_at": achievement.achieved_at,
    }
