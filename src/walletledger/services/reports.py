"""Monthly summaries, category breakdowns and the dashboard aggregate."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..domain.ledger import ZERO, validate_transaction_type
from ..domain.storage import StorageProvider, StorageUnit
from ..errors import ValidationError
from ..models import Category, Transaction
from .records import goal_record, transaction_record, wallet_record


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return ``[start, end)`` covering the whole month."""

    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12", details={"field": "month"})
    if not 1 <= year <= 9998:
        raise ValidationError("year out of range", details={"field": "year"})
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def trend(current: Decimal, previous: Decimal) -> float:
    """Percent change vs the previous period; 100 when growing from nothing."""

    if previous == ZERO:
        return 100.0 if current > ZERO else 0.0
    return round(float((current - previous) / previous * 100), 2)


def totals(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Income and expense totals by type; transfers count in neither."""

    income = ZERO
    expenses = ZERO
    for tx in transactions:
        if tx.transaction_type == "income":
            income += tx.amount
        elif tx.transaction_type == "expense":
            expenses += tx.amount
    return {"income": income, "expenses": expenses, "balance": income - expenses}


def breakdown_by_category(
    transactions: Iterable[Transaction], categories: dict[int, Category]
) -> tuple[list[dict[str, Any]], Decimal]:
    """Group amounts by category, largest first, with share of the overall total."""

    grouped: dict[int, dict[str, Any]] = {}
    for tx in transactions:
        bucket = grouped.get(tx.category_id)
        if bucket is None:
            category = categories.get(tx.category_id)
            bucket = grouped[tx.category_id] = {
                "category_id": tx.category_id,
                "name": category.name if category else "Unknown category",
                "icon": category.icon if category else None,
                "color": category.color if category else None,
                "amount": ZERO,
                "count": 0,
            }
        bucket["amount"] += tx.amount
        bucket["count"] += 1

    total = sum((b["amount"] for b in grouped.values()), ZERO)
    rows = sorted(grouped.values(), key=lambda b: b["amount"], reverse=True)
    for row in rows:
        row["percentage"] = round(float(row["amount"] / total * 100), 2) if total > ZERO else 0.0
    return rows, total


class ReportService:
    """Read-only aggregates over a user's ledger."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def monthly_summary(self, owner_id: int, year: int, month: int) -> dict[str, Any]:
        start, end = month_bounds(year, month)
        prev_start, prev_end = month_bounds(*previous_month(year, month))

        def _read(unit: StorageUnit) -> dict[str, Any]:
            current = unit.transactions.between(user_id=owner_id, start=start, end=end)
            previous = unit.transactions.between(user_id=owner_id, start=prev_start, end=prev_end)
            now_totals = totals(current)
            prev_totals = totals(previous)
            return {
                "year": year,
                "month": month,
                "total_income": now_totals["income"],
                "total_expenses": now_totals["expenses"],
                "balance": now_totals["balance"],
                "income_trend": trend(now_totals["income"], prev_totals["income"]),
                "expenses_trend": trend(now_totals["expenses"], prev_totals["expenses"]),
                "transaction_count": len(current),
            }

        return self.storage.run_atomic(_read)

    def category_summary(
        self,
        owner_id: int,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        transaction_type: str = "expense",
    ) -> dict[str, Any]:
        validate_transaction_type(transaction_type)

        def _read(unit: StorageUnit) -> dict[str, Any]:
            rows = unit.transactions.between(
                user_id=owner_id,
                start=start_date,
                until=end_date,
                transaction_type=transaction_type,
            )
            categories = unit.categories.get_many({tx.category_id for tx in rows})
            breakdown, total = breakdown_by_category(rows, categories)
            return {"total": total, "categories": breakdown}

        return self.storage.run_atomic(_read)

    def dashboard(self, owner_id: int, today: Optional[date] = None) -> dict[str, Any]:
        """Everything the landing page needs in one consistent read."""

        today = today or date.today()
        start, end = month_bounds(today.year, today.month)
        prev_start, prev_end = month_bounds(*previous_month(today.year, today.month))

        def _read(unit: StorageUnit) -> dict[str, Any]:
            wallets = unit.wallets.list_for_user(owner_id)
            current = unit.transactions.between(user_id=owner_id, start=start, end=end)
            previous = unit.transactions.between(user_id=owner_id, start=prev_start, end=prev_end)
            now_totals = totals(current)
            prev_totals = totals(previous)

            expenses = [tx for tx in current if tx.transaction_type == "expense"]
            categories = unit.categories.get_many({tx.category_id for tx in expenses})
            by_category, _ = breakdown_by_category(expenses, categories)

            goals = unit.goals.list_active(owner_id, limit=5)
            recent = unit.transactions.recent(user_id=owner_id, limit=10)
            return {
                "total_balance": sum((w.balance for w in wallets), ZERO),
                "wallets": {"count": len(wallets), "data": [wallet_record(w) for w in wallets]},
                "current_month": {
                    "year": today.year,
                    "month": today.month,
                    "income": now_totals["income"],
                    "expenses": now_totals["expenses"],
                    "balance": now_totals["balance"],
                },
                "trends": {
                    "income": trend(now_totals["income"], prev_totals["income"]),
                    "expenses": trend(now_totals["expenses"], prev_totals["expenses"]),
                },
                "expenses_by_category": by_category,
                "goals": {"count": len(goals), "data": [goal_record(g) for g in goals]},
                "recent_transactions": [transaction_record(tx) for tx in recent],
            }

        return self.storage.run_atomic(_read)
