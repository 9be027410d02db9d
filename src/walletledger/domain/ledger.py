"""Ledger value types and the signed-amount rule."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, ClassVar, Optional

from ..errors import ValidationError

TRANSACTION_TYPES = ("income", "expense", "transfer")

CENT = Decimal("0.01")
ZERO = Decimal("0")
# Money columns are Numeric(12, 2): at most ten integer digits.
MAX_AMOUNT = Decimal("1e10")


class _Unset:
    """Marker for a patch field the caller did not send."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def to_amount(value: Any, *, field_name: str = "amount") -> Decimal:
    """Coerce user input into a two-place Decimal or raise ValidationError."""

    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number", details={"field": field_name})
    try:
        # str() keeps float inputs like 0.1 from dragging binary noise along
        amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(
            f"{field_name} must be a number", details={"field": field_name}
        ) from exc
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be finite", details={"field": field_name})
    try:
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError(f"{field_name} is too large", details={"field": field_name}) from exc
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(
            f"{field_name} is too large",
            details={"field": field_name, "max": str(MAX_AMOUNT - CENT)},
        )
    return amount


def require_positive(amount: Decimal, *, field_name: str = "amount") -> Decimal:
    if amount <= ZERO:
        raise ValidationError(
            f"{field_name} must be greater than zero", details={"field": field_name}
        )
    return amount


def validate_transaction_type(value: Any) -> str:
    if value not in TRANSACTION_TYPES:
        raise ValidationError(
            f"Invalid transaction type: {value!r}",
            details={"field": "transaction_type", "allowed": list(TRANSACTION_TYPES)},
        )
    return value


def signed_amount(amount: Decimal, transaction_type: str) -> Decimal:
    """Contribution of a transaction to its wallet balance.

    Income adds, expense subtracts. Transfers contribute nothing: a transfer row
    records movement without a counterpart wallet, so it leaves the balance alone.
    """

    if transaction_type == "income":
        return amount
    if transaction_type == "expense":
        return -amount
    return ZERO


@dataclass
class TransactionInput:
    """Validated payload for a new transaction."""

    wallet_id: int
    category_id: int
    amount: Decimal
    transaction_type: str
    transaction_date: datetime
    description: str = ""
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        self.amount = require_positive(to_amount(self.amount))
        validate_transaction_type(self.transaction_type)


def reject_nulls(patch: Any, nullable: frozenset[str]) -> None:
    """Raise ValidationError for an explicit None on a field that cannot be cleared."""

    for f in fields(patch):
        if getattr(patch, f.name) is None and f.name not in nullable:
            raise ValidationError(f"{f.name} cannot be null", details={"field": f.name})


def supplied_fields(patch: Any) -> dict[str, Any]:
    """Fields the caller actually sent; an explicit None is kept so it clears the column."""

    return {
        f.name: getattr(patch, f.name)
        for f in fields(patch)
        if getattr(patch, f.name) is not UNSET
    }


@dataclass
class TransactionPatch:
    """Partial update; a field left UNSET keeps the stored value.

    Only ``notes`` may be cleared by sending None.
    """

    NULLABLE: ClassVar[frozenset[str]] = frozenset({"notes"})

    wallet_id: Optional[int] = UNSET
    category_id: Optional[int] = UNSET
    amount: Optional[Decimal] = UNSET
    transaction_type: Optional[str] = UNSET
    transaction_date: Optional[datetime] = UNSET
    description: Optional[str] = UNSET
    notes: Optional[str] = UNSET

    def __post_init__(self) -> None:
        reject_nulls(self, self.NULLABLE)
        if self.amount is not UNSET:
            self.amount = require_positive(to_amount(self.amount))
        if self.transaction_type is not UNSET:
            validate_transaction_type(self.transaction_type)

    def supplied(self) -> dict[str, Any]:
        return supplied_fields(self)


@dataclass
class TransactionFilters:
    """Typed listing filters; every field maps to one query clause."""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    transaction_type: Optional[str] = None
    category_id: Optional[int] = None
    wallet_id: Optional[int] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.transaction_type is not None:
            validate_transaction_type(self.transaction_type)
        if self.min_amount is not None:
            self.min_amount = to_amount(self.min_amount, field_name="min_amount")
        if self.max_amount is not None:
            self.max_amount = to_amount(self.max_amount, field_name="max_amount")
        if (
            self.min_amount is not None
            and self.max_amount is not None
            and self.min_amount > self.max_amount
        ):
            raise ValidationError("min_amount cannot exceed max_amount")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("start_date cannot be after end_date")
        if self.page < 1:
            raise ValidationError("page must be >= 1", details={"field": "page"})
        if self.limit < 1:
            raise ValidationError("limit must be >= 1", details={"field": "limit"})
        if self.search is not None:
            self.search = self.search.strip() or None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class TransactionPage:
    """One page of a filtered transaction listing."""

    items: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_more(self) -> bool:
        return (self.page - 1) * self.limit + len(self.items) < self.total

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": self.total_pages,
            "has_more": self.has_more,
            "transactions": self.items,
        }
