"""Storage provider protocols consumed by the services."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol, TypeVar

from ..models import Category, Goal, Transaction, User, Wallet

if TYPE_CHECKING:  # pragma: no cover
    from ..infra.repositories import (
        SQLModelCategoryRepository,
        SQLModelGoalRepository,
        SQLModelTransactionRepository,
        SQLModelWalletRepository,
    )

T = TypeVar("T")


class StorageUnit(Protocol):
    """Operations available inside one atomic unit."""

    wallets: "SQLModelWalletRepository"
    categories: "SQLModelCategoryRepository"
    transactions: "SQLModelTransactionRepository"
    goals: "SQLModelGoalRepository"

    def find_user(self, user_id: int) -> Optional[User]:
        ...

    def find_user_by_name(self, username: str) -> Optional[User]:
        ...

    def insert_user(self, user: User) -> User:
        ...

    def find_wallet(self, wallet_id: int, owner_id: int, *, lock: bool = False) -> Optional[Wallet]:
        ...

    def find_category(self, category_id: int) -> Optional[Category]:
        ...

    def find_transaction(
        self, transaction_id: int, owner_id: int, *, lock: bool = False
    ) -> Optional[Transaction]:
        ...

    def insert_transaction(self, row: Transaction) -> Transaction:
        ...

    def update_transaction(self, transaction_id: int, patch: dict[str, Any]) -> Transaction:
        ...

    def delete_transaction(self, transaction_id: int) -> None:
        ...

    def adjust_wallet_balance(self, wallet_id: int, delta: Decimal) -> None:
        """Add ``delta`` to the stored balance in a single relative statement."""
        ...

    def find_goal(self, goal_id: int, owner_id: int, *, lock: bool = False) -> Optional[Goal]:
        ...

    def increment_goal(self, goal_id: int, amount: Decimal) -> Goal:
        ...


class StorageProvider(Protocol):
    """Relational store with an all-or-nothing execution primitive."""

    def run_atomic(self, fn: Callable[[StorageUnit], T]) -> T:
        """Run ``fn`` in one transaction: commit on return, roll back on any error."""
        ...
