"""SQLModel-backed storage provider with an all-or-nothing unit of work."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..errors import LedgerError, StorageError
from ..logging_config import get_logger
from ..models import Category, Goal, Transaction, User, Wallet
from .database import SessionFactory
from .repositories import (
    SQLModelCategoryRepository,
    SQLModelGoalRepository,
    SQLModelTransactionRepository,
    SQLModelWalletRepository,
)

T = TypeVar("T")

logger = get_logger("storage")


class SQLModelUnit:
    """Repositories and row operations sharing one session and one transaction."""

    def __init__(self, session: Session):
        self.session = session
        self.wallets = SQLModelWalletRepository(session)
        self.categories = SQLModelCategoryRepository(session)
        self.transactions = SQLModelTransactionRepository(session)
        self.goals = SQLModelGoalRepository(session)

    def find_user(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def find_user_by_name(self, username: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.username == username)).first()

    def insert_user(self, user: User) -> User:
        self.session.add(user)
        self.session.flush()
        self.session.refresh(user)
        return user

    def find_wallet(self, wallet_id: int, owner_id: int, *, lock: bool = False) -> Optional[Wallet]:
        return self.wallets.get(wallet_id, user_id=owner_id, lock=lock)

    def find_category(self, category_id: int) -> Optional[Category]:
        return self.categories.get(category_id)

    def find_transaction(
        self, transaction_id: int, owner_id: int, *, lock: bool = False
    ) -> Optional[Transaction]:
        return self.transactions.get(transaction_id, user_id=owner_id, lock=lock)

    def insert_transaction(self, row: Transaction) -> Transaction:
        return self.transactions.add(row)

    def update_transaction(self, transaction_id: int, patch: dict[str, Any]) -> Transaction:
        row = self.session.get(Transaction, transaction_id)
        if row is None:
            raise StorageError(f"Transaction {transaction_id} vanished during update")
        return self.transactions.apply_patch(row, patch)

    def delete_transaction(self, transaction_id: int) -> None:
        row = self.session.get(Transaction, transaction_id)
        if row is None:
            raise StorageError(f"Transaction {transaction_id} vanished during delete")
        self.transactions.delete(row)

    def adjust_wallet_balance(self, wallet_id: int, delta: Decimal) -> None:
        self.wallets.adjust_balance(wallet_id, delta)

    def find_goal(self, goal_id: int, owner_id: int, *, lock: bool = False) -> Optional[Goal]:
        return self.goals.get(goal_id, user_id=owner_id, lock=lock)

    def increment_goal(self, goal_id: int, amount: Decimal) -> Goal:
        return self.goals.increment(goal_id, amount)


class SQLModelStorage:
    """Storage provider handing each callable a fresh unit inside one transaction."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        unit_factory: Callable[[Session], SQLModelUnit] = SQLModelUnit,
    ):
        self.session_factory = session_factory
        self.unit_factory = unit_factory

    def run_atomic(self, fn: Callable[[SQLModelUnit], T]) -> T:
        """Run ``fn`` in one transaction: commit on return, roll back on any error.

        Domain errors propagate unchanged. Driver and ORM failures surface as
        ``StorageError`` once the rollback has happened; nothing is retried.
        """
        try:
            with self.session_factory() as session:
                return fn(self.unit_factory(session))
        except LedgerError:
            raise
        except SQLAlchemyError as exc:
            logger.error(
                "Atomic unit rolled back",
                exc_info=True,
                extra={"error_type": type(exc).__name__},
            )
            raise StorageError("Storage operation failed; no changes were saved") from exc
