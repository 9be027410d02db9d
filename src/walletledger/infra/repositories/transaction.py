"""SQLModel implementation of the transaction repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ...domain.ledger import TransactionFilters
from ...models.transaction import Transaction


class SQLModelTransactionRepository:
    """Transaction queries bound to the session of the current unit."""

    def __init__(self, session: Session):
        self.session = session

    def get(
        self, transaction_id: int, *, user_id: int, lock: bool = False
    ) -> Optional[Transaction]:
        """Retrieve a transaction owned by ``user_id``."""
        statement = (
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .where(Transaction.user_id == user_id)
        )
        if lock:
            statement = statement.with_for_update()
        return self.session.exec(statement).first()

    def add(self, transaction: Transaction) -> Transaction:
        self.session.add(transaction)
        self.session.flush()
        self.session.refresh(transaction)
        return transaction

    def apply_patch(self, transaction: Transaction, patch: dict[str, Any]) -> Transaction:
        for key, value in patch.items():
            setattr(transaction, key, value)
        transaction.updated_at = datetime.now(timezone.utc)
        self.session.add(transaction)
        self.session.flush()
        self.session.refresh(transaction)
        return transaction

    def delete(self, transaction: Transaction) -> None:
        self.session.delete(transaction)
        self.session.flush()

    def _filtered(self, statement, filters: TransactionFilters, *, user_id: int):
        statement = statement.where(Transaction.user_id == user_id)
        if filters.start_date is not None:
            statement = statement.where(Transaction.transaction_date >= filters.start_date)
        if filters.end_date is not None:
            statement = statement.where(Transaction.transaction_date <= filters.end_date)
        if filters.transaction_type is not None:
            statement = statement.where(Transaction.transaction_type == filters.transaction_type)
        if filters.category_id is not None:
            statement = statement.where(Transaction.category_id == filters.category_id)
        if filters.wallet_id is not None:
            statement = statement.where(Transaction.wallet_id == filters.wallet_id)
        if filters.min_amount is not None:
            statement = statement.where(Transaction.amount >= filters.min_amount)
        if filters.max_amount is not None:
            statement = statement.where(Transaction.amount <= filters.max_amount)
        if filters.search:
            pattern = f"%{filters.search.lower()}%"
            statement = statement.where(func.lower(Transaction.description).like(pattern))
        return statement

    def search(
        self, filters: TransactionFilters, *, user_id: int
    ) -> tuple[list[Transaction], int]:
        """Return one page of matches (newest first) and the total match count."""
        page_statement = (
            self._filtered(select(Transaction), filters, user_id=user_id)
            .options(selectinload(Transaction.category), selectinload(Transaction.wallet))  # type: ignore
            .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())  # type: ignore
            .offset(filters.offset)
            .limit(filters.limit)
        )
        count_statement = self._filtered(
            select(func.count()).select_from(Transaction), filters, user_id=user_id
        )
        rows = list(self.session.exec(page_statement).all())
        total = int(self.session.exec(count_statement).one())
        return rows, total

    def between(
        self,
        *,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        until: Optional[datetime] = None,
        transaction_type: Optional[str] = None,
    ) -> list[Transaction]:
        """Transactions from ``start`` to ``end`` (exclusive) or ``until`` (inclusive)."""
        statement = select(Transaction).where(Transaction.user_id == user_id)
        if start is not None:
            statement = statement.where(Transaction.transaction_date >= start)
        if end is not None:
            statement = statement.where(Transaction.transaction_date < end)
        if until is not None:
            statement = statement.where(Transaction.transaction_date <= until)
        if transaction_type is not None:
            statement = statement.where(Transaction.transaction_type == transaction_type)
        return list(self.session.exec(statement).all())

    def recent(self, *, user_id: int, limit: int = 10) -> list[Transaction]:
        statement = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .options(selectinload(Transaction.category), selectinload(Transaction.wallet))  # type: ignore
            .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())  # type: ignore
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def count_for_wallet(self, wallet_id: int) -> int:
        statement = (
            select(func.count()).select_from(Transaction).where(Transaction.wallet_id == wallet_id)
        )
        return int(self.session.exec(statement).one())

    def count_for_category(self, category_id: int) -> int:
        statement = (
            select(func.count())
            .select_from(Transaction)
            .where(Transaction.category_id == category_id)
        )
        return int(self.session.exec(statement).one())

