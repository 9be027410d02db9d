"""SQLModel implementation of the wallet repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ...errors import StorageError
from ...models.wallet import Wallet
from ._relative import increment_column


class SQLModelWalletRepository:
    """Wallet queries bound to the session of the current unit."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, wallet_id: int, *, user_id: int, lock: bool = False) -> Optional[Wallet]:
        """Retrieve a wallet owned by ``user_id``."""
        statement = select(Wallet).where(Wallet.id == wallet_id).where(Wallet.user_id == user_id)
        if lock:
            statement = statement.with_for_update()
        return self.session.exec(statement).first()

    def list_for_user(self, user_id: int) -> list[Wallet]:
        """Default wallet first, then oldest first."""
        statement = (
            select(Wallet)
            .where(Wallet.user_id == user_id)
            .order_by(Wallet.is_default.desc(), Wallet.created_at, Wallet.id)  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def count_for_user(self, user_id: int) -> int:
        statement = select(func.count()).select_from(Wallet).where(Wallet.user_id == user_id)
        return int(self.session.exec(statement).one())

    def add(self, wallet: Wallet) -> Wallet:
        self.session.add(wallet)
        self.session.flush()
        self.session.refresh(wallet)
        return wallet

    def clear_default(self, user_id: int, *, except_id: Optional[int] = None) -> None:
        """Unset the default flag on every other wallet of the user."""
        statement = (
            select(Wallet)
            .where(Wallet.user_id == user_id)
            .where(Wallet.is_default.is_(True))  # type: ignore
        )
        for wallet in self.session.exec(statement).all():
            if except_id is not None and wallet.id == except_id:
                continue
            wallet.is_default = False
            self.session.add(wallet)
        self.session.flush()

    def adjust_balance(self, wallet_id: int, delta: Decimal) -> None:
        matched = increment_column(self.session, Wallet, wallet_id, "balance", delta)
        if matched != 1:
            raise StorageError(f"Wallet {wallet_id} vanished during balance update")

    def set_balance(self, wallet: Wallet, balance: Decimal) -> Wallet:
        wallet.balance = balance
        self.session.add(wallet)
        self.session.flush()
        self.session.refresh(wallet)
        return wallet

    def first_other(self, user_id: int, *, exclude_id: int) -> Optional[Wallet]:
        statement = (
            select(Wallet)
            .where(Wallet.user_id == user_id)
            .where(Wallet.id != exclude_id)
            .order_by(Wallet.created_at, Wallet.id)  # type: ignore
        )
        return self.session.exec(statement).first()

    def delete(self, wallet: Wallet) -> None:
        self.session.delete(wallet)
        self.session.flush()
