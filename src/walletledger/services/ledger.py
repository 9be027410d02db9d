"""Ledger engine: transaction mutations that keep wallet balances exact.

Every mutation runs as a single atomic unit against the injected storage
provider. Balance changes are issued as relative deltas, never as
read-modify-write, so concurrent writers on one wallet cannot lose updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..domain.ledger import (
    ZERO,
    TransactionFilters,
    TransactionInput,
    TransactionPage,
    TransactionPatch,
    signed_amount,
)
from ..domain.storage import StorageProvider, StorageUnit
from ..errors import NotFoundError
from ..logging_config import get_logger
from ..models import Transaction
from .records import transaction_record

logger = get_logger("ledger")


class LedgerEngine:
    """Create, update and delete transactions while maintaining wallet balances."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    # -- reads ---------------------------------------------------------------

    def get_transaction(self, transaction_id: int, owner_id: int) -> dict[str, Any]:
        def _read(unit: StorageUnit) -> dict[str, Any]:
            row = unit.find_transaction(transaction_id, owner_id)
            if row is None:
                raise NotFoundError.for_entity("Transaction", transaction_id)
            return transaction_record(row)

        return self.storage.run_atomic(_read)

    def list_transactions(self, owner_id: int, filters: TransactionFilters) -> TransactionPage:
        def _read(unit: StorageUnit) -> TransactionPage:
            rows, total = unit.transactions.search(filters, user_id=owner_id)
            return TransactionPage(
                items=[transaction_record(row) for row in rows],
                total=total,
                page=filters.page,
                limit=filters.limit,
            )

        return self.storage.run_atomic(_read)

    # -- mutations -----------------------------------------------------------

    def create_transaction(self, owner_id: int, data: TransactionInput) -> dict[str, Any]:
        """Insert a transaction and apply its signed amount to the wallet."""

        def _create(unit: StorageUnit) -> dict[str, Any]:
            if unit.find_wallet(data.wallet_id, owner_id, lock=True) is None:
                raise NotFoundError.for_entity("Wallet", data.wallet_id)
            if unit.find_category(data.category_id) is None:
                raise NotFoundError.for_entity("Category", data.category_id)

            row = unit.insert_transaction(
                Transaction(
                    user_id=owner_id,
                    wallet_id=data.wallet_id,
                    category_id=data.category_id,
                    amount=data.amount,
                    transaction_type=data.transaction_type,
                    transaction_date=data.transaction_date,
                    description=data.description,
                    notes=data.notes,
                )
            )
            delta = signed_amount(data.amount, data.transaction_type)
            if delta != ZERO:
                unit.adjust_wallet_balance(data.wallet_id, delta)
            return transaction_record(row)

        record = self.storage.run_atomic(_create)
        logger.info(
            "Transaction created",
            extra={
                "user_id": owner_id,
                "transaction_id": record["id"],
                "wallet_id": data.wallet_id,
                "delta": str(signed_amount(data.amount, data.transaction_type)),
            },
        )
        return record

    def update_transaction(
        self, transaction_id: int, owner_id: int, patch: TransactionPatch
    ) -> dict[str, Any]:
        """Reverse the stored effect, apply the patched effect, persist the row."""

        changes = patch.supplied()

        def _update(unit: StorageUnit) -> dict[str, Any]:
            before = unit.find_transaction(transaction_id, owner_id, lock=True)
            if before is None:
                raise NotFoundError.for_entity("Transaction", transaction_id)

            old_wallet_id = before.wallet_id
            old_effect = signed_amount(before.amount, before.transaction_type)
            new_wallet_id = changes.get("wallet_id", old_wallet_id)
            new_effect = signed_amount(
                changes.get("amount", before.amount),
                changes.get("transaction_type", before.transaction_type),
            )

            # Preconditions first, so a failure leaves nothing to roll back.
            wallet_ids = sorted({old_wallet_id, new_wallet_id})
            for wallet_id in wallet_ids:
                if unit.find_wallet(wallet_id, owner_id, lock=True) is None:
                    raise NotFoundError.for_entity("Wallet", wallet_id)
            if "category_id" in changes and changes["category_id"] != before.category_id:
                if unit.find_category(changes["category_id"]) is None:
                    raise NotFoundError.for_entity("Category", changes["category_id"])

            if new_wallet_id != old_wallet_id:
                if old_effect != ZERO:
                    unit.adjust_wallet_balance(old_wallet_id, -old_effect)
                if new_effect != ZERO:
                    unit.adjust_wallet_balance(new_wallet_id, new_effect)
            elif new_effect != old_effect:
                unit.adjust_wallet_balance(old_wallet_id, new_effect - old_effect)

            row = unit.update_transaction(transaction_id, changes)
            return transaction_record(row)

        record = self.storage.run_atomic(_update)
        logger.info(
            "Transaction updated",
            extra={
                "user_id": owner_id,
                "transaction_id": transaction_id,
                "fields": sorted(changes),
            },
        )
        return record

    def delete_transaction(self, transaction_id: int, owner_id: int) -> dict[str, Any]:
        """Reverse the transaction's effect on its wallet, then remove the row."""

        def _delete(unit: StorageUnit) -> Decimal:
            row = unit.find_transaction(transaction_id, owner_id, lock=True)
            if row is None:
                raise NotFoundError.for_entity("Transaction", transaction_id)
            effect = signed_amount(row.amount, row.transaction_type)
            if effect != ZERO:
                unit.adjust_wallet_balance(row.wallet_id, -effect)
            unit.delete_transaction(transaction_id)
            return effect

        reversed_effect = self.storage.run_atomic(_delete)
        logger.info(
            "Transaction deleted",
            extra={
                "user_id": owner_id,
                "transaction_id": transaction_id,
                "delta": str(-reversed_effect),
            },
        )
        return {"deleted": True, "id": transaction_id}
