"""Wallet management outside the ledger engine's balance bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ..domain.ledger import ZERO, to_amount
from ..domain.storage import StorageProvider, StorageUnit
from ..errors import ConflictError, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models import Wallet
from ..models.wallet import WALLET_TYPES
from .records import wallet_record

logger = get_logger("wallets")


def _validate_wallet_type(value: str) -> str:
    if value not in WALLET_TYPES:
        raise ValidationError(
            f"Invalid wallet type: {value!r}",
            details={"field": "wallet_type", "allowed": list(WALLET_TYPES)},
        )
    return value


@dataclass
class WalletInput:
    name: str
    wallet_type: str = "cash"
    balance: Decimal = ZERO
    is_default: bool = False
    icon: Optional[str] = None
    color: Optional[str] = None

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("name is required", details={"field": "name"})
        _validate_wallet_type(self.wallet_type)
        self.balance = to_amount(self.balance, field_name="balance")


@dataclass
class WalletPatch:
    """Descriptive fields only; the balance is never patched here."""

    name: Optional[str] = None
    wallet_type: Optional[str] = None
    is_default: Optional[bool] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    def __post_init__(self) -> None:
        if self.name is not None:
            self.name = self.name.strip()
            if not self.name:
                raise ValidationError("name cannot be blank", details={"field": "name"})
        if self.wallet_type is not None:
            _validate_wallet_type(self.wallet_type)

    def supplied(self) -> dict[str, Any]:
        return {key: value for key, value in vars(self).items() if value is not None}


class WalletService:
    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def _require(self, unit: StorageUnit, wallet_id: int, owner_id: int) -> Wallet:
        wallet = unit.find_wallet(wallet_id, owner_id, lock=True)
        if wallet is None:
            raise NotFoundError.for_entity("Wallet", wallet_id)
        return wallet

    def list_wallets(self, owner_id: int) -> dict[str, Any]:
        """All wallets of the user plus the sum of their balances."""

        def _read(unit: StorageUnit) -> dict[str, Any]:
            wallets = unit.wallets.list_for_user(owner_id)
            return {
                "count": len(wallets),
                "total_balance": sum((w.balance for w in wallets), ZERO),
                "wallets": [wallet_record(w) for w in wallets],
            }

        return self.storage.run_atomic(_read)

    def get_wallet(self, wallet_id: int, owner_id: int) -> dict[str, Any]:
        return self.storage.run_atomic(
            lambda unit: wallet_record(self._require(unit, wallet_id, owner_id))
        )

    def create_wallet(self, owner_id: int, data: WalletInput) -> dict[str, Any]:
        """Create a wallet; the user's first wallet always becomes the default."""

        def _create(unit: StorageUnit) -> dict[str, Any]:
            is_default = data.is_default or unit.wallets.count_for_user(owner_id) == 0
            if is_default:
                unit.wallets.clear_default(owner_id)
            wallet = Wallet(
                user_id=owner_id,
                name=data.name,
                wallet_type=data.wallet_type,
                balance=data.balance,
                is_default=is_default,
            )
            if data.icon:
                wallet.icon = data.icon
            if data.color:
                wallet.color = data.color
            return wallet_record(unit.wallets.add(wallet))

        record = self.storage.run_atomic(_create)
        logger.info("Wallet created", extra={"user_id": owner_id, "wallet_id": record["id"]})
        return record

    def update_wallet(self, wallet_id: int, owner_id: int, patch: WalletPatch) -> dict[str, Any]:
        changes = patch.supplied()

        def _update(unit: StorageUnit) -> dict[str, Any]:
            wallet = self._require(unit, wallet_id, owner_id)
            if changes.get("is_default"):
                unit.wallets.clear_default(owner_id, except_id=wallet_id)
            for key, value in changes.items():
                setattr(wallet, key, value)
            return wallet_record(unit.wallets.add(wallet))

        return self.storage.run_atomic(_update)

    def set_balance(self, wallet_id: int, owner_id: int, balance: Any) -> dict[str, Any]:
        """Overwrite the stored balance, establishing a new baseline."""

        value = to_amount(balance, field_name="balance")

        def _override(unit: StorageUnit) -> tuple[dict[str, Any], Decimal]:
            wallet = self._require(unit, wallet_id, owner_id)
            previous = wallet.balance
            return wallet_record(unit.wallets.set_balance(wallet, value)), previous

        record, previous = self.storage.run_atomic(_override)
        logger.warning(
            "Wallet balance overridden",
            extra={
                "user_id": owner_id,
                "wallet_id": wallet_id,
                "previous": str(previous),
                "balance": str(value),
            },
        )
        return record

    def delete_wallet(self, wallet_id: int, owner_id: int) -> dict[str, Any]:
        """Delete an empty wallet that is not the user's last one."""

        def _delete(unit: StorageUnit) -> None:
            wallet = self._require(unit, wallet_id, owner_id)
            if unit.transactions.count_for_wallet(wallet_id) > 0:
                raise ConflictError(
                    "Cannot delete a wallet that still has transactions",
                    details={"wallet_id": wallet_id},
                )
            if unit.wallets.count_for_user(owner_id) == 1:
                raise ConflictError("Cannot delete the only wallet", details={"wallet_id": wallet_id})
            was_default = wallet.is_default
            unit.wallets.delete(wallet)
            if was_default:
                successor = unit.wallets.first_other(owner_id, exclude_id=wallet_id)
                if successor is not None:
                    successor.is_default = True
                    unit.wallets.add(successor)

        self.storage.run_atomic(_delete)
        logger.info("Wallet deleted", extra={"user_id": owner_id, "wallet_id": wallet_id})
        return {"deleted": True, "id": wallet_id}
