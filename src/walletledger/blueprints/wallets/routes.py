"""Wallet routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_services
from ...identity import current_user_id
from ...services.wallets import WalletInput, WalletPatch
from .._helpers import as_bool, json_body, require
from . import bp


@bp.get("")
def list_wallets():
    result = get_services().wallets.list_wallets(current_user_id())
    return jsonify({"status": "success", **result})


@bp.get("/<int:wallet_id>")
def get_wallet(wallet_id: int):
    wallet = get_services().wallets.get_wallet(wallet_id, current_user_id())
    return jsonify({"status": "success", "wallet": wallet})


@bp.post("")
def create_wallet():
    owner_id = current_user_id()
    body = json_body()
    data = WalletInput(
        name=require(body, "name"),
        wallet_type=body.get("wallet_type") or "cash",
        balance=body.get("balance", 0),
        is_default=bool(as_bool(body.get("is_default"), "is_default")),
        icon=body.get("icon"),
        color=body.get("color"),
    )
    wallet = get_services().wallets.create_wallet(owner_id, data)
    return jsonify({"status": "success", "wallet": wallet}), 201


@bp.patch("/<int:wallet_id>")
def update_wallet(wallet_id: int):
    owner_id = current_user_id()
    body = json_body()
    if "balance" in body:
        # the stored balance belongs to the ledger; overrides go through /balance
        body = {key: value for key, value in body.items() if key != "balance"}
    patch = WalletPatch(
        name=body.get("name"),
        wallet_type=body.get("wallet_type"),
        is_default=as_bool(body.get("is_default"), "is_default"),
        icon=body.get("icon"),
        color=body.get("color"),
    )
    wallet = get_services().wallets.update_wallet(wallet_id, owner_id, patch)
    return jsonify({"status": "success", "wallet": wallet})


@bp.patch("/<int:wallet_id>/balance")
def set_wallet_balance(wallet_id: int):
    """Explicitly override a wallet balance (manual reconciliation)."""

    owner_id = current_user_id()
    body = json_body()
    wallet = get_services().wallets.set_balance(wallet_id, owner_id, require(body, "balance"))
    return jsonify({"status": "success", "wallet": wallet})


@bp.delete("/<int:wallet_id>")
def delete_wallet(wallet_id: int):
    result = get_services().wallets.delete_wallet(wallet_id, current_user_id())
    return jsonify({"status": "success", **result})
