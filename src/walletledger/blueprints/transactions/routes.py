"""Transaction routes."""

from __future__ import annotations

from datetime import date

from flask import jsonify, request

from ...domain.ledger import TransactionFilters, TransactionInput, TransactionPatch
from ...extensions import get_services
from ...identity import current_user_id
from .._helpers import as_datetime, as_int, json_body, page_params, patch_fields, require
from . import bp


@bp.get("")
def list_transactions():
    """List the caller's transactions with filters and pagination."""

    owner_id = current_user_id()
    args = request.args
    page, limit = page_params()
    filters = TransactionFilters(
        start_date=as_datetime(args.get("start_date"), "start_date"),
        end_date=as_datetime(args.get("end_date"), "end_date"),
        transaction_type=args.get("type") or None,
        category_id=as_int(args.get("category_id"), "category_id"),
        wallet_id=as_int(args.get("wallet_id"), "wallet_id"),
        min_amount=args.get("min_amount") or None,
        max_amount=args.get("max_amount") or None,
        search=args.get("search"),
        page=page,
        limit=limit,
    )
    result = get_services().ledger.list_transactions(owner_id, filters)
    return jsonify({"status": "success", **result.to_dict()})


@bp.get("/<int:transaction_id>")
def get_transaction(transaction_id: int):
    transaction = get_services().ledger.get_transaction(transaction_id, current_user_id())
    return jsonify({"status": "success", "transaction": transaction})


@bp.post("")
def create_transaction():
    owner_id = current_user_id()
    body = json_body()
    data = TransactionInput(
        wallet_id=as_int(require(body, "wallet_id"), "wallet_id"),
        category_id=as_int(require(body, "category_id"), "category_id"),
        amount=require(body, "amount"),
        transaction_type=require(body, "transaction_type"),
        transaction_date=as_datetime(require(body, "transaction_date"), "transaction_date"),
        description=body.get("description") or "",
        notes=body.get("notes"),
    )
    transaction = get_services().ledger.create_transaction(owner_id, data)
    return jsonify({"status": "success", "transaction": transaction}), 201


@bp.patch("/<int:transaction_id>")
def update_transaction(transaction_id: int):
    owner_id = current_user_id()
    body = json_body()
    patch = TransactionPatch(
        **patch_fields(
            body,
            {
                "wallet_id": as_int,
                "category_id": as_int,
                "amount": None,
                "transaction_type": None,
                "transaction_date": as_datetime,
                "description": None,
                "notes": None,
            },
        )
    )
    transaction = get_services().ledger.update_transaction(transaction_id, owner_id, patch)
    return jsonify({"status": "success", "transaction": transaction})


@bp.delete("/<int:transaction_id>")
def delete_transaction(transaction_id: int):
    result = get_services().ledger.delete_transaction(transaction_id, current_user_id())
    return jsonify({"status": "success", **result})


@bp.get("/summary/monthly")
def monthly_summary():
    owner_id = current_user_id()
    today = date.today()
    year = as_int(request.args.get("year"), "year") or today.year
    month = as_int(request.args.get("month"), "month") or today.month
    summary = get_services().reports.monthly_summary(owner_id, year, month)
    return jsonify({"status": "success", "summary": summary})


@bp.get("/summary/categories")
def category_summary():
    owner_id = current_user_id()
    args = request.args
    summary = get_services().reports.category_summary(
        owner_id,
        start_date=as_datetime(args.get("start_date"), "start_date"),
        end_date=as_datetime(args.get("end_date"), "end_date"),
        transaction_type=args.get("type") or "expense",
    )
    return jsonify({"status": "success", "summary": summary})
