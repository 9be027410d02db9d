"""Category routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import get_services
from ...identity import current_user_id
from ...services.categories import CategoryInput, CategoryPatch
from .._helpers import as_bool, json_body, require
from . import bp


@bp.get("")
def list_categories():
    current_user_id()
    categories = get_services().categories.list_categories(request.args.get("type") or None)
    return jsonify({"status": "success", "count": len(categories), "categories": categories})


@bp.get("/<int:category_id>")
def get_category(category_id: int):
    current_user_id()
    category = get_services().categories.get_category(category_id)
    return jsonify({"status": "success", "category": category})


@bp.post("")
def create_category():
    current_user_id()
    body = json_body()
    data = CategoryInput(
        name=require(body, "name"),
        category_type=body.get("category_type") or "expense",
        icon=body.get("icon"),
        color=body.get("color"),
    )
    category = get_services().categories.create_category(data)
    return jsonify({"status": "success", "category": category}), 201


@bp.patch("/<int:category_id>")
def update_category(category_id: int):
    current_user_id()
    body = json_body()
    patch = CategoryPatch(
        name=body.get("name"),
        category_type=body.get("category_type"),
        icon=body.get("icon"),
        color=body.get("color"),
        is_default=as_bool(body.get("is_default"), "is_default"),
    )
    category = get_services().categories.update_category(category_id, patch)
    return jsonify({"status": "success", "category": category})


@bp.delete("/<int:category_id>")
def delete_category(category_id: int):
    current_user_id()
    result = get_services().categories.delete_category(category_id)
    return jsonify({"status": "success", **result})
