"""Dashboard route."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_services
from ...identity import current_user_id
from . import bp


@bp.get("")
def dashboard():
    data = get_services().reports.dashboard(current_user_id())
    return jsonify({"status": "success", "dashboard": data})
