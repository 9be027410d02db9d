"""Request parsing shared by the API blueprints."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable, Mapping, Optional

from flask import current_app, request

from ..errors import ValidationError


def json_body() -> dict[str, Any]:
    """Return the JSON object body or raise ValidationError."""

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def require(payload: Mapping[str, Any], key: str) -> Any:
    value = payload.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required", details={"field": key})
    return value


def as_int(value: Any, field: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", details={"field": field})
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be an integer", details={"field": field}) from exc


def as_bool(value: Any, field: str) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"1", "true", "yes", "on"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"0", "false", "no", "off"}:
        return False
    raise ValidationError(f"{field} must be a boolean", details={"field": field})


def as_datetime(value: Any, field: str) -> Optional[datetime]:
    """Parse ISO-8601; aware values are normalized to naive UTC."""

    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(
            f"{field} must be an ISO-8601 date or datetime", details={"field": field}
        ) from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def as_date(value: Any, field: str) -> Optional[date]:
    if value is None or value == "":
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as exc:
        raise ValidationError(f"{field} must be an ISO-8601 date", details={"field": field}) from exc


def patch_fields(
    payload: Mapping[str, Any], parsers: Mapping[str, Optional[Callable[[Any, str], Any]]]
) -> dict[str, Any]:
    """Keyword arguments for a patch built from the keys actually present in ``payload``.

    A key that is absent stays out of the result; an explicit null is passed
    through as None so the patch can tell "clear" from "leave alone".
    """

    kwargs: dict[str, Any] = {}
    for key, parse in parsers.items():
        if key not in payload:
            continue
        value = payload[key]
        kwargs[key] = parse(value, key) if parse is not None and value is not None else value
    return kwargs


def page_params() -> tuple[int, int]:
    """Return ``(page, limit)`` from the query string, clamped to configured bounds."""

    page = as_int(request.args.get("page"), "page") or 1
    default_limit = current_app.config.get("DEFAULT_PAGE_SIZE", 10)
    max_limit = current_app.config.get("MAX_PAGE_SIZE", 100)
    limit = as_int(request.args.get("limit"), "limit") or default_limit
    return max(page, 1), min(max(limit, 1), max_limit)
