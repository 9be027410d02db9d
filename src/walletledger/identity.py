"""Identity context: the caller's user id as vouched for upstream."""

from __future__ import annotations

from flask import current_app, g, request

from .errors import AuthenticationError
from .extensions import get_services


def current_user_id() -> int:
    """Return the authenticated user id for this request.

    An authenticating proxy in front of the app sets the identity header;
    this layer only parses it and checks that the owner row exists.
    """

    cached = g.get("walletledger_user_id")
    if cached is not None:
        return cached

    header = current_app.config.get("IDENTITY_HEADER", "X-User-Id")
    raw = request.headers.get(header, "").strip()
    if not raw:
        raise AuthenticationError("Authentication required")
    try:
        user_id = int(raw)
    except ValueError as exc:
        raise AuthenticationError("Malformed identity header") from exc
    if user_id < 1 or not get_services().users.exists(user_id):
        raise AuthenticationError("Unknown user")

    g.walletledger_user_id = user_id
    return user_id
