"""API blueprints and the authorization gate hook."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from flask import Blueprint, Flask, g, request

from vidshare.api.gate import GateState, decide
from vidshare.api.policies import policy_for
from vidshare.core.container import get_container

log = logging.getLogger(__name__)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register related blueprints beneath a common prefix.

    Parameters
    ----------
    app:
        Application instance receiving the blueprints.
    base_prefix:
        Prefix applied to all entries, e.g. ``"/api"``.
    entries:
        Iterable of ``(blueprint, relative_prefix)`` pairs.
    """

    for bp, rel_prefix in entries:
        full_prefix = "/".join(
            segment for segment in [base_prefix.rstrip("/"), rel_prefix.strip("/")] if segment
        )
        full_prefix = "/" + full_prefix if not full_prefix.startswith("/") else full_prefix
        app.register_blueprint(bp, url_prefix=full_prefix)


def authorize_request():
    """``before_request`` hook running the gate for the matched endpoint.

    Unmatched URLs (404/405) and CORS preflights are left to Flask.
    """
    g.pop("subject_id", None)
    endpoint = request.endpoint
    if endpoint is None or endpoint == "static" or request.method == "OPTIONS":
        return None

    container = get_container()
    decision = decide(
        policy_for(endpoint),
        request.headers.get("Authorization"),
        codec=container.token_codec,
        privilege_of=container.account_service().privilege_of,
    )
    g.gate_state = decision.state
    if decision.error is not None:
        log.warning(
            "Request denied: %s",
            decision.error.code,
            extra={"gate_state": decision.state.value, "endpoint": endpoint},
        )
        raise decision.error
    if decision.state is GateState.ALLOWED:
        g.subject_id = decision.subject_id
    return None


def init_app(app: Flask) -> None:
    """Register the API blueprints and the gate on the Flask app."""

    from vidshare.api.auth import bp as auth_bp
    from vidshare.api.users import bp as users_bp
    from vidshare.api.videos import bp as videos_bp

    registry: list[tuple[Blueprint, str]] = [
        (auth_bp, "/auth"),
        (videos_bp, "/videos"),
        (users_bp, "/users"),
    ]
    register_blueprint_group(
        app, base_prefix=app.config.get("API_BASE_PREFIX", "/api"), entries=registry
    )
    app.before_request(authorize_request)


__all__ = ["authorize_request", "init_app", "register_blueprint_group"]
