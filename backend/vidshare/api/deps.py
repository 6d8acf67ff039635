"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from vidshare.api.gate import parse_bearer
from vidshare.core.container import ServiceContainer, get_container
from vidshare.schemas.common import PaginationQuerySchema
from vidshare.services._shared.errors import UnauthenticatedError

F = TypeVar("F", bound=Callable[..., Any])

pagination_schema = PaginationQuerySchema()


def services() -> ServiceContainer:
    return get_container()


def current_subject_id() -> str:
    """Subject id attached by the authorization gate."""
    subject_id = g.get("subject_id")
    if not subject_id:
        raise UnauthenticatedError()
    return subject_id


def current_bearer_token() -> str:
    token = parse_bearer(request.headers.get("Authorization"))
    if token is None:
        raise UnauthenticatedError("Missing or malformed Authorization header")
    return token


def parse_pagination() -> tuple[int, int]:
    """Return ``(page, size)`` from the query string."""
    data = pagination_schema.load(request.args)
    return data["page"], data["size"]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
