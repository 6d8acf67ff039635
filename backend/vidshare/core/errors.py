"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from vidshare.core.logger import ensure_request_id
from vidshare.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InfrastructureError,
    NotFoundError,
    PayloadTooLargeError,
    ResourceUnavailableError,
    ServiceError,
    UnsupportedMediaTypeError,
    ValidationFailedError,
)

log = logging.getLogger(__name__)

# Most specific first; the first matching class wins.
SERVICE_ERROR_STATUS: tuple[tuple[type[ServiceError], HTTPStatus], ...] = (
    (AuthenticationError, HTTPStatus.UNAUTHORIZED),
    (AuthorizationError, HTTPStatus.FORBIDDEN),
    (ConflictError, HTTPStatus.CONFLICT),
    (NotFoundError, HTTPStatus.NOT_FOUND),
    (PayloadTooLargeError, HTTPStatus.REQUEST_ENTITY_TOO_LARGE),
    (UnsupportedMediaTypeError, HTTPStatus.UNSUPPORTED_MEDIA_TYPE),
    (ValidationFailedError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (ResourceUnavailableError, HTTPStatus.SERVICE_UNAVAILABLE),
    (InfrastructureError, HTTPStatus.INTERNAL_SERVER_ERROR),
)


def status_for(err: ServiceError) -> HTTPStatus:
    for cls, status in SERVICE_ERROR_STATUS:
        if isinstance(err, cls):
            return status
    return HTTPStatus.BAD_REQUEST


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthenticated",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        422: "validation_error",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _problem_response(problem: dict[str, Any], status: int) -> tuple[Response, int]:
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp, int(status)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error becomes an RFC 7807 response carrying ``request_id``.
    - 5xx are logged at ERROR with ``exc_info``; 4xx at WARNING without it.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = status_for(err)
        generic_infra = isinstance(err, InfrastructureError) and not isinstance(
            err, ResourceUnavailableError
        )
        code = "infrastructure_error" if generic_infra else err.code
        # Infrastructure details stay in the logs
        message = InfrastructureError.default_message if generic_infra else err.message
        problem = _as_problem(status=status, code=code, message=message)
        if status >= 500:
            log.error(
                "%s: code=%s status=%s",
                type(err).__name__,
                err.code,
                int(status),
                exc_info=err,
                extra={"error_type": type(err).__name__},
            )
        else:
            log.warning(
                "%s: code=%s status=%s msg=%s",
                type(err).__name__,
                err.code,
                int(status),
                err.message,
                extra={"error_type": type(err).__name__},
            )
        return _problem_response(problem, status)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        problem = _as_problem(status=status, code=error_code, message=message)
        level = log.error if status >= 500 else log.warning
        level("HTTPException: code=%s status=%s detail=%s", error_code, status, message)
        return _problem_response(problem, status)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        problem = _as_problem(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )
        log.warning("ValidationError", extra={"error_type": "ValidationError"})
        return _problem_response(problem, HTTPStatus.UNPROCESSABLE_ENTITY)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        problem = _as_problem(
            status=HTTPStatus.CONFLICT,
            code="conflict",
            message="Resource conflict",
        )
        log.error("IntegrityError", exc_info=err)
        return _problem_response(problem, HTTPStatus.CONFLICT)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        problem = _as_problem(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            code="service_unavailable",
            message="Service temporarily unavailable",
        )
        log.error("OperationalError", exc_info=err)
        return _problem_response(problem, HTTPStatus.SERVICE_UNAVAILABLE)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Never leak internal details
        problem = _as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
        )
        log.error("Unhandled exception", exc_info=err)
        return _problem_response(problem, HTTPStatus.INTERNAL_SERVER_ERROR)
