"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never import Flask or HTTP
helpers. Each carries a stable machine ``code``; the translation to RFC 7807
responses is done once, in ``vidshare/core/errors.py``.

Families
--------
- Authentication (:class:`AuthenticationError`): the caller is not who it
  claims, or presented the wrong kind of token.
- Authorization (:class:`AuthorizationError`): identified but not allowed.
- Conflict, not-found and validation errors: the request itself is wrong.
- Infrastructure (:class:`InfrastructureError`): the system is unhealthy.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str, *, column: str | None = None) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL/MySQL messages name the constraint; SQLite only reports the
    offending ``table.column``, which ``column`` matches.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Database constraint name (e.g. ``uq_accounts_email``).
    :param column: Optional ``table.column`` fallback marker.
    :returns: ``True`` if the error matches.
    """
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    if constraint_name.lower() in message:
        return True
    return column is not None and column.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``code`` is a stable snake_case identifier exposed to clients.
    """

    code = "service_error"
    default_message = "Service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    code = "unauthenticated"
    default_message = "Authentication required"


class UnauthenticatedError(AuthenticationError):
    """Missing/malformed bearer header or an identity that cannot be resolved."""


class InvalidTokenError(UnauthenticatedError):
    """Signature, structure or claims of a token are invalid."""

    code = "invalid_token"
    default_message = "Invalid token"


class TokenExpiredError(AuthenticationError):
    """A well-formed, correctly signed token past its ``exp``."""

    code = "token_expired"
    default_message = "Token has expired"


class AccessTokenRequiredError(AuthenticationError):
    """A refresh token was presented where an access token is needed."""

    code = "access_token_required"
    default_message = "Access token required"


class RefreshTokenRequiredError(AuthenticationError):
    """An access token was presented to the refresh endpoint."""

    code = "refresh_token_required"
    default_message = "Refresh token required"


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password; the two are indistinguishable."""

    code = "invalid_credentials"
    default_message = "Invalid email or password"


class InvalidRefreshTokenError(AuthenticationError):
    """The presented refresh token is not the account's live one."""

    code = "invalid_refresh_token"
    default_message = "Refresh token is no longer valid. Please sign in."


# --------------------------------------------------------------------------- #
# Authorization
# --------------------------------------------------------------------------- #


class AuthorizationError(ServiceError):
    code = "forbidden"
    default_message = "Forbidden"


class RoleDeniedError(AuthorizationError):
    code = "role_denied"
    default_message = "Insufficient privileges"


# --------------------------------------------------------------------------- #
# Request errors
# --------------------------------------------------------------------------- #


class ConflictError(ServiceError):
    code = "conflict"
    default_message = "Conflict"


class DuplicateAccountError(ConflictError):
    code = "duplicate_account"
    default_message = "An account with this email already exists"


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found.

    :param entity: Entity name (e.g., "Video").
    :param key: Identifier or search key.
    """

    code = "not_found"

    def __init__(self, entity: str, key: str | int) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class OwnerNotFoundError(NotFoundError):
    code = "owner_not_found"

    def __init__(self, key: str) -> None:
        super().__init__("Account", key)


class ValidationFailedError(ServiceError):
    code = "validation_error"
    default_message = "Validation failed"


class PayloadTooLargeError(ValidationFailedError):
    code = "payload_too_large"
    default_message = "Uploaded file is too large"


class UnsupportedMediaTypeError(ValidationFailedError):
    code = "unsupported_media_type"
    default_message = "Unsupported file type"


# --------------------------------------------------------------------------- #
# Infrastructure
# --------------------------------------------------------------------------- #


class InfrastructureError(ServiceError):
    code = "infrastructure_error"
    default_message = "Internal infrastructure failure"


class ResourceUnavailableError(InfrastructureError):
    """No transactional handle could be acquired (pool exhausted)."""

    code = "resource_unavailable"
    default_message = "Service temporarily unavailable"


class BlobStoreError(InfrastructureError):
    code = "blob_store_error"
    default_message = "Video storage failure"
