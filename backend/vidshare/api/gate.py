"""Per-request authorization decision.

:func:`decide` is a pure function of the route policy, the raw
``Authorization`` header and two collaborators (token codec, privilege
lookup). It never touches Flask; the HTTP glue in :mod:`vidshare.api` turns
a denial into the matching error response.

Decision order::

    public?  -> PUBLIC_ALLOWED
    header?  -> TOKEN_MISSING
    decode   -> TOKEN_INVALID
    kind     -> KIND_MISMATCH
    roles    -> ROLE_DENIED
             -> ALLOWED
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from vidshare.models.account import Role
from vidshare.services._shared.errors import (
    AccessTokenRequiredError,
    AuthenticationError,
    RefreshTokenRequiredError,
    RoleDeniedError,
    ServiceError,
    UnauthenticatedError,
)
from vidshare.services._shared.ports.token_codec import TokenCodec, TokenKind

log = logging.getLogger(__name__)

PrivilegeLookup = Callable[[str], Role | None]


class GateState(str, enum.Enum):
    UNCHECKED = "unchecked"
    PUBLIC_ALLOWED = "public_allowed"
    TOKEN_MISSING = "token_missing"
    TOKEN_INVALID = "token_invalid"
    KIND_MISMATCH = "kind_mismatch"
    ROLE_DENIED = "role_denied"
    ALLOWED = "allowed"


@dataclass(frozen=True, slots=True)
class RoutePolicy:
    """
    Authorization requirements of one route.

    :param public: Skip every check.
    :param required_roles: Non-empty means the subject's role must be in it.
    :param token_kind: Kind of bearer token the route accepts.
    """

    public: bool = False
    required_roles: frozenset[Role] = field(default_factory=frozenset)
    token_kind: TokenKind = TokenKind.ACCESS


@dataclass(frozen=True, slots=True)
class GateDecision:
    state: GateState
    subject_id: str | None = None
    error: ServiceError | None = None

    @property
    def allowed(self) -> bool:
        return self.state in (GateState.PUBLIC_ALLOWED, GateState.ALLOWED)


def parse_bearer(header: str | None) -> str | None:
    """Extract the token from ``Bearer <token>``; ``None`` if absent or malformed."""
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None
    return parts[1]


def decide(
    policy: RoutePolicy,
    authorization: str | None,
    *,
    codec: TokenCodec,
    privilege_of: PrivilegeLookup,
) -> GateDecision:
    """
    Run the decision sequence for one request.

    :param policy: Policy of the target route.
    :param authorization: Raw ``Authorization`` header value.
    :param codec: Verifies signature and expiry only.
    :param privilege_of: Role lookup, consulted only for role-gated routes.
    :returns: Terminal :class:`GateDecision`; denials carry the error to raise.
    """
    if policy.public:
        return GateDecision(GateState.PUBLIC_ALLOWED)

    token = parse_bearer(authorization)
    if token is None:
        return GateDecision(
            GateState.TOKEN_MISSING,
            error=UnauthenticatedError("Missing or malformed Authorization header"),
        )

    try:
        claims = codec.decode(token)
    except AuthenticationError as exc:
        return GateDecision(GateState.TOKEN_INVALID, error=exc)

    if claims.kind is not policy.token_kind:
        error: ServiceError = (
            RefreshTokenRequiredError()
            if policy.token_kind is TokenKind.REFRESH
            else AccessTokenRequiredError()
        )
        return GateDecision(GateState.KIND_MISMATCH, subject_id=claims.subject_id, error=error)

    if policy.required_roles:
        try:
            role = privilege_of(claims.subject_id)
        except Exception:
            log.error("Privilege lookup failed", exc_info=True)
            return GateDecision(
                GateState.ROLE_DENIED,
                subject_id=claims.subject_id,
                error=UnauthenticatedError("Could not resolve account privileges"),
            )
        if role is None:
            return GateDecision(
                GateState.ROLE_DENIED,
                subject_id=claims.subject_id,
                error=UnauthenticatedError("Account no longer exists"),
            )
        if role not in policy.required_roles:
            return GateDecision(
                GateState.ROLE_DENIED, subject_id=claims.subject_id, error=RoleDeniedError()
            )

    return GateDecision(GateState.ALLOWED, subject_id=claims.subject_id)
