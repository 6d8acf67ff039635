from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from vidshare.services._shared.errors import InvalidTokenError, TokenExpiredError


class TokenKind(str, enum.Enum):
    """Bearer token kinds; never interchangeable."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified content of a bearer token.

    :ivar subject_id: Account id (``sub``).
    :ivar kind: :class:`TokenKind` of the token.
    :ivar issued_at: ``iat`` as an aware UTC datetime.
    :ivar expires_at: ``exp`` as an aware UTC datetime.
    """

    subject_id: str
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime


class TokenCodec(Protocol):
    """Port for issuing and verifying signed bearer tokens.

    Verification is self-contained (signature + expiry). ``decode`` raises
    :class:`TokenExpiredError` for a well-formed but expired token and
    :class:`InvalidTokenError` for everything else, so callers can tell the
    two apart.
    """

    def issue(self, subject_id: str, kind: TokenKind, ttl: timedelta | None = None) -> str: ...

    def decode(self, token: str) -> TokenClaims: ...


class StubTokenCodec(TokenCodec):
    """Deterministic, unsigned codec used in unit tests."""

    def __init__(
        self,
        *,
        access_ttl: timedelta = timedelta(days=1),
        refresh_ttl: timedelta = timedelta(days=30),
    ) -> None:
        self._ttl = {TokenKind.ACCESS: access_ttl, TokenKind.REFRESH: refresh_ttl}
        self._seq = itertools.count(1)
        self._issued: dict[str, TokenClaims] = {}

    def issue(self, subject_id: str, kind: TokenKind, ttl: timedelta | None = None) -> str:
        now = datetime.now(UTC)
        token = f"{kind.value}.{subject_id}.{next(self._seq)}"
        self._issued[token] = TokenClaims(
            subject_id=subject_id,
            kind=kind,
            issued_at=now,
            expires_at=now + (ttl if ttl is not None else self._ttl[kind]),
        )
        return token

    def decode(self, token: str) -> TokenClaims:
        claims = self._issued.get(token)
        if claims is None:
            raise InvalidTokenError()
        if claims.expires_at <= datetime.now(UTC):
            raise TokenExpiredError()
        return claims
