# vidshare/infra/jwt/flask_jwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException

from vidshare.services._shared.errors import InvalidTokenError, TokenExpiredError
from vidshare.services._shared.ports.token_codec import TokenClaims, TokenCodec, TokenKind


@dataclass(slots=True)
class FlaskJWTTokenCodec(TokenCodec):
    """
    Adapter for Flask-JWT-Extended.

    The library's ``type`` claim carries the token kind and every token gets
    a random ``jti``, so two tokens issued in the same second still differ.
    Signing uses ``JWT_SECRET_KEY`` / ``JWT_ALGORITHM`` from the app config.

    .. note::
       Requires an active Flask app context.
    """

    def issue(self, subject_id: str, kind: TokenKind, ttl: timedelta | None = None) -> str:
        # ``None`` means: use the configured lifetime for this kind.
        if kind is TokenKind.REFRESH:
            token = create_refresh_token(identity=str(subject_id), expires_delta=ttl)
        else:
            token = create_access_token(identity=str(subject_id), expires_delta=ttl)
        return cast(str, token)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = cast(dict[str, Any], decode_token(token))
        except pyjwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except (pyjwt.InvalidTokenError, JWTExtendedException) as exc:
            raise InvalidTokenError() from exc
        return _claims_from(payload)


def _claims_from(payload: dict[str, Any]) -> TokenClaims:
    try:
        subject = payload["sub"]
        kind = TokenKind(payload["type"])
        issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidTokenError("Token is missing required claims") from exc
    if not isinstance(subject, str) or not subject:
        raise InvalidTokenError("Token subject is invalid")
    return TokenClaims(subject_id=subject, kind=kind, issued_at=issued_at, expires_at=expires_at)
