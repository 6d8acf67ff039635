"""Tests for the Flask-JWT-Extended token codec and its in-memory stub."""

from __future__ import annotations

from datetime import timedelta

import jwt as pyjwt
import pytest

from vidshare.infra.jwt import FlaskJWTTokenCodec
from vidshare.services._shared.errors import InvalidTokenError, TokenExpiredError
from vidshare.services._shared.ports.token_codec import StubTokenCodec, TokenKind


@pytest.fixture()
def codec(app) -> FlaskJWTTokenCodec:
    return FlaskJWTTokenCodec()


def test_issue_and_decode_roundtrip_keeps_subject_and_kind(codec):
    token = codec.issue("acc-1", TokenKind.ACCESS)

    claims = codec.decode(token)

    assert claims.subject_id == "acc-1"
    assert claims.kind is TokenKind.ACCESS
    assert claims.expires_at > claims.issued_at


def test_refresh_kind_is_carried_in_the_token(codec):
    claims = codec.decode(codec.issue("acc-1", TokenKind.REFRESH))
    assert claims.kind is TokenKind.REFRESH


def test_default_lifetimes_follow_config(app, codec):
    access = codec.decode(codec.issue("acc-1", TokenKind.ACCESS))
    refresh = codec.decode(codec.issue("acc-1", TokenKind.REFRESH))

    assert access.expires_at - access.issued_at == app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    assert refresh.expires_at - refresh.issued_at == app.config["JWT_REFRESH_TOKEN_EXPIRES"]


def test_tokens_issued_back_to_back_differ(codec):
    assert codec.issue("acc-1", TokenKind.REFRESH) != codec.issue("acc-1", TokenKind.REFRESH)


def test_expired_token_is_distinguishable(codec):
    token = codec.issue("acc-1", TokenKind.ACCESS, ttl=timedelta(seconds=-5))

    with pytest.raises(TokenExpiredError):
        codec.decode(token)


def test_foreign_signature_is_invalid(codec):
    forged = pyjwt.encode(
        {"sub": "acc-1", "type": "access", "iat": 0, "exp": 4102444800, "jti": "x"},
        "some-other-secret-that-is-long-enough-for-hs256",
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        codec.decode(forged)


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
def test_garbage_is_invalid(codec, garbage):
    with pytest.raises(InvalidTokenError):
        codec.decode(garbage)


def test_stub_codec_mirrors_the_contract():
    stub = StubTokenCodec()
    token = stub.issue("acc-9", TokenKind.REFRESH)

    assert stub.decode(token).subject_id == "acc-9"
    with pytest.raises(InvalidTokenError):
        stub.decode("never-issued")
    with pytest.raises(TokenExpiredError):
        stub.decode(stub.issue("acc-9", TokenKind.ACCESS, ttl=timedelta(seconds=-1)))
