"""Decision-sequence tests for the authorization gate (no Flask involved)."""

from __future__ import annotations

from datetime import timedelta

import pytest

from vidshare.api.gate import GateState, RoutePolicy, decide, parse_bearer
from vidshare.api.policies import ADMIN_ONLY, PROTECTED, PUBLIC, REFRESH_ONLY, policy_for
from vidshare.models.account import Role
from vidshare.services._shared.errors import (
    AccessTokenRequiredError,
    InvalidTokenError,
    RefreshTokenRequiredError,
    RoleDeniedError,
    TokenExpiredError,
    UnauthenticatedError,
)
from vidshare.services._shared.ports.token_codec import StubTokenCodec, TokenKind


@pytest.fixture()
def codec() -> StubTokenCodec:
    return StubTokenCodec()


def _no_lookup(_subject_id: str):
    raise AssertionError("privilege lookup must not run for this route")


def _header(token: str) -> str:
    return f"Bearer {token}"


class ExplodingCodec(StubTokenCodec):
    def decode(self, token):
        raise AssertionError("public routes must not inspect tokens")


def test_public_route_skips_token_inspection():
    decision = decide(PUBLIC, "Bearer whatever", codec=ExplodingCodec(), privilege_of=_no_lookup)

    assert decision.state is GateState.PUBLIC_ALLOWED
    assert decision.allowed
    assert decision.error is None


@pytest.mark.parametrize("header", [None, "", "Bearer", "Token abc", "Bearer a b", "bearer "])
def test_missing_or_malformed_header(codec, header):
    decision = decide(PROTECTED, header, codec=codec, privilege_of=_no_lookup)

    assert decision.state is GateState.TOKEN_MISSING
    assert isinstance(decision.error, UnauthenticatedError)
    assert not decision.allowed


def test_unknown_token_is_invalid(codec):
    decision = decide(PROTECTED, _header("forged"), codec=codec, privilege_of=_no_lookup)

    assert decision.state is GateState.TOKEN_INVALID
    assert isinstance(decision.error, InvalidTokenError)


def test_expired_token_is_reported_as_expired(codec):
    token = codec.issue("u1", TokenKind.ACCESS, ttl=timedelta(seconds=-1))

    decision = decide(PROTECTED, _header(token), codec=codec, privilege_of=_no_lookup)

    assert decision.state is GateState.TOKEN_INVALID
    assert isinstance(decision.error, TokenExpiredError)


def test_refresh_token_rejected_on_access_route(codec):
    token = codec.issue("u1", TokenKind.REFRESH)

    decision = decide(PROTECTED, _header(token), codec=codec, privilege_of=_no_lookup)

    assert decision.state is GateState.KIND_MISMATCH
    assert isinstance(decision.error, AccessTokenRequiredError)


def test_access_token_rejected_on_refresh_route(codec):
    token = codec.issue("u1", TokenKind.ACCESS)

    decision = decide(REFRESH_ONLY, _header(token), codec=codec, privilege_of=_no_lookup)

    assert decision.state is GateState.KIND_MISMATCH
    assert isinstance(decision.error, RefreshTokenRequiredError)


def test_refresh_token_allowed_on_refresh_route(codec):
    token = codec.issue("u1", TokenKind.REFRESH)

    decision = decide(REFRESH_ONLY, _header(token), codec=codec, privilege_of=_no_lookup)

    assert decision.state is GateState.ALLOWED
    assert decision.subject_id == "u1"


def test_access_token_allowed_without_role_lookup(codec):
    token = codec.issue("u1", TokenKind.ACCESS)

    decision = decide(PROTECTED, _header(token), codec=codec, privilege_of=_no_lookup)

    assert decision.state is GateState.ALLOWED
    assert decision.subject_id == "u1"


def test_role_gate_denies_insufficient_privilege(codec):
    token = codec.issue("u1", TokenKind.ACCESS)

    decision = decide(ADMIN_ONLY, _header(token), codec=codec, privilege_of=lambda _: Role.STANDARD)

    assert decision.state is GateState.ROLE_DENIED
    assert isinstance(decision.error, RoleDeniedError)


def test_role_gate_allows_required_role(codec):
    token = codec.issue("u1", TokenKind.ACCESS)
    seen: list[str] = []

    def lookup(subject_id: str) -> Role:
        seen.append(subject_id)
        return Role.ADMIN

    decision = decide(ADMIN_ONLY, _header(token), codec=codec, privilege_of=lookup)

    assert decision.state is GateState.ALLOWED
    assert seen == ["u1"]


def test_role_lookup_failure_is_unauthenticated_not_allowed(codec):
    token = codec.issue("u1", TokenKind.ACCESS)

    def broken(_subject_id: str):
        raise ConnectionError("db down")

    decision = decide(ADMIN_ONLY, _header(token), codec=codec, privilege_of=broken)

    assert not decision.allowed
    assert type(decision.error) is UnauthenticatedError


def test_role_lookup_for_deleted_account_is_unauthenticated(codec):
    token = codec.issue("ghost", TokenKind.ACCESS)

    decision = decide(ADMIN_ONLY, _header(token), codec=codec, privilege_of=lambda _: None)

    assert not decision.allowed
    assert type(decision.error) is UnauthenticatedError


def test_kind_gate_runs_before_role_gate(codec):
    token = codec.issue("u1", TokenKind.REFRESH)
    policy = RoutePolicy(required_roles=frozenset({Role.ADMIN}))

    decision = decide(policy, _header(token), codec=codec, privilege_of=_no_lookup)

    assert isinstance(decision.error, AccessTokenRequiredError)


def test_policy_table_defaults_to_protected():
    assert policy_for("auth.signup").public
    assert policy_for("auth.refresh").token_kind is TokenKind.REFRESH
    assert policy_for("users.list_users").required_roles == frozenset({Role.ADMIN})
    assert policy_for("some.unlisted_endpoint") == PROTECTED


def test_parse_bearer_is_case_insensitive_on_scheme():
    assert parse_bearer("bearer tok") == "tok"
    assert parse_bearer("Basic tok") is None
