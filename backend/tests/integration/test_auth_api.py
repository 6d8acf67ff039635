from __future__ import annotations

from datetime import timedelta

from tests.factories.account import AccountFactory
from tests.helpers.auth import bearer, signin, signup
from vidshare.services._shared.ports.token_codec import TokenKind


def _problem(resp) -> dict:
    assert resp.mimetype == "application/problem+json"
    return resp.get_json()


class TestSignup:
    def test_created_with_id_and_tokens(self, client):
        body = signup(client, email="new@example.com")

        assert set(body) == {"id", "accessToken", "refreshToken"}

    def test_password_mismatch_is_a_validation_error(self, client):
        resp = client.post(
            "/api/auth/signup",
            json={"email": "a@example.com", "password": "secret123", "passwordConfirm": "other123"},
        )

        assert resp.status_code == 422
        body = _problem(resp)
        assert body["code"] == "validation_error"
        assert "passwordConfirm" in body["details"]["errors"]

    def test_invalid_email_and_short_password(self, client):
        resp = client.post(
            "/api/auth/signup",
            json={"email": "not-an-email", "password": "short", "passwordConfirm": "short"},
        )

        assert resp.status_code == 422
        errors = _problem(resp)["details"]["errors"]
        assert {"email", "password"} <= set(errors)

    def test_duplicate_email_conflicts(self, client):
        signup(client, email="dup@example.com")

        resp = client.post(
            "/api/auth/signup",
            json={"email": "dup@example.com", "password": "pw123456", "passwordConfirm": "pw123456"},
        )

        assert resp.status_code == 409
        assert _problem(resp)["code"] == "duplicate_account"

    def test_public_even_with_a_garbage_header(self, client):
        resp = client.post(
            "/api/auth/signup",
            json={"email": "g@example.com", "password": "pw123456", "passwordConfirm": "pw123456"},
            headers={"Authorization": "Bearer garbage"},
        )

        assert resp.status_code == 201


class TestSignin:
    def test_returns_token_pair(self, client):
        account = AccountFactory(password="correct-horse")

        body = signin(client, account.email, "correct-horse")

        assert set(body) == {"accessToken", "refreshToken"}

    def test_wrong_password_and_unknown_email_look_the_same(self, client):
        account = AccountFactory(password="correct-horse")

        wrong = client.post("/api/auth/signin", json={"email": account.email, "password": "nope"})
        unknown = client.post("/api/auth/signin", json={"email": "ghost@example.com", "password": "nope"})

        assert wrong.status_code == unknown.status_code == 401
        assert _problem(wrong)["code"] == _problem(unknown)["code"] == "invalid_credentials"
        assert wrong.get_json()["detail"] == unknown.get_json()["detail"]


class TestRefresh:
    def test_rotation_invalidates_the_presented_token(self, client):
        first = signup(client)

        resp = client.post("/api/auth/refresh", headers=bearer(first["refreshToken"]))
        assert resp.status_code == 200
        second = resp.get_json()
        assert second["refreshToken"] != first["refreshToken"]

        reused = client.post("/api/auth/refresh", headers=bearer(first["refreshToken"]))
        assert reused.status_code == 401
        assert _problem(reused)["code"] == "invalid_refresh_token"

        again = client.post("/api/auth/refresh", headers=bearer(second["refreshToken"]))
        assert again.status_code == 200

    def test_access_token_is_rejected(self, client):
        tokens = signup(client)

        resp = client.post("/api/auth/refresh", headers=bearer(tokens["accessToken"]))

        assert resp.status_code == 401
        assert _problem(resp)["code"] == "refresh_token_required"

    def test_missing_header(self, client):
        resp = client.post("/api/auth/refresh")

        assert resp.status_code == 401
        assert _problem(resp)["code"] == "unauthenticated"


class TestGateOverHttp:
    def test_refresh_token_cannot_call_protected_routes(self, client):
        tokens = signup(client)

        resp = client.get("/api/videos", headers=bearer(tokens["refreshToken"]))

        assert resp.status_code == 401
        assert _problem(resp)["code"] == "access_token_required"

    def test_expired_access_token(self, client, container):
        tokens = signup(client)
        subject = tokens["id"]
        expired = container.token_codec.issue(subject, TokenKind.ACCESS, ttl=timedelta(seconds=-5))

        resp = client.get("/api/videos", headers=bearer(expired))

        assert resp.status_code == 401
        assert _problem(resp)["code"] == "token_expired"

    def test_malformed_and_forged_tokens(self, client):
        malformed = client.get("/api/videos", headers={"Authorization": "Token abc"})
        forged = client.get("/api/videos", headers=bearer("a.b.c"))

        assert malformed.status_code == forged.status_code == 401
        assert _problem(malformed)["code"] == "unauthenticated"
        assert _problem(forged)["code"] == "invalid_token"

    def test_subject_does_not_leak_between_requests(self, client):
        tokens = signup(client)
        assert client.get("/api/videos", headers=bearer(tokens["accessToken"])).status_code == 200

        resp = client.get("/api/videos")

        assert resp.status_code == 401

    def test_unknown_route_is_not_found_not_unauthorized(self, client):
        resp = client.get("/api/nowhere")

        assert resp.status_code == 404
        assert _problem(resp)["code"] == "not_found"

    def test_preflight_is_not_gated(self, client):
        resp = client.open(
            "/api/videos",
            method="OPTIONS",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert resp.status_code == 200

    def test_problem_body_carries_the_request_id(self, client):
        resp = client.get("/api/videos", headers={"X-Request-ID": "req-123"})

        body = _problem(resp)
        assert body["request_id"] == "req-123"
        assert resp.headers["X-Request-ID"] == "req-123"
        assert body["status"] == 401
        assert body["instance"] == "/api/videos"
