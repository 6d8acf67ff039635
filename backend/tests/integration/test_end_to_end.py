"""Full client journey: signup, rotate, upload, browse, download, admin."""

from __future__ import annotations

from tests.helpers.auth import bearer, signin, signup, upload

CLIP = b"\x00\x00\x00\x18ftypisom" + b"\x01" * 40


def test_full_journey(app, client):
    first = signup(client, email="journey@example.com", password="pw123456")

    # rotating the signup refresh token retires it
    rotated = client.post("/api/auth/refresh", headers=bearer(first["refreshToken"]))
    assert rotated.status_code == 200
    second = rotated.get_json()
    assert second["refreshToken"] != first["refreshToken"]

    stale = client.post("/api/auth/refresh", headers=bearer(first["refreshToken"]))
    assert stale.status_code == 401
    assert stale.get_json()["code"] == "invalid_refresh_token"

    access = second["accessToken"]
    created = upload(client, access, title="Trip", data=CLIP)
    assert created.status_code == 201
    video_id = created.get_json()["id"]

    listing = client.get("/api/videos", headers=bearer(access)).get_json()
    assert [v["id"] for v in listing["items"]] == [video_id]
    assert listing["items"][0]["owner"]["email"] == "journey@example.com"
    before = client.get(f"/api/videos/{video_id}", headers=bearer(access)).get_json()
    assert before["downloadCount"] == 0

    download = client.get(f"/api/videos/{video_id}/download", headers=bearer(access))
    assert download.data == CLIP
    download.close()

    detail = client.get(f"/api/videos/{video_id}", headers=bearer(access)).get_json()
    assert detail["downloadCount"] == 1

    # a fresh signin supersedes the rotated refresh token
    third = signin(client, "journey@example.com", "pw123456")
    assert client.post("/api/auth/refresh", headers=bearer(second["refreshToken"])).status_code == 401
    assert client.post("/api/auth/refresh", headers=bearer(third["refreshToken"])).status_code == 200

    # admin routes open up only after promotion through the CLI
    assert client.get("/api/users", headers=bearer(access)).status_code == 403
    result = app.test_cli_runner().invoke(args=["accounts", "promote", "journey@example.com"])
    assert result.exit_code == 0, result.output
    users = client.get("/api/users", headers=bearer(access))
    assert users.status_code == 200
    assert users.get_json()["items"][0]["role"] == "admin"
