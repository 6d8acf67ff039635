from __future__ import annotations

import pytest
from sqlalchemy import func, select

from tests.helpers.auth import bearer, signup, upload
from vidshare.models.video import VideoAsset
from vidshare.services._shared.ports.blob_store import FailingBlobStore
from vidshare.services._shared.ports.event_sink import VideoIngested

CLIP = b"\x00\x00\x00\x18ftypmp42" + bytes(range(64))


@pytest.fixture()
def account(client) -> dict:
    return signup(client, email="uploader@example.com")


@pytest.fixture()
def token(account) -> str:
    return account["accessToken"]


class TestUpload:
    def test_created_and_event_published(self, client, account, events):
        resp = upload(client, account["accessToken"], title="Cat", data=CLIP)

        assert resp.status_code == 201
        body = resp.get_json()
        assert set(body) == {"id", "title"}
        assert body["title"] == "Cat"
        assert events.events == [VideoIngested(video_id=body["id"], owner_id=account["id"])]

    def test_bytes_land_in_the_blob_store(self, client, token, container):
        resp = upload(client, token, data=CLIP)

        video_id = resp.get_json()["id"]
        assert container.blob_store.exists(f"{video_id}.mp4")
        assert container.blob_store.size(f"{video_id}.mp4") == len(CLIP)

    def test_requires_authentication(self, client, db):
        resp = upload(client, "not-a-token")

        assert resp.status_code == 401
        assert db.session.scalar(select(func.count()).select_from(VideoAsset)) == 0

    def test_unsupported_media_type(self, client, token):
        resp = upload(client, token, filename="pic.png", content_type="image/png")

        assert resp.status_code == 415
        assert resp.get_json()["code"] == "unsupported_media_type"

    def test_payload_too_large(self, client, token, container):
        container.max_bytes = 16

        resp = upload(client, token, data=b"x" * 17)

        assert resp.status_code == 413
        assert resp.get_json()["code"] == "payload_too_large"

    @pytest.mark.parametrize(
        "data",
        [{"title": "no file"}, {}],
        ids=["missing-file", "empty-form"],
    )
    def test_missing_file_part(self, client, token, data):
        resp = client.post(
            "/api/videos", data=data, headers=bearer(token), content_type="multipart/form-data"
        )

        assert resp.status_code == 422

    def test_missing_title(self, client, token):
        resp = upload(client, token, title="")

        assert resp.status_code == 422
        assert resp.get_json()["code"] == "validation_error"

    def test_storage_failure_is_a_generic_500_and_leaves_nothing(self, client, account, container, events):
        container.blob_store = FailingBlobStore()

        resp = upload(client, account["accessToken"])

        assert resp.status_code == 500
        body = resp.get_json()
        assert body["code"] == "infrastructure_error"
        assert "Simulated" not in body["detail"]
        assert events.events == []
        listing = client.get(
            f"/api/users/{account['id']}/videos", headers=bearer(account["accessToken"])
        )
        assert listing.get_json()["meta"]["total"] == 0


class TestQueries:
    def test_list_and_detail(self, client, token, account):
        created = upload(client, token, title="First").get_json()
        upload(client, token, title="Second")

        listing = client.get("/api/videos?page=1&size=1", headers=bearer(token))
        detail = client.get(f"/api/videos/{created['id']}", headers=bearer(token))

        assert listing.status_code == 200
        page = listing.get_json()
        assert len(page["items"]) == 1
        assert page["meta"] == {"total": 2, "page": 1, "size": 1, "hasPrev": False, "hasNext": True}
        video = detail.get_json()
        assert video["title"] == "First"
        assert video["mimeType"] == "video/mp4"
        assert video["downloadCount"] == 0
        assert video["owner"] == {"id": account["id"], "email": "uploader@example.com"}
        assert video["createdAt"]

    def test_bad_pagination(self, client, token):
        resp = client.get("/api/videos?size=500", headers=bearer(token))

        assert resp.status_code == 422

    def test_unknown_video(self, client, token):
        resp = client.get("/api/videos/does-not-exist", headers=bearer(token))

        assert resp.status_code == 404
        assert resp.get_json()["code"] == "not_found"


class TestDownload:
    def test_streams_attachment_and_counts(self, client, token):
        video_id = upload(client, token, title="Clip", data=CLIP).get_json()["id"]

        resp = client.get(f"/api/videos/{video_id}/download", headers=bearer(token))

        assert resp.status_code == 200
        assert resp.data == CLIP
        assert resp.mimetype == "video/mp4"
        assert resp.headers["Content-Length"] == str(len(CLIP))
        assert resp.headers["Content-Disposition"].startswith("attachment")
        assert "Clip.mp4" in resp.headers["Content-Disposition"]
        resp.close()

        detail = client.get(f"/api/videos/{video_id}", headers=bearer(token)).get_json()
        assert detail["downloadCount"] == 1

    def test_requires_authentication(self, client, token):
        video_id = upload(client, token).get_json()["id"]

        resp = client.get(f"/api/videos/{video_id}/download")

        assert resp.status_code == 401
