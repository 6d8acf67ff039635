# vidshare/services/videos/service.py
from __future__ import annotations

import logging
import mimetypes
import os
from collections.abc import Callable, Iterable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from vidshare.core.extensions import new_session
from vidshare.models.video import VideoAsset
from vidshare.repositories.video import increment_download_count
from vidshare.services._shared.base import BaseService
from vidshare.services._shared.dto import PageMeta, PageOut
from vidshare.services._shared.errors import (
    NotFoundError,
    OwnerNotFoundError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    ValidationFailedError,
    violates,
)
from vidshare.services._shared.ports.blob_store import BlobStore
from vidshare.services._shared.ports.event_sink import EventSink, VideoIngested
from vidshare.services.videos.dto import (
    OwnerOut,
    VideoCreatedOut,
    VideoDownloadOut,
    VideoOut,
    VideoUploadIn,
)
from vidshare.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class VideoService(BaseService):
    """
    Video ingestion, queries and downloads.

    Ingestion writes the metadata row and the blob inside one unit of work:
    the blob is written *before* commit, so a failed write rolls the row back
    and a half-written blob is never referenced.
    """

    def __init__(
        self,
        *,
        blob_store: BlobStore,
        event_sink: EventSink | None = None,
        allowed_mimetypes: Iterable[str] = ("video/mp4",),
        max_bytes: int = 5 * 1024 * 1024,
        session_factory: Callable[[], Session] = new_session,
    ) -> None:
        super().__init__(event_sink=event_sink, session_factory=session_factory)
        self.blobs = blob_store
        self.allowed_mimetypes = frozenset(allowed_mimetypes)
        self.max_bytes = int(max_bytes)

    # ------------------------------------------------------------------ #
    # Ingest
    # ------------------------------------------------------------------ #

    def ingest(self, dto: VideoUploadIn) -> VideoCreatedOut:
        """
        Validate the upload, then store row and bytes atomically.

        Validation happens before any transaction opens. ``VideoIngested``
        is published only after the commit.

        :raises UnsupportedMediaTypeError: Content type not accepted.
        :raises PayloadTooLargeError: More than ``max_bytes`` bytes.
        :raises OwnerNotFoundError: The uploading account does not exist.
        :raises BlobStoreError: The byte write failed; nothing was committed.
        """
        mimetype = (dto.mimetype or "").split(";", 1)[0].strip().lower()
        if mimetype not in self.allowed_mimetypes:
            raise UnsupportedMediaTypeError(
                f"Unsupported file type {mimetype or 'unknown'}; "
                f"allowed: {', '.join(sorted(self.allowed_mimetypes))}"
            )
        title = (dto.title or "").strip()
        if not title:
            raise ValidationFailedError("Title is required")

        # Read one byte past the limit to detect oversize uploads.
        data = dto.stream.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise PayloadTooLargeError(f"File exceeds the {self.max_bytes} byte limit")
        if not data:
            raise ValidationFailedError("Uploaded file is empty")

        extension = _extension_for(dto.filename, mimetype)

        def steps(uow: SQLAlchemyUnitOfWork) -> VideoCreatedOut:
            if uow.accounts.get(dto.owner_id) is None:
                raise OwnerNotFoundError(dto.owner_id)

            video = VideoAsset(
                title=title,
                mimetype=mimetype,
                extension=extension,
                size_bytes=len(data),
                download_count=0,
                owner_id=dto.owner_id,
            )
            uow.videos.add(video)
            self.blobs.put(video.blob_key, data)
            uow.add_event(VideoIngested(video_id=video.id, owner_id=dto.owner_id))
            return VideoCreatedOut(id=video.id, title=video.title)

        try:
            return self.run_command(steps)
        except IntegrityError as exc:
            # Owner deleted between the lookup and the insert.
            if violates(exc, "fk_videos_owner_id_accounts", column="foreign key"):
                raise OwnerNotFoundError(dto.owner_id) from exc
            raise

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_videos(self, *, page: int = 1, limit: int = 20) -> PageOut[VideoOut]:
        pagination = self.ensure_pagination(page=page, limit=limit, sort=["-created_at"])
        with self.ro_uow() as uow:
            result = uow.videos.list_page(pagination)
            emails = uow.accounts.emails_by_id(v.owner_id for v in result.items)
            items = [
                _to_out(v, OwnerOut(id=v.owner_id, email=emails.get(v.owner_id, "")))
                for v in result.items
            ]
        return PageOut(
            items=items,
            meta=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
        )

    def list_for_owner(
        self, owner_id: str, *, page: int = 1, limit: int = 20
    ) -> PageOut[VideoOut]:
        """
        List one account's videos.

        :raises NotFoundError: If the account does not exist.
        """
        pagination = self.ensure_pagination(page=page, limit=limit, sort=["-created_at"])
        with self.ro_uow() as uow:
            if uow.accounts.get(owner_id) is None:
                raise NotFoundError("Account", owner_id)
            result = uow.videos.list_for_owner(owner_id, pagination)
            items = [_to_out(v) for v in result.items]
        return PageOut(
            items=items,
            meta=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
        )

    def get_video(self, video_id: str) -> VideoOut:
        with self.ro_uow() as uow:
            video = uow.videos.get(video_id)
            if video is None:
                raise NotFoundError("Video", video_id)
            emails = uow.accounts.emails_by_id([video.owner_id])
            return _to_out(video, OwnerOut(id=video.owner_id, email=emails.get(video.owner_id, "")))

    # ------------------------------------------------------------------ #
    # Download
    # ------------------------------------------------------------------ #

    def open_download(self, video_id: str) -> VideoDownloadOut:
        """
        Open the stored bytes of a video and count the download.

        The counter update runs on its own short session, outside any
        command transaction; a failure there is logged and ignored.

        :raises NotFoundError: If the video does not exist.
        """
        with self.ro_uow() as uow:
            video = uow.videos.get(video_id)
            if video is None:
                raise NotFoundError("Video", video_id)
            key, mimetype, title = video.blob_key, video.mimetype, video.title
            extension = video.extension

        size = self.blobs.size(key)
        stream = self.blobs.open(key)
        self._count_download(video_id)
        return VideoDownloadOut(
            stream=stream,
            mimetype=mimetype,
            size_bytes=size,
            filename=_attachment_name(title, extension),
        )

    def _count_download(self, video_id: str) -> None:
        session = self.session_factory()
        try:
            increment_download_count(session, video_id)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            log.warning("Download counter update failed", exc_info=True)
        finally:
            session.close()


def _extension_for(filename: str | None, mimetype: str) -> str:
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    if ext and ext.isalnum() and len(ext) <= 16:
        return ext
    guessed = mimetypes.guess_extension(mimetype) or ".bin"
    return guessed.lstrip(".")


def _attachment_name(title: str, extension: str) -> str:
    safe = "".join(c if c.isalnum() or c in "-_ " else "_" for c in title).strip() or "video"
    return f"{safe}.{extension}"


def _to_out(video: VideoAsset, owner: OwnerOut | None = None) -> VideoOut:
    return VideoOut(
        id=video.id,
        title=video.title,
        mimetype=video.mimetype,
        size_bytes=video.size_bytes,
        download_count=video.download_count,
        created_at=video.created_at,
        owner=owner,
    )
