# vidshare/services/videos/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO


@dataclass(frozen=True, slots=True)
class VideoUploadIn:
    """
    Input DTO for video ingestion.

    :param owner_id: Uploading account (verified subject id).
    :type owner_id: str
    :param title: Display title.
    :type title: str
    :param mimetype: Declared content type of the file part.
    :type mimetype: str
    :param filename: Client-side filename; used for the extension.
    :type filename: str | None
    :param stream: Readable binary stream of the file part.
    :type stream: BinaryIO
    """

    owner_id: str
    title: str
    mimetype: str
    filename: str | None
    stream: BinaryIO


@dataclass(frozen=True, slots=True)
class VideoCreatedOut:
    id: str
    title: str


@dataclass(frozen=True, slots=True)
class OwnerOut:
    id: str
    email: str


@dataclass(frozen=True, slots=True)
class VideoOut:
    """
    Video metadata as exposed by listings and detail.

    :param owner: Uploading account, or ``None`` in per-owner listings.
    """

    id: str
    title: str
    mimetype: str
    size_bytes: int
    download_count: int
    created_at: datetime | None
    owner: OwnerOut | None = None


@dataclass(frozen=True, slots=True)
class VideoDownloadOut:
    """
    Everything needed to stream a stored video back to a client.

    :param stream: Open binary stream; the caller closes it.
    :param mimetype: Content type to send.
    :param size_bytes: Exact length of the stream.
    :param filename: Attachment filename.
    """

    stream: BinaryIO
    mimetype: str
    size_bytes: int
    filename: str
