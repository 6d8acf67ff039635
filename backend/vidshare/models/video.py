"""Video asset metadata; the bytes live in the blob store."""

from __future__ import annotations

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from vidshare.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class VideoAsset(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Uploaded video.

    Fields
    ------
    title : str
        Display title.
    mimetype : str
        Declared content type (e.g. ``video/mp4``).
    extension : str
        File extension used to build the blob key ``<id>.<extension>``.
    size_bytes : int
        Size of the stored bytes.
    download_count : int
        Best-effort monotonic counter, incremented outside command
        transactions.
    owner_id : str
        Uploading account.
    """

    __tablename__ = "videos"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    mimetype: Mapped[str] = mapped_column(String(100), nullable=False)
    extension: Mapped[str] = mapped_column(String(16), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (Index("ix_videos_owner_id", "owner_id"),)

    @property
    def blob_key(self) -> str:
        return f"{self.id}.{self.extension}"
