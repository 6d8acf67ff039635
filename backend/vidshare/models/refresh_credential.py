"""Server-side record of the single live refresh token per account."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vidshare.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class RefreshCredential(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    The account's current refresh token.

    ``account_id`` is unique: issuing a new refresh token overwrites
    ``token`` in place. Deleting the account deletes the credential.
    """

    __tablename__ = "refresh_credentials"

    account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )
    token: Mapped[str] = mapped_column(String(1024), nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", name="uq_refresh_credentials_account_id"),
        Index("ix_refresh_credentials_token", "token"),
    )
