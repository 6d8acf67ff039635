"""Account model: the identity behind every token."""

from __future__ import annotations

import enum
from typing import Any

from sqlalchemy import Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from vidshare.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class Role(str, enum.Enum):
    """Privilege level of an account."""

    STANDARD = "standard"
    ADMIN = "admin"


class Account(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed); unique.
    password_hash : str
        Salted one-way hash. Written through :meth:`set_password`, never
        serialized outward.
    role : Role
        ``standard`` by default; only the administrative CLI changes it.

    Videos and the refresh credential reference the account by foreign key;
    the account itself holds no back-pointers.
    """

    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="account_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.STANDARD,
    )

    __table_args__ = (UniqueConstraint("email", name="uq_accounts_email"),)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    def set_password(self, raw: str, *, method: str) -> None:
        """
        Hash ``raw`` with ``method`` and store the result.

        :param raw: Plain text password.
        :param method: Werkzeug hash spec with a fixed work factor,
            e.g. ``pbkdf2:sha256:600000``.
        :raises ValueError: If ``raw`` is empty.
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw, method=method)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash in constant time.

        :param raw: Plain text password candidate.
        :returns: ``True`` if it matches; otherwise ``False``.
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and sanity-check the email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = normalize_email(value)
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v


def normalize_email(value: str) -> str:
    """Canonical form used for storage and lookups."""
    return value.strip().lower()
