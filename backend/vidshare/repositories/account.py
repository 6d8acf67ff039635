"""Account repository: lookups by email and privilege changes."""

from __future__ import annotations

from collections.abc import Iterable
from typing import cast

from sqlalchemy import select, update

from vidshare.models.account import Account, Role, normalize_email
from vidshare.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Persistence-only repository for :class:`Account`.

    It never hashes passwords or issues tokens; that is the auth service's job.
    """

    model = Account

    def _sortable_fields(self):
        return {
            "email": Account.email,
            "created_at": Account.created_at,
        }

    def get_by_email(self, email: str) -> Account | None:
        """Fetch an account by email (case-insensitive).

        :param email: Email address to normalise and search.
        :returns: Account instance or ``None`` when not found.
        """
        stmt = select(Account).where(Account.email == normalize_email(email))
        return cast(Account | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(Account.id).where(Account.email == normalize_email(email))
        return self.session.execute(stmt).first() is not None

    def role_of(self, account_id: str) -> Role | None:
        """Return only the privilege column of an account, or ``None``."""
        stmt = select(Account.role).where(Account.id == account_id)
        return cast(Role | None, self.session.execute(stmt).scalar_one_or_none())

    def emails_by_id(self, account_ids: Iterable[str]) -> dict[str, str]:
        """Map each existing id in ``account_ids`` to its email, in one query."""
        ids = set(account_ids)
        if not ids:
            return {}
        stmt = select(Account.id, Account.email).where(Account.id.in_(ids))
        return {row.id: row.email for row in self.session.execute(stmt)}

    def set_role(self, email: str, role: Role) -> bool:
        """Change an account's privilege in a single UPDATE.

        :returns: ``True`` when a row was updated.
        """
        stmt = (
            update(Account)
            .where(Account.email == normalize_email(email))
            .values(role=role)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount > 0
