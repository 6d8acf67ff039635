"""Relational store for the single live refresh token of each account.

The one-row-per-account rule is enforced by the unique constraint on
``account_id``; writes here always replace the token in place.
"""

from __future__ import annotations

from typing import cast

from sqlalchemy import select, update

from vidshare.models.refresh_credential import RefreshCredential
from vidshare.repositories.base import BaseRepository


class RefreshCredentialRepository(BaseRepository[RefreshCredential]):
    model = RefreshCredential

    def get_by_account_id(self, account_id: str) -> RefreshCredential | None:
        stmt = select(RefreshCredential).where(RefreshCredential.account_id == account_id)
        return cast(RefreshCredential | None, self.session.execute(stmt).scalars().first())

    def get_by_token(self, token: str) -> RefreshCredential | None:
        """Look up the credential currently holding ``token``.

        Stale (rotated) and never-issued values both return ``None``.
        """
        stmt = select(RefreshCredential).where(RefreshCredential.token == token)
        return cast(RefreshCredential | None, self.session.execute(stmt).scalars().first())

    def create(self, account_id: str, token: str) -> RefreshCredential:
        return self.add(RefreshCredential(account_id=account_id, token=token))

    def replace(self, account_id: str, token: str) -> bool:
        """Overwrite the account's token unconditionally.

        :returns: ``True`` when a row existed and was updated.
        """
        stmt = (
            update(RefreshCredential)
            .where(RefreshCredential.account_id == account_id)
            .values(token=token)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount > 0

    def upsert(self, account_id: str, token: str) -> None:
        """Replace the account's token, creating the row on first use.

        A concurrent first insert for the same account surfaces as an
        ``IntegrityError`` on ``uq_refresh_credentials_account_id``; callers
        retry with :meth:`replace`.
        """
        if not self.replace(account_id, token):
            self.create(account_id, token)

    def rotate(self, account_id: str, old_token: str, new_token: str) -> bool:
        """Compare-and-swap the token.

        Only succeeds while ``old_token`` is still the stored value, so two
        concurrent rotations of the same token cannot both win.

        :returns: ``True`` when exactly this caller performed the swap.
        """
        stmt = (
            update(RefreshCredential)
            .where(
                RefreshCredential.account_id == account_id,
                RefreshCredential.token == old_token,
            )
            .values(token=new_token)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def count_for_account(self, account_id: str) -> int:
        stmt = select(RefreshCredential.id).where(RefreshCredential.account_id == account_id)
        return len(self.session.execute(stmt).all())
