"""Account queries and the administrative privilege path."""

from __future__ import annotations

import logging

from vidshare.models.account import Account, Role
from vidshare.services._shared.base import BaseService
from vidshare.services._shared.dto import PageMeta, PageOut
from vidshare.services._shared.errors import NotFoundError
from vidshare.services.accounts.dto import AccountOut

log = logging.getLogger(__name__)


class AccountService(BaseService):
    """Privilege lookups for the authorization gate plus admin listings."""

    def privilege_of(self, account_id: str) -> Role | None:
        """
        Return the account's role, or ``None`` when it does not exist.

        Called synchronously by the gate for routes that declare roles.
        """
        with self.ro_uow() as uow:
            return uow.accounts.role_of(account_id)

    def list_accounts(self, *, page: int = 1, limit: int = 20) -> PageOut[AccountOut]:
        pagination = self.ensure_pagination(page=page, limit=limit, sort=["created_at"])
        with self.ro_uow() as uow:
            result = uow.accounts.paginate(pagination)
            items = [_to_out(a) for a in result.items]
        return PageOut(
            items=items,
            meta=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
        )

    def set_role(self, email: str, role: Role) -> None:
        """
        Change the privilege of the account identified by ``email``.

        :raises NotFoundError: If no account uses that email.
        """

        def steps(uow) -> bool:
            return uow.accounts.set_role(email, role)

        if not self.run_command(steps):
            raise NotFoundError("Account", email)
        log.info("Account role changed", extra={"event": f"role:{role.value}"})


def _to_out(account: Account) -> AccountOut:
    return AccountOut(
        id=account.id,
        email=account.email,
        role=account.role.value,
        created_at=account.created_at,
    )
