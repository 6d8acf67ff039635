"""Flask CLI commands for the administrative privilege path."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from vidshare.core.container import get_container
from vidshare.models.account import Role
from vidshare.services._shared.errors import NotFoundError

LOGGER = logging.getLogger(__name__)


@click.group("accounts")
def accounts_cli() -> None:
    """Manage account privileges."""


def _set_role(email: str, role: Role) -> None:
    try:
        get_container().account_service().set_role(email, role)
    except NotFoundError as exc:
        raise click.ClickException(f"No account with email {email}") from exc
    click.echo(f"{email}: role set to {role.value}")


@accounts_cli.command("promote")
@click.argument("email")
@with_appcontext
def promote_command(email: str) -> None:
    """Grant the admin role to the account with EMAIL."""
    _set_role(email, Role.ADMIN)


@accounts_cli.command("demote")
@click.argument("email")
@with_appcontext
def demote_command(email: str) -> None:
    """Return the account with EMAIL to the standard role."""
    _set_role(email, Role.STANDARD)
