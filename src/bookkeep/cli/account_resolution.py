"""Resolution of the ``--account`` option shared by all ledger commands."""

from __future__ import annotations

import click

from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.domain.account import AccountService
from bookkeep.domain.errors import DomainError
from bookkeep.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, account: str | int) -> int:
    """Return the tenant ID for a name or ID, exiting with status 1 when unknown."""
    try:
        return resolve_account(AccountService(ctx.obj["db"]), account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
