"""Tenant account management commands."""

import click

from bookkeep.domain.account import AccountService
from bookkeep.domain.concept import ConceptService
from bookkeep.domain.errors import DomainError
from bookkeep.cli.error_handling import handle_domain_error


@click.group()
def account_group():
    """Manage tenant accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.pass_context
def create_account(ctx, name: str):
    """Create a new tenant account.

    Every other command is scoped to an account via --account NAME_OR_ID.
    The system incoming/outgoing payment concepts are created with it.

    Examples:
        bookkeep account create "Corner Bakery"
    """
    service = AccountService(ctx.obj["db"])
    try:
        account_id = service.create_account(name=name)
        ConceptService(ctx.obj["db"]).ensure_system_payment_concepts(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name.strip()}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all tenant accounts."""
    accounts = AccountService(ctx.obj["db"]).list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:30s} | Created: {acc.created_at:%Y-%m-%d}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
