"""Bank deposit and bank transfer commands."""

import click

from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.formatting import money
from bookkeep.cli.input_parsing import amount_or_exit, date_or_exit
from bookkeep.domain.errors import DomainError
from bookkeep.domain.movement import MovementService


def _echo_legs(kind: str, outgoing, incoming) -> None:
    click.echo(f"Created {kind} of {money(incoming.total)}")
    click.echo(f"  Outgoing leg: {outgoing.id} (form {outgoing.account_payment_form_id})")
    click.echo(f"  Incoming leg: {incoming.id} (form {incoming.account_payment_form_id})")


def _echo_incoming_legs(legs) -> None:
    for leg in legs:
        click.echo(
            f"ID: {leg.id:4d} | {leg.date} | {money(leg.total):>12s} | "
            f"to form {leg.account_payment_form_id} | from leg {leg.source_transaction_id} | {leg.name or ''}"
        )


@click.group()
def deposit_group():
    """Move cash from a cashbox into a bank account."""
    pass


@deposit_group.command("create")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--amount", required=True)
@click.option("--from", "from_form_id", type=int, required=True, help="Cashbox ID")
@click.option("--to", "to_form_id", type=int, required=True, help="Bank account ID")
@click.option("--date", "txn_date", default="today", show_default=True)
@click.option("--currency", "currency_id", type=int)
@click.option("--description")
@click.option("--reference")
@click.pass_context
def create_deposit(ctx, account, amount, from_form_id, to_form_id, txn_date, currency_id, description, reference):
    """Record a bank deposit as two linked, settled legs.

    Examples:
        bookkeep deposit create --account 1 --amount 500 --from 1 --to 2
    """
    account_id = resolve_account_or_exit(ctx, account)
    try:
        outgoing, incoming = MovementService(ctx.obj["db"]).create_bank_deposit(
            account_id=account_id,
            amount=amount_or_exit(ctx, amount),
            txn_date=date_or_exit(ctx, txn_date),
            from_cash_form_id=from_form_id,
            to_bank_form_id=to_form_id,
            currency_id=currency_id,
            reference_number=reference,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_legs("bank deposit", outgoing, incoming)


@deposit_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def list_deposits(ctx, account):
    """List active bank deposits."""
    account_id = resolve_account_or_exit(ctx, account)
    legs = MovementService(ctx.obj["db"]).list_bank_deposits(account_id)
    if not legs:
        click.echo("No bank deposits found.")
        return
    _echo_incoming_legs(legs)


@deposit_group.command("deactivate")
@click.argument("incoming_leg_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def deactivate_deposit(ctx, incoming_leg_id, account):
    """Deactivate both legs of a deposit or transfer by its incoming leg."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        ids = MovementService(ctx.obj["db"]).deactivate_bank_deposit_group(account_id, incoming_leg_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated legs: {', '.join(str(i) for i in ids)}")


@click.group()
def transfer_group():
    """Move money between two bank accounts."""
    pass


@transfer_group.command("create")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--amount", required=True)
@click.option("--from", "from_form_id", type=int, required=True, help="Source bank account ID")
@click.option("--to", "to_form_id", type=int, required=True, help="Destination bank account ID")
@click.option("--date", "txn_date", default="today", show_default=True)
@click.option("--currency", "currency_id", type=int)
@click.option("--description")
@click.option("--reference")
@click.pass_context
def create_transfer(ctx, account, amount, from_form_id, to_form_id, txn_date, currency_id, description, reference):
    """Record a bank-to-bank transfer as two linked, settled legs."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        outgoing, incoming = MovementService(ctx.obj["db"]).create_bank_transfer(
            account_id=account_id,
            amount=amount_or_exit(ctx, amount),
            txn_date=date_or_exit(ctx, txn_date),
            from_bank_form_id=from_form_id,
            to_bank_form_id=to_form_id,
            currency_id=currency_id,
            reference_number=reference,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_legs("bank transfer", outgoing, incoming)


@transfer_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def list_transfers(ctx, account):
    """List active bank transfers."""
    account_id = resolve_account_or_exit(ctx, account)
    legs = MovementService(ctx.obj["db"]).list_bank_transfers(account_id)
    if not legs:
        click.echo("No bank transfers found.")
        return
    _echo_incoming_legs(legs)


transfer_group.add_command(deactivate_deposit, name="deactivate")


def register_commands(cli):
    """Register deposit and transfer commands with main CLI."""
    cli.add_command(deposit_group, name="deposit")
    cli.add_command(transfer_group, name="transfer")
