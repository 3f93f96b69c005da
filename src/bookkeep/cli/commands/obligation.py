"""Internal obligation commands."""

import click

from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.formatting import money
from bookkeep.cli.input_parsing import amount_or_exit, date_or_exit
from bookkeep.domain.errors import DomainError
from bookkeep.domain.obligation import ObligationService


@click.group()
def obligation_group():
    """Track internally owed amounts."""
    pass


@obligation_group.command("create")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--total", required=True)
@click.option("--date", "txn_date", default="today", show_default=True)
@click.option("--name")
@click.option("--reference")
@click.option("--currency", "currency_id", type=int)
@click.option("--payment-form", "payment_form_id", type=int)
@click.pass_context
def create_obligation(ctx, account, total, txn_date, name, reference, currency_id, payment_form_id):
    """Create an internal obligation."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        txn = ObligationService(ctx.obj["db"]).create_internal_obligation(
            account_id=account_id,
            total=amount_or_exit(ctx, total, "total"),
            txn_date=date_or_exit(ctx, txn_date),
            name=name,
            reference_number=reference,
            currency_id=currency_id,
            account_payment_form_id=payment_form_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created internal obligation {txn.id} '{txn.name}' for {money(txn.total)}")


@obligation_group.command("update")
@click.argument("obligation_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--total", required=True)
@click.option("--date", "txn_date", required=True)
@click.option("--name")
@click.option("--reference")
@click.option("--currency", "currency_id", type=int)
@click.option("--payment-form", "payment_form_id", type=int)
@click.pass_context
def update_obligation(ctx, obligation_id, account, total, txn_date, name, reference, currency_id, payment_form_id):
    """Edit an internal obligation; the total cannot drop below payments made."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        txn = ObligationService(ctx.obj["db"]).update_internal_obligation(
            account_id=account_id,
            obligation_id=obligation_id,
            total=amount_or_exit(ctx, total, "total"),
            txn_date=date_or_exit(ctx, txn_date),
            name=name,
            reference_number=reference,
            currency_id=currency_id,
            account_payment_form_id=payment_form_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated obligation {txn.id}: total {money(txn.total)}, balance {money(txn.balance)}")


@obligation_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def list_obligations(ctx, account):
    """List active internal obligations."""
    account_id = resolve_account_or_exit(ctx, account)
    obligations = ObligationService(ctx.obj["db"]).list_internal_obligations(account_id)
    if not obligations:
        click.echo("No internal obligations found.")
        return
    for txn in obligations:
        click.echo(
            f"ID: {txn.id:4d} | {txn.date} | {txn.name or '':30s} | total {money(txn.total):>12s} | "
            f"paid {money(txn.payments):>12s} | balance {money(txn.balance):>12s}"
        )


def register_commands(cli):
    """Register obligation commands with main CLI."""
    cli.add_command(obligation_group, name="obligation")
