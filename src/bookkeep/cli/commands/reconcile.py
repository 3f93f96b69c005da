"""Bank reconciliation commands."""

import click

from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.formatting import echo_transaction_row, money
from bookkeep.cli.input_parsing import date_or_exit, period_option, resolve_cli_date_range
from bookkeep.domain.errors import DomainError
from bookkeep.domain.reconciliation import ReconciliationService
from bookkeep.utils.date_parser import get_date_range


@click.group()
def reconcile_group():
    """Reconcile payment forms against bank statements."""
    pass


@reconcile_group.command("balances")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--form", "form_id", type=int, required=True, help="Payment form ID")
@click.option("--from", "date_from", help="Window start (default: start of this month)")
@click.option("--to", "date_to", help="Window end (default: today)")
@period_option
@click.pass_context
def show_balances(ctx, account, form_id, date_from, date_to, period):
    """Show current, previously reconciled and in-window reconciled balances."""
    account_id = resolve_account_or_exit(ctx, account)
    start, end = resolve_cli_date_range(ctx, date_from=date_from, date_to=date_to, period=period)
    default_start, default_end = get_date_range("this-month")
    start = start or default_start
    end = end or default_end

    try:
        summary = ReconciliationService(ctx.obj["db"]).get_balances(account_id, form_id, start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Payment form {form_id}, {start} to {end}")
    click.echo(f"  Current balance:             {money(summary.current_balance):>14s}")
    click.echo(f"  Reconciled before window:    {money(summary.previous_balance):>14s}")
    click.echo(f"  Reconciled within window:    {money(summary.reconciled_balance_as_of_date):>14s}")
    if summary.transactions_in_range:
        click.echo(f"\nTransactions in window ({len(summary.transactions_in_range)}):")
        for txn in summary.transactions_in_range:
            echo_transaction_row(txn)


@reconcile_group.command("mark")
@click.argument("transaction_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--date", "reconcile_date", default="today", show_default=True, help="Statement date")
@click.pass_context
def mark_reconciled(ctx, transaction_id, account, reconcile_date):
    """Mark a transaction as reconciled. This cannot be undone."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        txn = ReconciliationService(ctx.obj["db"]).reconcile_transaction(
            account_id, transaction_id, date_or_exit(ctx, reconcile_date)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Reconciled transaction {txn.id} as of {txn.reconciled_at:%Y-%m-%d}")


def register_commands(cli):
    """Register reconciliation commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
