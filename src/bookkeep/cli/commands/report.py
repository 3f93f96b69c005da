"""Report commands."""

import click

from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.formatting import echo_transaction_row, money
from bookkeep.cli.input_parsing import date_or_exit, period_option, resolve_cli_date_range
from bookkeep.domain.normalization import ZERO
from bookkeep.domain.obligation import ObligationService
from bookkeep.domain.report import EXPENSE_FLOW, INCOME_FLOW, ReportService


@click.group()
def report_group():
    """Ledger reports."""
    pass


@report_group.command("cashflow")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--from", "date_from")
@click.option("--to", "date_to")
@period_option
@click.option("--currency", "currency_id", type=int)
@click.pass_context
def cashflow(ctx, account, date_from, date_to, period, currency_id):
    """Income and expense totals by concept group and concept."""
    account_id = resolve_account_or_exit(ctx, account)
    start, end = resolve_cli_date_range(ctx, date_from=date_from, date_to=date_to, period=period)
    rows = ReportService(ctx.obj["db"]).get_cashflow_concept_totals(
        account_id, date_from=start, date_to=end, currency_id=currency_id
    )
    if not rows:
        click.echo("No cash flow in this period.")
        return

    for flow in (INCOME_FLOW, EXPENSE_FLOW):
        flow_rows = sorted((r for r in rows if r.flow_type == flow), key=lambda r: (r.group_name, r.concept_name))
        if not flow_rows:
            continue
        click.echo(f"\n{flow.capitalize()}")
        click.echo("-" * 70)
        current_group = None
        for row in flow_rows:
            if row.group_name != current_group:
                current_group = row.group_name
                click.echo(f"  {current_group}")
            click.echo(f"    {row.concept_name[:40]:40s} {money(row.total):>16s}")
        click.echo(f"  {'Total':42s} {money(sum((r.total for r in flow_rows), ZERO)):>16s}")


@report_group.command("transactions")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--from", "date_from")
@click.option("--to", "date_to")
@period_option
@click.pass_context
def transactions_report(ctx, account, date_from, date_to, period):
    """Active transactions in a window with receivable/payable totals."""
    account_id = resolve_account_or_exit(ctx, account)
    start, end = resolve_cli_date_range(ctx, date_from=date_from, date_to=date_to, period=period)
    transactions = ReportService(ctx.obj["db"]).get_transactions_for_reports(account_id, start, end)
    if not transactions:
        click.echo("No transactions in this period.")
        return
    for txn in transactions:
        echo_transaction_row(txn)

    receivable = sum((t.balance for t in transactions if t.is_account_receivable), ZERO)
    payable = sum((t.balance for t in transactions if t.is_account_payable), ZERO)
    click.echo(f"\nOpen receivables: {money(receivable)}")
    click.echo(f"Open payables:    {money(payable)}")


@report_group.command("obligations")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--from", "date_from")
@click.option("--to", "date_to")
@period_option
@click.option("--currency", "currency_id", type=int)
@click.pass_context
def obligations_report(ctx, account, date_from, date_to, period, currency_id):
    """Internal obligations in a window."""
    account_id = resolve_account_or_exit(ctx, account)
    start, end = resolve_cli_date_range(ctx, date_from=date_from, date_to=date_to, period=period)
    obligations = ObligationService(ctx.obj["db"]).list_internal_obligations_for_report(
        account_id, date_from=start, date_to=end, currency_id=currency_id
    )
    if not obligations:
        click.echo("No internal obligations in this period.")
        return
    for txn in obligations:
        echo_transaction_row(txn)
    click.echo(f"\nOutstanding: {money(sum((t.balance for t in obligations), ZERO))}")


@report_group.command("dashboard")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--as-of", "as_of", help="Reference day (default: today)")
@click.pass_context
def dashboard(ctx, account, as_of):
    """Bank balances, month activity and the last six months at a glance."""
    account_id = resolve_account_or_exit(ctx, account)
    data = ReportService(ctx.obj["db"]).get_dashboard_data(account_id, as_of=date_or_exit(ctx, as_of, "as-of"))

    click.echo("Bank accounts")
    for row in data.bank_balances:
        click.echo(f"  {row.name[:40]:40s} {money(row.balance):>16s}")
    click.echo(f"\nSales this month: {money(sum((v for _, v in data.sales_by_day), ZERO))}")
    for title, rows in (("Expenses", data.expenses_by_concept), ("Income", data.incomes_by_concept)):
        click.echo(f"\n{title} this month")
        for name, total in rows:
            click.echo(f"  {name[:40]:40s} {money(total):>16s}")
    click.echo("\nMonth     Income           Expense")
    for flow in data.income_expense_by_month:
        click.echo(f"{flow.month}   {money(flow.income):>14s}   {money(flow.expense):>14s}")
    if data.internal_obligations_by_form:
        click.echo("\nInternal obligations")
        for name, total in data.internal_obligations_by_form:
            click.echo(f"  {name[:40]:40s} {money(total):>16s}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
