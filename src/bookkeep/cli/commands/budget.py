"""Budget commands."""

import click
from datetime import date
from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.formatting import money
from bookkeep.cli.input_parsing import amount_or_exit, date_or_exit
from bookkeep.domain.budget import PERIOD_TYPES, BudgetService
from bookkeep.domain.errors import DomainError
from bookkeep.utils.date_parser import period_bounds


def _parse_budget_line(ctx, raw: str):
    # CONCEPT:AMOUNT
    concept, sep, amount = raw.partition(":")
    if not sep or not concept.strip().isdigit():
        click.echo(f"Error: Invalid budget line '{raw}'. Expected CONCEPT_ID:AMOUNT", err=True)
        ctx.exit(1)
    return int(concept), amount_or_exit(ctx, amount, "budget amount")


def _echo_execution(lines) -> None:
    if not lines:
        click.echo("No budget lines.")
        return
    click.echo(f"{'Concept':30s} | {'Budgeted':>12s} | {'Executed':>12s} | {'Variance':>12s}")
    click.echo("-" * 76)
    for line in lines:
        click.echo(
            f"{line.concept_name[:30]:30s} | {money(line.budgeted):>12s} | "
            f"{money(line.executed):>12s} | {money(line.variance):>12s}"
        )


@click.group()
def budget_group():
    """Plan amounts per concept and compare them with execution."""
    pass


@budget_group.command("create")
@click.argument("name")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--line", "lines", multiple=True, help="Budget line CONCEPT_ID:AMOUNT (repeatable)")
@click.option("--period-type", type=click.Choice(PERIOD_TYPES), default="monthly", show_default=True)
@click.option("--start", help="Period start (derived from --period-type when omitted)")
@click.option("--end", help="Period end (derived from --period-type when omitted)")
@click.option("--project", "project_id", type=int, help="Scope the budget to a project")
@click.pass_context
def create_budget(ctx, name, account, lines, period_type, start, end, project_id):
    """Create a budget.

    Examples:
        bookkeep budget create "Q1 costs" --account 1 --period-type quarterly --line 3:1000 --line 5:250
    """
    account_id = resolve_account_or_exit(ctx, account)
    period_start = date_or_exit(ctx, start, "start date")
    period_end = date_or_exit(ctx, end, "end date")
    if period_type != "custom" and (period_start is None or period_end is None):
        derived_start, derived_end = period_bounds(period_type, period_start or date.today())
        period_start = period_start or derived_start
        period_end = period_end or derived_end

    try:
        budget_id = BudgetService(ctx.obj["db"]).create_budget_with_lines(
            account_id=account_id,
            name=name,
            lines=[_parse_budget_line(ctx, raw) for raw in lines],
            period_type=period_type,
            period_start=period_start,
            period_end=period_end,
            project_id=project_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created budget '{name.strip()}' (ID: {budget_id}) for {period_start} to {period_end}")


@budget_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--project", "project_id", type=int)
@click.pass_context
def list_budgets(ctx, account, project_id):
    """List active budgets."""
    account_id = resolve_account_or_exit(ctx, account)
    budgets = BudgetService(ctx.obj["db"]).list_budgets(account_id, project_id=project_id)
    if not budgets:
        click.echo("No budgets found.")
        return
    for b in budgets:
        project = f" | project {b.project_id}" if b.project_id else ""
        click.echo(f"ID: {b.id:3d} | {b.name:30s} | {b.period_start} .. {b.period_end}{project}")


@budget_group.command("report")
@click.argument("budget_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--from", "date_from", help="Override the budget's period start")
@click.option("--to", "date_to", help="Override the budget's period end")
@click.pass_context
def budget_report(ctx, budget_id, account, date_from, date_to):
    """Compare a budget with what was executed."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        lines = BudgetService(ctx.obj["db"]).get_budget_execution_report(
            account_id,
            budget_id,
            date_from=date_or_exit(ctx, date_from, "start date"),
            date_to=date_or_exit(ctx, date_to, "end date"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_execution(lines)


@budget_group.command("project-report")
@click.argument("project_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--from", "date_from")
@click.option("--to", "date_to")
@click.pass_context
def project_report(ctx, project_id, account, date_from, date_to):
    """Compare all budgets of a project with its execution."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        lines = BudgetService(ctx.obj["db"]).get_project_execution_report(
            account_id,
            project_id,
            date_from=date_or_exit(ctx, date_from, "start date"),
            date_to=date_or_exit(ctx, date_to, "end date"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_execution(lines)


@budget_group.command("deactivate")
@click.argument("budget_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def deactivate_budget(ctx, budget_id, account):
    """Deactivate a budget."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        BudgetService(ctx.obj["db"]).deactivate_budget(account_id, budget_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated budget {budget_id}")


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
