"""CLI helpers for parsing dates, date ranges and amounts."""

from datetime import date
from decimal import Decimal

import click

from bookkeep.utils.amount_parser import parse_amount, parse_percentage
from bookkeep.utils.date_parser import PERIODS, get_date_range, parse_date

period_option = click.option(
    "--period",
    type=click.Choice(PERIODS),
    help="Named period (cannot be combined with --from/--to)",
)


def date_or_exit(ctx: click.Context, value: str | None, label: str = "date") -> date | None:
    """Parse an optional date option, exiting with an error when invalid."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def amount_or_exit(ctx: click.Context, value: str | None, label: str = "amount") -> Decimal | None:
    """Parse an optional amount option, exiting with an error when invalid."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def percentage_or_exit(ctx: click.Context, value: str | None, label: str) -> Decimal:
    """Parse an optional percentage option; missing means zero."""
    if value is None:
        return Decimal("0")
    try:
        return parse_percentage(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    date_from: str | None,
    date_to: str | None,
    period: str | None,
) -> tuple[date | None, date | None]:
    """Resolve a CLI date window from a named period or explicit bounds."""
    if period and (date_from or date_to):
        click.echo("Error: --period cannot be combined with --from or --to.", err=True)
        ctx.exit(1)
    if period:
        return get_date_range(period)

    start = date_or_exit(ctx, date_from, "start date")
    end = date_or_exit(ctx, date_to, "end date")
    if start and end and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)
    return start, end
