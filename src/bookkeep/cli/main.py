"""Main CLI entry point."""

import logging

import click

from bookkeep.database.factories import create_database, create_sqlite_database

# Import and register all commands at module level
from bookkeep.cli.commands import (
    account,
    concept,
    catalog,
    project,
    transaction,
    payment,
    movement,
    obligation,
    reconcile,
    budget,
    report,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BOOKKEEP_DB_PATH environment variable)",
    envvar="BOOKKEEP_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="BOOKKEEP_LOG_LEVEL",
    help="Logging verbosity (overrides BOOKKEEP_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Bookkeep - small-business ledger.

    Record sales, purchases, expenses and income, apply payments against
    open balances, move money between cashboxes and bank accounts, and
    reconcile and budget against the results.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if db_path:
            db = create_sqlite_database(database_path=db_path)
        else:
            db = create_database()
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
concept.register_commands(cli)
catalog.register_commands(cli)
project.register_commands(cli)
transaction.register_commands(cli)
payment.register_commands(cli)
movement.register_commands(cli)
obligation.register_commands(cli)
reconcile.register_commands(cli)
budget.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
