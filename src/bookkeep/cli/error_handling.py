"""CLI error handling helpers."""

import logging

import click

from bookkeep.domain.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)

GENERIC_SAVE_ERROR = "Could not save changes. Nothing was written; please retry."


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Store failures get a generic retry message; the cause goes to the log.
    """
    if isinstance(error, PersistenceError):
        logger.error("Persistence failure: %s", error)
        click.echo(f"Error: {GENERIC_SAVE_ERROR}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
