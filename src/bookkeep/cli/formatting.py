"""Plain-text rendering of ledger rows."""

from decimal import Decimal

import click

from bookkeep.domain.entities import Transaction, TransactionType


def money(value: Decimal) -> str:
    return f"{value:,.2f}"


def type_label(txn_type: int) -> str:
    return TransactionType(txn_type).name.lower().replace("_", " ")


def echo_transaction_row(txn: Transaction, concept: str | None = None) -> None:
    """Print one transaction as a table row."""
    flags = []
    if not txn.is_active:
        flags.append("inactive")
    if txn.is_reconciled:
        flags.append("reconciled")
    if txn.is_internal_obligation:
        flags.append("obligation")
    if txn.is_internal_transfer:
        flags.append("deposit" if txn.is_deposit else "transfer")
    click.echo(
        f"{txn.id:5d} | {txn.date} | {type_label(txn.type):16s} | "
        f"{money(txn.total):>12s} | paid {money(txn.payments):>12s} | "
        f"bal {money(txn.balance):>12s} | {(txn.name or concept or '')[:30]:30s}"
        + (f" [{', '.join(flags)}]" if flags else "")
    )
