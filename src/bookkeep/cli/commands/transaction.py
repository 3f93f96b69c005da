"""Transaction commands."""

import click
from decimal import Decimal
from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.formatting import echo_transaction_row, money, type_label
from bookkeep.cli.input_parsing import (
    amount_or_exit,
    date_or_exit,
    percentage_or_exit,
    period_option,
    resolve_cli_date_range,
)
from bookkeep.domain.entities import LineInput, TransactionType
from bookkeep.domain.errors import DomainError
from bookkeep.domain.transaction import TransactionService

SIMPLE_TYPE_CHOICES = {
    "income": TransactionType.INCOME,
    "expense": TransactionType.EXPENSE,
    "purchase": TransactionType.PURCHASE,
}


@click.group()
def transaction_group():
    """Record and inspect ledger transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--type", "txn_type", type=click.Choice(list(SIMPLE_TYPE_CHOICES)), required=True)
@click.option("--concept", "concept_id", type=int, required=True, help="Concept ID")
@click.option("--amount", required=True, help="Amount as a positive figure (e.g. 300.00)")
@click.option("--date", "txn_date", default="today", show_default=True, help="Transaction date")
@click.option("--charges", help="Additional charges")
@click.option("--credit", is_flag=True, help="Purchase on credit (leaves a payable balance)")
@click.option("--person", "person_id", type=int, help="Provider ID (required for purchases)")
@click.option("--payment-method", "payment_method_id", type=int)
@click.option("--payment-form", "payment_form_id", type=int, help="Cashbox/bank/card the money moved through")
@click.option("--project", "project_id", type=int)
@click.option("--currency", "currency_id", type=int)
@click.option("--description")
@click.option("--reference")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    txn_type: str,
    concept_id: int,
    amount: str,
    txn_date: str,
    charges: str | None,
    credit: bool,
    person_id: int | None,
    payment_method_id: int | None,
    payment_form_id: int | None,
    project_id: int | None,
    currency_id: int | None,
    description: str | None,
    reference: str | None,
):
    """Record a single-concept income, expense or purchase.

    Examples:
        bookkeep transaction add --account 1 --type expense --concept 3 --amount 300
        bookkeep transaction add --account 1 --type purchase --concept 5 --amount 80 --person 2 --credit
    """
    account_id = resolve_account_or_exit(ctx, account)
    parsed_date = date_or_exit(ctx, txn_date)
    parsed_amount = amount_or_exit(ctx, amount)
    parsed_charges = amount_or_exit(ctx, charges, "charges") or Decimal("0")

    try:
        txn = TransactionService(ctx.obj["db"]).create_simple_transaction(
            account_id=account_id,
            transaction_type=SIMPLE_TYPE_CHOICES[txn_type],
            concept_id=concept_id,
            amount=parsed_amount,
            txn_date=parsed_date,
            additional_charges=parsed_charges,
            is_credit=credit,
            person_id=person_id,
            name=description,
            reference_number=reference,
            currency_id=currency_id,
            payment_method_id=payment_method_id,
            account_payment_form_id=payment_form_id,
            project_id=project_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {txn_type} transaction {txn.id}")
    click.echo(f"  Total: {money(txn.total)}  Payments: {money(txn.payments)}  Balance: {money(txn.balance)}")


def _parse_line(ctx, raw: str) -> LineInput:
    # CONCEPT:QTY:PRICE[:TAX%[:DISCOUNT%]]
    parts = raw.split(":")
    if len(parts) < 3 or len(parts) > 5:
        click.echo(f"Error: Invalid line '{raw}'. Expected CONCEPT:QTY:PRICE[:TAX[:DISCOUNT]]", err=True)
        ctx.exit(1)
    try:
        concept_id = int(parts[0])
        quantity = Decimal(parts[1])
    except (ValueError, ArithmeticError):
        click.echo(f"Error: Invalid concept or quantity in line '{raw}'", err=True)
        ctx.exit(1)
    return LineInput(
        concept_id=concept_id,
        quantity=quantity,
        price=amount_or_exit(ctx, parts[2], "price"),
        tax_percentage=percentage_or_exit(ctx, parts[3] if len(parts) > 3 else None, "tax"),
        discount_percentage=percentage_or_exit(ctx, parts[4] if len(parts) > 4 else None, "discount"),
    )


@transaction_group.command("sale")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    help="Sale line CONCEPT:QTY:PRICE[:TAX%[:DISCOUNT%]] (repeatable)",
)
@click.option("--date", "txn_date", default="today", show_default=True, help="Sale date")
@click.option("--credit", is_flag=True, help="Sell on credit (leaves a receivable balance)")
@click.option("--client", "person_id", type=int, help="Client ID (required for credit sales)")
@click.option("--payment-method", "payment_method_id", type=int, help="Required for cash sales")
@click.option("--payment-form", "payment_form_id", type=int)
@click.option("--project", "project_id", type=int)
@click.option("--currency", "currency_id", type=int)
@click.option("--description")
@click.option("--reference")
@click.pass_context
def create_sale(
    ctx,
    account: str,
    lines: tuple[str, ...],
    txn_date: str,
    credit: bool,
    person_id: int | None,
    payment_method_id: int | None,
    payment_form_id: int | None,
    project_id: int | None,
    currency_id: int | None,
    description: str | None,
    reference: str | None,
):
    """Record a multi-line sale.

    Examples:
        bookkeep transaction sale --account 1 --line 4:2:50 --line 7:1:19.99:16 --payment-method 1
        bookkeep transaction sale --account 1 --line 4:1:100 --credit --client 3
    """
    account_id = resolve_account_or_exit(ctx, account)
    parsed_date = date_or_exit(ctx, txn_date)
    parsed_lines = [_parse_line(ctx, raw) for raw in lines]

    try:
        txn = TransactionService(ctx.obj["db"]).create_sale(
            account_id=account_id,
            lines=parsed_lines,
            txn_date=parsed_date,
            is_credit=credit,
            person_id=person_id,
            name=description,
            reference_number=reference,
            currency_id=currency_id,
            payment_method_id=payment_method_id,
            account_payment_form_id=payment_form_id,
            project_id=project_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created sale {txn.id} with {len(parsed_lines)} line(s)")
    click.echo(f"  Net: {money(txn.net)}  Taxes: {money(txn.taxes)}  Discounts: {money(txn.discounts)}")
    click.echo(f"  Total: {money(txn.total)}  Payments: {money(txn.payments)}  Balance: {money(txn.balance)}")


@transaction_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.name.lower() for t in TransactionType]),
    help="Only this transaction type",
)
@click.option("--exclude-obligations", is_flag=True, help="Hide internal obligations")
@click.option("--from", "date_from", help="Start date")
@click.option("--to", "date_to", help="End date")
@period_option
@click.pass_context
def list_transactions(ctx, account, txn_type, exclude_obligations, date_from, date_to, period):
    """List transactions, newest first."""
    account_id = resolve_account_or_exit(ctx, account)
    start, end = resolve_cli_date_range(ctx, date_from=date_from, date_to=date_to, period=period)
    service = TransactionService(ctx.obj["db"])

    transactions = service.list_transactions(
        account_id,
        transaction_type=TransactionType[txn_type.upper()] if txn_type else None,
        exclude_internal_obligations=exclude_obligations,
        start_date=start,
        end_date=end,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    concepts = service.primary_concepts_by_transaction_ids([t.id for t in transactions])
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 120)
    for txn in transactions:
        echo_transaction_row(txn, concepts.get(txn.id))


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def show_transaction(ctx, transaction_id, account):
    """Show a transaction with its lines and applied payments."""
    account_id = resolve_account_or_exit(ctx, account)
    service = TransactionService(ctx.obj["db"])
    try:
        txn = service.require_transaction(account_id, transaction_id)
        details = service.list_transaction_details(account_id, transaction_id)
        payments = service.list_payments_for_transaction(account_id, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transaction {txn.id} ({type_label(txn.type)}) on {txn.date}")
    if txn.name:
        click.echo(f"  Description: {txn.name}")
    if txn.reference_number:
        click.echo(f"  Reference: {txn.reference_number}")
    click.echo(f"  Total: {money(txn.total)}  Payments: {money(txn.payments)}  Balance: {money(txn.balance)}")
    if txn.source_transaction_id:
        click.echo(f"  Paired with transaction {txn.source_transaction_id}")
    if txn.is_reconciled and txn.reconciled_at:
        click.echo(f"  Reconciled: {txn.reconciled_at:%Y-%m-%d}")
    if not txn.is_active:
        click.echo("  Status: inactive")

    click.echo("\nLines:")
    for d in details:
        click.echo(
            f"  concept {d.concept_id:4d} | qty {d.quantity} x {money(d.price)} | "
            f"tax {money(d.tax)} | discount {money(d.discount)} | total {money(d.total)}"
        )
    if payments:
        click.echo("\nPayments:")
        for detail, payment in payments:
            when = payment.date if payment else "?"
            click.echo(f"  {when} | transaction {detail.transaction_id} | {money(detail.total)}")


@transaction_group.command("deactivate")
@click.argument("transaction_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def deactivate_transaction(ctx, transaction_id, account):
    """Deactivate a transaction (both legs for deposits and transfers)."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        ids = TransactionService(ctx.obj["db"]).deactivate_transaction(account_id, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated transaction(s): {', '.join(str(i) for i in ids)}")


@transaction_group.command("audit")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def audit_transactions(ctx, account):
    """Check every active transaction's total/payments/balance consistency.

    Exits with status 1 when inconsistencies are found.
    """
    account_id = resolve_account_or_exit(ctx, account)
    violations = TransactionService(ctx.obj["db"]).find_invariant_violations(account_id)
    if not violations:
        click.echo("All active transactions are consistent.")
        return

    click.echo(f"Found {len(violations)} inconsistent transaction(s):", err=True)
    for v in violations:
        click.echo(
            f"  {v.transaction_id}: total {money(v.total)}, payments {money(v.payments)}, "
            f"balance {money(v.balance)} ({'; '.join(v.reasons)})",
            err=True,
        )
    ctx.exit(1)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
