"""Payment registration commands."""

import click

from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.formatting import money
from bookkeep.cli.input_parsing import amount_or_exit, date_or_exit
from bookkeep.domain.errors import DomainError
from bookkeep.domain.payment import PaymentService


@click.group()
def payment_group():
    """Apply payments to open balances."""
    pass


@payment_group.command("register")
@click.argument("transaction_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--amount", required=True, help="Amount paid; must not exceed the open balance")
@click.option("--date", "payment_date", default="today", show_default=True)
@click.option("--payment-method", "payment_method_id", type=int)
@click.option("--payment-form", "payment_form_id", type=int)
@click.option("--description")
@click.option("--reference")
@click.pass_context
def register_payment(
    ctx, transaction_id, account, amount, payment_date, payment_method_id, payment_form_id, description, reference
):
    """Register a payment against a credit sale, purchase or obligation.

    Sales are collected with an incoming payment; purchases and
    obligations are settled with an outgoing payment.

    Examples:
        bookkeep payment register 12 --account 1 --amount 60
    """
    account_id = resolve_account_or_exit(ctx, account)
    db = ctx.obj["db"]
    try:
        payment = PaymentService(db).register_payment(
            account_id=account_id,
            paid_transaction_id=transaction_id,
            amount=amount_or_exit(ctx, amount),
            payment_date=date_or_exit(ctx, payment_date),
            payment_method_id=payment_method_id,
            account_payment_form_id=payment_form_id,
            name=description,
            reference_number=reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    paid = db.get_transaction(transaction_id)
    click.echo(f"Registered payment {payment.id} of {money(payment.total)} against transaction {transaction_id}")
    click.echo(f"  Payments: {money(paid.payments)}  Balance: {money(paid.balance)}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
