"""Reference catalog commands: payment forms, payment methods, currencies, persons."""

import click

from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.domain.catalog import CatalogService
from bookkeep.domain.entities import PaymentFormKind
from bookkeep.domain.errors import DomainError


@click.group()
def payment_form_group():
    """Manage cashboxes, bank accounts and credit cards."""
    pass


@payment_form_group.command("create")
@click.argument("name")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--kind", type=click.Choice(PaymentFormKind.ALL), required=True)
@click.option("--provider", help="Bank or card issuer")
@click.option("--reference", help="Account or card number")
@click.pass_context
def create_payment_form(ctx, name, account, kind, provider, reference):
    """Create a payment form.

    Examples:
        bookkeep payment-form create "Front desk" --account 1 --kind cashbox
        bookkeep payment-form create "Checking" --account 1 --kind bank_account --provider "First Bank"
    """
    account_id = resolve_account_or_exit(ctx, account)
    try:
        form_id = CatalogService(ctx.obj["db"]).create_payment_form(
            account_id, name, kind, provider=provider, reference=reference
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {kind} '{name.strip()}' (ID: {form_id})")


@payment_form_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--kind", type=click.Choice(PaymentFormKind.ALL))
@click.pass_context
def list_payment_forms(ctx, account, kind):
    """List active payment forms."""
    account_id = resolve_account_or_exit(ctx, account)
    forms = CatalogService(ctx.obj["db"]).list_payment_forms(account_id, kind=kind)
    if not forms:
        click.echo("No payment forms found.")
        return
    for form in forms:
        provider = f" ({form.provider})" if form.provider else ""
        click.echo(f"ID: {form.id:3d} | {form.kind:12s} | {form.name}{provider}")


@payment_form_group.command("deactivate")
@click.argument("form_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def deactivate_payment_form(ctx, form_id, account):
    """Deactivate a payment form."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        CatalogService(ctx.obj["db"]).deactivate_payment_form(account_id, form_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated payment form {form_id}")


@click.group()
def payment_method_group():
    """Manage payment methods (cash, bank transfer, card...)."""
    pass


@payment_method_group.command("create")
@click.argument("name")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--code", help="Well-known code: cash, bank_transfer, card")
@click.pass_context
def create_payment_method(ctx, name, account, code):
    """Create a payment method."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        method_id = CatalogService(ctx.obj["db"]).create_payment_method(account_id, name, code=code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created payment method '{name.strip()}' (ID: {method_id})")


@payment_method_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def list_payment_methods(ctx, account):
    """List payment methods."""
    account_id = resolve_account_or_exit(ctx, account)
    methods = CatalogService(ctx.obj["db"]).list_payment_methods(account_id)
    if not methods:
        click.echo("No payment methods found.")
        return
    for method in methods:
        click.echo(f"ID: {method.id:3d} | {method.name:20s} | {method.code or '-'}")


@click.group()
def currency_group():
    """Manage currencies."""
    pass


@currency_group.command("create")
@click.argument("code")
@click.argument("name")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--local", "is_local", is_flag=True, help="Mark as the local currency")
@click.pass_context
def create_currency(ctx, code, name, account, is_local):
    """Create a currency."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        currency_id = CatalogService(ctx.obj["db"]).create_currency(account_id, code, name, is_local=is_local)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created currency {code.strip().upper()} (ID: {currency_id})")


@currency_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def list_currencies(ctx, account):
    """List currencies."""
    account_id = resolve_account_or_exit(ctx, account)
    currencies = CatalogService(ctx.obj["db"]).list_currencies(account_id)
    if not currencies:
        click.echo("No currencies found.")
        return
    for currency in currencies:
        local = " (local)" if currency.is_local else ""
        click.echo(f"ID: {currency.id:3d} | {currency.code} | {currency.name}{local}")


@click.group()
def person_group():
    """Manage clients and providers."""
    pass


@person_group.command("create")
@click.argument("name")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--client", "is_client", is_flag=True)
@click.option("--provider", "is_provider", is_flag=True)
@click.pass_context
def create_person(ctx, name, account, is_client, is_provider):
    """Create a client and/or provider."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        person_id = CatalogService(ctx.obj["db"]).create_person(
            account_id, name, is_client=is_client, is_provider=is_provider
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created person '{name.strip()}' (ID: {person_id})")


@person_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def list_persons(ctx, account):
    """List clients and providers."""
    account_id = resolve_account_or_exit(ctx, account)
    persons = CatalogService(ctx.obj["db"]).list_persons(account_id)
    if not persons:
        click.echo("No persons found.")
        return
    for person in persons:
        roles = [r for r, on in (("client", person.is_client), ("provider", person.is_provider)) if on]
        click.echo(f"ID: {person.id:3d} | {person.name:30s} | {', '.join(roles)}")


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(payment_form_group, name="payment-form")
    cli.add_command(payment_method_group, name="payment-method")
    cli.add_command(currency_group, name="currency")
    cli.add_command(person_group, name="person")
