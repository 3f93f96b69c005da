"""Concept management commands."""

import click

from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.input_parsing import amount_or_exit, percentage_or_exit
from bookkeep.domain.concept import CONCEPT_MODULES, ConceptService
from bookkeep.domain.errors import DomainError


@click.group()
def concept_group():
    """Manage concepts (products, income, expense, payable, groups)."""
    pass


@concept_group.command("create")
@click.argument("name")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option(
    "--kind",
    type=click.Choice(["income", "expense", "product", "payable", "group"]),
    required=True,
    help="What the concept represents",
)
@click.option("--parent", "parent_id", type=int, help="ID of the group concept this belongs to")
@click.option("--price", help="Default unit price")
@click.option("--tax", help="Default tax percentage")
@click.option("--income-group", is_flag=True, help="For groups: group income concepts")
@click.pass_context
def create_concept(
    ctx,
    name: str,
    account: str,
    kind: str,
    parent_id: int | None,
    price: str | None,
    tax: str | None,
    income_group: bool,
):
    """Create a concept.

    Products are sold and count as income; payable concepts are expenses
    that can be bought on credit.

    Examples:
        bookkeep concept create "Rent" --account 1 --kind expense
        bookkeep concept create "Bread" --account 1 --kind product --price 2.50 --tax 16
        bookkeep concept create "Operating costs" --account 1 --kind group
    """
    account_id = resolve_account_or_exit(ctx, account)
    service = ConceptService(ctx.obj["db"])
    try:
        concept_id = service.create_concept(
            account_id=account_id,
            name=name,
            parent_concept_id=parent_id,
            is_group=kind == "group",
            is_income=kind in ("income", "product") or (kind == "group" and income_group),
            is_expense=kind in ("expense", "payable") or (kind == "group" and not income_group),
            is_product=kind == "product",
            is_account_payable_concept=kind == "payable",
            price=amount_or_exit(ctx, price, "price") or 0,
            tax_percentage=percentage_or_exit(ctx, tax, "tax percentage"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {kind} concept '{name.strip()}' (ID: {concept_id})")


@concept_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--module", type=click.Choice(CONCEPT_MODULES), help="Only concepts offered by this form")
@click.pass_context
def list_concepts(ctx, account: str, module: str | None):
    """List concepts."""
    account_id = resolve_account_or_exit(ctx, account)
    service = ConceptService(ctx.obj["db"])
    if module:
        concepts = service.list_concepts_by_module(account_id, module)
    else:
        concepts = service.list_concepts(account_id)
    if not concepts:
        click.echo("No concepts found.")
        return

    for c in concepts:
        tags = [
            tag
            for tag, on in (
                ("group", c.is_group),
                ("income", c.is_income),
                ("expense", c.is_expense),
                ("product", c.is_product),
                ("payable", c.is_account_payable_concept),
                ("system", c.is_system),
            )
            if on
        ]
        parent = f" (in #{c.parent_concept_id})" if c.parent_concept_id else ""
        click.echo(f"ID: {c.id:4d} | {c.name:30s} | {', '.join(tags)}{parent}")


@concept_group.command("init-system")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def init_system_concepts(ctx, account: str):
    """Create the incoming/outgoing payment concepts used to tag payments.

    Safe to run repeatedly; existing system concepts are kept.
    """
    account_id = resolve_account_or_exit(ctx, account)
    try:
        incoming_id, outgoing_id = ConceptService(ctx.obj["db"]).ensure_system_payment_concepts(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"System payment concepts ready (incoming: {incoming_id}, outgoing: {outgoing_id})")


def register_commands(cli):
    """Register concept commands with main CLI."""
    cli.add_command(concept_group, name="concept")
