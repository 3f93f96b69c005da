"""Project management commands."""

import click

from bookkeep.cli.account_resolution import resolve_account_or_exit
from bookkeep.cli.error_handling import handle_domain_error
from bookkeep.cli.input_parsing import date_or_exit
from bookkeep.domain.errors import DomainError
from bookkeep.domain.project import ProjectService


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("name")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--description")
@click.option("--start", help="Start date")
@click.option("--end", help="End date")
@click.pass_context
def create_project(ctx, name, account, description, start, end):
    """Create a project."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        project_id = ProjectService(ctx.obj["db"]).create_project(
            account_id,
            name,
            description=description,
            start_date=date_or_exit(ctx, start, "start date"),
            end_date=date_or_exit(ctx, end, "end date"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created project '{name.strip()}' (ID: {project_id})")


@project_group.command("list")
@click.option("--account", required=True, help="Tenant account name or ID")
@click.option("--all", "show_all", is_flag=True, help="Include inactive projects")
@click.pass_context
def list_projects(ctx, account, show_all):
    """List projects."""
    account_id = resolve_account_or_exit(ctx, account)
    projects = ProjectService(ctx.obj["db"]).list_projects(account_id, active_only=not show_all)
    if not projects:
        click.echo("No projects found.")
        return
    for p in projects:
        span = f"{p.start_date or '?'} .. {p.end_date or '?'}"
        status = "" if p.is_active else " [inactive]"
        click.echo(f"ID: {p.id:3d} | {p.name:30s} | {span}{status}")


@project_group.command("deactivate")
@click.argument("project_id", type=int)
@click.option("--account", required=True, help="Tenant account name or ID")
@click.pass_context
def deactivate_project(ctx, project_id, account):
    """Deactivate a project."""
    account_id = resolve_account_or_exit(ctx, account)
    try:
        ProjectService(ctx.obj["db"]).deactivate_project(account_id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated project {project_id}")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
