"""Project management commands."""

import click

from budgetkit.cli.error_handling import handle_domain_error
from budgetkit.cli.resolution import resolve_project_or_exit
from budgetkit.domain.account import AccountService
from budgetkit.domain.errors import DomainError
from budgetkit.domain.project import ProjectService
from budgetkit.domain.tag import TagService


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--parent", help="Parent project name or ID")
@click.pass_context
def create_project(ctx, name: str, parent: str | None):
    """Create a new project, optionally nested under a parent.

    Examples:
        budgetkit project create "Household"
        budgetkit project create "Holiday 2025" --parent "Household"
    """
    service = ProjectService(ctx.obj["db"])

    parent_id = None
    if parent is not None:
        parent_id = resolve_project_or_exit(ctx, parent)

    try:
        project_id = service.create_project(name=name, parent_id=parent_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created project '{name.strip()}' (ID: {project_id})")


@project_group.command("list")
@click.option("--roots", is_flag=True, help="Only show top-level projects")
@click.pass_context
def list_projects(ctx, roots: bool):
    """List projects."""
    service = ProjectService(ctx.obj["db"])

    projects = service.list_projects(roots_only=roots)
    if not projects:
        click.echo("No projects found.")
        return

    names = {p.id: p.name for p in service.list_projects()}
    click.echo("\nProjects:")
    click.echo("-" * 60)
    for p in projects:
        parent = f" | Parent: {names.get(p.parent_id, p.parent_id)}" if p.parent_id is not None else ""
        click.echo(f"ID: {p.id:3d} | {p.name:20s}{parent}")


@project_group.command("show")
@click.argument("project", metavar="PROJECT")
@click.pass_context
def show_project(ctx, project: str):
    """Show a project with its ancestry, children, accounts and tags.

    PROJECT can be a project name or ID.
    """
    db = ctx.obj["db"]
    service = ProjectService(db)
    project_id = resolve_project_or_exit(ctx, project)

    entity = service.require_project(project_id)
    path = [p.name for p in service.get_ancestors(project_id)] + [entity.name]

    click.echo(f"\nProject {entity.id}: {' > '.join(path)}")
    children = service.list_children(project_id)
    if children:
        click.echo("Children: " + ", ".join(f"{c.name} ({c.id})" for c in children))

    accounts = AccountService(db).list_accounts(project_id)
    click.echo(f"Accounts ({len(accounts)}):")
    for acc in accounts:
        click.echo(f"  ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type}")

    tags = TagService(db).list_tags(project_id)
    click.echo(f"Tags ({len(tags)}): " + ", ".join(t.name for t in tags))


@project_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.confirmation_option(prompt="Delete this project and all of its data?")
@click.pass_context
def delete_project(ctx, project: str):
    """Delete a project with its accounts, tags, transactions and imports.

    PROJECT can be a project name or ID. Projects with child projects or
    open imports cannot be deleted.
    """
    service = ProjectService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)

    try:
        service.delete_project(project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted project {project_id}")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
