"""Tag management commands."""

import click

from budgetkit.cli.error_handling import handle_domain_error
from budgetkit.cli.resolution import project_option, resolve_project_or_exit, resolve_tag_ids_or_exit
from budgetkit.domain.errors import DomainError
from budgetkit.domain.tag import TagService


@click.group()
def tag_group():
    """Manage tags."""
    pass


@tag_group.command("create")
@click.argument("name", metavar="TAG_NAME")
@project_option
@click.pass_context
def create_tag(ctx, name: str, project: str):
    """Create a tag in a project.

    Tag names are unique per project, ignoring case.

    Examples:
        budgetkit tag create Groceries --project Household
    """
    service = TagService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)

    try:
        tag_id = service.create_tag(project_id=project_id, name=name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created tag '{name.strip()}' (ID: {tag_id})")


@tag_group.command("list")
@project_option
@click.pass_context
def list_tags(ctx, project: str):
    """List tags of a project."""
    service = TagService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)

    tags = service.list_tags(project_id)
    if not tags:
        click.echo("No tags found.")
        return

    click.echo("\nTags:")
    click.echo("-" * 40)
    for t in tags:
        click.echo(f"ID: {t.id:3d} | {t.name}")


@tag_group.command("delete")
@click.argument("tag", metavar="TAG")
@project_option
@click.pass_context
def delete_tag(ctx, tag: str, project: str):
    """Delete a tag.

    TAG can be a tag name or ID. The tag is removed from transactions and
    from pending import rows.
    """
    service = TagService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)
    (tag_id,) = resolve_tag_ids_or_exit(ctx, project_id, [tag])

    try:
        changed = service.delete_tag(tag_id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted tag {tag_id}")
    if changed:
        click.echo(f"Removed from {changed} pending import row{'s' if changed != 1 else ''}")


def register_commands(cli):
    """Register tag commands with main CLI."""
    cli.add_command(tag_group, name="tag")
