"""Account management commands."""

import click

from budgetkit.cli.error_handling import handle_domain_error
from budgetkit.cli.resolution import project_option, resolve_project_or_exit
from budgetkit.domain.account import AccountService
from budgetkit.domain.entities import ACCOUNT_TYPES
from budgetkit.domain.errors import DomainError
from budgetkit.utils.amount_parser import format_minor_units


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@project_option
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES),
    default="checking",
    show_default=True,
    help="Account type",
)
@click.pass_context
def create_account(ctx, name: str, project: str, account_type: str):
    """Create a new account in a project.

    Examples:
        budgetkit account create "Chase Checking" --project Household
        budgetkit account create "Visa" -p 1 --type credit
    """
    service = AccountService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)

    try:
        account_id = service.create_account(project_id=project_id, name=name, account_type=account_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name.strip()}' (ID: {account_id})")


@account_group.command("list")
@project_option
@click.pass_context
def list_accounts(ctx, project: str):
    """List accounts of a project."""
    service = AccountService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)

    accounts = service.list_accounts(project_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type:10s} | "
            f"Balance: {format_minor_units(acc.balance)}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
