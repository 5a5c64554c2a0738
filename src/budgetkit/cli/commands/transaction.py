"""Transaction commands."""

import click

from budgetkit.cli.date_filters import collect_period_flags, period_options, resolve_cli_date_range
from budgetkit.cli.error_handling import fail, handle_domain_error
from budgetkit.cli.resolution import (
    project_option,
    resolve_account_or_exit,
    resolve_project_or_exit,
    resolve_tag_ids_or_exit,
)
from budgetkit.domain.account import AccountService
from budgetkit.domain.errors import DomainError
from budgetkit.domain.tag import TagService
from budgetkit.domain.transaction import TransactionService
from budgetkit.utils.amount_parser import format_minor_units, parse_amount, to_minor_units
from budgetkit.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Add and view transactions."""
    pass


@transaction_group.command("add")
@project_option
@click.option("--account", "-a", required=True, help="Account name or ID")
@click.option("--date", "date_str", required=True, help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45 or -123.45)")
@click.option("--description", default="", help="Transaction description")
@click.option("--notes", help="Notes")
@click.option("--tag", "-t", "tags", multiple=True, help="Tag name or ID (repeatable)")
@click.pass_context
def add_transaction(
    ctx,
    project: str,
    account: str,
    date_str: str,
    amount: str,
    description: str,
    notes: str | None,
    tags: tuple[str, ...],
):
    """Add a transaction manually.

    Examples:
        budgetkit transaction add -p Household -a Checking --date 2024-01-15 --amount -50.00 --description "Market"
        budgetkit transaction add -p Household -a Checking --date yesterday --amount 12 -t Dining
    """
    service = TransactionService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)
    account_id = resolve_account_or_exit(ctx, project_id, account)
    tag_ids = resolve_tag_ids_or_exit(ctx, project_id, tags)

    try:
        txn_date = parse_date(date_str)
    except ValueError as e:
        fail(ctx, f"Invalid date format: {e}")
    try:
        cents = to_minor_units(parse_amount(amount))
    except ValueError as e:
        fail(ctx, f"Invalid amount format: {e}")

    try:
        transaction_id = service.create_transaction(
            project_id=project_id,
            account_id=account_id,
            amount=cents,
            date=txn_date,
            description=description,
            notes=notes,
            tag_ids=tag_ids,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn_date.isoformat()}")
    click.echo(f"  Amount: {format_minor_units(cents)}")
    if description:
        click.echo(f"  Description: {description}")


@transaction_group.command("list")
@project_option
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--batch", "batch_id", type=int, help="Only transactions created by this import")
@period_options
@click.option("--verbose", "-v", is_flag=True, help="Show notes, fingerprint and originating import")
@click.pass_context
def list_transactions(
    ctx,
    project: str,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    batch_id: int | None,
    verbose: bool,
    **period_params,
):
    """View transactions of a project, newest first.

    Account can be specified by name or ID. Use one period flag such as
    --this-month instead of explicit dates.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    project_id = resolve_project_or_exit(ctx, project)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_params),
    )

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, project_id, account)

    try:
        transactions = service.list_transactions(
            project_id=project_id,
            account_id=account_id,
            start_date=start,
            end_date=end,
            import_batch_id=batch_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in AccountService(db).list_accounts(project_id)}
    tag_names = {t.id: t.name for t in TagService(db).list_tags(project_id)}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    total = 0
    for txn in transactions:
        total += txn.amount
        tags = ", ".join(tag_names.get(tag_id, str(tag_id)) for tag_id in txn.tag_ids)
        click.echo(
            f"{txn.id:4d} | {txn.date:10s} | {format_minor_units(txn.amount):>12s} | "
            f"{accounts.get(txn.account_id, 'Unknown'):15s} | {txn.description[:35]:35s} | {tags}"
        )
        if verbose:
            if txn.notes:
                click.echo(f"       Notes: {txn.notes}")
            if txn.source_hash:
                click.echo(f"       Fingerprint: {txn.source_hash}")
            if txn.import_batch_id is not None:
                click.echo(f"       Import: {txn.import_batch_id}")
    click.echo("-" * 100)
    click.echo(f"Total: {format_minor_units(total)}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
