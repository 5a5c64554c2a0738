"""CSV import commands."""

from pathlib import Path

import click

from budgetkit.ai.factories import create_text_generator
from budgetkit.cli.error_handling import fail, handle_domain_error
from budgetkit.cli.resolution import (
    project_option,
    resolve_account_or_exit,
    resolve_project_or_exit,
    resolve_tag_ids_or_exit,
)
from budgetkit.domain.csv_import import CSVImportService
from budgetkit.domain.entities import MappingPreview
from budgetkit.domain.errors import DomainError
from budgetkit.domain.staging import StagingService
from budgetkit.domain.tag import TagService
from budgetkit.domain.tag_suggestion import TagSuggestionService
from budgetkit.utils.amount_parser import format_minor_units


@click.group()
def import_group():
    """Import CSV bank statements."""
    pass


def _import_service(ctx) -> CSVImportService:
    return CSVImportService(ctx.obj["db"], ctx.obj["blob_store"])


def _echo_preview(preview: MappingPreview) -> None:
    click.echo(f"\nColumns: {', '.join(preview.headers) or '(none)'}")
    click.echo(f"Data rows: {preview.total_rows}")
    for row in preview.preview_rows:
        click.echo("  " + " | ".join(row))
    if preview.suggested_mapping:
        click.echo("Suggested mapping:")
        for field, header in preview.suggested_mapping.items():
            click.echo(f"  {field:12s} -> {header}")


@import_group.command("upload")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@project_option
@click.option("--account", "-a", required=True, help="Account name or ID")
@click.pass_context
def upload(ctx, csv_file: Path, project: str, account: str):
    """Upload a CSV file and start a new import.

    Examples:
        budgetkit import upload statement.csv --project Household --account "Chase"
    """
    service = _import_service(ctx)
    project_id = resolve_project_or_exit(ctx, project)
    account_id = resolve_account_or_exit(ctx, project_id, account)

    try:
        batch = service.upload(project_id, account_id, csv_file.name, csv_file.read_bytes())
        preview = service.preview(batch.id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Uploaded '{batch.filename}' as import {batch.id} (status: {batch.status.value})")
    _echo_preview(preview)
    click.echo(f"\nNext: budgetkit import map {batch.id} --project {project_id}")


@import_group.command("preview")
@click.argument("batch_id", type=int)
@project_option
@click.option("--rows", "limit", type=int, default=5, show_default=True, help="Number of rows to show")
@click.pass_context
def preview(ctx, batch_id: int, project: str, limit: int):
    """Show the columns, first rows and suggested mapping of an upload."""
    service = _import_service(ctx)
    project_id = resolve_project_or_exit(ctx, project)

    try:
        result = service.preview(batch_id, project_id, limit=limit)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_preview(result)


@import_group.command("map")
@click.argument("batch_id", type=int)
@project_option
@click.option("--date", "date_column", help="Header of the date column")
@click.option("--amount", "amount_column", help="Header of the amount column")
@click.option("--description", "description_column", help="Header of the description column")
@click.pass_context
def map_columns(
    ctx,
    batch_id: int,
    project: str,
    date_column: str | None,
    amount_column: str | None,
    description_column: str | None,
):
    """Confirm the column mapping and stage rows for review.

    Columns that are not given use the suggested mapping.

    Examples:
        budgetkit import map 3 -p Household
        budgetkit import map 3 -p Household --description "Payee"
    """
    service = _import_service(ctx)
    project_id = resolve_project_or_exit(ctx, project)

    try:
        suggested = service.preview(batch_id, project_id).suggested_mapping
        mapping = {
            "date": date_column or suggested.get("date", ""),
            "amount": amount_column or suggested.get("amount", ""),
            "description": description_column or suggested.get("description", ""),
        }
        batch = service.apply_mapping(batch_id, project_id, mapping)
        summary = StagingService(ctx.obj["db"]).summary(batch_id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Mapped import {batch.id}: date='{mapping['date']}', amount='{mapping['amount']}', "
        f"description='{mapping['description']}'"
    )
    click.echo(f"Staged {summary.total} row(s), {summary.duplicates} possible duplicate(s)")


@import_group.command("review")
@click.argument("batch_id", type=int)
@project_option
@click.pass_context
def review(ctx, batch_id: int, project: str):
    """Show staged rows with their duplicate, excluded and tag state."""
    db = ctx.obj["db"]
    staging = StagingService(db)
    project_id = resolve_project_or_exit(ctx, project)

    try:
        rows = staging.list_rows(batch_id, project_id)
        summary = staging.summary(batch_id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No staged rows.")
        return

    tag_names = {t.id: t.name for t in TagService(db).list_tags(project_id)}
    click.echo(f"\nImport {batch_id}:")
    click.echo("=" * 100)
    for row in rows:
        flags = ("D" if row.is_duplicate else " ") + ("X" if row.excluded else " ")
        amount = format_minor_units(row.parsed_amount) if row.parsed_amount is not None else "?"
        tags = ", ".join(tag_names.get(tag_id, str(tag_id)) for tag_id in row.tag_ids)
        click.echo(
            f"[{flags}] Row {row.id:4d} | {row.parsed_date or '?':10s} | {amount:>12s} | "
            f"{(row.parsed_description or '')[:40]:40s} | {tags}"
        )
    click.echo("=" * 100)
    click.echo(
        f"Total: {summary.total} | Included: {summary.included} | "
        f"Excluded: {summary.excluded} | Duplicates: {summary.duplicates}"
    )
    click.echo("D = possible duplicate, X = excluded")


@import_group.command("exclude")
@click.argument("batch_id", type=int)
@click.argument("row_ids", type=int, nargs=-1, required=True)
@project_option
@click.option("--undo", is_flag=True, help="Include the rows again")
@click.option("--toggle", is_flag=True, help="Flip each row's excluded flag")
@click.pass_context
def exclude(ctx, batch_id: int, row_ids: tuple[int, ...], project: str, undo: bool, toggle: bool):
    """Exclude staged rows from the import.

    Examples:
        budgetkit import exclude 3 41 42 -p Household
        budgetkit import exclude 3 41 -p Household --undo
    """
    if undo and toggle:
        fail(ctx, "--undo and --toggle cannot be combined.")

    staging = StagingService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)

    try:
        for row_id in row_ids:
            if toggle:
                excluded = staging.toggle_exclude(batch_id, project_id, row_id)
            else:
                excluded = not undo
                staging.set_excluded(batch_id, project_id, row_id, excluded)
            click.echo(f"Row {row_id}: {'excluded' if excluded else 'included'}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@import_group.command("tag")
@click.argument("batch_id", type=int)
@click.argument("row_id", type=int)
@project_option
@click.option("--tag", "-t", "tags", multiple=True, help="Tag name or ID (repeatable)")
@click.option("--clear", is_flag=True, help="Remove all pending tags")
@click.pass_context
def tag_row(ctx, batch_id: int, row_id: int, project: str, tags: tuple[str, ...], clear: bool):
    """Replace the pending tags of a staged row.

    Examples:
        budgetkit import tag 3 41 -p Household -t Groceries -t Household
        budgetkit import tag 3 41 -p Household --clear
    """
    if not tags and not clear:
        fail(ctx, "Provide at least one --tag or --clear.")
    if tags and clear:
        fail(ctx, "--tag and --clear cannot be combined.")

    staging = StagingService(ctx.obj["db"])
    project_id = resolve_project_or_exit(ctx, project)
    tag_ids = resolve_tag_ids_or_exit(ctx, project_id, tags)

    try:
        stored = staging.replace_tags(batch_id, project_id, row_id, tag_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Row {row_id}: {len(stored)} tag(s) set")


@import_group.command("suggest")
@click.argument("batch_id", type=int)
@project_option
@click.pass_context
def suggest(ctx, batch_id: int, project: str):
    """Ask the AI model to suggest tags for included rows.

    Suggestions replace the pending tags of the rows they cover. Model
    failures are logged and never stop the import.
    """
    db = ctx.obj["db"]
    project_id = resolve_project_or_exit(ctx, project)
    generator = ctx.obj.get("text_generator") or create_text_generator()
    service = TagSuggestionService(db, generator)

    try:
        suggestions = service.suggest_for_batch(batch_id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Suggested tags for {len(suggestions)} row(s)")


@import_group.command("commit")
@click.argument("batch_id", type=int)
@project_option
@click.pass_context
def commit(ctx, batch_id: int, project: str):
    """Create transactions from the included rows and close the import."""
    service = _import_service(ctx)
    project_id = resolve_project_or_exit(ctx, project)

    try:
        result = service.commit(batch_id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Imported {len(result.transaction_ids)} transaction(s) from import {batch_id}")


@import_group.command("list")
@project_option
@click.option("--open", "open_only", is_flag=True, help="Only imports that are not completed or abandoned")
@click.pass_context
def list_imports(ctx, project: str, open_only: bool):
    """List imports of a project, newest first."""
    service = _import_service(ctx)
    project_id = resolve_project_or_exit(ctx, project)

    batches = service.list_batches(project_id, open_only=open_only)
    if not batches:
        click.echo("No imports found.")
        return

    click.echo("\nImports:")
    click.echo("-" * 80)
    for b in batches:
        rows = b.row_count if b.row_count is not None else "-"
        click.echo(
            f"ID: {b.id:3d} | {b.filename:25s} | {b.status.value:10s} | Rows: {rows} | "
            f"Created: {b.created_at:%Y-%m-%d %H:%M}"
        )


@import_group.command("abandon")
@click.argument("batch_id", type=int)
@project_option
@click.pass_context
def abandon(ctx, batch_id: int, project: str):
    """Abandon an open import, discarding its staged rows and file."""
    service = _import_service(ctx)
    project_id = resolve_project_or_exit(ctx, project)

    try:
        service.abandon(batch_id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Abandoned import {batch_id}")


@import_group.command("delete")
@click.argument("batch_id", type=int)
@project_option
@click.pass_context
def delete(ctx, batch_id: int, project: str):
    """Delete an import record. Transactions it created are kept."""
    service = _import_service(ctx)
    project_id = resolve_project_or_exit(ctx, project)

    try:
        service.delete(batch_id, project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted import {batch_id}")


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_group, name="import")
