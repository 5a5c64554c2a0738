"""Main CLI entry point."""

import click

from budgetkit.database.factories import create_sqlite_database
from budgetkit.logging_setup import configure_logging
from budgetkit.storage.factories import create_blob_store

# Import and register all commands at module level
from budgetkit.cli.commands import (
    project,
    account,
    tag,
    import_cmd,
    transaction,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUDGETKIT_DB_PATH environment variable)",
    envvar="BUDGETKIT_DB_PATH",
)
@click.option(
    "--blob-dir",
    type=click.Path(file_okay=False),
    help="Directory for uploaded files (overrides BUDGETKIT_BLOB_DIR environment variable)",
    envvar="BUDGETKIT_BLOB_DIR",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (overrides BUDGETKIT_LOG_LEVEL environment variable)",
    envvar="BUDGETKIT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, blob_dir: str | None, log_level: str | None):
    """Budgetkit - Household budgeting with staged CSV imports.

    Organise finances into projects with accounts and tags, and import bank
    statements through upload, column mapping, review and commit.
    """
    ctx.ensure_object(dict)

    if log_level:
        configure_logging(log_level)

    # Initialize storage only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if "db" not in ctx.obj:
            db = create_sqlite_database(database_path=db_path)
            db.connect()
            db.initialize_schema()
            ctx.obj["db"] = db
        if "blob_store" not in ctx.obj:
            ctx.obj["blob_store"] = create_blob_store(blob_dir)


# Register all commands
project.register_commands(cli)
account.register_commands(cli)
tag.register_commands(cli)
import_cmd.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    configure_logging()
    cli()


if __name__ == "__main__":
    main()
