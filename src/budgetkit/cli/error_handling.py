"""CLI error handling helpers."""

from typing import NoReturn

import click

from budgetkit.domain.errors import DomainError
from budgetkit.logging_setup import get_logger

_logger = get_logger(__name__)


def fail(ctx: click.Context, message: str) -> NoReturn:
    """Print ``Error: <message>`` to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> NoReturn:
    """Render a domain error and exit with failure."""
    _logger.debug("cli:domain_error kind=%s message=%s", error.__class__.__name__, error)
    fail(ctx, str(error))
