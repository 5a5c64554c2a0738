"""CLI helpers for resolving project, account and tag references."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import click

from budgetkit.cli.error_handling import handle_domain_error
from budgetkit.domain.account import AccountService
from budgetkit.domain.errors import DomainError, NotFoundError
from budgetkit.domain.project import ProjectService
from budgetkit.domain.tag import TagService
from budgetkit.utils.resolvers import resolve_account, resolve_project


def project_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the required --project option used by every project-scoped command."""
    return click.option(
        "--project",
        "-p",
        "project",
        required=True,
        help="Project name or ID",
    )(func)


def resolve_project_or_exit(ctx: click.Context, project: str | int) -> int:
    """Resolve project name or ID, or exit with a CLI error."""
    try:
        return resolve_project(ProjectService(ctx.obj["db"]), project)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_account_or_exit(ctx: click.Context, project_id: int, account: str | int) -> int:
    """Resolve account name or ID within a project, or exit with a CLI error."""
    try:
        return resolve_account(AccountService(ctx.obj["db"]), project_id, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_tag_ids_or_exit(ctx: click.Context, project_id: int, tags: Sequence[str]) -> list[int]:
    """Resolve tag names (case-insensitive) or IDs within a project, or exit with a CLI error."""
    service = TagService(ctx.obj["db"])
    tag_ids = []
    try:
        for value in tags:
            text = value.strip()
            if text.isdigit():
                tag_ids.append(service.get_tag(int(text), project_id).id)
                continue
            tag = service.find_by_name(project_id, text)
            if tag is None:
                raise NotFoundError(f"Tag '{text}' not found")
            tag_ids.append(tag.id)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
    return tag_ids
