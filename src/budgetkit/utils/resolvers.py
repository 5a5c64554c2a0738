"""Resolve user-supplied project and account references to IDs."""

from budgetkit.domain.account import AccountService
from budgetkit.domain.errors import NotFoundError
from budgetkit.domain.project import ProjectService


def _as_id(value: str | int) -> int | None:
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    return None


def resolve_project(project_service: ProjectService, project: str | int) -> int:
    """Resolve project name or ID to project ID.

    Args:
        project_service: ProjectService instance
        project: Project name, or ID (int or string representation of int)

    Returns:
        Project ID

    Raises:
        NotFoundError: If no project matches, or a name matches several projects
    """
    project_id = _as_id(project)
    if project_id is not None:
        return project_service.require_project(project_id).id

    matches = [p for p in project_service.list_projects() if p.name == project]
    if not matches:
        raise NotFoundError(f"Project '{project}' not found")
    if len(matches) > 1:
        ids = ", ".join(str(p.id) for p in matches)
        raise NotFoundError(f"Project name '{project}' is ambiguous (IDs {ids}); use the ID")
    return matches[0].id


def resolve_account(account_service: AccountService, project_id: int, account: str | int) -> int:
    """Resolve account name or ID within a project to account ID.

    Args:
        account_service: AccountService instance
        project_id: Project the account must belong to
        account: Account name, or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found in the project
    """
    account_id = _as_id(account)
    if account_id is not None:
        return account_service.get_account(account_id, project_id).id

    for acc in account_service.list_accounts(project_id):
        if acc.name == account:
            return acc.id
    raise NotFoundError(f"Account '{account}' not found")
