"""Account domain service."""

from budgetkit.database.base import Database
from budgetkit.domain.entities import ACCOUNT_TYPES, Account as AccountEntity
from budgetkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_name,
    project_not_found,
)


class AccountService:
    """Service for managing accounts within a project."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, project_id: int, name: str, account_type: str = "checking") -> int:
        """Create a new account.

        Args:
            project_id: Owning project ID
            name: Account name
            account_type: One of ACCOUNT_TYPES

        Returns:
            Account ID

        Raises:
            NotFoundError: If project doesn't exist
            ValidationError: If name is empty or account type is unknown
            ConflictError: If account name already exists in the project
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))

        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Unknown account type '{account_type}'. Expected one of: {', '.join(ACCOUNT_TYPES)}"
            )

        for acc in self.db.list_accounts(project_id):
            if acc.name == name:
                raise ConflictError(duplicate_name("Account", name))

        return self.db.create_account(project_id=project_id, name=name, account_type=account_type)

    def get_account(self, account_id: int, project_id: int) -> AccountEntity:
        """Get an account that belongs to project.

        Args:
            account_id: Account ID
            project_id: Project the account must belong to

        Returns:
            Account entity

        Raises:
            NotFoundError: If account doesn't exist or belongs to another project
        """
        account = self.db.get_account(account_id)
        if account is None or account.project_id != project_id:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, project_id: int) -> list[AccountEntity]:
        """List accounts of a project.

        Returns:
            List of account entities ordered by name
        """
        return self.db.list_accounts(project_id)
