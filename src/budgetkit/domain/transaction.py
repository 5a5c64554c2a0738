"""Transaction domain service."""

from collections.abc import Sequence
from datetime import date
from typing import Optional

from budgetkit.database.base import Database
from budgetkit.domain.entities import Transaction as TransactionEntity, TransactionDraft
from budgetkit.domain.errors import NotFoundError, ValidationError, account_not_found, tag_not_found
from budgetkit.domain.staging import dedupe_tag_ids


class TransactionService:
    """Service for permanent transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        project_id: int,
        account_id: int,
        amount: int,
        date: date,
        description: str = "",
        notes: Optional[str] = None,
        tag_ids: Sequence[int] = (),
    ) -> int:
        """Create a transaction by hand, outside any import.

        Args:
            project_id: Owning project ID
            account_id: Account ID, must belong to the project
            amount: Signed amount in cents
            date: Transaction date
            description: Description, may be empty
            notes: Optional notes
            tag_ids: Tags of the project; repeats are collapsed

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If account is not an account of the project
            ValidationError: If a tag id is not a tag of the project
        """
        account = self.db.get_account(account_id)
        if account is None or account.project_id != project_id:
            raise NotFoundError(account_not_found(account_id))

        unique_tag_ids = dedupe_tag_ids(tag_ids)
        known = {tag.id for tag in self.db.list_tags(project_id)}
        for tag_id in unique_tag_ids:
            if tag_id not in known:
                raise ValidationError(tag_not_found(tag_id))

        return self.db.create_transaction(
            TransactionDraft(
                project_id=project_id,
                account_id=account_id,
                amount=amount,
                date=date.isoformat(),
                description=description.strip(),
                notes=notes,
                tag_ids=unique_tag_ids,
            )
        )

    def get_transaction(self, transaction_id: int, project_id: int) -> TransactionEntity:
        """Get a transaction that belongs to project.

        Raises:
            NotFoundError: If transaction doesn't exist or belongs to another project
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None or transaction.project_id != project_id:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return transaction

    def list_transactions(
        self,
        project_id: int,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        import_batch_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters.

        Args:
            project_id: Project to list
            account_id: Optional account ID filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            import_batch_id: Optional originating batch filter

        Returns:
            List of transaction entities, newest first

        Raises:
            ValidationError: If start_date is after end_date
            NotFoundError: If account_id is not an account of the project
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")
        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None or account.project_id != project_id:
                raise NotFoundError(account_not_found(account_id))

        return self.db.list_transactions(
            project_id=project_id,
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            import_batch_id=import_batch_id,
        )
