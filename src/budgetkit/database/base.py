"""Abstract database interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Optional

# Import entities directly; domain/__init__.py stays free of service imports
from budgetkit.domain.entities import (
    Project,
    Account,
    Tag,
    Transaction,
    TransactionDraft,
    ImportBatch,
    BatchStatus,
    ColumnMapping,
    StagingRow,
    StagingRowDraft,
)


class Database(ABC):
    """Abstract database interface for budgetkit."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Project operations
    @abstractmethod
    def create_project(self, name: str, parent_id: Optional[int] = None) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def list_projects(self, parent_id: Optional[int] = None, roots_only: bool = False) -> list[Project]:
        """List projects; filter by parent, or only top-level projects."""
        pass

    @abstractmethod
    def count_child_projects(self, project_id: int) -> int:
        """Count direct children of a project."""
        pass

    @abstractmethod
    def count_open_import_batches(self, project_id: int) -> int:
        """Count batches of a project that are neither completed nor abandoned."""
        pass

    @abstractmethod
    def delete_project(self, project_id: int) -> None:
        """Delete a project and everything it owns."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, project_id: int, name: str, account_type: str = "checking") -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, project_id: int) -> list[Account]:
        """List accounts of a project."""
        pass

    # Tag operations
    @abstractmethod
    def create_tag(self, project_id: int, name: str) -> int:
        """Create a tag. Returns tag ID."""
        pass

    @abstractmethod
    def get_tag(self, tag_id: int) -> Optional[Tag]:
        """Get tag by ID."""
        pass

    @abstractmethod
    def list_tags(self, project_id: int) -> list[Tag]:
        """List tags of a project ordered by name."""
        pass

    @abstractmethod
    def delete_tag(self, tag_id: int) -> None:
        """Delete a tag and its transaction links."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, draft: TransactionDraft) -> int:
        """Create a transaction with its tag links. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        project_id: int,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        import_batch_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions of a project, newest first.

        Args:
            project_id: Project to list
            account_id: Optional account ID filter
            start_date: Optional inclusive start (compared as ISO text)
            end_date: Optional inclusive end (compared as ISO text)
            import_batch_id: Optional originating batch filter
        """
        pass

    @abstractmethod
    def find_existing_source_hashes(self, project_id: int, hashes: Iterable[str]) -> set[str]:
        """Return the subset of hashes already stored on the project's transactions."""
        pass

    # Import batch operations
    @abstractmethod
    def create_import_batch(self, project_id: int, account_id: int, filename: str) -> int:
        """Create a batch in 'uploading' status. Returns batch ID."""
        pass

    @abstractmethod
    def get_import_batch(self, batch_id: int) -> Optional[ImportBatch]:
        """Get import batch by ID."""
        pass

    @abstractmethod
    def list_import_batches(self, project_id: int) -> list[ImportBatch]:
        """List batches of a project, newest first."""
        pass

    @abstractmethod
    def update_import_batch_status(
        self, batch_id: int, status: BatchStatus, completed_at: Optional[datetime] = None
    ) -> None:
        """Set batch status and optionally the completion timestamp."""
        pass

    @abstractmethod
    def set_import_batch_blob_key(self, batch_id: int, blob_key: Optional[str]) -> None:
        """Record or clear the blob key of a batch."""
        pass

    @abstractmethod
    def set_import_batch_column_mapping(self, batch_id: int, mapping: ColumnMapping) -> None:
        """Persist the confirmed column mapping."""
        pass

    @abstractmethod
    def set_import_batch_row_count(self, batch_id: int, row_count: int) -> None:
        """Persist the number of data rows found at mapping time."""
        pass

    @abstractmethod
    def complete_import_batch(
        self, batch_id: int, drafts: Sequence[TransactionDraft], completed_at: datetime
    ) -> list[int]:
        """Materialise transactions and close a reviewing batch in one transaction.

        Inserts the transactions and their tag links, deletes every staging
        row of the batch, sets status 'completed' with completed_at and
        clears the blob key. Returns the new transaction IDs in draft order.

        Raises:
            ConflictError: If the batch is no longer 'reviewing'; nothing is written
        """
        pass

    @abstractmethod
    def delete_import_batch(self, batch_id: int) -> None:
        """Delete a batch and its staging rows; transactions lose their batch reference."""
        pass

    # Staging row operations
    @abstractmethod
    def create_staging_rows(self, batch_id: int, drafts: Sequence[StagingRowDraft]) -> int:
        """Insert staging rows for a batch. Returns the number created."""
        pass

    @abstractmethod
    def get_staging_row(self, row_id: int) -> Optional[StagingRow]:
        """Get staging row by ID."""
        pass

    @abstractmethod
    def list_staging_rows(self, batch_id: int, excluded: Optional[bool] = None) -> list[StagingRow]:
        """List staging rows of a batch by row index, optionally filtered by excluded flag."""
        pass

    @abstractmethod
    def update_staging_row_excluded(self, row_id: int, excluded: bool) -> None:
        """Set the excluded flag of a staging row."""
        pass

    @abstractmethod
    def update_staging_row_tags(self, row_id: int, tag_ids: Sequence[int]) -> None:
        """Overwrite the pending tag ids of a staging row."""
        pass

    @abstractmethod
    def delete_staging_rows(self, batch_id: int) -> int:
        """Delete every staging row of a batch. Returns the number deleted."""
        pass

    @abstractmethod
    def remove_tag_from_staging_rows(self, project_id: int, tag_id: int) -> int:
        """Strip a tag id from pending tag lists in the project's batches. Returns rows changed."""
        pass
