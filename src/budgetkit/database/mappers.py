"""Mapper functions to convert between domain models and SQLAlchemy models.

JSON columns (raw row data, pending tag ids, column mapping) are turned into
typed tuples and dataclasses here, so nothing above the database layer
handles serialized blobs.
"""

from typing import Any, Optional

from budgetkit.domain import entities as domain
from budgetkit.database.models import (
    Project as ORMProject,
    Account as ORMAccount,
    Tag as ORMTag,
    Transaction as ORMTransaction,
    ImportBatch as ORMImportBatch,
    ImportBatchRow as ORMImportBatchRow,
)


def _id_tuple(value: Optional[list[Any]]) -> tuple[int, ...]:
    """Stored id lists: NULL means empty."""
    if not value:
        return ()
    return tuple(int(item) for item in value)


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        parent_id=orm_project.parent_id,
        created_at=orm_project.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        project_id=orm_account.project_id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        balance=orm_account.balance,
        created_at=orm_account.created_at,
    )


def tag_to_domain(orm_tag: ORMTag) -> domain.Tag:
    """Convert SQLAlchemy Tag model to domain Tag entity."""
    return domain.Tag(
        id=orm_tag.id,
        project_id=orm_tag.project_id,
        name=orm_tag.name,
        created_at=orm_tag.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        project_id=orm_transaction.project_id,
        account_id=orm_transaction.account_id,
        amount=orm_transaction.amount,
        date=orm_transaction.date,
        description=orm_transaction.description,
        notes=orm_transaction.notes,
        source_hash=orm_transaction.source_hash,
        import_batch_id=orm_transaction.import_batch_id,
        tag_ids=tuple(tag.id for tag in orm_transaction.tags),
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def import_batch_to_domain(orm_batch: ORMImportBatch) -> domain.ImportBatch:
    """Convert SQLAlchemy ImportBatch model to domain ImportBatch entity."""
    mapping = None
    if orm_batch.column_mapping:
        mapping = domain.ColumnMapping.from_dict(orm_batch.column_mapping)
    return domain.ImportBatch(
        id=orm_batch.id,
        project_id=orm_batch.project_id,
        account_id=orm_batch.account_id,
        filename=orm_batch.filename,
        row_count=orm_batch.row_count,
        status=domain.BatchStatus(orm_batch.status),
        blob_key=orm_batch.blob_key,
        column_mapping=mapping,
        created_at=orm_batch.created_at,
        completed_at=orm_batch.completed_at,
    )


def staging_row_to_domain(orm_row: ORMImportBatchRow) -> domain.StagingRow:
    """Convert SQLAlchemy ImportBatchRow model to domain StagingRow entity."""
    return domain.StagingRow(
        id=orm_row.id,
        batch_id=orm_row.batch_id,
        row_index=orm_row.row_index,
        raw_data=tuple(str(value) for value in orm_row.raw_data or ()),
        source_hash=orm_row.source_hash,
        parsed_amount=orm_row.parsed_amount,
        parsed_date=orm_row.parsed_date,
        parsed_description=orm_row.parsed_description,
        is_duplicate=bool(orm_row.is_duplicate),
        excluded=bool(orm_row.excluded),
        tag_ids=_id_tuple(orm_row.tag_ids),
    )


def staging_row_from_draft(batch_id: int, draft: domain.StagingRowDraft) -> ORMImportBatchRow:
    """Build an unsaved ImportBatchRow from a domain draft."""
    return ORMImportBatchRow(
        batch_id=batch_id,
        row_index=draft.row_index,
        raw_data=list(draft.raw_data),
        source_hash=draft.source_hash,
        parsed_amount=draft.parsed_amount,
        parsed_date=draft.parsed_date,
        parsed_description=draft.parsed_description,
        is_duplicate=draft.is_duplicate,
        excluded=False,
        tag_ids=None,
    )


def transaction_from_draft(draft: domain.TransactionDraft) -> ORMTransaction:
    """Build an unsaved Transaction from a domain draft (tags are linked separately)."""
    return ORMTransaction(
        project_id=draft.project_id,
        account_id=draft.account_id,
        amount=draft.amount,
        date=draft.date,
        description=draft.description,
        notes=draft.notes,
        source_hash=draft.source_hash,
        import_batch_id=draft.import_batch_id,
    )
