"""CSV import domain service.

Drives one import batch through its lifecycle::

    upload -> preview / apply_mapping -> (staging review) -> commit

Uploaded bytes live in the blob store until the batch is committed,
abandoned or deleted. Parsed rows live in staging until commit.
"""

from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Optional

from budgetkit.database.base import Database
from budgetkit.domain.account import AccountService
from budgetkit.domain.column_mapping import detect_column_mapping
from budgetkit.domain.entities import (
    MAPPING_FIELDS,
    BatchStatus,
    ColumnMapping,
    CommitResult,
    ImportBatch,
    MappingPreview,
    ParsedCSV,
    StagingRowDraft,
    TransactionDraft,
)
from budgetkit.domain.errors import (
    CSV_FILE_NOT_FOUND,
    EMPTY_UPLOAD,
    INVALID_COLUMN_MAPPING,
    MISSING_COLUMN_MAPPING,
    NO_ROWS_TO_IMPORT,
    NotFoundError,
    ValidationError,
    project_not_found,
)
from budgetkit.domain.import_batch import ensure_transition, is_terminal, load_batch, require_status
from budgetkit.logging_setup import get_logger
from budgetkit.storage.base import CSV_CONTENT_TYPE, BlobStore, import_blob_key
from budgetkit.utils.amount_parser import parse_amount_minor_units
from budgetkit.utils.csv_parser import decode_upload, field_at, parse_csv
from budgetkit.utils.date_parser import normalize_date
from budgetkit.utils.row_hash import hash_row

_logger = get_logger(__name__)

PREVIEW_ROWS = 5


class CSVImportService:
    """Service for importing CSV bank statements through staged review."""

    def __init__(self, db: Database, blob_store: BlobStore):
        """Initialize CSV import service.

        Args:
            db: Database instance
            blob_store: Store holding the uploaded files
        """
        self.db = db
        self.blob_store = blob_store
        self.account_service = AccountService(db)

    def get_batch(self, batch_id: int, project_id: int) -> ImportBatch:
        """Get a batch of project.

        Raises:
            NotFoundError: If batch doesn't exist or belongs to another project
        """
        return load_batch(self.db, batch_id, project_id)

    def list_batches(self, project_id: int, open_only: bool = False) -> list[ImportBatch]:
        """List batches of a project, newest first.

        Args:
            project_id: Project ID
            open_only: If True, skip completed and abandoned batches
        """
        batches = self.db.list_import_batches(project_id)
        if open_only:
            batches = [b for b in batches if not is_terminal(b.status)]
        return batches

    def upload(self, project_id: int, account_id: int, filename: str, content: bytes) -> ImportBatch:
        """Store an uploaded CSV file and open a batch for it.

        Args:
            project_id: Project to import into
            account_id: Target account, must belong to the project
            filename: Original file name
            content: Raw file bytes

        Returns:
            The batch, now in 'mapping' status

        Raises:
            NotFoundError: If project or account doesn't exist
            ValidationError: If content or filename is empty
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        self.account_service.get_account(account_id, project_id)

        if not content:
            raise ValidationError(EMPTY_UPLOAD)
        filename = filename.strip()
        if not filename:
            raise ValidationError("File name cannot be empty")

        batch_id = self.db.create_import_batch(project_id=project_id, account_id=account_id, filename=filename)
        key = import_blob_key(project_id, batch_id)
        # A failed write leaves the batch in 'uploading'
        self.blob_store.put(key, content, CSV_CONTENT_TYPE)
        self.db.set_import_batch_blob_key(batch_id, key)

        batch = load_batch(self.db, batch_id, project_id)
        ensure_transition(batch, BatchStatus.MAPPING)
        self.db.update_import_batch_status(batch_id, BatchStatus.MAPPING)

        _logger.info(
            "csv_import:uploaded batch_id=%d project_id=%d account_id=%d bytes=%d",
            batch_id,
            project_id,
            account_id,
            len(content),
        )
        return load_batch(self.db, batch_id, project_id)

    def _read_csv(self, batch: ImportBatch) -> ParsedCSV:
        content = self.blob_store.get(batch.blob_key) if batch.blob_key else None
        if content is None:
            raise NotFoundError(CSV_FILE_NOT_FOUND)
        return parse_csv(decode_upload(content))

    def preview(self, batch_id: int, project_id: int, limit: int = PREVIEW_ROWS) -> MappingPreview:
        """Show headers, the first rows and a suggested mapping for a stored upload.

        Raises:
            NotFoundError: If batch or its stored file is missing
        """
        batch = load_batch(self.db, batch_id, project_id)
        parsed = self._read_csv(batch)
        return MappingPreview(
            batch=batch,
            headers=parsed.headers,
            preview_rows=parsed.rows[: max(limit, 0)],
            total_rows=len(parsed.rows),
            suggested_mapping=detect_column_mapping(parsed.headers),
        )

    def apply_mapping(
        self, batch_id: int, project_id: int, mapping: ColumnMapping | Mapping[str, str]
    ) -> ImportBatch:
        """Confirm the column mapping and stage every data row for review.

        Every row is fingerprinted and flagged as a duplicate when a
        transaction of the project already carries the same fingerprint.
        Validation happens before anything is written.

        Args:
            batch_id: Import batch ID
            project_id: Project the batch must belong to
            mapping: Header name for each of date, amount and description

        Returns:
            The batch, now in 'reviewing' status

        Raises:
            NotFoundError: If batch or its stored file is missing
            ConflictError: If the batch is not in 'mapping' status
            ValidationError: If a field is unmapped or maps to an unknown header
        """
        batch = load_batch(self.db, batch_id, project_id)
        require_status(batch, BatchStatus.MAPPING)

        if isinstance(mapping, ColumnMapping):
            mapping = mapping.to_dict()
        selected = {field: (mapping.get(field) or "").strip() for field in MAPPING_FIELDS}
        if not all(selected.values()):
            raise ValidationError(MISSING_COLUMN_MAPPING)
        confirmed = ColumnMapping.from_dict(selected)

        parsed = self._read_csv(batch)
        try:
            date_idx = parsed.headers.index(confirmed.date)
            amount_idx = parsed.headers.index(confirmed.amount)
            description_idx = parsed.headers.index(confirmed.description)
        except ValueError:
            raise ValidationError(INVALID_COLUMN_MAPPING) from None

        hashes = [hash_row(row) for row in parsed.rows]
        existing = self.db.find_existing_source_hashes(project_id, hashes)

        drafts = []
        for row_index, (row, source_hash) in enumerate(zip(parsed.rows, hashes)):
            description = field_at(row, description_idx)
            drafts.append(
                StagingRowDraft(
                    row_index=row_index,
                    raw_data=tuple(row),
                    source_hash=source_hash,
                    parsed_amount=parse_amount_minor_units(field_at(row, amount_idx)),
                    parsed_date=normalize_date(field_at(row, date_idx)),
                    parsed_description=description or None,
                    is_duplicate=source_hash in existing,
                )
            )

        self.db.set_import_batch_column_mapping(batch_id, confirmed)
        self.db.create_staging_rows(batch_id, drafts)
        self.db.set_import_batch_row_count(batch_id, len(drafts))
        self.db.update_import_batch_status(batch_id, BatchStatus.REVIEWING)

        _logger.info(
            "csv_import:mapped batch_id=%d rows=%d duplicates=%d",
            batch_id,
            len(drafts),
            sum(1 for draft in drafts if draft.is_duplicate),
        )
        return load_batch(self.db, batch_id, project_id)

    def commit(self, batch_id: int, project_id: int, today: Optional[date] = None) -> CommitResult:
        """Turn the non-excluded staging rows into permanent transactions.

        Rows without a parsed amount get 0, rows without a parsed date get
        today's date and rows without a description get an empty one. The
        transactions, the staging teardown and the status change are written
        together; the stored file is deleted afterwards on a best-effort
        basis.

        Args:
            batch_id: Import batch ID
            project_id: Project the batch must belong to
            today: Fallback date for rows without one; defaults to the current date

        Returns:
            CommitResult with the created transaction ids

        Raises:
            NotFoundError: If batch doesn't exist in the project
            ConflictError: If the batch is not 'reviewing', including a repeated commit
            ValidationError: If every row is excluded
        """
        batch = load_batch(self.db, batch_id, project_id)
        require_status(batch, BatchStatus.REVIEWING)

        all_rows = self.db.list_staging_rows(batch_id)
        included = [row for row in all_rows if not row.excluded]
        if not included:
            raise ValidationError(NO_ROWS_TO_IMPORT)

        fallback_date = (today or date.today()).isoformat()
        drafts = [
            TransactionDraft(
                project_id=batch.project_id,
                account_id=batch.account_id,
                amount=row.parsed_amount if row.parsed_amount is not None else 0,
                date=row.parsed_date if row.parsed_date is not None else fallback_date,
                description=row.parsed_description if row.parsed_description is not None else "",
                source_hash=row.source_hash,
                import_batch_id=batch.id,
                tag_ids=row.tag_ids,
            )
            for row in included
        ]

        transaction_ids = self.db.complete_import_batch(batch_id, drafts, completed_at=datetime.now(UTC))
        blob_deleted = self._delete_blob(batch)

        _logger.info(
            "csv_import:committed batch_id=%d transactions=%d discarded_rows=%d",
            batch_id,
            len(transaction_ids),
            len(all_rows),
        )
        return CommitResult(
            batch_id=batch_id,
            transaction_ids=transaction_ids,
            discarded_rows=len(all_rows),
            blob_deleted=blob_deleted,
        )

    def abandon(self, batch_id: int, project_id: int) -> ImportBatch:
        """Give up on an open batch: drop its staged rows and stored file.

        Raises:
            NotFoundError: If batch doesn't exist in the project
            ConflictError: If the batch is already completed or abandoned
        """
        batch = load_batch(self.db, batch_id, project_id)
        ensure_transition(batch, BatchStatus.ABANDONED)

        removed = self.db.delete_staging_rows(batch_id)
        self._delete_blob(batch)
        self.db.set_import_batch_blob_key(batch_id, None)
        self.db.update_import_batch_status(batch_id, BatchStatus.ABANDONED, completed_at=datetime.now(UTC))

        _logger.info("csv_import:abandoned batch_id=%d staging_rows=%d", batch_id, removed)
        return load_batch(self.db, batch_id, project_id)

    def delete(self, batch_id: int, project_id: int) -> None:
        """Delete a batch in any status.

        Its staging rows and stored file go with it; transactions created
        from it are kept and lose their batch reference.

        Raises:
            NotFoundError: If batch doesn't exist in the project
        """
        batch = load_batch(self.db, batch_id, project_id)
        self._delete_blob(batch)
        self.db.delete_import_batch(batch_id)
        _logger.info("csv_import:deleted batch_id=%d status=%s", batch_id, batch.status.value)

    def _delete_blob(self, batch: ImportBatch) -> bool:
        """Best-effort removal of the stored file. Returns True if a delete succeeded."""
        if not batch.blob_key:
            return False
        try:
            self.blob_store.delete(batch.blob_key)
        except Exception as e:  # noqa: BLE001
            _logger.warning(
                "csv_import:blob_delete_failed batch_id=%d key=%s error=%s: %s",
                batch.id,
                batch.blob_key,
                e.__class__.__name__,
                e,
            )
            return False
        return True
