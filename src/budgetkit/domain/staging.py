"""Staging row review operations for import batches."""

from collections.abc import Iterable, Sequence
from typing import Optional

from budgetkit.database.base import Database
from budgetkit.domain.entities import (
    BatchStatus,
    ImportBatch,
    StagingRow,
    StagingSummary,
    TagSuggestion,
)
from budgetkit.domain.errors import (
    NotFoundError,
    ValidationError,
    staging_row_not_found,
    tag_not_found,
)
from budgetkit.domain.import_batch import load_batch, require_status


def dedupe_tag_ids(tag_ids: Iterable[int]) -> tuple[int, ...]:
    """Collapse repeated ids, keeping the first occurrence of each."""
    return tuple(dict.fromkeys(int(tag_id) for tag_id in tag_ids))


class StagingService:
    """Review-phase operations on the staging rows of a batch.

    Every call is scoped to a project: a batch or row outside it is reported
    as not found. Mutations require the batch to be 'reviewing'.
    """

    def __init__(self, db: Database):
        """Initialize staging service.

        Args:
            db: Database instance
        """
        self.db = db

    def _reviewing_batch(self, batch_id: int, project_id: int) -> ImportBatch:
        batch = load_batch(self.db, batch_id, project_id)
        require_status(batch, BatchStatus.REVIEWING)
        return batch

    def _row_in_batch(self, batch: ImportBatch, row_id: int) -> StagingRow:
        row = self.db.get_staging_row(row_id)
        if row is None or row.batch_id != batch.id:
            raise NotFoundError(staging_row_not_found(row_id, batch.id))
        return row

    def list_rows(self, batch_id: int, project_id: int, excluded: Optional[bool] = None) -> list[StagingRow]:
        """List staging rows by row index.

        Args:
            batch_id: Import batch ID
            project_id: Project the batch must belong to
            excluded: If set, only rows with this excluded flag

        Returns:
            List of staging rows
        """
        load_batch(self.db, batch_id, project_id)
        return self.db.list_staging_rows(batch_id, excluded=excluded)

    def summary(self, batch_id: int, project_id: int) -> StagingSummary:
        """Count total, included, excluded and duplicate rows of a batch."""
        rows = self.list_rows(batch_id, project_id)
        excluded = sum(1 for row in rows if row.excluded)
        return StagingSummary(
            total=len(rows),
            included=len(rows) - excluded,
            excluded=excluded,
            duplicates=sum(1 for row in rows if row.is_duplicate),
        )

    def toggle_exclude(self, batch_id: int, project_id: int, row_id: int) -> bool:
        """Flip the excluded flag of a row.

        Returns:
            The new excluded value
        """
        batch = self._reviewing_batch(batch_id, project_id)
        row = self._row_in_batch(batch, row_id)
        excluded = not row.excluded
        self.db.update_staging_row_excluded(row.id, excluded)
        return excluded

    def set_excluded(self, batch_id: int, project_id: int, row_id: int, excluded: bool) -> None:
        """Set the excluded flag of a row to an explicit value."""
        batch = self._reviewing_batch(batch_id, project_id)
        row = self._row_in_batch(batch, row_id)
        if row.excluded != excluded:
            self.db.update_staging_row_excluded(row.id, excluded)

    def replace_tags(self, batch_id: int, project_id: int, row_id: int, tag_ids: Sequence[int]) -> tuple[int, ...]:
        """Overwrite a row's pending tags with a user-chosen list.

        Args:
            batch_id: Import batch ID
            project_id: Project the batch must belong to
            row_id: Staging row ID
            tag_ids: New tag ids; repeats are collapsed

        Returns:
            The stored tag ids

        Raises:
            ValidationError: If an id is not a tag of the project; nothing is changed
        """
        batch = self._reviewing_batch(batch_id, project_id)
        row = self._row_in_batch(batch, row_id)

        unique_ids = dedupe_tag_ids(tag_ids)
        known = {tag.id for tag in self.db.list_tags(project_id)}
        for tag_id in unique_ids:
            if tag_id not in known:
                raise ValidationError(tag_not_found(tag_id))

        self.db.update_staging_row_tags(row.id, unique_ids)
        return unique_ids

    def bulk_replace_tags(self, batch_id: int, project_id: int, updates: Sequence[TagSuggestion]) -> int:
        """Apply many tag replacements, one row at a time.

        Writes are not grouped in a transaction: if a row fails, the rows
        before it keep their new tags and the error propagates.

        Returns:
            Number of rows updated
        """
        batch = self._reviewing_batch(batch_id, project_id)
        updated = 0
        for update in updates:
            row = self._row_in_batch(batch, update.row_id)
            self.db.update_staging_row_tags(row.id, dedupe_tag_ids(update.tag_ids))
            updated += 1
        return updated

    def non_excluded_rows(self, batch_id: int, project_id: int) -> list[StagingRow]:
        """Rows that will become transactions at commit, by row index."""
        load_batch(self.db, batch_id, project_id)
        return self.db.list_staging_rows(batch_id, excluded=False)
