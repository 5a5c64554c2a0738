"""Import batch lifecycle rules."""

from budgetkit.database.base import Database
from budgetkit.domain.entities import BatchStatus, ImportBatch
from budgetkit.domain.errors import (
    ConflictError,
    NotFoundError,
    batch_not_found,
    batch_not_in_status,
    invalid_batch_transition,
)

ALLOWED_TRANSITIONS: dict[BatchStatus, frozenset[BatchStatus]] = {
    BatchStatus.UPLOADING: frozenset({BatchStatus.MAPPING, BatchStatus.ABANDONED}),
    BatchStatus.MAPPING: frozenset({BatchStatus.REVIEWING, BatchStatus.ABANDONED}),
    BatchStatus.REVIEWING: frozenset({BatchStatus.COMPLETED, BatchStatus.ABANDONED}),
    BatchStatus.COMPLETED: frozenset(),
    BatchStatus.ABANDONED: frozenset(),
}


def can_transition(current: BatchStatus, target: BatchStatus) -> bool:
    """Return True if a batch in current status may move to target."""
    return target in ALLOWED_TRANSITIONS[BatchStatus(current)]


def is_terminal(status: BatchStatus) -> bool:
    """Return True for statuses with no outgoing transitions."""
    return not ALLOWED_TRANSITIONS[BatchStatus(status)]


def ensure_transition(batch: ImportBatch, target: BatchStatus) -> None:
    """Raise ConflictError unless batch may move to target."""
    if not can_transition(batch.status, target):
        raise ConflictError(invalid_batch_transition(batch.id, batch.status.value, BatchStatus(target).value))


def require_status(batch: ImportBatch, expected: BatchStatus) -> None:
    """Raise ConflictError unless batch is currently in expected status."""
    if batch.status != expected:
        raise ConflictError(batch_not_in_status(batch.id, batch.status.value, BatchStatus(expected).value))


def load_batch(db: Database, batch_id: int, project_id: int) -> ImportBatch:
    """Fetch a batch of project, treating other projects' batches as missing.

    Raises:
        NotFoundError: If batch doesn't exist or belongs to another project
    """
    batch = db.get_import_batch(batch_id)
    if batch is None or batch.project_id != project_id:
        raise NotFoundError(batch_not_found(batch_id))
    return batch
