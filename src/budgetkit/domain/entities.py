"""Domain model entities for budgetkit.

These are pure data classes representing business concepts, independent of
database schema. Services and the CLI only ever see these types; the
SQLAlchemy models stay behind the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class BatchStatus(str, Enum):
    """Lifecycle states of an import batch."""

    UPLOADING = "uploading"
    MAPPING = "mapping"
    REVIEWING = "reviewing"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


ACCOUNT_TYPES = ("checking", "savings", "credit", "cash", "investment")

MAPPING_FIELDS = ("date", "amount", "description")


@dataclass(frozen=True)
class Project:
    """Project domain entity; projects nest through parent_id."""

    id: int
    name: str
    parent_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    project_id: int
    name: str
    account_type: str
    balance: int
    created_at: datetime


@dataclass(frozen=True)
class Tag:
    """Tag domain entity."""

    id: int
    project_id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Permanent transaction. Amount is in minor units (cents)."""

    id: int
    project_id: int
    account_id: int
    amount: int
    date: str
    description: str
    notes: Optional[str]
    source_hash: Optional[str]
    import_batch_id: Optional[int]
    tag_ids: tuple[int, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ColumnMapping:
    """Confirmed mapping from semantic fields to CSV header names."""

    date: str
    amount: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"date": self.date, "amount": self.amount, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "ColumnMapping":
        return cls(date=data["date"], amount=data["amount"], description=data["description"])


@dataclass(frozen=True)
class ImportBatch:
    """One CSV upload and its review/commit workflow."""

    id: int
    project_id: int
    account_id: int
    filename: str
    row_count: Optional[int]
    status: BatchStatus
    blob_key: Optional[str]
    column_mapping: Optional[ColumnMapping]
    created_at: datetime
    completed_at: Optional[datetime]


@dataclass(frozen=True)
class StagingRow:
    """A parsed but not yet committed CSV data line."""

    id: int
    batch_id: int
    row_index: int
    raw_data: tuple[str, ...]
    source_hash: str
    parsed_amount: Optional[int]
    parsed_date: Optional[str]
    parsed_description: Optional[str]
    is_duplicate: bool
    excluded: bool
    tag_ids: tuple[int, ...]


@dataclass(frozen=True)
class StagingRowDraft:
    """Values for a staging row that has not been stored yet."""

    row_index: int
    raw_data: tuple[str, ...]
    source_hash: str
    parsed_amount: Optional[int]
    parsed_date: Optional[str]
    parsed_description: Optional[str]
    is_duplicate: bool


@dataclass(frozen=True)
class TransactionDraft:
    """Values for a transaction that has not been stored yet."""

    project_id: int
    account_id: int
    amount: int
    date: str
    description: str
    notes: Optional[str] = None
    source_hash: Optional[str] = None
    import_batch_id: Optional[int] = None
    tag_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class ParsedCSV:
    """Header row and data rows of a parsed CSV file."""

    headers: list[str]
    rows: list[list[str]]


@dataclass(frozen=True)
class MappingPreview:
    """What the mapping step shows before columns are confirmed."""

    batch: ImportBatch
    headers: list[str]
    preview_rows: list[list[str]]
    total_rows: int
    suggested_mapping: dict[str, str]


@dataclass(frozen=True)
class StagingSummary:
    """Row counts shown on the review screen."""

    total: int
    included: int
    excluded: int
    duplicates: int


@dataclass(frozen=True)
class SuggestionRow:
    """Row data handed to the tag suggester."""

    row_id: int
    description: str
    amount: int


@dataclass(frozen=True)
class TagSuggestion:
    """Tags proposed for one staging row."""

    row_id: int
    tag_ids: tuple[int, ...]


@dataclass(frozen=True)
class CommitResult:
    """Outcome of committing a batch."""

    batch_id: int
    transaction_ids: list[int] = field(default_factory=list)
    discarded_rows: int = 0
    blob_deleted: bool = False
