"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested entity does not exist or is not part of the addressed project."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or invalid state transitions."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def project_not_found(project_id: int) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account or account outside the project."""
    return f"Account {account_id} not found"


def tag_not_found(tag_id: int) -> str:
    """Return message for missing tag or tag outside the project."""
    return f"Tag {tag_id} not found"


def batch_not_found(batch_id: int) -> str:
    """Return message for missing import batch or batch outside the project."""
    return f"Import batch {batch_id} not found"


def staging_row_not_found(row_id: int, batch_id: int) -> str:
    """Return message for a row that is not part of the batch."""
    return f"Row {row_id} not found in import batch {batch_id}"


def invalid_batch_transition(batch_id: int, current: str, target: str) -> str:
    """Return message for a forbidden batch status change."""
    return f"Import batch {batch_id} cannot move from '{current}' to '{target}'"


def batch_not_in_status(batch_id: int, current: str, expected: str) -> str:
    """Return message when an operation needs the batch in another status."""
    return f"Import batch {batch_id} is '{current}', expected '{expected}'"


def duplicate_name(kind: str, name: str) -> str:
    """Return message for a name already taken within a project."""
    return f"{kind} with name '{name}' already exists in this project"


def project_delete_blocked(project_id: int, child_count: int) -> str:
    """Return message when a project still has child projects."""
    return (
        f"Cannot delete project {project_id}: it has {child_count} "
        f"child project{'s' if child_count != 1 else ''}. Delete them first."
    )


MISSING_COLUMN_MAPPING = "Please map all required columns"
INVALID_COLUMN_MAPPING = "Invalid column mapping"
CSV_FILE_NOT_FOUND = "CSV file not found"
EMPTY_UPLOAD = "Please select a CSV file"
NO_ROWS_TO_IMPORT = "No rows to import"
