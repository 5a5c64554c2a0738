"""Heuristic detection of which CSV columns hold date, amount and description."""

from collections.abc import Sequence

# Ordered: the first field's patterns are tried before the next field's.
FIELD_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("date", ("date", "posted", "transaction date", "trans date")),
    ("amount", ("amount", "debit", "credit", "sum", "total")),
    ("description", ("description", "memo", "payee", "merchant", "name")),
)


def detect_column_mapping(headers: Sequence[str]) -> dict[str, str]:
    """Suggest a header for each semantic field.

    For every field, the earliest header (in header order) whose lower-cased
    text contains any of the field's patterns wins. Fields without a match
    are left out. The same header may be suggested for more than one field;
    the user-confirmed mapping is what gets stored.

    Args:
        headers: CSV header row

    Returns:
        Dict from field name to header string
    """
    lowered = [header.lower() for header in headers]
    mapping: dict[str, str] = {}
    for field, patterns in FIELD_PATTERNS:
        for header, lower in zip(headers, lowered):
            if any(pattern in lower for pattern in patterns):
                mapping[field] = header
                break
    return mapping
