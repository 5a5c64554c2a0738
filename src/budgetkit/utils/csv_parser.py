"""Minimal CSV parsing for bank statement uploads."""

from budgetkit.domain.entities import ParsedCSV


def decode_upload(content: bytes) -> str:
    """Decode raw upload bytes.

    A leading UTF-8 byte order mark is dropped and undecodable bytes are
    replaced; no other encoding detection is attempted.
    """
    return content.decode("utf-8-sig", errors="replace")


def parse_line(line: str) -> list[str]:
    """Split one CSV line into stripped fields.

    Every double quote toggles the quoted state and is dropped from the
    output. Commas separate fields only outside quotes. Escaped quotes
    ("") are not recognised.
    """
    fields = []
    current = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    fields.append("".join(current).strip())
    return fields


def parse_csv(text: str) -> ParsedCSV:
    """Parse CSV text into a header row and data rows.

    Blank lines are discarded and the first remaining line is the header.
    Quoted fields spanning several lines are not supported: each physical
    line is parsed on its own.

    Args:
        text: Decoded CSV content

    Returns:
        ParsedCSV with headers and rows (both empty for blank input)
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return ParsedCSV(headers=[], rows=[])

    headers = parse_line(lines[0])
    rows = [parse_line(line) for line in lines[1:]]
    return ParsedCSV(headers=headers, rows=rows)


def field_at(row: list[str], index: int) -> str:
    """Return the field at index, or an empty string for short rows."""
    if 0 <= index < len(row):
        return row[index]
    return ""
