"""Row fingerprints for duplicate detection.

The fingerprint is a 32-bit rolling hash rendered as 8 lowercase hex
characters. It is only used for equality checks between staged rows and
stored transactions, never as a security boundary. Both sides must be
computed with ``hash_row`` on the same field list.
"""

from collections.abc import Sequence

FIELD_SEPARATOR = "|"

_UINT32 = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def _to_int32(value: int) -> int:
    value &= _UINT32
    if value & _INT32_SIGN:
        value -= 1 << 32
    return value


def hash_string(text: str) -> str:
    """Hash a string with ``h = int32(h * 31 + unit)`` over its UTF-16 code units."""
    data = text.encode("utf-16-le")
    acc = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        acc = _to_int32(acc * 31 + unit)
    return format(abs(acc), "08x")


def hash_row(fields: Sequence[str]) -> str:
    """Fingerprint a row from its raw field values.

    Args:
        fields: Raw field values in column order

    Returns:
        8-character lowercase hex digest
    """
    return hash_string(FIELD_SEPARATOR.join(fields))
