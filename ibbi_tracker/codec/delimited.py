"""Quote-aware comma-delimited text format.

Encoding quotes any field containing a comma, a double quote, or a line
break, doubling embedded quotes. Decoding is a two-state scanner (outside
quotes / inside quotes) that accepts LF and CRLF row terminators and a final
row without a terminator. ``decode(encode(rows)) == rows`` for any rows of
strings, including values with commas, quotes and embedded newlines.
"""

from typing import Dict, Iterable, List, Sequence, Tuple, Type

from ibbi_tracker.domain.models import CanonicalRecord

DELIMITER = ","
QUOTE = '"'
TERMINATOR = "\n"

_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n", "\r")


def encode_field(value) -> str:
    """Encode a single field, quoting it when required."""
    text = "" if value is None else str(value)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def encode(rows: Iterable[Sequence[str]]) -> str:
    """Encode rows (header row first) as newline-terminated delimited lines."""
    return "".join(
        DELIMITER.join(encode_field(value) for value in row) + TERMINATOR
        for row in rows
    )


def decode(text: str) -> List[List[str]]:
    """Decode delimited text into rows of fields.

    Args:
        text: Encoded text

    Returns:
        List of rows; an empty input yields an empty list
    """
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False
    row_started = False
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]

        if in_quotes:
            if ch == QUOTE:
                if i + 1 < length and text[i + 1] == QUOTE:
                    field.append(QUOTE)
                    i += 2
                    continue
                in_quotes = False
            else:
                field.append(ch)
            i += 1
            continue

        if ch == QUOTE:
            in_quotes = True
            row_started = True
        elif ch == DELIMITER:
            row.append("".join(field))
            field = []
            row_started = True
        elif ch == "\n" or (ch == "\r" and i + 1 < length and text[i + 1] == "\n"):
            if ch == "\r":
                i += 1
            row.append("".join(field))
            rows.append(row)
            row, field = [], []
            row_started = False
        else:
            field.append(ch)
            row_started = True
        i += 1

    # Final row without a terminator
    if row_started or field:
        row.append("".join(field))
        rows.append(row)

    return rows


def decode_keyed(text: str, skip_empty_rows: bool = False) -> Tuple[List[str], List[Dict[str, str]]]:
    """Decode text whose first row is a header row into keyed rows.

    Short rows are padded with empty strings; cells beyond the header width
    are ignored.

    Args:
        text: Encoded text
        skip_empty_rows: Drop rows whose fields are all empty (blank lines)

    Returns:
        Tuple of (headers, rows keyed by header)
    """
    rows = decode(text)
    if not rows:
        return [], []

    headers = rows[0]
    keyed: List[Dict[str, str]] = []
    for row in rows[1:]:
        if skip_empty_rows and not any(value.strip() for value in row):
            continue
        padded = row + [""] * (len(headers) - len(row))
        keyed.append(dict(zip(headers, padded)))
    return headers, keyed


def encode_records(records: Iterable[CanonicalRecord], model: Type[CanonicalRecord]) -> str:
    """Encode canonical records under their fixed header row."""
    return encode([list(model.HEADERS)] + [record.to_row() for record in records])


def decode_records(text: str, model: Type[CanonicalRecord]) -> List[CanonicalRecord]:
    """Decode text written by ``encode_records`` back into records.

    Raises:
        ValueError: If the header row does not match the model's headers
    """
    rows = decode(text)
    if not rows:
        return []
    if tuple(rows[0]) != model.HEADERS:
        raise ValueError(
            f"Header mismatch for {model.__name__}: expected {list(model.HEADERS)}, got {rows[0]}"
        )
    return [model.from_row(row) for row in rows[1:]]
