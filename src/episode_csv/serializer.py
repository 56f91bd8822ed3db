"""Render a Document back into CSV text.

A field is quoted (with inner quotes doubled) when it contains a delimiter, a
quote, a line break, or leading/trailing whitespace; otherwise it is written
verbatim.  Lines are joined with LF and there is no trailing newline.

A row whose fields are all empty would come back as a blank line and be
dropped by the tokenizer, so its first field is written as ``""``.  With
that, parse(serialize(doc)) reproduces any Document without raw line breaks.
"""

from collections.abc import Sequence

from episode_csv.schema import Document

_NEEDS_QUOTES = (",", '"', "\n", "\r")


def escape_field(field: str) -> str:
    """Quote and escape a single field if it needs it."""
    if any(char in field for char in _NEEDS_QUOTES) or field != field.strip():
        return '"' + field.replace('"', '""') + '"'
    return field


def serialize_record(fields: Sequence[str]) -> str:
    """Render one record as a CSV line."""
    if fields and all(field == "" for field in fields):
        return '""' + "," * (len(fields) - 1)
    return ",".join(escape_field(field) for field in fields)


def serialize(document: Document) -> str:
    """Render headers then rows, one record per line."""
    if not document.headers:
        return ""
    lines = [serialize_record(document.headers)]
    lines.extend(serialize_record(row) for row in document.rows)
    return "\n".join(lines)
