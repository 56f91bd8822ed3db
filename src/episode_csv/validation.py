"""Row width normalisation and document integrity checks.

validate_rows is the lossy-but-recorded step between the tokenizer and a
Document: every record is forced to the header width, and every forced
change is logged and returned as a ParseWarning.  Callers that cannot accept
the loss (especially truncation, which drops trailing data) should inspect
the warnings and fall back to repair.repair on the original text.
"""

import logging
from collections.abc import Sequence

from episode_csv.schema import Document, IntegrityReport, ParseWarning, Record, WarningAction

logger = logging.getLogger(__name__)


def validate_rows(headers: Sequence[str], raw_records: Sequence[Record]) -> tuple[list[Record], list[ParseWarning]]:
    """Pad short records and truncate long ones to len(headers), recording each correction."""
    n_cols = len(headers)
    rows: list[Record] = []
    warnings: list[ParseWarning] = []

    for i, record in enumerate(raw_records):
        n_fields = len(record)
        if n_fields == n_cols:
            rows.append(list(record))
            continue

        if n_fields < n_cols:
            rows.append(list(record) + [""] * (n_cols - n_fields))
            warnings.append(
                ParseWarning(row_index=i, expected_field_count=n_cols, actual_field_count=n_fields, action=WarningAction.PAD)
            )
            logger.warning("Row %d has %d fields, expected %d: padded with empty fields", i, n_fields, n_cols)
        else:
            dropped = list(record[n_cols:])
            rows.append(list(record[:n_cols]))
            warnings.append(
                ParseWarning(
                    row_index=i,
                    expected_field_count=n_cols,
                    actual_field_count=n_fields,
                    action=WarningAction.TRUNCATE,
                    detail="dropped trailing fields: " + ", ".join(repr(value) for value in dropped),
                )
            )
            # Truncation loses data that may belong to the last real column
            logger.warning("Row %d has %d fields, expected %d: TRUNCATED, dropped %r", i, n_fields, n_cols, dropped)

    return rows, warnings


def check_integrity(document: Document) -> IntegrityReport:
    """Report structural problems in a document without changing it."""
    errors: list[str] = []
    warnings: list[str] = []

    if not document.headers:
        return IntegrityReport(valid=False, errors=["Document has no header row"])

    # Blank and duplicate header names are legal but usually a sign of a bad export
    blank = sum(1 for header in document.headers if not header.strip())
    if blank:
        warnings.append(f"{blank} blank header name(s)")

    seen: set[str] = set()
    duplicates: list[str] = []
    for header in document.headers:
        key = header.strip().lower()
        if key and key in seen:
            duplicates.append(header)
        seen.add(key)
    if duplicates:
        warnings.append(f"{len(duplicates)} duplicate header name(s): {', '.join(duplicates)}")

    if not document.rows:
        warnings.append("Document has no data rows")

    # Rows can only be misaligned if they were mutated after validation
    n_cols = len(document.headers)
    for i, row in enumerate(document.rows):
        if len(row) != n_cols:
            errors.append(f"Row {i} has {len(row)} fields, expected {n_cols}")

    return IntegrityReport(valid=not errors, errors=errors, warnings=warnings)
