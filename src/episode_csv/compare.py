"""Episode-number diff between two independently parsed documents.

The external import tool rewrites the same files the engine writes, so after
a run the host application re-reads the file and compares it with what it
expected.  Episode numbers are handled as trimmed strings; duplicates are
shown in the sorted lists but collapse to one for the removed/added sets.
"""

import logging
from collections.abc import Iterable

from episode_csv.columns import require_column
from episode_csv.config import Candidate, episode_column_candidates
from episode_csv.schema import ColumnReference, ComparisonResult, Document

logger = logging.getLogger(__name__)


def episode_sort_key(value: str) -> tuple[int, int, str]:
    """Numeric values first in numeric order, then everything else lexically."""
    try:
        return (0, int(value), value)
    except ValueError:
        return (1, 0, value)


def extract_episode_numbers(document: Document, column_index: int) -> list[str]:
    """Return the trimmed, non-empty episode cells in row order."""
    if not 0 <= column_index < len(document.headers):
        raise IndexError(f"Column index {column_index} out of range for {len(document.headers)} headers")
    values = (row[column_index].strip() for row in document.rows)
    return [value for value in values if value]


def remaining_episodes(document: Document, column_index: int) -> list[int]:
    """Return the integer episode numbers still present, ascending; non-numeric cells are skipped."""
    numbers = []
    for value in extract_episode_numbers(document, column_index):
        try:
            numbers.append(int(value))
        except ValueError:
            logger.debug("Skipping non-numeric episode cell %r", value)
    return sorted(numbers)


def compare(original: Document, processed: Document, column_index: int) -> ComparisonResult:
    """Diff the episode column of two documents that share the same layout."""
    original_numbers = sorted(extract_episode_numbers(original, column_index), key=episode_sort_key)
    processed_numbers = sorted(extract_episode_numbers(processed, column_index), key=episode_sort_key)

    original_set, processed_set = set(original_numbers), set(processed_numbers)
    result = ComparisonResult(
        original_numbers=original_numbers,
        processed_numbers=processed_numbers,
        removed=sorted(original_set - processed_set, key=episode_sort_key),
        added=sorted(processed_set - original_set, key=episode_sort_key),
        identical=original_numbers == processed_numbers,
    )
    logger.info(
        "Compared %d -> %d episodes: %d removed, %d added, identical=%s",
        result.original_count,
        result.processed_count,
        len(result.removed),
        len(result.added),
        result.identical,
    )
    return result


def _episode_column_only(document: Document, column: ColumnReference) -> Document:
    """Project a document down to its episode column."""
    return Document(headers=[column.matched_header_name], rows=[[row[column.index]] for row in document.rows])


def compare_documents(
    original: Document, processed: Document, candidates: Iterable[Candidate] | None = None
) -> ComparisonResult:
    """Locate the episode column in each document separately, then compare.

    The external tool may reorder or drop columns, so the two documents can
    have different layouts.  Raises ColumnNotFoundError if either has no
    episode column.
    """
    candidates = list(candidates) if candidates is not None else list(episode_column_candidates())
    original_column = require_column(original.headers, candidates)
    processed_column = require_column(processed.headers, candidates)
    if original_column.index != processed_column.index:
        logger.info("Episode column moved from index %d to %d", original_column.index, processed_column.index)

    return compare(_episode_column_only(original, original_column), _episode_column_only(processed, processed_column), 0)
