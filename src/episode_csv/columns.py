"""Header lookup by name heuristics, and column-level document transforms.

Header matching is a case-insensitive substring test.  A candidate is either
a single string or a tuple of strings that must all appear in the header,
e.g. ``("episode", "number")``.  Candidates are tried in order and the
first one that matches any header wins; header order only breaks ties within
a single candidate.  Callers control the policy entirely through the order of
the candidate list they pass in.

Every transform here is copy-on-write: the input Document is never touched.
"""

import logging
from collections.abc import Iterable, Sequence

from episode_csv.config import Candidate
from episode_csv.errors import ColumnNotFoundError
from episode_csv.patterns import DEFAULT_NAME_COLUMNS, DEFAULT_OVERVIEW_COLUMNS, WHITESPACE_RUN_RE
from episode_csv.schema import ColumnReference, Document

logger = logging.getLogger(__name__)


def _matches(header: str, candidate: Candidate) -> bool:
    """Return True if the header contains the candidate (every part, for a compound candidate)."""
    text = header.strip().lower()
    parts = (candidate,) if isinstance(candidate, str) else candidate
    return bool(parts) and all(part.lower() in text for part in parts)


def locate_column(headers: Sequence[str], candidates: Iterable[Candidate]) -> ColumnReference | None:
    """Return the first header matching the highest-priority candidate, or None if nothing matches."""
    for candidate in candidates:
        for index, header in enumerate(headers):
            if _matches(header, candidate):
                return ColumnReference(index=index, matched_header_name=header)
    return None


def require_column(headers: Sequence[str], candidates: Iterable[Candidate]) -> ColumnReference:
    """Like locate_column, but raise ColumnNotFoundError instead of returning None."""
    candidates = list(candidates)
    column = locate_column(headers, candidates)
    if column is None:
        logger.error("No column matching %r in headers %r", candidates, list(headers))
        raise ColumnNotFoundError(headers, candidates)
    return column


def drop_columns(document: Document, names: Iterable[str]) -> tuple[Document, list[str]]:
    """Remove every column whose header equals or contains one of the names.

    Returns the new Document and the header names that were removed.
    """
    names = [name.lower() for name in names if name]
    keep = [i for i, header in enumerate(document.headers) if not any(name in header.lower() for name in names)]
    dropped = [header for i, header in enumerate(document.headers) if i not in keep]

    if dropped:
        logger.info("Dropping columns: %s", ", ".join(dropped))
    headers = [document.headers[i] for i in keep]
    rows = [[row[i] for i in keep] for row in document.rows]
    return Document(headers=headers, rows=rows), dropped


def normalize_overview(document: Document, candidates: Iterable[Candidate] = DEFAULT_OVERVIEW_COLUMNS) -> Document:
    """Collapse whitespace runs in the overview column to single spaces and trim."""
    column = locate_column(document.headers, candidates)
    if column is None:
        return document.copy_with_rows(document.rows)

    rows = []
    for row in document.rows:
        row = list(row)
        row[column.index] = WHITESPACE_RUN_RE.sub(" ", row[column.index]).strip()
        rows.append(row)
    return document.copy_with_rows(rows)


def _strip_title(value: str, item_title: str) -> str:
    """Remove item_title and everything after it; text before it is kept (trimmed)."""
    position = value.find(item_title)
    if position == -1:
        return value
    return value[:position].strip()


def clean_name_cells(
    document: Document, item_title: str, candidates: Iterable[Candidate] = DEFAULT_NAME_COLUMNS
) -> tuple[Document, int]:
    """Strip the show title (and what follows it) out of every episode-name cell.

    The import tool sometimes writes "Episode Name Show Title ..." into the
    name column.  Returns the new Document and how many cells changed.
    """
    column = locate_column(document.headers, candidates)
    if column is None or not item_title:
        return document.copy_with_rows(document.rows), 0

    cleaned = 0
    rows = []
    for row in document.rows:
        row = list(row)
        value = row[column.index].strip()
        if item_title in value:
            row[column.index] = _strip_title(value, item_title)
            cleaned += 1
            logger.debug("Cleaned name cell %r -> %r", value, row[column.index])
        rows.append(row)

    logger.info("Cleaned %d name cells containing %r", cleaned, item_title)
    return document.copy_with_rows(rows), cleaned
