"""Episode row removal keyed on the episode-number column.

Episode numbers are compared as trimmed cell text, never as integers, so
"01" and "1" are different episodes exactly as they are in the file.
"""

import logging
from collections.abc import Iterable

from episode_csv.columns import require_column
from episode_csv.config import Candidate, episode_column_candidates
from episode_csv.schema import ColumnReference, Document

logger = logging.getLogger(__name__)


def build_deletion_set(marked_episodes: Iterable[int | str], offset: int = 0) -> frozenset[str]:
    """Turn marked episode numbers into the string deletion set.

    With a non-zero offset every number is shifted (some platforms list the
    episodes one ahead of the file, which is offset=-1) and results below 1
    are dropped.  Offsets need integer episode numbers; without one, string
    values are kept as written (trimmed).
    """
    marked = list(marked_episodes)
    deletion: set[str] = set()
    for episode in marked:
        text = str(episode).strip()
        if not text:
            continue
        if offset == 0:
            deletion.add(text)
            continue
        shifted = int(text) + offset
        if shifted >= 1:
            deletion.add(str(shifted))

    if offset:
        logger.info("Applied episode offset %+d: %d marked -> %d to delete", offset, len(marked), len(deletion))
    return frozenset(deletion)


def filter_episodes(document: Document, column_index: int, deletion_set: Iterable[str]) -> tuple[Document, int]:
    """Return a new Document without the rows whose episode cell is in deletion_set, and the removed count."""
    if not 0 <= column_index < len(document.headers):
        raise IndexError(f"Column index {column_index} out of range for {len(document.headers)} headers")

    deletion = {str(value).strip() for value in deletion_set}
    kept = []
    removed = 0
    for row in document.rows:
        if row[column_index].strip() in deletion:
            removed += 1
            logger.debug("Removing episode %s", row[column_index].strip())
            continue
        kept.append(row)

    logger.info("Removed %d of %d rows", removed, len(document.rows))
    return document.copy_with_rows(kept), removed


def delete_episodes(
    document: Document, deletion_set: Iterable[str], candidates: Iterable[Candidate] | None = None
) -> tuple[Document, int, ColumnReference]:
    """Locate the episode column and filter; raises ColumnNotFoundError before changing anything."""
    column = require_column(document.headers, candidates if candidates is not None else episode_column_candidates())
    kept, removed = filter_episodes(document, column.index, deletion_set)
    return kept, removed, column
