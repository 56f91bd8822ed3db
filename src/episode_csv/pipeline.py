"""Parse-filter-serialize pipeline for episode import CSV files.

process_episodes applies these steps in order to one in-memory text:
  1. parse            -- tokenize + validate_rows (or repair, for corrupted files)
  2. locate column    -- find the episode-number column (fatal if missing)
  3. clean names      -- optionally strip the show title out of name cells
  4. delete episodes  -- drop rows whose episode number is in the deletion set
  5. overview         -- collapse whitespace in the overview column
  6. drop columns     -- optionally remove air_date / runtime / backdrop
  7. serialize        -- render the result back to CSV text

Every step is pure; reading and writing the file is the caller's job.  The
__main__ block below is a thin file wrapper for manual runs and does no
backup rotation.  Two processes rewriting the same file concurrently can
lose each other's changes; callers must serialise access themselves.

Usage:
  python -m episode_csv.pipeline import.csv --episodes 1,2,3 [--offset -1] [--repair] [--dry-run]
"""

import argparse
import logging
from collections.abc import Iterable
from pathlib import Path

from episode_csv import config
from episode_csv.columns import clean_name_cells, drop_columns, normalize_overview, require_column
from episode_csv.compare import episode_sort_key, extract_episode_numbers
from episode_csv.config import Candidate
from episode_csv.errors import EpisodeCsvError
from episode_csv.filtering import build_deletion_set, filter_episodes
from episode_csv.patterns import DROPPABLE_COLUMNS
from episode_csv.repair import repair as repair_text
from episode_csv.schema import Document, EpisodeProcessingResult, ParseWarning
from episode_csv.serializer import serialize
from episode_csv.tokenizer import decode_text, parse
from episode_csv.validation import validate_rows

logger = logging.getLogger(__name__)


def parse_document(text: str) -> tuple[Document, list[ParseWarning]]:
    """Tokenize text and normalise every row to the header width."""
    records = parse(text)
    if not records:
        return Document(headers=[]), []

    headers, raw_rows = records[0], records[1:]
    rows, warnings = validate_rows(headers, raw_rows)
    logger.info("Parsed %d columns, %d rows (%d corrected)", len(headers), len(rows), len(warnings))
    return Document(headers=headers, rows=rows), warnings


def process_episodes(
    text: str,
    marked_episodes: Iterable[int | str],
    *,
    offset: int = 0,
    candidates: Iterable[Candidate] | None = None,
    drop: Iterable[str] = (),
    item_title: str | None = None,
    repair: bool = False,
) -> EpisodeProcessingResult:
    """Remove the marked episodes from CSV text and return the new text with a full report.

    Raises ColumnNotFoundError if the document has no episode column.
    """
    # Step 1: Parse (repair rebuilds record boundaries from the raw lines)
    document, warnings = repair_text(text) if repair else parse_document(text)

    # Step 2: Locate the episode column before any change is made
    candidates = list(candidates) if candidates is not None else list(config.episode_column_candidates())
    column = require_column(document.headers, candidates)
    logger.info("Episode column: %r (index %d)", column.matched_header_name, column.index)

    # Step 3: Strip the show title out of episode names
    working = document
    if item_title:
        working, _ = clean_name_cells(working, item_title)

    # Step 4: Delete marked episodes
    deletion_set = build_deletion_set(marked_episodes, offset)
    present = set(extract_episode_numbers(working, column.index))
    working, removed_count = filter_episodes(working, column.index, deletion_set)

    # Step 5: Overview text must stay on one line
    working = normalize_overview(working)

    # Step 6: Drop columns the import tool should not see
    drop = list(drop)
    if drop:
        working, _ = drop_columns(working, drop)

    # Step 7: Serialize
    content = serialize(working)

    return EpisodeProcessingResult(
        content=content,
        document=working,
        original_row_count=len(document.rows),
        processed_row_count=len(working.rows),
        removed_count=removed_count,
        removed_episodes=sorted(present & deletion_set, key=episode_sort_key),
        deletion_set=sorted(deletion_set, key=episode_sort_key),
        episode_column=column,
        warnings=warnings,
    )


def _parse_episode_list(raw: str) -> list[str]:
    """Split '1,2, 5' into ['1', '2', '5']."""
    return [item.strip() for item in raw.split(",") if item.strip()]


def main(argv: list[str] | None = None) -> int:
    """Command-line wrapper: read a CSV file, process it, and write it back."""
    parser = argparse.ArgumentParser(description="Remove marked episodes from an episode import CSV file.")
    parser.add_argument("csv_path", type=Path, help="CSV file to process")
    parser.add_argument("--episodes", required=True, help="comma-separated episode numbers to delete")
    parser.add_argument("--offset", type=int, default=config.episode_offset(), help="shift applied to every marked episode")
    parser.add_argument("--repair", action="store_true", help="rebuild record boundaries of a corrupted file")
    parser.add_argument("--drop", nargs="*", default=[], choices=DROPPABLE_COLUMNS, help="columns to remove")
    parser.add_argument("--item-title", default=None, help="show title to strip from episode names")
    parser.add_argument("--output", type=Path, default=None, help="write here instead of overwriting the input")
    parser.add_argument("--dry-run", action="store_true", help="report only, do not write")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.log_level(), format="%(asctime)s - %(levelname)s - %(message)s")

    logger.info("Reading %s", args.csv_path)
    text = decode_text(args.csv_path.read_bytes())

    try:
        result = process_episodes(
            text,
            _parse_episode_list(args.episodes),
            offset=args.offset,
            drop=args.drop,
            item_title=args.item_title,
            repair=args.repair,
        )
    except EpisodeCsvError as exc:
        logger.error("Processing failed: %s", exc)
        return 1

    logger.info(
        "Removed %d rows (%s); %d -> %d rows, %d warnings",
        result.removed_count,
        ", ".join(result.removed_episodes) or "none",
        result.original_row_count,
        result.processed_row_count,
        len(result.warnings),
    )

    if args.dry_run:
        logger.info("Dry run: nothing written")
        return 0

    output_path = args.output or args.csv_path
    with open(output_path, "w", encoding="utf-8", newline="") as fopen:
        fopen.write(result.content)
    logger.info("Wrote %s", output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
