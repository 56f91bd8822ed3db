"""Shared configuration for the episode CSV engine.

Values come from the process environment, optionally seeded from a ``.env``
file at the project root.  The engine itself only uses these as defaults;
every public function also accepts the value explicitly.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from episode_csv.patterns import DEFAULT_EPISODE_COLUMNS

logger = logging.getLogger(__name__)

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")

Candidate = str | tuple[str, ...]


def parse_candidates(raw: str) -> tuple[Candidate, ...]:
    """Parse a comma-separated candidate list; 'a+b' becomes the compound candidate ('a', 'b')."""
    candidates: list[Candidate] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        parts = tuple(part.strip() for part in item.split("+") if part.strip())
        candidates.append(parts[0] if len(parts) == 1 else parts)
    return tuple(candidates)


def episode_column_candidates() -> tuple[Candidate, ...]:
    """Return the episode-column candidates from EPISODE_CSV_EPISODE_COLUMNS, or the built-in defaults."""
    raw = os.getenv("EPISODE_CSV_EPISODE_COLUMNS", "")
    candidates = parse_candidates(raw)
    return candidates or DEFAULT_EPISODE_COLUMNS


def episode_offset() -> int:
    """Return the default marked-episode offset from EPISODE_CSV_EPISODE_OFFSET (0 if unset)."""
    raw = os.getenv("EPISODE_CSV_EPISODE_OFFSET", "").strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer EPISODE_CSV_EPISODE_OFFSET=%r", raw)
        return 0


def log_level() -> int:
    """Return the log level named by EPISODE_CSV_LOG_LEVEL (INFO if unset or unknown)."""
    name = os.getenv("EPISODE_CSV_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning("Unknown EPISODE_CSV_LOG_LEVEL=%r, using INFO", name)
        return logging.INFO
    return level
