"""Best-effort recovery of record boundaries in severely corrupted CSV text.

Used instead of the normal tokenize-and-validate path when raw line breaks
have leaked into what should have been quoted fields (or records have been
glued together by a missing line break), so that naive tokenization yields
records of untrustworthy width.

The repairer works on the original physical lines.  Lines are appended to a
buffer until it tokenizes to exactly the header width.  When the buffer
overflows, a boundary detector looks for the start of the next logical
record inside it; the text before that point is committed if it now has the
right width and discarded otherwise.  A buffer that ends inside an open
quoted field is never committed; it keeps accumulating until the quote
closes.  Text that cannot be placed is always discarded, never guessed at,
and every discard is logged and returned as a ParseWarning with the physical
line range for manual recovery.

The default detector is specific to episode records
(``<integer>,<text>,<YYYY-MM-DD>,...``).  Other formats can pass their own
``BoundaryDetector``.
"""

import logging
from collections.abc import Callable

from episode_csv.patterns import EPISODE_RECORD_START_RE, LINE_BREAK_RE
from episode_csv.schema import Document, ParseWarning, Record, WarningAction
from episode_csv.tokenizer import scan_line, tokenize_line

logger = logging.getLogger(__name__)

# Maps buffered text to the index where the next record starts, or None.
BoundaryDetector = Callable[[str], int | None]


def find_episode_boundary(text: str) -> int | None:
    """Return the offset of the first episode-record start after position 0, or None."""
    match = EPISODE_RECORD_START_RE.search(text, 1)
    return match.start() if match else None


class _LineBuffer:
    """Accumulated text plus the physical line number each appended piece came from."""

    def __init__(self):
        self.text = ""
        self._starts: list[tuple[int, int]] = []  # (offset in text, 1-based line number)

    def __bool__(self) -> bool:
        return bool(self.text)

    def append(self, line: str, line_no: int) -> None:
        if self.text:
            self.text += " "
        self._starts.append((len(self.text), line_no))
        self.text += line

    def line_at(self, offset: int) -> int:
        """Physical line number containing the given text offset."""
        line_no = self._starts[0][1]
        for start, number in self._starts:
            if start > offset:
                break
            line_no = number
        return line_no

    def line_range(self, end: int | None = None) -> tuple[int, int]:
        """First and last physical line of text[:end]."""
        last = len(self.text) - 1 if end is None else max(end - 1, 0)
        return self._starts[0][1], self.line_at(last)

    def split(self, offset: int) -> str:
        """Remove and return text[:offset]; the buffer keeps the remainder."""
        head = self.text[:offset]
        first_line = self.line_at(offset)
        self._starts = [(0, first_line)] + [(start - offset, number) for start, number in self._starts if start > offset]
        self.text = self.text[offset:]
        return head

    def clear(self) -> None:
        self.text = ""
        self._starts = []


def _strip_prefix(prefix: str) -> str:
    """Drop trailing whitespace and one dangling delimiter left behind by a split."""
    prefix = prefix.rstrip()
    if prefix.endswith(","):
        prefix = prefix[:-1]
    return prefix


def repair(text: str, detector: BoundaryDetector = find_episode_boundary) -> tuple[Document, list[ParseWarning]]:
    """Rebuild records from corrupted text; return the Document and one warning per discard."""
    lines = LINE_BREAK_RE.split(text)

    # ── 1. Header is the first non-blank physical line ───────────────────
    header_idx = next((i for i, line in enumerate(lines) if line.strip()), None)
    if header_idx is None:
        return Document(headers=[]), []
    headers = tokenize_line(lines[header_idx])
    n_cols = len(headers)

    rows: list[Record] = []
    warnings: list[ParseWarning] = []
    buffer = _LineBuffer()

    def discard(fragment: str, fields: Record, line_range: tuple[int, int]) -> None:
        warnings.append(
            ParseWarning(
                row_index=len(rows),
                expected_field_count=n_cols,
                actual_field_count=len(fields),
                action=WarningAction.DISCARD,
                line_start=line_range[0],
                line_end=line_range[1],
                detail=fragment,
            )
        )
        logger.warning(
            "Discarded unrecoverable text from lines %d-%d (%d fields, expected %d): %.80r",
            line_range[0],
            line_range[1],
            len(fields),
            n_cols,
            fragment,
        )

    def settle() -> None:
        """Commit or split the buffer until it holds fewer fields than the header."""
        while buffer:
            fields, open_quote = scan_line(buffer.text)
            if open_quote and len(fields) <= n_cols:
                # A quoted field continues on the next line
                return
            if len(fields) == n_cols:
                logger.debug("Recovered record ending on line %d", buffer.line_range()[1])
                rows.append(fields)
                buffer.clear()
                return
            if len(fields) < n_cols:
                return

            # Overflow: look for where the next record begins
            split_at = detector(buffer.text)
            if split_at is None or not 0 < split_at < len(buffer.text):
                discard(buffer.text, fields, buffer.line_range())
                buffer.clear()
                return

            line_range = buffer.line_range(split_at)
            prefix = _strip_prefix(buffer.split(split_at))
            prefix_fields, prefix_open = scan_line(prefix)
            if len(prefix_fields) == n_cols and not prefix_open:
                logger.debug("Split glued records at line %d", line_range[1])
                rows.append(prefix_fields)
            else:
                discard(prefix, prefix_fields, line_range)

    # ── 2. Accumulate data lines (1-based numbering for reporting) ───────
    for line_no, line in enumerate(lines[header_idx + 1 :], start=header_idx + 2):
        line = line.strip()
        if not line:
            continue
        buffer.append(line, line_no)
        settle()

    # ── 3. Anything left over never reached the header width ─────────────
    if buffer:
        discard(buffer.text, tokenize_line(buffer.text), buffer.line_range())

    logger.info("Repair recovered %d records, discarded %d fragments", len(rows), len(warnings))
    return Document(headers=headers, rows=rows), warnings
