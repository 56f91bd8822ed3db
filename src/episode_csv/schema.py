"""Pydantic models for parsed episode CSV data and engine results.

``Document`` mirrors the on-disk table: a header row plus data rows, each row
a plain ``list[str]``.  Its model_validator guarantees that every row has
exactly ``len(headers)`` fields, which is the invariant the validator and
repairer establish and every downstream step relies on.

The remaining models are the values the engine hands back to its callers
(warnings, column lookups, comparison and processing results).  They are
Pydantic models so the HTTP layer can return them with ``model_dump()``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

Record = list[str]


class Document(BaseModel):
    """A validated CSV document: headers plus width-aligned rows."""

    headers: list[str]
    rows: list[Record] = []

    @model_validator(mode="after")
    def validate_row_widths(self) -> "Document":
        """Ensure every row has exactly len(headers) fields."""
        n_cols = len(self.headers)
        for i, row in enumerate(self.rows):
            if len(row) != n_cols:
                raise ValueError(f"Row {i} has {len(row)} fields, expected {n_cols} (matching headers)")
        return self

    def copy_with_rows(self, rows: list[Record]) -> "Document":
        """Return a new Document with the same headers and the given rows."""
        return Document(headers=list(self.headers), rows=[list(row) for row in rows])


class WarningAction(str, Enum):
    """What the engine did to a record that did not fit the header width."""

    PAD = "pad"
    TRUNCATE = "truncate"
    DISCARD = "discard"


class ParseWarning(BaseModel):
    """A non-fatal structural correction applied while building a Document.

    ``row_index`` is the 0-based data-row index (header excluded).  For
    discards made by the repairer it is the index the record would have had,
    and ``line_start``/``line_end`` give the 1-based physical line range of
    the abandoned text so it can be recovered by hand from a backup.
    """

    model_config = ConfigDict(frozen=True)

    row_index: int
    expected_field_count: int
    actual_field_count: int
    action: WarningAction
    line_start: int | None = None
    line_end: int | None = None
    detail: str = ""


class ColumnReference(BaseModel):
    """A header located by name heuristics."""

    model_config = ConfigDict(frozen=True)

    index: int
    matched_header_name: str


class ComparisonResult(BaseModel):
    """Episode-number diff between an original and a processed document."""

    original_numbers: list[str]
    processed_numbers: list[str]
    removed: list[str]
    added: list[str]
    identical: bool

    @property
    def original_count(self) -> int:
        """Number of episode values in the original document."""
        return len(self.original_numbers)

    @property
    def processed_count(self) -> int:
        """Number of episode values in the processed document."""
        return len(self.processed_numbers)


class IntegrityReport(BaseModel):
    """Outcome of check_integrity: hard errors make the document invalid, warnings do not."""

    valid: bool
    errors: list[str] = []
    warnings: list[str] = []


class EpisodeProcessingResult(BaseModel):
    """Everything process_episodes produced for one input text."""

    content: str
    document: Document
    original_row_count: int
    processed_row_count: int
    removed_count: int
    removed_episodes: list[str]
    deletion_set: list[str]
    episode_column: ColumnReference
    warnings: list[ParseWarning] = []
