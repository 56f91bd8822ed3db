"""Quote-aware state-machine tokenizer for episode CSV text.

A single left-to-right scan with two states (inside / outside quotes) turns
raw text into records of field strings.  Line breaks inside a quoted field do
not end the record; they are folded into a single space, because every
consumer of these files (including the external import tool) assumes one
physical line per record.

Fields are not trimmed.  A record is dropped as a blank line when all of its
fields are whitespace-only and it contained no quote character at all, so
``""`` on its own line is still a (single empty field) record.
"""

import logging

from episode_csv.errors import MalformedInputError
from episode_csv.schema import Record

logger = logging.getLogger(__name__)

QUOTE = '"'
DELIMITER = ","


def decode_text(data: bytes) -> str:
    """Decode raw file bytes as UTF-8, dropping a leading byte-order mark."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"Input is not valid UTF-8 (byte {exc.start}: {exc.reason})") from exc


def _emit(records: list[Record], record: Record, quoted: bool) -> None:
    """Append a finished record unless it is a blank line."""
    if quoted or any(field.strip() for field in record):
        records.append(record)


def _scan(text: str) -> tuple[list[Record], bool]:
    """Tokenize text; also report whether it ended inside an unterminated quoted field."""
    records: list[Record] = []
    record: Record = []
    field: list[str] = []
    quoted = False  # a quote was seen somewhere in the current record
    in_quotes = False
    i, n = 0, len(text)

    while i < n:
        char = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if in_quotes:
            if char == QUOTE:
                if nxt == QUOTE:
                    # Escaped quote ""
                    field.append(QUOTE)
                    i += 2
                    continue
                in_quotes = False
            elif char in "\r\n":
                # Embedded line break folds to one space (CRLF counts once)
                field.append(" ")
                if char == "\r" and nxt == "\n":
                    i += 1
            else:
                field.append(char)
        elif char == QUOTE:
            in_quotes = True
            quoted = True
        elif char == DELIMITER:
            record.append("".join(field))
            field = []
        elif char in "\r\n":
            record.append("".join(field))
            _emit(records, record, quoted)
            record, field, quoted = [], [], False
            if char == "\r" and nxt == "\n":
                i += 1
        else:
            field.append(char)

        i += 1

    # Flush whatever is left after the last line terminator
    if field or record or quoted:
        if in_quotes:
            logger.debug("Input ended inside a quoted field; flushing it as-is")
        record.append("".join(field))
        _emit(records, record, quoted)

    return records, in_quotes


def parse(text: str) -> list[Record]:
    """Tokenize CSV text into raw records (header included, widths not yet checked)."""
    records, _ = _scan(text)
    return records


def scan_line(line: str) -> tuple[Record, bool]:
    """Tokenize a single logical line; return its fields and whether a quoted field is still open."""
    records, open_quote = _scan(line)
    # A line without raw breaks yields at most one record
    return (records[0] if records else []), open_quote


def tokenize_line(line: str) -> Record:
    """Tokenize a single logical line and return its fields ([] for a blank line)."""
    fields, _ = scan_line(line)
    return fields
