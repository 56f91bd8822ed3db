"""Compiled regex patterns and constant tuples for episode CSV handling.

These describe the shape of an episode record as written by the external
import tool (``episode_number,name,air_date,...``) and the header names the
host application uses for its well-known columns.  Used by repair.py,
columns.py and config.py.
"""

import re

# ─── Record Shape Patterns ────────────────────────────────────────────────────

# Start of an episode record: "<integer>,<text>,<YYYY-MM-DD>" followed by a
# comma or the end of the text, e.g. "3,Return,2020-01-15,45,..."
EPISODE_RECORD_START_RE = re.compile(r"\d+,[^,]+,\d{4}-\d{2}-\d{2}(?=,|$)")

# Runs of whitespace (including folded line breaks) inside a cell
WHITESPACE_RUN_RE = re.compile(r"\s+")


# ─── Header Candidates ────────────────────────────────────────────────────────

# Episode-number column, in priority order.  A tuple means every part must
# appear in the header.  The bare "episode" and "剧集" come last because they
# also match title columns such as "episode_title" and "剧集名".
DEFAULT_EPISODE_COLUMNS = (
    ("episode", "number"),
    "episode_num",
    "ep_num",
    "集数",
    "第几集",
    "episode",
    "剧集",
)

# Episode title column (used when stripping the show title from cells)
DEFAULT_NAME_COLUMNS = ("name", "title", "标题", "名称", "剧集名")

# Long-form synopsis column whose whitespace is normalised before export
DEFAULT_OVERVIEW_COLUMNS = ("overview", "description", "描述", "简介")

# Columns the import tool can be told to ignore
DROPPABLE_COLUMNS = ("air_date", "runtime", "backdrop")

# Physical line break: CRLF, lone LF or lone CR
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
