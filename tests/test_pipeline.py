"""Tests for parse_document, process_episodes and the command-line wrapper."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from episode_csv.errors import ColumnNotFoundError
from episode_csv.pipeline import main, parse_document, process_episodes
from episode_csv.schema import WarningAction

CSV_TEXT = "\n".join(
    [
        "episode_number,name,air_date,runtime,overview,backdrop",
        '1,Pilot,2020-01-01,45,"Two\nlines",a.jpg',
        "2,Second,2020-01-08,50,Plain,b.jpg",
        "3,Third,2020-01-15,44,,c.jpg",
        "4,Fourth,2020-01-22,46,Last,d.jpg",
    ]
)


# ===========================================================================
# parse_document tests
# ===========================================================================


class TestParseDocument:

    def test_headers_and_rows(self):
        doc, warnings = parse_document(CSV_TEXT)
        assert doc.headers[0] == "episode_number"
        assert len(doc.rows) == 4
        assert doc.rows[0][4] == "Two lines"
        assert not warnings

    def test_empty_text(self):
        doc, warnings = parse_document("")
        assert not doc.headers
        assert not warnings

    def test_width_corrections_reported(self):
        doc, warnings = parse_document("a,b,c\n1,2\n1,2,3,4")
        assert doc.rows == [["1", "2", ""], ["1", "2", "3"]]
        assert [w.action for w in warnings] == [WarningAction.PAD, WarningAction.TRUNCATE]


# ===========================================================================
# process_episodes tests
# ===========================================================================


class TestProcessEpisodes:

    def test_marked_episodes_removed(self):
        result = process_episodes(CSV_TEXT, [2, 4])
        assert result.removed_count == 2
        assert result.removed_episodes == ["2", "4"]
        assert result.original_row_count == 4
        assert result.processed_row_count == 2
        assert [row[0] for row in result.document.rows] == ["1", "3"]
        assert result.content.splitlines()[0] == "episode_number,name,air_date,runtime,overview,backdrop"

    def test_offset_mode(self):
        result = process_episodes(CSV_TEXT, [1, 2, 3], offset=-1)
        assert result.deletion_set == ["1", "2"]
        assert [row[0] for row in result.document.rows] == ["3", "4"]

    def test_marked_but_absent_not_reported_as_removed(self):
        result = process_episodes(CSV_TEXT, [2, 99])
        assert result.removed_episodes == ["2"]
        assert result.deletion_set == ["2", "99"]

    def test_drop_columns(self):
        result = process_episodes(CSV_TEXT, [], drop=["air_date", "runtime", "backdrop"])
        assert result.document.headers == ["episode_number", "name", "overview"]
        assert result.content.splitlines()[1] == "1,Pilot,Two lines"

    def test_item_title_cleaning(self):
        text = "episode_number,name\n1,Pilot My Show\n2,Second"
        result = process_episodes(text, [], item_title="My Show")
        assert result.document.rows[0] == ["1", "Pilot"]

    def test_missing_episode_column(self):
        with pytest.raises(ColumnNotFoundError):
            process_episodes("title,date\nx,2020-01-01", [1])

    def test_custom_candidates(self):
        text = "no,title\n1,a\n2,b"
        result = process_episodes(text, ["1"], candidates=["no"])
        assert result.episode_column.index == 0
        assert result.content == "no,title\n2,b"

    def test_localized_headers_with_title_column_first(self):
        text = "剧集名,集数,播出日期\n开始,1,2020-01-01\n继续,2,2020-01-08"
        result = process_episodes(text, [1])
        assert result.episode_column.matched_header_name == "集数"
        assert result.removed_count == 1
        assert result.content == "剧集名,集数,播出日期\n继续,2,2020-01-08"

    def test_repair_mode(self):
        text = "episode_number,name,air_date\n1,Pilot,2020-01-01\n2,Lost Line3,Return,2020-01-15"
        result = process_episodes(text, [1], repair=True)
        assert [row[0] for row in result.document.rows] == ["3"]
        assert result.warnings[0].action == WarningAction.DISCARD

    def test_output_is_single_line_per_record(self):
        result = process_episodes(CSV_TEXT, [])
        assert len(result.content.split("\n")) == 5

    def test_result_dumps_to_json(self):
        dumped = process_episodes(CSV_TEXT, [1]).model_dump(mode="json")
        assert dumped["removed_episodes"] == ["1"]
        assert dumped["episode_column"]["matched_header_name"] == "episode_number"


# ===========================================================================
# main tests
# ===========================================================================


class TestMain:

    def test_rewrites_file(self, tmp_path):
        csv_file = tmp_path / "import.csv"
        csv_file.write_text(CSV_TEXT, encoding="utf-8")
        assert main([str(csv_file), "--episodes", "1,3"]) == 0
        lines = csv_file.read_text(encoding="utf-8").splitlines()
        assert [line.split(",")[0] for line in lines[1:]] == ["2", "4"]

    def test_dry_run_leaves_file(self, tmp_path):
        csv_file = tmp_path / "import.csv"
        csv_file.write_text(CSV_TEXT, encoding="utf-8")
        assert main([str(csv_file), "--episodes", "1", "--dry-run"]) == 0
        assert csv_file.read_text(encoding="utf-8") == CSV_TEXT

    def test_output_path(self, tmp_path):
        csv_file = tmp_path / "import.csv"
        out_file = tmp_path / "out.csv"
        csv_file.write_text(CSV_TEXT, encoding="utf-8")
        assert main([str(csv_file), "--episodes", "2", "--output", str(out_file), "--drop", "backdrop"]) == 0
        assert out_file.read_text(encoding="utf-8").splitlines()[0] == "episode_number,name,air_date,runtime,overview"
        assert csv_file.read_text(encoding="utf-8") == CSV_TEXT

    def test_missing_column_returns_error_code(self, tmp_path):
        csv_file = tmp_path / "import.csv"
        csv_file.write_text("title,date\nx,y", encoding="utf-8")
        assert main([str(csv_file), "--episodes", "1"]) == 1
