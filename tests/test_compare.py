"""Unit tests for the document comparator."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from episode_csv.compare import compare, compare_documents, episode_sort_key, extract_episode_numbers, remaining_episodes
from episode_csv.errors import ColumnNotFoundError
from episode_csv.schema import Document


def make_doc(episodes: list[str], headers: list[str] | None = None) -> Document:
    """Build a two-column document with the given episode cells."""
    return Document(headers=headers or ["episode_number", "name"], rows=[[ep, "x"] for ep in episodes])


class TestExtractEpisodeNumbers:

    def test_trimmed_and_blank_skipped(self):
        assert extract_episode_numbers(make_doc([" 1", "", "2 "]), 0) == ["1", "2"]

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            extract_episode_numbers(make_doc(["1"]), 5)


class TestEpisodeSortKey:

    def test_numeric_before_text(self):
        assert sorted(["10", "b", "2", "a", "1"], key=episode_sort_key) == ["1", "2", "10", "a", "b"]


class TestCompare:

    def test_identical(self):
        result = compare(make_doc(["1", "2"]), make_doc(["2", "1"]), 0)
        assert result.identical is True
        assert not result.removed
        assert not result.added

    def test_removed_and_added(self):
        result = compare(make_doc(["1", "2", "3"]), make_doc(["1", "3", "4"]), 0)
        assert result.removed == ["2"]
        assert result.added == ["4"]
        assert result.identical is False
        assert result.original_numbers == ["1", "2", "3"]
        assert result.processed_numbers == ["1", "3", "4"]

    def test_numeric_display_order(self):
        result = compare(make_doc(["10", "9", "1"]), make_doc([]), 0)
        assert result.original_numbers == ["1", "9", "10"]
        assert result.removed == ["1", "9", "10"]
        assert result.processed_count == 0

    def test_duplicates_collapse_for_difference_but_not_identity(self):
        result = compare(make_doc(["1", "1", "2"]), make_doc(["1", "2"]), 0)
        assert not result.removed
        assert not result.added
        assert result.identical is False
        assert (result.original_count, result.processed_count) == (3, 2)

    def test_symmetry(self):
        a = make_doc(["1", "2", "3", "7"])
        b = make_doc(["2", "3", "5", "8"])
        assert compare(a, b, 0).removed == compare(b, a, 0).added
        assert compare(a, b, 0).added == compare(b, a, 0).removed


class TestCompareDocuments:

    def test_columns_located_independently(self):
        original = make_doc(["1", "2", "3"])
        processed = Document(headers=["name", "episode_number"], rows=[["x", "1"], ["x", "3"]])
        result = compare_documents(original, processed, ["episode"])
        assert result.removed == ["2"]

    def test_missing_column_raises(self):
        with pytest.raises(ColumnNotFoundError):
            compare_documents(make_doc(["1"]), make_doc(["1"], headers=["title", "date"]), ["episode"])


class TestRemainingEpisodes:

    def test_sorted_integers_non_numeric_skipped(self):
        assert remaining_episodes(make_doc(["3", "SP", "1", "02"]), 0) == [1, 2, 3]
