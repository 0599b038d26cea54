"""Tests for the JSON path helpers."""

import pytest

from tubeweb.parsing.json_paths import count_items, find_all, first_str, get_path, get_str, select


@pytest.mark.unit
class TestFindAll:
    @staticmethod
    def test_returns_matches_in_document_order() -> None:
        document = {"a": {"k": 1, "b": {"k": 2}}, "c": [{"k": 3}, {"x": {"k": 4}}]}

        assert find_all(document, "k") == [1, 2, 3, 4]

    @staticmethod
    def test_parent_match_precedes_nested_match() -> None:
        document = {"k": {"k": "inner"}}

        assert find_all(document, "k") == [{"k": "inner"}, "inner"]

    @staticmethod
    def test_scalars_and_missing_keys_yield_nothing() -> None:
        assert find_all("text", "k") == []
        assert find_all({"a": [1, 2, None]}, "k") == []


@pytest.mark.unit
class TestSelect:
    DOCUMENT = {
        "title": {"runs": [{"text": "first"}, {"text": "second"}]},
        "items": [10, 20, 30],
    }

    def test_wildcard_fans_out_over_lists(self) -> None:
        assert select(self.DOCUMENT, ("title", "runs", "*", "text")) == ["first", "second"]

    def test_integer_steps_index_lists(self) -> None:
        assert select(self.DOCUMENT, ("items", 1)) == [20]
        assert select(self.DOCUMENT, ("items", -1)) == [30]

    def test_out_of_range_or_wrong_type_is_empty(self) -> None:
        assert select(self.DOCUMENT, ("items", 5)) == []
        assert select(self.DOCUMENT, ("title", 0)) == []
        assert select(self.DOCUMENT, ("missing", "deeper")) == []

    def test_get_path_returns_first_match(self) -> None:
        assert get_path(self.DOCUMENT, ("title", "runs", "*", "text")) == "first"
        assert get_path(self.DOCUMENT, ("nothing",)) is None


@pytest.mark.unit
class TestStringAccess:
    @staticmethod
    def test_get_str_rejects_non_strings_and_empty_strings() -> None:
        assert get_str({"a": 5}, ("a",)) is None
        assert get_str({"a": ""}, ("a",)) is None
        assert get_str({"a": "value"}, ("a",)) == "value"

    @staticmethod
    def test_first_str_tries_paths_in_order() -> None:
        document = {"short": "fallback", "long": {"runs": []}}

        assert first_str(document, (("long", "runs", "*", "text"), ("short",))) == "fallback"
        assert first_str(document, (("missing",),)) is None

    @staticmethod
    def test_count_items() -> None:
        assert count_items([1, 2, 3]) == 3
        assert count_items({"a": 1}) == 1
        assert count_items(None) == 0
        assert count_items("abc") == 0
