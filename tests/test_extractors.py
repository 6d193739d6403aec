"""Tests for path extractors."""

import pickle
from types import SimpleNamespace

import pytest

from rowsink.core.extractors import PathExtractor, field_getter


class TestPathExtractor:
    """Tests for PathExtractor."""

    def test_dict_key(self):
        assert PathExtractor("team")({"team": "red"}) == "red"

    def test_attribute(self):
        record = SimpleNamespace(team="red")
        assert PathExtractor("team")(record) == "red"

    def test_nested_path(self):
        record = {"player": SimpleNamespace(stats={"score": 12})}
        assert PathExtractor("player.stats.score")(record) == 12

    def test_sequence_index(self):
        record = {"scores": [3, 5, 8]}

        assert PathExtractor("scores.0")(record) == 3
        assert PathExtractor("scores.-1")(record) == 8

    def test_digit_key_in_dict(self):
        """Test that digit segments on mappings are treated as keys."""
        assert PathExtractor("by_round.1")({"by_round": {"1": "win"}}) == "win"

    def test_missing_key_raises(self):
        with pytest.raises(KeyError):
            PathExtractor("score")({"team": "red"})

    def test_missing_attribute_raises(self):
        with pytest.raises(AttributeError):
            PathExtractor("score")(SimpleNamespace(team="red"))

    def test_index_out_of_range_raises(self):
        with pytest.raises(IndexError):
            PathExtractor("scores.5")({"scores": [1]})

    def test_default_returned_when_missing(self):
        extractor = PathExtractor("stats.score", default=0)

        assert extractor({"stats": {}}) == 0
        assert extractor({}) == 0
        assert extractor({"stats": {"score": 4}}) == 4

    def test_none_default(self):
        assert PathExtractor("score", default=None)({}) is None

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            PathExtractor("")

    def test_does_not_mutate_record(self):
        record = {"player": {"score": 1}}
        PathExtractor("player.score")(record)

        assert record == {"player": {"score": 1}}

    def test_pickle_roundtrip_keeps_default(self):
        extractor = PathExtractor("score", default=-1)
        restored = pickle.loads(pickle.dumps(extractor))

        assert restored == extractor
        assert restored({}) == -1

    def test_pickle_without_default_still_raises(self):
        restored = pickle.loads(pickle.dumps(PathExtractor("score")))

        with pytest.raises(KeyError):
            restored({})

    def test_equality(self):
        assert PathExtractor("a.b") == PathExtractor("a.b")
        assert PathExtractor("a.b") != PathExtractor("a.c")
        assert PathExtractor("a", default=1) != PathExtractor("a")


def test_field_getter():
    assert field_getter("team") == PathExtractor("team")
    assert field_getter("team", default="none")({}) == "none"
