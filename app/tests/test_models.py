"""Unit tests for record validation and defaulting."""
import logging

import pytest

from viewmax.core.models import Episode, Sources, Title


class TestSources:
    def test_available_in_slot_order(self):
        s = Sources.from_dict({"source3": "c", "source1": "a"})
        assert s.available() == ["source1", "source3"]

    def test_pick(self):
        s = Sources.from_dict({"source1": "a", "source2": "b"})
        assert s.pick("primary") == "a"
        assert s.pick("secondary") == "b"
        assert s.pick("tertiary") == "a"
        assert s.pick(None) == "a"
        assert s.pick("quaternary") == "a"

    def test_empty(self):
        s = Sources.from_dict(None)
        assert not s
        assert s.pick("secondary") is None
        assert s.to_dict() == {}

    def test_rejects_non_mapping(self):
        with pytest.raises(ValueError):
            Sources.from_dict(["a"])


class TestTitle:
    def test_defaults(self):
        t = Title.from_dict({"name": "Only A Name"})
        assert t.genre == ""
        assert t.rating == "0"
        assert t.rating_value == 0.0
        assert t.genre_tags() == []
        assert t.to_dict()["sources"] == {}

    def test_numeric_rating_is_kept_as_string(self):
        t = Title.from_dict({"name": "X", "rating": 7.5})
        assert t.rating == "7.5"
        assert t.rating_value == 7.5

    def test_unparsable_rating(self):
        assert Title.from_dict({"name": "X", "rating": "great"}).rating_value == 0.0

    @pytest.mark.parametrize("raw", [{}, {"name": "   "}, {"name": None}, "Inception", {"name": "X", "genre": {}}])
    def test_invalid_records(self, raw):
        with pytest.raises(ValueError):
            Title.from_dict(raw)

    def test_series_episodes(self):
        t = Title.from_dict({"name": "S", "episodes": [{"season": "2", "episode": 3, "title": "Three"}]},
                            is_series=True)
        assert t.episodes == [Episode(season=2, episode=3, title="Three")]
        assert t.to_dict(kind="series")["type"] == "series"
        assert t.to_dict()["episodes"][0]["season"] == 2

    def test_movies_ignore_episodes(self):
        t = Title.from_dict({"name": "M", "episodes": [{"season": 1, "episode": 1}]})
        assert t.episodes == []
        assert "episodes" not in t.to_dict()

    @pytest.mark.parametrize("ep", [
        {"season": "one", "episode": 1},
        {"season": 1},
        {"season": True, "episode": 1},
        {"season": 1.5, "episode": 2},
        "not an episode",
    ])
    def test_bad_episode_is_skipped(self, ep, caplog):
        raw = {"name": "S", "episodes": [{"season": 1, "episode": 1, "title": "Good"}, ep]}
        with caplog.at_level(logging.WARNING, logger="viewmax.core.models"):
            t = Title.from_dict(raw, is_series=True)
        assert [e.title for e in t.episodes] == ["Good"]
        assert "skipping episode 1" in caplog.text

    def test_episodes_must_be_a_list(self):
        with pytest.raises(ValueError):
            Title.from_dict({"name": "S", "episodes": "S1E1"}, is_series=True)
