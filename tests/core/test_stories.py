"""Tests for story naming and heights."""

import pytest

from structural_exchange.core.stories import (
    StoryTable,
    build_stories,
    level_name_from_story,
)
from structural_exchange.models import Level


class TestBuildStories:

    def test_out_of_order_levels(self):
        levels = [
            Level(id="LV-2", name="2", elevation=240.0),
            Level(id="LV-0", name="0", elevation=0.0),
            Level(id="LV-1", name="1", elevation=120.0),
        ]
        stories = build_stories(levels)
        assert [(s.name, s.elevation, s.height) for s in stories] == [
            ("Story2", 240.0, 120.0),
            ("Story1", 120.0, 120.0),
            ("Base", 0.0, None),
        ]
        assert stories[-1].is_base

    def test_unequal_heights(self):
        levels = [
            Level(id="A", name="0", elevation=-12.0),
            Level(id="B", name="1", elevation=156.0),
            Level(id="C", name="Roof", elevation=300.0),
        ]
        stories = build_stories(levels)
        assert [s.name for s in stories] == ["StoryRoof", "Story1", "Base"]
        assert stories[0].height == 144.0
        assert stories[1].height == 168.0
        assert stories[2].elevation == -12.0

    def test_single_level_is_base(self):
        stories = build_stories([Level(id="A", name="1", elevation=100.0)])
        assert [s.name for s in stories] == ["Base"]

    def test_empty(self):
        assert build_stories([]) == []

    def test_equal_elevations_keep_input_order(self):
        levels = [
            Level(id="A", name="1", elevation=120.0),
            Level(id="B", name="1M", elevation=120.0),
            Level(id="C", name="0", elevation=0.0),
        ]
        stories = build_stories(levels)
        assert [s.level_id for s in stories] == ["A", "B", "C"]
        assert stories[0].height == 0.0


class TestStoryTable:

    @pytest.fixture
    def table(self, three_levels):
        return StoryTable(three_levels)

    def test_for_level(self, table):
        assert table.for_level("LV-1").name == "Story1"
        assert table.for_level("LV-9") is None
        assert table.for_level(None) is None

    def test_spanned_bottom_up(self, table):
        assert [s.name for s in table.spanned("LV-0", "LV-2")] == ["Story1", "Story2"]

    def test_spanned_single_story(self, table):
        assert [s.name for s in table.spanned("LV-1", "LV-2")] == ["Story2"]

    def test_spanned_unknown_base_uses_top(self, table):
        assert [s.name for s in table.spanned("LV-9", "LV-2")] == ["Story2"]

    def test_spanned_unknown_top_is_empty(self, table):
        assert table.spanned("LV-0", "LV-9") == []

    def test_len_and_iter(self, table):
        assert len(table) == 3
        assert [s.name for s in table] == ["Story2", "Story1", "Base"]


def test_level_name_from_story():
    assert level_name_from_story("Story3") == "3"
    assert level_name_from_story("Story") == "Story"
    assert level_name_from_story("Roof") == "Roof"
