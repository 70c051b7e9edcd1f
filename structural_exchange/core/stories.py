"""Story naming and heights derived from model levels.

Line/area based formats name placements by story, not by level id. The rule
is applied identically by every exported record:

- levels are ordered by elevation, highest first
- the lowest level is named "Base" and carries its absolute elevation
- every other level is named "Story{level.name}" and carries its height above
  the next-lower level
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models.layout import Level

logger = logging.getLogger(__name__)

BASE_STORY = "Base"
STORY_PREFIX = "Story"


@dataclass(frozen=True)
class Story:
    """A level as seen by a story-based format.

    Attributes:
        level_id: Id of the source level
        name: Exported story name
        elevation: Absolute elevation of the level
        height: Height above the next-lower story; None for the base
    """

    level_id: str
    name: str
    elevation: float
    height: Optional[float] = None

    @property
    def is_base(self) -> bool:
        return self.height is None


def story_name(level: Level, is_base: bool = False) -> str:
    return BASE_STORY if is_base else f"{STORY_PREFIX}{level.name}"


def level_name_from_story(name: str) -> str:
    """Inverse of ``story_name`` for non-base stories ("Story3" -> "3")."""
    if name.startswith(STORY_PREFIX) and len(name) > len(STORY_PREFIX):
        return name[len(STORY_PREFIX):]
    return name


def build_stories(levels: List[Level]) -> List[Story]:
    """Order levels top-down and derive story names and heights.

    Levels with equal elevation keep their input order.

    Args:
        levels: Levels in any order

    Returns:
        Stories sorted by elevation descending; the last one is the base
    """
    ordered = sorted(
        enumerate(levels), key=lambda item: (-item[1].elevation, item[0])
    )
    ordered_levels = [level for _, level in ordered]
    stories: List[Story] = []
    for position, level in enumerate(ordered_levels):
        if position == len(ordered_levels) - 1:
            stories.append(Story(level.id, story_name(level, is_base=True), level.elevation))
            continue
        below = ordered_levels[position + 1]
        stories.append(
            Story(
                level_id=level.id,
                name=story_name(level),
                elevation=level.elevation,
                height=level.elevation - below.elevation,
            )
        )
    return stories


class StoryTable:
    """Lookup helpers over the stories of one model."""

    def __init__(self, levels: List[Level]):
        self.stories = build_stories(levels)
        self._by_level: Dict[str, Story] = {s.level_id: s for s in self.stories}

    def for_level(self, level_id: Optional[str]) -> Optional[Story]:
        if not level_id:
            return None
        return self._by_level.get(level_id)

    def spanned(self, base_level_id: Optional[str], top_level_id: Optional[str]) -> List[Story]:
        """Stories above ``base`` and at or below ``top``, bottom-up.

        An unknown base spans only the top story; an unknown top spans nothing.
        """
        top = self.for_level(top_level_id)
        if top is None:
            return []
        base = self.for_level(base_level_id)
        if base is None or base.elevation >= top.elevation:
            return [top]
        spanned = [
            s for s in self.stories
            if base.elevation < s.elevation <= top.elevation
        ]
        return list(reversed(spanned))

    def __iter__(self):
        return iter(self.stories)

    def __len__(self) -> int:
        return len(self.stories)
