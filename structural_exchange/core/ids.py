"""Entity id generation.

Ids have the form ``PREFIX-xxxxxxxx`` where the prefix names the entity type
(``BM`` beam, ``LV`` level, ``MAT`` material, ...). In deterministic mode the
suffix is a per-prefix counter in hex, so two runs over the same input issue
the same ids; otherwise it is the first 8 hex digits of a uuid4.

A generator belongs to one operation context and is never shared.
"""

import itertools
import uuid
from collections import defaultdict
from typing import DefaultDict, Dict, Iterator, Optional

from ..config.settings import get_setting

ID_PREFIXES: Dict[str, str] = {
    # Elements
    "beams": "BM",
    "columns": "COL",
    "walls": "WL",
    "floors": "FL",
    "braces": "BR",
    "isolated_footings": "IF",
    "continuous_footings": "CF",
    "piles": "PL",
    "piers": "PR",
    "joints": "JT",
    "openings": "OP",
    # Properties
    "materials": "MAT",
    "wall_properties": "WP",
    "floor_properties": "FP",
    "frame_properties": "FRP",
    "diaphragms": "DIA",
    # Layout
    "grids": "GR",
    "levels": "LV",
    "floor_types": "FT",
    # Loads
    "load_definitions": "LD",
    "surface_loads": "SL",
    "load_combinations": "LC",
    "line_loads": "LL",
}


class IdGenerator:
    """Issues entity ids for one operation."""

    def __init__(self, deterministic: Optional[bool] = None):
        if deterministic is None:
            deterministic = get_setting("deterministic_ids")
        self.deterministic = deterministic
        self._counters: DefaultDict[str, Iterator[int]] = defaultdict(lambda: itertools.count(1))

    def generate(self, prefix: str) -> str:
        if self.deterministic:
            return f"{prefix}-{next(self._counters[prefix]):08x}"
        return f"{prefix}-{uuid.uuid4().hex[:8]}"

    def for_collection(self, collection: str) -> str:
        """Generate an id for an entity of the named collection.

        Raises:
            KeyError: If the collection has no registered prefix
        """
        if collection not in ID_PREFIXES:
            raise KeyError(f"No id prefix registered for collection '{collection}'")
        return self.generate(ID_PREFIXES[collection])
