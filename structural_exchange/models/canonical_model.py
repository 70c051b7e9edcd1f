"""Root of the canonical model graph.

A ``CanonicalModel`` owns five sub-graphs (metadata, layout, properties, loads,
elements). Every entity collection is an ordered list whose ids are unique
within that collection; cross-references between collections are plain id
strings. Collections are addressed by a flat name ("levels", "beams",
"wall_properties") through ``COLLECTIONS`` so that generic passes (merge,
integrity check, reference resolution) do not hard-code the tree shape.

Usage:
    from structural_exchange.models import CanonicalModel, Level

    model = CanonicalModel()
    model.layout.levels.append(Level(id="LV-1", name="1", elevation=120.0))
    for level in model.collection("levels"):
        ...
"""

from typing import Dict, List, Tuple

from pydantic import Field

from .elements import ElementContainer
from .geometry import ExchangeModel
from .layout import ModelLayout
from .loads import LoadContainer
from .metadata import Metadata
from .properties import PropertiesContainer


# Flat collection name -> (sub-graph attribute, list attribute)
COLLECTIONS: Dict[str, Tuple[str, str]] = {
    # Layout
    "floor_types": ("layout", "floor_types"),
    "levels": ("layout", "levels"),
    "grids": ("layout", "grids"),
    # Properties
    "materials": ("properties", "materials"),
    "frame_properties": ("properties", "frame_properties"),
    "floor_properties": ("properties", "floor_properties"),
    "wall_properties": ("properties", "wall_properties"),
    "diaphragms": ("properties", "diaphragms"),
    # Loads
    "load_definitions": ("loads", "load_definitions"),
    "surface_loads": ("loads", "surface_loads"),
    "load_combinations": ("loads", "load_combinations"),
    "line_loads": ("loads", "line_loads"),
    # Elements
    "beams": ("elements", "beams"),
    "columns": ("elements", "columns"),
    "braces": ("elements", "braces"),
    "walls": ("elements", "walls"),
    "floors": ("elements", "floors"),
    "openings": ("elements", "openings"),
    "joints": ("elements", "joints"),
    "isolated_footings": ("elements", "isolated_footings"),
    "continuous_footings": ("elements", "continuous_footings"),
    "piles": ("elements", "piles"),
    "piers": ("elements", "piers"),
}

ELEMENT_COLLECTIONS: Tuple[str, ...] = tuple(
    name for name, (group, _) in COLLECTIONS.items() if group == "elements"
)


class CanonicalModel(ExchangeModel):
    """The unified in-memory graph every format adapter reads from and writes to."""

    metadata: Metadata = Field(default_factory=Metadata)
    layout: ModelLayout = Field(default_factory=ModelLayout)
    properties: PropertiesContainer = Field(default_factory=PropertiesContainer)
    loads: LoadContainer = Field(default_factory=LoadContainer)
    elements: ElementContainer = Field(default_factory=ElementContainer)

    def collection(self, name: str) -> List:
        """Return the live list for a flat collection name.

        Raises:
            KeyError: If ``name`` is not a known collection
        """
        if name not in COLLECTIONS:
            available = ", ".join(COLLECTIONS)
            raise KeyError(f"Unknown collection '{name}'. Available: {available}")
        group, attr = COLLECTIONS[name]
        return getattr(getattr(self, group), attr)

    def replace_collection(self, name: str, items: List) -> None:
        """Swap the list for ``name`` (used by the merge pass after filtering)."""
        group, attr = COLLECTIONS[name]
        setattr(getattr(self, group), attr, items)

    def counts(self) -> Dict[str, int]:
        """Number of entities per non-empty collection."""
        return {
            name: len(self.collection(name))
            for name in COLLECTIONS
            if self.collection(name)
        }
