"""Model layout: floor types, levels and grids."""

from typing import List, Optional

from pydantic import Field

from .geometry import ExchangeModel, GridPoint


class FloorType(ExchangeModel):
    id: str
    name: str
    description: Optional[str] = None


class Level(ExchangeModel):
    """Horizontal datum at which elements are placed.

    Attributes:
        id: Unique level id
        name: Level name without the story prefix (e.g. "2")
        floor_type_id: Reference to a FloorType
        elevation: Elevation in model length units
    """

    id: str
    name: str
    floor_type_id: Optional[str] = None
    elevation: float = 0.0


class Grid(ExchangeModel):
    id: str
    name: str
    start_point: GridPoint
    end_point: GridPoint

    @property
    def is_x_direction(self) -> bool:
        """True when the grid line runs along Y, i.e. it is located by an X coordinate."""
        dx = abs(self.end_point.x - self.start_point.x)
        dy = abs(self.end_point.y - self.start_point.y)
        return dy >= dx


class ModelLayout(ExchangeModel):
    floor_types: List[FloorType] = Field(default_factory=list)
    levels: List[Level] = Field(default_factory=list)
    grids: List[Grid] = Field(default_factory=list)
