"""Geometry primitives and the shared pydantic base for the canonical model.

Points are plain value data. They carry no identity of their own; identity is
conferred only by the coordinate registry when geometry is canonicalized for
connectivity purposes.

Persisted field names are camelCase (``isBubble``, ``floorTypeId``) while Python
attributes stay snake_case; both spellings are accepted on input.
"""

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExchangeModel(BaseModel):
    """Base for every entity of the canonical model.

    Adds camelCase aliases and assignment validation so in-place edits made by
    the merge pass are still type checked.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


class Point2D(ExchangeModel):
    """Plan coordinate.

    Attributes:
        x: Horizontal coordinate
        y: Vertical (plan) coordinate
    """

    x: float = Field(..., description="X coordinate")
    y: float = Field(..., description="Y coordinate")

    def as_tuple(self) -> Tuple[float, ...]:
        return (self.x, self.y)

    @classmethod
    def from_list(cls, pos: List[float]) -> "Point2D":
        """Create a Point2D from ``[x, y]``.

        Raises:
            ValueError: If pos doesn't have exactly 2 elements
        """
        if len(pos) != 2:
            raise ValueError(f"Point2D must be [x, y], got {len(pos)} elements")
        return cls(x=pos[0], y=pos[1])


class Point3D(ExchangeModel):
    """Spatial coordinate."""

    x: float = Field(..., description="X coordinate")
    y: float = Field(..., description="Y coordinate")
    z: float = Field(0.0, description="Z coordinate (elevation)")

    def as_tuple(self) -> Tuple[float, ...]:
        return (self.x, self.y, self.z)

    def to_plan(self) -> Point2D:
        """Drop the elevation."""
        return Point2D(x=self.x, y=self.y)


class GridPoint(Point3D):
    """Grid line end point; ``is_bubble`` marks the end that carries the label bubble."""

    is_bubble: bool = Field(False, description="Grid bubble drawn at this end")
