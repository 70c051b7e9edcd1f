"""Structural element types.

Elements embed their geometry directly (raw, not canonicalized) and refer to
layout, property and load entities by id. Geometry may be absent on partial
input; ``geometry()`` returns ``None`` in that case so that callers can skip the
element without guessing at coordinates.
"""

from abc import abstractmethod
from typing import ClassVar, List, Optional, Sequence, Union

from pydantic import Field

from .geometry import ExchangeModel, Point2D, Point3D

Point = Union[Point2D, Point3D]


class StructuralElement(ExchangeModel):
    """Common base of all element types.

    Subclasses set ``min_points`` and implement ``geometry``.
    """

    min_points: ClassVar[int] = 1

    id: str

    @abstractmethod
    def geometry(self) -> Optional[List[Point]]:
        """Raw points of the element, or None when they are incomplete."""

    def has_geometry(self) -> bool:
        return self.geometry() is not None


class _TwoPointElement(StructuralElement):
    min_points: ClassVar[int] = 2

    start_point: Optional[Point2D] = None
    end_point: Optional[Point2D] = None

    def geometry(self) -> Optional[List[Point]]:
        if self.start_point is None or self.end_point is None:
            return None
        return [self.start_point, self.end_point]


class _PolygonElement(StructuralElement):
    min_points: ClassVar[int] = 3

    points: List[Point2D] = Field(default_factory=list)

    def geometry(self) -> Optional[List[Point]]:
        if len(self.points) < self.min_points:
            return None
        return list(self.points)


class _PointElement(StructuralElement):
    point: Optional[Point3D] = None
    level_id: Optional[str] = None

    def geometry(self) -> Optional[List[Point]]:
        if self.point is None:
            return None
        return [self.point]


# =============================================================================
# Line elements
# =============================================================================


class Beam(_TwoPointElement):
    level_id: Optional[str] = None
    frame_properties_id: Optional[str] = None
    is_lateral: bool = False
    is_joist: bool = False


class Column(StructuralElement):
    """Vertical member located by its plan position.

    A column spans from ``base_level_id`` to ``top_level_id``. ``end_point`` is
    only set for columns whose top is offset in plan from their base.
    """

    start_point: Optional[Point2D] = None
    end_point: Optional[Point2D] = None
    base_level_id: Optional[str] = None
    top_level_id: Optional[str] = None
    frame_properties_id: Optional[str] = None
    orientation: float = Field(0.0, description="Rotation about the member axis, degrees")
    is_lateral: bool = False

    def geometry(self) -> Optional[List[Point]]:
        if self.start_point is None:
            return None
        return [self.start_point]


class Brace(_TwoPointElement):
    """Diagonal member from ``start_point`` at the base level to ``end_point`` at the top level."""

    base_level_id: Optional[str] = None
    top_level_id: Optional[str] = None
    frame_properties_id: Optional[str] = None
    material_id: Optional[str] = None


# =============================================================================
# Area elements
# =============================================================================


class Wall(_PolygonElement):
    min_points: ClassVar[int] = 2

    base_level_id: Optional[str] = None
    top_level_id: Optional[str] = None
    properties_id: Optional[str] = None
    pier_spandrel_id: Optional[str] = None


class Floor(_PolygonElement):
    level_id: Optional[str] = None
    floor_properties_id: Optional[str] = None
    diaphragm_id: Optional[str] = None
    surface_load_id: Optional[str] = None
    span_direction: float = Field(0.0, description="Deck span direction, degrees")


class Opening(_PolygonElement):
    level_id: Optional[str] = None


# =============================================================================
# Point and foundation elements
# =============================================================================


class Joint(_PointElement):
    pass


class IsolatedFooting(_PointElement):
    width: float = 0.0
    length: float = 0.0
    thickness: float = 0.0


class Pile(_PointElement):
    diameter: float = 0.0
    length: float = 0.0


class Pier(_PointElement):
    diameter: float = 0.0
    length: float = 0.0


class ContinuousFooting(_TwoPointElement):
    level_id: Optional[str] = None
    width: float = 0.0
    thickness: float = 0.0


class ElementContainer(ExchangeModel):
    beams: List[Beam] = Field(default_factory=list)
    columns: List[Column] = Field(default_factory=list)
    braces: List[Brace] = Field(default_factory=list)
    walls: List[Wall] = Field(default_factory=list)
    floors: List[Floor] = Field(default_factory=list)
    openings: List[Opening] = Field(default_factory=list)
    joints: List[Joint] = Field(default_factory=list)
    isolated_footings: List[IsolatedFooting] = Field(default_factory=list)
    continuous_footings: List[ContinuousFooting] = Field(default_factory=list)
    piles: List[Pile] = Field(default_factory=list)
    piers: List[Pier] = Field(default_factory=list)

    def all_elements(self) -> Sequence[StructuralElement]:
        """Every element of every type, in container order."""
        result: List[StructuralElement] = []
        for name in type(self).model_fields:
            result.extend(getattr(self, name))
        return result
