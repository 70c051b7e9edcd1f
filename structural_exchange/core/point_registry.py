"""
Coordinate Registry - Canonical Point Identities

Quantizes raw coordinates into canonical point identities so that geometry
written by different producers, with different floating-point noise, resolves
to shared points.

Two tolerance tiers:
- FINE (1e-6, 6 decimals): line and area endpoints. Adjoining floors and walls
  that share a vertex get the same point id.
- COARSE (0.25, 2 decimals): plan position of vertical members only. Column
  endpoints stacked over several stories with minor snapping error resolve to
  one column line.

Ids are sequential strings ("1", "2", ...) issued the first time a canonical
key is seen. A registry lives for exactly one operation and has no delete.

Usage:
    from structural_exchange.core.point_registry import CoordinateRegistry, ToleranceTier

    registry = CoordinateRegistry()
    a = registry.canonical_id(Point2D(x=0, y=0))
    b = registry.canonical_id(Point2D(x=0.0000001, y=0))
    assert a == b

    col = registry.canonical_id(Point2D(x=0.01, y=0.01), ToleranceTier.COARSE)
    registry.key(Point2D(x=0.01, y=0.01), ToleranceTier.COARSE)   # "0.00,0.00"
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..config.settings import get_setting
from ..models.geometry import Point2D, Point3D

logger = logging.getLogger(__name__)

PointLike = Union[Point2D, Point3D, Sequence[float]]


class ToleranceTier(str, Enum):
    """Quantization tier; COARSE is reserved for vertical-member plan positions."""
    FINE = "fine"
    COARSE = "coarse"


@dataclass(frozen=True)
class TolerancePolicy:
    """Rounding step and printed precision of one tier.

    Attributes:
        tolerance: Grid step coordinates are rounded to
        precision: Decimals used when the rounded value is serialized
    """

    tolerance: float
    precision: int

    def quantize(self, value: float) -> float:
        snapped = round(value / self.tolerance) * self.tolerance
        # normalise -0.0 so that keys never differ by sign of zero
        return round(snapped, self.precision) + 0.0

    def format(self, value: float) -> str:
        return f"{self.quantize(value):.{self.precision}f}"

    @classmethod
    def from_settings(cls, tier: ToleranceTier) -> "TolerancePolicy":
        return cls(
            tolerance=float(get_setting(f"{tier.value}_tolerance")),
            precision=int(get_setting(f"{tier.value}_precision")),
        )


@dataclass(frozen=True)
class RegisteredPoint:
    """A canonical point: its id and the quantized coordinates first seen for it."""

    point_id: str
    x: float
    y: float
    z: Optional[float] = None
    tier: ToleranceTier = ToleranceTier.FINE


def _coords(point: PointLike) -> Tuple[float, ...]:
    if isinstance(point, (Point2D, Point3D)):
        return point.as_tuple()
    return tuple(float(v) for v in point)


class CoordinateRegistry:
    """Issues canonical point ids for one import or export operation.

    Within a tier, two points get the same id iff their canonical keys are
    equal. A coarse point is first snapped to the coarse grid; it reuses the
    fine id registered at the snapped coordinates, and a newly issued coarse
    id claims that fine key. One emitted coordinate therefore always has one
    id, and a column and a beam sharing an end share one point record.

    Only the coarse tier ignores elevation unless ``plan_only`` is set.
    """

    def __init__(
        self,
        fine: Optional[TolerancePolicy] = None,
        coarse: Optional[TolerancePolicy] = None,
        plan_only: bool = False,
    ):
        """
        Args:
            fine: Fine tier policy (settings when omitted)
            coarse: Coarse tier policy (settings when omitted)
            plan_only: Ignore the z coordinate in fine keys as well
        """
        self._policies: Dict[ToleranceTier, TolerancePolicy] = {
            ToleranceTier.FINE: fine or TolerancePolicy.from_settings(ToleranceTier.FINE),
            ToleranceTier.COARSE: coarse or TolerancePolicy.from_settings(ToleranceTier.COARSE),
        }
        self.plan_only = plan_only
        self._ids: Dict[Tuple[ToleranceTier, str], str] = {}
        self._points: Dict[str, RegisteredPoint] = {}
        self._next_id = 1

    def policy(self, tier: ToleranceTier) -> TolerancePolicy:
        return self._policies[tier]

    def key(self, point: PointLike, tier: ToleranceTier = ToleranceTier.FINE) -> str:
        """Canonical key of ``point`` under ``tier``, e.g. ``"10.000000,0.000000"``."""
        coords = _coords(point)
        if self.plan_only or tier is ToleranceTier.COARSE:
            coords = coords[:2]
        policy = self._policies[tier]
        return ",".join(policy.format(v) for v in coords)

    def quantized(self, point: PointLike, tier: ToleranceTier = ToleranceTier.FINE) -> Tuple[float, ...]:
        """Quantized coordinate tuple, usable as a sortable key."""
        coords = _coords(point)
        if self.plan_only or tier is ToleranceTier.COARSE:
            coords = coords[:2]
        policy = self._policies[tier]
        return tuple(policy.quantize(v) for v in coords)

    def canonical_id(self, point: PointLike, tier: ToleranceTier = ToleranceTier.FINE) -> str:
        """Return the stable id for ``point`` under ``tier``, issuing one if new.

        Args:
            point: Point2D, Point3D or coordinate sequence
            tier: Tolerance tier appropriate to the element class

        Returns:
            Sequential point id as a string
        """
        tier = ToleranceTier(tier)
        key = self.key(point, tier)
        existing = self._ids.get((tier, key))
        if existing is not None:
            return existing

        if tier is ToleranceTier.COARSE:
            point_id = self._register_coarse(point, key)
        else:
            point_id = self._issue(point, tier)
            self._ids[(tier, key)] = point_id

        logger.debug(f"Registered point {point_id} for {tier.value} key {key}")
        return point_id

    def _register_coarse(self, point: PointLike, key: str) -> str:
        # the fine key of the snapped position, not of the raw point
        snapped = self.quantized(point, ToleranceTier.COARSE) + _coords(point)[2:3]
        fine_key = self.key(snapped, ToleranceTier.FINE)
        point_id = self._ids.get((ToleranceTier.FINE, fine_key))
        if point_id is None:
            point_id = self._issue(point, ToleranceTier.COARSE)
            self._ids[(ToleranceTier.FINE, fine_key)] = point_id
        self._ids[(ToleranceTier.COARSE, key)] = point_id
        return point_id

    def _issue(self, point: PointLike, tier: ToleranceTier) -> str:
        point_id = str(self._next_id)
        self._next_id += 1
        coords = self.quantized(point, tier)
        raw = _coords(point)
        z = raw[2] if len(raw) > 2 else None
        self._points[point_id] = RegisteredPoint(
            point_id=point_id, x=coords[0], y=coords[1], z=z, tier=tier
        )
        return point_id

    def lookup(self, point: PointLike, tier: ToleranceTier = ToleranceTier.FINE) -> Optional[str]:
        """Id for ``point`` if already registered, without issuing a new one."""
        return self._ids.get((ToleranceTier(tier), self.key(point, tier)))

    def points(self) -> List[RegisteredPoint]:
        """All registered points in issue order."""
        return list(self._points.values())

    def get(self, point_id: str) -> RegisteredPoint:
        return self._points[point_id]

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, point_id: str) -> bool:
        return point_id in self._points
