"""
Tests for CoordinateRegistry - canonical point identities

Tests cover:
1. Fine tier collapses floating-point noise
2. Coarse tier collapses column plan positions
3. Sequential ids and issue order
4. Coarse/fine sharing of a single point record
5. Tolerance configuration through settings
"""

import pytest

from structural_exchange.config import settings
from structural_exchange.core.point_registry import (
    CoordinateRegistry,
    TolerancePolicy,
    ToleranceTier,
)
from structural_exchange.models import Point2D, Point3D


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def registry():
    return CoordinateRegistry()


# ============================================================================
# Fine Tier
# ============================================================================

class TestFineTier:
    """Line and area endpoints."""

    def test_noise_below_tolerance_collapses(self, registry):
        a = registry.canonical_id(Point2D(x=0.0, y=0.0))
        b = registry.canonical_id(Point2D(x=0.0000001, y=-0.0000002))
        assert a == b
        assert len(registry) == 1

    def test_distinct_points_get_sequential_ids(self, registry):
        ids = [
            registry.canonical_id(Point2D(x=0, y=0)),
            registry.canonical_id(Point2D(x=10, y=0)),
            registry.canonical_id(Point2D(x=10, y=10)),
        ]
        assert ids == ["1", "2", "3"]

    def test_same_point_twice_returns_same_id(self, registry):
        first = registry.canonical_id((120.5, 36.25))
        second = registry.canonical_id(Point2D(x=120.5, y=36.25))
        assert first == second == "1"

    def test_key_format(self, registry):
        assert registry.key(Point2D(x=10, y=0)) == "10.000000,0.000000"

    def test_negative_zero_shares_key(self, registry):
        assert registry.key((-0.0, 5.0)) == registry.key((0.0, 5.0))
        assert registry.key((-0.0000001, 5.0)) == registry.key((0.0, 5.0))

    def test_fine_keys_keep_elevation(self, registry):
        a = registry.canonical_id(Point3D(x=0, y=0, z=0))
        b = registry.canonical_id(Point3D(x=0, y=0, z=120))
        assert a != b
        assert registry.key(Point3D(x=0, y=0, z=120)) == "0.000000,0.000000,120.000000"

    def test_plan_only_registry_ignores_elevation(self):
        registry = CoordinateRegistry(plan_only=True)
        a = registry.canonical_id(Point3D(x=1, y=2, z=0))
        b = registry.canonical_id(Point3D(x=1, y=2, z=144))
        assert a == b

    def test_points_in_issue_order_with_quantized_coordinates(self, registry):
        registry.canonical_id((5.0000001, 0))
        registry.canonical_id((0, 5))
        points = registry.points()
        assert [p.point_id for p in points] == ["1", "2"]
        assert points[0].x == 5.0
        assert points[0].tier is ToleranceTier.FINE


# ============================================================================
# Coarse Tier
# ============================================================================

class TestCoarseTier:
    """Vertical member plan positions."""

    def test_snapping_error_collapses(self, registry):
        a = registry.canonical_id(Point2D(x=0.0, y=0.0), ToleranceTier.COARSE)
        b = registry.canonical_id(Point2D(x=0.01, y=0.01), ToleranceTier.COARSE)
        c = registry.canonical_id(Point2D(x=0.1, y=-0.1), ToleranceTier.COARSE)
        assert a == b == c

    def test_key_format(self, registry):
        assert registry.key(Point2D(x=0.01, y=0.01), ToleranceTier.COARSE) == "0.00,0.00"
        assert registry.key(Point2D(x=10.2, y=0), ToleranceTier.COARSE) == "10.25,0.00"

    def test_coarse_and_fine_keys_differ_for_same_point(self, registry):
        point = Point2D(x=0.01, y=0.01)
        assert registry.key(point, ToleranceTier.FINE) != registry.key(point, ToleranceTier.COARSE)

    def test_beyond_coarse_tolerance_stays_distinct(self, registry):
        a = registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.COARSE)
        b = registry.canonical_id(Point2D(x=1, y=0), ToleranceTier.COARSE)
        assert a != b

    def test_coarse_reuses_existing_fine_point(self, registry):
        corner = registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.FINE)
        column = registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.COARSE)
        assert column == corner
        assert len(registry) == 1

    def test_new_coarse_point_claims_fine_key(self, registry):
        column = registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.COARSE)
        corner = registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.FINE)
        assert corner == column

    def test_snapped_column_shares_point_with_later_beam_end(self, registry):
        column = registry.canonical_id(Point2D(x=0.12, y=0), ToleranceTier.COARSE)
        beam_end = registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.FINE)
        assert beam_end == column
        assert len(registry) == 1

    def test_snapped_column_reuses_earlier_beam_end(self, registry):
        beam_end = registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.FINE)
        column = registry.canonical_id(Point2D(x=0.12, y=0), ToleranceTier.COARSE)
        assert column == beam_end
        assert len(registry) == 1

    def test_unsnapped_fine_point_keeps_its_own_id(self, registry):
        registry.canonical_id(Point2D(x=0.01, y=0), ToleranceTier.FINE)
        column = registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.COARSE)
        # the column is emitted at (0, 0), the fine point at (0.01, 0)
        assert column == "2"

    def test_coarse_ignores_elevation(self, registry):
        a = registry.canonical_id(Point3D(x=0, y=0, z=0), ToleranceTier.COARSE)
        b = registry.canonical_id(Point3D(x=0.1, y=0, z=144), ToleranceTier.COARSE)
        assert a == b

    def test_one_id_per_emitted_coordinate(self, registry):
        registry.canonical_id(Point2D(x=0.12, y=0), ToleranceTier.COARSE)
        registry.canonical_id(Point2D(x=0, y=0), ToleranceTier.FINE)
        registry.canonical_id(Point2D(x=240.1, y=0), ToleranceTier.COARSE)
        registry.canonical_id(Point2D(x=240, y=0), ToleranceTier.FINE)
        coords = [(p.x, p.y) for p in registry.points()]
        assert coords == [(0.0, 0.0), (240.0, 0.0)]


# ============================================================================
# Lookup and Policies
# ============================================================================

class TestLookupAndPolicies:

    def test_lookup_does_not_issue(self, registry):
        assert registry.lookup(Point2D(x=3, y=4)) is None
        assert len(registry) == 0
        issued = registry.canonical_id(Point2D(x=3, y=4))
        assert registry.lookup(Point2D(x=3, y=4)) == issued
        assert issued in registry
        assert registry.get(issued).y == 4.0

    def test_policy_quantize_and_format(self):
        policy = TolerancePolicy(tolerance=0.5, precision=1)
        assert policy.quantize(0.74) == 0.5
        assert policy.format(0.76) == "1.0"
        assert policy.format(-0.1) == "0.0"

    def test_policies_read_from_settings(self, monkeypatch):
        monkeypatch.setitem(settings.SETTINGS, "coarse_tolerance", 1.0)
        registry = CoordinateRegistry()
        assert registry.policy(ToleranceTier.COARSE).tolerance == 1.0
        a = registry.canonical_id((0.4, 0), ToleranceTier.COARSE)
        b = registry.canonical_id((-0.4, 0), ToleranceTier.COARSE)
        assert a == b

    def test_explicit_policy_overrides_settings(self):
        registry = CoordinateRegistry(fine=TolerancePolicy(tolerance=0.001, precision=3))
        assert registry.key((1.0004, 0)) == "1.000,0.000"
