"""Tests for canonical model schemas, enumerations and settings."""

import pytest
from pydantic import ValidationError

from structural_exchange.config.settings import get_all_settings, get_setting, set_setting
from structural_exchange.models import (
    COLLECTIONS,
    Beam,
    CanonicalModel,
    Column,
    ConcreteProperties,
    DiaphragmType,
    Floor,
    Grid,
    GridPoint,
    LoadCombination,
    LoadType,
    Material,
    MaterialKind,
    Point2D,
    Point3D,
    StructuralElement,
    StructuralFloorType,
    Wall,
    default_properties,
)
from structural_exchange.models.enums import _ParsableEnum


class TestEnumerations:

    @pytest.mark.parametrize("raw,expected", [
        ("Concrete", MaterialKind.CONCRETE),
        ("STEEL", MaterialKind.STEEL),
        ("Cold-Formed", MaterialKind.COLD_FORMED),
        ("coldFormed", MaterialKind.COLD_FORMED),
        ("timber", MaterialKind.WOOD),
        ("Aluminum", MaterialKind.STEEL),
        (None, MaterialKind.STEEL),
    ])
    def test_material_kind(self, raw, expected):
        assert MaterialKind.parse(raw) is expected

    @pytest.mark.parametrize("raw,expected", [
        ("RIGID", DiaphragmType.RIGID),
        ("Semi-Rigid", DiaphragmType.SEMI_RIGID),
        ("semirigid", DiaphragmType.SEMI_RIGID),
        ("flexible", DiaphragmType.FLEXIBLE),
        ("", DiaphragmType.RIGID),
    ])
    def test_diaphragm_type(self, raw, expected):
        assert DiaphragmType.parse(raw) is expected

    @pytest.mark.parametrize("raw,expected", [
        ("Dead", LoadType.DEAD),
        ("Super Dead", LoadType.SUPER_DEAD),
        ("SDL", LoadType.SUPER_DEAD),
        ("Quake", LoadType.SEISMIC),
        ("Notional", LoadType.OTHER),
    ])
    def test_load_type(self, raw, expected):
        assert LoadType.parse(raw) is expected

    def test_floor_type_values(self):
        assert StructuralFloorType("FilledDeck") is StructuralFloorType.FILLED_DECK

    def test_enum_without_fallback_fails_loudly(self):
        class Shape(_ParsableEnum):
            ROUND = "round"

        assert Shape.parse("Round") is Shape.ROUND
        with pytest.raises(NotImplementedError, match="Shape must define fallback"):
            Shape.parse(None)


class TestMaterials:

    def test_create_with_defaults(self):
        material = Material.create("MAT-1", "4000Psi", MaterialKind.CONCRETE)
        assert material.kind is MaterialKind.CONCRETE
        assert isinstance(material.properties, ConcreteProperties)
        assert material.properties.fc == 4000.0
        assert material.properties.weight_density == 150.0

    def test_overrides(self):
        props = default_properties(MaterialKind.STEEL, fy=36000.0, grade="A36")
        assert props.kind == "steel"
        assert (props.fy, props.grade) == (36000.0, "A36")

    def test_default_material_is_steel(self):
        assert Material(id="MAT-1", name="Anything").kind is MaterialKind.STEEL


class TestElementGeometry:

    def test_base_element_is_abstract(self):
        with pytest.raises(TypeError):
            StructuralElement(id="EL-1")

    def test_two_point_geometry(self):
        beam = Beam(id="BM-1", start_point=Point2D(x=0, y=0), end_point=Point2D(x=1, y=0))
        assert beam.has_geometry()
        assert not Beam(id="BM-2", start_point=Point2D(x=0, y=0)).has_geometry()

    def test_column_geometry_is_plan_position(self):
        column = Column(id="COL-1", start_point=Point2D(x=3, y=4))
        assert [p.as_tuple() for p in column.geometry()] == [(3.0, 4.0)]
        assert Column(id="COL-2").geometry() is None

    def test_polygon_minimum_points(self):
        two = [Point2D(x=0, y=0), Point2D(x=1, y=0)]
        assert Floor(id="FL-1", points=two).geometry() is None
        assert Wall(id="WL-1", points=two).geometry() == two

    def test_assignment_is_validated(self):
        beam = Beam(id="BM-1")
        with pytest.raises(ValidationError):
            beam.start_point = "not a point"

    def test_point_helpers(self):
        assert Point2D.from_list([1, 2]).as_tuple() == (1.0, 2.0)
        with pytest.raises(ValueError):
            Point2D.from_list([1, 2, 3])
        assert Point3D(x=1, y=2, z=3).to_plan() == Point2D(x=1, y=2)

    def test_grid_direction(self):
        vertical = Grid(id="GR-1", name="A", start_point=GridPoint(x=0, y=0), end_point=GridPoint(x=0, y=10))
        horizontal = Grid(id="GR-2", name="1", start_point=GridPoint(x=0, y=0), end_point=GridPoint(x=10, y=0))
        assert vertical.is_x_direction
        assert not horizontal.is_x_direction


class TestCanonicalModel:

    def test_collection_returns_live_list(self):
        model = CanonicalModel()
        model.collection("beams").append(Beam(id="BM-1"))
        assert model.elements.beams[0].id == "BM-1"

    def test_unknown_collection(self):
        with pytest.raises(KeyError, match="Unknown collection"):
            CanonicalModel().collection("gizmos")

    def test_every_collection_resolves(self):
        model = CanonicalModel()
        for name in COLLECTIONS:
            assert model.collection(name) == []

    def test_counts(self, sample_model):
        counts = sample_model.counts()
        assert counts["levels"] == 3
        assert counts["columns"] == 2
        assert "braces" not in counts

    def test_all_elements(self, sample_model):
        ids = [e.id for e in sample_model.elements.all_elements()]
        assert set(ids) == {"BM-1", "COL-1", "COL-2", "WL-1", "FL-1"}

    def test_scale_factor_default(self):
        combo = LoadCombination(id="LC-1", load_definition_ids=["LD-1", "LD-2"], scale_factors=[1.4])
        assert combo.factor_for(0) == 1.4
        assert combo.factor_for(1) == 1.0


class TestSettings:

    def test_get_setting(self):
        assert get_setting("coarse_tolerance") == 0.25
        assert get_setting("fine_precision") == 6

    def test_unknown_setting_lists_available(self):
        with pytest.raises(KeyError, match="Available settings"):
            get_setting("nope")

    def test_set_setting_round_trip(self):
        original = get_setting("coarse_precision")
        try:
            set_setting("coarse_precision", 3)
            assert get_all_settings()["coarse_precision"] == 3
        finally:
            set_setting("coarse_precision", original)
