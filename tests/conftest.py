"""Shared fixtures: a small three-level steel/concrete building and its section text."""

import textwrap

import pytest

from structural_exchange.models import (
    Beam,
    CanonicalModel,
    Column,
    Diaphragm,
    Floor,
    FloorProperties,
    FloorType,
    FrameProperties,
    Grid,
    GridPoint,
    Level,
    LineLoad,
    LoadCombination,
    LoadDefinition,
    LoadType,
    Material,
    MaterialKind,
    Point2D,
    SurfaceLoad,
    Wall,
    WallProperties,
)


def pt(x, y):
    return Point2D(x=x, y=y)


@pytest.fixture
def three_levels():
    """Base at 0, level 1 at 120, level 2 at 240 (ascending)."""
    return [
        Level(id="LV-0", name="0", floor_type_id="FT-1", elevation=0.0),
        Level(id="LV-1", name="1", floor_type_id="FT-1", elevation=120.0),
        Level(id="LV-2", name="2", floor_type_id="FT-1", elevation=240.0),
    ]


@pytest.fixture
def empty_model(three_levels):
    model = CanonicalModel()
    model.layout.floor_types.append(FloorType(id="FT-1", name="typical"))
    model.layout.levels.extend(three_levels)
    return model


@pytest.fixture
def sample_model(empty_model):
    """One bay, one story of framing with a slab, a wall and loads."""
    model = empty_model
    model.metadata.project_info.project_name = "Test Building"
    model.metadata.project_info.company = "Acme Engineering"

    model.layout.grids.append(
        Grid(
            id="GR-1",
            name="A",
            start_point=GridPoint(x=0, y=0, is_bubble=True),
            end_point=GridPoint(x=0, y=240),
        )
    )

    props = model.properties
    props.materials.append(Material.create("MAT-1", "A992Fy50", MaterialKind.STEEL))
    props.materials.append(Material.create("MAT-2", "4000Psi", MaterialKind.CONCRETE))
    props.frame_properties.append(
        FrameProperties(id="FRP-1", name="W10X12", material_id="MAT-1", section_shape="W")
    )
    props.floor_properties.append(
        FloorProperties(id="FP-1", name="Slab8", thickness=8.0, material_id="MAT-2")
    )
    props.wall_properties.append(
        WallProperties(id="WP-1", name="Wall12", thickness=12.0, material_id="MAT-2")
    )
    props.diaphragms.append(Diaphragm(id="DIA-1", name="D1"))

    loads = model.loads
    loads.load_definitions.append(LoadDefinition(id="LD-1", name="Dead", type=LoadType.DEAD, self_weight=1.0))
    loads.load_definitions.append(LoadDefinition(id="LD-2", name="Live", type=LoadType.LIVE))
    loads.surface_loads.append(
        SurfaceLoad(
            id="SL-1",
            name="Office",
            floor_type_id="FT-1",
            dead_load_id="LD-1",
            dead_load_value=0.02,
            live_load_id="LD-2",
            live_load_value=0.05,
        )
    )
    loads.load_combinations.append(
        LoadCombination(
            id="LC-1",
            name="1.2D+1.6L",
            load_definition_ids=["LD-1", "LD-2"],
            scale_factors=[1.2, 1.6],
        )
    )

    elements = model.elements
    elements.columns.append(
        Column(id="COL-1", start_point=pt(0, 0), base_level_id="LV-0", top_level_id="LV-1", frame_properties_id="FRP-1")
    )
    elements.columns.append(
        Column(id="COL-2", start_point=pt(240, 0), base_level_id="LV-0", top_level_id="LV-1", frame_properties_id="FRP-1")
    )
    elements.beams.append(
        Beam(id="BM-1", start_point=pt(0, 0), end_point=pt(240, 0), level_id="LV-1", frame_properties_id="FRP-1")
    )
    elements.walls.append(
        Wall(
            id="WL-1",
            points=[pt(0, 240), pt(240, 240)],
            base_level_id="LV-0",
            top_level_id="LV-1",
            properties_id="WP-1",
        )
    )
    elements.floors.append(
        Floor(
            id="FL-1",
            level_id="LV-1",
            points=[pt(0, 0), pt(240, 0), pt(240, 240), pt(0, 240)],
            floor_properties_id="FP-1",
            diaphragm_id="DIA-1",
            surface_load_id="SL-1",
        )
    )
    loads.line_loads.append(LineLoad(id="LL-1", element_id="BM-1", load_definition_id="LD-1", magnitude=0.5))
    return model


BUILDING_TEXT = textwrap.dedent(
    """\
    $ CONTROLS
      UNITS  "KIP"  "IN"  "F"
      TITLE1  "Acme Engineering"
      TITLE2  "Office Tower"

    $ STORIES - IN SEQUENCE FROM TOP
      STORY "Story2"  HEIGHT 144
      STORY "Story1"  HEIGHT 120
      STORY "Base"  ELEV 0

    $ DIAPHRAGM NAMES
      DIAPHRAGM "D1"  TYPE RIGID

    $ MATERIAL PROPERTIES
      MATERIAL  "A992Fy50"  TYPE "Steel"  GRADE "Grade 50"
      MATERIAL  "A992Fy50"  FY 50  FU 65
      MATERIAL  "4000Psi"  TYPE "Concrete"
      MATERIAL  "4000Psi"  FC 4

    $ FRAME SECTIONS
      FRAMESECTION  "W14X22"  MATERIAL "A992Fy50"  SHAPE "I/Wide Flange"

    $ SLAB PROPERTIES
      SHELLPROP "Slab8"  PROPTYPE "Slab"  MATERIAL "4000Psi"  SLABTHICKNESS 8

    $ WALL PROPERTIES
      SHELLPROP "Wall12"  PROPTYPE "Wall"  MATERIAL "4000Psi"  WALLTHICKNESS 12

    $ POINT COORDINATES
      POINT "1"  0  0
      POINT "2"  300  0
      POINT "3"  300  240
      POINT "4"  0  240

    $ LINE CONNECTIVITIES
      LINE  "C1"  COLUMN  "1"  "1"  1
      LINE  "B1"  BEAM  "1"  "2"  0

    $ AREA CONNECTIVITIES
      AREA "F1"  FLOOR  4  "1"  "2"  "3"  "4"  0  0  0  0
      AREA "W1"  PANEL  4  "4"  "3"  "3"  "4"  0  0  1  1

    $ LINE ASSIGNS
      LINEASSIGN  "C1"  "Story1"  SECTION "W14X22"
      LINEASSIGN  "C1"  "Story2"  SECTION "W14X22"
      LINEASSIGN  "B1"  "Story1"  SECTION "W14X22"  ISLATERAL "Yes"
      LINEASSIGN  "B1"  "Story2"  SECTION "W14X22"

    $ AREA ASSIGNS
      AREAASSIGN "F1"  "Story1"  SECTION "Slab8"  DIAPHRAGM "D1"
      AREAASSIGN "F1"  "Story2"  SECTION "Slab8"  DIAPHRAGM "D1"
      AREAASSIGN "W1"  "Story1"  SECTION "Wall12"

    $ LOAD PATTERNS
      LOADPATTERN "Dead"  TYPE  "Dead"  SELFWEIGHT  1
      LOADPATTERN "Live"  TYPE  "Live"  SELFWEIGHT  0

    $ SHELL UNIFORM LOAD SETS
      SHELLUNIFORMLOADSET "Office"  LOADPAT "Dead"  VALUE 0.015
      SHELLUNIFORMLOADSET "Office"  LOADPAT "Live"  VALUE 0.05

    $ SHELL OBJECT LOADS
      AREALOAD "F1"  "Story1"  TYPE "UNIFLOADSET"  "Office"

    $ LOAD COMBINATIONS
      COMBO "DL+LL"  TYPE "Linear Add"
      COMBO "DL+LL"  LOADCASE "Dead"  SF 1.2
      COMBO "DL+LL"  LOADCASE "Live"  SF 1.6
    """
)


@pytest.fixture
def building_text():
    return BUILDING_TEXT
