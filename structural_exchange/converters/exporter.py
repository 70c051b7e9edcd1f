"""
Section Exporter - Write a CanonicalModel as Section Texts

Produces ``{section name: section body}`` for a line/area based format. The
model is treated as read-only. Topology is emitted through the connectivity /
assignment decomposer, with a fresh CoordinateRegistry per export so point ids
always start at "1".

Every cross-reference is written as a name resolved through the
ReferenceResolver; an id that does not resolve becomes the documented default
name ("Default" wall/floor property, "Unknown" section, "D1" diaphragm).

Usage:
    from structural_exchange.converters.exporter import export_to_sections
    from structural_exchange.converters.section_codec import write_sections

    sections = export_to_sections(model)
    write_sections(sections, "building.e2k")
"""

import logging
from typing import Dict, List, Optional

from ..core.context import OperationContext, fresh_context
from ..core.decomposer import (
    AssignmentRecord,
    ConnectivityExport,
    ConnectivityKind,
    PlacementContext,
    export_assignments,
    export_connectivities,
)
from ..core.references import entity_name
from ..models.canonical_model import CanonicalModel
from ..models.enums import DiaphragmType, StructuralFloorType
from ..models.properties import Material
from . import section_codec as sc
from .section_codec import format_number, quote

logger = logging.getLogger(__name__)

UNIT_CODES = {
    "pounds": "LB", "kips": "KIP", "newtons": "N", "kilonewtons": "KN",
    "inches": "IN", "feet": "FT", "millimeters": "MM", "centimeters": "CM", "meters": "M",
    "fahrenheit": "F", "celsius": "C",
}

DIAPHRAGM_CODES = {
    DiaphragmType.RIGID: "RIGID",
    DiaphragmType.SEMI_RIGID: "SEMIRIGID",
    DiaphragmType.FLEXIBLE: "FLEXIBLE",
}

DECK_CODES = {
    StructuralFloorType.FILLED_DECK: "Filled",
    StructuralFloorType.UNFILLED_DECK: "Unfilled",
    StructuralFloorType.SOLID_SLAB_DECK: "SolidSlab",
}

MATERIAL_TYPES = {
    "concrete": "Concrete",
    "steel": "Steel",
    "wood": "Wood",
    "masonry": "Masonry",
    "coldFormed": "ColdFormed",
}


def _lines(rows: List[str]) -> str:
    return "\n".join(f"  {row}" for row in rows)


class SectionExporter:
    """Writes one model; create a new exporter (and context) per export."""

    def __init__(self, model: CanonicalModel, context: OperationContext):
        self.model = model
        self.context = context
        self.placement = PlacementContext.from_model(model, context.report)
        self.resolver = self.placement.resolver

    def run(self) -> Dict[str, str]:
        sections: Dict[str, str] = {}
        sections[sc.PROJECT_INFORMATION] = self._project_information()
        sections[sc.CONTROLS] = self._controls()
        sections[sc.STORIES] = self._stories()
        if self.model.layout.grids:
            sections[sc.GRIDS] = self._grids()
        sections[sc.DIAPHRAGM_NAMES] = self._diaphragms()
        sections[sc.MATERIAL_PROPERTIES] = self._materials()
        sections[sc.FRAME_SECTIONS] = self._frame_sections()
        sections[sc.SLAB_PROPERTIES] = self._slab_properties()
        sections[sc.WALL_PROPERTIES] = self._wall_properties()
        sections[sc.LOAD_PATTERNS] = self._load_patterns()
        sections[sc.SHELL_UNIFORM_LOAD_SETS] = self._load_sets()
        sections[sc.LOAD_COMBINATIONS] = self._combinations()

        self.context.check_cancelled("connectivities")
        connectivity = export_connectivities(self.model, self.context)
        self.context.check_cancelled("assignments")
        assignments = export_assignments(connectivity.element_map, self.model, self.placement)

        sections[sc.POINT_COORDINATES] = self._points()
        sections[sc.LINE_CONNECTIVITIES] = self._line_connectivities(connectivity)
        sections[sc.AREA_CONNECTIVITIES] = self._area_connectivities(connectivity)
        sections[sc.LINE_ASSIGNS] = self._line_assigns(assignments)
        sections[sc.AREA_ASSIGNS] = self._area_assigns(assignments)
        area_loads = self._area_loads(assignments)
        if area_loads:
            sections[sc.SHELL_OBJECT_LOADS] = area_loads

        logger.info(f"Exported {len(sections)} sections")
        return sections

    # =========================================================================
    # Metadata and layout
    # =========================================================================

    def _project_information(self) -> str:
        info = self.model.metadata.project_info
        row = f"PROJECTINFO  COMPANYNAME {quote(info.company or '')}  MODELNAME {quote(info.project_name)}"
        return _lines([row])

    def _controls(self) -> str:
        units = self.model.metadata.units
        codes = [UNIT_CODES.get(value, value.upper()) for value in (units.force, units.length, units.temperature)]
        rows = ["UNITS  " + "  ".join(quote(code) for code in codes)]
        if self.model.metadata.project_info.project_name:
            rows.append(f"TITLE2  {quote(self.model.metadata.project_info.project_name)}")
        return _lines(rows)

    def _stories(self) -> str:
        rows = []
        for story in self.placement.stories:
            if story.is_base:
                rows.append(f"STORY {quote(story.name)}  ELEV {format_number(story.elevation)}")
            else:
                rows.append(f"STORY {quote(story.name)}  HEIGHT {format_number(story.height)}")
        return _lines(rows)

    def _grids(self) -> str:
        rows = ['GRIDSYSTEM "G1"  TYPE "CARTESIAN"  BUBBLESIZE 60']
        for grid in self.model.layout.grids:
            direction = "X" if grid.is_x_direction else "Y"
            coordinate = grid.start_point.x if direction == "X" else grid.start_point.y
            start, end = grid.start_point.is_bubble, grid.end_point.is_bubble
            bubble = "Both" if start and end else "Start" if start else "End"
            rows.append(
                f'GRID "G1"  LABEL {quote(grid.name)}  DIR "{direction}"  '
                f'COORD {format_number(coordinate)}  VISIBLE "Yes"  BUBBLELOC "{bubble}"'
            )
        return _lines(rows)

    # =========================================================================
    # Properties
    # =========================================================================

    def _diaphragms(self) -> str:
        diaphragms = self.model.properties.diaphragms
        if not diaphragms:
            return _lines(['DIAPHRAGM "D1"  TYPE RIGID'])
        return _lines(
            [f"DIAPHRAGM {quote(entity_name(d))}  TYPE {DIAPHRAGM_CODES[d.type]}" for d in diaphragms]
        )

    def _material_rows(self, material: Material) -> List[str]:
        props = material.properties
        name = quote(entity_name(material))
        header = f"MATERIAL {name}  TYPE {quote(MATERIAL_TYPES[props.kind])}"
        if hasattr(props, "grade"):
            header += f"  GRADE {quote(props.grade)}"
        rows = [
            header,
            f"MATERIAL {name}  WEIGHTPERVOLUME {format_number(props.weight_density)}",
            f'MATERIAL {name}  SYMTYPE "Isotropic"  E {format_number(props.elastic_modulus)}  '
            f"U {format_number(props.poissons_ratio)}",
        ]
        if hasattr(props, "fy"):
            rows.append(f"MATERIAL {name}  FY {format_number(props.fy)}  FU {format_number(props.fu)}")
        if props.kind == "concrete":
            rows.append(f"MATERIAL {name}  FC {format_number(props.fc)}")
        if props.kind == "masonry":
            rows.append(f"MATERIAL {name}  FM {format_number(props.fm)}")
        return rows

    def _materials(self) -> str:
        rows: List[str] = []
        for material in self.model.properties.materials:
            rows.extend(self._material_rows(material))
        return _lines(rows)

    def _frame_sections(self) -> str:
        rows = []
        for frame in self.model.properties.frame_properties:
            material = self.resolver.resolve_name("materials", frame.material_id, frame.id)
            shape = frame.section_shape or entity_name(frame)
            rows.append(f"FRAMESECTION {quote(entity_name(frame))}  MATERIAL {quote(material)}  SHAPE {quote(shape)}")
        return _lines(rows)

    def _slab_properties(self) -> str:
        rows = []
        for prop in self.model.properties.floor_properties:
            material = self.resolver.resolve_name("materials", prop.material_id, prop.id)
            if prop.type is StructuralFloorType.SLAB:
                rows.append(
                    f'SHELLPROP {quote(entity_name(prop))}  PROPTYPE "Slab"  MATERIAL {quote(material)}  '
                    f'MODELINGTYPE "ShellThin"  SLABTYPE "Slab"  SLABTHICKNESS {format_number(prop.thickness)}'
                )
            else:
                rows.append(
                    f'SHELLPROP {quote(entity_name(prop))}  PROPTYPE "Deck"  DECKTYPE "{DECK_CODES[prop.type]}"  '
                    f"CONCMATERIAL {quote(material)}  DECKSLABDEPTH {format_number(prop.thickness)}"
                )
        return _lines(rows)

    def _wall_properties(self) -> str:
        rows = []
        for prop in self.model.properties.wall_properties:
            material = self.resolver.resolve_name("materials", prop.material_id, prop.id)
            rows.append(
                f'SHELLPROP {quote(entity_name(prop))}  PROPTYPE "Wall"  MATERIAL {quote(material)}  '
                f'MODELINGTYPE "ShellThin"  WALLTHICKNESS {format_number(prop.thickness)}'
            )
        return _lines(rows)

    # =========================================================================
    # Loads
    # =========================================================================

    def _load_patterns(self) -> str:
        rows = [
            f"LOADPATTERN {quote(entity_name(d))}  TYPE {quote(d.type.value)}  SELFWEIGHT {format_number(d.self_weight)}"
            for d in self.model.loads.load_definitions
        ]
        return _lines(rows)

    def _load_sets(self) -> str:
        rows = []
        for surface in self.model.loads.surface_loads:
            set_name = entity_name(surface)
            for slot in ("dead", "live"):
                load_id = getattr(surface, f"{slot}_load_id")
                if not load_id:
                    continue
                pattern = self.resolver.resolve_name("load_definitions", load_id, surface.id)
                value = getattr(surface, f"{slot}_load_value")
                rows.append(
                    f"SHELLUNIFORMLOADSET {quote(set_name)}  LOADPAT {quote(pattern)}  VALUE {format_number(value)}"
                )
        return _lines(rows)

    def _combinations(self) -> str:
        rows = []
        for combo in self.model.loads.load_combinations:
            name = quote(entity_name(combo))
            rows.append(f'COMBO {name}  TYPE "Linear Add"')
            for index, load_id in enumerate(combo.load_definition_ids):
                pattern = self.resolver.resolve_name("load_definitions", load_id, combo.id)
                rows.append(f"COMBO {name}  LOADCASE {quote(pattern)}  SF {format_number(combo.factor_for(index))}")
        return _lines(rows)

    # =========================================================================
    # Elements
    # =========================================================================

    def _points(self) -> str:
        rows = [
            f"POINT {quote(p.point_id)}  {format_number(p.x)}  {format_number(p.y)}"
            for p in self.context.registry.points()
        ]
        return _lines(rows)

    def _line_connectivities(self, connectivity: ConnectivityExport) -> str:
        rows = []
        for record in connectivity.of_kind(ConnectivityKind.COLUMN, ConnectivityKind.BEAM, ConnectivityKind.BRACE):
            start, end = record.point_ids[0], record.point_ids[-1]
            # columns end one story above their start point
            offset = 1 if record.kind is ConnectivityKind.COLUMN else 0
            rows.append(
                f"LINE {quote(record.connectivity_id)}  {record.kind.value}  {quote(start)}  {quote(end)}  {offset}"
            )
        return _lines(rows)

    def _area_connectivities(self, connectivity: ConnectivityExport) -> str:
        rows = []
        for record in connectivity.of_kind(ConnectivityKind.FLOOR, ConnectivityKind.WALL):
            kind = "FLOOR" if record.kind is ConnectivityKind.FLOOR else "PANEL"
            count = len(record.point_ids)
            points = "  ".join(quote(p) for p in record.point_ids)
            offsets = "  ".join("0" for _ in record.point_ids)
            rows.append(f"AREA {quote(record.connectivity_id)}  {kind}  {count}  {points}  {offsets}")
        return _lines(rows)

    def _line_assigns(self, assignments: List[AssignmentRecord]) -> str:
        rows = []
        for a in assignments:
            if a.kind.is_area:
                continue
            row = f"LINEASSIGN {quote(a.connectivity_id)}  {quote(a.story)}  SECTION {quote(a.section)}"
            if a.is_lateral:
                row += '  ISLATERAL "Yes"'
            rows.append(row)
        return _lines(rows)

    def _area_assigns(self, assignments: List[AssignmentRecord]) -> str:
        rows = []
        for a in assignments:
            if not a.kind.is_area:
                continue
            row = f"AREAASSIGN {quote(a.connectivity_id)}  {quote(a.story)}  SECTION {quote(a.section)}"
            if a.diaphragm:
                row += f"  DIAPHRAGM {quote(a.diaphragm)}"
            rows.append(row + '  AUTOMESH "YES"')
        return _lines(rows)

    def _area_loads(self, assignments: List[AssignmentRecord]) -> str:
        rows = [
            f'AREALOAD {quote(a.connectivity_id)}  {quote(a.story)}  TYPE "UNIFLOADSET"  {quote(a.load_set)}'
            for a in assignments
            if a.load_set
        ]
        return _lines(rows)


def export_to_sections(
    model: CanonicalModel, context: Optional[OperationContext] = None
) -> Dict[str, str]:
    """Write ``model`` as ``{section name: section body}``.

    Args:
        model: Model to export (not modified)
        context: Fresh operation context; one is created when omitted

    Returns:
        Section bodies, ready for ``section_codec.join_sections``

    Raises:
        OperationCancelled: The context was cancelled
    """
    context = fresh_context(context, "export")
    return SectionExporter(model, context).run()
