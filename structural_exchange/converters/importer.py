"""
Section Importer - Build a CanonicalModel from Section Texts

Populates a CanonicalModel strictly in phase order:

    UNINITIALIZED -> METADATA -> LAYOUT -> PROPERTIES -> LOADS -> ELEMENTS -> READY

Each phase reads its own sections and may look up entities built by earlier
phases (elements resolve story names against the levels built by LAYOUT).
Transitions are one-directional; a phase that fails aborts the import with a
FatalImportError naming the phase and section, and no later phase runs.

Error policy:
- Optional section absent: MissingSectionWarning, defaults apply
- Name that does not resolve: UnresolvedReferenceWarning, reference left unset
- Record that does not parse: MalformedRecordError recorded, record skipped
- Connectivities without a point section: MissingRequiredSection (fatal)

Usage:
    from structural_exchange.converters.importer import import_from_sections
    from structural_exchange.converters.section_codec import read_sections

    context = OperationContext()
    model = import_from_sections(read_sections("building.e2k"), context=context)
    print(context.report.to_dict())
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..config.settings import default_name
from ..core.context import OperationContext, fresh_context
from ..core.dedup import merge_duplicates
from ..core.errors import (
    FatalImportError,
    MalformedRecordError,
    MissingRequiredSection,
    MissingSectionWarning,
    OperationCancelled,
    PhaseTransitionError,
    UnresolvedReferenceWarning,
)
from ..core.point_registry import ToleranceTier
from ..core.stories import BASE_STORY, level_name_from_story
from ..models.canonical_model import CanonicalModel
from ..models.elements import Beam, Brace, Column, Floor, Opening, Wall
from ..models.enums import (
    DiaphragmType,
    FrameMaterialType,
    LoadType,
    MaterialKind,
    StructuralFloorType,
)
from ..models.geometry import GridPoint, Point2D
from ..models.layout import FloorType, Grid, Level
from ..models.loads import LoadCombination, LoadDefinition, SurfaceLoad
from ..models.properties import (
    Diaphragm,
    FloorProperties,
    FrameProperties,
    Material,
    WallProperties,
    default_properties,
)
from . import section_codec as sc
from .section_codec import Record, iter_records, keyword_values

logger = logging.getLogger(__name__)


class ImportPhase(str, Enum):
    UNINITIALIZED = "Uninitialized"
    METADATA = "Metadata"
    LAYOUT = "Layout"
    PROPERTIES = "Properties"
    LOADS = "Loads"
    ELEMENTS = "Elements"
    READY = "Ready"


PHASE_ORDER: List[ImportPhase] = list(ImportPhase)

PHASE_SECTIONS: Dict[ImportPhase, Tuple[str, ...]] = {
    ImportPhase.METADATA: (sc.PROJECT_INFORMATION, sc.CONTROLS),
    ImportPhase.LAYOUT: (sc.STORIES, sc.GRIDS),
    ImportPhase.PROPERTIES: (
        sc.DIAPHRAGM_NAMES,
        sc.MATERIAL_PROPERTIES,
        sc.FRAME_SECTIONS,
        sc.SLAB_PROPERTIES,
        sc.WALL_PROPERTIES,
    ),
    ImportPhase.LOADS: (sc.LOAD_PATTERNS, sc.SHELL_UNIFORM_LOAD_SETS, sc.LOAD_COMBINATIONS),
    ImportPhase.ELEMENTS: (
        sc.POINT_COORDINATES,
        sc.LINE_CONNECTIVITIES,
        sc.AREA_CONNECTIVITIES,
        sc.LINE_ASSIGNS,
        sc.AREA_ASSIGNS,
        sc.SHELL_OBJECT_LOADS,
    ),
}

LENGTH_UNITS = {"IN": "inches", "FT": "feet", "MM": "millimeters", "CM": "centimeters", "M": "meters"}
FORCE_UNITS = {"LB": "pounds", "KIP": "kips", "N": "newtons", "KN": "kilonewtons", "KGF": "kilograms-force"}
TEMPERATURE_UNITS = {"F": "fahrenheit", "C": "celsius"}

# Material record keyword -> variant field
MATERIAL_FIELDS = {
    "FY": "fy",
    "FU": "fu",
    "FC": "fc",
    "FM": "fm",
    "E": "elastic_modulus",
    "U": "poissons_ratio",
    "WEIGHTPERVOLUME": "weight_density",
    "GRADE": "grade",
}

DECK_TYPES = {
    "FILLED": StructuralFloorType.FILLED_DECK,
    "UNFILLED": StructuralFloorType.UNFILLED_DECK,
    "SOLIDSLAB": StructuralFloorType.SOLID_SLAB_DECK,
}


class PhaseTracker:
    """One-directional import phase state machine."""

    def __init__(self):
        self.phase = ImportPhase.UNINITIALIZED

    @property
    def next_phase(self) -> Optional[ImportPhase]:
        index = PHASE_ORDER.index(self.phase)
        return PHASE_ORDER[index + 1] if index + 1 < len(PHASE_ORDER) else None

    def advance(self, phase: ImportPhase) -> None:
        """Enter ``phase``.

        Raises:
            PhaseTransitionError: If ``phase`` is not the immediate successor
        """
        if phase != self.next_phase:
            raise PhaseTransitionError(self.phase.value, ImportPhase(phase).value)
        logger.debug(f"Import phase {self.phase.value} -> {phase.value}")
        self.phase = phase

    @property
    def is_ready(self) -> bool:
        return self.phase is ImportPhase.READY


def _number(value: str, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{what} is not a number: {value!r}")


def _by_name(items: List[Any]) -> Dict[str, Any]:
    return {item.name.lower(): item for item in items}


class SectionImporter:
    """Reads one set of sections into a new CanonicalModel.

    An importer instance runs once; create a new one (and a new context) per
    import.
    """

    def __init__(self, sections: Mapping[str, str], context: OperationContext):
        self.sections: Dict[str, str] = {
            name.strip().upper(): body for name, body in sections.items()
        }
        self.context = context
        self.report = context.report
        self.model = CanonicalModel()
        self.tracker = PhaseTracker()
        self._section: Optional[str] = None

        # Name lookups built by earlier phases
        self._stories: Dict[str, Level] = {}
        self._points: Dict[str, Tuple[float, float, Optional[float]]] = {}
        self._canonical_points: Dict[str, str] = {}
        self._lines: Dict[str, Tuple[str, str, str]] = {}
        self._areas: Dict[str, Tuple[str, List[str]]] = {}
        self._floors_by_assignment: Dict[Tuple[str, str], Floor] = {}

    # =========================================================================
    # Driver
    # =========================================================================

    def run(self) -> CanonicalModel:
        """Execute every phase in order and return the populated model.

        Raises:
            FatalImportError: A phase failed; ``phase``/``section`` identify it
            OperationCancelled: The context was cancelled between phases
        """
        handlers: List[Tuple[ImportPhase, Callable[[], None]]] = [
            (ImportPhase.METADATA, self._import_metadata),
            (ImportPhase.LAYOUT, self._import_layout),
            (ImportPhase.PROPERTIES, self._import_properties),
            (ImportPhase.LOADS, self._import_loads),
            (ImportPhase.ELEMENTS, self._import_elements),
        ]
        for phase, handler in handlers:
            self.context.check_cancelled(phase.value)
            self.tracker.advance(phase)
            self._section = None
            try:
                handler()
            except (FatalImportError, OperationCancelled):
                raise
            except Exception as e:
                logger.error(f"Import phase {phase.value} failed: {e}")
                raise FatalImportError(phase.value, str(e), section=self._section) from e
            logger.info(f"Import phase {phase.value} complete")

        self.tracker.advance(ImportPhase.READY)
        logger.info(f"Import ready: {self.model.counts()}")
        return self.model

    def _each_record(self, section: str, handler: Callable[[Record], None]) -> bool:
        """Feed every record of ``section`` to ``handler`` with skip-and-continue.

        Returns:
            False if the section is absent (a MissingSectionWarning is recorded)
        """
        body = self.sections.get(section)
        if body is None:
            self.report.warn(MissingSectionWarning(section, self.tracker.phase.value))
            return False
        self._section = section
        for record in iter_records(body):
            try:
                if not record.tokens:
                    raise ValueError("unbalanced quotes")
                handler(record)
            except MalformedRecordError as e:
                self.report.record_error(e)
            except (ValueError, IndexError, KeyError) as e:
                self.report.record_error(
                    MalformedRecordError(section, record.text, str(e), record.line_number)
                )
        return True

    def _has_records(self, section: str) -> bool:
        body = self.sections.get(section)
        return body is not None and any(True for _ in iter_records(body))

    def _unresolved(self, field: str, name: str, owner: Optional[str] = None) -> None:
        self.report.warn(UnresolvedReferenceWarning(field, name, None, owner))

    def _new_id(self, collection: str) -> str:
        return self.context.ids.for_collection(collection)

    # =========================================================================
    # Metadata
    # =========================================================================

    def _import_metadata(self) -> None:
        info = self.model.metadata.project_info
        units = self.model.metadata.units

        def project(record: Record) -> None:
            if record.keyword != "PROJECTINFO":
                return
            values = keyword_values(record.tokens, 1)
            if values.get("COMPANYNAME"):
                info.company = values["COMPANYNAME"]
            if values.get("MODELNAME"):
                info.project_name = values["MODELNAME"]
            if values.get("DESCRIPTION"):
                info.description = values["DESCRIPTION"]

        def controls(record: Record) -> None:
            keyword = record.keyword
            if keyword == "UNITS":
                force, length, temperature = record.tokens[1:4]
                units.force = FORCE_UNITS.get(force.upper(), force.lower())
                units.length = LENGTH_UNITS.get(length.upper(), length.lower())
                units.temperature = TEMPERATURE_UNITS.get(temperature.upper(), temperature.lower())
            elif keyword == "TITLE1" and not info.company:
                info.company = record.tokens[1]
            elif keyword == "TITLE2" and not info.project_name:
                info.project_name = record.tokens[1]
            elif keyword == "PROGRAM":
                values = keyword_values(record.tokens, 2)
                info.version = values.get("VERSION") or info.version

        self._each_record(sc.PROJECT_INFORMATION, project)
        self._each_record(sc.CONTROLS, controls)
        if not info.project_name:
            info.project_name = default_name("project_name")

    # =========================================================================
    # Layout
    # =========================================================================

    def _import_layout(self) -> None:
        floor_type = FloorType(id=self._new_id("floor_types"), name=default_name("floor_type"))
        self.model.layout.floor_types.append(floor_type)

        story_records: List[Tuple[str, Dict[str, str]]] = []

        def story(record: Record) -> None:
            if record.keyword != "STORY":
                return
            name = record.tokens[1]
            values = keyword_values(record.tokens, 2)
            if "HEIGHT" in values:
                _number(values["HEIGHT"], "HEIGHT")
            if "ELEV" in values:
                _number(values["ELEV"], "ELEV")
            if "HEIGHT" not in values and "ELEV" not in values:
                raise ValueError(f"story {name} has neither HEIGHT nor ELEV")
            story_records.append((name, values))

        self._each_record(sc.STORIES, story)
        self._build_levels(story_records, floor_type.id)

        grid_records: List[Tuple[str, str, float, str]] = []

        def grid(record: Record) -> None:
            if record.keyword != "GRID":
                return
            values = keyword_values(record.tokens, 2)
            direction = values.get("DIR", "X").upper()
            if direction not in ("X", "Y"):
                raise ValueError(f"grid direction {direction!r}")
            grid_records.append(
                (values["LABEL"], direction, _number(values["COORD"], "COORD"), values.get("BUBBLELOC", "End"))
            )

        self._each_record(sc.GRIDS, grid)
        self._build_grids(grid_records)

    def _build_levels(self, story_records: List[Tuple[str, Dict[str, str]]], floor_type_id: str) -> None:
        # records are listed top-down; accumulate heights from the bottom
        elevation = 0.0
        levels: List[Level] = []
        for name, values in reversed(story_records):
            if "ELEV" in values:
                elevation = float(values["ELEV"])
            else:
                elevation += float(values["HEIGHT"])
            level_name = "0" if name == BASE_STORY else level_name_from_story(name)
            levels.append(
                Level(id=self._new_id("levels"), name=level_name, floor_type_id=floor_type_id, elevation=elevation)
            )
            self._stories[name.lower()] = levels[-1]
            self._stories.setdefault(level_name.lower(), levels[-1])
            self._stories.setdefault(f"story{level_name}".lower(), levels[-1])

        # keep the model's level list in ascending elevation
        self.model.layout.levels.extend(levels)
        if levels:
            self._stories.setdefault(BASE_STORY.lower(), levels[0])

    def _build_grids(self, records: List[Tuple[str, str, float, str]]) -> None:
        xs = [coord for _, direction, coord, _ in records if direction == "X"]
        ys = [coord for _, direction, coord, _ in records if direction == "Y"]

        def extent(values: List[float]) -> Tuple[float, float]:
            if not values or min(values) == max(values):
                low = values[0] if values else 0.0
                return low, low + 1.0
            return min(values), max(values)

        y_low, y_high = extent(ys)
        x_low, x_high = extent(xs)
        for label, direction, coord, bubble in records:
            bubble = bubble.lower()
            start_bubble = bubble in ("start", "both")
            end_bubble = bubble in ("end", "both")
            if direction == "X":
                start = GridPoint(x=coord, y=y_low, is_bubble=start_bubble)
                end = GridPoint(x=coord, y=y_high, is_bubble=end_bubble)
            else:
                start = GridPoint(x=x_low, y=coord, is_bubble=start_bubble)
                end = GridPoint(x=x_high, y=coord, is_bubble=end_bubble)
            self.model.layout.grids.append(
                Grid(id=self._new_id("grids"), name=label, start_point=start, end_point=end)
            )

    def _level(self, story: str, owner: Optional[str] = None) -> Optional[Level]:
        level = self._stories.get(story.lower())
        if level is None:
            self._unresolved("levels", story, owner)
        return level

    def _level_below(self, level: Optional[Level]) -> Optional[Level]:
        if level is None:
            return None
        below = [lv for lv in self.model.layout.levels if lv.elevation < level.elevation]
        return max(below, key=lambda lv: lv.elevation) if below else None

    # =========================================================================
    # Properties
    # =========================================================================

    def _import_properties(self) -> None:
        props = self.model.properties

        def diaphragm(record: Record) -> None:
            if record.keyword != "DIAPHRAGM":
                return
            values = keyword_values(record.tokens, 2)
            props.diaphragms.append(
                Diaphragm(
                    id=self._new_id("diaphragms"),
                    name=record.tokens[1],
                    type=DiaphragmType.parse(values.get("TYPE")),
                )
            )

        self._each_record(sc.DIAPHRAGM_NAMES, diaphragm)

        material_values: Dict[str, Dict[str, str]] = {}

        def material(record: Record) -> None:
            if record.keyword != "MATERIAL":
                return
            name = record.tokens[1]
            values = keyword_values(record.tokens, 2)
            for key, value in values.items():
                field = MATERIAL_FIELDS.get(key)
                if field and field != "grade":
                    _number(value, key)
            material_values.setdefault(name, {}).update(values)

        self._each_record(sc.MATERIAL_PROPERTIES, material)
        for name, values in material_values.items():
            props.materials.append(self._build_material(name, values))
        materials = _by_name(props.materials)

        def material_id(name: Optional[str], owner: str) -> Optional[str]:
            if not name:
                return None
            found = materials.get(name.lower())
            if found is None:
                self._unresolved("materials", name, owner)
                return None
            return found.id

        frames: Dict[str, FrameProperties] = {}

        def frame_section(record: Record) -> None:
            if record.keyword != "FRAMESECTION":
                return
            name = record.tokens[1]
            values = keyword_values(record.tokens, 2)
            existing = frames.get(name.lower())
            if existing is not None:
                existing.additional_attributes.update(values)
                return
            mat_name = values.pop("MATERIAL", None)
            mat_id = material_id(mat_name, name)
            frame_type = FrameMaterialType.STEEL
            if mat_id is not None and materials[mat_name.lower()].kind is MaterialKind.CONCRETE:
                frame_type = FrameMaterialType.CONCRETE
            frame = FrameProperties(
                id=self._new_id("frame_properties"),
                name=name,
                material_id=mat_id,
                type=frame_type,
                section_shape=values.pop("SHAPE", None),
                additional_attributes=values,
            )
            frames[name.lower()] = frame
            props.frame_properties.append(frame)

        self._each_record(sc.FRAME_SECTIONS, frame_section)

        def slab(record: Record) -> None:
            if record.keyword != "SHELLPROP":
                return
            values = keyword_values(record.tokens, 2)
            prop_type = values.pop("PROPTYPE", "Slab").upper()
            if prop_type == "DECK":
                floor_type = DECK_TYPES.get(values.pop("DECKTYPE", "FILLED").upper(), StructuralFloorType.FILLED_DECK)
                thickness = _number(values.pop("DECKSLABDEPTH", "0"), "DECKSLABDEPTH")
                mat_name = values.pop("CONCMATERIAL", None)
            elif prop_type == "SLAB":
                floor_type = StructuralFloorType.SLAB
                thickness = _number(values.pop("SLABTHICKNESS", "0"), "SLABTHICKNESS")
                mat_name = values.pop("MATERIAL", None)
            else:
                raise ValueError(f"unexpected PROPTYPE {prop_type!r} for a floor property")
            props.floor_properties.append(
                FloorProperties(
                    id=self._new_id("floor_properties"),
                    name=record.tokens[1],
                    type=floor_type,
                    thickness=thickness,
                    material_id=material_id(mat_name, record.tokens[1]),
                    additional_attributes=values,
                )
            )

        self._each_record(sc.SLAB_PROPERTIES, slab)
        if "DECK PROPERTIES" in self.sections:
            self._each_record("DECK PROPERTIES", slab)

        def wall(record: Record) -> None:
            if record.keyword != "SHELLPROP":
                return
            values = keyword_values(record.tokens, 2)
            values.pop("PROPTYPE", None)
            props.wall_properties.append(
                WallProperties(
                    id=self._new_id("wall_properties"),
                    name=record.tokens[1],
                    thickness=_number(values.pop("WALLTHICKNESS", "0"), "WALLTHICKNESS"),
                    material_id=material_id(values.pop("MATERIAL", None), record.tokens[1]),
                    additional_attributes=values,
                )
            )

        self._each_record(sc.WALL_PROPERTIES, wall)

    def _build_material(self, name: str, values: Dict[str, str]) -> Material:
        kind = MaterialKind.parse(values.get("TYPE"))
        variant = default_properties(kind)
        overrides: Dict[str, Any] = {}
        extras: Dict[str, Any] = {}
        for key, value in values.items():
            field = MATERIAL_FIELDS.get(key)
            if field and field in type(variant).model_fields:
                overrides[field] = value if field == "grade" else float(value)
            elif key != "TYPE":
                extras[key] = value
        return Material(
            id=self._new_id("materials"),
            name=name,
            properties=default_properties(kind, **overrides),
            additional_attributes=extras,
        )

    # =========================================================================
    # Loads
    # =========================================================================

    def _import_loads(self) -> None:
        loads = self.model.loads

        def pattern(record: Record) -> None:
            if record.keyword != "LOADPATTERN":
                return
            values = keyword_values(record.tokens, 2)
            loads.load_definitions.append(
                LoadDefinition(
                    id=self._new_id("load_definitions"),
                    name=record.tokens[1],
                    type=LoadType.parse(values.get("TYPE")),
                    self_weight=_number(values.get("SELFWEIGHT", "0"), "SELFWEIGHT"),
                )
            )

        self._each_record(sc.LOAD_PATTERNS, pattern)
        patterns = _by_name(loads.load_definitions)
        floor_type_id = self.model.layout.floor_types[0].id if self.model.layout.floor_types else None
        load_sets: Dict[str, SurfaceLoad] = {}

        def load_set(record: Record) -> None:
            if record.keyword != "SHELLUNIFORMLOADSET":
                return
            name = record.tokens[1]
            values = keyword_values(record.tokens, 2)
            value = _number(values["VALUE"], "VALUE")
            surface = load_sets.get(name.lower())
            if surface is None:
                surface = SurfaceLoad(id=self._new_id("surface_loads"), name=name, floor_type_id=floor_type_id)
                load_sets[name.lower()] = surface
                loads.surface_loads.append(surface)
            definition = patterns.get(values["LOADPAT"].lower())
            if definition is None:
                self._unresolved("load_definitions", values["LOADPAT"], surface.id)
                return
            if definition.type is LoadType.LIVE:
                slot = "live"
            else:
                slot = "dead"
            if getattr(surface, f"{slot}_load_id"):
                raise MalformedRecordError(
                    sc.SHELL_UNIFORM_LOAD_SETS, record.text,
                    f"load set {name} already has a {slot} load", record.line_number,
                )
            setattr(surface, f"{slot}_load_id", definition.id)
            setattr(surface, f"{slot}_load_value", value)

        self._each_record(sc.SHELL_UNIFORM_LOAD_SETS, load_set)

        combos: Dict[str, LoadCombination] = {}

        def combination(record: Record) -> None:
            if record.keyword != "COMBO":
                return
            name = record.tokens[1]
            combo = combos.get(name.lower())
            if combo is None:
                combo = LoadCombination(id=self._new_id("load_combinations"), name=name)
                combos[name.lower()] = combo
                loads.load_combinations.append(combo)
            values = keyword_values(record.tokens, 2)
            if "LOADCASE" not in values:
                return
            definition = patterns.get(values["LOADCASE"].lower())
            if definition is None:
                self._unresolved("load_definitions", values["LOADCASE"], combo.id)
                return
            factor = _number(values.get("SF", "1"), "SF")
            combo.load_definition_ids = combo.load_definition_ids + [definition.id]
            combo.scale_factors = combo.scale_factors + [factor]

        self._each_record(sc.LOAD_COMBINATIONS, combination)

    # =========================================================================
    # Elements
    # =========================================================================

    def _import_elements(self) -> None:
        if sc.POINT_COORDINATES not in self.sections:
            for section in (sc.LINE_CONNECTIVITIES, sc.AREA_CONNECTIVITIES):
                if self._has_records(section):
                    raise MissingRequiredSection(
                        ImportPhase.ELEMENTS.value,
                        sc.POINT_COORDINATES,
                        f"{section} references points but no point section was supplied",
                    )

        self._each_record(sc.POINT_COORDINATES, self._point)
        self.context.check_cancelled("element connectivities")
        self._each_record(sc.LINE_CONNECTIVITIES, self._line)
        self._each_record(sc.AREA_CONNECTIVITIES, self._area)
        self.context.check_cancelled("element assignments")
        self._each_record(sc.LINE_ASSIGNS, self._line_assign)
        self._each_record(sc.AREA_ASSIGNS, self._area_assign)
        if sc.SHELL_OBJECT_LOADS in self.sections:
            self._each_record(sc.SHELL_OBJECT_LOADS, self._area_load)

    def _point(self, record: Record) -> None:
        if record.keyword != "POINT":
            return
        point_id = record.tokens[1]
        x = _number(record.tokens[2], "x")
        y = _number(record.tokens[3], "y")
        z = _number(record.tokens[4], "z") if len(record.tokens) > 4 else None
        self._points[point_id] = (x, y, z)
        self._canonical_points[point_id] = self.context.registry.canonical_id((x, y), ToleranceTier.FINE)

    def _require_point(self, point_id: str, record: Record) -> Point2D:
        if point_id not in self._points:
            raise MalformedRecordError(
                self._section or "", record.text, f"unknown point {point_id}", record.line_number
            )
        x, y, _ = self._points[point_id]
        return Point2D(x=x, y=y)

    def _line(self, record: Record) -> None:
        if record.keyword != "LINE":
            return
        name, kind, start, end = record.tokens[1:5]
        kind = kind.upper()
        if kind not in ("BEAM", "COLUMN", "BRACE"):
            raise ValueError(f"unsupported line type {kind}")
        self._require_point(start, record)
        self._require_point(end, record)
        if kind != "COLUMN" and self._canonical_points[start] == self._canonical_points[end]:
            raise ValueError(f"{kind.lower()} {name} has zero length")
        self._lines[name] = (kind, start, end)

    def _area(self, record: Record) -> None:
        if record.keyword != "AREA":
            return
        name, kind = record.tokens[1], record.tokens[2].upper()
        if kind not in ("FLOOR", "PANEL", "OPENING"):
            raise ValueError(f"unsupported area type {kind}")
        count = int(record.tokens[3])
        point_ids = record.tokens[4:4 + count]
        if len(point_ids) != count:
            raise ValueError(f"expected {count} points, got {len(point_ids)}")
        for point_id in point_ids:
            self._require_point(point_id, record)
        # panels list each plan point twice (bottom and top); keep first occurrences
        unique = list(dict.fromkeys(point_ids))
        self._areas[name] = (kind, unique)

    def _frame_properties_id(self, section: Optional[str], owner: str) -> Optional[str]:
        if not section:
            return None
        for frame in self.model.properties.frame_properties:
            if frame.name.lower() == section.lower():
                return frame.id
        self._unresolved("frame_properties", section, owner)
        return None

    def _named_id(self, collection: str, name: Optional[str], owner: str) -> Optional[str]:
        if not name:
            return None
        for entity in self.model.collection(collection):
            if entity.name and entity.name.lower() == name.lower():
                return entity.id
        self._unresolved(collection, name, owner)
        return None

    def _line_assign(self, record: Record) -> None:
        if record.keyword != "LINEASSIGN":
            return
        name, story = record.tokens[1], record.tokens[2]
        values = keyword_values(record.tokens, 3)
        if name not in self._lines:
            raise MalformedRecordError(
                sc.LINE_ASSIGNS, record.text, f"unknown line {name}", record.line_number
            )
        kind, start_id, end_id = self._lines[name]
        start = self._require_point(start_id, record)
        end = self._require_point(end_id, record)
        level = self._level(story, name)
        level_id = level.id if level else None
        section = self._frame_properties_id(values.get("SECTION"), name)
        is_lateral = values.get("ISLATERAL", "No").lower() in ("yes", "true")
        elements = self.model.elements

        if kind == "BEAM":
            elements.beams.append(
                Beam(
                    id=self._new_id("beams"),
                    start_point=start,
                    end_point=end,
                    level_id=level_id,
                    frame_properties_id=section,
                    is_lateral=is_lateral,
                )
            )
        elif kind == "COLUMN":
            below = self._level_below(level)
            elements.columns.append(
                Column(
                    id=self._new_id("columns"),
                    start_point=start,
                    end_point=end if end != start else None,
                    base_level_id=below.id if below else None,
                    top_level_id=level_id,
                    frame_properties_id=section,
                    is_lateral=is_lateral,
                )
            )
        else:
            below = self._level_below(level)
            elements.braces.append(
                Brace(
                    id=self._new_id("braces"),
                    start_point=start,
                    end_point=end,
                    base_level_id=below.id if below else None,
                    top_level_id=level_id,
                    frame_properties_id=section,
                )
            )

    def _area_assign(self, record: Record) -> None:
        if record.keyword != "AREAASSIGN":
            return
        name, story = record.tokens[1], record.tokens[2]
        values = keyword_values(record.tokens, 3)
        if name not in self._areas:
            raise MalformedRecordError(
                sc.AREA_ASSIGNS, record.text, f"unknown area {name}", record.line_number
            )
        kind, point_ids = self._areas[name]
        points = [self._require_point(pid, record) for pid in point_ids]
        level = self._level(story, name)
        level_id = level.id if level else None
        elements = self.model.elements

        if kind == "FLOOR":
            floor = Floor(
                id=self._new_id("floors"),
                level_id=level_id,
                points=points,
                floor_properties_id=self._named_id("floor_properties", values.get("SECTION"), name),
                diaphragm_id=self._named_id("diaphragms", values.get("DIAPHRAGM"), name),
            )
            elements.floors.append(floor)
            self._floors_by_assignment[(name, story.lower())] = floor
        elif kind == "PANEL":
            below = self._level_below(level)
            elements.walls.append(
                Wall(
                    id=self._new_id("walls"),
                    points=points,
                    base_level_id=below.id if below else None,
                    top_level_id=level_id,
                    properties_id=self._named_id("wall_properties", values.get("SECTION"), name),
                )
            )
        else:
            elements.openings.append(Opening(id=self._new_id("openings"), level_id=level_id, points=points))

    def _area_load(self, record: Record) -> None:
        if record.keyword != "AREALOAD":
            return
        name, story = record.tokens[1], record.tokens[2]
        values = keyword_values(record.tokens, 3)
        floor = self._floors_by_assignment.get((name, story.lower()))
        if floor is None:
            raise MalformedRecordError(
                sc.SHELL_OBJECT_LOADS, record.text, f"no floor assigned for {name} on {story}", record.line_number
            )
        if values.get("TYPE", "").upper() != "UNIFLOADSET":
            raise ValueError(f"unsupported area load type {values.get('TYPE')!r}")
        # the load-set name follows the TYPE value as a bare token
        set_name = record.tokens[5] if len(record.tokens) > 5 else ""
        floor.surface_load_id = self._named_id("surface_loads", set_name, floor.id)


def import_from_sections(
    sections: Mapping[str, str],
    context: Optional[OperationContext] = None,
    merge_duplicates_after: bool = True,
) -> CanonicalModel:
    """Build a CanonicalModel from ``{section name: section text}``.

    Args:
        sections: Section bodies keyed by section name (header text after ``$``)
        context: Fresh operation context; one is created when omitted
        merge_duplicates_after: Run the duplicate merge pass once the model is
            Ready (with its own context; its anomalies are copied into this
            import's report)

    Returns:
        The populated model

    Raises:
        MissingRequiredSection: Connectivities present but no point section
        FatalImportError: Any phase could not complete
        OperationCancelled: The context was cancelled
    """
    context = fresh_context(context, "import")
    model = SectionImporter(sections, context).run()
    if merge_duplicates_after:
        merge_context = OperationContext()
        merge_duplicates(model, merge_context)
        context.report.warnings.extend(merge_context.report.warnings)
    return model
