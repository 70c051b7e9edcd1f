"""
Connectivity / Assignment Decomposer

Line and area based formats express each physical element as two record kinds:

- a connectivity record: pure topology, an element-kind tag plus canonical
  point ids, shared by every element with the same plan geometry
- assignment records: per-story attributes (section, diaphragm, load set)
  bound to a connectivity record

Connectivity identity comes from the operation's CoordinateRegistry:

    beams    fine tier, sorted endpoint pair   (direction is irrelevant)
    columns  coarse tier, plan position only   (stacked columns share a line)
    braces   fine tier, ordered endpoint pair  (bottom -> top)
    walls    fine tier, sorted point list
    floors   fine tier, sorted point list

Assignment names are always resolved through the ReferenceResolver, so a
missing property produces a literal default name rather than a failure.
Neither pass mutates the model.

Usage:
    context = OperationContext().claim("export")
    connectivity = export_connectivities(model, context)
    placement = PlacementContext.from_model(model, context.report)
    assignments = export_assignments(connectivity.element_map, model, placement)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..config.settings import default_name
from ..models.canonical_model import CanonicalModel
from ..models.elements import StructuralElement
from .context import OperationContext, OperationReport
from .errors import SkippedElementWarning
from .point_registry import ToleranceTier
from .references import ModelIndex, ReferenceResolver
from .stories import StoryTable

logger = logging.getLogger(__name__)


class ConnectivityKind(str, Enum):
    BEAM = "BEAM"
    COLUMN = "COLUMN"
    BRACE = "BRACE"
    WALL = "WALL"
    FLOOR = "FLOOR"

    @property
    def is_area(self) -> bool:
        return self in (ConnectivityKind.WALL, ConnectivityKind.FLOOR)


CONNECTIVITY_PREFIXES: Dict[ConnectivityKind, str] = {
    ConnectivityKind.BEAM: "B",
    ConnectivityKind.COLUMN: "C",
    ConnectivityKind.BRACE: "BR",
    ConnectivityKind.WALL: "W",
    ConnectivityKind.FLOOR: "F",
}

# Element collection -> connectivity kind, in export order
EXPORTED_COLLECTIONS: Tuple[Tuple[str, ConnectivityKind], ...] = (
    ("columns", ConnectivityKind.COLUMN),
    ("beams", ConnectivityKind.BEAM),
    ("braces", ConnectivityKind.BRACE),
    ("walls", ConnectivityKind.WALL),
    ("floors", ConnectivityKind.FLOOR),
)


@dataclass(frozen=True)
class ConnectivityRecord:
    """Pure topology of one or more elements.

    Attributes:
        connectivity_id: Exported id ("B1", "C3", "F2", ...)
        kind: Element kind tag
        point_ids: Canonical point ids; columns repeat the same id twice
    """

    connectivity_id: str
    kind: ConnectivityKind
    point_ids: Tuple[str, ...]


@dataclass(frozen=True)
class AssignmentRecord:
    """Per-story attributes of a connectivity record.

    Attributes:
        connectivity_id: Connectivity the assignment is bound to
        kind: Element kind tag of that connectivity
        story: Story name ("Base" or "Story{name}")
        section: Resolved section / shell property name
        element_id: Source element the assignment was built from
        diaphragm: Resolved diaphragm name (floors only)
        load_set: Resolved shell uniform load-set name (floors with a surface load)
        is_lateral: Lateral-system flag (line elements)
    """

    connectivity_id: str
    kind: ConnectivityKind
    story: str
    section: str
    element_id: str
    diaphragm: Optional[str] = None
    load_set: Optional[str] = None
    is_lateral: bool = False


@dataclass
class ConnectivityExport:
    """Result of ``export_connectivities``.

    Attributes:
        records: connectivity id -> record, in issue order
        element_map: source element id -> connectivity id
    """

    records: Dict[str, ConnectivityRecord] = field(default_factory=dict)
    element_map: Dict[str, str] = field(default_factory=dict)

    def of_kind(self, *kinds: ConnectivityKind) -> List[ConnectivityRecord]:
        return [r for r in self.records.values() if r.kind in kinds]


# =============================================================================
# Connectivities
# =============================================================================


class _ConnectivityBuilder:
    def __init__(self, context: OperationContext):
        self.context = context
        self.registry = context.registry
        self.result = ConnectivityExport()
        self._by_key: Dict[Tuple, str] = {}
        self._counters: Dict[ConnectivityKind, int] = {kind: 0 for kind in ConnectivityKind}

    def add(self, element: StructuralElement, kind: ConnectivityKind, point_ids: Tuple[str, ...], key: Tuple) -> str:
        full_key = (kind, key)
        connectivity_id = self._by_key.get(full_key)
        if connectivity_id is None:
            self._counters[kind] += 1
            connectivity_id = f"{CONNECTIVITY_PREFIXES[kind]}{self._counters[kind]}"
            self._by_key[full_key] = connectivity_id
            self.result.records[connectivity_id] = ConnectivityRecord(connectivity_id, kind, point_ids)
        self.result.element_map[element.id] = connectivity_id
        return connectivity_id

    def fine_ids(self, points: Iterable) -> Tuple[str, ...]:
        return tuple(self.registry.canonical_id(p, ToleranceTier.FINE) for p in points)


def _column_topology(builder: _ConnectivityBuilder, points: List) -> Tuple[Tuple[str, ...], Tuple]:
    point_id = builder.registry.canonical_id(points[0], ToleranceTier.COARSE)
    return (point_id, point_id), (point_id,)


def _sorted_topology(builder: _ConnectivityBuilder, points: List) -> Tuple[Tuple[str, ...], Tuple]:
    ids = builder.fine_ids(points)
    return ids, tuple(sorted(ids))


def _ordered_topology(builder: _ConnectivityBuilder, points: List) -> Tuple[Tuple[str, ...], Tuple]:
    ids = builder.fine_ids(points)
    return ids, ids


_TOPOLOGY: Dict[ConnectivityKind, Callable[[_ConnectivityBuilder, List], Tuple[Tuple[str, ...], Tuple]]] = {
    ConnectivityKind.COLUMN: _column_topology,
    ConnectivityKind.BEAM: _sorted_topology,
    ConnectivityKind.BRACE: _ordered_topology,
    ConnectivityKind.WALL: _sorted_topology,
    ConnectivityKind.FLOOR: _sorted_topology,
}


def export_connectivities(model: CanonicalModel, context: OperationContext) -> ConnectivityExport:
    """Build deduplicated connectivity records for every exported element.

    Args:
        model: Model to export (not modified)
        context: Claimed operation context; its registry issues point ids

    Returns:
        ConnectivityExport with records and the element -> connectivity map

    Raises:
        OperationCancelled: If the context is cancelled between collections
    """
    builder = _ConnectivityBuilder(context)
    for collection, kind in EXPORTED_COLLECTIONS:
        context.check_cancelled(f"connectivities {collection}")
        topology = _TOPOLOGY[kind]
        for element in model.collection(collection):
            points = element.geometry()
            if points is None:
                context.report.warn(SkippedElementWarning(collection, element.id, "connectivity export"))
                continue
            point_ids, key = topology(builder, points)
            builder.add(element, kind, point_ids, key)

    logger.info(
        f"Exported {len(builder.result.records)} connectivities "
        f"for {len(builder.result.element_map)} elements, {len(context.registry)} points"
    )
    return builder.result


# =============================================================================
# Assignments
# =============================================================================


class PlacementContext:
    """Stories plus the resolver used to name every assignment."""

    def __init__(self, stories: StoryTable, resolver: ReferenceResolver):
        self.stories = stories
        self.resolver = resolver

    @classmethod
    def from_model(cls, model: CanonicalModel, report: Optional[OperationReport] = None) -> "PlacementContext":
        return cls(StoryTable(model.layout.levels), ReferenceResolver(ModelIndex(model), report))

    def story_at(self, level_id: Optional[str], owner_id: str) -> str:
        """Story name of one level; the literal default when the level is unknown."""
        level = self.resolver.resolve_in("levels", level_id, owner_id=owner_id)
        story = self.stories.for_level(level.id) if level is not None else None
        return story.name if story is not None else default_name("story")

    def stories_between(self, base_level_id: Optional[str], top_level_id: Optional[str], owner_id: str) -> List[str]:
        """Story names spanned from base (exclusive) to top (inclusive), bottom-up."""
        self.resolver.resolve_in("levels", base_level_id, owner_id=owner_id)
        top = self.resolver.resolve_in("levels", top_level_id, owner_id=owner_id)
        if top is None:
            return [default_name("story")]
        spanned = self.stories.spanned(base_level_id, top.id)
        return [s.name for s in spanned] or [default_name("story")]


def _assignments_for(
    collection: str,
    element: StructuralElement,
    connectivity_id: str,
    kind: ConnectivityKind,
    placement: PlacementContext,
) -> List[AssignmentRecord]:
    resolver = placement.resolver
    owner = element.id

    if collection == "beams":
        section = resolver.resolve_name("frame_properties", element.frame_properties_id, owner)
        stories = [placement.story_at(element.level_id, owner)]
        return [
            AssignmentRecord(connectivity_id, kind, story, section, owner, is_lateral=element.is_lateral)
            for story in stories
        ]

    if collection == "columns":
        section = resolver.resolve_name("frame_properties", element.frame_properties_id, owner)
        stories = placement.stories_between(element.base_level_id, element.top_level_id, owner)
        return [
            AssignmentRecord(connectivity_id, kind, story, section, owner, is_lateral=element.is_lateral)
            for story in stories
        ]

    if collection == "braces":
        section = resolver.resolve_name("frame_properties", element.frame_properties_id, owner)
        story = placement.story_at(element.top_level_id, owner)
        return [AssignmentRecord(connectivity_id, kind, story, section, owner)]

    if collection == "walls":
        section = resolver.resolve_name("wall_properties", element.properties_id, owner)
        stories = placement.stories_between(element.base_level_id, element.top_level_id, owner)
        return [AssignmentRecord(connectivity_id, kind, story, section, owner) for story in stories]

    if collection == "floors":
        section = resolver.resolve_name("floor_properties", element.floor_properties_id, owner)
        diaphragm = resolver.resolve_name("diaphragms", element.diaphragm_id, owner)
        load_set = None
        if element.surface_load_id:
            load_set = resolver.resolve_name("surface_loads", element.surface_load_id, owner)
        story = placement.story_at(element.level_id, owner)
        return [
            AssignmentRecord(
                connectivity_id, kind, story, section, owner,
                diaphragm=diaphragm, load_set=load_set,
            )
        ]

    raise KeyError(f"No assignment rule for collection '{collection}'")


def export_assignments(
    element_map: Dict[str, str],
    model: CanonicalModel,
    placement: PlacementContext,
) -> List[AssignmentRecord]:
    """Build one assignment per (connectivity, story) pair.

    When several elements share a connectivity on the same story, the first
    element in model order wins.

    Args:
        element_map: Source element id -> connectivity id
        model: Model being exported (not modified)
        placement: Stories and resolver for the model

    Returns:
        Assignment records in model order
    """
    records: List[AssignmentRecord] = []
    seen = set()
    for collection, kind in EXPORTED_COLLECTIONS:
        for element in model.collection(collection):
            connectivity_id = element_map.get(element.id)
            if connectivity_id is None:
                continue
            for record in _assignments_for(collection, element, connectivity_id, kind, placement):
                pair = (record.connectivity_id, record.story)
                if pair in seen:
                    continue
                seen.add(pair)
                records.append(record)
    logger.debug(f"Built {len(records)} assignments")
    return records
