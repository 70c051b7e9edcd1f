"""
Reference Resolver - Foreign-key Lookups with Default-on-miss

Cross-references in the canonical model are plain id strings. This module
declares every reference field once (``REFERENCE_FIELDS``) and provides:

- ``iter_references``: walk every populated reference in a model
- ``ModelIndex``: id -> entity maps for every collection
- ``ReferenceResolver``: look an id up and substitute a documented default
  when it is missing, recording an UnresolvedReferenceWarning instead of
  failing

Missing references are a property of legitimately partial input models, so
resolution never raises. Missing geometry is a different matter and is
handled by the passes that need geometry.

Usage:
    index = ModelIndex(model)
    resolver = ReferenceResolver(index, report=context.report)

    section = resolver.resolve_name("wall_properties", wall.properties_id, owner_id=wall.id)
    # -> "Default" when wall.properties_id does not exist
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..config.settings import default_name
from ..models.canonical_model import COLLECTIONS, CanonicalModel
from .context import OperationReport
from .errors import UnresolvedReferenceWarning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceField:
    """One reference attribute of one collection.

    Attributes:
        owner: Collection holding the referencing entities
        attribute: Attribute name on those entities
        targets: Collection(s) the id may point into
        many: True when the attribute is a list of ids
    """

    owner: str
    attribute: str
    targets: Tuple[str, ...]
    many: bool = False

    def values(self, entity: Any) -> List[str]:
        """Populated ids held by ``entity`` in this field."""
        raw = getattr(entity, self.attribute, None)
        if raw is None:
            return []
        if self.many:
            return [v for v in raw if v]
        return [raw] if raw else []


_LEVEL = ("levels",)

REFERENCE_FIELDS: Tuple[ReferenceField, ...] = (
    # Layout
    ReferenceField("levels", "floor_type_id", ("floor_types",)),

    # Properties
    ReferenceField("frame_properties", "material_id", ("materials",)),
    ReferenceField("floor_properties", "material_id", ("materials",)),
    ReferenceField("wall_properties", "material_id", ("materials",)),

    # Loads
    ReferenceField("surface_loads", "floor_type_id", ("floor_types",)),
    ReferenceField("surface_loads", "dead_load_id", ("load_definitions",)),
    ReferenceField("surface_loads", "live_load_id", ("load_definitions",)),
    ReferenceField("load_combinations", "load_definition_ids", ("load_definitions",), many=True),
    ReferenceField("line_loads", "element_id", ("beams", "braces", "columns")),
    ReferenceField("line_loads", "load_definition_id", ("load_definitions",)),

    # Elements
    ReferenceField("beams", "level_id", _LEVEL),
    ReferenceField("beams", "frame_properties_id", ("frame_properties",)),
    ReferenceField("columns", "base_level_id", _LEVEL),
    ReferenceField("columns", "top_level_id", _LEVEL),
    ReferenceField("columns", "frame_properties_id", ("frame_properties",)),
    ReferenceField("braces", "base_level_id", _LEVEL),
    ReferenceField("braces", "top_level_id", _LEVEL),
    ReferenceField("braces", "frame_properties_id", ("frame_properties",)),
    ReferenceField("braces", "material_id", ("materials",)),
    ReferenceField("walls", "base_level_id", _LEVEL),
    ReferenceField("walls", "top_level_id", _LEVEL),
    ReferenceField("walls", "properties_id", ("wall_properties",)),
    ReferenceField("floors", "level_id", _LEVEL),
    ReferenceField("floors", "floor_properties_id", ("floor_properties",)),
    ReferenceField("floors", "diaphragm_id", ("diaphragms",)),
    ReferenceField("floors", "surface_load_id", ("surface_loads",)),
    ReferenceField("openings", "level_id", _LEVEL),
    ReferenceField("joints", "level_id", _LEVEL),
    ReferenceField("isolated_footings", "level_id", _LEVEL),
    ReferenceField("continuous_footings", "level_id", _LEVEL),
    ReferenceField("piles", "level_id", _LEVEL),
    ReferenceField("piers", "level_id", _LEVEL),
)

# Collection -> key into settings.DEFAULT_NAMES used by resolve_name
REFERENCE_DEFAULTS: Dict[str, str] = {
    "frame_properties": "frame_section",
    "wall_properties": "wall_property",
    "floor_properties": "floor_property",
    "diaphragms": "diaphragm",
    "levels": "story",
    "materials": "material",
    "load_definitions": "load_pattern",
    "surface_loads": "load_set",
    "floor_types": "floor_type",
}


def entity_name(entity: Any) -> str:
    """Name an entity is exported under; unnamed entities are written under their id."""
    return getattr(entity, "name", None) or entity.id


def references_to(collection: str) -> List[ReferenceField]:
    """Reference fields that may point into ``collection``."""
    return [ref for ref in REFERENCE_FIELDS if collection in ref.targets]


def iter_references(model: CanonicalModel) -> Iterator[Tuple[ReferenceField, Any, str]]:
    """Yield ``(field, owner_entity, referenced_id)`` for every populated reference."""
    for ref in REFERENCE_FIELDS:
        for entity in model.collection(ref.owner):
            for value in ref.values(entity):
                yield ref, entity, value


class ModelIndex:
    """id -> entity lookups for every collection of a model.

    The index is a snapshot; rebuild it after the model is mutated.
    """

    def __init__(self, model: CanonicalModel):
        self.model = model
        self._maps: Dict[str, Dict[str, Any]] = {}
        for name in COLLECTIONS:
            lookup: Dict[str, Any] = {}
            for entity in model.collection(name):
                # first wins when a collection violates id uniqueness
                lookup.setdefault(entity.id, entity)
            self._maps[name] = lookup

    def lookup(self, collection: str) -> Dict[str, Any]:
        return self._maps[collection]

    def find(self, ref_id: Optional[str], targets: Tuple[str, ...]) -> Optional[Any]:
        if not ref_id:
            return None
        for name in targets:
            entity = self._maps[name].get(ref_id)
            if entity is not None:
                return entity
        return None

    def contains(self, ref_id: str, targets: Tuple[str, ...]) -> bool:
        return self.find(ref_id, targets) is not None


class ReferenceResolver:
    """Resolves foreign-key ids with a per-field default on miss."""

    def __init__(self, index: ModelIndex, report: Optional[OperationReport] = None):
        self.index = index
        self.report = report

    def resolve(
        self,
        lookup: Mapping[str, Any],
        ref_id: Optional[str],
        default: Any = None,
        field: str = "reference",
        owner_id: Optional[str] = None,
    ) -> Any:
        """Return ``lookup[ref_id]`` or ``default``.

        Args:
            lookup: id -> value mapping of the target container
            ref_id: Referenced id; None/empty means "not set"
            default: Value substituted on a miss
            field: Field name used in the warning
            owner_id: Id of the referencing entity, for diagnostics

        Returns:
            The referenced value, or ``default``. An id that is set but not
            found records an UnresolvedReferenceWarning; an unset id does not.
        """
        if not ref_id:
            return default
        value = lookup.get(ref_id)
        if value is not None:
            return value
        warning = UnresolvedReferenceWarning(field, ref_id, default, owner_id)
        if self.report is not None:
            self.report.warn(warning)
        else:
            logger.warning(str(warning))
        return default

    def resolve_in(
        self,
        collection: str,
        ref_id: Optional[str],
        default: Any = None,
        owner_id: Optional[str] = None,
    ) -> Any:
        """Resolve ``ref_id`` against a collection of the indexed model."""
        return self.resolve(
            self.index.lookup(collection), ref_id, default, field=collection, owner_id=owner_id
        )

    def resolve_name(
        self,
        collection: str,
        ref_id: Optional[str],
        owner_id: Optional[str] = None,
        default: Optional[str] = None,
    ) -> str:
        """Name of the referenced entity, or the literal default for ``collection``.

        An entity that exists but has no name resolves to its id, the same
        name its defining record is exported under.

        Example:
            >>> resolver.resolve_name("wall_properties", "WP-missing")
            'Default'
        """
        if default is None:
            default = default_name(REFERENCE_DEFAULTS[collection])
        entity = self.resolve_in(collection, ref_id, None, owner_id=owner_id)
        if entity is None:
            return default
        return entity_name(entity)
