"""
Duplicate Detection and Merge Pass

Removes elements that represent the same physical member and rewrites every
reference that pointed at a removed element so that no consumer dangles.

For each element collection:
1. Build a key from the fine-quantized geometry plus the binding context
   (level for beams/floors, base and top level for columns/walls/braces).
   Two-point and polygon geometry is sorted first, so direction and vertex
   order do not matter.
2. Keep the first element of each key in input order.
3. Drop the others and record old id -> kept id in a per-collection remap.
4. Rewrite every reference field that targets the collection.

Property entities (materials, frame/floor/wall properties, diaphragms) are
merged the same way by case-insensitive name.

Elements without usable geometry are left untouched and reported as
SkippedElementWarning. Running the pass twice is a no-op the second time.

Usage:
    from structural_exchange.core.dedup import remove_duplicates, merge_duplicates

    remove_duplicates(model)                 # in place, returns model
    result = merge_duplicates(model)         # in place, returns the remap summary
    result.remaps["beams"]                   # {"BM-2": "BM-1"}
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.canonical_model import ELEMENT_COLLECTIONS, CanonicalModel
from ..models.elements import StructuralElement
from ..models.geometry import Point2D, Point3D
from .context import OperationContext, fresh_context
from .errors import SkippedElementWarning
from .point_registry import TolerancePolicy, ToleranceTier
from .references import references_to

logger = logging.getLogger(__name__)

PROPERTY_COLLECTIONS: Tuple[str, ...] = (
    "materials",
    "frame_properties",
    "floor_properties",
    "wall_properties",
    "diaphragms",
)

# Attributes forming the binding context of each element collection
BINDING_CONTEXT: Dict[str, Tuple[str, ...]] = {
    "beams": ("level_id",),
    "columns": ("base_level_id", "top_level_id"),
    "braces": ("base_level_id", "top_level_id"),
    "walls": ("base_level_id", "top_level_id"),
    "floors": ("level_id",),
    "openings": ("level_id",),
    "joints": ("level_id",),
    "isolated_footings": ("level_id",),
    "continuous_footings": ("level_id",),
    "piles": ("level_id",),
    "piers": ("level_id",),
}


@dataclass
class DuplicateMergeResult:
    """Outcome of one merge pass.

    Attributes:
        remaps: collection -> {removed id: retained id}
        skipped: collection -> ids left untouched for lack of geometry
        rewritten_references: Number of reference values rewritten
    """

    remaps: Dict[str, Dict[str, str]] = field(default_factory=dict)
    skipped: Dict[str, List[str]] = field(default_factory=dict)
    rewritten_references: int = 0

    @property
    def removed_count(self) -> int:
        return sum(len(remap) for remap in self.remaps.values())

    @property
    def changed(self) -> bool:
        return self.removed_count > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "removed": {name: len(remap) for name, remap in sorted(self.remaps.items())},
            "skipped": {name: list(ids) for name, ids in sorted(self.skipped.items())},
            "rewritten_references": self.rewritten_references,
        }


# =============================================================================
# Keys
# =============================================================================


def _quantize_point(policy: TolerancePolicy, point: Any) -> Tuple[float, ...]:
    if isinstance(point, (Point2D, Point3D)):
        coords = point.as_tuple()
    else:
        coords = tuple(point)
    return tuple(policy.quantize(v) for v in coords)


def geometry_key(element: StructuralElement, policy: TolerancePolicy) -> Optional[Tuple]:
    """Order-independent quantized geometry of ``element``, or None when missing."""
    points = element.geometry()
    if points is None:
        return None
    return tuple(sorted(_quantize_point(policy, p) for p in points))


def element_key(
    collection: str, element: StructuralElement, policy: TolerancePolicy
) -> Optional[Tuple]:
    geometry = geometry_key(element, policy)
    if geometry is None:
        return None
    binding = tuple(getattr(element, attr, None) for attr in BINDING_CONTEXT[collection])
    return (geometry, binding)


def property_key(entity: Any) -> Optional[str]:
    name = (getattr(entity, "name", None) or "").strip().lower()
    return name or None


# =============================================================================
# Pass
# =============================================================================


def _collapse(
    model: CanonicalModel,
    collection: str,
    key_fn: Callable[[Any], Optional[Any]],
    on_unkeyed: Optional[Callable[[Any], None]] = None,
) -> Dict[str, str]:
    kept: List[Any] = []
    first_by_key: Dict[Any, str] = {}
    remap: Dict[str, str] = {}
    dropped = False

    for entity in model.collection(collection):
        key = key_fn(entity)
        if key is None:
            if on_unkeyed is not None:
                on_unkeyed(entity)
            kept.append(entity)
            continue
        retained = first_by_key.get(key)
        if retained is None:
            first_by_key[key] = entity.id
            kept.append(entity)
            continue
        dropped = True
        if retained != entity.id:
            remap[entity.id] = retained
        logger.debug(f"{collection}: {entity.id} duplicates {retained}")

    if dropped:
        model.replace_collection(collection, kept)
    return remap


def _rewrite_references(model: CanonicalModel, collection: str, remap: Dict[str, str]) -> int:
    rewritten = 0
    for ref in references_to(collection):
        for entity in model.collection(ref.owner):
            current = getattr(entity, ref.attribute, None)
            if not current:
                continue
            if ref.many:
                updated = [remap.get(value, value) for value in current]
                changes = sum(1 for old, new in zip(current, updated) if old != new)
                if changes:
                    setattr(entity, ref.attribute, updated)
                    rewritten += changes
            elif current in remap:
                setattr(entity, ref.attribute, remap[current])
                rewritten += 1
    return rewritten


def merge_duplicates(
    model: CanonicalModel, context: Optional[OperationContext] = None
) -> DuplicateMergeResult:
    """Run the merge pass in place and return what it did.

    Args:
        model: Model to de-duplicate (mutated in place)
        context: Fresh operation context; one is created when omitted

    Returns:
        DuplicateMergeResult with remap tables and skipped ids

    Raises:
        OperationCancelled: If the context is cancelled between collections
    """
    context = fresh_context(context, "remove_duplicates")
    policy = context.registry.policy(ToleranceTier.FINE)
    result = DuplicateMergeResult()

    for collection in ELEMENT_COLLECTIONS:
        context.check_cancelled(f"merge {collection}")

        def skip(element: StructuralElement, collection: str = collection) -> None:
            result.skipped.setdefault(collection, []).append(element.id)
            context.report.warn(SkippedElementWarning(collection, element.id, "duplicate merge"))

        remap = _collapse(
            model,
            collection,
            lambda element, collection=collection: element_key(collection, element, policy),
            on_unkeyed=skip,
        )
        if remap:
            result.remaps[collection] = remap

    for collection in PROPERTY_COLLECTIONS:
        context.check_cancelled(f"merge {collection}")
        remap = _collapse(model, collection, property_key)
        if remap:
            result.remaps[collection] = remap

    for collection, remap in result.remaps.items():
        result.rewritten_references += _rewrite_references(model, collection, remap)

    if result.changed:
        logger.info(
            f"Merged {result.removed_count} duplicates, "
            f"rewrote {result.rewritten_references} references"
        )
    else:
        logger.debug("No duplicates found")
    return result


def remove_duplicates(
    model: CanonicalModel, context: Optional[OperationContext] = None
) -> CanonicalModel:
    """Remove duplicate elements and properties in place; idempotent.

    Returns:
        The same ``model`` instance
    """
    merge_duplicates(model, context)
    return model
