"""Reference integrity of a canonical model.

Builds a directed graph of entity references (owner -> target) with networkx
and reports every reference whose target is absent. Used to check that the
duplicate merge pass left no dangling consumer reference, and by callers that
want to audit partial input models before exporting them.

Nodes are ``(collection, id)`` tuples. Dangling references point at a node
marked ``missing=True``.

Usage:
    from structural_exchange.validators.integrity import check_reference_integrity

    result = check_reference_integrity(model)
    if not result.is_valid:
        for ref in result.dangling:
            print(ref.owner, ref.owner_id, ref.attribute, ref.ref_id)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import networkx as nx

from ..core.references import ModelIndex, iter_references
from ..models.canonical_model import COLLECTIONS, CanonicalModel

logger = logging.getLogger(__name__)

Node = Tuple[str, str]
MISSING = "<missing>"


@dataclass(frozen=True)
class DanglingReference:
    owner: str
    owner_id: str
    attribute: str
    ref_id: str
    targets: Tuple[str, ...]


@dataclass
class IntegrityResult:
    """Outcome of an integrity check.

    Attributes:
        dangling: References whose target does not exist
        duplicate_ids: collection -> ids used by more than one entity
    """

    dangling: List[DanglingReference] = field(default_factory=list)
    duplicate_ids: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.dangling and not self.duplicate_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.is_valid,
            "dangling": [
                {
                    "owner": d.owner,
                    "owner_id": d.owner_id,
                    "attribute": d.attribute,
                    "ref_id": d.ref_id,
                }
                for d in self.dangling
            ],
            "duplicate_ids": self.duplicate_ids,
        }


def build_reference_graph(model: CanonicalModel) -> nx.DiGraph:
    """Directed graph of every reference in ``model``.

    Edges carry the referencing ``attribute``. A target that cannot be found in
    any of the field's target collections becomes a ``(MISSING, id)`` node with
    ``missing=True``.
    """
    graph = nx.DiGraph()
    for name in COLLECTIONS:
        for entity in model.collection(name):
            graph.add_node((name, entity.id), collection=name, missing=False)

    index = ModelIndex(model)
    for ref, entity, value in iter_references(model):
        source: Node = (ref.owner, entity.id)
        target_collection = next(
            (name for name in ref.targets if value in index.lookup(name)), None
        )
        if target_collection is None:
            target: Node = (MISSING, value)
            graph.add_node(target, collection=MISSING, missing=True, targets=ref.targets)
        else:
            target = (target_collection, value)
        graph.add_edge(source, target, attribute=ref.attribute)
    return graph


def check_reference_integrity(model: CanonicalModel) -> IntegrityResult:
    """Find dangling references and duplicate ids.

    Args:
        model: Model to audit (not modified)

    Returns:
        IntegrityResult; ``is_valid`` is True when every reference resolves
        and every id is unique within its collection
    """
    result = IntegrityResult()

    for name in COLLECTIONS:
        seen: Dict[str, int] = {}
        for entity in model.collection(name):
            seen[entity.id] = seen.get(entity.id, 0) + 1
        duplicates = sorted(i for i, count in seen.items() if count > 1)
        if duplicates:
            result.duplicate_ids[name] = duplicates

    graph = build_reference_graph(model)
    for source, target, data in graph.edges(data=True):
        if not graph.nodes[target].get("missing"):
            continue
        result.dangling.append(
            DanglingReference(
                owner=source[0],
                owner_id=source[1],
                attribute=data["attribute"],
                ref_id=target[1],
                targets=graph.nodes[target]["targets"],
            )
        )

    if not result.is_valid:
        logger.info(
            f"Integrity check: {len(result.dangling)} dangling references, "
            f"{len(result.duplicate_ids)} collections with duplicate ids"
        )
    return result


def unreferenced(model: CanonicalModel, collection: str) -> List[str]:
    """Ids in ``collection`` that nothing references (e.g. unused properties)."""
    graph = build_reference_graph(model)
    return [
        entity.id
        for entity in model.collection(collection)
        if graph.in_degree((collection, entity.id)) == 0
    ]
