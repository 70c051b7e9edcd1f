"""
Core Layer - Canonicalization, Merge, Resolution and Decomposition

Modules:
- point_registry: Coordinate quantization into canonical point ids
- references: Reference field table, model index and default-on-miss resolver
- dedup: Duplicate element/property merge pass with reference repair
- decomposer: Connectivity and assignment records for line/area formats
- stories: Story naming and heights
- context: Per-operation registry, ids, report and cancellation
- errors: Warning and error taxonomy
"""

from .errors import (
    ExchangeWarning,
    MissingSectionWarning,
    UnresolvedReferenceWarning,
    SkippedElementWarning,
    ExchangeError,
    MalformedRecordError,
    FatalImportError,
    MissingRequiredSection,
    PhaseTransitionError,
    ContextReuseError,
    OperationCancelled,
)
from .ids import IdGenerator, ID_PREFIXES
from .point_registry import (
    CoordinateRegistry,
    ToleranceTier,
    TolerancePolicy,
    RegisteredPoint,
)
from .context import OperationContext, OperationReport, fresh_context
from .references import (
    ReferenceField,
    REFERENCE_FIELDS,
    REFERENCE_DEFAULTS,
    ModelIndex,
    ReferenceResolver,
    iter_references,
    references_to,
    entity_name,
)
from .dedup import DuplicateMergeResult, merge_duplicates, remove_duplicates
from .stories import Story, StoryTable, build_stories, story_name
from .decomposer import (
    ConnectivityKind,
    ConnectivityRecord,
    AssignmentRecord,
    ConnectivityExport,
    PlacementContext,
    export_connectivities,
    export_assignments,
)

__all__ = [
    # Errors
    "ExchangeWarning",
    "MissingSectionWarning",
    "UnresolvedReferenceWarning",
    "SkippedElementWarning",
    "ExchangeError",
    "MalformedRecordError",
    "FatalImportError",
    "MissingRequiredSection",
    "PhaseTransitionError",
    "ContextReuseError",
    "OperationCancelled",

    # Ids and points
    "IdGenerator",
    "ID_PREFIXES",
    "CoordinateRegistry",
    "ToleranceTier",
    "TolerancePolicy",
    "RegisteredPoint",

    # Context
    "OperationContext",
    "OperationReport",
    "fresh_context",

    # References
    "ReferenceField",
    "REFERENCE_FIELDS",
    "REFERENCE_DEFAULTS",
    "ModelIndex",
    "ReferenceResolver",
    "iter_references",
    "references_to",
    "entity_name",

    # Merge
    "DuplicateMergeResult",
    "merge_duplicates",
    "remove_duplicates",

    # Stories and decomposition
    "Story",
    "StoryTable",
    "build_stories",
    "story_name",
    "ConnectivityKind",
    "ConnectivityRecord",
    "AssignmentRecord",
    "ConnectivityExport",
    "PlacementContext",
    "export_connectivities",
    "export_assignments",
]
