"""Model validators."""

from .integrity import (
    DanglingReference,
    IntegrityResult,
    build_reference_graph,
    check_reference_integrity,
    unreferenced,
)

__all__ = [
    "DanglingReference",
    "IntegrityResult",
    "build_reference_graph",
    "check_reference_integrity",
    "unreferenced",
]
