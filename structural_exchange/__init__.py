"""Structural model exchange core.

Maintains a canonical in-memory model graph that structural analysis and
drafting tools read into and write out of, with coordinate canonicalization,
duplicate merging with reference repair, and connectivity/assignment
decomposition for line/area based text formats.

Entry points:
    import_from_sections(sections) -> CanonicalModel
    remove_duplicates(model) -> CanonicalModel
    export_to_sections(model) -> Dict[str, str]
    save_model(model, path) / load_model(path)
"""

__version__ = "0.1.0"

from .models import CanonicalModel
from .core.context import OperationContext
from .core.dedup import remove_duplicates
from .converters.importer import import_from_sections
from .converters.exporter import export_to_sections
from .persistence.model_serializer import save_model, load_model

__all__ = [
    "CanonicalModel",
    "OperationContext",
    "remove_duplicates",
    "import_from_sections",
    "export_to_sections",
    "save_model",
    "load_model",
]
