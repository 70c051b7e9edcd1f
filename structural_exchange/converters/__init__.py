"""Format boundary: section codec, importer and exporter."""

from .section_codec import (
    SECTION_ORDER,
    Record,
    split_sections,
    join_sections,
    read_sections,
    write_sections,
    tokenize_record,
    iter_records,
)
from .importer import ImportPhase, PhaseTracker, SectionImporter, import_from_sections
from .exporter import SectionExporter, export_to_sections

__all__ = [
    "SECTION_ORDER",
    "Record",
    "split_sections",
    "join_sections",
    "read_sections",
    "write_sections",
    "tokenize_record",
    "iter_records",
    "ImportPhase",
    "PhaseTracker",
    "SectionImporter",
    "import_from_sections",
    "SectionExporter",
    "export_to_sections",
]
