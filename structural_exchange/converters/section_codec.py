"""Section text codec for line-oriented, keyword-prefixed model files.

A file is a sequence of sections introduced by ``$ NAME`` header lines:

    $ STORIES - IN SEQUENCE FROM TOP
      STORY "Story2"  HEIGHT 120
      STORY "Base"  ELEV 0

    $ POINT COORDINATES
      POINT "1"  0 0

Records are whitespace separated tokens; names are double quoted. This module
only splits/joins sections and tokenizes records. Interpreting the records is
the job of the importer and exporter.
"""

import logging
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

SECTION_HEADER = re.compile(r"^\$ ([A-Z][A-Z0-9 _/\-]+?)\s*$")

# Section names used by the importer/exporter
PROJECT_INFORMATION = "PROJECT INFORMATION"
CONTROLS = "CONTROLS"
STORIES = "STORIES - IN SEQUENCE FROM TOP"
GRIDS = "GRIDS"
DIAPHRAGM_NAMES = "DIAPHRAGM NAMES"
MATERIAL_PROPERTIES = "MATERIAL PROPERTIES"
FRAME_SECTIONS = "FRAME SECTIONS"
SLAB_PROPERTIES = "SLAB PROPERTIES"
WALL_PROPERTIES = "WALL PROPERTIES"
POINT_COORDINATES = "POINT COORDINATES"
LINE_CONNECTIVITIES = "LINE CONNECTIVITIES"
AREA_CONNECTIVITIES = "AREA CONNECTIVITIES"
LINE_ASSIGNS = "LINE ASSIGNS"
AREA_ASSIGNS = "AREA ASSIGNS"
SHELL_OBJECT_LOADS = "SHELL OBJECT LOADS"
LOAD_PATTERNS = "LOAD PATTERNS"
SHELL_UNIFORM_LOAD_SETS = "SHELL UNIFORM LOAD SETS"
LOAD_COMBINATIONS = "LOAD COMBINATIONS"

SECTION_ORDER: List[str] = [
    "PROGRAM INFORMATION",
    CONTROLS,
    STORIES,
    GRIDS,
    DIAPHRAGM_NAMES,
    MATERIAL_PROPERTIES,
    FRAME_SECTIONS,
    SLAB_PROPERTIES,
    "DECK PROPERTIES",
    WALL_PROPERTIES,
    POINT_COORDINATES,
    LINE_CONNECTIVITIES,
    AREA_CONNECTIVITIES,
    LINE_ASSIGNS,
    AREA_ASSIGNS,
    LOAD_PATTERNS,
    SHELL_UNIFORM_LOAD_SETS,
    SHELL_OBJECT_LOADS,
    LOAD_COMBINATIONS,
    PROJECT_INFORMATION,
    "LOG",
]


@dataclass(frozen=True)
class Record:
    """One tokenized record line.

    Attributes:
        line_number: 1-based line number within the section body
        tokens: Tokens with quotes removed
        text: Original line
    """

    line_number: int
    tokens: List[str]
    text: str

    @property
    def keyword(self) -> str:
        return self.tokens[0].upper() if self.tokens else ""


def split_sections(text: str) -> Dict[str, str]:
    """Split file text into ``{section name: body text}``.

    Text before the first header is dropped. A repeated header appends to the
    existing body.
    """
    sections: Dict[str, List[str]] = {}
    current: Optional[str] = None
    for line in text.splitlines():
        match = SECTION_HEADER.match(line)
        if match:
            current = match.group(1).strip()
            sections.setdefault(current, [])
            continue
        if current is not None:
            sections[current].append(line)
    return {name: "\n".join(lines).strip("\n") for name, lines in sections.items()}


def join_sections(sections: Mapping[str, str]) -> str:
    """Join sections into file text, known sections first in canonical order."""
    ordered = [name for name in SECTION_ORDER if name in sections]
    ordered += [name for name in sections if name not in SECTION_ORDER]
    blocks = []
    for name in ordered:
        body = sections[name].strip("\n")
        blocks.append(f"$ {name}\n{body}\n" if body else f"$ {name}\n")
    return "\n".join(blocks)


def read_sections(path: Union[str, Path]) -> Dict[str, str]:
    with open(path, "r") as f:
        return split_sections(f.read())


def write_sections(sections: Mapping[str, str], path: Union[str, Path]) -> None:
    with open(path, "w") as f:
        f.write(join_sections(sections))


def tokenize_record(line: str) -> List[str]:
    """Split a record into tokens, honouring double quotes.

    Raises:
        ValueError: On an unbalanced quote
    """
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.quotes = '"'
    lexer.escape = ""
    lexer.commenters = ""
    return list(lexer)


def iter_records(body: str) -> Iterator[Record]:
    """Yield the non-blank, non-comment records of a section body.

    Lines that cannot be tokenized are yielded with empty ``tokens`` so the
    caller can report them against the right line number.
    """
    for number, line in enumerate(body.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("$"):
            continue
        try:
            tokens = tokenize_record(stripped)
        except ValueError as e:
            logger.debug(f"Cannot tokenize line {number}: {e}")
            tokens = []
        yield Record(line_number=number, tokens=tokens, text=line)


def keyword_values(tokens: List[str], start: int = 0) -> Dict[str, str]:
    """Read ``KEY value`` pairs from ``tokens[start:]`` (keys upper-cased).

    A trailing key without a value maps to an empty string.
    """
    values: Dict[str, str] = {}
    i = start
    while i < len(tokens):
        key = tokens[i].upper()
        values[key] = tokens[i + 1] if i + 1 < len(tokens) else ""
        i += 2
    return values


def quote(name: str) -> str:
    return f'"{name}"'


def format_number(value: float) -> str:
    """Compact decimal text: ``120.0`` -> ``120``, ``0.1250`` -> ``0.125``."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
