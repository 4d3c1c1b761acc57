"""
Parameter Sources: building the flat name → value mapping.

Two input formats are understood:
    - command-line style assignments: ["maxSteps=500", "verbose=true"]
    - a subset of the Java properties format:

        # comment
        ! also a comment
        maxSteps = 500
        stepSize: 0.1
        outputFile results.txt
        description = first line \\
                      continued here

Values are always kept as strings. Typing happens in the dispatcher.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Mapping, Union

from .errors import SourceFormatError


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

ASSIGNMENT_SEPARATOR = "="
COMMENT_MARKERS = ("#", "!")
CONTINUATION_MARKER = "\\"

# Key runs up to the first '=', ':' or whitespace
PROPERTY_PATTERN = re.compile(r"(?P<key>[^=:\s]+)\s*(?:[=:]\s*|\s+|$)(?P<value>.*)")


# =============================================================================
# PARSERS
# =============================================================================

def parse_assignments(items: Iterable[str], source: str = "<arguments>") -> dict[str, str]:
    """
    Parse "name=value" items. The value may itself contain '='.

    Raises:
        SourceFormatError: If an item has no '=' or an empty name
    """
    values: dict[str, str] = {}
    for item in items:
        key, separator, value = item.partition(ASSIGNMENT_SEPARATOR)
        key = key.strip()
        if not separator or not key:
            raise SourceFormatError(source, None, item)
        values[key] = value
    return values


def _logical_lines(text: str) -> Iterable[tuple[int, str]]:
    """Join continued lines, yielding (first line number, joined text)."""
    pending = ""
    start = 0
    for number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip() if not pending else line.lstrip()
        if not pending:
            start = number
            if stripped.startswith(COMMENT_MARKERS):
                continue
        if stripped.endswith(CONTINUATION_MARKER):
            pending += stripped[:-1]
            continue
        yield start, pending + stripped
        pending = ""
    if pending:
        yield start, pending


def parse_properties(text: str, source: str = "<string>") -> dict[str, str]:
    """
    Parse properties text into a name → value mapping.

    Raises:
        SourceFormatError: If a non-comment line has no key
    """
    values: dict[str, str] = {}
    for number, line in _logical_lines(text):
        line = line.strip()
        if not line or line.startswith(COMMENT_MARKERS):
            continue
        match = PROPERTY_PATTERN.match(line)
        if match is None:
            raise SourceFormatError(source, number, line)
        values[match.group("key")] = match.group("value").strip()
    return values


def load_properties(path: Union[str, Path]) -> dict[str, str]:
    """Read and parse a UTF-8 properties file."""
    path = Path(path)
    return parse_properties(path.read_text(encoding="utf-8"), source=str(path))


def merge_sources(*sources: Mapping[str, str]) -> dict[str, str]:
    """Merge mappings left to right; later sources win."""
    merged: dict[str, str] = {}
    for source in sources:
        merged.update(source)
    return merged
