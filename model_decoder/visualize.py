"""
Character-level highlighting of model strings.

Turns a set of categories into per-character rendering instructions for a
monospace display of either the reference string or the live input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Set

from .catalog_loader import PositionMap, PositionRange, SEPARATORS


class MarkKind(str, Enum):
    HIGHLIGHTED = "highlighted"
    SEPARATOR = "separator"
    PLAIN = "plain"


@dataclass(frozen=True)
class CharMark:
    """Rendering instruction for one character."""
    index: int
    char: str
    kind: MarkKind


def highlight_indices(positions: PositionMap, categories: Iterable[str]) -> Set[int]:
    """Union of the character indices of every mapped category."""
    indices: Set[int] = set()
    for category in categories:
        indices.update(positions.indices(category))
    return indices


def render_characters(
    text: str,
    positions: PositionMap,
    categories: Iterable[str],
) -> List[CharMark]:
    """
    Mark each character of ``text`` as highlighted, separator or plain.

    Highlighting wins over the separator class. Categories without a range,
    and range indices beyond the text, are ignored.
    """
    highlighted = highlight_indices(positions, categories)
    marks = []
    for index, char in enumerate(text):
        if index in highlighted:
            kind = MarkKind.HIGHLIGHTED
        elif char in SEPARATORS:
            kind = MarkKind.SEPARATOR
        else:
            kind = MarkKind.PLAIN
        marks.append(CharMark(index=index, char=char, kind=kind))
    return marks


def live_position_map(attributes: Iterable[Any]) -> PositionMap:
    """
    Position map of a live input, built from where each decoded attribute
    actually sits in the normalized string.
    """
    return PositionMap([
        PositionRange(category=a.category, start=a.start_index, end=a.end_index)
        for a in attributes
    ])


def marker_line(marks: List[CharMark], marker: str = "^") -> str:
    """Caret line to print under the text, e.g. for console output."""
    return "".join(marker if m.kind == MarkKind.HIGHLIGHTED else " " for m in marks).rstrip()
