# src/layout_table_extractor/fragments.py
from __future__ import annotations
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .spatial import Rectangle, bbox_of

TOLERANCE_FACTOR = 0.25
MERGE_DISTANCE_FACTOR = 1.1

ONLY_SPACES_RE = re.compile(r"^\s+$")


def _require_fragment(other: Any) -> "TextFragment":
    if not isinstance(other, TextFragment):
        raise TypeError(f"argument is not a TextFragment: {type(other).__name__}")
    return other


@dataclass(eq=False)
class TextFragment:
    """A positioned run of text (a glyph or a word) with its font metrics.

    ``width_of_space`` is supplied by whoever extracted the fragment; it is the
    unit for every merge and space-insertion tolerance below (the wider of the
    two when fragments differ).
    """
    bbox: Rectangle
    text: str
    font: Optional[str] = None
    font_size: float = 0.0
    width_of_space: float = 0.0

    @classmethod
    def at(cls, top: float, left: float, width: float, height: float, text: str,
           font: Optional[str] = None, font_size: float = 0.0,
           width_of_space: float = 0.0) -> "TextFragment":
        return cls(Rectangle(top, left, width, height), text, font, font_size, width_of_space)

    @classmethod
    def empty(cls, top: float = 0.0, left: float = 0.0,
              width: float = 0.0, height: float = 0.0) -> "TextFragment":
        """Celda vacía usada para rellenar huecos de la rejilla."""
        return cls(Rectangle(top, left, width, height), "")

    @property
    def top(self) -> float:
        return self.bbox.top

    @property
    def left(self) -> float:
        return self.bbox.left

    @property
    def width(self) -> float:
        return self.bbox.width

    @property
    def height(self) -> float:
        return self.bbox.height

    @property
    def right(self) -> float:
        return self.bbox.right

    @property
    def bottom(self) -> float:
        return self.bbox.bottom

    def copy(self) -> "TextFragment":
        return replace(self, bbox=self.bbox.copy())

    def is_blank(self) -> bool:
        return bool(ONLY_SPACES_RE.match(self.text))

    def overlaps_horizontally(self, other: Any) -> bool:
        return self.bbox.overlaps_horizontally(bbox_of(other))

    def overlaps_vertically(self, other: Any) -> bool:
        return self.bbox.overlaps_vertically(bbox_of(other))

    def _space_width(self, other: "TextFragment") -> float:
        # a pair is measured against the wider of its two spaces
        return max(self.width_of_space, other.width_of_space)

    def should_merge(self, other: "TextFragment") -> bool:
        """True when ``other`` is the next glyph of the same word."""
        other = _require_fragment(other)
        if not self.bbox.overlaps_vertically(other.bbox):
            return False
        gap = self.bbox.horizontal_gap(other.bbox)
        return gap < self._space_width(other) * MERGE_DISTANCE_FACTOR and not self.should_add_space(other)

    def should_add_space(self, other: "TextFragment") -> bool:
        """True when the gap to ``other`` is about one space wide."""
        other = _require_fragment(other)
        if not self.bbox.overlaps_vertically(other.bbox):
            return False
        dist = abs(self.bbox.horizontal_gap(other.bbox))
        space = self._space_width(other)
        low = space * (1 - TOLERANCE_FACTOR)
        high = space * (1 + TOLERANCE_FACTOR)
        return low <= dist <= high

    def _precedes(self, other: "TextFragment") -> bool:
        # other reads before self: stacked above it, or wholly to its left on the same band
        if self.bbox.overlaps_horizontally(other.bbox):
            return other.top < self.top
        return other.right <= self.left and self.bbox.overlaps_vertically(other.bbox)

    def merge(self, other: "TextFragment") -> "TextFragment":
        """Absorb ``other`` into this fragment: text in reading order, box unioned."""
        other = _require_fragment(other)
        if self._precedes(other):
            self.text = other.text + self.text
        else:
            self.text = self.text + other.text
        self.bbox.union(other.bbox)
        return self

    def __eq__(self, other: object) -> bool:
        # only the stripped text matters when comparing extracted tables
        if not isinstance(other, TextFragment):
            return NotImplemented
        return self.text.strip() == other.text.strip()

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = self.bbox.to_dict()
        d.update(font=self.font, font_size=self.font_size, text=self.text,
                 width_of_space=self.width_of_space)
        return d
