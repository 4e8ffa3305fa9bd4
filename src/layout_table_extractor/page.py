from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .fragments import TextFragment
from .rulings import Ruling
from .spatial import Rectangle


class Page:
    """Read-only holder for one page's fragments and rulings."""

    def __init__(self, width: float, height: float, rotation: float, number: int,
                 fragments: Optional[Sequence[TextFragment]] = None,
                 rulings: Optional[Sequence[Ruling]] = None):
        if number < 1:
            raise ValueError("Page numbers are one-indexed; numbers < 1 are invalid.")
        self.bbox = Rectangle(0, 0, width, height)
        self.rotation = rotation
        self._number = number
        self.fragments: Tuple[TextFragment, ...] = tuple(fragments or ())
        self.rulings: Tuple[Ruling, ...] = tuple(rulings or ())

    @property
    def width(self) -> float:
        return self.bbox.width

    @property
    def height(self) -> float:
        return self.bbox.height

    def number(self, zero_indexed: bool = False) -> int:
        return self._number - 1 if zero_indexed else self._number

    def get_text(self, area: Optional[Tuple[float, float, float, float]] = None) -> List[TextFragment]:
        """Fragments strictly inside ``area`` = (top, left, bottom, right); whole page by default."""
        if area is None:
            area = (0, 0, self.height, self.width)
        top, left, bottom, right = area
        return [te for te in self.fragments
                if te.top > top and te.bottom < bottom and te.left > left and te.right < right]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "number": self.number(),
            "rotation": self.rotation,
            "fragments": [te.to_dict() for te in self.fragments],
        }
