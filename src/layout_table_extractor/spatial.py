# src/layout_table_extractor/spatial.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict


def overlap_ratio(a1: float, a2: float, b1: float, b2: float) -> float:
    """Overlap of [a1, a2) and [b1, b2) divided by the shorter interval."""
    inter = max(0.0, min(a2, b2) - max(a1, b1))
    denom = min(a2 - a1, b2 - b1)
    if denom <= 0:
        return 0.0
    return inter / denom


@dataclass
class Rectangle:
    """Representa un rectángulo alineado a los ejes (origen arriba-izquierda, y crece hacia abajo)."""
    top: float
    left: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Rectangle con dimensiones negativas: {self.width}x{self.height}")

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return self.left + self.width / 2.0, self.top + self.height / 2.0

    def copy(self) -> "Rectangle":
        return Rectangle(self.top, self.left, self.width, self.height)

    def overlaps_horizontally(self, other: "Rectangle") -> bool:
        return self.left < other.right and other.left < self.right

    def overlaps_vertically(self, other: "Rectangle") -> bool:
        return self.top < other.bottom and other.top < self.bottom

    def horizontal_overlap_ratio(self, other: "Rectangle") -> float:
        return overlap_ratio(self.left, self.right, other.left, other.right)

    def vertical_overlap_ratio(self, other: "Rectangle") -> float:
        return overlap_ratio(self.top, self.bottom, other.top, other.bottom)

    def horizontal_gap(self, other: "Rectangle") -> float:
        """Signed distance between the facing vertical edges.

        Positive when the boxes are apart, negative when they overlap. The
        result does not depend on which box is ``self``.
        """
        return max(other.left - self.right, self.left - other.right)

    def contains_point(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom

    def contains(self, other: "Rectangle") -> bool:
        return (self.left <= other.left and self.top <= other.top
                and other.right <= self.right and other.bottom <= self.bottom)

    def union(self, other: "Rectangle") -> "Rectangle":
        """Grow this rectangle in place so it also covers ``other``."""
        top = min(self.top, other.top)
        left = min(self.left, other.left)
        right = max(self.right, other.right)
        bottom = max(self.bottom, other.bottom)
        self.top, self.left = top, left
        self.width, self.height = right - left, bottom - top
        return self

    def to_dict(self) -> Dict[str, float]:
        return {"top": self.top, "left": self.left, "width": self.width, "height": self.height}


def bbox_of(item: Any) -> Rectangle:
    """Devuelve el Rectangle de una entidad (fragmento, línea, columna, celda) o el propio Rectangle."""
    if isinstance(item, Rectangle):
        return item
    return item.bbox
