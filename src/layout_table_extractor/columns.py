from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .fragments import TextFragment
from .rulings import Ruling
from .spatial import Rectangle

log = logging.getLogger(__name__)

MIN_COLUMN_WIDTH = 10


@dataclass(eq=False)
class Column:
    """A vertical band of fragments, kept ordered by top."""
    bbox: Rectangle
    fragments: List[TextFragment] = field(default_factory=list)

    @classmethod
    def band(cls, left: float, width: float) -> "Column":
        """Empty column between two vertical rulings."""
        return cls(Rectangle(0, left, width, 0))

    @classmethod
    def from_fragment(cls, te: TextFragment) -> "Column":
        return cls(te.bbox.copy(), [te])

    @property
    def left(self) -> float:
        return self.bbox.left

    @property
    def right(self) -> float:
        return self.bbox.right

    @property
    def width(self) -> float:
        return self.bbox.width

    def append(self, te: TextFragment) -> None:
        self.fragments.append(te)
        self.bbox.union(te.bbox)
        self.fragments.sort(key=lambda t: t.top)

    def includes(self, te: TextFragment) -> bool:
        return any(f is te for f in self.fragments)

    def can_merge(self, other: "Column") -> bool:
        return self.bbox.overlaps_horizontally(other.bbox)

    def average_line_distance(self) -> float:
        """Mean vertical distance between consecutive fragment tops."""
        if len(self.fragments) < 2:
            return 0.0
        tops = np.array([t.top for t in self.fragments], dtype=float)
        return float(np.mean(np.diff(tops)))

    def to_dict(self) -> dict:
        return {"left": self.left, "right": self.right, "width": self.width}


def column_bands(vertical_rulings: Sequence[Ruling]) -> List[Column]:
    """Columnas vacías entre rulings verticales consecutivos (se omiten huecos estrechos)."""
    xs = sorted(r.left for r in vertical_rulings)
    return [Column.band(a, b - a) for a, b in zip(xs, xs[1:]) if b - a >= MIN_COLUMN_WIDTH]


def group_by_columns(fragments: Iterable[TextFragment],
                     vertical_rulings: Optional[Sequence[Ruling]] = None,
                     ) -> List[Column]:
    """Cluster fragments into columns by horizontal overlap.

    With vertical rulings the columns are the bands between them, and a
    fragment that overlaps no band is left out of the result.
    """
    tes = sorted(fragments, key=lambda te: te.left)
    if not vertical_rulings:
        columns: List[Column] = []
        for te in tes:
            column = next((c for c in columns if te.overlaps_horizontally(c)), None)
            if column is None:
                columns.append(Column.from_fragment(te))
            else:
                column.append(te)
        return columns

    columns = column_bands(vertical_rulings)
    for te in tes:
        column = next((c for c in columns if te.overlaps_horizontally(c)), None)
        if column is None:
            log.debug("Fragmento %r no cae en ninguna columna; se descarta.", te.text)
            continue
        column.append(te)
    return columns
