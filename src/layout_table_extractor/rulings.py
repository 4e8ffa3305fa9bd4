# src/layout_table_extractor/rulings.py
from __future__ import annotations
import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .spatial import Rectangle

log = logging.getLogger(__name__)

PIXEL_BLOOP_AMOUNT = 2
SEGMENT_JOIN_DISTANCE = 7


class DegenerateRulingError(ValueError):
    """A ruling that is neither horizontal nor vertical."""


@dataclass
class Ruling:
    """A drawn line segment (table border); its box is flat on one axis."""
    bbox: Rectangle
    stroking_color: Optional[Any] = None

    def __post_init__(self) -> None:
        flat_x = self.bbox.width == 0
        flat_y = self.bbox.height == 0
        if flat_x == flat_y:
            raise DegenerateRulingError(
                f"Ruling must be horizontal or vertical, got {self.bbox.width}x{self.bbox.height} "
                f"at ({self.bbox.left}, {self.bbox.top})"
            )

    @classmethod
    def at(cls, top: float, left: float, width: float, height: float,
           stroking_color: Optional[Any] = None) -> "Ruling":
        return cls(Rectangle(top, left, width, height), stroking_color)

    @classmethod
    def along(cls, horizontal: bool, position: float, start: float, end: float,
              stroking_color: Optional[Any] = None) -> "Ruling":
        """Build a ruling from its offset and its extent along its own axis."""
        if horizontal:
            return cls(Rectangle(position, start, end - start, 0), stroking_color)
        return cls(Rectangle(start, position, 0, end - start), stroking_color)

    @property
    def top(self) -> float:
        return self.bbox.top

    @property
    def left(self) -> float:
        return self.bbox.left

    @property
    def right(self) -> float:
        return self.bbox.right

    @property
    def bottom(self) -> float:
        return self.bbox.bottom

    @property
    def horizontal(self) -> bool:
        return self.bbox.height == 0

    @property
    def vertical(self) -> bool:
        return self.bbox.width == 0

    @property
    def position(self) -> float:
        """Offset on the perpendicular axis: top for horizontals, left for verticals."""
        return self.top if self.horizontal else self.left

    @property
    def start(self) -> float:
        return self.left if self.horizontal else self.top

    @property
    def end(self) -> float:
        return self.right if self.horizontal else self.bottom

    @property
    def length(self) -> float:
        return math.hypot(self.right - self.left, self.bottom - self.top)

    def intersects(self, other: "Ruling") -> bool:
        # 2D line intersection test from the comp.graphics.algorithms FAQ
        denom = ((self.right - self.left) * (other.bottom - other.top)
                 - (self.bottom - self.top) * (other.right - other.left))
        if denom == 0:
            return False
        r = ((self.top - other.top) * (other.right - other.left)
             - (self.left - other.left) * (other.bottom - other.top)) / denom
        s = ((self.top - other.top) * (self.right - self.left)
             - (self.left - other.left) * (self.bottom - self.top)) / denom
        return 0 <= r < 1 and 0 <= s < 1

    def bloop(self) -> "Ruling":
        """Copy of this ruling stretched PIXEL_BLOOP_AMOUNT past both of its ends."""
        return Ruling.along(self.horizontal, self.position,
                            self.start - PIXEL_BLOOP_AMOUNT, self.end + PIXEL_BLOOP_AMOUNT,
                            self.stroking_color)

    def nearly_intersects(self, other: "Ruling") -> bool:
        if self.intersects(other):
            return True
        return self.bloop().intersects(other.bloop())

    def to_dict(self) -> List[float]:
        return [self.left, self.top, self.right, self.bottom]


def _join_collinear(rulings: List[Ruling]) -> List[Ruling]:
    """Merge segments sharing one offset when the gap between them is small."""
    rs = sorted(rulings, key=lambda r: (r.start, r.end))
    horizontal = rs[0].horizontal
    position = rs[0].position
    joined: List[Ruling] = []
    first = rs[0]
    start, end = first.start, first.end
    for r in rs[1:]:
        if r.start - end < SEGMENT_JOIN_DISTANCE:
            end = max(end, r.end)
            continue
        joined.append(Ruling.along(horizontal, position, start, end, first.stroking_color))
        first = r
        start, end = r.start, r.end
    joined.append(Ruling.along(horizontal, position, start, end, first.stroking_color))
    return joined


def _clean_orientation(rulings: List[Ruling], max_distance: float) -> List[Ruling]:
    if not rulings:
        return []
    horizontal = rulings[0].horizontal

    by_position: Dict[float, List[Ruling]] = defaultdict(list)
    for r in rulings:
        by_position[r.position].append(r)
    joined = {pos: _join_collinear(rs) for pos, rs in by_position.items()}

    # offsets closer than max_distance are the same visual line
    clusters: List[List[float]] = []
    for pos in sorted(joined):
        if clusters and pos - clusters[-1][-1] < max_distance:
            clusters[-1].append(pos)
        else:
            clusters.append([pos])

    cleaned: List[Ruling] = []
    for cluster in clusters:
        if len(cluster) == 1:
            cleaned.extend(joined[cluster[0]])
            continue
        members = [r for pos in cluster for r in joined[pos]]
        middle = (cluster[0] + cluster[-1]) / 2.0
        start = min(r.start for r in members)
        end = max(r.end for r in members)
        log.debug("Fusionando %d rulings en offsets %s -> %.2f", len(members), cluster, middle)
        cleaned.append(Ruling.along(horizontal, middle, start, end, members[0].stroking_color))

    cleaned.sort(key=lambda r: (r.position, r.start))
    return cleaned


def split_rulings(rulings: Iterable[Ruling]) -> Tuple[List[Ruling], List[Ruling]]:
    """Separa rulings en (horizontales, verticales)."""
    horizontal: List[Ruling] = []
    vertical: List[Ruling] = []
    for r in rulings:
        (horizontal if r.horizontal else vertical).append(r)
    return horizontal, vertical


def clean_rulings(rulings: Iterable[Ruling], max_distance: float = 4) -> List[Ruling]:
    """Consolidate split and near-duplicate rulings.

    Per orientation, segments on the same offset are joined when the gap
    between them is below SEGMENT_JOIN_DISTANCE, then offsets closer than
    ``max_distance`` collapse into a single ruling at their midpoint spanning
    the combined extent. Returns horizontals (by top) followed by verticals
    (by left). Running it twice gives the same result.
    """
    horizontal, vertical = split_rulings(rulings)
    return _clean_orientation(horizontal, max_distance) + _clean_orientation(vertical, max_distance)
