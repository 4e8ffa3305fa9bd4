from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .fragments import TextFragment
from .spatial import Rectangle

MIN_LINE_OVERLAP = 0.01


@dataclass(eq=False)
class Line:
    """One table row: its fragments left to right and the box covering them.

    ``fragments`` may hold ``None`` slots while a gap-based table is being
    filled in; they are replaced by empty fragments before it is returned.
    """
    index: Optional[int] = None
    fragments: List[Optional[TextFragment]] = field(default_factory=list)
    bbox: Optional[Rectangle] = None

    @property
    def top(self) -> float:
        return self.bbox.top if self.bbox is not None else 0.0

    @property
    def height(self) -> float:
        return self.bbox.height if self.bbox is not None else 0.0

    def append(self, te: TextFragment) -> None:
        """Add a fragment, folding it into a member of the same column if there is one."""
        if self.bbox is None:
            self.fragments.append(te)
            self.bbox = te.bbox.copy()
            return
        same_column = next(
            (f for f in self.fragments if f is not None and f.overlaps_horizontally(te)), None
        )
        if same_column is not None:
            # stacked text inside one cell
            if not same_column.overlaps_vertically(te):
                te.text = " " + te.text
            same_column.merge(te)
        else:
            self.fragments.append(te)
        self.bbox.union(te.bbox)

    def texts(self) -> List[str]:
        return [(f.text if f is not None else "") for f in self.fragments]

    def __eq__(self, other: object) -> bool:
        # for table comparisons: stripped text only, shorter side padded with empty cells
        if not isinstance(other, Line):
            return NotImplemented
        mine = [t.strip() for t in self.texts()]
        theirs = [t.strip() for t in other.texts()]
        size = max(len(mine), len(theirs))
        mine += [""] * (size - len(mine))
        theirs += [""] * (size - len(theirs))
        return mine == theirs

    __hash__ = None  # type: ignore[assignment]


def group_by_lines(fragments: Iterable[TextFragment]) -> List[Line]:
    """Group fragments into lines by vertical overlap, ignoring whitespace-only ones."""
    lines: List[Line] = []
    for te in fragments:
        if te.is_blank():
            continue
        line = next(
            (ln for ln in lines if ln.bbox.vertical_overlap_ratio(te.bbox) >= MIN_LINE_OVERLAP), None
        )
        if line is None:
            line = Line(index=len(lines))
            lines.append(line)
        line.append(te)
    return lines
