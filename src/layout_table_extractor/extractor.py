# src/layout_table_extractor/extractor.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional

from .columns import Column, group_by_columns
from .config import ExtractionOptions
from .fragments import TextFragment
from .grid_builder import Spreadsheet
from .lines import Line
from .spatial import Rectangle
from .table import Table, make_table
from .words import merge_words

log = logging.getLogger(__name__)

MIN_ROW_HEIGHT = 2


@dataclass
class LineBoundary:
    """Franja vertical de una fila y los textos que contiene."""
    bbox: Rectangle
    texts: List[str] = field(default_factory=list)


class TableExtractor:
    """Runs word merging once, then clusters the page into rows and columns.

    ``fragments`` holds the extractor's own copies, merged into words when
    ``options.merge_words`` is set; the caller's fragments are never touched.
    """

    def __init__(self, fragments: Iterable[TextFragment],
                 options: Optional[ExtractionOptions] = None):
        self.options = options or ExtractionOptions()
        fragments = list(fragments)
        if self.options.merge_words:
            self.fragments = merge_words(fragments, self.options.vertical_rulings)
        else:
            self.fragments = [te.copy() for te in fragments]

    def get_line_boundaries(self) -> List[LineBoundary]:
        boundaries: List[LineBoundary] = []
        if not self.options.horizontal_rulings:
            # no rulings: grow the boundaries one fragment at a time
            for te in self.fragments:
                row = next((b for b in boundaries if b.bbox.overlaps_vertically(te.bbox)), None)
                if row is None:
                    boundaries.append(LineBoundary(te.bbox.copy(), [te.text]))
                else:
                    row.bbox.union(te.bbox)
                    row.texts.append(te.text)
            return boundaries

        rulings = sorted(self.options.horizontal_rulings, key=lambda r: r.top)
        for above, below in zip(rulings, rulings[1:]):
            height = below.top - above.bottom
            if height < MIN_ROW_HEIGHT:
                continue
            left = min(above.left, below.left)
            right = max(above.right, below.right)
            band = Rectangle(above.bottom, left, right - left, height)
            texts = [te.text for te in self.fragments if te.bbox.overlaps_vertically(band)]
            boundaries.append(LineBoundary(band, texts))
        return boundaries

    def get_rows(self) -> List[Dict[str, Any]]:
        boundaries = sorted(self.get_line_boundaries(), key=lambda b: b.bbox.top)
        return [{"top": b.bbox.top, "bottom": b.bbox.bottom, "text": b.texts} for b in boundaries]

    def group_by_columns(self) -> List[Column]:
        return group_by_columns(self.fragments, self.options.vertical_rulings)

    def get_columns(self) -> List[Dict[str, float]]:
        return [c.to_dict() for c in self.group_by_columns()]

    def make_table(self) -> Table:
        """Tabla por huecos (sin rulings) sobre los fragmentos ya fusionados."""
        return make_table(self.fragments, replace(self.options, merge_words=False))

    def make_spreadsheet(self, area: Optional[Rectangle] = None) -> Spreadsheet:
        """Tabla a partir de la rejilla de rulings, con el texto repartido en sus celdas."""
        rulings = list(self.options.horizontal_rulings) + list(self.options.vertical_rulings)
        spreadsheet = Spreadsheet(rulings, area=area)
        unplaced = spreadsheet.add_fragments([te.copy() for te in self.fragments])
        log.info("Spreadsheet con %d celdas; %d fragmentos sin celda.", len(spreadsheet.cells), len(unplaced))
        return spreadsheet

    def make_table_with_vertical_rulings(self) -> Table:
        """Rows from the line boundaries, columns from the vertical rulings."""
        remaining = [te.copy() for te in self.fragments]
        lines: List[Line] = []
        for boundary in self.get_line_boundaries():
            members = [te for te in remaining if te.bbox.overlaps_vertically(boundary.bbox)]
            if not members:
                continue
            taken = {id(te) for te in members}
            remaining = [te for te in remaining if id(te) not in taken]
            line = Line(index=len(lines))
            for te in sorted(members, key=lambda t: t.left):
                if te.is_blank():
                    continue
                line.append(te)
            if line.fragments:
                lines.append(line)
        lines.sort(key=lambda ln: ln.top)

        members = [te for ln in lines for te in ln.fragments if te is not None]
        columns = sorted(group_by_columns(members, self.options.vertical_rulings), key=lambda c: c.left)

        # an empty cell for every column the line has nothing in
        for line in lines:
            slots = sorted((te for te in line.fragments if te is not None), key=lambda t: t.left)
            for i, column in enumerate(columns):
                if not any(te.left >= column.left and te.right <= column.right for te in slots):
                    slots.insert(i, TextFragment.empty(line.top, column.left, column.width, line.height))
            line.fragments = slots

        def column_of(te: TextFragment) -> Optional[Column]:
            return next((c for c in columns if c.includes(te)), None)

        for line in lines:
            slots = line.fragments
            for a, b in combinations(range(len(slots)), 2):
                t1, t2 = slots[a], slots[b]
                if t1 is None or t2 is None or not t1.text or not t2.text:
                    continue
                column = column_of(t1)
                if column is None or column is not column_of(t2):
                    continue
                if t1.bottom <= t2.bottom:
                    t1.merge(t2)
                    slots[b] = None
                else:
                    t2.merge(t1)
                    slots[a] = None
            line.fragments = [te for te in slots if te is not None]

        kept: List[Line] = []
        for line in lines:
            if kept and _repeats(kept[-1], line):
                log.debug("Se descarta la fila duplicada %s", line.texts())
                continue
            kept.append(line)

        table = Table(0, [])
        table.lines = [
            Line(index=i, fragments=sorted(ln.fragments, key=lambda t: t.left), bbox=ln.bbox)
            for i, ln in enumerate(kept)
        ]
        return table


def _repeats(previous: Line, line: Line) -> bool:
    return any(a is not None and b is not None and a.text.strip() and a == b
               for a, b in zip(previous.fragments, line.fragments))


def make_table_with_vertical_rulings(fragments: Iterable[TextFragment],
                                     options: Optional[ExtractionOptions] = None,
                                     ) -> Table:
    return TableExtractor(fragments, options).make_table_with_vertical_rulings()


def get_columns(fragments: Iterable[TextFragment], merge_words: bool = True) -> List[Dict[str, float]]:
    return TableExtractor(fragments, ExtractionOptions(merge_words=merge_words)).get_columns()
