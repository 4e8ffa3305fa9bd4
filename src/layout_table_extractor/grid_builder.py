# src/layout_table_extractor/grid_builder.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .fragments import TextFragment
from .rulings import Ruling, split_rulings
from .spatial import Rectangle

log = logging.getLogger(__name__)


@dataclass(eq=False)
class Cell:
    """Celda delimitada por rulings, con los fragmentos que caen dentro."""
    bbox: Rectangle
    fragments: List[TextFragment] = field(default_factory=list)
    placeholder: bool = False
    merged: bool = False

    @classmethod
    def filler(cls, top: float, left: float, width: float = 0.0, height: float = 0.0) -> "Cell":
        return cls(Rectangle(top, left, width, height), placeholder=True)

    @property
    def top(self) -> float:
        return self.bbox.top

    @property
    def left(self) -> float:
        return self.bbox.left

    def text(self, debug: bool = False) -> str:
        if self.placeholder:
            return "placeholder" if debug else ""
        ordered = sorted(self.fragments, key=lambda te: (te.top, te.left))
        output = "".join(te.text for te in ordered)
        if not output and debug:
            output = f"width: {self.bbox.width} h: {self.bbox.height}"
        return output

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = self.bbox.to_dict()
        d.update(text=self.text(), placeholder=self.placeholder, merged=self.merged)
        return d


def _unique_rulings(rulings: Sequence[Ruling]) -> List[Ruling]:
    unique: List[Ruling] = []
    for r in rulings:
        if not unique or unique[-1].bbox != r.bbox:
            unique.append(r)
    return unique


def _bounds(rulings: Sequence[Ruling]) -> Rectangle:
    if not rulings:
        return Rectangle(0, 0, 0, 0)
    box = rulings[0].bbox.copy()
    for r in rulings[1:]:
        box.union(r.bbox)
    return box


class Spreadsheet:
    """A table whose cells are read off a lattice of rulings.

    Every vertical ruling is tried as the left border and every horizontal
    ruling it (nearly) meets as the top border. The right border is the
    closest vertical to the right that meets the top border, and the bottom
    border the closest horizontal below that meets both sides. A cell that
    spans interior ruling offsets is marked ``merged`` and zero-size
    placeholder cells are added at those offsets so ``rows()`` and
    ``cols()`` stay rectangular.

    The search is quadratic in the number of rulings, which stays small on
    a page.
    """

    def __init__(self, rulings: Iterable[Ruling], area: Optional[Rectangle] = None):
        rulings = list(rulings)
        horizontal, vertical = split_rulings(rulings)
        self.horizontal_ruling_lines = _unique_rulings(
            sorted(horizontal, key=lambda r: (r.top, r.left, r.right)))
        self.vertical_ruling_lines = _unique_rulings(
            sorted(vertical, key=lambda r: (r.left, r.top, r.bottom)))
        self.bbox = area.copy() if area is not None else _bounds(rulings)
        self.cells: List[Cell] = []
        self._build_cells()

    def _build_cells(self) -> None:
        verticals = self.vertical_ruling_lines
        horizontals = self.horizontal_ruling_lines
        if not verticals or not horizontals:
            return
        vertical_locs = sorted({r.left for r in verticals})
        horizontal_locs = sorted({r.top for r in horizontals})
        seen = set()

        for left_ruling in verticals:
            if left_ruling.left == vertical_locs[-1]:
                continue
            for top_ruling in horizontals:
                if top_ruling.top == horizontal_locs[-1]:
                    continue
                if not top_ruling.nearly_intersects(left_ruling):
                    continue

                rights = [r for r in verticals
                          if r.left > left_ruling.left
                          and r.nearly_intersects(top_ruling)
                          and r.bottom > top_ruling.top]
                if not rights:
                    log.debug("Sin ruling derecho para (%s, %s)", left_ruling.left, top_ruling.top)
                    continue
                right_ruling = min(rights, key=lambda r: r.left)

                bottoms = [r for r in horizontals
                           if r.top > top_ruling.top
                           and r.nearly_intersects(right_ruling)
                           and r.nearly_intersects(left_ruling)]
                if not bottoms:
                    log.debug("Sin ruling inferior para (%s, %s)", left_ruling.left, top_ruling.top)
                    continue
                bottom_ruling = min(bottoms, key=lambda r: r.top)

                box = Rectangle(top_ruling.top, left_ruling.left,
                                right_ruling.right - left_ruling.left,
                                bottom_ruling.bottom - top_ruling.top)
                key = (box.top, box.left, box.width, box.height)
                if key in seen:
                    continue
                seen.add(key)
                cell = Cell(box)
                self.cells.append(cell)
                self._add_placeholders(cell, vertical_locs, horizontal_locs)

    def _add_placeholders(self, cell: Cell, vertical_locs: List[float],
                          horizontal_locs: List[float]) -> None:
        box = cell.bbox
        spanned_x = [x for x in vertical_locs if box.left < x < box.right]
        spanned_y = [y for y in horizontal_locs if box.top < y < box.bottom]
        if spanned_x or spanned_y:
            cell.merged = True
        for x in spanned_x:
            self.cells.append(Cell.filler(box.top, x, 0, box.height))
        for y in spanned_y:
            self.cells.append(Cell.filler(y, box.left, box.width, 0))
        # spans in both directions also need a point placeholder at each crossing
        for x in spanned_x:
            for y in spanned_y:
                self.cells.append(Cell.filler(y, x))

    def rows(self) -> List[List[Cell]]:
        tops = sorted({c.top for c in self.cells})
        rows = [sorted((c for c in self.cells if c.top == top), key=lambda c: c.left) for top in tops]
        # a top border drawn without some interior verticals leaves the header row short
        if len(rows) >= 2:
            first = {c.left for c in rows[0]}
            second = {c.left for c in rows[1]}
            if len(first) < len(second):
                top = rows[0][0].top
                rows[0].extend(Cell.filler(top, left) for left in sorted(second - first))
                rows[0].sort(key=lambda c: c.left)
        return rows

    def cols(self) -> List[List[Cell]]:
        lefts = sorted({c.left for c in self.cells})
        return [sorted((c for c in self.cells if c.left == left), key=lambda c: c.top) for left in lefts]

    def add_fragments(self, fragments: Iterable[TextFragment]) -> List[TextFragment]:
        """Put each fragment in the cell holding its centre; returns the ones that fit nowhere.

        Text from an earlier call is replaced, not added to.
        """
        targets = [c for row in self.rows() for c in row if not c.placeholder]
        for cell in targets:
            cell.fragments = []
        unplaced: List[TextFragment] = []
        for te in fragments:
            x, y = te.bbox.center
            cell = next((c for c in targets if c.bbox.contains_point(x, y)), None)
            if cell is None:
                unplaced.append(te)
            else:
                cell.fragments.append(te)
        if unplaced:
            log.debug("%d fragmentos quedaron fuera de las celdas.", len(unplaced))
        return unplaced

    def to_rows(self) -> List[List[str]]:
        return [[c.text() for c in row] for row in self.rows()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "top": self.bbox.top,
            "left": self.bbox.left,
            "width": self.bbox.width,
            "height": self.bbox.height,
            "rows": len(self.rows()),
            "cols": len(self.cols()),
            "cells": [c.to_dict() for c in self.cells],
        }
