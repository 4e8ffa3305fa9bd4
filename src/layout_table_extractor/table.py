# src/layout_table_extractor/table.py
from __future__ import annotations
import logging
import math
from typing import Iterable, List, Optional, Sequence

from .config import ExtractionOptions
from .fragments import TextFragment
from .lines import Line, group_by_lines
from .words import merge_words

log = logging.getLogger(__name__)


class Table:
    """Sparse grid of fragments: ``lines[i].fragments[j]`` is row i, column j."""

    def __init__(self, line_count: int, separators: Sequence[float]):
        self.separators = list(separators)
        self.lines: List[Line] = [Line(index=i) for i in range(line_count)]

    def add_text_element(self, te: TextFragment, i: int, j: int) -> None:
        while len(self.lines) <= i:
            self.lines.append(Line(index=len(self.lines)))
        line = self.lines[i]
        slots = line.fragments
        if len(slots) <= j:
            slots.extend([None] * (j + 1 - len(slots)))
        if slots[j] is None:
            slots[j] = te
        else:
            slots[j].merge(te)
        if line.bbox is None:
            line.bbox = te.bbox.copy()
        else:
            line.bbox.union(te.bbox)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "Table":
        """Tabla a partir de una lista de filas de texto (útil en pruebas)."""
        table = cls(len(rows), [])
        for line, row in zip(table.lines, rows):
            line.fragments = [TextFragment.empty() for _ in row]
            for te, cell in zip(line.fragments, row):
                te.text = cell
        return table

    @property
    def rows(self) -> List[List[Optional[TextFragment]]]:
        return [line.fragments for line in self.lines]

    def to_rows(self) -> List[List[str]]:
        return [line.texts() for line in self.lines]

    def lstrip_lines(self) -> List[Line]:
        """Lines without the leading columns that are empty on every line."""
        def leading_empty(line: Line) -> Optional[int]:
            for k, te in enumerate(line.fragments):
                if te is not None and te.text:
                    return k
            return None

        counts = [c for c in (leading_empty(line) for line in self.lines) if c is not None]
        strip = min(counts) if counts else 0
        if strip == 0:
            return list(self.lines)
        return [Line(index=line.index, fragments=line.fragments[strip:], bbox=line.bbox)
                for line in self.lines]

    def __eq__(self, other: object) -> bool:
        # separators are ignored; they are often empty in hand-built tables
        if not isinstance(other, Table):
            return NotImplemented
        mine = self.lstrip_lines()
        theirs = other.lstrip_lines()
        size = max(len(mine), len(theirs))
        mine += [Line() for _ in range(size - len(mine))]
        theirs += [Line() for _ in range(size - len(theirs))]
        return all(a == b for a, b in zip(mine, theirs))

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"Table(lines={len(self.lines)}, separators={self.separators})"


def column_separators(fragments: Iterable[TextFragment], top: float) -> List[float]:
    """Right edges of the column runs found scanning fragments left to right.

    Only fragments at or below ``top`` take part. Returned in descending order.
    """
    right = -math.inf
    run_ends: List[float] = []
    for te in sorted(fragments, key=lambda t: t.left):
        if te.is_blank() or te.top < top:
            continue
        if te.left > right:
            run_ends.append(right)
            right = te.right
        elif te.right > right:
            right = te.right
    # the first entry closes the empty run before the first column
    return sorted(run_ends[1:], reverse=True)


def make_table(fragments: Iterable[TextFragment],
               options: Optional[ExtractionOptions] = None,
               ) -> Table:
    """Construye una tabla sin rulings, usando solo los huecos horizontales entre fragmentos."""
    options = options or ExtractionOptions()
    fragments = list(fragments)
    if not fragments:
        return Table(0, [])

    if options.merge_words:
        fragments = merge_words(fragments, options.vertical_rulings)
    else:
        fragments = [te.copy() for te in fragments]

    lines = group_by_lines(fragments)
    if not lines:
        log.warning("Solo se recibieron fragmentos en blanco; tabla vacía.")
        return Table(0, [])
    log.debug("Se agruparon los fragmentos en %d líneas.", len(lines))

    top = min(te.top for te in lines[0].fragments if te is not None)
    separators = column_separators(fragments, top)
    n_cols = len(separators) + 1
    log.debug("Separadores de columna: %s", separators)

    table = Table(len(lines), separators)
    for i, line in enumerate(lines):
        for te in line.fragments:
            if te is None:
                continue
            j = next((k for k, s in enumerate(separators) if te.left > s), len(separators))
            table.add_text_element(te, i, len(separators) - j)

    for line in table.lines:
        line.fragments += [None] * (n_cols - len(line.fragments))
        line.fragments = [te if te is not None else TextFragment.empty() for te in line.fragments]
    table.lines.sort(key=lambda ln: max((te.top for te in ln.fragments), default=0.0))
    for i, line in enumerate(table.lines):
        line.index = i
    return table
