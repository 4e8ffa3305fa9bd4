"""Options controlling table extraction for one page."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from .rulings import Ruling, split_rulings


@dataclass(slots=True)
class ExtractionOptions:
    """Runtime configuration for :class:`~layout_table_extractor.extractor.TableExtractor`.

    Attributes:
        horizontal_rulings: Horizontal rulings bounding the table rows.
        vertical_rulings: Vertical rulings bounding the table columns.
        merge_words: Fuse adjacent glyph fragments into words before
            clustering.
        split_multiline_cells: Accepted for compatibility; has no effect yet.
    """

    horizontal_rulings: List[Ruling] = field(default_factory=list)
    vertical_rulings: List[Ruling] = field(default_factory=list)
    merge_words: bool = True
    split_multiline_cells: bool = False

    @classmethod
    def from_rulings(cls, rulings: Iterable[Ruling], **kwargs) -> "ExtractionOptions":
        """Build options from a mixed list of rulings."""
        horizontal, vertical = split_rulings(rulings)
        return cls(horizontal_rulings=horizontal, vertical_rulings=vertical, **kwargs)


__all__ = ["ExtractionOptions"]
