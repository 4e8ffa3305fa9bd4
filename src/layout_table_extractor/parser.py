# src/layout_table_extractor/parser.py
from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Mapping

from .fragments import TextFragment
from .page import Page
from .rulings import DegenerateRulingError, Ruling

log = logging.getLogger(__name__)

BOX_KEYS = ("top", "left", "width", "height")


def _box(record: Mapping[str, Any], kind: str, index: int) -> List[float]:
    missing = [k for k in BOX_KEYS if k not in record]
    if missing:
        raise ValueError(f"{kind} #{index}: faltan las claves {missing}")
    return [float(record[k]) for k in BOX_KEYS]


def fragment_from_dict(record: Mapping[str, Any], index: int = 0) -> TextFragment:
    top, left, width, height = _box(record, "fragment", index)
    if "text" not in record:
        raise ValueError(f"fragment #{index}: falta la clave 'text'")
    return TextFragment.at(
        top, left, width, height, str(record["text"]),
        font=record.get("font"),
        font_size=float(record.get("font_size") or 0.0),
        width_of_space=float(record.get("width_of_space") or 0.0),
    )


def ruling_from_dict(record: Mapping[str, Any], index: int = 0) -> Ruling:
    top, left, width, height = _box(record, "ruling", index)
    try:
        return Ruling.at(top, left, width, height, record.get("stroking_color"))
    except DegenerateRulingError as exc:
        raise DegenerateRulingError(f"ruling #{index}: {exc}") from exc


def parse_page(data: Mapping[str, Any]) -> Page:
    """Construye un Page a partir del documento JSON producido por el extractor de PDF.

    Formato: {"page": {...}, "fragments": [...], "rulings": [...]}
    """
    fragments = [fragment_from_dict(rec, i) for i, rec in enumerate(data.get("fragments") or [])]
    rulings = [ruling_from_dict(rec, i) for i, rec in enumerate(data.get("rulings") or [])]

    meta: Dict[str, Any] = dict(data.get("page") or {})
    if "width" not in meta or "height" not in meta:
        boxes = [te.bbox for te in fragments] + [r.bbox for r in rulings]
        meta.setdefault("width", max((b.right for b in boxes), default=0.0))
        meta.setdefault("height", max((b.bottom for b in boxes), default=0.0))
    page = Page(
        width=float(meta["width"]),
        height=float(meta["height"]),
        rotation=float(meta.get("rotation") or 0),
        number=int(meta.get("number", 1)),
        fragments=fragments,
        rulings=rulings,
    )
    log.debug("Página %d: %d fragmentos, %d rulings", page.number(), len(fragments), len(rulings))
    return page


def load_page(path: str) -> Page:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return parse_page(data)
