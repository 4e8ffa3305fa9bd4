# src/layout_table_extractor/exporters.py
from __future__ import annotations
import csv
import io
import json
from typing import Any, Dict, List, Sequence

from .fragments import TextFragment


def _delimited(rows: Sequence[Sequence[str]], delimiter: str) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, delimiter=delimiter, lineterminator="\r\n")
    w.writerows(rows)
    return buf.getvalue()


def rows_to_csv(rows: Sequence[Sequence[str]]) -> str:
    return _delimited(rows, ",")


def rows_to_tsv(rows: Sequence[Sequence[str]]) -> str:
    return _delimited(rows, "\t")


def lines_to_csv(lines: Sequence[Sequence[TextFragment]]) -> str:
    """CSV de filas de fragmentos, con el texto de cada celda recortado."""
    return rows_to_csv([[te.text.strip() for te in line] for line in lines])


def to_json(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def write_text(text: str, path: str, bom: bool = True) -> None:
    # utf-8-sig para que Excel detecte la codificación de los CSV
    with open(path, "w", encoding="utf-8-sig" if bom else "utf-8", newline="") as f:
        f.write(text)


def render(rows: List[List[str]], fmt: str, payload: Dict[str, Any] | None = None) -> str:
    """Renderiza la rejilla en el formato pedido (csv, tsv o json)."""
    if fmt == "csv":
        return rows_to_csv(rows)
    if fmt == "tsv":
        return rows_to_tsv(rows)
    if fmt == "json":
        return to_json(payload if payload is not None else {"rows": rows})
    raise ValueError(f"Formato desconocido: {fmt!r}")
