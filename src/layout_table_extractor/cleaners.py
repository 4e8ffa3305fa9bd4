# src/layout_table_extractor/cleaners.py
from __future__ import annotations
import logging
import re
from typing import List

log = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"\s+")


def clean_cell_text(text: str) -> str:
    """Limpia el texto de una celda: espacios repetidos y saltos de línea."""
    return WHITESPACE_RE.sub(" ", text or "").strip()


def process_grid_data(grid: List[List[str]]) -> List[List[str]]:
    """Aplica funciones de limpieza a toda la rejilla."""
    log.info("Procesando y limpiando datos de la rejilla.")
    return [[clean_cell_text(cell) for cell in row] for row in grid]
