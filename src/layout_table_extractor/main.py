from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .cleaners import process_grid_data
from .config import ExtractionOptions
from .exporters import render, write_text
from .extractor import TableExtractor
from .page import Page
from .parser import load_page
from .rulings import clean_rulings

log = logging.getLogger(__name__)

METHODS = ("auto", "spreadsheet", "gap", "rulings")
FORMATS = ("csv", "tsv", "json")


def _ensure_parent_dir(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def _resolve_method(method: str, options: ExtractionOptions) -> str:
    method = (method or "auto").lower()
    if method not in METHODS:
        raise ValueError(f"Método desconocido: {method!r}")
    if method != "auto":
        return method
    if options.horizontal_rulings and options.vertical_rulings:
        return "spreadsheet"
    return "gap"


def extract_page(page: Page, *, method: str = "auto",
                 merge_words: bool = True) -> Tuple[List[List[str]], Dict[str, Any]]:
    """
    Reconstruye la tabla de una página con la estrategia indicada.
    Devuelve la rejilla de textos y una representación estructurada para JSON.
    """
    rulings = clean_rulings(page.rulings)
    options = ExtractionOptions.from_rulings(rulings, merge_words=merge_words)
    method = _resolve_method(method, options)
    log.info("Método seleccionado: %s (%d rulings tras limpieza)", method, len(rulings))

    if not page.fragments:
        log.warning("La página %d no tiene fragmentos de texto.", page.number())

    extractor = TableExtractor(page.fragments, options)

    if method == "spreadsheet":
        spreadsheet = extractor.make_spreadsheet()
        return spreadsheet.to_rows(), spreadsheet.to_dict()

    if method == "rulings":
        table = extractor.make_table_with_vertical_rulings()
    else:
        table = extractor.make_table()
    rows = table.to_rows()
    return rows, {"rows": rows, "separators": table.separators}


def extract_page_to_file(
    input_path: str,
    output_path: str,
    *,
    method: str = "auto",
    fmt: str = "csv",
    merge_words: bool = True,
    clean: bool = True,
) -> None:
    """
    Orquesta la extracción: carga la página JSON, reconstruye la tabla y la exporta.
    """
    fmt = (fmt or "csv").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Formato desconocido: {fmt!r}")

    log.info("Cargando página desde: %s", input_path)
    page = load_page(input_path)
    rows, payload = extract_page(page, method=method, merge_words=merge_words)
    if not rows:
        log.warning("No se generaron filas. Se escribirá una salida vacía.")
    if clean:
        rows = process_grid_data(rows)
        if "rows" in payload:
            payload = {**payload, "rows": rows}

    _ensure_parent_dir(output_path)
    write_text(render(rows, fmt, payload), output_path, bom=fmt != "json")
    log.info("Tabla con %d filas escrita en: %s", len(rows), output_path)
