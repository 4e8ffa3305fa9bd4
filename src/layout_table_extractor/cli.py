# src/layout_table_extractor/cli.py
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from .main import FORMATS, METHODS, extract_page_to_file

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconstruye tablas a partir de fragmentos de texto y rulings de una página (JSON)."
    )
    parser.add_argument("input_path", type=str, help="Ruta al JSON de la página (fragments + rulings)")
    parser.add_argument("output_path", type=str, help="Ruta al archivo de salida")
    parser.add_argument("--method", type=str, default="auto", choices=METHODS,
                        help="Estrategia de reconstrucción (default: auto)")
    parser.add_argument("--format", dest="fmt", type=str, default="csv", choices=FORMATS,
                        help="Formato de salida (default: csv)")
    parser.add_argument("--no-merge-words", action="store_true",
                        help="No fusionar fragmentos contiguos en palabras")
    parser.add_argument("--raw", action="store_true",
                        help="No limpiar el texto de las celdas antes de exportar")
    parser.add_argument("--loglevel", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Nivel de verbosidad del log (default: INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.loglevel, format="%(asctime)s - %(levelname)s - %(message)s")
    log.info("ENTRADA: %s", args.input_path)
    log.info("SALIDA : %s", args.output_path)

    try:
        extract_page_to_file(
            args.input_path,
            args.output_path,
            method=args.method,
            fmt=args.fmt,
            merge_words=not args.no_merge_words,
            clean=not args.raw,
        )
        log.info("✔ Proceso completado.")
    except FileNotFoundError:
        log.error("Error: No se encontró el archivo de entrada: %s", args.input_path)
        sys.exit(1)
    except Exception as e:
        log.error("Ocurrió un error inesperado: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
