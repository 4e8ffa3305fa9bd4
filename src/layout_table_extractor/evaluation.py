from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd

from .cleaners import clean_cell_text


@dataclass
class ColumnAccuracy:
    column: int
    accuracy: float
    matched: int
    n: int


@dataclass
class TableEvaluation:
    column_accuracy: List[ColumnAccuracy]
    text_accuracy: float
    total_cells: int
    matched_cells: int
    reference_shape: tuple
    predicted_shape: tuple

    def to_dict(self) -> Dict[str, object]:
        return {
            "column_accuracy": [metric.__dict__ for metric in self.column_accuracy],
            "text_accuracy": self.text_accuracy,
            "total_cells": self.total_cells,
            "matched_cells": self.matched_cells,
            "reference_shape": list(self.reference_shape),
            "predicted_shape": list(self.predicted_shape),
        }


def _max_fields(path: str) -> int:
    with open(path, "r", encoding="utf-8-sig", newline="") as fh:
        return max((len(row) for row in csv.reader(fh)), default=0)


def _read_csv(path: str) -> pd.DataFrame:
    # pandas toma el ancho de la primera fila; se fija al de la fila más ancha
    n_fields = _max_fields(path)
    if not n_fields:
        return pd.DataFrame()
    df = pd.read_csv(path, dtype=str, keep_default_na=False, header=None,
                     names=list(range(n_fields)), encoding="utf-8-sig")
    # filas cortas quedan como NaN; normalizar espacios
    return df.fillna("").map(clean_cell_text)


def _pad(df: pd.DataFrame, n_rows: int, n_cols: int) -> np.ndarray:
    grid = np.full((n_rows, n_cols), "", dtype=object)
    if df.size:
        grid[: df.shape[0], : df.shape[1]] = df.to_numpy(dtype=object)
    return grid


def evaluate_tables(reference_csv: str, predicted_csv: str) -> TableEvaluation:
    """Compara celda a celda una tabla extraída con su referencia (ground truth)."""
    df_ref = _read_csv(reference_csv)
    df_pred = _read_csv(predicted_csv)

    # igualar dimensiones rellenando con celdas vacías
    n_rows = max(df_ref.shape[0], df_pred.shape[0])
    n_cols = max(df_ref.shape[1], df_pred.shape[1])
    ref = _pad(df_ref, n_rows, n_cols)
    pred = _pad(df_pred, n_rows, n_cols)

    matches = ref == pred
    total_cells = int(n_rows * n_cols)
    matched = int(matches.sum())
    text_accuracy = matched / total_cells if total_cells else 0.0

    per_column = []
    for j in range(n_cols):
        hit = int(matches[:, j].sum())
        per_column.append(ColumnAccuracy(column=j, accuracy=hit / n_rows if n_rows else 0.0,
                                         matched=hit, n=n_rows))

    return TableEvaluation(
        column_accuracy=per_column,
        text_accuracy=text_accuracy,
        total_cells=total_cells,
        matched_cells=matched,
        reference_shape=tuple(df_ref.shape),
        predicted_shape=tuple(df_pred.shape),
    )


def write_report(evaluation: TableEvaluation, output_path: str) -> None:
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(["Metric", "Column", "Value", "N"])
        writer.writerow(["text_accuracy", "-", f"{evaluation.text_accuracy:.4f}", evaluation.total_cells])
        for metric in evaluation.column_accuracy:
            writer.writerow(["column_accuracy", metric.column, f"{metric.accuracy:.4f}", metric.n])
