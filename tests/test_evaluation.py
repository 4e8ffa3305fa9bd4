import csv
import json

import pytest

from layout_table_extractor import eval_cli
from layout_table_extractor.evaluation import evaluate_tables, write_report


@pytest.fixture
def csv_file(tmp_path):
    def write(name, text):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write


def test_cell_and_column_accuracy(csv_file):
    result = evaluate_tables(csv_file("ref.csv", "a,b\nc,d\n"), csv_file("pred.csv", "a,b\nc,x\n"))
    assert result.text_accuracy == pytest.approx(0.75)
    assert (result.matched_cells, result.total_cells) == (3, 4)
    assert [m.accuracy for m in result.column_accuracy] == [1.0, 0.5]
    assert result.reference_shape == result.predicted_shape == (2, 2)


def test_shapes_are_padded_and_whitespace_ignored(csv_file):
    result = evaluate_tables(csv_file("ref.csv", "a,b\nc,d\n"), csv_file("pred.csv", "a ,  b\n"))
    assert result.predicted_shape == (1, 2)
    assert result.matched_cells == 2
    assert result.text_accuracy == pytest.approx(0.5)


def test_empty_prediction(csv_file):
    result = evaluate_tables(csv_file("ref.csv", "a\n"), csv_file("pred.csv", ""))
    assert result.text_accuracy == 0.0
    assert result.predicted_shape == (0, 0)


def test_write_report(csv_file, tmp_path):
    result = evaluate_tables(csv_file("ref.csv", "a,b\n"), csv_file("pred.csv", "a,b\n"))
    out = tmp_path / "reports" / "report.csv"
    write_report(result, str(out))
    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Metric", "Column", "Value", "N"]
    assert rows[1] == ["text_accuracy", "-", "1.0000", "2"]
    assert len(rows) == 4


def test_eval_cli_writes_json(csv_file, tmp_path):
    out = tmp_path / "metrics.json"
    eval_cli.main(["--reference", csv_file("ref.csv", "a,b\n"),
                   "--predicted", csv_file("pred.csv", "a,c\n"),
                   "--json", str(out), "--loglevel", "WARNING"])
    metrics = json.loads(out.read_text(encoding="utf-8"))
    assert metrics["text_accuracy"] == pytest.approx(0.5)
    assert metrics["column_accuracy"][1] == {"column": 1, "accuracy": 0.0, "matched": 0, "n": 1}


def test_rows_wider_than_the_first_are_read(csv_file):
    result = evaluate_tables(csv_file("ref.csv", "a\nb,c,d\n"), csv_file("pred.csv", "a,,\nb,c,x\n"))
    assert result.reference_shape == result.predicted_shape == (2, 3)
    assert (result.matched_cells, result.total_cells) == (5, 6)
    assert [m.matched for m in result.column_accuracy] == [2, 2, 1]
