import pytest

from layout_table_extractor.grid_builder import Cell, Spreadsheet
from layout_table_extractor.spatial import Rectangle


def _real(cells):
    return [c for c in cells if not c.placeholder]


def _placeholders(cells):
    return [c for c in cells if c.placeholder]


@pytest.mark.parametrize("xs, ys", [
    ([0, 100, 200], [0, 50, 100]),
    ([0, 100, 200, 300], [0, 20, 40]),
    ([10, 60], [5, 25, 45, 65, 85]),
])
def test_perfect_lattice_gives_one_cell_per_gap(lattice, xs, ys):
    sheet = Spreadsheet(lattice(xs, ys))
    assert len(_real(sheet.cells)) == (len(xs) - 1) * (len(ys) - 1)
    assert not _placeholders(sheet.cells)
    assert not any(c.merged for c in sheet.cells)
    assert [len(row) for row in sheet.rows()] == [len(xs) - 1] * (len(ys) - 1)
    assert len(sheet.cols()) == len(xs) - 1


def test_duplicate_rulings_do_not_duplicate_cells(lattice):
    rulings = lattice([0, 100, 200], [0, 50, 100])
    sheet = Spreadsheet(rulings + rulings)
    assert len(sheet.cells) == 4


def test_top_row_merged_over_interior_vertical(hline, vline):
    rulings = [hline(0, 0, 200), hline(50, 0, 200), hline(100, 0, 200),
               vline(0, 0, 100), vline(200, 0, 100), vline(100, 50, 100)]
    sheet = Spreadsheet(rulings)
    top_row, bottom_row = sheet.rows()

    merged, placeholder = top_row
    assert merged.merged and not merged.placeholder
    assert merged.bbox == Rectangle(0, 0, 200, 50)
    assert placeholder.placeholder
    assert (placeholder.left, placeholder.bbox.width, placeholder.bbox.height) == (100, 0, 50)

    assert [c.bbox for c in bottom_row] == [Rectangle(50, 0, 100, 50), Rectangle(50, 100, 100, 50)]
    assert not any(c.merged or c.placeholder for c in bottom_row)


def test_span_over_k_verticals_adds_k_placeholders(hline, vline):
    rulings = [hline(0, 0, 300), hline(50, 0, 300), hline(100, 0, 300),
               vline(0, 0, 100), vline(300, 0, 100), vline(100, 50, 100), vline(200, 50, 100)]
    sheet = Spreadsheet(rulings)
    merged = [c for c in sheet.cells if c.merged]
    assert len(merged) == 1
    placeholders = _placeholders(sheet.cells)
    assert len(placeholders) == 2
    assert all(p.top == merged[0].top and p.bbox.height == merged[0].bbox.height for p in placeholders)
    assert sorted(p.left for p in placeholders) == [100, 200]


def test_span_over_both_axes_adds_double_placeholder(hline, vline):
    rulings = [
        hline(0, 0, 300), hline(100, 200, 300), hline(200, 0, 300), hline(300, 0, 300),
        vline(0, 0, 300), vline(100, 200, 300), vline(200, 0, 300), vline(300, 0, 300),
    ]
    sheet = Spreadsheet(rulings)

    merged = [c for c in sheet.cells if c.merged]
    assert [c.bbox for c in merged] == [Rectangle(0, 0, 200, 200)]
    assert len(_real(sheet.cells)) == 6

    doubles = [p for p in _placeholders(sheet.cells) if p.bbox.width == 0 and p.bbox.height == 0]
    assert [(p.top, p.left) for p in doubles] == [(100, 100)]
    assert [len(row) for row in sheet.rows()] == [3, 3, 3]
    assert [len(col) for col in sheet.cols()] == [3, 3, 3]


def test_short_header_row_gets_fillers(hline, vline):
    rulings = [hline(0, 100, 200), hline(50, 0, 200), hline(100, 0, 200),
               vline(0, 50, 100), vline(100, 0, 100), vline(200, 0, 100)]
    sheet = Spreadsheet(rulings)
    header = sheet.rows()[0]

    assert [c.left for c in header] == [0, 100]
    assert header[0].placeholder and header[0].bbox.area == 0
    assert len(sheet.cells) == 3


def test_fragments_land_in_their_cells(lattice, fragment):
    sheet = Spreadsheet(lattice([0, 100, 200], [0, 50, 100]))
    outside = fragment(500, "far")
    unplaced = sheet.add_fragments([
        fragment(60, "b", top=10), fragment(20, "a", top=10), fragment(20, "c", top=30),
        fragment(110, "x", top=60), outside,
    ])
    assert unplaced == [outside]
    assert sheet.to_rows() == [["abc", ""], ["", "x"]]


def test_text_in_merged_area_goes_to_the_merged_cell(hline, vline, fragment):
    rulings = [hline(0, 0, 200), hline(50, 0, 200), hline(100, 0, 200),
               vline(0, 0, 100), vline(200, 0, 100), vline(100, 50, 100)]
    sheet = Spreadsheet(rulings)
    sheet.add_fragments([fragment(140, "wide", top=20, width=20)])
    assert sheet.to_rows()[0] == ["wide", ""]


def test_cell_text_debug_rendering():
    assert Cell.filler(0, 0).text(debug=True) == "placeholder"
    assert Cell(Rectangle(0, 0, 10, 5)).text(debug=True) == "width: 10 h: 5"
    assert Cell(Rectangle(0, 0, 10, 5)).text() == ""


def test_to_dict(lattice, fragment):
    sheet = Spreadsheet(lattice([0, 100, 200], [0, 50, 100]))
    sheet.add_fragments([fragment(20, "a", top=10)])
    d = sheet.to_dict()
    assert (d["width"], d["height"], d["rows"], d["cols"]) == (200, 100, 2, 2)
    assert len(d["cells"]) == 4
    assert d["cells"][0] == {"top": 0, "left": 0, "width": 100, "height": 50,
                             "text": "a", "placeholder": False, "merged": False}


def test_no_rulings_no_cells():
    sheet = Spreadsheet([])
    assert sheet.cells == []
    assert sheet.rows() == []
    assert sheet.to_rows() == []


def test_interior_vertical_only_in_top_half_merges_bottom_row(hline, vline):
    rulings = [hline(0, 0, 200), hline(50, 0, 200), hline(100, 0, 200),
               vline(0, 0, 100), vline(200, 0, 100), vline(100, 0, 50)]
    sheet = Spreadsheet(rulings)
    top_row, bottom_row = sheet.rows()

    assert [c.bbox for c in top_row] == [Rectangle(0, 0, 100, 50), Rectangle(0, 100, 100, 50)]
    assert not any(c.merged or c.placeholder for c in top_row)

    merged, placeholder = bottom_row
    assert merged.merged and merged.bbox == Rectangle(50, 0, 200, 50)
    assert placeholder.placeholder
    assert (placeholder.top, placeholder.left, placeholder.bbox.height) == (50, 100, 50)


def test_adding_fragments_again_replaces_cell_text(lattice, fragment):
    sheet = Spreadsheet(lattice([0, 100, 200], [0, 50, 100]))
    sheet.add_fragments([fragment(20, "a", top=10)])
    sheet.add_fragments([fragment(20, "a", top=10), fragment(120, "b", top=60)])
    assert sheet.to_rows() == [["a", ""], ["", "b"]]
