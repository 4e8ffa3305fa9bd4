from layout_table_extractor.lines import Line, group_by_lines


def test_group_by_lines_uses_vertical_overlap(fragment):
    lines = group_by_lines([
        fragment(0, "a"), fragment(50, "b", top=2), fragment(0, "c", top=30),
    ])
    assert [ln.texts() for ln in lines] == [["a", "b"], ["c"]]
    assert [ln.index for ln in lines] == [0, 1]


def test_group_by_lines_skips_whitespace_only(fragment):
    lines = group_by_lines([fragment(0, "  "), fragment(50, "b", top=40)])
    assert [ln.texts() for ln in lines] == [["b"]]


def test_stacked_text_in_one_column_is_merged_with_a_space(fragment):
    line = Line()
    line.append(fragment(0, "Foo", width=20))
    line.append(fragment(0, "bar", width=20, top=12))
    assert line.texts() == ["Foo bar"]
    assert (line.top, line.bbox.bottom) == (0, 22)


def test_side_by_side_fragments_stay_separate(fragment):
    line = Line()
    line.append(fragment(0, "a"))
    line.append(fragment(50, "b"))
    assert line.texts() == ["a", "b"]
    assert line.bbox.right == 58


def test_line_equality_pads_with_empty_cells(fragment):
    short = Line(fragments=[fragment(0, "a")])
    padded = Line(fragments=[fragment(0, " a "), fragment(10, ""), None])
    assert short == padded
    assert short != Line(fragments=[fragment(0, "b")])
