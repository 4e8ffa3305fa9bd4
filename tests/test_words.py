from layout_table_extractor.words import merge_words


def test_evenly_spaced_glyphs_become_one_word(fragment):
    words = merge_words([fragment(0, "A"), fragment(10, "B"), fragment(20, "C")])
    assert [w.text for w in words] == ["ABC"]
    assert (words[0].left, words[0].width) == (0, 28)


def test_space_sized_gap_starts_a_new_word_with_trailing_space(fragment):
    words = merge_words([fragment(0, "A"), fragment(10, "B"), fragment(21, "C"), fragment(31, "D")])
    assert [w.text for w in words] == ["AB ", "CD"]


def test_vertical_ruling_blocks_merge(fragment, vline):
    words = merge_words([fragment(0, "A"), fragment(10, "B")], vertical_rulings=[vline(9, 0, 100)])
    assert [w.text for w in words] == ["A", "B"]


def test_ruling_outside_the_pair_does_not_block(fragment, vline):
    words = merge_words([fragment(0, "A"), fragment(10, "B")], vertical_rulings=[vline(50, 0, 100)])
    assert [w.text for w in words] == ["AB"]


def test_bare_space_fragments_get_no_extra_space(fragment):
    words = merge_words([fragment(0, "A"), fragment(11, " ", width=3), fragment(17, "B")])
    assert [w.text for w in words] == ["A", " ", "B"]


def test_input_fragments_are_left_untouched(fragment):
    raw = [fragment(0, "A"), fragment(10, "B")]
    merge_words(raw)
    assert [te.text for te in raw] == ["A", "B"]
    assert raw[0].right == 8


def test_lines_are_kept_apart(fragment):
    words = merge_words([fragment(0, "A"), fragment(10, "B"), fragment(0, "C", top=20)])
    assert [w.text for w in words] == ["AB", "C"]


def test_no_fragments():
    assert merge_words([]) == []
