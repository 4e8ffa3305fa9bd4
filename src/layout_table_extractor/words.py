from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence

from .fragments import TextFragment
from .rulings import Ruling

log = logging.getLogger(__name__)


def _crosses_ruling(word: TextFragment, te: TextFragment, ruling_xs: Sequence[float]) -> bool:
    # a glyph starting left of a column border stays left of it
    return any(word.left < x < te.left for x in ruling_xs)


def merge_words(fragments: Iterable[TextFragment],
                vertical_rulings: Optional[Sequence[Ruling]] = None,
                ) -> List[TextFragment]:
    """Fuse adjacent glyph fragments into words, in the order given.

    Each fragment is compared with the word currently being built. It is
    merged into that word when ``should_merge`` holds and no vertical ruling
    lies between them; otherwise it starts a new word, and the previous word
    gets a trailing space if the gap looks like one.

    The input fragments are not modified; merged copies are returned. The
    result is already merged, so do not feed it through here again.
    """
    slots: List[Optional[TextFragment]] = [te.copy() for te in fragments]
    if not slots:
        return []
    ruling_xs = [r.left for r in vertical_rulings or []]

    anchor = 0
    for i in range(1, len(slots)):
        word = slots[anchor]
        te = slots[i]
        if word.should_merge(te) and not _crosses_ruling(word, te, ruling_xs):
            word.merge(te)
            slots[i] = None
            continue
        if word.text != " " and te.text != " " and word.should_add_space(te):
            word.text += " "
        anchor = i

    words = [te for te in slots if te is not None]
    log.debug("merge_words: %d fragmentos -> %d palabras", len(slots), len(words))
    return words
