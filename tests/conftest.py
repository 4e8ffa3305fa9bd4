from __future__ import annotations

from typing import Iterable, List

import pytest

from layout_table_extractor.fragments import TextFragment
from layout_table_extractor.rulings import Ruling


@pytest.fixture
def fragment():
    """Factory for fragments on one text band; width_of_space defaults to 3."""

    def make(left: float, text: str, top: float = 0.0, width: float = 8.0,
             height: float = 10.0, width_of_space: float = 3.0) -> TextFragment:
        return TextFragment.at(top, left, width, height, text,
                               font="Helvetica", font_size=10.0, width_of_space=width_of_space)

    return make


@pytest.fixture
def hline():
    def make(y: float, x1: float, x2: float) -> Ruling:
        return Ruling.along(True, y, x1, x2)

    return make


@pytest.fixture
def vline():
    def make(x: float, y1: float, y2: float) -> Ruling:
        return Ruling.along(False, x, y1, y2)

    return make


@pytest.fixture
def lattice(hline, vline):
    """Full grid of rulings crossing at every xs/ys pair."""

    def make(xs: Iterable[float], ys: Iterable[float]) -> List[Ruling]:
        xs, ys = list(xs), list(ys)
        return ([hline(y, xs[0], xs[-1]) for y in ys]
                + [vline(x, ys[0], ys[-1]) for x in xs])

    return make
