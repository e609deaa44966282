import numpy as np

from tilebrot.coloring.hue_cycle import HueCycleColoring


def test_never_escaped_is_black():
    assert HueCycleColoring().color(0) == (0, 0, 0)
    assert HueCycleColoring(scale=7.0, exponent=0.5, period=97, offset=3).color(0) == (0, 0, 0)


def test_color_is_deterministic():
    first = [HueCycleColoring().color(n) for n in range(1, 400)]
    second = [HueCycleColoring().color(n) for n in range(1, 400)]
    assert first == second


def test_escaped_counts_are_not_black():
    coloring = HueCycleColoring()
    assert any(coloring.color(n) != (0, 0, 0) for n in range(1, 20))


def test_colorize_matches_scalar_path():
    coloring = HueCycleColoring()
    counts = np.arange(0, 300, dtype=np.int32).reshape(15, 20)
    rgb = coloring.colorize(counts)
    assert rgb.shape == (15, 20, 3)
    assert rgb.dtype == np.uint8
    for (r, c), n in np.ndenumerate(counts):
        assert tuple(int(v) for v in rgb[r, c]) == coloring.color(int(n))


def test_colorize_all_interior():
    rgb = HueCycleColoring().colorize(np.zeros((4, 4), dtype=np.int32))
    assert not rgb.any()
