import random

import pytest

from drawerlayout.autofit import find_first_fit, has_fractional_placements
from drawerlayout.catalog import BinSpec, CatalogIndex
from drawerlayout.geometry import has_collision
from drawerlayout.state import Placement, Point, Size

BIN_2X2 = BinSpec(id="b1", name="2x2", width=2, length=2)
BIN_4X4 = BinSpec(id="b2", name="4x4", width=4, length=4)
BIN_HALF = BinSpec(id="b3", name="0.5x0.5", width=0.5, length=0.5, height=1)
CATALOG = CatalogIndex([BIN_2X2, BIN_4X4, BIN_HALF])


def test_has_fractional_placements():
    placements = [Placement(id="p1", bin_id="b1", x=0.5, y=0)]
    assert not has_fractional_placements([], 0, 0)
    assert has_fractional_placements([], 0.5, 0)
    assert has_fractional_placements(placements, 0, 0)


def test_returns_none_when_no_space():
    placements = [Placement(id="p1", bin_id="b2", x=0, y=0)]
    assert find_first_fit(BIN_2X2.size, 0, 0, placements, CATALOG, 4, 4) is None


def test_returns_none_when_bin_larger_than_drawer():
    assert find_first_fit(BIN_4X4.size, 0, 0, [], CATALOG, 3, 6) is None


def test_returns_nearest_free_cell():
    placements = [
        Placement(id="p1", bin_id="b1", x=0, y=0),
        Placement(id="p2", bin_id="b1", x=2, y=0),
    ]
    assert find_first_fit(BIN_2X2.size, 0, 0, placements, CATALOG, 6, 6) == Point(0, 2)


def test_honors_fractional_start():
    assert find_first_fit(BIN_2X2.size, 0.5, 0.5, [], CATALOG, 6, 6) == Point(0.5, 0.5)


def test_uses_half_steps_with_fractional_placements():
    placements = [
        Placement(id="p1", bin_id="b3", x=0, y=0),
        Placement(id="p2", bin_id="b3", x=0.5, y=0),
    ]
    assert find_first_fit(BIN_HALF.size, 0, 0, placements, CATALOG, 1, 1) == Point(0, 0.5)


def test_ties_keep_row_major_order():
    # (2,0) and (0,2) are equidistant from the origin; the row sweep sees (2,0) first
    placements = [Placement(id="p1", bin_id="b1", x=0, y=0)]
    assert find_first_fit(BIN_2X2.size, 0, 0, placements, CATALOG, 6, 6) == Point(2, 0)


def _brute_force(size, sx, sy, placements, dw, dl):
    step = 0.5 if has_fractional_placements(placements, sx, sy) else 1.0
    best = None
    y = 0.0
    while y <= dl - size.length + 1e-9:
        x = 0.0
        while x <= dw - size.width + 1e-9:
            if not has_collision(size, x, y, placements, CATALOG):
                d2 = (x - sx) ** 2 + (y - sy) ** 2
                if best is None or d2 < best[0]:
                    best = (d2, Point(x, y))
            x += step
        y += step
    return best[1] if best else None


def _random_case(seed):
    rng = random.Random(seed)
    dw = rng.randint(4, 14)
    dl = rng.randint(4, 14)
    placements = []
    for i in range(rng.randint(0, 8)):
        spec = rng.choice([BIN_2X2, BIN_4X4])
        x = rng.randint(0, max(0, dw - int(spec.width)))
        y = rng.randint(0, max(0, dl - int(spec.length)))
        if spec.width <= dw and spec.length <= dl and not has_collision(spec.size, x, y, placements, CATALOG):
            placements.append(Placement(id=f"p{i}", bin_id=spec.id, x=x, y=y))
    start = (rng.choice([0, 0.5, 1, 3]) + rng.randint(0, 3), rng.randint(0, dl))
    return Size(2, 2), start, placements, dw, dl


@pytest.mark.parametrize("seed", range(40))
def test_matches_brute_force_search(seed):
    size, (sx, sy), placements, dw, dl = _random_case(seed)
    result = find_first_fit(size, sx, sy, placements, CATALOG, dw, dl)
    expected = _brute_force(size, sx, sy, placements, dw, dl)
    assert result == expected
    if result is not None:
        assert 0 <= result.x <= dw - size.width
        assert 0 <= result.y <= dl - size.length
        assert not has_collision(size, result.x, result.y, placements, CATALOG)
