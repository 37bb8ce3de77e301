import itertools
import random

import pytest

from drawerlayout.catalog import default_catalog
from drawerlayout.geometry import find_violations, placement_size
from drawerlayout.normalizer import Ok, PayloadSource, Rejected
from drawerlayout.session import LayoutSession, placement_edits
from drawerlayout.state import LayoutState, Placement, PlacementStatus, Point, Size, SuggestStatus

CATALOG = default_catalog()


def _session(width=24, length=18, placements=()):
    counter = itertools.count(1)
    return LayoutSession(
        CATALOG,
        LayoutState(width, length, tuple(placements)),
        id_factory=lambda: f"p{next(counter)}",
        rng=random.Random(7),
    )


def test_full_drawer_blocks_second_bin():
    session = _session(6, 6)
    assert session.add_placement("bin-6x6", 0, 0).status is PlacementStatus.PLACED
    assert session.add_placement("bin-2x2", 0, 0).status is PlacementStatus.BLOCKED
    assert len(session.state.placements) == 1


def test_direct_collision_autofits():
    session = _session(4, 4)
    first = session.add_placement("bin-2x2", 0, 0)
    second = session.add_placement("bin-2x2", 0, 0)
    assert first.status is PlacementStatus.PLACED
    assert first.position == Point(0, 0)
    assert second.status is PlacementStatus.AUTOFIT
    assert second.position == Point(2, 0)
    assert find_violations(session.state, CATALOG) == []


def test_add_clamps_into_drawer_and_uses_default_color():
    session = _session(10, 10)
    result = session.add_placement("bin-4x4", 50, -3)
    assert result.status is PlacementStatus.PLACED
    assert result.position == Point(6, 0)
    placement = session.state.placements[0]
    assert placement.color == "#ffffff"
    assert placement.width is None and placement.length is None


def test_add_unknown_or_oversized_bin_is_blocked():
    session = _session(6, 6)
    assert session.add_placement("missing-bin").status is PlacementStatus.BLOCKED
    assert session.add_placement("bin-8x8").status is PlacementStatus.BLOCKED
    assert not session.can_undo


def test_move_into_sibling_autofits():
    session = _session(10, 4, [
        Placement(id="fixed", bin_id="bin-4x4", x=0, y=0),
        Placement(id="mover", bin_id="bin-2x2", x=8, y=0),
    ])
    result = session.move_placement("mover", 1, 1)
    assert result.status is PlacementStatus.AUTOFIT
    moved = session.state.find("mover")
    assert (moved.x, moved.y) == (result.position.x, result.position.y)
    assert find_violations(session.state, CATALOG) == []


def test_move_ignores_own_rectangle():
    session = _session(6, 6, [Placement(id="a", bin_id="bin-4x4", x=0, y=0)])
    result = session.move_placement("a", 1, 1)
    assert result.status is PlacementStatus.PLACED
    assert result.position == Point(1, 1)


def test_move_unknown_placement_is_blocked():
    session = _session()
    assert session.move_placement("nope", 0, 0).status is PlacementStatus.BLOCKED


def test_import_overlap_rejected_and_state_unchanged():
    session = _session()
    before = session.state
    result = session.import_state({
        "drawerWidth": 2,
        "drawerLength": 2,
        "placements": [
            {"id": "a", "binId": "bin-2x2", "x": 0, "y": 0},
            {"id": "b", "binId": "bin-2x2", "x": 0, "y": 0},
        ],
    })
    assert isinstance(result, Rejected)
    assert session.state is before
    assert not session.can_undo


def test_import_text_replaces_state_and_can_be_undone():
    session = _session()
    result = session.import_state(
        '{"drawerWidth": 8, "drawerLength": 8, "placements": [{"id": "x", "binId": "bin-2x2", "x": 1, "y": 1}]}',
        PayloadSource.FILE,
    )
    assert isinstance(result, Ok)
    assert session.state.drawer_width == 8
    assert session.undo()
    assert session.state.drawer_width == 24


def test_suggest_pack_separates_stacked_bins():
    session = _session(4, 4, [
        Placement(id="a", bin_id="bin-2x2", x=0, y=0),
        Placement(id="b", bin_id="bin-2x2", x=0, y=0),
    ])
    result = session.suggest_layout("pack")
    assert result.status is SuggestStatus.APPLIED
    assert result.moved >= 1
    assert find_violations(session.state, CATALOG) == []
    assert session.can_undo


def test_suggest_without_moves_does_not_push_history():
    session = _session(4, 4, [Placement(id="a", bin_id="bin-2x2", x=0, y=0)])
    result = session.suggest_layout()
    assert result.status is SuggestStatus.APPLIED
    assert result.moved == 0
    assert not session.can_undo


def test_blocked_suggest_leaves_state():
    placements = [Placement(id=f"p{i}", bin_id="bin-4x4", x=0, y=0) for i in range(5)]
    session = _session(8, 8, placements)
    before = session.state
    assert session.suggest_layout().status is SuggestStatus.BLOCKED
    assert session.state is before


def test_resize_into_sibling_is_blocked():
    session = _session(10, 10, [
        Placement(id="a", bin_id="bin-2x2", x=0, y=0),
        Placement(id="b", bin_id="bin-2x2", x=4, y=0),
    ])
    result = session.update_placement("a", width=6)
    assert result.status is PlacementStatus.BLOCKED
    a = session.state.find("a")
    assert a.width is None and a.length is None
    assert placement_size(a, CATALOG).width == 2


@pytest.mark.parametrize("width,length", [(1.5, 2), (2, 8.5), (8, 8)])
def test_resize_outside_range_or_drawer_is_blocked(width, length):
    session = _session(10, 6, [Placement(id="a", bin_id="bin-2x2", x=4, y=0)])
    assert session.update_placement("a", width=width, length=length).status is PlacementStatus.BLOCKED


def test_resize_recolor_relabel_keep_position():
    session = _session(10, 10, [Placement(id="a", bin_id="bin-2x2", x=1, y=1)])
    result = session.update_placement("a", width=4, length=3, color="#F00", label="L" * 90)
    assert result.status is PlacementStatus.PLACED
    a = session.state.find("a")
    assert (a.x, a.y, a.width, a.length) == (1, 1, 4, 3)
    assert a.color == "#f00"
    assert len(a.label) == 60


def test_invalid_color_is_blocked():
    session = _session(10, 10, [Placement(id="a", bin_id="bin-2x2", x=1, y=1)])
    assert session.update_placement("a", color="blue").status is PlacementStatus.BLOCKED
    assert not session.can_undo


def test_set_drawer_size_rounds_and_refuses_to_clip():
    session = _session(10, 10, [Placement(id="a", bin_id="bin-4x4", x=4, y=4)])
    assert session.set_drawer_size(12.1, 9.9).status is PlacementStatus.PLACED
    assert (session.state.drawer_width, session.state.drawer_length) == (12.0, 10.0)
    assert session.set_drawer_size(7, 10).status is PlacementStatus.BLOCKED
    assert session.set_drawer_size(0, 10).status is PlacementStatus.BLOCKED
    assert session.set_drawer_size(500, 10).status is PlacementStatus.BLOCKED
    assert session.state.drawer_width == 12.0


def test_title_is_truncated_and_pushed_once():
    session = _session()
    assert session.set_layout_title("T" * 100) == "T" * 80
    session.set_layout_title("T" * 100)
    assert len(session.history.past) == 1


def test_remove_and_clear():
    session = _session(10, 10, [
        Placement(id="a", bin_id="bin-2x2", x=0, y=0),
        Placement(id="b", bin_id="bin-2x2", x=2, y=0),
        Placement(id="c", bin_id="bin-2x2", x=4, y=0),
    ])
    assert session.remove_placement("a")
    assert not session.remove_placement("a")
    assert session.remove_placements(["b", "zzz"]) == 1
    assert session.clear_placements() == 1
    assert session.clear_placements() == 0
    assert len(session.history.past) == 3


def test_undo_redo_through_session():
    session = _session()
    session.add_placement("bin-2x2")
    session.add_placement("bin-2x2")
    assert session.undo()
    assert len(session.state.placements) == 1
    assert session.redo()
    assert len(session.state.placements) == 2
    assert not session.redo()


def test_export_state_shape():
    session = _session(6, 6)
    session.set_layout_title("Desk")
    session.add_placement("bin-2x4", 1, 1)
    assert session.export_state() == {
        "layoutTitle": "Desk",
        "drawerWidth": 6,
        "drawerLength": 6,
        "placements": [{"id": "p1", "binId": "bin-2x4", "x": 1, "y": 1, "color": "#ffffff"}],
    }


def test_reset_clears_history():
    session = _session()
    session.add_placement("bin-2x2")
    session.reset()
    assert session.state.placements == ()
    assert not session.can_undo


def test_relabel_keeps_long_stock_bin_size_and_color():
    session = _session(12, 12, [Placement(id="a", bin_id="bin-2x10", x=0, y=0, color="#dc2626")])
    target = session.state.find("a")
    edits = placement_edits(target, session.size_of(target), width=2, length=10, color="#DC2626", label="pens")
    assert edits == {"label": "pens"}
    assert session.update_placement("a", **edits).status is PlacementStatus.PLACED
    a = session.state.find("a")
    assert (a.width, a.length, a.color, a.label) == (None, None, "#dc2626", "pens")


def test_long_stock_bin_can_be_narrowed_and_keep_its_length():
    session = _session(12, 12, [Placement(id="a", bin_id="bin-2x10", x=0, y=0)])
    assert session.update_placement("a", width=3).status is PlacementStatus.PLACED
    assert placement_size(session.state.find("a"), CATALOG) == Size(3, 10)
    assert session.update_placement("a", length=10.5).status is PlacementStatus.BLOCKED


def _quarter(rng, upper):
    return rng.randint(0, int(upper * 4)) / 4


@pytest.mark.parametrize("seed", range(30))
def test_committed_states_never_overlap_or_leave_drawer(seed):
    rng = random.Random(seed)
    session = _session(rng.randint(6, 16), rng.randint(6, 16))
    bin_ids = [spec.id for spec in CATALOG]
    for _ in range(40):
        state = session.state
        action = rng.random()
        if action < 0.5 or not state.placements:
            result = session.add_placement(
                rng.choice(bin_ids), _quarter(rng, state.drawer_width), _quarter(rng, state.drawer_length)
            )
        elif action < 0.85:
            result = session.move_placement(
                rng.choice(state.placements).id,
                _quarter(rng, state.drawer_width + 2) - 1,
                _quarter(rng, state.drawer_length + 2) - 1,
            )
        else:
            result = session.update_placement(
                rng.choice(state.placements).id,
                width=rng.choice([2, 2.5, 3.25, 4, 6]),
                length=rng.choice([2, 3, 4.75, 8]),
            )
        if result.status is PlacementStatus.BLOCKED:
            assert session.state is state
        else:
            assert find_violations(session.state, CATALOG) == []
