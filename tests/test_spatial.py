from conftest import mansion_from_lines

from haunted_api.mansion.layout import MansionLayout
from haunted_api.mansion.spatial import cell_kind_at, get_room_at, is_wall
from haunted_api.mansion.tiles import CellKind

LINES = [
    "#####",
    "#R.R#",
    "#####",
]


def test_is_wall_floors_coordinates():
    layout = MansionLayout.from_lines(LINES)

    assert is_wall(layout, 0.9, 1.5) is True
    assert is_wall(layout, 1.0, 1.0) is False
    assert is_wall(layout, 2.99, 1.99) is False
    assert is_wall(layout, 4.0, 1.0) is True


def test_out_of_bounds_is_wall_and_never_raises():
    layout = MansionLayout.from_lines(LINES)

    for x, y in [(-0.1, 1), (1, -0.1), (5.0, 1), (1, 3.0), (-100, -100), (1e9, 1e9)]:
        assert is_wall(layout, x, y) is True
        assert cell_kind_at(layout, x, y) is None


def test_cell_kind_at():
    layout = MansionLayout.from_lines(LINES)
    assert cell_kind_at(layout, 1.5, 1.5) == CellKind.ROOM
    assert cell_kind_at(layout, 2.2, 1.7) == CellKind.EMPTY


def test_get_room_at_matches_truncated_cell():
    mansion = mansion_from_lines(LINES)
    first, second = mansion.rooms

    assert get_room_at(mansion.rooms, (1.0, 1.0)) is first
    assert get_room_at(mansion.rooms, (1.95, 1.4)) is first
    assert get_room_at(mansion.rooms, (3.5, 1.5)) is second
    assert get_room_at(mansion.rooms, (2.5, 1.5)) is None
    assert get_room_at(mansion.rooms, (-3, 99)) is None


def test_layout_get_raises_but_safe_get_does_not():
    layout = MansionLayout.from_lines(LINES)
    assert layout.safe_get(-1, 0) is None
    try:
        layout.get(-1, 0)
    except IndexError:
        pass
    else:  # pragma: no cover
        raise AssertionError("get() must raise on out-of-bounds access")


def test_layout_rows_roundtrip():
    layout = MansionLayout.from_lines(LINES)
    assert layout.to_lines() == LINES
    assert MansionLayout.from_rows(layout.as_rows()) == layout
    assert layout.as_rows()[1] == [1, 2, 0, 2, 1]
