from dataclasses import replace

import pytest

from haunted_api.config import EngineConfig
from haunted_api.engine.state_machine import begin_visit, new_game, resolve_visit, toggle_flashlight
from haunted_api.visibility import fade, visible_cells, visible_monsters

from conftest import fail


def test_fade_linear_to_edge():
    assert fade(0.0, 3.0) == 1.0
    assert fade(1.5, 3.0) == pytest.approx(0.5)
    assert fade(3.0, 3.0) == 0.0
    assert fade(4.0, 3.0) == 0.0


def test_dark_shows_only_cells_in_radius(corridor_mansion):
    state = new_game(corridor_mansion)
    cells = {v.cell: v for v in visible_cells(state, EngineConfig(vision_radius=3.0))}

    assert cells[(1, 1)].alpha == 1.0
    assert (4, 1) in cells
    assert (5, 1) not in cells
    assert all(0.0 <= v.alpha <= 1.0 for v in cells.values())
    assert cells[(2, 1)].alpha > cells[(3, 1)].alpha


def test_flashlight_reveals_everything(corridor_mansion):
    state = toggle_flashlight(new_game(corridor_mansion))
    cells = visible_cells(state)

    assert len(cells) == state.layout.width * state.layout.height
    assert all(v.alpha == 1.0 for v in cells)


def test_visible_monsters(corridor_mansion):
    state, room = begin_visit(new_game(corridor_mansion))
    state = resolve_visit(state, room.id, fail(500))

    seen = visible_monsters(state)
    assert len(seen) == 1 and seen[0][1] == 1.0

    far = EngineConfig(vision_radius=0.5)
    state = replace(state, player=replace(state.player, position=state.player.position.offset(3, 0)))
    assert visible_monsters(state, far) == []
    assert len(visible_monsters(toggle_flashlight(state), far)) == 1
