import asyncio

from conftest import ScriptedExecutor, fail, make_endpoints, mansion_from_lines

from haunted_api.config import EngineConfig
from haunted_api.engine.session import GameSession
from haunted_api.explorer import AutoExplorer, plan_route
from haunted_api.models import EndpointCollection, GamePhase

MAZE = [
    "#######",
    "#R.#..#",
    "##.#.##",
    "#..#.R#",
    "#.....#",
    "#######",
]


def test_plan_route_shortest_path():
    mansion = mansion_from_lines(MAZE)
    start, goal = (r.position for r in mansion.rooms)

    route = plan_route(mansion.layout, start, goal)

    assert route[-1] == goal
    assert len(route) == 8
    for a, b in zip([start] + route, route):
        assert abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1
        assert mansion.layout.is_walkable(*b)


def test_plan_route_trivial_and_unreachable():
    mansion = mansion_from_lines(["#######", "#R.#.R#", "#######"])
    start, goal = (r.position for r in mansion.rooms)

    assert plan_route(mansion.layout, start, start) == []
    assert plan_route(mansion.layout, start, goal) is None
    assert plan_route(mansion.layout, start, (0, 0)) is None


def test_explorer_collects_everything(corridor_mansion, collection_for):
    executor = ScriptedExecutor()
    session = GameSession(collection_for(corridor_mansion), executor, mansion=corridor_mansion)

    report = asyncio.run(AutoExplorer(session).run())

    assert report.phase is GamePhase.VICTORY
    assert report.collected == report.total_rooms == 3
    assert report.rooms_visited == 3
    assert report.moves > 0
    assert executor.calls == ["ep1", "ep2", "ep3"]


def test_explorer_on_generated_mansion():
    endpoints = tuple(make_endpoints(7))
    executor = ScriptedExecutor({"ep4": fail(502)})
    session = GameSession(EndpointCollection(name="gen", endpoints=endpoints), executor, seed=21)

    report = asyncio.run(AutoExplorer(session, tick_monsters=False).run())

    assert report.rooms_visited == 7
    assert report.collected == 6
    assert report.monsters == 1
    assert report.phase is GamePhase.EXPLORING
    assert sorted(executor.calls) == sorted(e.id for e in endpoints)


def test_monster_can_end_the_walk(corridor_mansion, collection_for):
    config = EngineConfig(capture_grace_ticks=0, monster_step_factor=1.0)
    session = GameSession(
        collection_for(corridor_mansion),
        ScriptedExecutor({"ep1": fail(500)}),
        config=config,
        mansion=corridor_mansion,
    )

    report = asyncio.run(AutoExplorer(session).run())
    assert report.phase is GamePhase.GAME_OVER
    assert report.collected < 3
