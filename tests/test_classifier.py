import pytest

from haunted_api.models import TIMEOUT, ApiError, MonsterArchetype, Position
from haunted_api.monsters.classifier import classify, profile_for, signal_from_error, spawn_monster


@pytest.mark.parametrize(
    "signal,expected",
    [
        (TIMEOUT, MonsterArchetype.WRAITH),
        (500, MonsterArchetype.DEMON),
        (501, MonsterArchetype.DEMON),
        (599, MonsterArchetype.DEMON),
        (502, MonsterArchetype.VAMPIRE),
        (503, MonsterArchetype.VAMPIRE),
        (504, MonsterArchetype.VAMPIRE),
        (401, MonsterArchetype.GHOST),
        (403, MonsterArchetype.GHOST),
        (404, MonsterArchetype.ZOMBIE),
        (422, MonsterArchetype.ZOMBIE),
        (302, MonsterArchetype.GHOST),
        (101, MonsterArchetype.GHOST),
        (0, MonsterArchetype.DEMON),
        (999, MonsterArchetype.DEMON),
    ],
)
def test_mapping(signal, expected):
    assert classify(signal) is expected


def test_total_and_deterministic_over_status_space():
    first = {code: classify(code) for code in range(0, 700)}
    second = {code: classify(code) for code in range(0, 700)}
    assert first == second
    assert all(isinstance(a, MonsterArchetype) for a in first.values())
    assert classify(TIMEOUT) is classify(TIMEOUT)


def test_server_errors_more_aggressive_than_client_errors():
    assert profile_for(classify(500)).aggression > profile_for(classify(404)).aggression
    assert profile_for(classify(503)).aggression > profile_for(classify(401)).aggression


def test_every_archetype_has_fixed_speed():
    for archetype in MonsterArchetype:
        profile = profile_for(archetype)
        assert profile.archetype is archetype
        assert profile.base_speed > 0
    assert profile_for(MonsterArchetype.DEMON).base_speed > profile_for(MonsterArchetype.ZOMBIE).base_speed


def test_rejects_unknown_signal_types():
    with pytest.raises(TypeError):
        classify("teapot")
    with pytest.raises(TypeError):
        classify(True)


def test_signal_from_error():
    assert signal_from_error(ApiError(message="slow", is_timeout=True, status=504)) == TIMEOUT
    assert signal_from_error(ApiError(message="nope", status=404)) == 404
    # No status reported (connection refused) counts as a server fault
    assert signal_from_error(ApiError(message="refused")) == 500


def test_spawn_monster_uses_profile():
    monster = spawn_monster(ApiError(message="bad gateway", status=502), Position(3, 4))
    assert monster.archetype is MonsterArchetype.VAMPIRE
    assert monster.position == Position(3, 4)
    assert monster.signal == 502
    assert monster.active is True
    assert monster.speed == profile_for(MonsterArchetype.VAMPIRE).base_speed
    assert monster.age == 0
