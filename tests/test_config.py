import pytest

from haunted_api.config import DEFAULT_CONFIG, EngineConfig, load_config
from haunted_api.exceptions import ConfigurationError


def test_defaults():
    assert DEFAULT_CONFIG.move_step == 0.1
    assert DEFAULT_CONFIG.monster_step_factor == 0.05
    assert DEFAULT_CONFIG.capture_distance == 0.5
    assert DEFAULT_CONFIG.monsters_blocked_by_walls is False


def test_from_env_coerces_values():
    env = {
        "HAUNTED_MOVE_STEP": "0.25",
        "HAUNTED_CAPTURE_GRACE_TICKS": "10",
        "HAUNTED_MONSTERS_BLOCKED_BY_WALLS": "yes",
        "UNRELATED": "1",
    }
    cfg = EngineConfig.from_env(env)

    assert cfg.move_step == 0.25
    assert cfg.capture_grace_ticks == 10
    assert cfg.monsters_blocked_by_walls is True
    assert cfg.vision_radius == DEFAULT_CONFIG.vision_radius


def test_bad_env_value():
    with pytest.raises(ConfigurationError):
        EngineConfig.from_env({"HAUNTED_ROOM_SPACING": "wide"})


def test_load_config_engine_section(tmp_path, monkeypatch):
    monkeypatch.delenv("HAUNTED_VISION_RADIUS", raising=False)
    monkeypatch.setenv("HAUNTED_MOVE_STEP", "0.5")
    path = tmp_path / "engine.yaml"
    path.write_text("engine:\n  vision_radius: 5\n  room_spacing: 6\n  bogus: 1\n", encoding="utf-8")

    cfg = load_config(path)

    assert cfg.vision_radius == 5.0
    assert cfg.room_spacing == 6
    # Environment still applies underneath the file
    assert cfg.move_step == 0.5


def test_load_config_flat_mapping(tmp_path):
    path = tmp_path / "engine.yml"
    path.write_text("tick_rate: 60\n", encoding="utf-8")
    assert load_config(path).tick_rate == 60.0


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(bad)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"move_step": 0},
        {"capture_distance": -1},
        {"room_spacing": 1},
        {"margin": 0},
        {"extra_corridor_chance": 1.5},
        {"tick_rate": -1},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        EngineConfig(**kwargs)
