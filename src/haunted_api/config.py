from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "HAUNTED_"


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for generation, movement, pursuit and the request collaborator.

    Attributes:
        move_step: Player displacement per accepted move call, in cells.
        monster_step_factor: Multiplier applied to a monster's speed each tick.
        stop_epsilon: A monster closer than this to the player stops moving.
        capture_distance: A monster closer than this to the player ends the game.
        capture_grace_ticks: Ticks a freshly spawned monster must exist before it
            can catch the player; it spawns on the player's own cell.
        vision_radius: Cells visible around the player with the flashlight off.
        room_spacing: Size of each room's lattice slot during generation.
        margin: Cells between the outer wall and the first lattice slot.
        extra_corridor_chance: Probability of carving a loop corridor between
            vertically adjacent slots.
        request_timeout: Seconds the HTTP executor waits before reporting a timeout.
        tick_rate: Updates per second for the fixed-tick loop.
        monsters_blocked_by_walls: Apply the player's wall rule to monsters.
    """

    move_step: float = 0.1
    monster_step_factor: float = 0.05
    stop_epsilon: float = 0.1
    capture_distance: float = 0.5
    capture_grace_ticks: int = 30
    vision_radius: float = 3.0
    room_spacing: int = 4
    margin: int = 2
    extra_corridor_chance: float = 0.25
    request_timeout: float = 10.0
    tick_rate: float = 30.0
    monsters_blocked_by_walls: bool = False

    def __post_init__(self) -> None:
        for name in ("move_step", "monster_step_factor", "vision_radius", "request_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.stop_epsilon < 0 or self.capture_distance < 0 or self.capture_grace_ticks < 0:
            raise ConfigurationError("stop_epsilon, capture_distance and capture_grace_ticks must not be negative")
        if self.room_spacing < 2:
            raise ConfigurationError("room_spacing must be at least 2")
        if self.margin < 1:
            raise ConfigurationError("margin must be at least 1 to keep the outer wall")
        if not 0.0 <= self.extra_corridor_chance <= 1.0:
            raise ConfigurationError("extra_corridor_chance must be within [0, 1]")
        if self.tick_rate < 0:
            raise ConfigurationError("tick_rate must not be negative")

    def with_overrides(self, overrides: Mapping[str, Any]) -> "EngineConfig":
        """Return a copy with known fields replaced; unknown keys are logged and skipped."""
        known = {f.name: f for f in fields(self)}
        values: Dict[str, Any] = {}
        for key, raw in overrides.items():
            field = known.get(key)
            if field is None:
                logger.warning("Ignoring unknown config key '%s'", key)
                continue
            values[key] = _coerce(key, raw, type(getattr(self, key)))
        return replace(self, **values)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from HAUNTED_* environment variables.

        HAUNTED_MOVE_STEP=0.2 overrides move_step, and so on.
        """
        env = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for f in fields(cls):
            key = ENV_PREFIX + f.name.upper()
            if key in env:
                overrides[f.name] = env[key]
        if overrides:
            logger.debug("Config overrides from environment: %s", sorted(overrides))
        return cls().with_overrides(overrides)


def _coerce(name: str, raw: Any, target: type) -> Any:
    if isinstance(raw, target) and not (target is int and isinstance(raw, bool)):
        return raw
    try:
        if target is bool:
            if isinstance(raw, str):
                return raw.strip().lower() in ("1", "true", "yes", "on")
            return bool(raw)
        return target(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from e


def load_config(path: Optional[str | Path] = None) -> EngineConfig:
    """Load engine configuration from YAML, layered over environment overrides.

    If path is None, only defaults and HAUNTED_* variables are used.
    """
    cfg = EngineConfig.from_env()
    if path is None:
        return cfg
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Config file not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {p} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {p} must contain a mapping at the top level")
    section = raw.get("engine", raw) or {}
    logger.info("Loaded engine config from %s", p)
    return cfg.with_overrides(section)


DEFAULT_CONFIG = EngineConfig()
