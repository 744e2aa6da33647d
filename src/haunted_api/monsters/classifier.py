from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from ..models import TIMEOUT, ApiError, FailureSignal, Monster, MonsterArchetype, Position

logger = logging.getLogger(__name__)

# Status assumed when the executor could not name one (connection refused, DNS, ...)
DEFAULT_FAILURE_STATUS = 500

_GATEWAY_STATUSES = frozenset({502, 503, 504})
_AUTH_STATUSES = frozenset({401, 403, 407})


@dataclass(frozen=True)
class ArchetypeProfile:
    """Fixed behavioural/visual parameters of a monster archetype.

    aggression ranks archetypes from 1 (harmless-looking) to 5; drawing code
    uses color, the pursuit simulation uses base_speed.
    """

    archetype: MonsterArchetype
    base_speed: float
    aggression: int
    color: Tuple[int, int, int]


_PROFILES: Dict[MonsterArchetype, ArchetypeProfile] = {
    MonsterArchetype.ZOMBIE: ArchetypeProfile(MonsterArchetype.ZOMBIE, base_speed=0.6, aggression=1, color=(90, 160, 60)),
    MonsterArchetype.GHOST: ArchetypeProfile(MonsterArchetype.GHOST, base_speed=0.8, aggression=2, color=(220, 220, 255)),
    MonsterArchetype.WRAITH: ArchetypeProfile(MonsterArchetype.WRAITH, base_speed=1.0, aggression=3, color=(120, 80, 200)),
    MonsterArchetype.VAMPIRE: ArchetypeProfile(MonsterArchetype.VAMPIRE, base_speed=1.2, aggression=4, color=(180, 20, 40)),
    MonsterArchetype.DEMON: ArchetypeProfile(MonsterArchetype.DEMON, base_speed=1.5, aggression=5, color=(255, 80, 0)),
}


def classify(signal: FailureSignal) -> MonsterArchetype:
    """Map a failure signal to its monster archetype.

    Total over timeouts and every integer status:
    - timeout -> WRAITH
    - 502/503/504 -> VAMPIRE; any other 5xx -> DEMON
    - 401/403/407 -> GHOST; any other 4xx -> ZOMBIE
    - 1xx-3xx reported as failures -> GHOST
    - anything outside 100-599 -> DEMON
    """
    if signal == TIMEOUT:
        return MonsterArchetype.WRAITH
    if isinstance(signal, bool) or not isinstance(signal, int):
        raise TypeError(f"Failure signal must be an int status or 'timeout', got {signal!r}")
    if 500 <= signal <= 599:
        return MonsterArchetype.VAMPIRE if signal in _GATEWAY_STATUSES else MonsterArchetype.DEMON
    if 400 <= signal <= 499:
        return MonsterArchetype.GHOST if signal in _AUTH_STATUSES else MonsterArchetype.ZOMBIE
    if 100 <= signal <= 399:
        return MonsterArchetype.GHOST
    return MonsterArchetype.DEMON


def profile_for(archetype: MonsterArchetype) -> ArchetypeProfile:
    return _PROFILES[archetype]


def signal_from_error(error: ApiError) -> FailureSignal:
    if error.is_timeout:
        return TIMEOUT
    return error.status or DEFAULT_FAILURE_STATUS


def spawn_monster(error: ApiError, position: Position) -> Monster:
    """Create the active monster a failed request leaves behind at position."""
    signal = signal_from_error(error)
    profile = profile_for(classify(signal))
    logger.debug("Classified failure %r as %s", signal, profile.archetype.value)
    return Monster(
        archetype=profile.archetype,
        position=position,
        signal=signal,
        active=True,
        speed=profile.base_speed,
    )
