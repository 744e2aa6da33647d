from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from . import __version__
from .collection import load_collection
from .config import load_config
from .engine.session import GameSession
from .exceptions import HauntedApiError
from .explorer import AutoExplorer
from .http.executor import HttpRequestExecutor
from .inspection import render_ascii
from .logging_config import configure_logging
from .mansion.generator import MansionGenerator
from .models import TIMEOUT, FailureSignal
from .monsters.classifier import classify, profile_for

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="haunted-api",
        description="Haunted API House - explore an API collection as a haunted mansion",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to an engine config YAML file to override defaults.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_map = sub.add_parser("map", help="Generate the mansion for a collection and print it")
    p_map.add_argument("collection", type=Path, help="Collection file (.yaml/.yml/.json)")
    p_map.add_argument("--seed", type=int, default=None, help="Seed for a reproducible layout")

    p_explore = sub.add_parser("explore", help="Walk every room, firing each endpoint's request")
    p_explore.add_argument("collection", type=Path, help="Collection file (.yaml/.yml/.json)")
    p_explore.add_argument("--seed", type=int, default=None, help="Seed for a reproducible layout")
    p_explore.add_argument("--no-monsters", action="store_true", help="Do not advance monsters while walking")

    p_classify = sub.add_parser("classify", help="Show the monster a failure signal spawns")
    p_classify.add_argument("signal", help="HTTP status code or 'timeout'")
    return parser


def _parse_signal(raw: str) -> FailureSignal:
    if raw.strip().lower() == TIMEOUT:
        return TIMEOUT
    try:
        return int(raw)
    except ValueError as e:
        raise HauntedApiError(f"Signal must be an integer status or 'timeout', got {raw!r}") from e


def _cmd_map(args: argparse.Namespace) -> int:
    config = load_config(args.config_path)
    collection = load_collection(args.collection)
    mansion = MansionGenerator(config).generate(collection.endpoints, seed=args.seed)
    for line in mansion.layout.to_lines():
        print(line)
    for room in mansion.rooms:
        print(f"{room.position}: {room.endpoint.method} {room.endpoint.name} ({room.id})")
    return 0


def _cmd_explore(args: argparse.Namespace) -> int:
    config = load_config(args.config_path)
    collection = load_collection(args.collection)
    executor = HttpRequestExecutor(timeout=config.request_timeout)
    session = GameSession(collection, executor, config=config, seed=args.seed)
    explorer = AutoExplorer(session, tick_monsters=not args.no_monsters)

    report = asyncio.run(explorer.run())
    state = session.state
    for line in render_ascii(state):
        print(line)
    for room in state.rooms:
        if room.monster is not None:
            outcome = f"{room.monster.archetype.value} ({room.monster.signal})"
        elif room.visited:
            outcome = "collected"
        else:
            outcome = "unvisited"
        print(f"{room.endpoint.method:7} {room.endpoint.name}: {outcome}")
    print(
        f"{report.phase.name}: {report.collected}/{report.total_rooms} pieces, "
        f"{report.monsters} monsters, {report.moves} moves, score {state.score}"
    )
    return 0 if state.victory else 1


def _cmd_classify(args: argparse.Namespace) -> int:
    signal = _parse_signal(args.signal)
    profile = profile_for(classify(signal))
    print(f"{signal}: {profile.archetype.value} (speed {profile.base_speed}, aggression {profile.aggression})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    configure_logging(default_level=level)

    handlers = {"map": _cmd_map, "explore": _cmd_explore, "classify": _cmd_classify}
    try:
        return handlers[args.command](args)
    except HauntedApiError as e:
        logger.error("%s", e)
        return 2
