"""
Pure state transforms for one game session.

Every function takes a GameState and returns a GameState; inputs are never
mutated. Terminal states (victory or game over) come back unchanged from
every transform.

The visitation watcher is split at its asynchronous seam: begin_visit runs
synchronously after the player's position settles and tells the caller which
room's request to issue; resolve_visit folds that request's single outcome
back in once it arrives.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..mansion.generator import Mansion
from ..mansion.spatial import get_room_at, is_wall
from ..models import SCORE_PER_PIECE, GameState, PendingRequest, Player, Position, RequestOutcome, Room
from ..monsters.classifier import spawn_monster
from ..monsters.pursuit import nearest_monster_distance, pursue

logger = logging.getLogger(__name__)


def new_game(mansion: Mansion) -> GameState:
    """Initial state: player standing on the first room's cell, nothing visited."""
    player = Player(position=Position.of_cell(mansion.start))
    state = GameState(player=player, rooms=mansion.rooms, layout=mansion.layout)
    logger.info("New game: %d rooms, player at %s", state.total_rooms, mansion.start)
    return state


def move_player(state: GameState, dx: float, dy: float, config: EngineConfig = DEFAULT_CONFIG) -> GameState:
    """Displace the player by (dx, dy) scaled by config.move_step.

    The move is rejected (state returned unchanged) when the destination cell
    is a wall or outside the grid. Does not trigger requests.
    """
    if state.is_terminal:
        logger.debug("move_player ignored: game is over")
        return state
    target = state.player.position.offset(dx * config.move_step, dy * config.move_step)
    if is_wall(state.layout, target.x, target.y):
        logger.debug("Blocked move by (%s, %s) to (%.2f, %.2f)", dx, dy, target.x, target.y)
        return state
    return replace(state, player=replace(state.player, position=target))


def toggle_flashlight(state: GameState) -> GameState:
    if state.is_terminal:
        return state
    on = not state.player.flashlight_on
    logger.debug("Flashlight %s", "on" if on else "off")
    return replace(state, player=replace(state.player, flashlight_on=on))


def tick_monsters(state: GameState, config: EngineConfig = DEFAULT_CONFIG) -> GameState:
    """Advance every active monster one step and check for a capture."""
    if state.is_terminal:
        return state
    target = state.player.position
    rooms = pursue(state.rooms, target, state.layout, config)
    nearest = nearest_monster_distance(rooms, target, min_age=config.capture_grace_ticks)
    if nearest is not None and nearest < config.capture_distance:
        logger.info("Player caught by a monster at %.2f cells; game over", nearest)
        return replace(state, rooms=rooms, game_over=True)
    return replace(state, rooms=rooms)


def begin_visit(state: GameState) -> Tuple[GameState, Optional[Room]]:
    """Synchronous half of the visitation watcher.

    Refreshes player.current_room. When the player stands in an unvisited
    room and no request is pending, marks that room's request as pending and
    returns the room whose endpoint must now be called. Otherwise returns
    (state, None).
    """
    if state.is_terminal:
        return state, None
    room = get_room_at(state.rooms, (state.player.position.x, state.player.position.y))
    current = room.id if room is not None else None
    if current != state.player.current_room:
        state = replace(state, player=replace(state.player, current_room=current))

    if room is None or room.visited:
        return state, None
    if state.pending_request is not None:
        logger.debug(
            "Room %s entered while request for %s is pending; ignored",
            room.id,
            state.pending_request.room_id,
        )
        return state, None

    pending = PendingRequest(room_id=room.id, endpoint_id=room.endpoint.id)
    logger.info("Entered room %s (%s %s); issuing request", room.id, room.endpoint.method, room.endpoint.url)
    return replace(state, pending_request=pending), room


def resolve_visit(state: GameState, room_id: str, outcome: RequestOutcome) -> GameState:
    """Asynchronous half of the visitation watcher: fold one request outcome in.

    Success collects the room's piece; failure leaves an active monster in the
    room. Either way the room becomes visited, the pending request clears and
    victory is recomputed. Outcomes for a room other than the pending one, or
    arriving after the game ended, are dropped.
    """
    if state.is_terminal:
        logger.info("Discarding outcome for room %s: game already over", room_id)
        return state
    pending = state.pending_request
    if pending is None or pending.room_id != room_id:
        logger.warning("Discarding outcome for room %s: no matching pending request", room_id)
        return state
    room = state.room_by_id(room_id)
    if room is None or room.visited:
        logger.warning("Discarding outcome for room %s: room missing or already visited", room_id)
        return replace(state, pending_request=None)

    player = state.player
    score = state.score
    last_response = state.last_response
    last_error = state.last_error
    if outcome.response is not None:
        updated = replace(room, visited=True, has_collectible=False)
        player = replace(player, collected_pieces=player.collected_pieces + 1)
        score += SCORE_PER_PIECE
        last_response = outcome.response
        logger.info(
            "Room %s succeeded with %d; pieces %d/%d",
            room_id,
            outcome.response.status,
            player.collected_pieces,
            state.total_rooms,
        )
    else:
        monster = spawn_monster(outcome.error, room.origin)  # type: ignore[arg-type]
        updated = replace(room, visited=True, monster=monster)
        last_error = outcome.error
        logger.info("Room %s failed (%s); a %s awakens", room_id, monster.signal, monster.archetype.value)

    rooms = tuple(updated if r.id == room_id else r for r in state.rooms)
    victory = player.collected_pieces == state.total_rooms
    if victory:
        logger.info("All %d pieces collected; victory", state.total_rooms)
    return replace(
        state,
        rooms=rooms,
        player=player,
        pending_request=None,
        last_response=last_response,
        last_error=last_error,
        score=score,
        victory=victory,
    )


def cancel_visit(state: GameState, room_id: str) -> GameState:
    """Drop the pending request for room_id without an outcome.

    The room stays unvisited, so walking back into it issues a fresh request.
    """
    pending = state.pending_request
    if state.is_terminal or pending is None or pending.room_id != room_id:
        return state
    logger.info("Request for room %s cancelled; room left unvisited", room_id)
    return replace(state, pending_request=None)
