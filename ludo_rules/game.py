"""
Turn state machine.

Every function here is a reducer: it takes a GameState and returns the next
one. Actions that do not fit the current state are ignored and the input
snapshot is returned unchanged (same object), so callers can detect a no-op
with ``new is old``.
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import Sequence

from loguru import logger

from .capture import resolve_capture
from .config import GameConfig, config
from .player import Player
from .rules import can_token_move, destination, movable_tokens
from .state import GameState, create_initial_state
from .token import Token
from .types import FinishEvent, GameStatus, PenaltyEvent


def _advance(state: GameState, **changes) -> GameState:
    return replace(state, version=state.version + 1, **changes)


def next_player_index(players: Sequence[Player], current: int) -> int:
    """Next seat (wrapping) whose owner still has tokens to bring home."""
    total = len(players)
    idx = current
    for _ in range(total):
        idx = (idx + 1) % total
        if not players[idx].has_won():
            return idx
    return current


def awaiting_roll(state: GameState) -> bool:
    return (
        state.game_status == GameStatus.PLAYING
        and not state.is_rolling
        and state.dice_value is None
    )


def awaiting_move(state: GameState) -> bool:
    return (
        state.game_status == GameStatus.PLAYING
        and not state.is_rolling
        and state.dice_value is not None
    )


def can_roll(state: GameState) -> bool:
    """True when a human may press the dice."""
    return awaiting_roll(state) and not state.current_player.is_ai


def get_movable_tokens(state: GameState) -> list[Token]:
    if not awaiting_move(state):
        return []
    return movable_tokens(state.current_player, state.dice_value, state.players)


# --- Lifecycle ---


def start_game(state: GameState) -> GameState:
    if state.game_status != GameStatus.WAITING:
        logger.debug(f"Ignoring start: game is {state.game_status.value}")
        return state
    logger.info(f"Game started with {state.player_count} players")
    return _advance(state, game_status=GameStatus.PLAYING)


def reset_game(state: GameState, game_config: GameConfig) -> GameState:
    """Fresh game for the same setup; the version keeps counting up."""
    logger.info("Game reset")
    return create_initial_state(game_config, version=state.version + 1)


# --- Dice ---


def begin_roll(state: GameState) -> GameState:
    if not awaiting_roll(state):
        logger.debug("Ignoring roll: not awaiting a roll")
        return state
    return _advance(
        state,
        is_rolling=True,
        selected_token_id=None,
        last_capture_event=None,
        last_finish_event=None,
        last_penalty_event=None,
    )


def resolve_roll(state: GameState, value: int) -> GameState:
    if state.game_status != GameStatus.PLAYING or not state.is_rolling:
        logger.debug("Ignoring dice result: no roll in progress")
        return state
    if not 1 <= value <= 6:
        logger.debug(f"Ignoring dice result {value}: outside 1..6")
        return state

    sixes = state.consecutive_sixes + 1 if value == 6 else 0
    if sixes >= config.MAX_CONSECUTIVE_SIXES:
        return _forfeit_for_sixes(state)

    player = state.current_player
    movable = movable_tokens(player, value, state.players)
    return _advance(
        state,
        dice_value=value,
        is_rolling=False,
        can_roll_again=value == 6,
        consecutive_sixes=sixes,
        # a lone legal token is preselected; it still needs a move_token call
        selected_token_id=movable[0].id if len(movable) == 1 else None,
    )


def roll_dice(state: GameState, rng: random.Random) -> GameState:
    """Roll without a presentation delay."""
    rolling = begin_roll(state)
    if rolling is state:
        return state
    return resolve_roll(rolling, rng.randint(1, 6))


def _forfeit_for_sixes(state: GameState) -> GameState:
    """Too many sixes: lose the roll, the most advanced token and the turn."""
    idx = state.current_player_index
    player = state.current_player
    active = player.active_tokens()
    # max() keeps the first token among equals
    victim = max(active, key=lambda t: t.position) if active else None

    players = list(state.players)
    if victim is not None:
        players[idx] = player.with_token(victim.send_home())
    logger.info(
        f"{player.color.value} rolled {config.MAX_CONSECUTIVE_SIXES} sixes in a row;"
        f" {victim.id if victim else 'no token'} sent home"
    )

    return _advance(
        state,
        players=tuple(players),
        current_player_index=next_player_index(players, idx),
        dice_value=None,
        is_rolling=False,
        can_roll_again=False,
        selected_token_id=None,
        consecutive_sixes=0,
        turn_count=state.turn_count + 1,
        last_penalty_event=PenaltyEvent(
            color=player.color, token_id=victim.id if victim else None
        ),
    )


# --- Moves ---


def move_token(state: GameState, token_id: str) -> GameState:
    if not awaiting_move(state):
        logger.debug(f"Ignoring move of {token_id}: not awaiting a move")
        return state

    idx = state.current_player_index
    player = state.current_player
    dice = state.dice_value
    token = player.get_token(token_id)
    if token is None or not can_token_move(token, dice, player.color, state.players):
        logger.debug(f"Ignoring move of {token_id}: not a legal move for {player.color.value}")
        return state

    moved = token.move_to(destination(token, dice))
    players = list(state.players)
    players[idx] = player.with_token(moved)
    # capture only after the mover's own update
    players, capture = resolve_capture(tuple(players), moved)
    mover = players[idx]

    finish = FinishEvent(color=mover.color, token_id=moved.id) if moved.is_finished() else None

    rankings = state.rankings
    status = state.game_status
    if mover.has_won() and mover.id not in rankings:
        rankings = rankings + (mover.id,)
        logger.info(f"{mover.color.value} brought all tokens home (rank {len(rankings)})")
        if len(rankings) >= len(players) - 1:
            status = GameStatus.FINISHED
            logger.info(f"Game over after {state.turn_count + 1} turns: {list(rankings)}")

    bonus = dice == 6 or capture is not None or finish is not None
    keeps_turn = bonus and not mover.has_won() and status == GameStatus.PLAYING
    if keeps_turn or status == GameStatus.FINISHED:
        next_index = idx
    else:
        next_index = next_player_index(players, idx)

    return _advance(
        state,
        players=players,
        current_player_index=next_index,
        dice_value=None,
        can_roll_again=False,
        selected_token_id=None,
        game_status=status,
        winner=rankings[0] if rankings else None,
        rankings=rankings,
        turn_count=state.turn_count + 1,
        consecutive_sixes=state.consecutive_sixes if keeps_turn else 0,
        last_capture_event=capture,
        last_finish_event=finish,
    )


def skip_turn(state: GameState) -> GameState:
    """Pass the turn on when the rolled value allows no move."""
    if not awaiting_move(state):
        return state
    if get_movable_tokens(state):
        logger.debug("Ignoring skip: a legal move exists")
        return state
    idx = state.current_player_index
    logger.debug(f"{state.current_player.color.value} has no move for {state.dice_value}")
    return _advance(
        state,
        current_player_index=next_player_index(state.players, idx),
        dice_value=None,
        can_roll_again=False,
        selected_token_id=None,
        consecutive_sixes=0,
        turn_count=state.turn_count + 1,
    )
