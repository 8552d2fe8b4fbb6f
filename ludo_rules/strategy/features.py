from __future__ import annotations

from typing import Sequence

import numpy as np

from ..board import Board, absolute_position, is_safe_square, start_square, token_absolute
from ..capture import capturable_tokens
from ..config import config
from ..rules import destination
from ..state import GameState
from ..token import Token
from .types import MoveOption, StrategyContext


def threatened(opponent_counts: np.ndarray, abs_pos: int, radius: int = 6) -> bool:
    """True if an opponent sits 1..radius ring steps behind `abs_pos`."""
    if abs_pos < 0:
        return False
    behind = (abs_pos - np.arange(1, radius + 1)) % config.PATH_LENGTH
    return bool(opponent_counts[behind].sum() > 0)


def _create_move_option(
    state: GameState,
    token: Token,
    dice_roll: int,
    own_counts: np.ndarray,
    opponent_counts: np.ndarray,
    radius: int,
) -> MoveOption:
    color = token.color
    new_pos = destination(token, dice_roll)
    new_abs = absolute_position(color, new_pos)
    cur_abs = token_absolute(token)

    victims = capturable_tokens(new_abs, color, state.players) if new_abs >= 0 else []
    # own_counts excludes the moving token itself
    forms_blockade = new_abs >= 0 and own_counts[new_abs] >= 1
    landing_unsafe = new_abs >= 0 and not is_safe_square(new_abs)
    current_unsafe = cur_abs >= 0 and not is_safe_square(cur_abs)

    return MoveOption(
        token=token,
        current_pos=token.position,
        new_pos=new_pos,
        dice_roll=dice_roll,
        leaves_home=token.is_in_home(),
        can_capture=bool(victims),
        enters_safe_zone=new_abs >= 0 and is_safe_square(new_abs),
        enters_home_stretch=(
            token.position < config.HOME_STRETCH_START <= new_pos
        ),
        finishes=new_pos == config.FINISH_POSITION,
        forms_blockade=bool(forms_blockade),
        start_threatened=threatened(opponent_counts, start_square(color), radius),
        landing_threatened=landing_unsafe and threatened(opponent_counts, new_abs, radius),
        currently_threatened=current_unsafe and threatened(opponent_counts, cur_abs, radius),
    )


def build_move_options(
    state: GameState, movable: Sequence[Token], radius: int = 6
) -> StrategyContext:
    """Convert a snapshot and its legal tokens into a strategy context."""
    dice = int(state.dice_value or 0)
    player = state.current_player
    board = Board(state.players)
    opponent_counts = board.ring_occupancy(exclude_color=player.color)

    moves = []
    for token in movable:
        own_counts = board.ring_occupancy(only_color=player.color, exclude_token_id=token.id)
        moves.append(
            _create_move_option(state, token, dice, own_counts, opponent_counts, radius)
        )
    return StrategyContext(state=state, dice_roll=dice, moves=moves)
