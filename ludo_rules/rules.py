"""Move legality: which tokens may move for a given die value."""

from __future__ import annotations

from typing import Optional, Sequence

from .board import absolute_position, start_square
from .capture import is_opponent_block
from .config import config
from .player import Player
from .token import Token
from .types import Color


def destination(token: Token, dice_value: int) -> Optional[int]:
    """Relative position reached with `dice_value`, ignoring blocks.

    None when the token cannot move at all (finished, home without a six,
    or overshooting the finish).
    """
    if token.is_finished():
        return None
    if token.is_in_home():
        return 0 if dice_value == config.ENTRY_ROLL else None
    target = token.position + dice_value
    if target > config.FINISH_POSITION:
        return None
    return target


def ring_path(color: Color, start_rel: int, end_rel: int) -> list[int]:
    """Absolute ring cells crossed moving from start_rel to end_rel.

    Includes the destination, excludes the starting cell, and stops at the
    end of the ring when the move continues into the home stretch.
    """
    last = min(end_rel, config.PATH_LENGTH - 1)
    return [absolute_position(color, rel) for rel in range(start_rel + 1, last + 1)]


def can_token_move(
    token: Token, dice_value: int, color: Color, players: Sequence[Player]
) -> bool:
    target = destination(token, dice_value)
    if target is None:
        return False

    if token.is_in_home():
        # Entering is refused only by another color's block on the start cell
        return not is_opponent_block(start_square(color), players, color)

    for abs_pos in ring_path(color, token.position, target):
        if is_opponent_block(abs_pos, players, color):
            return False
    return True


def movable_tokens(player: Player, dice_value: Optional[int], players: Sequence[Player]) -> list[Token]:
    if not dice_value:
        return []
    return [
        token
        for token in player.tokens
        if can_token_move(token, dice_value, player.color, players)
    ]
