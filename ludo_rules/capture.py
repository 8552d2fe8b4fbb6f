"""Block detection and capture resolution on the shared ring."""

from __future__ import annotations

from typing import Optional, Sequence

from .board import Board, is_safe_square, token_absolute
from .player import Player
from .token import Token
from .types import CaptureEvent, Color


def block_owner(
    abs_pos: int, players: Sequence[Player], exclude_color: Color | None = None
) -> Optional[Color]:
    """Color holding 2+ tokens on `abs_pos`, or None when there is no block."""
    board = Board(players)
    for player in players:
        if exclude_color is not None and player.color == exclude_color:
            continue
        if board.count_at_absolute(player.color, abs_pos) >= 2:
            return player.color
    return None


def is_opponent_block(abs_pos: int, players: Sequence[Player], color: Color) -> bool:
    return block_owner(abs_pos, players, exclude_color=color) is not None


def capturable_tokens(
    abs_pos: int, attacker_color: Color, players: Sequence[Player]
) -> list[Token]:
    """Opposing tokens that a piece landing on `abs_pos` would send home."""
    if abs_pos < 0 or is_safe_square(abs_pos):
        return []
    if is_opponent_block(abs_pos, players, attacker_color):
        return []
    return Board(players).tokens_at_absolute(abs_pos, exclude_color=attacker_color)


def resolve_capture(
    players: tuple[Player, ...], mover: Token
) -> tuple[tuple[Player, ...], Optional[CaptureEvent]]:
    """Send home every opponent sharing the mover's (already updated) cell.

    Only ring destinations are considered; the home stretch is private.
    """
    if not mover.is_on_ring():
        return players, None

    abs_pos = token_absolute(mover)
    victims = capturable_tokens(abs_pos, mover.color, players)
    if not victims:
        return players, None

    victim_ids = {t.id for t in victims}
    updated = []
    for player in players:
        if player.color == mover.color:
            updated.append(player)
            continue
        for token in player.tokens:
            if token.id in victim_ids:
                player = player.with_token(token.send_home())
        updated.append(player)

    event = CaptureEvent(
        attacker_color=mover.color,
        victim_color=victims[0].color,
        position=abs_pos,
        captured_token_ids=tuple(t.id for t in victims),
    )
    return tuple(updated), event
