from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .config import config
from .player import Player
from .token import Token
from .types import Color


def start_square(color: Color) -> int:
    return config.START_OFFSETS[color.index]


def absolute_position(color: Color, relative_pos: int) -> int:
    """Map a player's relative ring position to the shared ring (0..51).

    Home base, home stretch and finished positions have no ring equivalent
    and map to -1.
    """
    if not 0 <= relative_pos < config.PATH_LENGTH:
        return -1
    return (start_square(color) + relative_pos) % config.PATH_LENGTH


def relative_position(color: Color, abs_pos: int) -> int:
    if not 0 <= abs_pos < config.PATH_LENGTH:
        return -1
    return (abs_pos - start_square(color)) % config.PATH_LENGTH


def is_safe_square(abs_pos: int) -> bool:
    return abs_pos in config.SAFE_SQUARES


def is_start_square(abs_pos: int) -> bool:
    return abs_pos in config.START_OFFSETS


def start_square_color(abs_pos: int) -> Optional[Color]:
    for color in Color.seat_order():
        if start_square(color) == abs_pos:
            return color
    return None


def is_home_stretch(relative_pos: int) -> bool:
    return config.HOME_STRETCH_START <= relative_pos < config.FINISH_POSITION


def home_stretch_index(relative_pos: int) -> int:
    """0..5 inside the home stretch, -1 elsewhere."""
    if not is_home_stretch(relative_pos):
        return -1
    return relative_pos - config.HOME_STRETCH_START


def token_absolute(token: Token) -> int:
    if not token.is_on_ring():
        return -1
    return absolute_position(token.color, token.position)


@dataclass(frozen=True, slots=True)
class Board:
    """Read-only view of token placement on the shared ring (no rule logic)."""

    players: Sequence[Player]

    def tokens_at_absolute(
        self, abs_pos: int, *, exclude_color: Color | None = None
    ) -> list[Token]:
        out: list[Token] = []
        for player in self.players:
            if exclude_color is not None and player.color == exclude_color:
                continue
            for token in player.tokens:
                if token.is_on_ring() and token_absolute(token) == abs_pos:
                    out.append(token)
        return out

    def count_at_absolute(self, color: Color, abs_pos: int) -> int:
        return sum(
            1
            for player in self.players
            if player.color == color
            for token in player.tokens
            if token.is_on_ring() and token_absolute(token) == abs_pos
        )

    def ring_occupancy(
        self,
        *,
        only_color: Color | None = None,
        exclude_color: Color | None = None,
        exclude_token_id: str | None = None,
    ) -> np.ndarray:
        """Token counts per absolute ring cell, shape (52,)."""
        counts = np.zeros(config.PATH_LENGTH, dtype=np.int64)
        for player in self.players:
            if only_color is not None and player.color != only_color:
                continue
            if exclude_color is not None and player.color == exclude_color:
                continue
            for token in player.tokens:
                if token.id == exclude_token_id or not token.is_on_ring():
                    continue
                counts[token_absolute(token)] += 1
        return counts
