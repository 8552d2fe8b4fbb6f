"""Move selection for computer-controlled seats."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from ..state import GameState
from ..token import Token
from ..types import AIDifficulty
from .base import BaseStrategy
from .difficulty import DifficultyStrategy
from .features import build_move_options, threatened
from .types import MoveOption, StrategyContext


def select_ai_token(
    state: GameState,
    movable: Sequence[Token],
    difficulty: Optional[AIDifficulty],
    rng: random.Random | None = None,
) -> Optional[Token]:
    """Pick the token an AI seat of `difficulty` plays from `movable`."""
    return DifficultyStrategy.for_difficulty(difficulty, rng=rng).decide(state, movable)


__all__ = [
    "BaseStrategy",
    "DifficultyStrategy",
    "MoveOption",
    "StrategyContext",
    "build_move_options",
    "select_ai_token",
    "threatened",
]
