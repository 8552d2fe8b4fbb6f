from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from ..state import GameState
from ..token import Token


@dataclass(slots=True)
class MoveOption:
    """Structured metadata about a legal move."""

    token: Token
    current_pos: int
    new_pos: int
    dice_roll: int
    leaves_home: bool
    can_capture: bool
    enters_safe_zone: bool
    enters_home_stretch: bool
    finishes: bool
    forms_blockade: bool
    start_threatened: bool
    landing_threatened: bool
    currently_threatened: bool

    @property
    def token_id(self) -> str:
        return self.token.id


@dataclass(slots=True)
class StrategyContext:
    """Input payload shared by move scorers."""

    state: GameState
    dice_roll: int
    moves: List[MoveOption]

    def iter_legal(self) -> Iterable[MoveOption]:
        return iter(self.moves)
