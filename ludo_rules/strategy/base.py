from __future__ import annotations

import random
from typing import ClassVar, Optional, Sequence

from ..state import GameState
from ..token import Token
from .features import build_move_options
from .types import MoveOption, StrategyContext


class BaseStrategy:
    """Base class for scoring strategies with shared move selection.

    Candidates are ranked by score (ties keep enumeration order). With
    probability ``mistake_rate`` the runner-up is played instead, which is
    how weaker tiers imitate imperfect play.
    """

    name: ClassVar[str] = "base"

    def __init__(self, mistake_rate: float = 0.0, rng: random.Random | None = None):
        self.mistake_rate = mistake_rate
        self.rng = rng or random.Random()

    def decide(self, state: GameState, movable: Sequence[Token]) -> Optional[Token]:
        if not movable:
            return None
        if len(movable) == 1:
            return movable[0]
        ctx = build_move_options(state, movable, radius=self.threat_radius)
        choice = self.select_move(ctx)
        return choice.token if choice is not None else None

    @property
    def threat_radius(self) -> int:
        return 6

    def select_move(self, ctx: StrategyContext) -> Optional[MoveOption]:
        scored_moves = [(move, self._score_move(ctx, move)) for move in ctx.iter_legal()]
        if not scored_moves:
            return None

        # sorted() is stable, so equal scores keep their enumeration order
        ranked = sorted(scored_moves, key=lambda item: item[1], reverse=True)
        if len(ranked) > 1 and self.rng.random() < self.mistake_rate:
            return ranked[1][0]
        return ranked[0][0]

    def _score_move(
        self, ctx: StrategyContext, move: MoveOption
    ) -> float:  # pragma: no cover - abstract
        raise NotImplementedError
