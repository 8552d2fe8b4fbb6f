from __future__ import annotations

import random
from typing import ClassVar, Optional

from ..config import DifficultyProfile, difficulty_profile
from ..types import AIDifficulty
from .base import BaseStrategy
from .types import MoveOption, StrategyContext


class DifficultyStrategy(BaseStrategy):
    """Additive move scorer whose weights come from a difficulty profile.

    Zero weights switch a factor off, so the scorer itself has no
    difficulty-specific branches.
    """

    name: ClassVar[str] = "difficulty"

    def __init__(self, profile: DifficultyProfile, rng: random.Random | None = None):
        super().__init__(mistake_rate=profile.mistake_rate, rng=rng)
        self.profile = profile

    @classmethod
    def for_difficulty(
        cls, difficulty: Optional[AIDifficulty], rng: random.Random | None = None
    ) -> "DifficultyStrategy":
        return cls(difficulty_profile(difficulty), rng=rng)

    @property
    def threat_radius(self) -> int:
        return self.profile.threat_range

    def _score_move(self, ctx: StrategyContext, move: MoveOption) -> float:
        p = self.profile
        score = 0.0

        # Leaving home is judged on its own
        if move.leaves_home:
            score += p.exit_home_bonus
            if move.start_threatened:
                score -= p.start_risk_penalty
            return score

        if move.can_capture:
            score += p.capture_bonus
        if move.enters_safe_zone:
            score += p.safe_bonus
        if move.enters_home_stretch:
            score += p.enter_stretch_bonus
        if move.finishes:
            score += p.finish_bonus

        score += move.current_pos * p.progress_weight

        if move.forms_blockade:
            score += p.blockade_bonus
        if move.landing_threatened:
            score -= p.landing_risk_penalty
        if move.currently_threatened:
            score += p.escape_bonus

        return score
