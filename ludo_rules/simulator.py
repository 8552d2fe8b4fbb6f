from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from loguru import logger

from . import game
from .config import GameConfig, config
from .state import GameState, create_initial_state
from .strategy import select_ai_token
from .types import AIDifficulty, GameStatus


@dataclass(slots=True)
class GameResult:
    rankings: tuple[str, ...]
    turns: int
    captures: int
    penalties: int
    completed: bool
    final_state: GameState = field(repr=False)

    @property
    def winner(self) -> Optional[str]:
        return self.rankings[0] if self.rankings else None


@dataclass(slots=True)
class Simulator:
    """Plays a whole game synchronously, every seat choosing with the AI scorer.

    Human seats use `default_difficulty`; AI seats use their own tier.
    """

    game_config: GameConfig
    seed: Optional[int] = None
    default_difficulty: AIDifficulty = AIDifficulty.MEDIUM
    max_turns: int = config.MAX_TURNS
    rng: random.Random = field(init=False)
    state: GameState = field(init=False)
    captures: int = field(default=0, init=False)
    penalties: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.rng = random.Random(self.seed)
        self.state = game.start_game(create_initial_state(self.game_config))

    def step(self) -> GameState:
        """Apply the next action: a roll, a move or a skip."""
        state = self.state
        if game.awaiting_roll(state):
            state = game.roll_dice(state, self.rng)
            if state.last_penalty_event is not None:
                self.penalties += 1
        elif game.awaiting_move(state):
            movable = game.get_movable_tokens(state)
            if not movable:
                state = game.skip_turn(state)
            else:
                player = state.current_player
                token = select_ai_token(
                    state,
                    movable,
                    player.ai_difficulty or self.default_difficulty,
                    rng=self.rng,
                )
                state = game.move_token(state, token.id)
                if state.last_capture_event is not None:
                    self.captures += 1
        self.state = state
        return state

    def run(self, on_step: Callable[[GameState], None] | None = None) -> GameResult:
        while (
            self.state.game_status == GameStatus.PLAYING
            and self.state.turn_count < self.max_turns
        ):
            self.step()
            if on_step is not None:
                on_step(self.state)

        completed = self.state.game_status == GameStatus.FINISHED
        if not completed:
            logger.warning(f"Simulation stopped at the {self.max_turns} turn cap")
        return GameResult(
            rankings=self.state.rankings,
            turns=self.state.turn_count,
            captures=self.captures,
            penalties=self.penalties,
            completed=completed,
            final_state=self.state,
        )
