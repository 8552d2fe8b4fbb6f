"""
Session facade around the pure reducers.

LudoEngine owns the current GameState, a seedable random source and a
Scheduler. Public actions mirror what a UI can do (roll, move, start, reset);
timed follow-ups (dice animation, AI turns, auto-skip) are queued on the
scheduler and each one is bound to the state version it was queued for.
"""

from __future__ import annotations

import random
from typing import Callable, Optional

from loguru import logger

from . import game
from .config import GameConfig, config, difficulty_profile
from .persistence import GameStore
from .player import Player
from .scheduler import ScheduledAction, Scheduler
from .state import GameState, InvalidStateError, create_initial_state, validate_state
from .strategy import select_ai_token
from .token import Token
from .types import GameStatus

Listener = Callable[[GameState, GameState], None]


class LudoEngine:
    def __init__(
        self,
        game_config: GameConfig,
        restored_state: Optional[GameState] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        store: Optional[GameStore] = None,
    ):
        self.game_config = game_config
        self.rng = rng or random.Random()
        self.scheduler = scheduler or Scheduler()
        self.store = store
        self._listeners: list[Listener] = []
        self._pending: list[ScheduledAction] = []
        self._closed = False

        self._state = self._restore(restored_state)
        self._schedule_follow_ups()

    def _restore(self, restored_state: Optional[GameState]) -> GameState:
        """Validated restored snapshot, or a fresh game when it cannot be used."""
        if restored_state is None:
            return create_initial_state(self.game_config)
        try:
            validate_state(restored_state)
        except InvalidStateError as e:
            logger.warning(f"Discarding invalid restored state: {e}")
            return create_initial_state(self.game_config)
        if restored_state.player_count != self.game_config.player_count:
            logger.warning(
                f"Discarding restored state with {restored_state.player_count} players;"
                f" config expects {self.game_config.player_count}"
            )
            return create_initial_state(self.game_config)
        return restored_state

    @classmethod
    def resume(cls, store: GameStore, **kwargs) -> Optional["LudoEngine"]:
        """Engine for the saved game in `store`, or None if there is nothing to resume."""
        saved = store.load()
        if saved is None:
            return None
        state, game_config = saved
        if state.game_status != GameStatus.PLAYING:
            return None
        logger.info(f"Resuming saved game at turn {state.turn_count}")
        return cls(game_config, restored_state=state, store=store, **kwargs)

    # --- Queries ---

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def current_player(self) -> Player:
        return self._state.current_player

    @property
    def can_roll(self) -> bool:
        return game.can_roll(self._state)

    def get_movable_tokens(self) -> list[Token]:
        return game.get_movable_tokens(self._state)

    # --- Actions ---

    def start_game(self) -> bool:
        return self._apply(game.start_game(self._state))

    def roll_dice(self) -> bool:
        """Start a roll; the value lands after the dice delay."""
        return self._apply(game.begin_roll(self._state))

    def move_token(self, token_id: str) -> bool:
        return self._apply(game.move_token(self._state, token_id))

    def reset_game(self) -> bool:
        if self._closed:
            logger.debug("Ignoring reset on a closed engine")
            return False
        # only this engine's actions; the scheduler may be shared
        self._cancel_pending()
        if self.store is not None:
            self.store.clear()
        return self._apply(game.reset_game(self._state, self.game_config))

    def close(self) -> None:
        """Leave the game: nothing queued may touch the state afterwards."""
        self._cancel_pending()
        self._listeners.clear()
        self._closed = True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(previous, current)` after every accepted transition."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Clock ---

    def advance(self, seconds: float) -> int:
        return self.scheduler.advance(seconds)

    def run_until_idle(self) -> int:
        return self.scheduler.run_until_idle()

    # --- Internals ---

    def _apply(self, new_state: GameState) -> bool:
        if self._closed:
            logger.debug("Ignoring action on a closed engine")
            return False
        if new_state is self._state:
            return False

        previous, self._state = self._state, new_state
        self._persist()
        self._schedule_follow_ups()
        for listener in list(self._listeners):
            try:
                listener(previous, new_state)
            except Exception:
                logger.exception(f"State listener {listener!r} failed")
        return True

    def _persist(self) -> None:
        if self.store is None:
            return
        if self._state.game_status == GameStatus.PLAYING:
            self.store.save(self._state, self.game_config)
        elif self._state.game_status == GameStatus.FINISHED:
            self.store.clear()

    def _defer(self, delay: float, label: str, action: Callable[[], object]) -> None:
        version = self._state.version

        def run() -> None:
            if self._closed or self._state.version != version:
                logger.debug(f"Discarding stale '{label}' queued at version {version}")
                return
            action()

        self._pending.append(self.scheduler.schedule(delay, run, label))

    def _cancel_pending(self) -> None:
        for scheduled in self._pending:
            self.scheduler.cancel(scheduled)
        self._pending.clear()

    def _schedule_follow_ups(self) -> None:
        # Whatever was queued belongs to the previous snapshot
        self._cancel_pending()

        state = self._state
        if self._closed or state.game_status != GameStatus.PLAYING:
            return

        if state.is_rolling:
            self._defer(config.DICE_ROLL_DELAY, "resolve roll", self._resolve_roll)
            return

        player = state.current_player
        profile = difficulty_profile(player.ai_difficulty)
        if state.dice_value is None:
            if player.is_ai:
                self._defer(profile.roll_delay, "ai roll", self.roll_dice)
            return

        if not game.get_movable_tokens(state):
            self._defer(config.SKIP_TURN_DELAY, "skip turn", self._skip_turn)
        elif player.is_ai:
            self._defer(profile.move_delay, "ai move", self._play_ai_move)

    def _resolve_roll(self) -> None:
        self._apply(game.resolve_roll(self._state, self.rng.randint(1, 6)))

    def _skip_turn(self) -> None:
        self._apply(game.skip_turn(self._state))

    def _play_ai_move(self) -> None:
        state = self._state
        player = state.current_player
        token = select_ai_token(
            state, game.get_movable_tokens(state), player.ai_difficulty, rng=self.rng
        )
        if token is not None:
            self._apply(game.move_token(state, token.id))
