import json
import os
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from .config import GameConfig, config
from .state import GameState, InvalidStateError


class GameStore:
    """Single-slot save file holding ``{state, config, timestamp}``.

    Saves older than ``max_age`` seconds, or that cannot be read back, are
    treated as absent so the caller starts a fresh game.
    """

    def __init__(self, save_path: Optional[str] = None, max_age: Optional[float] = None):
        self.save_path = save_path or config.SAVE_PATH
        self.max_age = config.SAVE_MAX_AGE if max_age is None else max_age

    def save(
        self,
        state: GameState,
        game_config: GameConfig,
        timestamp: Optional[datetime] = None,
    ) -> bool:
        payload = {
            "state": state.to_dict(),
            "config": game_config.to_dict(),
            "timestamp": (timestamp or datetime.now(timezone.utc)).isoformat(),
        }
        try:
            directory = os.path.dirname(self.save_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.save_path, "w") as f:
                json.dump(payload, f)
        except OSError as e:
            logger.warning(f"Could not save game to {self.save_path}: {e}")
            return False
        return True

    def load(
        self, now: Optional[datetime] = None
    ) -> Optional[tuple[GameState, GameConfig]]:
        if not os.path.exists(self.save_path):
            return None

        try:
            with open(self.save_path, "r") as f:
                data = json.load(f)
            saved_at = datetime.fromisoformat(data["timestamp"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable save {self.save_path}: {e}")
            return None

        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if saved_at.tzinfo is None:
            saved_at = saved_at.replace(tzinfo=timezone.utc)
        age = (now - saved_at).total_seconds()
        if age > self.max_age:
            logger.info(f"Discarding save from {saved_at.isoformat()}: older than {self.max_age:.0f}s")
            self.clear()
            return None

        try:
            game_config = GameConfig.from_dict(data["config"])
            state = GameState.from_dict(data["state"])
        except (InvalidStateError, KeyError, ValueError, TypeError) as e:
            logger.warning(f"Discarding corrupt save {self.save_path}: {e}")
            return None
        if state.player_count != game_config.player_count:
            logger.warning("Discarding save whose state does not match its config")
            return None
        return state, game_config

    def clear(self) -> None:
        try:
            os.remove(self.save_path)
        except FileNotFoundError:
            pass
