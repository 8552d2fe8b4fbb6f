"""
Ludo rules engine.
Immutable game snapshots, pure turn reducers, and an AI move selector.
"""

from .board import Board, absolute_position, is_safe_square
from .config import DIFFICULTY_PROFILES, DifficultyProfile, GameConfig, config
from .engine import LudoEngine
from .game import (
    can_roll,
    get_movable_tokens,
    move_token,
    reset_game,
    roll_dice,
    skip_turn,
    start_game,
)
from .persistence import GameStore
from .player import Player
from .rules import can_token_move
from .scheduler import Scheduler
from .simulator import GameResult, Simulator
from .state import GameState, InvalidStateError, create_initial_state, validate_state
from .strategy import select_ai_token
from .token import Token
from .types import (
    AIDifficulty,
    CaptureEvent,
    Color,
    FinishEvent,
    GameMode,
    GameStatus,
    PenaltyEvent,
    TokenState,
)

__all__ = [
    "AIDifficulty",
    "Board",
    "CaptureEvent",
    "Color",
    "DIFFICULTY_PROFILES",
    "DifficultyProfile",
    "FinishEvent",
    "GameConfig",
    "GameMode",
    "GameResult",
    "GameState",
    "GameStatus",
    "GameStore",
    "InvalidStateError",
    "LudoEngine",
    "PenaltyEvent",
    "Player",
    "Scheduler",
    "Simulator",
    "Token",
    "TokenState",
    "absolute_position",
    "can_roll",
    "can_token_move",
    "config",
    "create_initial_state",
    "get_movable_tokens",
    "is_safe_square",
    "move_token",
    "reset_game",
    "roll_dice",
    "select_ai_token",
    "skip_turn",
    "start_game",
    "validate_state",
]
