import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .types import AIDifficulty, Color, GameMode

load_dotenv()


@dataclass(slots=True)
class Config:
    # --- Constants ---
    PATH_LENGTH: int = 52  # shared ring
    HOME_STRETCH_LENGTH: int = 6
    TOKENS_PER_PLAYER: int = 4
    HOME_POSITION: int = -1
    ENTRY_ROLL: int = 6
    MAX_CONSECUTIVE_SIXES: int = int(os.getenv("MAX_CONSECUTIVE_SIXES", 3))

    # Absolute ring index where each color enters (Red, Green, Yellow, Blue)
    START_OFFSETS: tuple[int, ...] = (0, 13, 26, 39)
    SAFE_SQUARES: frozenset[int] = field(
        default_factory=lambda: frozenset({0, 8, 13, 21, 26, 34, 39, 47})
    )
    # Last ring cell before each color's home stretch. Informational only:
    # movement uses relative positions and never reads this table.
    HOME_STRETCH_ENTRY: tuple[int, ...] = (51, 12, 25, 38)

    # Presentation delays in seconds (0 for a fully synchronous engine)
    DICE_ROLL_DELAY: float = float(os.getenv("DICE_ROLL_DELAY", 0.6))
    SKIP_TURN_DELAY: float = float(os.getenv("SKIP_TURN_DELAY", 1.0))

    # Safety cap for headless simulations
    MAX_TURNS: int = int(os.getenv("MAX_TURNS", 10_000))

    # Persistence
    SAVE_PATH: str = os.getenv("LUDO_SAVE_PATH", "saved_states/ludo_saved_game.json")
    SAVE_MAX_AGE: float = float(os.getenv("LUDO_SAVE_MAX_AGE", 86_400))

    # Derived (populated in __post_init__ due to slots)
    HOME_STRETCH_START: int = 0
    FINISH_POSITION: int = 0

    def __post_init__(self):
        self.HOME_STRETCH_START = self.PATH_LENGTH
        self.FINISH_POSITION = self.PATH_LENGTH + self.HOME_STRETCH_LENGTH

        if self.MAX_CONSECUTIVE_SIXES < 1:
            raise ValueError("MAX_CONSECUTIVE_SIXES must be at least 1")
        if self.DICE_ROLL_DELAY < 0 or self.SKIP_TURN_DELAY < 0:
            raise ValueError("Delays must be non-negative")


@dataclass(frozen=True, slots=True)
class DifficultyProfile:
    """Scoring weights and pacing for one AI difficulty tier."""

    capture_bonus: float
    landing_risk_penalty: float
    escape_bonus: float
    start_risk_penalty: float
    mistake_rate: float
    roll_delay: float
    move_delay: float

    exit_home_bonus: float = 15.0
    safe_bonus: float = 20.0
    enter_stretch_bonus: float = 40.0
    finish_bonus: float = 100.0
    progress_weight: float = 0.5
    blockade_bonus: float = 25.0
    threat_range: int = 6


DIFFICULTY_PROFILES: dict[AIDifficulty, DifficultyProfile] = {
    AIDifficulty.MEDIUM: DifficultyProfile(
        capture_bonus=30.0,
        landing_risk_penalty=0.0,
        escape_bonus=0.0,
        start_risk_penalty=0.0,
        mistake_rate=0.40,
        roll_delay=0.8,
        move_delay=0.7,
    ),
    AIDifficulty.HARD: DifficultyProfile(
        capture_bonus=60.0,
        landing_risk_penalty=15.0,
        escape_bonus=10.0,
        start_risk_penalty=0.0,
        mistake_rate=0.15,
        roll_delay=1.0,
        move_delay=1.0,
    ),
    AIDifficulty.EXPERT: DifficultyProfile(
        capture_bonus=60.0,
        landing_risk_penalty=35.0,
        escape_bonus=10.0,
        start_risk_penalty=20.0,
        mistake_rate=0.05,
        roll_delay=1.2,
        move_delay=1.5,
    ),
}


def difficulty_profile(difficulty: Optional[AIDifficulty]) -> DifficultyProfile:
    return DIFFICULTY_PROFILES[difficulty or AIDifficulty.MEDIUM]


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Per-game setup chosen by the player before the match starts."""

    mode: GameMode = GameMode.SINGLE
    player_count: int = 4
    ai_difficulty: Optional[AIDifficulty] = AIDifficulty.MEDIUM
    human_player_color: Color = Color.RED

    def __post_init__(self):
        # Accept raw strings (e.g. from a save file or CLI)
        object.__setattr__(self, "mode", GameMode(self.mode))
        object.__setattr__(self, "human_player_color", Color(self.human_player_color))
        if self.ai_difficulty is not None:
            object.__setattr__(self, "ai_difficulty", AIDifficulty(self.ai_difficulty))
        if self.player_count not in (2, 3, 4):
            raise ValueError("player_count must be 2, 3 or 4")

    @property
    def colors(self) -> list[Color]:
        return Color.seat_order()[: self.player_count]

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "player_count": self.player_count,
            "ai_difficulty": self.ai_difficulty.value if self.ai_difficulty else None,
            "human_player_color": self.human_player_color.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GameConfig":
        return cls(
            mode=data["mode"],
            player_count=int(data["player_count"]),
            ai_difficulty=data.get("ai_difficulty"),
            human_player_color=data["human_player_color"],
        )


config = Config()
