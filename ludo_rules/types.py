from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Color(Enum):
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"

    @classmethod
    def seat_order(cls) -> list["Color"]:
        return [cls.RED, cls.GREEN, cls.YELLOW, cls.BLUE]

    @property
    def index(self) -> int:
        return Color.seat_order().index(self)


class TokenState(Enum):
    HOME = "home"  # in the home base, waiting for a six
    ACTIVE = "active"  # on the ring or in the home stretch
    FINISHED = "finished"  # arrived at the centre


class GameStatus(Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class GameMode(Enum):
    SINGLE = "single"  # one human against AI seats
    LOCAL = "local"  # pass-and-play, every seat human


class AIDifficulty(Enum):
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


@dataclass(frozen=True, slots=True)
class CaptureEvent:
    attacker_color: Color
    victim_color: Color
    position: int  # absolute ring cell
    captured_token_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "attacker_color": self.attacker_color.value,
            "victim_color": self.victim_color.value,
            "position": self.position,
            "captured_token_ids": list(self.captured_token_ids),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["CaptureEvent"]:
        if data is None:
            return None
        return cls(
            attacker_color=Color(data["attacker_color"]),
            victim_color=Color(data["victim_color"]),
            position=int(data["position"]),
            captured_token_ids=tuple(data.get("captured_token_ids", ())),
        )


@dataclass(frozen=True, slots=True)
class FinishEvent:
    color: Color
    token_id: str

    def to_dict(self) -> dict:
        return {"color": self.color.value, "token_id": self.token_id}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["FinishEvent"]:
        if data is None:
            return None
        return cls(color=Color(data["color"]), token_id=data["token_id"])


@dataclass(frozen=True, slots=True)
class PenaltyEvent:
    """Triple-six forfeit. token_id is None when no token was on the board."""

    color: Color
    token_id: Optional[str]

    def to_dict(self) -> dict:
        return {"color": self.color.value, "token_id": self.token_id}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["PenaltyEvent"]:
        if data is None:
            return None
        return cls(color=Color(data["color"]), token_id=data.get("token_id"))
