"""
Player representation for the Ludo engine.
Each player has a color and controls 4 tokens.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .config import GameConfig, config
from .token import Token, create_tokens
from .types import AIDifficulty, Color, GameMode


@dataclass(frozen=True, slots=True)
class Player:
    id: str
    color: Color
    name: str
    tokens: tuple[Token, ...]
    is_ai: bool = False
    ai_difficulty: Optional[AIDifficulty] = None
    finished_tokens: int = 0

    def get_token(self, token_id: str) -> Optional[Token]:
        for token in self.tokens:
            if token.id == token_id:
                return token
        return None

    def with_token(self, token: Token) -> "Player":
        """Return a copy with `token` replacing the token of the same id.

        finished_tokens is recounted so it can never drift from the tokens.
        """
        tokens = tuple(token if t.id == token.id else t for t in self.tokens)
        return replace(
            self,
            tokens=tokens,
            finished_tokens=sum(1 for t in tokens if t.is_finished()),
        )

    def active_tokens(self) -> list[Token]:
        return [t for t in self.tokens if t.is_active()]

    def has_won(self) -> bool:
        return self.finished_tokens == config.TOKENS_PER_PLAYER

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "color": self.color.value,
            "name": self.name,
            "tokens": [t.to_dict() for t in self.tokens],
            "is_ai": self.is_ai,
            "ai_difficulty": self.ai_difficulty.value if self.ai_difficulty else None,
            "finished_tokens": self.finished_tokens,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        difficulty = data.get("ai_difficulty")
        return cls(
            id=data["id"],
            color=Color(data["color"]),
            name=data["name"],
            tokens=tuple(Token.from_dict(t) for t in data["tokens"]),
            is_ai=bool(data["is_ai"]),
            ai_difficulty=AIDifficulty(difficulty) if difficulty else None,
            finished_tokens=int(data["finished_tokens"]),
        )


def create_players(game_config: GameConfig) -> tuple[Player, ...]:
    """Seat players in fixed color order, marking AI seats for single mode."""
    players = []
    for color in game_config.colors:
        is_ai = (
            game_config.mode == GameMode.SINGLE
            and color != game_config.human_player_color
        )
        players.append(
            Player(
                id=f"player-{color.value}",
                color=color,
                name="You" if color == game_config.human_player_color else f"Player {color.value}",
                tokens=create_tokens(color),
                is_ai=is_ai,
                ai_difficulty=game_config.ai_difficulty if is_ai else None,
            )
        )
    return tuple(players)
