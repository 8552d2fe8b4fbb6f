"""
Token representation for the Ludo engine.
Each player owns 4 tokens; a token is an immutable value and every move
produces a new one.
"""

from dataclasses import dataclass, replace

from .config import config
from .types import Color, TokenState


def state_for_position(position: int) -> TokenState:
    """Token state implied by a relative position."""
    if position == config.HOME_POSITION:
        return TokenState.HOME
    if position == config.FINISH_POSITION:
        return TokenState.FINISHED
    return TokenState.ACTIVE


@dataclass(frozen=True, slots=True)
class Token:
    """
    A single piece.

    position: -1 in home base, 0..51 on the ring (relative to the owner's
    start cell), 52..57 in the home stretch, 58 finished.
    """

    id: str
    color: Color
    position: int = -1
    state: TokenState = TokenState.HOME

    @property
    def slot(self) -> int:
        return int(self.id.rsplit("-", 1)[1])

    def is_in_home(self) -> bool:
        return self.state == TokenState.HOME

    def is_active(self) -> bool:
        return self.state == TokenState.ACTIVE

    def is_finished(self) -> bool:
        return self.state == TokenState.FINISHED

    def is_on_ring(self) -> bool:
        """Active and still on the shared ring (capturable, can form blocks)."""
        return self.is_active() and self.position < config.HOME_STRETCH_START

    def is_in_home_stretch(self) -> bool:
        return self.is_active() and self.position >= config.HOME_STRETCH_START

    def move_to(self, new_position: int) -> "Token":
        return replace(self, position=new_position, state=state_for_position(new_position))

    def send_home(self) -> "Token":
        return replace(self, position=config.HOME_POSITION, state=TokenState.HOME)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "color": self.color.value,
            "position": self.position,
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Token":
        return cls(
            id=data["id"],
            color=Color(data["color"]),
            position=int(data["position"]),
            state=TokenState(data["state"]),
        )

    def __str__(self) -> str:
        return f"Token({self.id}: {self.state.value} at {self.position})"


def create_tokens(color: Color) -> tuple[Token, ...]:
    return tuple(
        Token(id=f"{color.value}-{i}", color=color)
        for i in range(config.TOKENS_PER_PLAYER)
    )
