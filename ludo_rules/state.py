"""
Immutable game snapshot.

A GameState is never edited in place: reducers in ``ludo_rules.game`` build
a new value with ``dataclasses.replace``. ``version`` grows with every
accepted transition so deferred actions can tell whether the snapshot they
were scheduled against is still current.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import GameConfig, config
from .player import Player, create_players
from .token import state_for_position
from .types import CaptureEvent, FinishEvent, GameStatus, PenaltyEvent


class InvalidStateError(ValueError):
    """Raised when a snapshot breaks a structural invariant."""


@dataclass(frozen=True, slots=True)
class GameState:
    players: tuple[Player, ...]
    current_player_index: int = 0
    dice_value: Optional[int] = None
    is_rolling: bool = False
    can_roll_again: bool = False
    selected_token_id: Optional[str] = None
    game_status: GameStatus = GameStatus.WAITING
    winner: Optional[str] = None  # player id, always rankings[0]
    rankings: tuple[str, ...] = ()
    turn_count: int = 0
    consecutive_sixes: int = 0
    last_capture_event: Optional[CaptureEvent] = None
    last_finish_event: Optional[FinishEvent] = None
    last_penalty_event: Optional[PenaltyEvent] = None
    version: int = 0

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def player_count(self) -> int:
        return len(self.players)

    def player_by_id(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def ranked_players(self) -> list[Player]:
        return [self.player_by_id(pid) for pid in self.rankings]

    def to_dict(self) -> dict:
        return {
            "players": [p.to_dict() for p in self.players],
            "current_player_index": self.current_player_index,
            "dice_value": self.dice_value,
            "is_rolling": self.is_rolling,
            "can_roll_again": self.can_roll_again,
            "selected_token_id": self.selected_token_id,
            "game_status": self.game_status.value,
            "winner": self.winner,
            "rankings": list(self.rankings),
            "turn_count": self.turn_count,
            "consecutive_sixes": self.consecutive_sixes,
            "last_capture_event": (
                self.last_capture_event.to_dict() if self.last_capture_event else None
            ),
            "last_finish_event": (
                self.last_finish_event.to_dict() if self.last_finish_event else None
            ),
            "last_penalty_event": (
                self.last_penalty_event.to_dict() if self.last_penalty_event else None
            ),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GameState":
        """Rebuild a snapshot; raises InvalidStateError on malformed input."""
        try:
            dice = data.get("dice_value")
            state = cls(
                players=tuple(Player.from_dict(p) for p in data["players"]),
                current_player_index=int(data["current_player_index"]),
                dice_value=int(dice) if dice is not None else None,
                is_rolling=bool(data.get("is_rolling", False)),
                can_roll_again=bool(data.get("can_roll_again", False)),
                selected_token_id=data.get("selected_token_id"),
                game_status=GameStatus(data["game_status"]),
                winner=data.get("winner"),
                rankings=tuple(data.get("rankings", ())),
                turn_count=int(data.get("turn_count", 0)),
                consecutive_sixes=int(data.get("consecutive_sixes", 0)),
                last_capture_event=CaptureEvent.from_dict(data.get("last_capture_event")),
                last_finish_event=FinishEvent.from_dict(data.get("last_finish_event")),
                last_penalty_event=PenaltyEvent.from_dict(data.get("last_penalty_event")),
                version=int(data.get("version", 0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidStateError(f"Malformed game state: {e}") from e
        validate_state(state)
        return state


def create_initial_state(game_config: GameConfig, version: int = 0) -> GameState:
    return GameState(players=create_players(game_config), version=version)


def validate_state(state: GameState) -> None:
    """Check the structural invariants of a snapshot.

    Raises InvalidStateError describing the first violation found.
    """
    if not 2 <= state.player_count <= 4:
        raise InvalidStateError(f"Unsupported player count {state.player_count}")
    if not 0 <= state.current_player_index < state.player_count:
        raise InvalidStateError("current_player_index out of range")
    if state.dice_value is not None and not 1 <= state.dice_value <= 6:
        raise InvalidStateError(f"dice_value {state.dice_value} outside 1..6")

    for player in state.players:
        if len(player.tokens) != config.TOKENS_PER_PLAYER:
            raise InvalidStateError(f"{player.id} must own {config.TOKENS_PER_PLAYER} tokens")
        for token in player.tokens:
            if token.color != player.color:
                raise InvalidStateError(f"{token.id} does not match owner color")
            if not config.HOME_POSITION <= token.position <= config.FINISH_POSITION:
                raise InvalidStateError(f"{token.id} position {token.position} out of range")
            if state_for_position(token.position) != token.state:
                raise InvalidStateError(
                    f"{token.id} state {token.state.value} disagrees with position {token.position}"
                )
        finished = sum(1 for t in player.tokens if t.is_finished())
        if finished != player.finished_tokens:
            raise InvalidStateError(f"{player.id} finished_tokens out of sync")

    for pid in state.rankings:
        player = state.player_by_id(pid)
        if player is None or not player.has_won():
            raise InvalidStateError(f"Ranked player {pid} has not finished")
    if len(set(state.rankings)) != len(state.rankings):
        raise InvalidStateError("Duplicate entries in rankings")
    if state.winner != (state.rankings[0] if state.rankings else None):
        raise InvalidStateError("winner must be the first ranked player")

    if state.game_status == GameStatus.FINISHED:
        if len(state.rankings) != state.player_count - 1:
            raise InvalidStateError("Finished game must rank all but one player")
    elif state.current_player.has_won():
        raise InvalidStateError("Turn belongs to a player who already finished")
