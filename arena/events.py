"""
Arena Battle Engine — Outbound Events
One dataclass per event kind. A GameSession answers every action with an
EventBatch; the transport layer resolves each addressee to connections and
emits `event.name` with `event.payload()`.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union
from .views import PlayerView, to_payload


class Addressee(Enum):
    HOST = "host"
    GUEST = "guest"
    BOTH = "both"
    SENDER = "sender"     # The connection that sent the action, seated or not


@dataclass(frozen=True)
class ErrorEvent:
    name: ClassVar[str] = "error"
    addressee: Addressee
    message: str

    def payload(self) -> dict:
        return {"message": self.message}


@dataclass(frozen=True)
class StateUpdateEvent:
    name: ClassVar[str] = "gameStateUpdated"
    addressee: Addressee
    message: str
    game_state: PlayerView

    def payload(self) -> dict:
        return {"message": self.message, "gameState": to_payload(self.game_state)}


@dataclass(frozen=True)
class GameStartedEvent:
    name: ClassVar[str] = "gameStarted"
    addressee: Addressee
    message: str
    game_state: PlayerView

    def payload(self) -> dict:
        return {"message": self.message, "gameState": to_payload(self.game_state)}


@dataclass(frozen=True)
class GameEndedEvent:
    name: ClassVar[str] = "gameEnded"
    winner: str
    message: str
    addressee: Addressee = Addressee.BOTH

    def payload(self) -> dict:
        # "winner" is kept alongside "winnerId" for older clients
        return {"winnerId": self.winner, "winner": self.winner, "message": self.message}


GameEvent = Union[ErrorEvent, StateUpdateEvent, GameStartedEvent, GameEndedEvent]


@dataclass(frozen=True)
class EventBatch:
    events: tuple[GameEvent, ...] = ()

    @classmethod
    def of(cls, *events: GameEvent) -> EventBatch:
        return cls(events=tuple(events))

    @property
    def failed(self) -> bool:
        return any(isinstance(e, ErrorEvent) for e in self.events)

    def first(self, kind: type) -> Optional[GameEvent]:
        return next((e for e in self.events if isinstance(e, kind)), None)

    def for_addressee(self, addressee: Addressee) -> list[GameEvent]:
        return [e for e in self.events if e.addressee in (addressee, Addressee.BOTH)]
