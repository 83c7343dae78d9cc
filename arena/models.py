"""
Arena Battle Engine — Data Models
All game state is represented here. Pure data, no logic.
Every state object is frozen: transitions build new values instead of mutating.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ElementType(Enum):
    NORMAL = "Normal"
    FIRE = "Fire"
    WATER = "Water"
    ELECTRIC = "Electric"
    GRASS = "Grass"
    ICE = "Ice"
    FIGHTING = "Fighting"
    POISON = "Poison"
    GROUND = "Ground"
    FLYING = "Flying"
    PSYCHIC = "Psychic"
    BUG = "Bug"
    ROCK = "Rock"
    GHOST = "Ghost"
    DRAGON = "Dragon"
    DARK = "Dark"
    STEEL = "Steel"
    FAIRY = "Fairy"


class GameStatus(Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class Seat(Enum):
    HOST = "host"       # First mover
    GUEST = "guest"     # Second mover

    @property
    def other(self) -> Seat:
        return Seat.GUEST if self is Seat.HOST else Seat.HOST


class ActionError(Enum):
    """Caller-visible failures. The value is the message sent to the actor."""
    PLAYER_NOT_FOUND = "Player not found in this game"
    GAME_NOT_STARTED = "The game is not in progress"
    NOT_YOUR_TURN = "It's not your turn"
    INVALID_INDEX = "Invalid card index"
    ALREADY_HAS_ACTIVE_UNIT = "You already have an active card on the board"
    NO_ACTIVE_UNIT = "There is no active card to attack"
    ATTACKER_HAS_NO_ACTIVE_UNIT = "You have no active card to attack with"
    DEFENDER_HAS_NO_ACTIVE_UNIT = "Your opponent has no active card to attack"
    ALREADY_FULL = "This game is already full"
    LOBBY_NOT_FOUND = "Room not found"
    CANNOT_JOIN_OWN_LOBBY = "You cannot join your own room"

    @property
    def message(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Card Definition (owned by the deck store, never mutated here)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CardDefinition:
    id: str
    name: str
    pokedex_number: int
    type: ElementType
    hp: int
    attack: int
    defense: int
    image_url: str = ""


# ---------------------------------------------------------------------------
# Battle Unit (a card on the board, with live HP)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BattleUnit:
    card: CardDefinition
    current_hp: int

    @classmethod
    def deploy(cls, card: CardDefinition) -> BattleUnit:
        return cls(card=card, current_hp=card.hp)

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def type(self) -> ElementType:
        return self.card.type

    @property
    def attack(self) -> int:
        return self.card.attack

    @property
    def defense(self) -> int:
        return self.card.defense


# ---------------------------------------------------------------------------
# Player State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlayerState:
    player_id: str
    draw_pile: tuple[CardDefinition, ...] = ()   # Front is drawn first
    hand: tuple[CardDefinition, ...] = ()
    active_unit: Optional[BattleUnit] = None
    score: int = 0


# ---------------------------------------------------------------------------
# Transition results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DrawResult:
    drawn: int
    hand_size: int


@dataclass(frozen=True)
class PlayResult:
    card: Optional[CardDefinition] = None
    error: Optional[ActionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DamageReport:
    damage: int = 0
    multiplier: int = 1
    defeated: bool = False
    defender_name: str = ""
    error: Optional[ActionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ActionResult:
    """What a session action reports back to its caller."""
    success: bool
    message: str
    error: Optional[ActionError] = None
    unit_defeated: bool = False
    game_won: bool = False
    damage: int = 0

    @classmethod
    def failure(cls, error: ActionError) -> ActionResult:
        return cls(success=False, message=error.message, error=error)


# ---------------------------------------------------------------------------
# Full Match State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MatchState:
    session_id: str
    host: PlayerState
    guest: PlayerState
    turn: Seat = Seat.HOST
    status: GameStatus = GameStatus.PLAYING
    winner: Optional[str] = None

    def seat_of(self, player_id: str) -> Optional[Seat]:
        if player_id == self.host.player_id:
            return Seat.HOST
        if player_id == self.guest.player_id:
            return Seat.GUEST
        return None

    def player(self, seat: Seat) -> PlayerState:
        return self.host if seat is Seat.HOST else self.guest

    def with_player(self, seat: Seat, ps: PlayerState) -> MatchState:
        if seat is Seat.HOST:
            return replace(self, host=ps)
        return replace(self, guest=ps)

    @property
    def turn_player_id(self) -> str:
        return self.player(self.turn).player_id
