"""Game session handle: owns one MatchState and turns actions into event batches."""

from __future__ import annotations
import random
import threading
from typing import Iterable, Optional
from .events import (
    Addressee, ErrorEvent, EventBatch, GameEndedEvent, GameStartedEvent, StateUpdateEvent,
)
from .models import ActionResult, CardDefinition, GameStatus, MatchState, Seat
from .resolver import DEFAULT_RULES, MatchRules, start_match
from . import resolver
from .views import PlayerView, state_for_player


def _addressee(seat: Seat) -> Addressee:
    return Addressee.HOST if seat is Seat.HOST else Addressee.GUEST


class GameSession:
    """
    A running match between a host and a guest.

    Actions on one session run strictly one after another; each holds the
    session lock from validation to the last event built.
    """

    def __init__(
        self,
        session_id: str,
        host_id: str,
        host_deck: Iterable[CardDefinition],
        guest_id: str,
        guest_deck: Iterable[CardDefinition],
        rules: MatchRules = DEFAULT_RULES,
        rng: Optional[random.Random] = None,
    ):
        self._state = start_match(session_id, host_id, host_deck, guest_id, guest_deck, rng)
        self.rules = rules
        self._lock = threading.Lock()

    @classmethod
    def from_state(cls, state: MatchState, rules: MatchRules = DEFAULT_RULES) -> GameSession:
        """Wrap an already built MatchState (used by tests and tooling)."""
        session = cls.__new__(cls)
        session._state = state
        session.rules = rules
        session._lock = threading.Lock()
        return session

    # -- read side ------------------------------------------------------------

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def session_id(self) -> str:
        return self._state.session_id

    @property
    def host_id(self) -> str:
        return self._state.host.player_id

    @property
    def guest_id(self) -> str:
        return self._state.guest.player_id

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def winner(self) -> Optional[str]:
        return self._state.winner

    def has_player(self, player_id: str) -> bool:
        return self._state.seat_of(player_id) is not None

    def opponent_of(self, player_id: str) -> Optional[str]:
        seat = self._state.seat_of(player_id)
        if seat is None:
            return None
        return self._state.player(seat.other).player_id

    def state_for_player(self, player_id: str) -> Optional[PlayerView]:
        return state_for_player(self._state, player_id)

    # -- actions --------------------------------------------------------------

    def started(self) -> EventBatch:
        state = self._state
        return EventBatch.of(
            GameStartedEvent(
                Addressee.HOST,
                "An opponent joined! The game begins!",
                state_for_player(state, self.host_id),
            ),
            GameStartedEvent(
                Addressee.GUEST,
                "You joined the game! The game begins!",
                state_for_player(state, self.guest_id),
            ),
        )

    def draw_cards(self, player_id: str) -> EventBatch:
        with self._lock:
            self._state, result = resolver.draw_cards(self._state, player_id, self.rules)
            return self._notify(player_id, result, "Your opponent drew cards")

    def play_card(self, player_id: str, hand_index: int) -> EventBatch:
        with self._lock:
            self._state, result = resolver.play_card(self._state, player_id, hand_index, self.rules)
            return self._notify(player_id, result, "Your opponent played a card")

    def attack(self, player_id: str) -> EventBatch:
        with self._lock:
            self._state, result = resolver.attack(self._state, player_id, self.rules)
            batch = self._notify(player_id, result, result.message, both=True)
            if result.game_won:
                batch = EventBatch.of(*batch.events, GameEndedEvent(player_id, result.message))
            return batch

    def _notify(
        self,
        player_id: str,
        result: ActionResult,
        opponent_message: str,
        both: bool = False,
    ) -> EventBatch:
        seat = self._state.seat_of(player_id)
        if not result.success:
            return EventBatch.of(
                ErrorEvent(_addressee(seat) if seat else Addressee.SENDER, result.message)
            )

        state = self._state
        opponent_id = state.player(seat.other).player_id
        return EventBatch.of(
            StateUpdateEvent(_addressee(seat), result.message, state_for_player(state, player_id)),
            StateUpdateEvent(
                _addressee(seat.other),
                result.message if both else opponent_message,
                state_for_player(state, opponent_id),
            ),
        )
