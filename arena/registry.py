"""
Session registry: the only shared mutable map in the server.

Tracks waiting lobbies, running sessions, and which connection sits where.
Every public method takes the registry lock, so socket handlers running on
different threads never see a half-updated mapping. The sessions themselves
serialize their own actions.
"""

from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional
from .game_state import GameSession
from .lobby import JoinResult, Lobby, LobbyBoard
from .models import ActionError, CardDefinition, GameStatus

logger = logging.getLogger(__name__)

GAME_NOT_FOUND = "Game not found"
ALREADY_PLAYING = "You are already in a game"


class RegistryError(Exception):
    """A request the registry cannot route. The message goes to the sender."""


@dataclass
class Departure:
    """What a disconnect tore down."""
    cancelled_lobbies: list[Lobby] = field(default_factory=list)
    session: Optional[GameSession] = None
    remaining_player: Optional[str] = None


class SessionRegistry:

    def __init__(self, lobbies: Optional[LobbyBoard] = None):
        self.lobbies = lobbies if lobbies is not None else LobbyBoard()
        self._sessions: dict[str, GameSession] = {}
        self._player_to_session: dict[str, str] = {}
        self._users: dict[str, str] = {}      # connection id -> user id
        self._lock = threading.RLock()

    # -- connections ----------------------------------------------------------

    def bind_user(self, connection_id: str, user_id: str) -> None:
        with self._lock:
            self._users[connection_id] = user_id

    def user_of(self, connection_id: str) -> Optional[str]:
        with self._lock:
            return self._users.get(connection_id)

    # -- lobbies --------------------------------------------------------------

    def create_lobby(self, host_id: str, deck: Iterable[CardDefinition]) -> Lobby:
        with self._lock:
            self._ensure_free(host_id)
            self.lobbies.cancel_by_host(host_id)
            return self.lobbies.create_lobby(host_id, deck)

    def join_lobby(
        self,
        lobby_id: str,
        guest_id: str,
        deck: Iterable[CardDefinition],
    ) -> JoinResult:
        with self._lock:
            self._ensure_free(guest_id)
            result = self.lobbies.join(lobby_id, guest_id, deck)
            if not result.ok:
                return result

            session = result.session
            self.lobbies.cancel_by_host(guest_id)
            self._sessions[session.session_id] = session
            self._player_to_session[session.host_id] = session.session_id
            self._player_to_session[session.guest_id] = session.session_id
            return result

    def _ensure_free(self, player_id: str) -> None:
        session = self.session_of(player_id)
        if session is None:
            return
        if session.status is not GameStatus.FINISHED:
            raise RegistryError(ALREADY_PLAYING)
        self.discard(session.session_id)

    def open_lobbies(self) -> list[Lobby]:
        with self._lock:
            return self.lobbies.open_lobbies()

    def has_room(self, room_id: str) -> bool:
        """True while the id names a waiting lobby or a live session."""
        with self._lock:
            return self.lobbies.get(room_id) is not None or room_id in self._sessions

    # -- sessions -------------------------------------------------------------

    def session_for_action(self, session_id: str) -> GameSession:
        """The session an in-game action targets, or RegistryError."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                return session
            if self.lobbies.get(session_id) is not None:
                raise RegistryError(ActionError.GAME_NOT_STARTED.message)
            raise RegistryError(GAME_NOT_FOUND)

    def get(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def session_of(self, player_id: str) -> Optional[GameSession]:
        with self._lock:
            session_id = self._player_to_session.get(player_id)
            return self._sessions.get(session_id) if session_id else None

    def discard(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                return None
            for player_id in (session.host_id, session.guest_id):
                if self._player_to_session.get(player_id) == session_id:
                    del self._player_to_session[player_id]
            self.lobbies.forget(session_id)
            logger.info("Session %s discarded (status=%s)", session_id, session.status.value)
            return session

    def discard_if_finished(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.status is not GameStatus.FINISHED:
                return False
            self.discard(session_id)
            return True

    def disconnect(self, connection_id: str) -> Departure:
        with self._lock:
            self._users.pop(connection_id, None)
            departure = Departure(cancelled_lobbies=self.lobbies.cancel_by_host(connection_id))
            session = self.session_of(connection_id)
            if session is not None:
                self.discard(session.session_id)
                departure.session = session
                departure.remaining_player = session.opponent_of(connection_id)
            return departure

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
