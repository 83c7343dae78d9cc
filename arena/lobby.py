"""
Arena Battle Engine — Matchmaking Lobby
A lobby holds one waiting host and their deck until a guest shows up.
Joining consumes the lobby and builds a GameSession under the same id,
with the host as first mover.
"""

from __future__ import annotations
import logging
import random
import uuid
from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from .game_state import GameSession
from .models import ActionError, CardDefinition, GameStatus
from .resolver import DEFAULT_RULES, MatchRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lobby:
    lobby_id: str
    host_id: str
    host_deck: tuple[CardDefinition, ...]
    status: GameStatus = GameStatus.WAITING


@dataclass(frozen=True)
class JoinResult:
    session: Optional[GameSession] = None
    error: Optional[ActionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LobbyBoard:
    """
    Waiting lobbies plus the ids of lobbies already turned into sessions,
    so a late second guest hears ALREADY_FULL rather than LOBBY_NOT_FOUND.
    Not thread safe on its own; SessionRegistry serializes access.
    """

    def __init__(
        self,
        rules: MatchRules = DEFAULT_RULES,
        rng_factory: Callable[[], random.Random] = random.Random,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.rules = rules
        self._rng_factory = rng_factory
        self._id_factory = id_factory
        self._waiting: dict[str, Lobby] = {}
        self._consumed: set[str] = set()

    def create_lobby(self, host_id: str, host_deck: Iterable[CardDefinition]) -> Lobby:
        lobby = Lobby(lobby_id=self._id_factory(), host_id=host_id, host_deck=tuple(host_deck))
        self._waiting[lobby.lobby_id] = lobby
        logger.info("Lobby %s opened by %s", lobby.lobby_id, host_id)
        return lobby

    def join(
        self,
        lobby_id: str,
        guest_id: str,
        guest_deck: Iterable[CardDefinition],
    ) -> JoinResult:
        if lobby_id in self._consumed:
            return JoinResult(error=ActionError.ALREADY_FULL)
        lobby = self._waiting.get(lobby_id)
        if lobby is None:
            return JoinResult(error=ActionError.LOBBY_NOT_FOUND)
        if lobby.host_id == guest_id:
            return JoinResult(error=ActionError.CANNOT_JOIN_OWN_LOBBY)

        session = GameSession(
            session_id=lobby.lobby_id,
            host_id=lobby.host_id,
            host_deck=lobby.host_deck,
            guest_id=guest_id,
            guest_deck=guest_deck,
            rules=self.rules,
            rng=self._rng_factory(),
        )
        del self._waiting[lobby_id]
        self._consumed.add(lobby_id)
        logger.info("Lobby %s joined by %s, game started", lobby_id, guest_id)
        return JoinResult(session=session)

    def get(self, lobby_id: str) -> Optional[Lobby]:
        return self._waiting.get(lobby_id)

    def cancel(self, lobby_id: str) -> Optional[Lobby]:
        lobby = self._waiting.pop(lobby_id, None)
        if lobby:
            logger.info("Lobby %s cancelled", lobby_id)
        return lobby

    def cancel_by_host(self, host_id: str) -> list[Lobby]:
        mine = [l for l in self._waiting.values() if l.host_id == host_id]
        for lobby in mine:
            self.cancel(lobby.lobby_id)
        return mine

    def forget(self, lobby_id: str) -> None:
        """Drop the consumed marker once the session built from it is gone."""
        self._consumed.discard(lobby_id)

    def open_lobbies(self) -> list[Lobby]:
        return list(self._waiting.values())
