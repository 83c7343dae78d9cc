"""
Socket.IO transport: relays client actions to sessions and session events
back to the right connections. Players are identified by their connection
sid; the authenticated user id is only used to check deck ownership.
"""

from __future__ import annotations
import functools
import logging
from typing import Any, Callable, Optional

from flask import request
from flask_socketio import ConnectionRefusedError, emit

from .config import Settings
from .events import Addressee, EventBatch, GameEndedEvent
from .game_state import GameSession
from .identity import Authenticator
from .models import ActionError, GameStatus
from .registry import RegistryError, SessionRegistry
from .repository import DeckLookupError, DeckStore
from .views import to_payload

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def recipients(session: GameSession, addressee: Addressee, sender: str) -> list[str]:
    if addressee is Addressee.HOST:
        return [session.host_id]
    if addressee is Addressee.GUEST:
        return [session.guest_id]
    if addressee is Addressee.BOTH:
        return [session.host_id, session.guest_id]
    return [sender]


def emit_batch(socketio, session: GameSession, batch: EventBatch, sender: str) -> None:
    for event in batch.events:
        for sid in recipients(session, event.addressee, sender):
            socketio.emit(event.name, event.payload(), to=sid)


def _field(data: Any, name: str) -> Any:
    return data.get(name) if isinstance(data, dict) else None


def _room_id(data: Any) -> Optional[str]:
    value = _field(data, "roomId")
    return str(value) if value is not None else None


def _guarded(handler: Callable) -> Callable:
    @functools.wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except Exception:
            logger.exception("Unhandled error in %s", handler.__name__)
            emit("error", {"message": INTERNAL_ERROR})
    return wrapper


def register_game_socket_handlers(
    socketio,
    registry: SessionRegistry,
    deck_store: DeckStore,
    authenticate: Authenticator,
    settings: Optional[Settings] = None,
) -> None:
    if settings is None:
        settings = Settings()

    def rooms_payload() -> list[dict]:
        return [
            {"id": lobby.lobby_id, "hostSocketId": lobby.host_id}
            for lobby in registry.open_lobbies()
        ]

    def fail(message: str) -> None:
        emit("error", {"message": message})

    def load_deck(deck_id: Any):
        return deck_store.load_deck(str(deck_id) if deck_id else "", registry.user_of(request.sid))

    def schedule_eviction(session_id: str) -> None:
        ttl = settings.finished_game_ttl
        if ttl <= 0:
            registry.discard_if_finished(session_id)
            return

        def evict():
            socketio.sleep(ttl)
            registry.discard_if_finished(session_id)

        socketio.start_background_task(evict)

    def run_action(data: Any, action: Callable[[GameSession, str], EventBatch]) -> None:
        sid = request.sid
        try:
            session = registry.session_for_action(_room_id(data))
        except RegistryError as exc:
            fail(str(exc))
            return

        batch = action(session, sid)
        emit_batch(socketio, session, batch, sid)
        if batch.first(GameEndedEvent) is not None:
            logger.info("Game %s won by %s", session.session_id, session.winner)
            schedule_eviction(session.session_id)

    # -- connection -----------------------------------------------------------

    @socketio.on("connect")
    def on_connect(auth=None):
        token = _field(auth, "token")
        user_id = authenticate(token)
        if not user_id:
            logger.warning("Connection %s refused: bad or missing token", request.sid)
            raise ConnectionRefusedError("Authentication error: Invalid token")
        registry.bind_user(request.sid, user_id)
        logger.info("User connected: %s (%s)", user_id, request.sid)

    @socketio.on("disconnect")
    def on_disconnect(*args):
        sid = request.sid
        departure = registry.disconnect(sid)
        logger.info("User disconnected: %s", sid)

        session = departure.session
        if session is not None and departure.remaining_player:
            if session.status is GameStatus.PLAYING:
                socketio.emit(
                    "opponentDisconnected",
                    {"message": "Your opponent disconnected. The game is over."},
                    to=departure.remaining_player,
                )
        if departure.cancelled_lobbies or session is not None:
            socketio.emit("roomsListUpdated", rooms_payload())

    # -- rooms ----------------------------------------------------------------

    @socketio.on("createRoom")
    @_guarded
    def on_create_room(data=None):
        sid = request.sid
        try:
            deck = load_deck(_field(data, "deckId"))
            lobby = registry.create_lobby(sid, deck)
        except DeckLookupError as exc:
            fail(exc.message)
            return
        except RegistryError as exc:
            fail(str(exc))
            return

        emit("roomCreated", {
            "roomId": lobby.lobby_id,
            "message": "Room created. Waiting for an opponent...",
        })
        socketio.emit("roomsListUpdated", rooms_payload())

    @socketio.on("joinRoom")
    @_guarded
    def on_join_room(data=None):
        sid = request.sid
        room_id = _room_id(data)
        if not registry.has_room(room_id):
            fail(ActionError.LOBBY_NOT_FOUND.message)
            return
        try:
            deck = load_deck(_field(data, "deckId"))
            result = registry.join_lobby(room_id, sid, deck)
        except DeckLookupError as exc:
            fail(exc.message)
            return
        except RegistryError as exc:
            fail(str(exc))
            return

        if not result.ok:
            fail(result.error.message)
            return

        session = result.session
        emit_batch(socketio, session, session.started(), sid)
        socketio.emit("roomsListUpdated", rooms_payload())
        logger.info("Game started in room %s", session.session_id)

    @socketio.on("getRooms")
    @_guarded
    def on_get_rooms(data=None):
        emit("roomsList", rooms_payload())

    # -- game actions ---------------------------------------------------------

    @socketio.on("drawCards")
    @_guarded
    def on_draw_cards(data=None):
        run_action(data, lambda session, sid: session.draw_cards(sid))

    @socketio.on("playCard")
    @_guarded
    def on_play_card(data=None):
        card_index = _field(data, "cardIndex")
        run_action(data, lambda session, sid: session.play_card(sid, card_index))

    @socketio.on("attack")
    @_guarded
    def on_attack(data=None):
        run_action(data, lambda session, sid: session.attack(sid))

    @socketio.on("getGameState")
    @_guarded
    def on_get_game_state(data=None):
        try:
            session = registry.session_for_action(_room_id(data))
        except RegistryError as exc:
            fail(str(exc))
            return
        view = session.state_for_player(request.sid)
        if view is None:
            fail(ActionError.PLAYER_NOT_FOUND.message)
            return
        emit("gameState", {"gameState": to_payload(view)})
