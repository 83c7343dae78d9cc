"""
Arena — Server Entry Point
Builds the Flask app and Socket.IO server and wires the registry, deck
store and identity adapter into them.

Usage:
    python -m arena.app                        # serve on $PORT
    python -m arena.app --issue-token alice    # print a token for a test client
"""

from __future__ import annotations
import argparse
import logging
from typing import Optional

from flask import Flask
from flask_socketio import SocketIO

from .config import Settings
from .identity import Authenticator, SignedTokenIdentity
from .lobby import LobbyBoard
from .registry import SessionRegistry
from .repository import DeckStore, InMemoryDeckStore, SupabaseDeckStore
from .routes import arena_bp
from .sockets import register_game_socket_handlers

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def build_deck_store(settings: Settings) -> DeckStore:
    if settings.uses_supabase:
        return SupabaseDeckStore.from_credentials(
            settings.supabase_url, settings.supabase_key, settings.deck_size,
        )
    logger.warning("SUPABASE_URL/SUPABASE_KEY not set, using the in-memory deck store")
    return InMemoryDeckStore(deck_size=settings.deck_size, shared_presets=True)


def create_app(
    settings: Optional[Settings] = None,
    deck_store: Optional[DeckStore] = None,
    authenticate: Optional[Authenticator] = None,
    registry: Optional[SessionRegistry] = None,
) -> tuple[Flask, SocketIO]:
    # An empty registry is falsy (it has __len__), so test against None
    if settings is None:
        settings = Settings.from_env()
    if deck_store is None:
        deck_store = build_deck_store(settings)
    if authenticate is None:
        authenticate = SignedTokenIdentity(settings.secret_key)
    if registry is None:
        registry = SessionRegistry(LobbyBoard(rules=settings.match_rules))

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.extensions["arena"] = {
        "settings": settings,
        "registry": registry,
        "deck_store": deck_store,
    }
    app.register_blueprint(arena_bp)

    socketio = SocketIO(app, cors_allowed_origins=settings.cors_origin, async_mode="threading")
    register_game_socket_handlers(socketio, registry, deck_store, authenticate, settings)
    return app, socketio


def main() -> None:
    parser = argparse.ArgumentParser(description="Arena battle server")
    parser.add_argument("--issue-token", metavar="USER_ID",
                        help="Print a signed token for USER_ID and exit")
    args = parser.parse_args()

    settings = Settings.from_env()
    if args.issue_token:
        print(SignedTokenIdentity(settings.secret_key).issue(args.issue_token))
        return

    configure_logging(settings.log_level)
    app, socketio = create_app(settings)
    logger.info("Arena server listening on port %d", settings.port)
    socketio.run(app, host="0.0.0.0", port=settings.port, allow_unsafe_werkzeug=True)


if __name__ == "__main__":
    main()
