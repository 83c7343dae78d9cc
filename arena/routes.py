from flask import Blueprint, current_app, jsonify

from .views import card_payload

arena_bp = Blueprint("arena", __name__)


def _arena():
    return current_app.extensions["arena"]


@arena_bp.route("/health")
def health():
    return jsonify({"status": "ok", "games": len(_arena()["registry"])})


@arena_bp.route("/rooms")
def rooms():
    registry = _arena()["registry"]
    return jsonify([
        {"id": lobby.lobby_id, "hostSocketId": lobby.host_id}
        for lobby in registry.open_lobbies()
    ])


@arena_bp.route("/cards")
def cards():
    deck_store = _arena()["deck_store"]
    return jsonify([card_payload(card) for card in deck_store.list_cards()])
