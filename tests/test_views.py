"""Tests for the per-player projection"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import random

from arena.cards import CARD_REGISTRY, build_deck
from arena.models import GameStatus, Seat
from arena.resolver import draw_cards, play_card, start_match
from arena.views import card_payload, state_for_player, to_payload


HOST = "host-sid"
GUEST = "guest-sid"


def drawn_match():
    deck = build_deck(["pikachu", "charmander", "squirtle", "bulbasaur", "gengar"] * 2)
    state = start_match("room-1", HOST, deck, GUEST, deck, random.Random(5))
    state, _ = draw_cards(state, HOST)
    state, _ = draw_cards(state, GUEST)
    return state


def test_guest_view_after_both_draw():
    state = drawn_match()
    view = state_for_player(state, GUEST)
    assert view.session_id == "room-1"
    assert view.status is GameStatus.PLAYING
    assert view.current_turn is Seat.HOST
    assert not view.is_your_turn
    assert view.your_board.hand == state.guest.hand
    assert view.your_board.deck_count == 5
    assert view.opponent_board.hand_count == 5
    assert view.opponent_board.deck_count == 5
    assert not hasattr(view.opponent_board, "hand")


def test_opponent_payload_hides_hand_and_pile():
    state = drawn_match()
    payload = to_payload(state_for_player(state, GUEST))
    opponent = payload["opponentBoard"]
    assert set(opponent) == {"activeCard", "handCount", "deckCount", "score"}
    assert opponent["handCount"] == 5
    assert "hand" not in opponent

    own_ids = [c["id"] for c in payload["yourBoard"]["hand"]]
    assert own_ids == [c.id for c in state.guest.hand]


def test_active_units_are_public():
    state = drawn_match()
    state, _ = play_card(state, HOST, 0)
    played = state.host.active_unit
    payload = to_payload(state_for_player(state, GUEST))
    active = payload["opponentBoard"]["activeCard"]
    assert active["id"] == played.card.id
    assert active["currentHp"] == played.current_hp
    assert payload["yourBoard"]["activeCard"] is None
    assert payload["currentTurn"] == "host"
    assert payload["isYourTurn"] is False


def test_view_is_rebuilt_on_every_query():
    state = drawn_match()
    before = state_for_player(state, HOST)
    state, _ = play_card(state, HOST, 0)
    after = state_for_player(state, HOST)
    assert before.your_board.active_unit is None
    assert after.your_board.active_unit is not None
    assert len(after.your_board.hand) == 4


def test_unknown_player_has_no_view():
    assert state_for_player(drawn_match(), "stranger") is None


def test_card_payload_keys():
    payload = card_payload(CARD_REGISTRY["pikachu"])
    assert payload == {
        "id": "pikachu",
        "name": "Pikachu",
        "pokedexNumber": 25,
        "type": "Electric",
        "hp": 35,
        "attack": 55,
        "defense": 40,
        "imgUrl": "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/25.png",
    }
