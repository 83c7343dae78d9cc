"""Tests for the matchmaking lobby"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import itertools
import random

from arena.cards import PRESET_DECKS, build_deck
from arena.lobby import LobbyBoard
from arena.models import ActionError, GameStatus, Seat
from arena.resolver import MatchRules


def make_board(**kwargs):
    ids = (f"room-{i}" for i in itertools.count(1))
    return LobbyBoard(rng_factory=lambda: random.Random(0), id_factory=lambda: next(ids), **kwargs)


def deck(name="balanced"):
    return build_deck(PRESET_DECKS[name])


def test_create_lobby():
    board = make_board()
    lobby = board.create_lobby("alice", deck())
    assert lobby.lobby_id == "room-1"
    assert lobby.host_id == "alice"
    assert lobby.status is GameStatus.WAITING
    assert len(lobby.host_deck) == 20
    assert board.open_lobbies() == [lobby]


def test_join_builds_session_with_host_first():
    board = make_board()
    lobby = board.create_lobby("alice", deck("blaze"))
    result = board.join(lobby.lobby_id, "bob", deck("tide"))
    assert result.ok
    session = result.session
    assert session.session_id == lobby.lobby_id
    assert session.host_id == "alice"
    assert session.guest_id == "bob"
    assert session.status is GameStatus.PLAYING
    assert session.state.turn is Seat.HOST
    assert board.open_lobbies() == []


def test_join_passes_rules_to_session():
    rules = MatchRules(draw_requires_turn=True)
    board = make_board(rules=rules)
    lobby = board.create_lobby("alice", deck())
    assert board.join(lobby.lobby_id, "bob", deck()).session.rules is rules


def test_second_join_is_already_full():
    board = make_board()
    lobby = board.create_lobby("alice", deck())
    board.join(lobby.lobby_id, "bob", deck())
    result = board.join(lobby.lobby_id, "carol", deck())
    assert not result.ok
    assert result.error is ActionError.ALREADY_FULL


def test_join_unknown_lobby():
    result = make_board().join("nowhere", "bob", deck())
    assert result.error is ActionError.LOBBY_NOT_FOUND
    assert result.session is None


def test_host_cannot_join_own_lobby():
    board = make_board()
    lobby = board.create_lobby("alice", deck())
    result = board.join(lobby.lobby_id, "alice", deck())
    assert result.error is ActionError.CANNOT_JOIN_OWN_LOBBY
    assert board.get(lobby.lobby_id) == lobby


def test_cancel_by_host():
    board = make_board()
    first = board.create_lobby("alice", deck())
    board.create_lobby("bob", deck())
    assert board.cancel_by_host("alice") == [first]
    assert [l.host_id for l in board.open_lobbies()] == ["bob"]
    assert board.join(first.lobby_id, "carol", deck()).error is ActionError.LOBBY_NOT_FOUND


def test_forget_clears_consumed_marker():
    board = make_board()
    lobby = board.create_lobby("alice", deck())
    board.join(lobby.lobby_id, "bob", deck())
    board.forget(lobby.lobby_id)
    assert board.join(lobby.lobby_id, "carol", deck()).error is ActionError.LOBBY_NOT_FOUND
