"""Tests for the session registry"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import itertools
import random
import threading
from dataclasses import replace

import pytest
from arena.cards import PRESET_DECKS, build_deck
from arena.lobby import LobbyBoard
from arena.models import ActionError, GameStatus
from arena.registry import ALREADY_PLAYING, GAME_NOT_FOUND, RegistryError, SessionRegistry
from arena.resolver import MatchRules


def make_registry(rules=MatchRules()):
    ids = (f"room-{i}" for i in itertools.count(1))
    board = LobbyBoard(rules=rules, rng_factory=lambda: random.Random(0),
                       id_factory=lambda: next(ids))
    return SessionRegistry(board)


def deck():
    return build_deck(PRESET_DECKS["balanced"])


def started(registry, host="alice", guest="bob"):
    lobby = registry.create_lobby(host, deck())
    return registry.join_lobby(lobby.lobby_id, guest, deck()).session


def finish(session):
    """Mark the match finished without playing it out."""
    session._state = replace(session.state, status=GameStatus.FINISHED, winner=session.host_id)


def test_users_are_bound_per_connection():
    registry = SessionRegistry()
    registry.bind_user("sid-1", "user-1")
    assert registry.user_of("sid-1") == "user-1"
    assert registry.user_of("sid-2") is None


def test_join_registers_session_for_both_players():
    registry = make_registry()
    session = started(registry)
    assert len(registry) == 1
    assert registry.get(session.session_id) is session
    assert registry.session_of("alice") is session
    assert registry.session_of("bob") is session
    assert registry.open_lobbies() == []


def test_session_for_action():
    registry = make_registry()
    lobby = registry.create_lobby("alice", deck())
    with pytest.raises(RegistryError, match=ActionError.GAME_NOT_STARTED.message):
        registry.session_for_action(lobby.lobby_id)
    with pytest.raises(RegistryError, match=GAME_NOT_FOUND):
        registry.session_for_action("nowhere")
    session = registry.join_lobby(lobby.lobby_id, "bob", deck()).session
    assert registry.session_for_action(lobby.lobby_id) is session


def test_has_room():
    registry = make_registry()
    lobby = registry.create_lobby("alice", deck())
    assert registry.has_room(lobby.lobby_id)
    assert not registry.has_room("nowhere")


def test_player_in_a_running_game_cannot_start_another():
    registry = make_registry()
    started(registry)
    with pytest.raises(RegistryError, match=ALREADY_PLAYING):
        registry.create_lobby("alice", deck())
    other = registry.create_lobby("carol", deck())
    with pytest.raises(RegistryError, match=ALREADY_PLAYING):
        registry.join_lobby(other.lobby_id, "bob", deck())


def test_finished_game_does_not_block_a_new_one():
    registry = make_registry()
    session = started(registry)
    finish(session)
    lobby = registry.create_lobby("alice", deck())
    assert registry.get(session.session_id) is None
    assert registry.open_lobbies() == [lobby]


def test_creating_again_replaces_waiting_lobby():
    registry = make_registry()
    registry.create_lobby("alice", deck())
    second = registry.create_lobby("alice", deck())
    assert registry.open_lobbies() == [second]


def test_joining_cancels_guests_own_lobby():
    registry = make_registry()
    registry.create_lobby("bob", deck())
    started(registry)
    assert registry.open_lobbies() == []


def test_discard_if_finished():
    registry = make_registry()
    session = started(registry)
    assert not registry.discard_if_finished(session.session_id)
    finish(session)
    assert registry.discard_if_finished(session.session_id)
    assert len(registry) == 0
    assert registry.session_of("alice") is None
    assert not registry.discard_if_finished(session.session_id)


def test_disconnect_tears_down_session():
    registry = make_registry()
    registry.bind_user("bob", "user-bob")
    session = started(registry)
    departure = registry.disconnect("bob")
    assert departure.session is session
    assert departure.remaining_player == "alice"
    assert departure.cancelled_lobbies == []
    assert registry.get(session.session_id) is None
    assert registry.session_of("alice") is None
    assert registry.user_of("bob") is None
    with pytest.raises(RegistryError, match=GAME_NOT_FOUND):
        registry.session_for_action(session.session_id)


def test_disconnect_cancels_waiting_lobby():
    registry = make_registry()
    lobby = registry.create_lobby("alice", deck())
    departure = registry.disconnect("alice")
    assert departure.cancelled_lobbies == [lobby]
    assert departure.session is None
    assert registry.open_lobbies() == []


def test_disconnect_of_idle_connection():
    departure = make_registry().disconnect("nobody")
    assert departure.session is None
    assert departure.cancelled_lobbies == []


def test_two_guests_racing_for_one_lobby():
    registry = make_registry()
    lobby = registry.create_lobby("alice", deck())
    barrier = threading.Barrier(2)
    results = {}

    def join(guest):
        barrier.wait()
        results[guest] = registry.join_lobby(lobby.lobby_id, guest, deck())

    threads = [threading.Thread(target=join, args=(g,)) for g in ("bob", "carol")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    outcomes = sorted(r.ok for r in results.values())
    assert outcomes == [False, True]
    loser = next(r for r in results.values() if not r.ok)
    assert loser.error is ActionError.ALREADY_FULL
    assert len(registry) == 1
