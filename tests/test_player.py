"""Tests for player state transitions"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import random
import pytest

from arena.cards import build_card
from arena.models import ActionError, BattleUnit, ElementType, PlayerState
from arena.player import add_point, draw, new_player, play, receive_attack


def make_cards(n, element=ElementType.FIRE, hp=60, attack=50, defense=30):
    return tuple(
        build_card(f"Card {i}", element, hp, attack, defense, card_id=f"card-{i}")
        for i in range(n)
    )


def test_new_player_shuffles_the_whole_deck():
    deck = make_cards(10)
    ps = new_player("p1", deck, random.Random(3))
    assert ps.player_id == "p1"
    assert sorted(c.id for c in ps.draw_pile) == sorted(c.id for c in deck)
    assert ps.hand == ()
    assert ps.active_unit is None
    assert ps.score == 0


def test_draw_fills_hand_to_five():
    ps = PlayerState("p1", draw_pile=make_cards(10))
    ps, result = draw(ps)
    assert len(ps.hand) == 5
    assert len(ps.draw_pile) == 5
    assert result.drawn == 5
    assert result.hand_size == 5


def test_draw_takes_from_the_front():
    pile = make_cards(7)
    ps, _ = draw(PlayerState("p1", draw_pile=pile))
    assert ps.hand == pile[:5]
    assert ps.draw_pile == pile[5:]


def test_draw_with_full_hand_is_a_noop():
    cards = make_cards(8)
    ps = PlayerState("p1", draw_pile=cards[5:], hand=cards[:5])
    after, result = draw(ps)
    assert after is ps
    assert result.drawn == 0
    assert result.hand_size == 5


def test_draw_stops_when_pile_runs_out():
    ps = PlayerState("p1", draw_pile=make_cards(2))
    ps, result = draw(ps)
    assert len(ps.hand) == 2
    assert ps.draw_pile == ()
    ps, result = draw(ps)
    assert result.drawn == 0
    assert result.hand_size == 2


def test_play_moves_card_to_board_at_full_hp():
    cards = make_cards(3)
    ps = PlayerState("p1", hand=cards)
    after, result = play(ps, 1)
    assert result.ok
    assert result.card == cards[1]
    assert after.active_unit == BattleUnit(card=cards[1], current_hp=cards[1].hp)
    # Remaining order is kept
    assert after.hand == (cards[0], cards[2])


@pytest.mark.parametrize("index", [-1, 3, 99, "0", None, 1.0, True])
def test_play_rejects_bad_index(index):
    ps = PlayerState("p1", hand=make_cards(3))
    after, result = play(ps, index)
    assert result.error is ActionError.INVALID_INDEX
    assert after is ps


def test_play_with_active_unit_fails():
    cards = make_cards(3)
    ps = PlayerState("p1", hand=cards[1:], active_unit=BattleUnit.deploy(cards[0]))
    after, result = play(ps, 0)
    assert result.error is ActionError.ALREADY_HAS_ACTIVE_UNIT
    assert after is ps


def test_receive_attack_damages_unit():
    attacker = BattleUnit.deploy(build_card("Squirtle", ElementType.WATER, 44, 50, 65))
    defender = build_card("Vulpix", ElementType.FIRE, 100, 41, 30)
    ps = PlayerState("p2", active_unit=BattleUnit.deploy(defender))

    after, report = receive_attack(ps, attacker)
    assert report.ok
    assert report.damage == 40
    assert report.multiplier == 2
    assert not report.defeated
    assert after.active_unit.current_hp == 60


def test_receive_attack_knocks_out_at_zero():
    attacker = BattleUnit.deploy(build_card("Machop", ElementType.FIGHTING, 70, 60, 50))
    defender = build_card("Rattata", ElementType.NORMAL, 20, 56, 50)
    ps = PlayerState("p2", active_unit=BattleUnit(card=defender, current_hp=12))

    after, report = receive_attack(ps, attacker)
    assert report.damage == 20
    assert report.defeated
    assert report.defender_name == "Rattata"
    assert after.active_unit is None
    # Scoring belongs to the attacking side
    assert after.score == 0


def test_receive_attack_without_unit():
    attacker = BattleUnit.deploy(make_cards(1)[0])
    ps = PlayerState("p2")
    after, report = receive_attack(ps, attacker)
    assert report.error is ActionError.NO_ACTIVE_UNIT
    assert after is ps


def test_add_point():
    ps = add_point(add_point(PlayerState("p1")))
    assert ps.score == 2
