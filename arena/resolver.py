"""
Arena Battle Engine — Match Resolution
Validates and sequences the three in-game actions (draw, play, attack).

Every function returns (new MatchState, ActionResult). All checks run
before any transition, and a failure hands back the original state object,
so a rejected action can never leave a half-applied change behind.

Check order for every action:
    1. the acting id belongs to this match     (PLAYER_NOT_FOUND)
    2. the match is in progress                (GAME_NOT_STARTED)
    3. the actor holds the turn, if required   (NOT_YOUR_TURN)
    4. board preconditions                     (action specific)
"""

from __future__ import annotations
import random
from dataclasses import dataclass, replace
from typing import Iterable, Optional
from .models import (
    ActionError, ActionResult, CardDefinition, GameStatus, MatchState, Seat,
)
from . import player as player_rules
from .rules import HAND_LIMIT, WIN_SCORE


# ---------------------------------------------------------------------------
# Match rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MatchRules:
    draw_requires_turn: bool = False
    # A player with an empty board may deploy outside their turn.
    # Off by default: with it off, the first mover cannot attack until the
    # second mover deploys, and the second mover cannot deploy until the
    # turn flips.
    deploy_out_of_turn: bool = False


DEFAULT_RULES = MatchRules()


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

def start_match(
    session_id: str,
    host_id: str,
    host_deck: Iterable[CardDefinition],
    guest_id: str,
    guest_deck: Iterable[CardDefinition],
    rng: Optional[random.Random] = None,
) -> MatchState:
    """Both decks are shuffled once; the host moves first."""
    if host_id == guest_id:
        raise ValueError(f"Host and guest must be different players (got {host_id!r} twice)")
    rng = rng or random.Random()
    return MatchState(
        session_id=session_id,
        host=player_rules.new_player(host_id, host_deck, rng),
        guest=player_rules.new_player(guest_id, guest_deck, rng),
    )


def _gate(
    state: MatchState,
    player_id: str,
    needs_turn: bool,
) -> tuple[Optional[Seat], Optional[ActionError]]:
    seat = state.seat_of(player_id)
    if seat is None:
        return None, ActionError.PLAYER_NOT_FOUND
    if state.status is not GameStatus.PLAYING:
        return seat, ActionError.GAME_NOT_STARTED
    if needs_turn and state.turn is not seat:
        return seat, ActionError.NOT_YOUR_TURN
    return seat, None


# ---------------------------------------------------------------------------
# Action: Draw
# ---------------------------------------------------------------------------

def draw_cards(
    state: MatchState,
    player_id: str,
    rules: MatchRules = DEFAULT_RULES,
) -> tuple[MatchState, ActionResult]:
    seat, error = _gate(state, player_id, needs_turn=rules.draw_requires_turn)
    if error:
        return state, ActionResult.failure(error)

    ps, drawn = player_rules.draw(state.player(seat), HAND_LIMIT)
    message = f"You now have {drawn.hand_size} cards in hand"
    return state.with_player(seat, ps), ActionResult(success=True, message=message)


# ---------------------------------------------------------------------------
# Action: Play
# ---------------------------------------------------------------------------

def play_card(
    state: MatchState,
    player_id: str,
    hand_index: int,
    rules: MatchRules = DEFAULT_RULES,
) -> tuple[MatchState, ActionResult]:
    seat = state.seat_of(player_id)
    needs_turn = True
    if seat is not None and rules.deploy_out_of_turn:
        needs_turn = state.player(seat).active_unit is not None

    seat, error = _gate(state, player_id, needs_turn=needs_turn)
    if error:
        return state, ActionResult.failure(error)

    ps, played = player_rules.play(state.player(seat), hand_index)
    if not played.ok:
        return state, ActionResult.failure(played.error)

    message = f"{played.card.name} was placed on the board!"
    return state.with_player(seat, ps), ActionResult(success=True, message=message)


# ---------------------------------------------------------------------------
# Action: Attack
# ---------------------------------------------------------------------------

def attack(
    state: MatchState,
    player_id: str,
    rules: MatchRules = DEFAULT_RULES,
) -> tuple[MatchState, ActionResult]:
    seat, error = _gate(state, player_id, needs_turn=True)
    if error:
        return state, ActionResult.failure(error)

    attacker = state.player(seat)
    defender = state.player(seat.other)
    if attacker.active_unit is None:
        return state, ActionResult.failure(ActionError.ATTACKER_HAS_NO_ACTIVE_UNIT)
    if defender.active_unit is None:
        return state, ActionResult.failure(ActionError.DEFENDER_HAS_NO_ACTIVE_UNIT)

    unit = attacker.active_unit
    defender, report = player_rules.receive_attack(defender, unit)
    message = f"{unit.name} attacks {report.defender_name} and deals {report.damage} damage!"
    if report.multiplier > 1:
        message += " It's super effective!"

    if report.defeated:
        attacker = player_rules.add_point(attacker)
        message += f" {report.defender_name} is knocked out! +1 point."

    updated = state.with_player(seat, attacker).with_player(seat.other, defender)
    game_won = attacker.score >= WIN_SCORE

    if game_won:
        message += " The game is won!"
        updated = replace(updated, status=GameStatus.FINISHED, winner=player_id)
    else:
        updated = replace(updated, turn=seat.other)

    return updated, ActionResult(
        success=True,
        message=message,
        unit_defeated=report.defeated,
        game_won=game_won,
        damage=report.damage,
    )
