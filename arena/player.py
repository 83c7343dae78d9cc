"""
Arena Battle Engine — Player State transitions

Each function takes a PlayerState and returns (new PlayerState, result).
The input is never modified, so a rejected action leaves the caller's
state exactly as it was.
"""

from __future__ import annotations
import random
from dataclasses import replace
from typing import Iterable, Optional
from .models import (
    ActionError, BattleUnit, CardDefinition, DamageReport, DrawResult,
    PlayerState, PlayResult,
)
from .rules import HAND_LIMIT, calculate_damage, multiplier


def new_player(
    player_id: str,
    deck: Iterable[CardDefinition],
    rng: Optional[random.Random] = None,
) -> PlayerState:
    """Shuffle `deck` once into a fresh draw pile."""
    pile = list(deck)
    (rng or random.Random()).shuffle(pile)
    return PlayerState(player_id=player_id, draw_pile=tuple(pile))


def draw(ps: PlayerState, hand_limit: int = HAND_LIMIT) -> tuple[PlayerState, DrawResult]:
    """Fill the hand from the front of the draw pile. Never fails."""
    needed = max(0, hand_limit - len(ps.hand))
    drawn = ps.draw_pile[:needed]
    if not drawn:
        return ps, DrawResult(drawn=0, hand_size=len(ps.hand))

    updated = replace(
        ps,
        hand=ps.hand + drawn,
        draw_pile=ps.draw_pile[len(drawn):],
    )
    return updated, DrawResult(drawn=len(drawn), hand_size=len(updated.hand))


def play(ps: PlayerState, hand_index: int) -> tuple[PlayerState, PlayResult]:
    """Move the card at `hand_index` onto the board at full HP."""
    if not isinstance(hand_index, int) or isinstance(hand_index, bool):
        return ps, PlayResult(error=ActionError.INVALID_INDEX)
    if not 0 <= hand_index < len(ps.hand):
        return ps, PlayResult(error=ActionError.INVALID_INDEX)
    if ps.active_unit is not None:
        return ps, PlayResult(error=ActionError.ALREADY_HAS_ACTIVE_UNIT)

    card = ps.hand[hand_index]
    updated = replace(
        ps,
        hand=ps.hand[:hand_index] + ps.hand[hand_index + 1:],
        active_unit=BattleUnit.deploy(card),
    )
    return updated, PlayResult(card=card)


def receive_attack(ps: PlayerState, attacker: BattleUnit) -> tuple[PlayerState, DamageReport]:
    """
    Apply one hit from `attacker` to this player's active unit.
    The unit is removed when its HP drops to 0 or below; scoring the
    knockout belongs to the attacking side.
    """
    defender = ps.active_unit
    if defender is None:
        return ps, DamageReport(error=ActionError.NO_ACTIVE_UNIT)

    mult = multiplier(attacker.type, defender.type)
    damage = calculate_damage(attacker.attack, attacker.type, defender.defense, defender.type)
    remaining = defender.current_hp - damage
    defeated = remaining <= 0

    updated = replace(
        ps,
        active_unit=None if defeated else replace(defender, current_hp=remaining),
    )
    return updated, DamageReport(
        damage=damage,
        multiplier=mult,
        defeated=defeated,
        defender_name=defender.name,
    )


def add_point(ps: PlayerState) -> PlayerState:
    return replace(ps, score=ps.score + 1)
