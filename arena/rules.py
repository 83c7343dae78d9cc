"""
Arena Battle Engine — Damage Rules
The deterministic core of combat. No randomness, no I/O.
Every damage number can be recomputed from the two cards involved.
"""

from __future__ import annotations
import math
from typing import Optional
from .models import ElementType


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HAND_LIMIT = 5              # Cards a player may hold
WIN_SCORE = 3               # Defeated units needed to win
DECK_SIZE = 20              # Cards in a legal deck
WEAKNESS_MULTIPLIER = 2
NEUTRAL_MULTIPLIER = 1
MIN_DAMAGE = 1


# ---------------------------------------------------------------------------
# Weakness Table
# Key is the DEFENDING type, value is the one type that hits it for double.
# Not symmetric, not transitive.
# ---------------------------------------------------------------------------

WEAKNESS_TABLE: dict[ElementType, ElementType] = {
    ElementType.NORMAL:   ElementType.FIGHTING,
    ElementType.FIRE:     ElementType.WATER,
    ElementType.WATER:    ElementType.ELECTRIC,
    ElementType.ELECTRIC: ElementType.GROUND,
    ElementType.GRASS:    ElementType.FIRE,
    ElementType.ICE:      ElementType.FIRE,
    ElementType.FIGHTING: ElementType.PSYCHIC,
    ElementType.POISON:   ElementType.PSYCHIC,
    ElementType.GROUND:   ElementType.WATER,
    ElementType.FLYING:   ElementType.ELECTRIC,
    ElementType.PSYCHIC:  ElementType.DARK,
    ElementType.BUG:      ElementType.FIRE,
    ElementType.ROCK:     ElementType.WATER,
    ElementType.GHOST:    ElementType.DARK,
    ElementType.DRAGON:   ElementType.ICE,
    ElementType.DARK:     ElementType.FIGHTING,
    ElementType.STEEL:    ElementType.FIRE,
    ElementType.FAIRY:    ElementType.POISON,
}


def weakness_of(element: ElementType) -> Optional[ElementType]:
    """The type that deals double damage to `element`."""
    return WEAKNESS_TABLE.get(element)


def multiplier(attacker_type: ElementType, defender_type: ElementType) -> int:
    if weakness_of(defender_type) == attacker_type:
        return WEAKNESS_MULTIPLIER
    return NEUTRAL_MULTIPLIER


def calculate_damage(
    attack: int,
    attacker_type: ElementType,
    defense: int,
    defender_type: ElementType,
) -> int:
    """
    (attack - defense) * multiplier, rounded down, never below MIN_DAMAGE.
    A negative difference is still doubled before the floor is applied,
    so the floor is what a walled attacker always lands.
    """
    raw = (attack - defense) * multiplier(attacker_type, defender_type)
    return max(MIN_DAMAGE, math.floor(raw))


def advantage_label(mult: int) -> str:
    if mult == WEAKNESS_MULTIPLIER:
        return "super effective (2x)"
    return "neutral (1x)"
