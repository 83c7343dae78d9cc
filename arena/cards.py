"""
Arena — Starter Card Catalog
A small built-in catalog covering all 18 element types. Used by the
in-memory deck store, the match simulator and the tests.
"""

from __future__ import annotations
from typing import Iterable, Optional
from .models import CardDefinition, ElementType

SPRITE_URL = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/{}.png"


def build_card(
    name: str,
    type: ElementType,
    hp: int,
    attack: int,
    defense: int,
    pokedex_number: int = 0,
    card_id: Optional[str] = None,
    image_url: Optional[str] = None,
) -> CardDefinition:
    """Explicit constructor for card definitions; ids default to a slug of the name."""
    return CardDefinition(
        id=card_id or name.lower().replace(" ", "-"),
        name=name,
        pokedex_number=pokedex_number,
        type=type,
        hp=hp,
        attack=attack,
        defense=defense,
        image_url=image_url if image_url is not None else (
            SPRITE_URL.format(pokedex_number) if pokedex_number else ""
        ),
    )


STARTER_CARDS: list[CardDefinition] = [
    build_card("Bulbasaur",  ElementType.GRASS,    45, 49, 49,  pokedex_number=1),
    build_card("Venusaur",   ElementType.GRASS,    80, 82, 83,  pokedex_number=3),
    build_card("Charmander", ElementType.FIRE,     39, 52, 43,  pokedex_number=4),
    build_card("Charizard",  ElementType.FIRE,     78, 84, 78,  pokedex_number=6),
    build_card("Squirtle",   ElementType.WATER,    44, 48, 65,  pokedex_number=7),
    build_card("Blastoise",  ElementType.WATER,    79, 83, 100, pokedex_number=9),
    build_card("Butterfree", ElementType.BUG,      60, 45, 50,  pokedex_number=12),
    build_card("Pidgeotto",  ElementType.FLYING,   63, 60, 55,  pokedex_number=17),
    build_card("Pikachu",    ElementType.ELECTRIC, 35, 55, 40,  pokedex_number=25),
    build_card("Raichu",     ElementType.ELECTRIC, 60, 90, 55,  pokedex_number=26),
    build_card("Sandslash",  ElementType.GROUND,   75, 100, 110, pokedex_number=28),
    build_card("Clefairy",   ElementType.FAIRY,    70, 45, 48,  pokedex_number=35),
    build_card("Arbok",      ElementType.POISON,   60, 95, 69,  pokedex_number=24),
    build_card("Machamp",    ElementType.FIGHTING, 90, 130, 80, pokedex_number=68),
    build_card("Alakazam",   ElementType.PSYCHIC,  55, 50, 45,  pokedex_number=65),
    build_card("Golem",      ElementType.ROCK,     80, 120, 130, pokedex_number=76),
    build_card("Magneton",   ElementType.STEEL,    50, 60, 95,  pokedex_number=82),
    build_card("Gengar",     ElementType.GHOST,    60, 65, 60,  pokedex_number=94),
    build_card("Onix",       ElementType.ROCK,     35, 45, 160, pokedex_number=95),
    build_card("Snorlax",    ElementType.NORMAL,   160, 110, 65, pokedex_number=143),
    build_card("Lapras",     ElementType.ICE,      130, 85, 80, pokedex_number=131),
    build_card("Jolteon",    ElementType.ELECTRIC, 65, 65, 60,  pokedex_number=135),
    build_card("Dragonite",  ElementType.DRAGON,   91, 134, 95, pokedex_number=149),
    build_card("Umbreon",    ElementType.DARK,     95, 65, 110, pokedex_number=197),
]

CARD_REGISTRY: dict[str, CardDefinition] = {c.id: c for c in STARTER_CARDS}


def build_deck(card_ids: Iterable[str]) -> list[CardDefinition]:
    """Resolve catalog ids into a deck list; duplicates are allowed."""
    return [CARD_REGISTRY[card_id] for card_id in card_ids]


# Preset 20-card decks for the simulator and local play.
PRESET_DECKS: dict[str, list[str]] = {
    "blaze": [
        "charmander", "charizard", "charmander", "charizard", "arbok",
        "machamp", "dragonite", "raichu", "pikachu", "pidgeotto",
        "charmander", "charizard", "machamp", "arbok", "snorlax",
        "gengar", "butterfree", "raichu", "dragonite", "pidgeotto",
    ],
    "tide": [
        "squirtle", "blastoise", "squirtle", "blastoise", "lapras",
        "sandslash", "golem", "onix", "umbreon", "magneton",
        "squirtle", "blastoise", "lapras", "sandslash", "golem",
        "clefairy", "alakazam", "jolteon", "umbreon", "snorlax",
    ],
    "balanced": [
        "bulbasaur", "charmander", "squirtle", "pikachu", "clefairy",
        "venusaur", "charizard", "blastoise", "raichu", "machamp",
        "alakazam", "golem", "gengar", "snorlax", "lapras",
        "jolteon", "dragonite", "umbreon", "magneton", "arbok",
    ],
}
