"""
Arena — Deck Store
Resolves a deck id into the 20 card definitions a session is built from.
All database access lives in this file.

Usage:
    from arena.repository import SupabaseDeckStore
    store = SupabaseDeckStore.from_credentials(supabase_url, supabase_key)

    cards = store.load_deck(deck_id, user_id)     # raises DeckLookupError
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Iterable, Optional, Protocol

from supabase import create_client, Client

from .cards import CARD_REGISTRY, PRESET_DECKS, build_deck
from .models import CardDefinition, ElementType
from .rules import DECK_SIZE

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DeckErrorKind(Enum):
    NOT_FOUND = "not_found"
    WRONG_OWNER = "wrong_owner"
    WRONG_SIZE = "wrong_size"


class DeckLookupError(Exception):
    MESSAGES = {
        DeckErrorKind.NOT_FOUND: "Deck not found or you are not its owner",
        DeckErrorKind.WRONG_OWNER: "Deck not found or you are not its owner",
        DeckErrorKind.WRONG_SIZE: f"A deck must contain exactly {DECK_SIZE} cards",
    }

    def __init__(self, kind: DeckErrorKind, deck_id: str):
        super().__init__(self.MESSAGES[kind])
        self.kind = kind
        self.deck_id = deck_id

    @property
    def message(self) -> str:
        return self.args[0]


class DeckStore(Protocol):
    def load_deck(self, deck_id: str, user_id: str) -> list[CardDefinition]: ...

    def list_cards(self) -> list[CardDefinition]: ...


def check_deck_size(deck_id: str, cards: list[CardDefinition], size: int = DECK_SIZE) -> list[CardDefinition]:
    if len(cards) != size:
        raise DeckLookupError(DeckErrorKind.WRONG_SIZE, deck_id)
    return cards


# ---------------------------------------------------------------------------
# In-memory store (simulator, tests, local play)
# ---------------------------------------------------------------------------

class InMemoryDeckStore:

    def __init__(
        self,
        catalog: Optional[Iterable[CardDefinition]] = None,
        deck_size: int = DECK_SIZE,
        shared_presets: bool = False,
    ):
        self.catalog = list(catalog) if catalog is not None else list(CARD_REGISTRY.values())
        self.deck_size = deck_size
        # Preset names load for any user when no stored deck has that id
        self.shared_presets = shared_presets
        self._decks: dict[str, tuple[str, list[CardDefinition]]] = {}

    def add_deck(self, deck_id: str, owner_id: str, cards: Iterable[CardDefinition]) -> None:
        self._decks[deck_id] = (owner_id, list(cards))

    def add_preset(self, deck_id: str, owner_id: str, preset: str) -> None:
        self.add_deck(deck_id, owner_id, build_deck(PRESET_DECKS[preset]))

    def load_deck(self, deck_id: str, user_id: str) -> list[CardDefinition]:
        entry = self._decks.get(deck_id)
        if entry is None:
            if self.shared_presets and deck_id in PRESET_DECKS:
                return check_deck_size(deck_id, build_deck(PRESET_DECKS[deck_id]), self.deck_size)
            raise DeckLookupError(DeckErrorKind.NOT_FOUND, deck_id)
        owner_id, cards = entry
        if owner_id != user_id:
            raise DeckLookupError(DeckErrorKind.WRONG_OWNER, deck_id)
        return check_deck_size(deck_id, list(cards), self.deck_size)

    def list_cards(self) -> list[CardDefinition]:
        return list(self.catalog)


# ---------------------------------------------------------------------------
# Supabase store
# ---------------------------------------------------------------------------

class SupabaseDeckStore:
    """
    Reads the `decks`, `deck_cards` and `cards` tables.
    Never writes: deck editing belongs to the deck service.
    """

    def __init__(self, client: Client, deck_size: int = DECK_SIZE):
        self.client = client
        self.deck_size = deck_size

    @classmethod
    def from_credentials(
        cls, supabase_url: str, supabase_key: str, deck_size: int = DECK_SIZE,
    ) -> SupabaseDeckStore:
        return cls(create_client(supabase_url, supabase_key), deck_size)

    def load_deck(self, deck_id: str, user_id: str) -> list[CardDefinition]:
        """Fetch a deck with its cards, checking owner and size."""
        result = (
            self.client.table("decks")
            .select("id, userId, deck_cards(cards(*))")
            .eq("id", deck_id)
            .limit(1)
            .execute()
        )
        rows = result.data or []
        if not rows:
            raise DeckLookupError(DeckErrorKind.NOT_FOUND, deck_id)

        row = rows[0]
        if row.get("userId") != user_id:
            logger.warning("User %s asked for deck %s owned by someone else", user_id, deck_id)
            raise DeckLookupError(DeckErrorKind.WRONG_OWNER, deck_id)

        cards = [
            self._row_to_card(entry["cards"])
            for entry in (row.get("deck_cards") or [])
            if entry.get("cards")
        ]
        return check_deck_size(deck_id, cards, self.deck_size)

    def list_cards(self) -> list[CardDefinition]:
        """The whole catalog, by pokedex number."""
        result = (
            self.client.table("cards")
            .select("*")
            .order("pokedexNumber")
            .execute()
        )
        return [self._row_to_card(row) for row in (result.data or [])]

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _row_to_card(self, row: dict) -> CardDefinition:
        return CardDefinition(
            id=row["id"],
            name=row["name"],
            pokedex_number=row.get("pokedexNumber") or 0,
            type=ElementType(row["type"]),
            hp=row["hp"],
            attack=row["attack"],
            defense=row["defense"],
            image_url=row.get("imgUrl") or "",
        )
