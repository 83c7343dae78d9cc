"""
Arena Battle Engine — Player Views
Builds the per-player projection of a match and serializes it for the wire.

A player sees their own hand in full. For the opponent only the board is
public: hand and draw pile are reduced to counts. Views are rebuilt from the
current MatchState on every call and never cached.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from .models import BattleUnit, CardDefinition, GameStatus, MatchState, PlayerState, Seat


@dataclass(frozen=True)
class OwnBoard:
    hand: tuple[CardDefinition, ...]
    active_unit: Optional[BattleUnit]
    deck_count: int
    score: int


@dataclass(frozen=True)
class OpponentBoard:
    active_unit: Optional[BattleUnit]
    hand_count: int
    deck_count: int
    score: int


@dataclass(frozen=True)
class PlayerView:
    session_id: str
    status: GameStatus
    winner: Optional[str]
    current_turn: Seat
    is_your_turn: bool
    your_board: OwnBoard
    opponent_board: OpponentBoard


def own_board(ps: PlayerState) -> OwnBoard:
    return OwnBoard(
        hand=ps.hand,
        active_unit=ps.active_unit,
        deck_count=len(ps.draw_pile),
        score=ps.score,
    )


def opponent_board(ps: PlayerState) -> OpponentBoard:
    return OpponentBoard(
        active_unit=ps.active_unit,
        hand_count=len(ps.hand),
        deck_count=len(ps.draw_pile),
        score=ps.score,
    )


def state_for_player(state: MatchState, player_id: str) -> Optional[PlayerView]:
    """None when `player_id` is not seated in this match."""
    seat = state.seat_of(player_id)
    if seat is None:
        return None
    return PlayerView(
        session_id=state.session_id,
        status=state.status,
        winner=state.winner,
        current_turn=state.turn,
        is_your_turn=state.turn is seat,
        your_board=own_board(state.player(seat)),
        opponent_board=opponent_board(state.player(seat.other)),
    )


# ---------------------------------------------------------------------------
# Wire serialization
# ---------------------------------------------------------------------------

def card_payload(card: CardDefinition) -> dict:
    return {
        "id": card.id,
        "name": card.name,
        "pokedexNumber": card.pokedex_number,
        "type": card.type.value,
        "hp": card.hp,
        "attack": card.attack,
        "defense": card.defense,
        "imgUrl": card.image_url,
    }


def unit_payload(unit: Optional[BattleUnit]) -> Optional[dict]:
    if unit is None:
        return None
    payload = card_payload(unit.card)
    payload["currentHp"] = unit.current_hp
    return payload


def to_payload(view: PlayerView) -> dict:
    """The gameState object sent to clients."""
    return {
        "roomId": view.session_id,
        "status": view.status.value,
        "winner": view.winner,
        "currentTurn": view.current_turn.value,
        "isYourTurn": view.is_your_turn,
        "yourBoard": {
            "hand": [card_payload(c) for c in view.your_board.hand],
            "activeCard": unit_payload(view.your_board.active_unit),
            "deckCount": view.your_board.deck_count,
            "score": view.your_board.score,
        },
        "opponentBoard": {
            "activeCard": unit_payload(view.opponent_board.active_unit),
            "handCount": view.opponent_board.hand_count,
            "deckCount": view.opponent_board.deck_count,
            "score": view.opponent_board.score,
        },
    }
