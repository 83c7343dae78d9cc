"""
Arena — Match Simulator
Runs a complete match between two AI-controlled players through the same
lobby and session code the server uses, and prints every action.

Usage:
    python simulate_match.py                              # blaze vs tide
    python simulate_match.py --seed 7                     # reproducible shuffle
    python simulate_match.py --host-deck balanced --guest-deck blaze
    python simulate_match.py --json                       # also save match_<id>.json
"""

from __future__ import annotations
import sys
import os
import json
import random
import argparse
from typing import Optional

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from arena.cards import PRESET_DECKS
from arena.events import EventBatch, GameEndedEvent
from arena.game_state import GameSession
from arena.lobby import LobbyBoard
from arena.models import CardDefinition, GameStatus, MatchState, PlayerState
from arena.repository import InMemoryDeckStore
from arena.resolver import MatchRules
from arena.rules import HAND_LIMIT, advantage_label, multiplier


# ---------------------------------------------------------------------------
# AI Player — picks the next legal action for one seat
# ---------------------------------------------------------------------------

class AIPlayer:
    """
    Plays the card with the best type matchup against whatever the opponent
    has on the board, breaking ties on attack. Draws whenever the hand is
    short. Good enough to finish a match, not to win one.
    """

    def __init__(self, player_id: str, name: str):
        self.player_id = player_id
        self.name = name

    def _me(self, state: MatchState) -> PlayerState:
        return state.player(state.seat_of(self.player_id))

    def _opponent(self, state: MatchState) -> PlayerState:
        return state.player(state.seat_of(self.player_id).other)

    def choose_card(self, state: MatchState) -> Optional[int]:
        hand = self._me(state).hand
        if not hand:
            return None
        target = self._opponent(state).active_unit

        def score(card: CardDefinition) -> tuple[int, int]:
            mult = multiplier(card.type, target.type) if target else 1
            return (mult, card.attack)

        return max(range(len(hand)), key=lambda i: score(hand[i]))

    def wants_to_draw(self, state: MatchState, hand_limit: int) -> bool:
        me = self._me(state)
        return len(me.hand) < hand_limit and len(me.draw_pile) > 0


# ---------------------------------------------------------------------------
# Match Simulator
# ---------------------------------------------------------------------------

def _message(batch: EventBatch) -> str:
    return batch.events[0].message if batch.events else ""


def simulate_match(
    host_name: str = "Red",
    guest_name: str = "Blue",
    host_deck: str = "blaze",
    guest_deck: str = "tide",
    seed: Optional[int] = None,
    max_actions: int = 200,
) -> dict:
    """
    Run a complete simulated match.
    Returns a dict with every action taken and the final result.
    """
    rng = random.Random(seed)
    rules = MatchRules(deploy_out_of_turn=True)
    store = InMemoryDeckStore()
    store.add_preset("host-deck", host_name, host_deck)
    store.add_preset("guest-deck", guest_name, guest_deck)

    board = LobbyBoard(rules=rules, rng_factory=lambda: random.Random(rng.random()))
    lobby = board.create_lobby(host_name, store.load_deck("host-deck", host_name))
    joined = board.join(lobby.lobby_id, guest_name, store.load_deck("guest-deck", guest_name))
    session: GameSession = joined.session

    print(f"\n{'=' * 60}")
    print(f"  ⚔  ARENA — {host_name} ({host_deck}) vs {guest_name} ({guest_deck})")
    print(f"  Room: {session.session_id}")
    print(f"{'=' * 60}")

    players = {
        host_name: AIPlayer(host_name, host_name),
        guest_name: AIPlayer(guest_name, guest_name),
    }
    results = {
        "game_id": session.session_id,
        "host": host_name,
        "guest": guest_name,
        "seed": seed,
        "actions": [],
        "winner": None,
    }

    def record(actor: str, action: str, batch: EventBatch) -> None:
        failed = batch.failed
        results["actions"].append({
            "actor": actor,
            "action": action,
            "success": not failed,
            "message": _message(batch),
        })
        marker = "✗" if failed else "•"
        print(f"  {marker} {actor:<6} {action:<7} {_message(batch)}")

    actions = 0
    while session.status is GameStatus.PLAYING and actions < max_actions:
        progressed = False

        # Refill and redeploy for both sides; an empty board may deploy out of turn
        for ai in players.values():
            state = session.state
            if ai.wants_to_draw(state, HAND_LIMIT):
                record(ai.name, "draw", session.draw_cards(ai.player_id))
                actions += 1
                progressed = True
            state = session.state
            if ai._me(state).active_unit is None:
                index = ai.choose_card(state)
                if index is not None:
                    card = ai._me(state).hand[index]
                    target = ai._opponent(state).active_unit
                    if target is not None:
                        mult = multiplier(card.type, target.type)
                        if mult > 1:
                            print(f"    ({card.name} vs {target.name}: {advantage_label(mult)})")
                    record(ai.name, "play", session.play_card(ai.player_id, index))
                    actions += 1
                    progressed = True

        state = session.state
        attacker = players[state.turn_player_id]
        if attacker._me(state).active_unit and attacker._opponent(state).active_unit:
            batch = session.attack(attacker.player_id)
            record(attacker.name, "attack", batch)
            actions += 1
            progressed = True
            ended = batch.first(GameEndedEvent)
            if ended is not None:
                results["winner"] = ended.winner
        elif not progressed:
            print("  ⚠️  Neither side can act — both decks are spent")
            break

    host = session.state.host
    guest = session.state.guest
    if results["winner"] is None:
        results["winner"] = "Draw"

    print(f"\n{'=' * 60}")
    print(f"  🏆 MATCH OVER")
    print(f"  Winner: {results['winner']}")
    print(f"  Final score: {host_name} {host.score} — {guest.score} {guest_name}")
    print(f"  Actions: {actions}")
    print(f"{'=' * 60}\n")

    results["final_score"] = {host_name: host.score, guest_name: guest.score}
    return results


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Arena Match Simulator")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for deck shuffles (default: random)")
    parser.add_argument("--host-deck", default="blaze", choices=sorted(PRESET_DECKS))
    parser.add_argument("--guest-deck", default="tide", choices=sorted(PRESET_DECKS))
    parser.add_argument("--max-actions", type=int, default=200,
                        help="Stop after this many actions (default: 200)")
    parser.add_argument("--json", action="store_true",
                        help="Save the action log to match_<id>.json")

    args = parser.parse_args()

    results = simulate_match(
        host_deck=args.host_deck,
        guest_deck=args.guest_deck,
        seed=args.seed,
        max_actions=args.max_actions,
    )

    if args.json:
        output_file = f"match_{results['game_id'][:8]}.json"
        with open(output_file, "w") as f:
            json.dump(results, f, indent=2, default=str)
        print(f"📁 Match results saved to: {output_file}")
