"""Arena Battle Engine"""

from .game_state import GameSession
from .lobby import LobbyBoard
from .models import CardDefinition, ElementType, GameStatus
from .registry import SessionRegistry
from .resolver import MatchRules

__all__ = ['GameSession', 'LobbyBoard', 'CardDefinition', 'ElementType', 'GameStatus',
           'SessionRegistry', 'MatchRules']
