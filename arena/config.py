"""
Arena — Server Settings
Read from the environment; a local .env file is loaded first if present.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .resolver import MatchRules
from .rules import DECK_SIZE


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    port: int = 3001
    cors_origin: str = "http://localhost:5173"
    secret_key: str = "default-secret"
    supabase_url: str = ""
    supabase_key: str = ""
    deck_size: int = DECK_SIZE
    draw_requires_turn: bool = False
    deploy_out_of_turn: bool = False
    finished_game_ttl: int = 5      # seconds a finished game stays reachable
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Settings:
        if env is None:
            load_dotenv()
            env = os.environ
        return cls(
            port=_int(env, "PORT", 3001),
            cors_origin=env.get("CORS_ORIGIN", "http://localhost:5173"),
            secret_key=env.get("SECRET_KEY", "default-secret"),
            supabase_url=env.get("SUPABASE_URL", ""),
            supabase_key=env.get("SUPABASE_KEY", ""),
            deck_size=_int(env, "DECK_SIZE", DECK_SIZE),
            draw_requires_turn=_bool(env, "DRAW_REQUIRES_TURN", False),
            deploy_out_of_turn=_bool(env, "DEPLOY_OUT_OF_TURN", False),
            finished_game_ttl=_int(env, "FINISHED_GAME_TTL", 5),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def match_rules(self) -> MatchRules:
        return MatchRules(
            draw_requires_turn=self.draw_requires_turn,
            deploy_out_of_turn=self.deploy_out_of_turn,
        )

    @property
    def uses_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)
