"""Host-level configuration for the Famand engine."""

from __future__ import annotations

from dataclasses import replace
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from famand.domain.enums import VictoryMode
from famand.domain.rules_config import DEFAULT_RULES, RulesConfig


class Settings(BaseSettings):
    """Application settings, read from the environment or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="FAMAND_", env_file=".env", env_file_encoding="utf-8")

    data_dir: Path = Field(default=Path("games"), description="Where game snapshots live")
    turn_cap: int = Field(
        default=DEFAULT_RULES.defeat.turn_cap,
        ge=0,
        description="Turn after which the game is lost; 0 disables the cap",
    )
    event_chance: float = Field(
        default=DEFAULT_RULES.events.base_chance,
        ge=0.0,
        le=1.0,
        description="Base probability of a random event at the end of each turn",
    )
    require_dice_roll: bool = Field(
        default=DEFAULT_RULES.turn.require_dice_roll,
        description="Whether the action phase can only be left after rolling",
    )
    victory_mode: VictoryMode = Field(default=VictoryMode.CLASSIC, description="Default victory mode")
    victory_target: int | None = Field(
        default=None, ge=1, description="Override for the target of single-goal modes"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


def build_rules(settings: Settings, base: RulesConfig = DEFAULT_RULES) -> RulesConfig:
    """Overlay host settings on a rule set."""

    return replace(
        base,
        turn=replace(base.turn, require_dice_roll=settings.require_dice_roll),
        events=replace(base.events, base_chance=settings.event_chance),
        defeat=replace(base.defeat, turn_cap=settings.turn_cap),
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
