"""Declarative rule configuration for the Famand engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import ResourceKind


def _starting_resources() -> dict[ResourceKind, int]:
    return {
        ResourceKind.COINS: 3,
        ResourceKind.FOOD: 2,
        ResourceKind.MATERIALS: 2,
        ResourceKind.POPULATION: 2,
    }


@dataclass(frozen=True, slots=True)
class SetupRules:
    """Board size and starting position."""

    grid_rows: int = 4
    grid_cols: int = 4
    starting_resources: dict[ResourceKind, int] = field(default_factory=_starting_resources)
    starting_reputation: int = 0
    starting_hand_size: int = 5
    deck_size: int = 20


@dataclass(frozen=True, slots=True)
class TurnRules:
    """Per-turn limits."""

    cards_per_draw: int = 1
    dice_rolls_per_turn: int = 1
    max_hand_size: int = 6
    require_dice_roll: bool = False


@dataclass(frozen=True, slots=True)
class EventRules:
    """Random event generation and intensity."""

    base_chance: float = 0.2
    default_difficulty_divisor: int = 20
    default_difficulty_cap: float = 2.0
    elimination_difficulty_divisor: int = 10
    elimination_difficulty_cap: float = 3.0
    infinite_difficulty_divisor: int = 15
    infinite_difficulty_cap: float = 2.5
    elimination_intensity: float = 1.5
    infinite_intensity: float = 1.3
    population_loss: int = 2
    population_loss_compensation: int = 5
    storm_food_bonus: int = 1
    scandal_reputation_loss: int = 1
    farm_reduction_factor: float = 0.5
    storm_city_factor: float = 0.7
    boost_factor: float = 2.0


@dataclass(frozen=True, slots=True)
class DefeatRules:
    """Thresholds for the defeat checks."""

    reputation_threshold: int = -1  # lost once reputation drops below
    turn_cap: int = 50  # 0 disables the cap
    deck_reputation_threshold: int = 0


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    setup: SetupRules = SetupRules()
    turn: TurnRules = TurnRules()
    events: EventRules = EventRules()
    defeat: DefeatRules = DefeatRules()


DEFAULT_RULES = RulesConfig()
