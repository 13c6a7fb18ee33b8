"""Crisis and opportunity events: onset, production factors and expiry."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from famand.utils.rng import check_success, generate_seed, random_choice

from .enums import (
    CardType,
    CrisisEffect,
    EventType,
    GamePhase,
    GridKind,
    Rarity,
    ResourceKind,
    StateFlag,
    VictoryMode,
)
from .errors import InvariantViolation
from .models import Card, CardID, EventID, GameEvent, GameState, ResourceMap
from .resources import apply_delta
from .rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)

WEATHER_EFFECTS = frozenset({CrisisEffect.REDUCE_FARM_PRODUCTION, CrisisEffect.STORM})


@dataclass(slots=True)
class EventOutcome:
    """Result of the end-of-turn random event check."""

    card: Card | None = None
    event: GameEvent | None = None
    blocked_by: StateFlag | None = None
    roll: int | None = None


def difficulty_multiplier(mode: VictoryMode, turn: int, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    """Scale applied to the base event chance as the game goes on."""

    cfg = rules.events
    if mode == VictoryMode.ELIMINATION:
        scaled = min(turn / cfg.elimination_difficulty_divisor, cfg.elimination_difficulty_cap)
    elif mode == VictoryMode.INFINITE:
        scaled = min(turn / cfg.infinite_difficulty_divisor, cfg.infinite_difficulty_cap)
    else:
        scaled = min(turn / cfg.default_difficulty_divisor, cfg.default_difficulty_cap)
    return max(1.0, scaled)


def intensity_multiplier(mode: VictoryMode, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    if mode == VictoryMode.ELIMINATION:
        return rules.events.elimination_intensity
    if mode == VictoryMode.INFINITE:
        return rules.events.infinite_intensity
    return 1.0


def event_chance(mode: VictoryMode, turn: int, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    return min(1.0, rules.events.base_chance * difficulty_multiplier(mode, turn, rules=rules))


def is_weather_event(card: Card) -> bool:
    return card.effect.crisis_effect in WEATHER_EFFECTS


def random_event_pool(cards: list[Card]) -> list[Card]:
    """Event cards that can strike unprompted (crisis rarity only)."""

    return [card for card in cards if card.type == CardType.EVENT and card.rarity == Rarity.CRISIS]


def production_factors(state: GameState, *, rules: RulesConfig = DEFAULT_RULES) -> dict[GridKind, float]:
    """Combined multiplier active events impose on each grid."""

    cfg = rules.events
    factors = {GridKind.FARM: 1.0, GridKind.CITY: 1.0}
    for event in state.active_events:
        if not event.active:
            continue
        if event.effect == CrisisEffect.REDUCE_FARM_PRODUCTION:
            factors[GridKind.FARM] *= cfg.farm_reduction_factor
        elif event.effect == CrisisEffect.STORM:
            factors[GridKind.CITY] *= cfg.storm_city_factor
        elif event.effect == CrisisEffect.BOOST_FARM_PRODUCTION:
            factors[GridKind.FARM] *= cfg.boost_factor
        elif event.effect == CrisisEffect.BOOST_CITY_PRODUCTION:
            factors[GridKind.CITY] *= cfg.boost_factor
    return factors


def _apply_onset(
    state: GameState, event: GameEvent, *, mode: VictoryMode, rules: RulesConfig
) -> ResourceMap:
    cfg = rules.events
    intensity = intensity_multiplier(mode, rules=rules)
    if event.effect == CrisisEffect.LOSE_POPULATION:
        return apply_delta(
            state.resources,
            {
                ResourceKind.POPULATION: -math.floor(cfg.population_loss * intensity),
                ResourceKind.COINS: cfg.population_loss_compensation,
            },
        )
    if event.effect == CrisisEffect.STORM:
        return apply_delta(state.resources, {ResourceKind.FOOD: cfg.storm_food_bonus})
    if event.effect == CrisisEffect.SCANDAL:
        state.player_stats.reputation -= math.floor(cfg.scandal_reputation_loss * intensity)
    return {}


def start_event(
    state: GameState,
    card: Card,
    *,
    mode: VictoryMode = VictoryMode.CLASSIC,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameEvent:
    """Activate the event carried by ``card`` and apply its onset effect."""

    if card.effect.crisis_effect is None:
        raise InvariantViolation(f"card '{card.id}' carries no event effect")
    state.event_counter += 1
    event = GameEvent(
        id=EventID(f"event-{state.event_counter}"),
        type=EventType.CRISIS if card.rarity == Rarity.CRISIS else EventType.OPPORTUNITY,
        name=card.name,
        description=card.effect.description,
        effect=card.effect.crisis_effect,
        remaining=card.effect.duration or 1,
        source_card_id=CardID(card.id),
    )
    state.active_events.append(event)
    _apply_onset(state, event, mode=mode, rules=rules)
    logger.debug("game %s: event %s (%s) started for %d turns", state.game_id, event.name, event.effect, event.remaining)
    return event


def tick_events(state: GameState) -> list[GameEvent]:
    """Count down every active event; return (and drop) the expired ones."""

    expired: list[GameEvent] = []
    remaining: list[GameEvent] = []
    for event in state.active_events:
        event.remaining -= 1
        if event.remaining <= 0:
            event.active = False
            expired.append(event)
        else:
            remaining.append(event)
    state.active_events = remaining
    state.player_stats.crisis_survived += sum(1 for event in expired if event.type == EventType.CRISIS)
    return expired


def maybe_trigger_random_event(
    state: GameState,
    pool: list[Card],
    *,
    mode: VictoryMode = VictoryMode.CLASSIC,
    rules: RulesConfig = DEFAULT_RULES,
) -> EventOutcome:
    """Roll for an end-of-turn event and start it unless a flag blocks it."""

    candidates = random_event_pool(pool)
    if not candidates:
        return EventOutcome()

    chance = event_chance(mode, state.turn, rules=rules)
    check = check_success(generate_seed(state.game_id, state.turn, GamePhase.END, "random_event"), chance)
    if not check["success"]:
        return EventOutcome(roll=check["roll"])

    card = random_choice(
        generate_seed(state.game_id, state.turn, GamePhase.END, "random_event_card"), candidates
    )["choice"]

    if state.weather_prediction and is_weather_event(card):
        state.weather_prediction = False
        logger.debug("game %s: %s foreseen and avoided", state.game_id, card.name)
        return EventOutcome(card=card, blocked_by=StateFlag.WEATHER_PREDICTION, roll=check["roll"])
    if state.crisis_protection:
        state.crisis_protection = False
        logger.debug("game %s: %s blocked by crisis protection", state.game_id, card.name)
        return EventOutcome(card=card, blocked_by=StateFlag.CRISIS_PROTECTION, roll=check["roll"])

    event = start_event(state, card, mode=mode, rules=rules)
    return EventOutcome(card=card, event=event, roll=check["roll"])
