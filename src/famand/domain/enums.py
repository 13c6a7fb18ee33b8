"""Enumerations used across the Famand rule engine."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """The four in-match resource counters."""

    COINS = "coins"
    FOOD = "food"
    MATERIALS = "materials"
    POPULATION = "population"


class CardType(StrEnum):
    """Card categories; farm and city cards occupy grid cells."""

    FARM = "farm"
    CITY = "city"
    ACTION = "action"
    LANDMARK = "landmark"
    EVENT = "event"


class Rarity(StrEnum):
    """Card rarity tiers."""

    STARTER = "starter"
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"
    CRISIS = "crisis"
    BOOSTER = "booster"


class Trigger(StrEnum):
    """Condition under which a card effect resolves."""

    DICE = "dice"
    TURN = "turn"
    INSTANT = "instant"
    CRISIS = "crisis"
    COMBO = "combo"


class GridKind(StrEnum):
    """The two placement grids."""

    FARM = "farm"
    CITY = "city"


class GamePhase(StrEnum):
    """Turn phases, in cyclic order."""

    DRAW = "draw"
    ACTION = "action"
    BUILD = "build"
    PRODUCTION = "production"
    END = "end"


class IntentKind(StrEnum):
    """Host intents gated by the phase machine."""

    DRAW = "draw"
    ROLL_DICE = "roll_dice"
    PLAY_ACTION = "play_action"
    PLAY_BUILDING = "play_building"
    PURCHASE = "purchase"
    ADVANCE = "advance"


class ComboKind(StrEnum):
    """Kinds of derived production modifiers."""

    CHAIN_BONUS = "chain_bonus"
    ADJACENCY_MULTIPLIER = "adjacency_multiplier"
    COUNT_SCALING = "count_scaling"
    DIVERSITY_BONUS = "diversity_bonus"
    GLOBAL_MULTIPLIER = "global_multiplier"


class CrisisEffect(StrEnum):
    """Effects carried by event cards while they are active."""

    REDUCE_FARM_PRODUCTION = "reduce_farm_production"
    STORM = "storm"
    LOSE_POPULATION = "lose_population"
    SCANDAL = "scandal"
    BOOST_CITY_PRODUCTION = "boost_city_production"
    BOOST_FARM_PRODUCTION = "boost_farm_production"


class EventType(StrEnum):
    """Classification of active game events."""

    CRISIS = "crisis"
    OPPORTUNITY = "opportunity"
    MULTIPLAYER = "multiplayer"


class StateFlag(StrEnum):
    """Boolean state flags that cards may grant."""

    CRISIS_PROTECTION = "crisis_protection"
    WEATHER_PREDICTION = "weather_prediction"
    ENHANCED_TRADING = "enhanced_trading"


class VictoryMode(StrEnum):
    """Configured victory modes."""

    CLASSIC = "classic"
    LANDMARKS = "landmarks"
    REPUTATION = "reputation"
    ELIMINATION = "elimination"
    SURVIVAL = "survival"
    INFINITE = "infinite"
    RESOURCES = "resources"
    PRODUCTION = "production"
    COMPLEX = "complex"


class ConditionType(StrEnum):
    """Weight of a condition in composite victory modes."""

    MAJOR = "major"
    MINOR = "minor"


class ConditionCategory(StrEnum):
    """Which derived value a victory condition measures."""

    LANDMARKS = "landmarks"
    REPUTATION = "reputation"
    SURVIVAL = "survival"
    COINS = "coins"
    RESOURCES = "resources"
    PRODUCTION = "production"
    DIVERSITY = "diversity"
    BUILDINGS = "buildings"


class DefeatKind(StrEnum):
    """Defeat conditions, in detection order."""

    POPULATION = "population"
    REPUTATION = "reputation"
    TURNS = "turns"
    DECK = "deck"


class OutcomeKind(StrEnum):
    """Terminal game outcomes."""

    VICTORY = "victory"
    DEFEAT = "defeat"


class ErrorKind(StrEnum):
    """Reasons an intent can be rejected."""

    WRONG_PHASE = "wrong_phase"
    ALREADY_ROLLED = "already_rolled"
    DICE_ROLL_REQUIRED = "dice_roll_required"
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    INVALID_CELL_TYPE = "invalid_cell_type"
    CELL_OCCUPIED = "cell_occupied"
    INVALID_PLACEMENT = "invalid_placement"
    INVALID_DICE_VALUE = "invalid_dice_value"
    CARD_NOT_IN_HAND = "card_not_in_hand"
    UNKNOWN_CARD = "unknown_card"
    ACTION_LIMIT_REACHED = "action_limit_reached"
    GAME_OVER = "game_over"
    INVARIANT_VIOLATION = "invariant_violation"
