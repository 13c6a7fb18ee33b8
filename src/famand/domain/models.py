"""Dataclasses describing every Famand game entity.

Catalog entries (cards, combo rules) are frozen value objects: the same card
may sit in several cells, in the deck and in the hand at once.  Everything
reachable from :class:`GameState` is plain, mutable data that the intent
handlers copy before changing, so a snapshot handed to the host is never
modified afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, NewType

from .enums import (
    CardType,
    ComboKind,
    ConditionCategory,
    ConditionType,
    CrisisEffect,
    DefeatKind,
    EventType,
    GamePhase,
    GridKind,
    OutcomeKind,
    Rarity,
    ResourceKind,
    StateFlag,
    Trigger,
    VictoryMode,
)

# --- Strongly typed identifiers -------------------------------------------------

GameID = NewType("GameID", int)
CardID = NewType("CardID", str)
EventID = NewType("EventID", str)

ResourceMap = dict[ResourceKind, int]


# --- Resources ------------------------------------------------------------------


@dataclass(slots=True)
class Resources:
    """In-match resource counters; never negative once committed."""

    coins: int = 0
    food: int = 0
    materials: int = 0
    population: int = 0


# --- Combo rules (closed set of card-borne modifiers) ---------------------------


@dataclass(frozen=True, slots=True)
class CardTarget:
    """Selects cards by type, by id, or both."""

    card_type: CardType | None = None
    card_id: CardID | None = None


@dataclass(frozen=True, slots=True)
class ChainBonus:
    """+amount per orthogonal neighbour holding the same card."""

    resource: ResourceKind
    amount: int = 1
    kind: Literal["chain_bonus"] = "chain_bonus"


@dataclass(frozen=True, slots=True)
class AdjacencyMultiplier:
    """Multiplies the production of matching orthogonal neighbours."""

    target: CardTarget
    factor: int = 2
    resource: ResourceKind | None = None
    kind: Literal["adjacency_multiplier"] = "adjacency_multiplier"


@dataclass(frozen=True, slots=True)
class CountScaling:
    """Bonus proportional to a board-wide card count or a resource value."""

    resource: ResourceKind
    amount: int = 1
    per_card: CardTarget | None = None
    per_resource: ResourceKind | None = None
    cap: int | None = None
    kind: Literal["count_scaling"] = "count_scaling"


@dataclass(frozen=True, slots=True)
class DiversityBonus:
    """Bonus per distinct card type present on the grids."""

    resource: ResourceKind
    amount: int = 1
    kind: Literal["diversity_bonus"] = "diversity_bonus"


@dataclass(frozen=True, slots=True)
class GlobalMultiplier:
    """Scales every matching cell on the board (landmark effects)."""

    factor: float = 2.0
    target: CardTarget | None = None
    resource: ResourceKind | None = None
    kind: Literal["global_multiplier"] = "global_multiplier"


ComboRule = ChainBonus | AdjacencyMultiplier | CountScaling | DiversityBonus | GlobalMultiplier


# --- Cards ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CardEffect:
    """What a card does once played or placed."""

    description: str
    production: ResourceMap = field(default_factory=dict)
    trigger: Trigger | None = None
    dice_numbers: frozenset[int] = frozenset()
    combo: ComboRule | None = None
    crisis_effect: CrisisEffect | None = None
    duration: int | None = None
    buy_extra_card: int = 0
    discard_next_turn: int = 0
    extra_dice_roll: int = 0
    reputation: int = 0
    grants: frozenset[StateFlag] = frozenset()


@dataclass(frozen=True, slots=True)
class Card:
    """Catalog entry."""

    id: CardID
    name: str
    type: CardType
    cost: ResourceMap
    effect: CardEffect
    rarity: Rarity

    def __deepcopy__(self, memo: dict) -> Card:
        # Catalog entries are immutable and shared between games.
        return self


# --- Grids ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CellRef:
    """Coordinates of a cell within one of the grids."""

    grid: GridKind
    row: int
    col: int


@dataclass(slots=True)
class GridCell:
    """Placement slot; holds at most one card."""

    grid: GridKind
    row: int
    col: int
    card: Card | None = None


@dataclass(slots=True)
class Grid:
    """Fixed-size matrix of cells, row-major."""

    kind: GridKind
    cells: list[list[GridCell]]


# --- Derived and transient records ---------------------------------------------


@dataclass(frozen=True, slots=True)
class ComboEffect:
    """Production modifier derived from the current board."""

    kind: ComboKind
    description: str
    multiplier: float
    conditions: tuple[str, ...]
    source: CellRef | None = None
    targets: tuple[CellRef, ...] = ()
    resource: ResourceKind | None = None
    bonus: int = 0
    target_type: CardType | None = None


@dataclass(slots=True)
class GameEvent:
    """Active crisis or opportunity."""

    id: EventID
    type: EventType
    name: str
    description: str
    effect: CrisisEffect
    remaining: int
    active: bool = True
    source_card_id: CardID | None = None


@dataclass(slots=True)
class PlayerStats:
    """Progress counters; only reputation may decrease."""

    reputation: int = 0
    total_production: int = 0
    buildings_built: int = 0
    landmarks_completed: int = 0
    crisis_survived: int = 0
    achievements: list[str] = field(default_factory=list)


@dataclass(slots=True)
class GameOutcome:
    """Terminal result of a game."""

    kind: OutcomeKind
    summary: str
    turn: int
    defeat_kind: DefeatKind | None = None


# --- Victory configuration ------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VictoryCondition:
    """Single goal compared against a derived value."""

    id: str
    name: str
    category: ConditionCategory
    target: int
    type: ConditionType | None = None
    description: str = ""


@dataclass(frozen=True, slots=True)
class VictorySystem:
    """Mode configuration consumed read-only by the evaluator."""

    mode: VictoryMode
    conditions: tuple[VictoryCondition, ...] = ()
    required_major: int = 0
    required_minor: int = 0


# --- Aggregate root -------------------------------------------------------------


@dataclass(slots=True)
class GameState:
    """Everything the engine owns for a single match."""

    game_id: GameID
    resources: Resources
    farm_grid: Grid
    city_grid: Grid
    hand: list[Card] = field(default_factory=list)
    deck: list[Card] = field(default_factory=list)
    discard: list[Card] = field(default_factory=list)
    landmarks_available: list[Card] = field(default_factory=list)
    completed_landmarks: list[Card] = field(default_factory=list)
    turn: int = 1
    phase: GamePhase = GamePhase.DRAW
    active_events: list[GameEvent] = field(default_factory=list)
    player_stats: PlayerStats = field(default_factory=PlayerStats)
    combo_effects: list[ComboEffect] = field(default_factory=list)
    crisis_protection: bool = False
    weather_prediction: bool = False
    enhanced_trading: bool = False
    extra_cards_per_turn: int = 1
    pending_draws: int = 1
    has_drawn: bool = False
    last_dice_roll: int | None = None
    activated_cards: list[Card] = field(default_factory=list)
    cards_to_discard: int = 0
    cards_to_buy_extra: int = 0
    action_card_played: bool = False
    dice_roll_required: bool = False
    can_play_actions: bool = True
    dice_rolls_used: int = 0
    dice_rolls_allowed: int = 1
    event_counter: int = 0
    outcome: GameOutcome | None = None


def placed_cards(state: GameState) -> list[Card]:
    """Cards currently occupying grid cells, farm grid first."""

    return [
        cell.card
        for grid in (state.farm_grid, state.city_grid)
        for row in grid.cells
        for cell in row
        if cell.card is not None
    ]


def card_instance_count(state: GameState) -> int:
    """Total card instances the player owns across every zone."""

    return (
        len(state.deck)
        + len(state.hand)
        + len(placed_cards(state))
        + len(state.discard)
        + len(state.completed_landmarks)
    )
