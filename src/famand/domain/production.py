"""Production resolver.

Per producing cell the order is fixed: base production, then additive combo
bonuses targeting the cell, then adjacency multipliers, then global scaling
(completed-landmark multipliers times active event factors), floored.
Multipliers only scale gains; negative amounts are upkeep and pass through.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from .combos import ADDITIVE_KINDS, cell_ref, compute_combo_effects, effects_targeting
from .enums import CardType, ComboKind, GridKind, Trigger
from .events import production_factors
from .grid import occupied_cells
from .models import Card, CellRef, ComboEffect, GameState, GridCell, ResourceMap
from .resources import apply_delta, merge_deltas
from .rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CellProduction:
    """Yield of a single activated cell."""

    cell: CellRef
    card: Card
    base: ResourceMap
    final: ResourceMap


@dataclass(slots=True)
class ProductionReport:
    """Everything a production pass changed."""

    trigger: Trigger
    activated_cards: list[Card] = field(default_factory=list)
    cells: list[CellProduction] = field(default_factory=list)
    resource_delta: ResourceMap = field(default_factory=dict)
    produced: int = 0
    combos: list[ComboEffect] = field(default_factory=list)


@dataclass(slots=True)
class DiceOutcome:
    """Payload returned for a dice roll."""

    value: int
    activated_cards: list[Card]
    resource_delta: ResourceMap
    combos: list[ComboEffect]


def refresh_combo_effects(state: GameState) -> list[ComboEffect]:
    state.combo_effects = compute_combo_effects(
        state.farm_grid,
        state.city_grid,
        landmarks=state.completed_landmarks,
        resources=state.resources,
    )
    return state.combo_effects


def cell_output(
    cell: GridCell,
    combos: list[ComboEffect],
    grid_factors: dict[GridKind, float],
) -> ResourceMap:
    """Final yield of one occupied cell given the current combos."""

    card = cell.card
    ref = cell_ref(cell)
    relevant = effects_targeting(combos, ref)
    amounts = dict(card.effect.production)

    for effect in relevant:
        if effect.kind in ADDITIVE_KINDS and effect.resource is not None:
            amounts[effect.resource] = amounts.get(effect.resource, 0) + effect.bonus

    for effect in relevant:
        if effect.kind != ComboKind.ADJACENCY_MULTIPLIER:
            continue
        for resource, amount in amounts.items():
            if amount > 0 and effect.resource in (None, resource):
                amounts[resource] = amount * int(effect.multiplier)

    final: ResourceMap = {}
    for resource, amount in amounts.items():
        if amount > 0:
            factor = grid_factors.get(cell.grid, 1.0)
            for effect in relevant:
                if effect.kind == ComboKind.GLOBAL_MULTIPLIER and effect.resource in (None, resource):
                    factor *= effect.multiplier
            amount = math.floor(amount * factor)
        if amount:
            final[resource] = amount
    return final


def _resolve(state: GameState, trigger: Trigger, cells: list[GridCell], *, rules: RulesConfig) -> ProductionReport:
    combos = refresh_combo_effects(state)
    factors = production_factors(state, rules=rules)
    report = ProductionReport(trigger=trigger, combos=list(combos))
    for cell in cells:
        output = cell_output(cell, combos, factors)
        report.cells.append(
            CellProduction(cell=cell_ref(cell), card=cell.card, base=dict(cell.card.effect.production), final=output)
        )
        report.activated_cards.append(cell.card)
        report.produced += sum(amount for amount in output.values() if amount > 0)

    report.resource_delta = apply_delta(state.resources, merge_deltas(c.final for c in report.cells))
    state.player_stats.total_production += report.produced
    state.activated_cards = list(report.activated_cards)
    logger.debug(
        "game %s: %s production from %d cards: %s",
        state.game_id,
        trigger,
        len(report.activated_cards),
        report.resource_delta,
    )
    return report


def resolve_dice(state: GameState, value: int, *, rules: RulesConfig = DEFAULT_RULES) -> DiceOutcome:
    """Activate every dice-triggered card whose numbers include ``value``."""

    if not 1 <= value <= 6:
        raise ValueError(f"dice value must be between 1 and 6, got {value}")
    cells = [
        cell
        for cell in occupied_cells(state.farm_grid, state.city_grid)
        if cell.card.effect.trigger == Trigger.DICE and value in cell.card.effect.dice_numbers
    ]
    report = _resolve(state, Trigger.DICE, cells, rules=rules)
    state.last_dice_roll = value
    return DiceOutcome(
        value=value,
        activated_cards=report.activated_cards,
        resource_delta=report.resource_delta,
        combos=report.combos,
    )


def resolve_turn(state: GameState, *, rules: RulesConfig = DEFAULT_RULES) -> ProductionReport:
    """Activate every turn-triggered card once."""

    cells = [
        cell
        for cell in occupied_cells(state.farm_grid, state.city_grid)
        if cell.card.effect.trigger == Trigger.TURN
    ]
    return _resolve(state, Trigger.TURN, cells, rules=rules)


def instant_yield(state: GameState, card: Card) -> ResourceMap:
    """One-shot production of a card as it is played."""

    amounts = dict(card.effect.production)
    if state.enhanced_trading and card.type == CardType.ACTION and card.cost:
        for resource, amount in list(amounts.items()):
            if amount > 0:
                amounts[resource] = amount + 1
    return amounts


def resolve_instant(state: GameState, card: Card) -> ResourceMap:
    """Apply the one-shot yield of an action card or an instant placement."""

    if card.type != CardType.ACTION and card.effect.trigger != Trigger.INSTANT:
        return {}
    return apply_delta(state.resources, instant_yield(state, card))
