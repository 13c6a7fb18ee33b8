"""Combo engine: derive production modifiers from the current board.

Every card-borne :data:`~famand.domain.models.ComboRule` variant has exactly
one handler in ``_COMBO_HANDLERS``.  Handlers inspect the grids and return
zero or more :class:`~famand.domain.models.ComboEffect` records; they never
change the board.  The walk order is fixed (farm grid row-major, city grid
row-major, completed landmarks in completion order) so the same board
always yields the same list.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import get_args

from .enums import ComboKind
from .errors import InvariantViolation
from .grid import occupied_cells, orthogonal_neighbors
from .models import (
    AdjacencyMultiplier,
    Card,
    CardTarget,
    CellRef,
    ChainBonus,
    ComboEffect,
    ComboRule,
    CountScaling,
    DiversityBonus,
    GlobalMultiplier,
    Grid,
    GridCell,
    Resources,
)

ADDITIVE_KINDS = frozenset(
    {ComboKind.CHAIN_BONUS, ComboKind.COUNT_SCALING, ComboKind.DIVERSITY_BONUS}
)


@dataclass(frozen=True, slots=True)
class ComboContext:
    """Board snapshot shared by the handlers."""

    farm_grid: Grid
    city_grid: Grid
    resources: Resources | None

    @property
    def grids(self) -> tuple[Grid, Grid]:
        return (self.farm_grid, self.city_grid)

    def grid_for(self, ref: CellRef) -> Grid:
        return self.farm_grid if ref.grid == self.farm_grid.kind else self.city_grid


def cell_ref(cell: GridCell) -> CellRef:
    return CellRef(grid=cell.grid, row=cell.row, col=cell.col)


def matches_target(card: Card, target: CardTarget | None) -> bool:
    """``None`` or an empty target matches every card."""

    if target is None:
        return True
    if target.card_type is not None and card.type != target.card_type:
        return False
    if target.card_id is not None and card.id != target.card_id:
        return False
    return True


def _describe_target(target: CardTarget | None) -> str:
    if target is None or (target.card_type is None and target.card_id is None):
        return "all cards"
    return str(target.card_id or target.card_type)


# --- Handlers --------------------------------------------------------------------


def _chain_bonus(rule: ChainBonus, card: Card, ref: CellRef | None, ctx: ComboContext) -> list[ComboEffect]:
    if ref is None:
        return []
    grid = ctx.grid_for(ref)
    same = [
        neighbour
        for neighbour in orthogonal_neighbors(grid, ref.row, ref.col)
        if neighbour.card is not None and neighbour.card.id == card.id
    ]
    if not same:
        return []
    return [
        ComboEffect(
            kind=ComboKind.CHAIN_BONUS,
            description=f"{card.name}: +{rule.amount * len(same)} {rule.resource} from adjacent copies",
            multiplier=1.0,
            conditions=(f"{len(same)} adjacent {card.id}",),
            source=ref,
            targets=(ref,),
            resource=rule.resource,
            bonus=rule.amount * len(same),
        )
    ]


def _adjacency_multiplier(
    rule: AdjacencyMultiplier, card: Card, ref: CellRef | None, ctx: ComboContext
) -> list[ComboEffect]:
    if ref is None:
        return []
    grid = ctx.grid_for(ref)
    targets = tuple(
        cell_ref(neighbour)
        for neighbour in orthogonal_neighbors(grid, ref.row, ref.col)
        if neighbour.card is not None and matches_target(neighbour.card, rule.target)
    )
    if not targets:
        return []
    return [
        ComboEffect(
            kind=ComboKind.ADJACENCY_MULTIPLIER,
            description=f"{card.name}: x{rule.factor} for adjacent {_describe_target(rule.target)}",
            multiplier=float(rule.factor),
            conditions=(f"adjacent {_describe_target(rule.target)}",),
            source=ref,
            targets=targets,
            resource=rule.resource,
            target_type=rule.target.card_type,
        )
    ]


def _count_scaling(rule: CountScaling, card: Card, ref: CellRef | None, ctx: ComboContext) -> list[ComboEffect]:
    if ref is None:
        return []
    if rule.per_card is not None:
        count = sum(
            1 for cell in occupied_cells(*ctx.grids) if matches_target(cell.card, rule.per_card)
        )
        condition = f"{count} x {_describe_target(rule.per_card)} on the board"
    elif rule.per_resource is not None:
        count = getattr(ctx.resources, rule.per_resource.value) if ctx.resources is not None else 0
        condition = f"{count} {rule.per_resource}"
    else:
        raise InvariantViolation(f"count scaling on '{card.id}' has nothing to count")
    bonus = rule.amount * count
    if rule.cap is not None:
        bonus = min(bonus, rule.cap)
    if bonus <= 0:
        return []
    return [
        ComboEffect(
            kind=ComboKind.COUNT_SCALING,
            description=f"{card.name}: +{bonus} {rule.resource}",
            multiplier=1.0,
            conditions=(condition,),
            source=ref,
            targets=(ref,),
            resource=rule.resource,
            bonus=bonus,
            target_type=rule.per_card.card_type if rule.per_card is not None else None,
        )
    ]


def _diversity_bonus(
    rule: DiversityBonus, card: Card, ref: CellRef | None, ctx: ComboContext
) -> list[ComboEffect]:
    if ref is None:
        return []
    distinct = len({cell.card.type for cell in occupied_cells(*ctx.grids)})
    if not distinct:
        return []
    return [
        ComboEffect(
            kind=ComboKind.DIVERSITY_BONUS,
            description=f"{card.name}: +{rule.amount * distinct} {rule.resource} for diversity",
            multiplier=1.0,
            conditions=(f"{distinct} distinct card types",),
            source=ref,
            targets=(ref,),
            resource=rule.resource,
            bonus=rule.amount * distinct,
        )
    ]


def _global_multiplier(
    rule: GlobalMultiplier, card: Card, ref: CellRef | None, ctx: ComboContext
) -> list[ComboEffect]:
    targets = tuple(
        cell_ref(cell)
        for cell in occupied_cells(*ctx.grids)
        if matches_target(cell.card, rule.target)
    )
    if not targets:
        return []
    return [
        ComboEffect(
            kind=ComboKind.GLOBAL_MULTIPLIER,
            description=f"{card.name}: x{rule.factor:g} for {_describe_target(rule.target)}",
            multiplier=rule.factor,
            conditions=(f"{card.name} completed" if ref is None else f"{card.name} on the board",),
            source=ref,
            targets=targets,
            resource=rule.resource,
            target_type=rule.target.card_type if rule.target is not None else None,
        )
    ]


ComboHandler = Callable[[ComboRule, Card, CellRef | None, ComboContext], list[ComboEffect]]

_COMBO_HANDLERS: dict[type, ComboHandler] = {
    ChainBonus: _chain_bonus,
    AdjacencyMultiplier: _adjacency_multiplier,
    CountScaling: _count_scaling,
    DiversityBonus: _diversity_bonus,
    GlobalMultiplier: _global_multiplier,
}

_unregistered = set(get_args(ComboRule)) - set(_COMBO_HANDLERS)
if _unregistered:  # pragma: no cover - guards new rule variants
    raise InvariantViolation(f"combo rules without a handler: {sorted(t.__name__ for t in _unregistered)}")


def _effects_for(card: Card, ref: CellRef | None, ctx: ComboContext) -> list[ComboEffect]:
    rule = card.effect.combo
    if rule is None:
        return []
    handler = _COMBO_HANDLERS.get(type(rule))
    if handler is None:
        raise InvariantViolation(f"no combo handler for {type(rule).__name__}")
    return handler(rule, card, ref, ctx)


def compute_combo_effects(
    farm_grid: Grid,
    city_grid: Grid,
    *,
    landmarks: Sequence[Card] = (),
    resources: Resources | None = None,
) -> list[ComboEffect]:
    """Every combo active on the given board, in deterministic order."""

    ctx = ComboContext(farm_grid=farm_grid, city_grid=city_grid, resources=resources)
    effects: list[ComboEffect] = []
    for cell in occupied_cells(farm_grid, city_grid):
        effects.extend(_effects_for(cell.card, cell_ref(cell), ctx))
    for landmark in landmarks:
        effects.extend(_effects_for(landmark, None, ctx))
    return effects


def effects_targeting(effects: Sequence[ComboEffect], ref: CellRef) -> list[ComboEffect]:
    return [effect for effect in effects if ref in effect.targets]
