"""Intent dispatch: the only way a host changes a game.

Each handler receives a private deep copy of the state and mutates that copy.
:func:`apply_intent` returns the copy on success and the untouched input
state on rejection, so ``(state, intent) -> (state, result)`` holds for every
call and a snapshot the host already holds is never modified.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from famand.utils import rng

from . import phases
from .catalog import DEFAULT_CATALOG, CardCatalog
from .enums import CardType, ErrorKind, GamePhase, GridKind, IntentKind, StateFlag, VictoryMode
from .errors import IntentRejected, InvariantViolation
from .events import start_event
from .grid import check_placement, place_card
from .models import (
    Card,
    CardID,
    CellRef,
    GameEvent,
    GameOutcome,
    GameState,
    Grid,
    ResourceMap,
    VictorySystem,
    card_instance_count,
)
from .production import DiceOutcome, refresh_combo_effects, resolve_dice, resolve_instant
from .resources import ensure_non_negative, pay_cost
from .rules_config import DEFAULT_RULES, RulesConfig
from .victory import preset_victory_system

logger = logging.getLogger(__name__)


# --- Context and intents -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EngineContext:
    """Read-only collaborators every handler may consult."""

    catalog: CardCatalog = DEFAULT_CATALOG
    victory: VictorySystem = field(default_factory=lambda: preset_victory_system(VictoryMode.CLASSIC))
    rules: RulesConfig = DEFAULT_RULES


@dataclass(frozen=True, slots=True)
class DrawCards:
    pass


@dataclass(frozen=True, slots=True)
class RollDice:
    value: int | None = None  # host-forced face, otherwise seeded


@dataclass(frozen=True, slots=True)
class PlayCard:
    card_id: str
    row: int | None = None
    col: int | None = None
    grid: GridKind | None = None


@dataclass(frozen=True, slots=True)
class AdvancePhase:
    pass


@dataclass(frozen=True, slots=True)
class PurchaseCard:
    card_id: str


Intent = DrawCards | RollDice | PlayCard | AdvancePhase | PurchaseCard


# --- Results -----------------------------------------------------------------------


@dataclass(slots=True)
class DrawResult:
    drawn: list[Card]
    discarded: list[Card]


@dataclass(slots=True)
class PlayResult:
    card: Card
    cell: CellRef | None = None
    resource_delta: ResourceMap = field(default_factory=dict)
    event: GameEvent | None = None


@dataclass(slots=True)
class PurchaseResult:
    card: Card
    cost: ResourceMap


@dataclass(slots=True)
class IntentResult:
    """Outcome of applying one intent."""

    success: bool
    error: ErrorKind | None = None
    detail: str | None = None
    payload: object | None = None
    events: list[str] = field(default_factory=list)
    outcome: GameOutcome | None = None


IntentHandler = Callable[[GameState, Intent, EngineContext], object]


def _failure(kind: ErrorKind, detail: str | None) -> IntentResult:
    return IntentResult(success=False, error=kind, detail=detail or kind.value)


# --- Helpers -----------------------------------------------------------------------


def _take_from_hand(state: GameState, card_id: str, catalog: CardCatalog) -> Card:
    for card in state.hand:
        if card.id == card_id:
            return card
    if card_id not in catalog:
        raise IntentRejected(ErrorKind.UNKNOWN_CARD, f"unknown card id '{card_id}'")
    raise IntentRejected(ErrorKind.CARD_NOT_IN_HAND, f"'{card_id}' is not in hand")


def _remove_from_hand(state: GameState, card: Card) -> None:
    for index, held in enumerate(state.hand):
        if held is card:
            del state.hand[index]
            return
    raise InvariantViolation(f"'{card.id}' vanished from hand")


def _grid(state: GameState, kind: GridKind) -> Grid:
    return state.farm_grid if kind == GridKind.FARM else state.city_grid


def _apply_one_shot(state: GameState, card: Card) -> None:
    """Reputation, flag grants and next-turn carry-overs printed on a card."""

    effect = card.effect
    state.player_stats.reputation += effect.reputation
    for flag in effect.grants:
        setattr(state, StateFlag(flag).value, True)
    state.cards_to_discard += effect.discard_next_turn
    state.cards_to_buy_extra += effect.buy_extra_card
    state.dice_rolls_allowed += effect.extra_dice_roll


# --- Handlers ----------------------------------------------------------------------


def _handle_draw(state: GameState, intent: DrawCards, context: EngineContext) -> DrawResult:
    phases.ensure_allowed(state, IntentKind.DRAW)
    count = state.pending_draws
    drawn = state.deck[:count]
    del state.deck[:count]
    state.hand.extend(drawn)
    discarded = phases.enforce_hand_limit(state, rules=context.rules)
    state.has_drawn = True
    state.pending_draws = 0
    state.phase = GamePhase.ACTION
    return DrawResult(drawn=drawn, discarded=discarded)


def _handle_roll(state: GameState, intent: RollDice, context: EngineContext) -> DiceOutcome:
    phases.ensure_allowed(state, IntentKind.ROLL_DICE)
    if state.dice_rolls_used >= state.dice_rolls_allowed:
        raise IntentRejected(
            ErrorKind.ALREADY_ROLLED,
            f"{state.dice_rolls_used} of {state.dice_rolls_allowed} rolls already used this turn",
        )
    value = intent.value
    if value is not None and not 1 <= value <= 6:
        raise IntentRejected(ErrorKind.INVALID_DICE_VALUE, f"dice value must be between 1 and 6, got {value}")
    if value is None:
        seed = rng.generate_seed(state.game_id, state.turn, state.phase, f"dice_{state.dice_rolls_used + 1}")
        value = rng.roll_dice(seed, "1d6")["total"]
    state.dice_rolls_used += 1
    state.can_play_actions = True
    return resolve_dice(state, value, rules=context.rules)


def _play_action(state: GameState, card: Card, context: EngineContext) -> PlayResult:
    phases.ensure_allowed(state, IntentKind.PLAY_ACTION)
    if card.type == CardType.ACTION:
        # can_play_actions stays False until the first roll when rolling is mandatory
        if not state.can_play_actions:
            raise IntentRejected(ErrorKind.DICE_ROLL_REQUIRED, "roll the dice before playing an action card")
        if state.action_card_played:
            raise IntentRejected(ErrorKind.ACTION_LIMIT_REACHED, "only one action card may be played per turn")
    pay_cost(state.resources, card.cost)
    _remove_from_hand(state, card)
    state.discard.append(card)

    if card.type == CardType.EVENT:
        event = start_event(state, card, mode=context.victory.mode, rules=context.rules)
        return PlayResult(card=card, event=event)

    delta = resolve_instant(state, card)
    _apply_one_shot(state, card)
    state.action_card_played = True
    return PlayResult(card=card, resource_delta=delta)


def _play_landmark(state: GameState, card: Card) -> PlayResult:
    phases.ensure_allowed(state, IntentKind.PLAY_BUILDING)
    pay_cost(state.resources, card.cost)
    _remove_from_hand(state, card)
    state.completed_landmarks.append(card)
    state.landmarks_available = [held for held in state.landmarks_available if held.id != card.id]
    state.player_stats.landmarks_completed += 1
    delta = resolve_instant(state, card)
    _apply_one_shot(state, card)
    refresh_combo_effects(state)
    return PlayResult(card=card, resource_delta=delta)


def _play_building(state: GameState, card: Card, intent: PlayCard) -> PlayResult:
    phases.ensure_allowed(state, IntentKind.PLAY_BUILDING)
    grid = _grid(state, intent.grid or GridKind(card.type.value))
    if intent.row is None or intent.col is None:
        raise IntentRejected(ErrorKind.INVALID_PLACEMENT, f"'{card.id}' needs a target cell")
    check_placement(grid, intent.row, intent.col, card)
    pay_cost(state.resources, card.cost)
    _remove_from_hand(state, card)
    cell = place_card(grid, intent.row, intent.col, card)
    state.player_stats.buildings_built += 1
    delta = resolve_instant(state, card)
    _apply_one_shot(state, card)
    refresh_combo_effects(state)
    return PlayResult(card=card, cell=CellRef(cell.grid, cell.row, cell.col), resource_delta=delta)


def _handle_play(state: GameState, intent: PlayCard, context: EngineContext) -> PlayResult:
    card = _take_from_hand(state, intent.card_id, context.catalog)
    if card.type in (CardType.ACTION, CardType.EVENT):
        return _play_action(state, card, context)
    if card.type == CardType.LANDMARK:
        return _play_landmark(state, card)
    return _play_building(state, card, intent)


def _handle_advance(state: GameState, intent: AdvancePhase, context: EngineContext) -> phases.PhaseTransition:
    return phases.advance_phase(
        state,
        victory=context.victory,
        event_pool=context.catalog.event_cards(),
        rules=context.rules,
    )


def _handle_purchase(state: GameState, intent: PurchaseCard, context: EngineContext) -> PurchaseResult:
    phases.ensure_allowed(state, IntentKind.PURCHASE)
    card = context.catalog.find(intent.card_id)
    if card is None:
        raise IntentRejected(ErrorKind.UNKNOWN_CARD, f"unknown card id '{intent.card_id}'")
    pay_cost(state.resources, card.cost)
    state.hand.append(card)
    return PurchaseResult(card=card, cost=dict(card.cost))


_INTENT_HANDLERS: dict[type, IntentHandler] = {
    DrawCards: _handle_draw,
    RollDice: _handle_roll,
    PlayCard: _handle_play,
    AdvancePhase: _handle_advance,
    PurchaseCard: _handle_purchase,
}


def _describe(intent: Intent, payload: object) -> list[str]:
    if isinstance(payload, DrawResult):
        return [f"drew {len(payload.drawn)} card(s)"] + [f"discarded {c.name}" for c in payload.discarded]
    if isinstance(payload, DiceOutcome):
        return [f"rolled {payload.value}"] + [f"{c.name} produced" for c in payload.activated_cards]
    if isinstance(payload, PlayResult):
        lines = [f"played {payload.card.name}"]
        if payload.event is not None:
            lines.append(f"event started: {payload.event.name}")
        return lines
    if isinstance(payload, PurchaseResult):
        return [f"purchased {payload.card.name}"]
    if isinstance(payload, phases.PhaseTransition):
        lines = [f"{payload.from_phase} -> {payload.to_phase}"]
        lines.extend(f"event expired: {event.name}" for event in payload.expired_events)
        roll = payload.random_event
        if roll is not None and roll.event is not None:
            lines.append(f"event started: {roll.event.name}")
        elif roll is not None and roll.blocked_by is not None:
            lines.append(f"{roll.card.name} blocked by {roll.blocked_by}")
        lines.extend(f"achievement unlocked: {name}" for name in payload.achievements)
        return lines
    return []


# --- Dispatcher --------------------------------------------------------------------


def apply_intent(
    state: GameState, intent: Intent, context: EngineContext | None = None
) -> tuple[GameState, IntentResult]:
    """Apply ``intent`` to ``state`` and return the resulting snapshot."""

    context = context or DEFAULT_CONTEXT
    handler = _INTENT_HANDLERS.get(type(intent))
    if handler is None:
        raise TypeError(f"unsupported intent: {type(intent).__name__}")

    working = copy.deepcopy(state)
    cards_before = card_instance_count(working)
    try:
        phases.ensure_active(working)
        payload = handler(working, intent, context)
        expected = cards_before + (1 if isinstance(intent, PurchaseCard) else 0)
        if card_instance_count(working) != expected:
            raise InvariantViolation(
                f"card count changed from {cards_before} to {card_instance_count(working)}"
            )
        ensure_non_negative(working.resources)
        phases.resolve_outcome(working, context.victory, rules=context.rules, check_defeat=False)
    except IntentRejected as exc:
        logger.debug("game %s: %s rejected (%s)", state.game_id, type(intent).__name__, exc.kind)
        return state, _failure(exc.kind, exc.detail)
    except InvariantViolation as exc:
        logger.error("game %s: invariant violated by %s: %s", state.game_id, type(intent).__name__, exc)
        return state, _failure(ErrorKind.INVARIANT_VIOLATION, str(exc))

    return working, IntentResult(
        success=True,
        payload=payload,
        events=_describe(intent, payload),
        outcome=working.outcome,
    )


DEFAULT_CONTEXT = EngineContext()


# --- Convenience wrappers ----------------------------------------------------------


def draw_cards(state: GameState, context: EngineContext | None = None) -> tuple[GameState, IntentResult]:
    return apply_intent(state, DrawCards(), context)


def roll_dice(
    state: GameState, context: EngineContext | None = None, *, value: int | None = None
) -> tuple[GameState, IntentResult]:
    return apply_intent(state, RollDice(value=value), context)


def play_card(
    state: GameState,
    card_id: str | CardID,
    context: EngineContext | None = None,
    *,
    row: int | None = None,
    col: int | None = None,
    grid: GridKind | None = None,
) -> tuple[GameState, IntentResult]:
    return apply_intent(state, PlayCard(card_id=card_id, row=row, col=col, grid=grid), context)


def advance_phase(state: GameState, context: EngineContext | None = None) -> tuple[GameState, IntentResult]:
    return apply_intent(state, AdvancePhase(), context)


def purchase_card(
    state: GameState, card_id: str | CardID, context: EngineContext | None = None
) -> tuple[GameState, IntentResult]:
    return apply_intent(state, PurchaseCard(card_id=card_id), context)
