"""Turn phase state machine.

A turn runs ``draw -> action -> build -> production -> end`` and wraps back
to ``draw`` with the turn counter incremented.  Each phase admits a fixed set
of intents; everything else is rejected with ``wrong_phase``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .achievements import unlock_achievements
from .enums import ErrorKind, GamePhase, IntentKind, OutcomeKind
from .errors import IntentRejected
from .events import EventOutcome, maybe_trigger_random_event, tick_events
from .models import Card, GameEvent, GameOutcome, GameState, VictorySystem
from .production import ProductionReport, resolve_turn
from .rules_config import DEFAULT_RULES, RulesConfig
from .victory import evaluate_defeat, evaluate_victory

logger = logging.getLogger(__name__)

PHASE_SEQUENCE: tuple[GamePhase, ...] = (
    GamePhase.DRAW,
    GamePhase.ACTION,
    GamePhase.BUILD,
    GamePhase.PRODUCTION,
    GamePhase.END,
)

PHASE_ALLOWED_INTENTS: dict[GamePhase, frozenset[IntentKind]] = {
    GamePhase.DRAW: frozenset({IntentKind.DRAW, IntentKind.PURCHASE, IntentKind.ADVANCE}),
    GamePhase.ACTION: frozenset(
        {IntentKind.ROLL_DICE, IntentKind.PLAY_ACTION, IntentKind.PURCHASE, IntentKind.ADVANCE}
    ),
    GamePhase.BUILD: frozenset({IntentKind.PLAY_BUILDING, IntentKind.PURCHASE, IntentKind.ADVANCE}),
    GamePhase.PRODUCTION: frozenset({IntentKind.ADVANCE}),
    GamePhase.END: frozenset({IntentKind.ADVANCE}),
}


@dataclass(slots=True)
class PhaseTransition:
    """What happened while leaving one phase for the next."""

    from_phase: GamePhase
    to_phase: GamePhase
    turn: int
    production: ProductionReport | None = None
    discarded: list[Card] = field(default_factory=list)
    expired_events: list[GameEvent] = field(default_factory=list)
    random_event: EventOutcome | None = None
    achievements: list[str] = field(default_factory=list)
    outcome: GameOutcome | None = None


def next_phase(phase: GamePhase) -> GamePhase:
    index = PHASE_SEQUENCE.index(phase)
    return PHASE_SEQUENCE[(index + 1) % len(PHASE_SEQUENCE)]


def ensure_active(state: GameState) -> None:
    if state.outcome is not None:
        raise IntentRejected(ErrorKind.GAME_OVER, f"game already ended in {state.outcome.kind}")


def ensure_allowed(state: GameState, kind: IntentKind) -> None:
    if kind not in PHASE_ALLOWED_INTENTS[state.phase]:
        raise IntentRejected(ErrorKind.WRONG_PHASE, f"{kind} is not allowed during the {state.phase} phase")


def _discard_oldest(state: GameState, count: int) -> list[Card]:
    discarded = state.hand[:count]
    del state.hand[:count]
    state.discard.extend(discarded)
    return discarded


def enforce_hand_limit(state: GameState, *, rules: RulesConfig = DEFAULT_RULES) -> list[Card]:
    """Move the oldest cards above the hand limit to the discard pile."""

    excess = len(state.hand) - rules.turn.max_hand_size
    return _discard_oldest(state, excess) if excess > 0 else []


def _reset_turn_flags(state: GameState, rules: RulesConfig) -> None:
    state.has_drawn = False
    state.last_dice_roll = None
    state.activated_cards = []
    state.action_card_played = False
    state.can_play_actions = not rules.turn.require_dice_roll
    state.dice_rolls_used = 0
    state.dice_rolls_allowed = rules.turn.dice_rolls_per_turn
    state.dice_roll_required = rules.turn.require_dice_roll


def resolve_outcome(
    state: GameState,
    victory: VictorySystem,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    check_defeat: bool = True,
) -> GameOutcome | None:
    """Record a terminal outcome on ``state`` if one has been reached.

    A defeat reported alongside a satisfied victory wins, except for the turn
    cap, which the defeat check already skips once victory is achieved.
    """

    if state.outcome is not None:
        return state.outcome
    won = evaluate_victory(state, victory)
    if check_defeat:
        lost = evaluate_defeat(state, rules=rules, victory_achieved=won.satisfied, mode=victory.mode)
        if lost.defeated:
            state.outcome = GameOutcome(
                kind=OutcomeKind.DEFEAT, summary=lost.reason, turn=state.turn, defeat_kind=lost.kind
            )
    if state.outcome is None and won.satisfied:
        state.outcome = GameOutcome(kind=OutcomeKind.VICTORY, summary=won.summary, turn=state.turn)
    if state.outcome is not None:
        logger.info("game %s ended on turn %d: %s (%s)", state.game_id, state.turn, state.outcome.kind, state.outcome.summary)
    return state.outcome


def _end_turn(
    state: GameState,
    transition: PhaseTransition,
    *,
    event_pool: Sequence[Card],
    victory: VictorySystem,
    rules: RulesConfig,
) -> None:
    transition.discarded = _discard_oldest(state, state.cards_to_discard)
    state.cards_to_discard = 0
    state.pending_draws = state.extra_cards_per_turn + state.cards_to_buy_extra
    state.cards_to_buy_extra = 0

    transition.expired_events = tick_events(state)
    transition.random_event = maybe_trigger_random_event(
        state, list(event_pool), mode=victory.mode, rules=rules
    )

    state.turn += 1
    state.phase = GamePhase.DRAW
    _reset_turn_flags(state, rules)
    transition.turn = state.turn

    transition.achievements = unlock_achievements(state)
    transition.outcome = resolve_outcome(state, victory, rules=rules)


def advance_phase(
    state: GameState,
    *,
    victory: VictorySystem,
    event_pool: Sequence[Card] = (),
    rules: RulesConfig = DEFAULT_RULES,
) -> PhaseTransition:
    """Move ``state`` to the next phase, running that boundary's effects."""

    ensure_allowed(state, IntentKind.ADVANCE)
    current = state.phase
    if current == GamePhase.ACTION and state.dice_roll_required and state.dice_rolls_used == 0:
        raise IntentRejected(ErrorKind.DICE_ROLL_REQUIRED, "roll the dice before leaving the action phase")

    target = next_phase(current)
    transition = PhaseTransition(from_phase=current, to_phase=target, turn=state.turn)

    if current == GamePhase.END:
        _end_turn(state, transition, event_pool=event_pool, victory=victory, rules=rules)
    else:
        state.phase = target
        if target == GamePhase.PRODUCTION:
            transition.production = resolve_turn(state, rules=rules)

    logger.debug("game %s: %s -> %s (turn %d)", state.game_id, current, target, state.turn)
    return transition
