"""Tests for the turn phase state machine."""

from __future__ import annotations

import pytest

from famand.domain.catalog import DEFAULT_CATALOG
from famand.domain.enums import DefeatKind, ErrorKind, GamePhase, OutcomeKind, VictoryMode
from famand.domain.intents import (
    EngineContext,
    advance_phase,
    draw_cards,
    play_card,
    roll_dice,
)
from famand.domain.models import GameID, Resources
from famand.domain.phases import PHASE_SEQUENCE, next_phase, resolve_outcome
from famand.domain.rules_config import EventRules, RulesConfig, TurnRules
from famand.domain.setup import new_game
from famand.domain.victory import preset_victory_system

CARD = DEFAULT_CATALOG.get
QUIET = RulesConfig(events=EventRules(base_chance=0.0))
CTX = EngineContext(rules=QUIET)


def _state(phase: GamePhase = GamePhase.DRAW, hand: tuple[str, ...] = ()):
    state = new_game(GameID(5), rules=QUIET)
    state.resources = Resources(coins=10, food=5, materials=5, population=3)
    state.hand = [CARD(card_id) for card_id in hand]
    state.phase = phase
    return state


def _advance(state, times: int, context: EngineContext = CTX):
    for _ in range(times):
        state, result = advance_phase(state, context)
        assert result.success, result.detail
    return state


def test_phase_sequence_wraps():
    assert [next_phase(phase) for phase in PHASE_SEQUENCE] == [
        GamePhase.ACTION,
        GamePhase.BUILD,
        GamePhase.PRODUCTION,
        GamePhase.END,
        GamePhase.DRAW,
    ]


class TestTurnCycle:
    """A full turn walks every phase and wraps to the next draw."""

    def test_full_turn(self):
        state = _state()
        state, result = draw_cards(state, CTX)
        assert result.success
        assert state.phase == GamePhase.ACTION
        assert len(state.hand) == 1
        state = _advance(state, 4)
        assert state.phase == GamePhase.DRAW
        assert state.turn == 2
        assert state.pending_draws == 1

    def test_entering_production_runs_turn_triggers(self):
        state = _state(GamePhase.BUILD, hand=("starter-workshop",))
        state, _ = play_card(state, "starter-workshop", CTX, row=0, col=0)
        state = _advance(state, 1)
        assert state.phase == GamePhase.PRODUCTION
        assert state.resources.materials == 6

    def test_turn_flags_reset(self):
        state = _state(GamePhase.ACTION, hand=("starter-shop",))
        state, _ = roll_dice(state, CTX, value=3)
        state, _ = play_card(state, "starter-shop", CTX)
        state = _advance(state, 4)
        assert state.dice_rolls_used == 0
        assert state.last_dice_roll is None
        assert state.action_card_played is False
        assert state.has_drawn is False


class TestGating:
    @pytest.mark.parametrize("phase", [GamePhase.DRAW, GamePhase.BUILD, GamePhase.PRODUCTION, GamePhase.END])
    def test_roll_outside_action(self, phase):
        state = _state(phase)
        new, result = roll_dice(state, CTX)
        assert result.error == ErrorKind.WRONG_PHASE
        assert new is state

    def test_draw_only_once(self):
        state, _ = draw_cards(_state(), CTX)
        _, result = draw_cards(state, CTX)
        assert result.error == ErrorKind.WRONG_PHASE

    def test_building_outside_build_phase(self):
        state = _state(GamePhase.ACTION, hand=("farm-wheat",))
        _, result = play_card(state, "farm-wheat", CTX, row=0, col=0)
        assert result.error == ErrorKind.WRONG_PHASE

    def test_action_outside_action_phase(self):
        state = _state(GamePhase.BUILD, hand=("starter-shop",))
        _, result = play_card(state, "starter-shop", CTX)
        assert result.error == ErrorKind.WRONG_PHASE


class TestDice:
    def test_second_roll_rejected(self):
        state = _state(GamePhase.ACTION)
        state, first = roll_dice(state, CTX)
        assert first.success
        assert 1 <= first.payload.value <= 6
        _, second = roll_dice(state, CTX)
        assert second.error == ErrorKind.ALREADY_ROLLED

    def test_lucky_charm_grants_another_roll(self):
        state = _state(GamePhase.ACTION, hand=("action-lucky-charm",))
        state, _ = play_card(state, "action-lucky-charm", CTX)
        state, first = roll_dice(state, CTX)
        state, second = roll_dice(state, CTX)
        _, third = roll_dice(state, CTX)
        assert first.success and second.success
        assert third.error == ErrorKind.ALREADY_ROLLED

    def test_seeded_roll_is_reproducible(self):
        _, a = roll_dice(_state(GamePhase.ACTION), CTX)
        _, b = roll_dice(_state(GamePhase.ACTION), CTX)
        assert a.payload.value == b.payload.value

    def test_required_roll_blocks_leaving_action(self):
        rules = RulesConfig(events=EventRules(base_chance=0.0), turn=TurnRules(require_dice_roll=True))
        context = EngineContext(rules=rules)
        state = new_game(GameID(5), rules=rules)
        state.phase = GamePhase.ACTION
        new, result = advance_phase(state, context)
        assert result.error == ErrorKind.DICE_ROLL_REQUIRED
        assert new is state
        state, _ = roll_dice(state, context, value=2)
        _, result = advance_phase(state, context)
        assert result.success

    @pytest.mark.parametrize("value", [0, 7, -3])
    def test_forced_value_out_of_range_rejected(self, value):
        state = _state(GamePhase.ACTION)
        new, result = roll_dice(state, CTX, value=value)
        assert result.error == ErrorKind.INVALID_DICE_VALUE
        assert new is state
        assert state.dice_rolls_used == 0
        assert state.last_dice_roll is None

    def test_required_roll_locks_action_cards(self):
        rules = RulesConfig(events=EventRules(base_chance=0.0), turn=TurnRules(require_dice_roll=True))
        context = EngineContext(rules=rules)
        state = new_game(GameID(5), rules=rules)
        state.resources = Resources(coins=10, food=5, materials=5, population=3)
        state.hand = [CARD("action-lucky-charm")]
        state.phase = GamePhase.ACTION
        assert state.can_play_actions is False
        new, result = play_card(state, "action-lucky-charm", context)
        assert result.error == ErrorKind.DICE_ROLL_REQUIRED
        assert new is state
        state, _ = roll_dice(state, context, value=4)
        assert state.can_play_actions is True
        state, result = play_card(state, "action-lucky-charm", context)
        assert result.success
        state = _advance(state, 4, context)
        assert state.can_play_actions is False


class TestCarryOver:
    def test_hand_limit_discards_oldest(self):
        hand = ("farm-wheat", "farm-cattle", "city-house", "starter-shop", "starter-farm", "action-trade")
        state = _state(hand=hand)
        state, result = draw_cards(state, CTX)
        assert len(state.hand) == 6
        assert [card.id for card in result.payload.discarded] == ["farm-wheat"]
        assert [card.id for card in state.discard] == ["farm-wheat"]

    def test_quick_loan_discards_next_turn(self):
        state = _state(GamePhase.ACTION, hand=("action-quick-loan", "farm-wheat", "farm-cattle"))
        state, _ = play_card(state, "action-quick-loan", CTX)
        assert state.resources.coins == 13
        state = _advance(state, 4)
        assert [card.id for card in state.hand] == ["farm-cattle"]
        assert [card.id for card in state.discard] == ["action-quick-loan", "farm-wheat"]
        assert state.cards_to_discard == 0

    def test_scouting_draws_extra_next_turn(self):
        state = _state(GamePhase.ACTION, hand=("action-scouting",))
        state, _ = play_card(state, "action-scouting", CTX)
        state = _advance(state, 4)
        assert state.pending_draws == 2
        state, result = draw_cards(state, CTX)
        assert len(result.payload.drawn) == 2


class TestOutcome:
    def test_population_defeat_at_end_of_turn(self):
        state = _state(GamePhase.END)
        state.resources.population = 0
        state, result = advance_phase(state, CTX)
        assert result.outcome.kind == OutcomeKind.DEFEAT
        assert result.outcome.defeat_kind == DefeatKind.POPULATION

    def test_finished_game_rejects_everything(self):
        state = _state(GamePhase.END)
        state.resources.population = 0
        state, _ = advance_phase(state, CTX)
        new, result = draw_cards(state, CTX)
        assert result.error == ErrorKind.GAME_OVER
        assert new is state

    def test_defeat_wins_over_victory(self):
        state = _state()
        state.resources.population = 0
        state.player_stats.reputation = 50
        outcome = resolve_outcome(state, preset_victory_system(VictoryMode.REPUTATION, 10), rules=QUIET)
        assert outcome.kind == OutcomeKind.DEFEAT

    def test_victory_is_detected_right_after_an_intent(self):
        context = EngineContext(rules=QUIET, victory=preset_victory_system(VictoryMode.REPUTATION, 1))
        state = _state(GamePhase.ACTION, hand=("action-public-festival",))
        state, result = play_card(state, "action-public-festival", context)
        assert result.outcome.kind == OutcomeKind.VICTORY
        assert state.outcome == result.outcome

    def test_low_population_mid_turn_is_not_a_defeat_yet(self):
        state = _state(GamePhase.BUILD)
        state.resources.population = 0
        state, result = advance_phase(state, CTX)
        assert result.outcome is None

    def test_one_scandal_does_not_end_the_game(self):
        state = _state(GamePhase.ACTION, hand=("event-scandal",))
        state, result = play_card(state, "event-scandal", CTX)
        assert result.success
        assert state.player_stats.reputation == -1
        state = _advance(state, 4)
        assert state.turn == 2
        assert state.outcome is None
