"""Tests for intent dispatch and the state invariants it guards."""

from __future__ import annotations

import copy

from hypothesis import given, settings
from hypothesis import strategies as st

from famand.domain.catalog import DEFAULT_CATALOG
from famand.domain.enums import ErrorKind, GamePhase, GridKind, ResourceKind
from famand.domain.intents import (
    AdvancePhase,
    DrawCards,
    EngineContext,
    PlayCard,
    PurchaseCard,
    RollDice,
    apply_intent,
    play_card,
    purchase_card,
    roll_dice,
)
from famand.domain.models import CellRef, GameID, Resources, card_instance_count
from famand.domain.resources import RESOURCE_KINDS, get_amount
from famand.domain.rules_config import EventRules, RulesConfig
from famand.domain.setup import new_game

CARD = DEFAULT_CATALOG.get
QUIET = RulesConfig(events=EventRules(base_chance=0.0))
CTX = EngineContext(rules=QUIET)


def _state(phase: GamePhase = GamePhase.BUILD, hand: tuple[str, ...] = (), **resources):
    state = new_game(GameID(1), rules=QUIET)
    state.resources = Resources(**resources)
    state.hand = [CARD(card_id) for card_id in hand]
    state.phase = phase
    return state


class TestWheatScenario:
    """Place a wheat field, roll a one, harvest."""

    def test_place_then_roll(self):
        state = _state(hand=("farm-wheat",), coins=5)
        state, result = play_card(state, "farm-wheat", CTX, row=0, col=0)
        assert result.success
        assert state.resources.coins == 4
        assert result.payload.cell == CellRef(GridKind.FARM, 0, 0)

        state.phase = GamePhase.ACTION
        state, result = roll_dice(state, CTX, value=1)
        assert result.success
        assert state.resources.food == 1
        assert [card.id for card in state.activated_cards] == ["farm-wheat"]
        assert "rolled 1" in result.events


class TestPlayBuilding:
    def test_stats_and_instant_yield(self):
        state = _state(hand=("city-house",), coins=2, materials=1)
        state, result = play_card(state, "city-house", CTX, row=2, col=3)
        assert state.player_stats.buildings_built == 1
        assert state.resources.population == 1
        assert state.city_grid.cells[2][3].card.id == "city-house"
        assert result.payload.resource_delta == {ResourceKind.POPULATION: 1}

    def test_insufficient_resources_leaves_state_untouched(self):
        state = _state(hand=("farm-wheat",))
        snapshot = copy.deepcopy(state)
        new, result = play_card(state, "farm-wheat", CTX, row=0, col=0)
        assert result.error == ErrorKind.INSUFFICIENT_RESOURCES
        assert new is state
        assert state == snapshot

    def test_wrong_grid(self):
        state = _state(hand=("city-house",), coins=5, materials=5)
        _, result = play_card(state, "city-house", CTX, row=0, col=0, grid=GridKind.FARM)
        assert result.error == ErrorKind.INVALID_CELL_TYPE

    def test_occupied_cell(self):
        state = _state(hand=("farm-wheat", "farm-wheat"), coins=5)
        state, _ = play_card(state, "farm-wheat", CTX, row=0, col=0)
        _, result = play_card(state, "farm-wheat", CTX, row=0, col=0)
        assert result.error == ErrorKind.CELL_OCCUPIED

    def test_missing_or_outside_cell(self):
        state = _state(hand=("farm-wheat",), coins=5)
        _, missing = play_card(state, "farm-wheat", CTX)
        _, outside = play_card(state, "farm-wheat", CTX, row=9, col=0)
        assert missing.error == ErrorKind.INVALID_PLACEMENT
        assert outside.error == ErrorKind.INVALID_PLACEMENT

    def test_placement_is_checked_before_payment(self):
        state = _state(hand=("city-house",))
        _, result = play_card(state, "city-house", CTX, row=0, col=0, grid=GridKind.FARM)
        assert result.error == ErrorKind.INVALID_CELL_TYPE

    def test_unknown_card_and_card_not_in_hand(self):
        state = _state(coins=5)
        _, unknown = play_card(state, "no-such-card", CTX, row=0, col=0)
        _, absent = play_card(state, "farm-wheat", CTX, row=0, col=0)
        assert unknown.error == ErrorKind.UNKNOWN_CARD
        assert absent.error == ErrorKind.CARD_NOT_IN_HAND

    def test_combo_effects_refresh_on_placement(self):
        state = _state(hand=("farm-vineyard", "farm-vineyard"), coins=8)
        state, _ = play_card(state, "farm-vineyard", CTX, row=0, col=0)
        assert state.combo_effects == []
        state, _ = play_card(state, "farm-vineyard", CTX, row=0, col=1)
        assert len(state.combo_effects) == 2


class TestLandmarks:
    def test_completing_a_landmark(self):
        state = _state(hand=("landmark-gate",), coins=6, materials=4, population=1)
        state, result = play_card(state, "landmark-gate", CTX)
        assert result.success
        assert [card.id for card in state.completed_landmarks] == ["landmark-gate"]
        assert state.player_stats.landmarks_completed == 1
        assert state.player_stats.reputation == 2
        assert state.crisis_protection is True
        assert "landmark-gate" not in [card.id for card in state.landmarks_available]


class TestActions:
    def test_only_one_action_per_turn(self):
        state = _state(GamePhase.ACTION, hand=("starter-shop", "starter-harvest"))
        state, first = play_card(state, "starter-shop", CTX)
        _, second = play_card(state, "starter-harvest", CTX)
        assert first.success
        assert second.error == ErrorKind.ACTION_LIMIT_REACHED

    def test_event_cards_are_not_limited(self):
        state = _state(GamePhase.ACTION, hand=("starter-shop", "event-trade-boom"), coins=2)
        state, _ = play_card(state, "starter-shop", CTX)
        state, result = play_card(state, "event-trade-boom", CTX)
        assert result.success
        assert result.payload.event.name == "Alta do Comércio"
        assert [card.id for card in state.discard] == ["starter-shop", "event-trade-boom"]

    def test_trade_swaps_materials_for_food(self):
        state = _state(GamePhase.ACTION, hand=("action-trade",), materials=2)
        state, result = play_card(state, "action-trade", CTX)
        assert (state.resources.materials, state.resources.food) == (0, 2)

    def test_flag_grants(self):
        state = _state(GamePhase.ACTION, hand=("action-weather-forecast",), coins=1)
        state, _ = play_card(state, "action-weather-forecast", CTX)
        assert state.weather_prediction is True


class TestPurchase:
    def test_purchase_adds_to_hand(self):
        state = _state(GamePhase.DRAW, coins=3)
        state, result = purchase_card(state, "farm-wheat", CTX)
        assert result.success
        assert state.resources.coins == 2
        assert [card.id for card in state.hand] == ["farm-wheat"]

    def test_purchase_rejections(self):
        state = _state(GamePhase.DRAW)
        _, poor = purchase_card(state, "farm-wheat", CTX)
        _, unknown = purchase_card(state, "no-such-card", CTX)
        _, late = purchase_card(_state(GamePhase.PRODUCTION, coins=5), "farm-wheat", CTX)
        assert poor.error == ErrorKind.INSUFFICIENT_RESOURCES
        assert unknown.error == ErrorKind.UNKNOWN_CARD
        assert late.error == ErrorKind.WRONG_PHASE


def test_same_state_and_intent_give_same_result():
    state = _state(GamePhase.ACTION)
    first_state, first = roll_dice(state, CTX)
    second_state, second = roll_dice(state, CTX)
    assert first_state == second_state
    assert first.payload == second.payload


_INTENTS = [
    DrawCards(),
    RollDice(),
    AdvancePhase(),
    PlayCard("farm-wheat", 0, 0),
    PlayCard("farm-wheat", 1, 0),
    PlayCard("city-house", 0, 0),
    PlayCard("action-harvest"),
    PlayCard("starter-shop"),
    PurchaseCard("farm-wheat"),
    PurchaseCard("city-house"),
    PurchaseCard("action-harvest"),
]


@settings(max_examples=60, deadline=None)
@given(st.lists(st.sampled_from(_INTENTS), max_size=40))
def test_intents_preserve_invariants(intents):
    """Cards are conserved and counters stay non-negative under any sequence."""

    state = new_game(GameID(2), rules=QUIET)
    for intent in intents:
        before = card_instance_count(state)
        new, result = apply_intent(state, intent, CTX)
        assert result.error != ErrorKind.INVARIANT_VIOLATION
        if not result.success:
            assert new is state
            continue
        bought = 1 if isinstance(intent, PurchaseCard) else 0
        assert card_instance_count(new) == before + bought
        assert all(get_amount(new.resources, kind) >= 0 for kind in RESOURCE_KINDS)
        state = new
