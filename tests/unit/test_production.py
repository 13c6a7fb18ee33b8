"""Tests for the production resolver."""

from __future__ import annotations

import pytest

from famand.domain.catalog import DEFAULT_CATALOG
from famand.domain.enums import CrisisEffect, EventType, GridKind, ResourceKind, Trigger
from famand.domain.grid import place_card
from famand.domain.models import EventID, GameEvent, GameID, Resources
from famand.domain.production import instant_yield, resolve_dice, resolve_instant, resolve_turn
from famand.domain.setup import new_game

CARD = DEFAULT_CATALOG.get


def _state(**resources):
    state = new_game(GameID(7))
    state.resources = Resources(**resources)
    return state


def _event(effect: CrisisEffect, remaining: int = 2) -> GameEvent:
    return GameEvent(
        id=EventID("event-1"),
        type=EventType.CRISIS,
        name=str(effect),
        description="",
        effect=effect,
        remaining=remaining,
    )


class TestDiceProduction:
    """Dice-triggered cards fire only on their printed numbers."""

    def test_matching_roll_activates_card(self):
        state = _state(coins=5)
        place_card(state.farm_grid, 0, 0, CARD("farm-wheat"))
        outcome = resolve_dice(state, 1)
        assert state.resources.food == 1
        assert [card.id for card in outcome.activated_cards] == ["farm-wheat"]
        assert state.activated_cards == outcome.activated_cards
        assert state.last_dice_roll == 1

    def test_other_roll_activates_nothing(self):
        state = _state()
        place_card(state.farm_grid, 0, 0, CARD("farm-wheat"))
        outcome = resolve_dice(state, 3)
        assert outcome.activated_cards == []
        assert state.resources.food == 0

    def test_adjacent_vineyards_each_yield_four_coins(self):
        state = _state()
        place_card(state.farm_grid, 0, 0, CARD("farm-vineyard"))
        place_card(state.farm_grid, 0, 1, CARD("farm-vineyard"))
        outcome = resolve_dice(state, 6)
        assert outcome.resource_delta == {ResourceKind.COINS: 8}
        assert state.player_stats.total_production == 8

    def test_barn_doubles_adjacent_wheat(self):
        state = _state()
        place_card(state.farm_grid, 1, 1, CARD("farm-barn"))
        place_card(state.farm_grid, 1, 2, CARD("farm-wheat"))
        place_card(state.farm_grid, 3, 3, CARD("farm-wheat"))
        resolve_dice(state, 1)
        assert state.resources.food == 3

    def test_chain_bonus_applies_before_multiplier(self):
        state = _state()
        place_card(state.farm_grid, 0, 0, CARD("farm-vineyard"))
        place_card(state.farm_grid, 0, 1, CARD("farm-vineyard"))
        state.completed_landmarks.append(CARD("landmark-cathedral"))
        resolve_dice(state, 6)
        assert state.resources.coins == 16

    def test_drought_halves_farms(self):
        state = _state()
        place_card(state.farm_grid, 0, 0, CARD("farm-cattle"))
        state.active_events.append(_event(CrisisEffect.REDUCE_FARM_PRODUCTION))
        resolve_dice(state, 2)
        assert state.resources.food == 1

    def test_invalid_face_is_rejected(self):
        with pytest.raises(ValueError):
            resolve_dice(_state(), 7)


class TestTurnProduction:
    def test_turn_cards_fire_dice_cards_do_not(self):
        state = _state()
        place_card(state.farm_grid, 0, 0, CARD("starter-garden"))
        place_card(state.farm_grid, 0, 1, CARD("farm-wheat"))
        report = resolve_turn(state)
        assert report.trigger == Trigger.TURN
        assert [card.id for card in report.activated_cards] == ["starter-garden"]
        assert state.resources.food == 1

    def test_upkeep_is_not_scaled(self):
        state = _state(food=2)
        place_card(state.city_grid, 0, 0, CARD("city-factory"))
        state.active_events.append(_event(CrisisEffect.STORM))
        report = resolve_turn(state)
        assert state.resources.materials == 1
        assert state.resources.food == 1
        assert report.produced == 1

    def test_upkeep_is_clamped_at_zero(self):
        state = _state()
        place_card(state.city_grid, 0, 0, CARD("city-factory"))
        report = resolve_turn(state)
        assert state.resources.food == 0
        assert report.resource_delta == {ResourceKind.MATERIALS: 2}

    def test_market_scales_with_population(self):
        state = _state(population=4)
        place_card(state.city_grid, 0, 0, CARD("city-market"))
        resolve_turn(state)
        assert state.resources.coins == 4

    def test_trade_boom_doubles_city(self):
        state = _state()
        place_card(state.city_grid, 0, 0, CARD("starter-workshop"))
        state.active_events.append(_event(CrisisEffect.BOOST_CITY_PRODUCTION))
        resolve_turn(state)
        assert state.resources.materials == 2

    def test_refreshes_combo_effects(self):
        state = _state()
        place_card(state.farm_grid, 0, 0, CARD("farm-vineyard"))
        place_card(state.farm_grid, 1, 0, CARD("farm-vineyard"))
        resolve_turn(state)
        assert len(state.combo_effects) == 2
        assert all(effect.source.grid == GridKind.FARM for effect in state.combo_effects)


class TestInstantYield:
    def test_instant_building(self):
        state = _state()
        assert resolve_instant(state, CARD("city-house")) == {ResourceKind.POPULATION: 1}
        assert state.resources.population == 1
        assert state.player_stats.total_production == 0

    def test_turn_building_has_no_instant_yield(self):
        state = _state()
        assert resolve_instant(state, CARD("starter-workshop")) == {}

    def test_enhanced_trading_boosts_paid_actions_only(self):
        state = _state()
        state.enhanced_trading = True
        assert instant_yield(state, CARD("action-harvest")) == {ResourceKind.FOOD: 3}
        assert instant_yield(state, CARD("starter-harvest")) == {ResourceKind.FOOD: 1}
