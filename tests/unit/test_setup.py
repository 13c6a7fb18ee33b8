"""Tests for new game construction."""

from __future__ import annotations

from famand.domain.catalog import DEFAULT_CATALOG
from famand.domain.enums import CardType, GamePhase
from famand.domain.models import GameID, card_instance_count
from famand.domain.rules_config import DEFAULT_RULES
from famand.domain.setup import new_game


def test_opening_position():
    state = new_game(GameID(1))
    assert state.turn == 1
    assert state.phase == GamePhase.DRAW
    assert (state.resources.coins, state.resources.food) == (3, 2)
    assert (state.resources.materials, state.resources.population) == (2, 2)
    assert len(state.hand) == DEFAULT_RULES.setup.starting_hand_size
    assert len(state.deck) == DEFAULT_RULES.setup.deck_size
    assert card_instance_count(state) == len(state.hand) + len(state.deck)
    assert state.landmarks_available == DEFAULT_CATALOG.landmarks()


def test_deal_comes_from_the_right_pools():
    state = new_game(GameID(4))
    starters = {card.id for card in DEFAULT_CATALOG.starter_pool()}
    assert all(card.id in starters for card in state.hand)
    assert all(card.type not in (CardType.EVENT, CardType.LANDMARK) for card in state.deck)


def test_same_id_same_game():
    assert new_game(GameID(9)) == new_game(GameID(9))


def test_given_deck_is_kept_in_order():
    deck = [DEFAULT_CATALOG.get("farm-cattle"), DEFAULT_CATALOG.get("farm-wheat")]
    state = new_game(GameID(2), deck=deck)
    assert [card.id for card in state.deck] == ["farm-cattle", "farm-wheat"]
