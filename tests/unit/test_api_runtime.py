"""Tests for API runtime helpers (game session service)."""

from __future__ import annotations

import pytest

from famand.api.runtime import GameNotFoundError, GameSessionService
from famand.domain import models as dm
from famand.domain.enums import ErrorKind, GamePhase, VictoryMode
from famand.domain.intents import AdvancePhase, DrawCards, RollDice
from famand.domain.rules_config import EventRules, RulesConfig
from famand.repository import JsonGameRepository

QUIET = RulesConfig(events=EventRules(base_chance=0.0))


def _service(tmp_path, **kwargs) -> GameSessionService:
    return GameSessionService(JsonGameRepository(tmp_path), rules=QUIET, **kwargs)


def test_create_game_assigns_increasing_ids(tmp_path):
    service = _service(tmp_path)
    first, _ = service.create_game()
    second, victory = service.create_game(mode=VictoryMode.RESOURCES, target=20)
    assert (first.game_id, second.game_id) == (1, 2)
    assert service.list_games() == [1, 2]
    assert service.get_victory_system(second.game_id) == victory
    assert victory.conditions[0].target == 20


def test_default_mode_comes_from_the_host(tmp_path):
    service = _service(tmp_path, default_mode=VictoryMode.SURVIVAL, default_target=7)
    state, victory = service.create_game()
    assert victory.mode == VictoryMode.SURVIVAL
    assert service.context_for(state.game_id).victory.conditions[0].target == 7


@pytest.mark.asyncio
async def test_apply_persists_successes_only(tmp_path):
    service = _service(tmp_path)
    state, _ = service.create_game()

    updated, result = await service.apply(state.game_id, DrawCards())
    assert result.success
    assert service.get_game(state.game_id) == updated

    built, result = await service.apply(state.game_id, AdvancePhase())
    assert result.success
    _, result = await service.apply(state.game_id, RollDice())
    assert result.error == ErrorKind.WRONG_PHASE
    assert service.get_game(state.game_id).phase == GamePhase.BUILD
    assert built.phase == GamePhase.BUILD


@pytest.mark.asyncio
async def test_unknown_game(tmp_path):
    service = _service(tmp_path)
    with pytest.raises(GameNotFoundError):
        await service.apply(dm.GameID(5), DrawCards())


def test_evaluate_and_delete(tmp_path):
    service = _service(tmp_path)
    state, _ = service.create_game(mode=VictoryMode.LANDMARKS)
    won, lost = service.evaluate(state.game_id)
    assert won.satisfied is False
    assert lost.defeated is False
    service.delete_game(state.game_id)
    assert service.list_games() == []
    with pytest.raises(GameNotFoundError):
        service.get_game(state.game_id)
