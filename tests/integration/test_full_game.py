"""End-to-end games driven only through intents."""

from __future__ import annotations

from famand.domain.enums import DefeatKind, ErrorKind, GamePhase, OutcomeKind, VictoryMode
from famand.domain.intents import EngineContext, advance_phase, draw_cards, play_card, roll_dice
from famand.domain.models import GameID
from famand.domain.resources import RESOURCE_KINDS, get_amount
from famand.domain.rules_config import EventRules, RulesConfig
from famand.domain.setup import new_game
from famand.domain.victory import preset_victory_system

QUIET = RulesConfig(events=EventRules(base_chance=0.0))


def _play_until_over(state, context, max_steps: int = 1000):
    for _ in range(max_steps):
        if state.outcome is not None:
            return state
        state, result = advance_phase(state, context)
        assert result.success, result.detail
    raise AssertionError("game did not finish")


def test_idle_game_hits_the_turn_cap():
    context = EngineContext(rules=QUIET)
    state = _play_until_over(new_game(GameID(1), rules=QUIET), context)
    assert state.outcome.kind == OutcomeKind.DEFEAT
    assert state.outcome.defeat_kind == DefeatKind.TURNS
    assert state.turn == 51


def test_survival_game_is_won():
    context = EngineContext(rules=QUIET, victory=preset_victory_system(VictoryMode.SURVIVAL, 5))
    state = _play_until_over(new_game(GameID(1), rules=QUIET), context)
    assert state.outcome.kind == OutcomeKind.VICTORY
    assert state.outcome.turn == 5


def test_infinite_game_ignores_the_turn_cap():
    context = EngineContext(rules=QUIET, victory=preset_victory_system(VictoryMode.INFINITE))
    state = new_game(GameID(1), rules=QUIET)
    while state.turn <= 60:
        state, result = advance_phase(state, context)
        assert result.success, result.detail
    assert state.outcome is None


def test_busy_game_under_constant_events():
    """Draw, roll, play and build every turn while events strike each turn."""

    rules = RulesConfig(events=EventRules(base_chance=1.0))
    context = EngineContext(rules=rules, victory=preset_victory_system(VictoryMode.ELIMINATION, 15))
    state = new_game(GameID(8), rules=rules)

    for _ in range(15):
        if state.outcome is not None:
            break
        state, _ = draw_cards(state, context)
        state, _ = roll_dice(state, context)
        for card in list(state.hand):
            state, _ = play_card(state, card.id, context)
        state, _ = advance_phase(state, context)
        for card in list(state.hand):
            grid = state.farm_grid if card.type == "farm" else state.city_grid
            free = next((cell for row in grid.cells for cell in row if cell.card is None), None)
            if free is not None:
                state, _ = play_card(state, card.id, context, row=free.row, col=free.col)
        for _ in range(3):
            state, result = advance_phase(state, context)
            if not result.success:
                assert result.error == ErrorKind.GAME_OVER
                break
        assert all(get_amount(state.resources, kind) >= 0 for kind in RESOURCE_KINDS)

    assert state.outcome is not None or state.phase == GamePhase.DRAW
