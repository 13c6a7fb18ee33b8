"""Runtime primitives backing the Famand HTTP API."""

from __future__ import annotations

import asyncio
import logging

from famand.config import Settings, build_rules, get_settings
from famand.domain import models as dm
from famand.domain.catalog import DEFAULT_CATALOG, CardCatalog
from famand.domain.enums import VictoryMode
from famand.domain.intents import EngineContext, Intent, IntentResult, apply_intent
from famand.domain.rules_config import RulesConfig
from famand.domain.setup import new_game
from famand.domain.victory import (
    DefeatResult,
    VictoryResult,
    evaluate_defeat,
    evaluate_victory,
    preset_victory_system,
)
from famand.repository import JsonGameRepository

logger = logging.getLogger(__name__)


class GameNotFoundError(LookupError):
    """Raised when a game id has no snapshot."""


class GameSessionService:
    """Loads games, applies intents one at a time per game and persists them."""

    def __init__(
        self,
        repository: JsonGameRepository,
        *,
        catalog: CardCatalog = DEFAULT_CATALOG,
        rules: RulesConfig,
        default_mode: VictoryMode = VictoryMode.CLASSIC,
        default_target: int | None = None,
    ) -> None:
        self._repository = repository
        self._catalog = catalog
        self._rules = rules
        self._default_mode = default_mode
        self._default_target = default_target
        self._locks: dict[dm.GameID, asyncio.Lock] = {}

    @property
    def catalog(self) -> CardCatalog:
        return self._catalog

    def _lock_for(self, game_id: dm.GameID) -> asyncio.Lock:
        lock = self._locks.get(game_id)
        if lock is None:
            lock = self._locks[game_id] = asyncio.Lock()
        return lock

    def _next_identifier(self) -> dm.GameID:
        existing = self._repository.list_games()
        return dm.GameID(int(max(existing, key=int)) + 1 if existing else 1)

    def list_games(self) -> list[dm.GameID]:
        return self._repository.list_games()

    def create_game(
        self,
        *,
        mode: VictoryMode | None = None,
        target: int | None = None,
        victory: dm.VictorySystem | None = None,
    ) -> tuple[dm.GameState, dm.VictorySystem]:
        """Create, persist and return a new game with its victory configuration.

        An explicit ``victory`` system wins over ``mode``/``target`` presets.
        """

        game_id = self._next_identifier()
        if victory is None:
            chosen = mode or self._default_mode
            victory = preset_victory_system(chosen, target if target is not None else self._default_target)
        state = new_game(game_id, self._catalog, rules=self._rules)
        self._repository.save(state)
        self._repository.save_victory(game_id, victory)
        logger.info("game %s created in %s mode", int(game_id), victory.mode)
        return state, victory

    def get_game(self, game_id: dm.GameID) -> dm.GameState:
        try:
            return self._repository.load(game_id)
        except FileNotFoundError as exc:
            raise GameNotFoundError(f"game {int(game_id)} not found") from exc

    def get_victory_system(self, game_id: dm.GameID) -> dm.VictorySystem:
        victory = self._repository.load_victory(game_id)
        if victory is None:
            return preset_victory_system(self._default_mode, self._default_target)
        return victory

    def context_for(self, game_id: dm.GameID) -> EngineContext:
        return EngineContext(
            catalog=self._catalog, victory=self.get_victory_system(game_id), rules=self._rules
        )

    def evaluate(self, game_id: dm.GameID) -> tuple[VictoryResult, DefeatResult]:
        state = self.get_game(game_id)
        victory = self.get_victory_system(game_id)
        won = evaluate_victory(state, victory)
        lost = evaluate_defeat(state, rules=self._rules, victory_achieved=won.satisfied, mode=victory.mode)
        return won, lost

    async def apply(self, game_id: dm.GameID, intent: Intent) -> tuple[dm.GameState, IntentResult]:
        """Load, apply and save under the game's lock."""

        async with self._lock_for(game_id):
            state = self.get_game(game_id)
            updated, result = apply_intent(state, intent, self.context_for(game_id))
            if result.success:
                self._repository.save(updated)
                if result.outcome is not None and state.outcome is None:
                    logger.info("game %s finished: %s", int(game_id), result.outcome.kind)
            else:
                logger.warning(
                    "game %s rejected %s: %s (%s)",
                    int(game_id),
                    type(intent).__name__,
                    result.error,
                    result.detail,
                )
            return updated, result

    def delete_game(self, game_id: dm.GameID) -> None:
        self._repository.delete(game_id)
        self._locks.pop(game_id, None)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rules: RulesConfig | None = None,
        catalog: CardCatalog = DEFAULT_CATALOG,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules or build_rules(self.settings)
        self.repository = JsonGameRepository(self.settings.data_dir)
        self.games = GameSessionService(
            self.repository,
            catalog=catalog,
            rules=self.rules,
            default_mode=self.settings.victory_mode,
            default_target=self.settings.victory_target,
        )

    async def shutdown(self) -> None:
        logger.debug("api state shut down")


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
