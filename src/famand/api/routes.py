"""HTTP routes for the Famand API."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field, TypeAdapter
from pydantic_core import to_jsonable_python

from famand import __version__
from famand.api.runtime import ApiState, GameNotFoundError
from famand.domain import models as dm
from famand.domain.enums import ErrorKind, GridKind, VictoryMode
from famand.domain.intents import (
    AdvancePhase,
    DrawCards,
    Intent,
    IntentResult,
    PlayCard,
    PurchaseCard,
    RollDice,
)
from famand.domain.victory import DefeatResult, VictoryResult
from famand.schemas import VictorySystemSchema

router = APIRouter()

_STATE_ADAPTER: TypeAdapter[dm.GameState] = TypeAdapter(dm.GameState)
_CARDS_ADAPTER: TypeAdapter[list[dm.Card]] = TypeAdapter(list[dm.Card])

_CONFLICT_ERRORS = frozenset(
    {
        ErrorKind.WRONG_PHASE,
        ErrorKind.ALREADY_ROLLED,
        ErrorKind.DICE_ROLL_REQUIRED,
        ErrorKind.ACTION_LIMIT_REACHED,
        ErrorKind.GAME_OVER,
    }
)
_UNPROCESSABLE = 422


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CreateGameRequest(BaseModel):
    victory_mode: VictoryMode | None = None
    victory_target: int | None = Field(default=None, ge=1)
    victory_system: VictorySystemSchema | None = Field(default=None, description="Custom conditions; overrides the mode preset")


class RollRequest(BaseModel):
    value: int | None = Field(default=None, ge=1, le=6, description="Force the dice face")


class PlayRequest(BaseModel):
    card_id: str = Field(min_length=1)
    row: int | None = Field(default=None, ge=0)
    col: int | None = Field(default=None, ge=0)
    grid: GridKind | None = None


class PurchaseRequest(BaseModel):
    card_id: str = Field(min_length=1)


class GameResponse(BaseModel):
    game_id: int
    victory_mode: VictoryMode
    state: dict[str, Any]


class IntentResponse(BaseModel):
    success: bool
    events: list[str]
    payload: Any = None
    outcome: dict[str, Any] | None = None
    state: dict[str, Any]


class ConditionReport(BaseModel):
    id: str
    name: str
    category: str
    type: str | None
    current: int
    target: int
    satisfied: bool
    percent: float


class VictoryReport(BaseModel):
    mode: VictoryMode
    satisfied: bool
    summary: str
    major_met: int
    minor_met: int
    conditions: list[ConditionReport]
    defeated: bool
    defeat_kind: str | None
    defeat_reason: str


def _dump_state(state: dm.GameState) -> dict[str, Any]:
    return _STATE_ADAPTER.dump_python(state, mode="json")


def _status_for(kind: ErrorKind | None) -> int:
    if kind in _CONFLICT_ERRORS:
        return status.HTTP_409_CONFLICT
    if kind == ErrorKind.INVARIANT_VIOLATION:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return _UNPROCESSABLE


def _not_found(exc: GameNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _victory_report(won: VictoryResult, lost: DefeatResult) -> VictoryReport:
    return VictoryReport(
        mode=won.mode,
        satisfied=won.satisfied,
        summary=won.summary,
        major_met=won.major_met,
        minor_met=won.minor_met,
        conditions=[
            ConditionReport(
                id=p.condition.id,
                name=p.condition.name,
                category=p.condition.category,
                type=p.condition.type,
                current=p.current,
                target=p.condition.target,
                satisfied=p.satisfied,
                percent=p.percent,
            )
            for p in won.progress
        ],
        defeated=lost.defeated,
        defeat_kind=lost.kind,
        defeat_reason=lost.reason,
    )


async def _run_intent(state: ApiState, game_id: int, intent: Intent) -> IntentResponse:
    try:
        updated, result = await state.games.apply(dm.GameID(game_id), intent)
    except GameNotFoundError as exc:
        raise _not_found(exc) from exc
    if not result.success:
        raise HTTPException(
            status_code=_status_for(result.error),
            detail={"error": result.error, "detail": result.detail},
        )
    return _intent_response(updated, result)


def _intent_response(updated: dm.GameState, result: IntentResult) -> IntentResponse:
    return IntentResponse(
        success=result.success,
        events=result.events,
        payload=to_jsonable_python(result.payload),
        outcome=to_jsonable_python(result.outcome) if result.outcome is not None else None,
        state=_dump_state(updated),
    )


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "version": __version__,
        "victory_mode": state.settings.victory_mode,
        "turn_cap": state.rules.defeat.turn_cap,
    }


@router.get("/cards")
async def list_cards(state: ApiStateDep) -> list[dict[str, Any]]:
    return _CARDS_ADAPTER.dump_python(list(state.games.catalog), mode="json")


@router.get("/games")
async def list_games(state: ApiStateDep) -> list[int]:
    return [int(game_id) for game_id in state.games.list_games()]


@router.post("/games", response_model=GameResponse, status_code=status.HTTP_201_CREATED)
async def create_game(request: CreateGameRequest, state: ApiStateDep) -> GameResponse:
    custom = request.victory_system.to_domain() if request.victory_system is not None else None
    game, victory = state.games.create_game(
        mode=request.victory_mode, target=request.victory_target, victory=custom
    )
    return GameResponse(game_id=int(game.game_id), victory_mode=victory.mode, state=_dump_state(game))


@router.get("/games/{game_id}", response_model=GameResponse)
async def get_game(game_id: int, state: ApiStateDep) -> GameResponse:
    key = dm.GameID(game_id)
    try:
        game = state.games.get_game(key)
    except GameNotFoundError as exc:
        raise _not_found(exc) from exc
    victory = state.games.get_victory_system(key)
    return GameResponse(game_id=game_id, victory_mode=victory.mode, state=_dump_state(game))


@router.get("/games/{game_id}/victory", response_model=VictoryReport)
async def get_victory(game_id: int, state: ApiStateDep) -> VictoryReport:
    try:
        won, lost = state.games.evaluate(dm.GameID(game_id))
    except GameNotFoundError as exc:
        raise _not_found(exc) from exc
    return _victory_report(won, lost)


@router.post("/games/{game_id}/draw", response_model=IntentResponse)
async def draw(game_id: int, state: ApiStateDep) -> IntentResponse:
    return await _run_intent(state, game_id, DrawCards())


@router.post("/games/{game_id}/roll", response_model=IntentResponse)
async def roll(game_id: int, state: ApiStateDep, request: RollRequest | None = None) -> IntentResponse:
    return await _run_intent(state, game_id, RollDice(value=request.value if request else None))


@router.post("/games/{game_id}/play", response_model=IntentResponse)
async def play(game_id: int, request: PlayRequest, state: ApiStateDep) -> IntentResponse:
    intent = PlayCard(card_id=request.card_id, row=request.row, col=request.col, grid=request.grid)
    return await _run_intent(state, game_id, intent)


@router.post("/games/{game_id}/advance", response_model=IntentResponse)
async def advance(game_id: int, state: ApiStateDep) -> IntentResponse:
    return await _run_intent(state, game_id, AdvancePhase())


@router.post("/games/{game_id}/purchase", response_model=IntentResponse)
async def purchase(game_id: int, request: PurchaseRequest, state: ApiStateDep) -> IntentResponse:
    return await _run_intent(state, game_id, PurchaseCard(card_id=request.card_id))


@router.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_game(game_id: int, state: ApiStateDep) -> None:
    state.games.delete_game(dm.GameID(game_id))
