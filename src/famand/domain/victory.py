"""Victory and defeat evaluation.

Both evaluators are read-only: they derive values from a :class:`GameState`
and never touch it, so evaluating twice without an intent in between always
yields the same answer.
"""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ConditionCategory, ConditionType, DefeatKind, VictoryMode
from .models import GameState, VictoryCondition, VictorySystem, placed_cards
from .rules_config import DEFAULT_RULES, RulesConfig

_COMPOSITE_MODES = frozenset({VictoryMode.CLASSIC, VictoryMode.COMPLEX})


@dataclass(frozen=True, slots=True)
class ConditionProgress:
    condition: VictoryCondition
    current: int
    satisfied: bool

    @property
    def percent(self) -> float:
        if self.condition.target <= 0:
            return 100.0
        return min(100.0, 100.0 * self.current / self.condition.target)


@dataclass(frozen=True, slots=True)
class VictoryResult:
    mode: VictoryMode
    satisfied: bool
    summary: str
    progress: tuple[ConditionProgress, ...] = ()
    major_met: int = 0
    minor_met: int = 0


@dataclass(frozen=True, slots=True)
class DefeatResult:
    defeated: bool
    kind: DefeatKind | None = None
    reason: str = ""


def current_value(category: ConditionCategory, state: GameState) -> int:
    """Derived value a condition of ``category`` is compared against."""

    stats = state.player_stats
    if category == ConditionCategory.LANDMARKS:
        return stats.landmarks_completed
    if category == ConditionCategory.REPUTATION:
        return stats.reputation
    if category == ConditionCategory.SURVIVAL:
        return state.turn
    if category == ConditionCategory.COINS:
        return state.resources.coins
    if category == ConditionCategory.RESOURCES:
        res = state.resources
        return res.coins + res.food + res.materials + res.population
    if category == ConditionCategory.PRODUCTION:
        return stats.total_production // max(1, state.turn)
    if category == ConditionCategory.DIVERSITY:
        return len({card.type for card in placed_cards(state)})
    if category == ConditionCategory.BUILDINGS:
        return stats.buildings_built
    raise ValueError(f"unknown condition category: {category}")


def condition_progress(state: GameState, system: VictorySystem) -> tuple[ConditionProgress, ...]:
    progress = []
    for condition in system.conditions:
        value = current_value(condition.category, state)
        progress.append(ConditionProgress(condition=condition, current=value, satisfied=value >= condition.target))
    return tuple(progress)


def evaluate_victory(state: GameState, system: VictorySystem) -> VictoryResult:
    progress = condition_progress(state, system)

    if system.mode == VictoryMode.INFINITE:
        return VictoryResult(
            mode=system.mode,
            satisfied=False,
            summary=f"Infinite mode: survived {state.turn} turns",
            progress=progress,
        )

    if system.mode in _COMPOSITE_MODES:
        major = sum(1 for p in progress if p.satisfied and p.condition.type == ConditionType.MAJOR)
        minor = sum(1 for p in progress if p.satisfied and p.condition.type == ConditionType.MINOR)
        satisfied = (
            bool(progress) and major >= system.required_major and minor >= system.required_minor
        )
        return VictoryResult(
            mode=system.mode,
            satisfied=satisfied,
            summary=(
                f"{system.mode.capitalize()}: {major}/{system.required_major} major, "
                f"{minor}/{system.required_minor} minor"
            ),
            progress=progress,
            major_met=major,
            minor_met=minor,
        )

    met = sum(1 for p in progress if p.satisfied)
    return VictoryResult(
        mode=system.mode,
        satisfied=bool(progress) and met == len(progress),
        summary=f"{system.mode.capitalize()}: {met}/{len(progress)} conditions met",
        progress=progress,
    )


def evaluate_defeat(
    state: GameState,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    victory_achieved: bool = False,
    mode: VictoryMode | None = None,
) -> DefeatResult:
    """First matching defeat condition, checked in a fixed order."""

    cfg = rules.defeat
    reputation = state.player_stats.reputation

    if state.resources.population <= 0:
        return DefeatResult(True, DefeatKind.POPULATION, "Population dropped to zero")
    if reputation < cfg.reputation_threshold:
        return DefeatResult(True, DefeatKind.REPUTATION, f"Reputation fell to {reputation}")
    if (
        cfg.turn_cap
        and not victory_achieved
        and mode != VictoryMode.INFINITE
        and state.turn > cfg.turn_cap
    ):
        return DefeatResult(True, DefeatKind.TURNS, f"Turn limit of {cfg.turn_cap} exceeded")
    if not state.deck and reputation <= cfg.deck_reputation_threshold:
        return DefeatResult(True, DefeatKind.DECK, "Deck exhausted without reputation")
    return DefeatResult(False)


# --- Preset configurations --------------------------------------------------------


def _condition(
    cid: str,
    name: str,
    category: ConditionCategory,
    target: int,
    ctype: ConditionType | None = None,
) -> VictoryCondition:
    return VictoryCondition(id=cid, name=name, category=category, target=target, type=ctype)


_SIMPLE_PRESETS: dict[VictoryMode, tuple[str, str, ConditionCategory, int]] = {
    VictoryMode.LANDMARKS: ("landmarks", "Construir marcos", ConditionCategory.LANDMARKS, 3),
    VictoryMode.REPUTATION: ("reputation", "Alcançar reputação", ConditionCategory.REPUTATION, 10),
    VictoryMode.ELIMINATION: ("survival", "Sobreviver", ConditionCategory.SURVIVAL, 20),
    VictoryMode.SURVIVAL: ("survival", "Sobreviver", ConditionCategory.SURVIVAL, 20),
    VictoryMode.RESOURCES: ("resources", "Acumular recursos", ConditionCategory.RESOURCES, 50),
    VictoryMode.PRODUCTION: ("production", "Produção por turno", ConditionCategory.PRODUCTION, 10),
}


def preset_victory_system(mode: VictoryMode, target: int | None = None) -> VictorySystem:
    """Reference configuration for ``mode``; ``target`` overrides simple goals."""

    if mode == VictoryMode.INFINITE:
        return VictorySystem(mode=mode)

    if mode == VictoryMode.CLASSIC:
        major, minor = ConditionType.MAJOR, ConditionType.MINOR
        return VictorySystem(
            mode=mode,
            conditions=(
                _condition("landmarks", "Marcos históricos", ConditionCategory.LANDMARKS, 3, major),
                _condition("reputation", "Reputação", ConditionCategory.REPUTATION, 10, major),
                _condition("production", "Produção por turno", ConditionCategory.PRODUCTION, 5, major),
                _condition("coins", "Tesouro", ConditionCategory.COINS, 30, minor),
                _condition("diversity", "Diversidade", ConditionCategory.DIVERSITY, 3, minor),
                _condition("buildings", "Construções", ConditionCategory.BUILDINGS, 8, minor),
            ),
            required_major=2,
            required_minor=1,
        )

    if mode == VictoryMode.COMPLEX:
        major, minor = ConditionType.MAJOR, ConditionType.MINOR
        return VictorySystem(
            mode=mode,
            conditions=(
                _condition("landmarks", "Marcos históricos", ConditionCategory.LANDMARKS, 2, major),
                _condition("reputation", "Reputação", ConditionCategory.REPUTATION, 15, major),
                _condition("survival", "Sobrevivência", ConditionCategory.SURVIVAL, 30, major),
                _condition("resources", "Recursos", ConditionCategory.RESOURCES, 60, minor),
                _condition("production", "Produção por turno", ConditionCategory.PRODUCTION, 8, minor),
                _condition("diversity", "Diversidade", ConditionCategory.DIVERSITY, 4, minor),
                _condition("buildings", "Construções", ConditionCategory.BUILDINGS, 10, minor),
            ),
            required_major=2,
            required_minor=2,
        )

    cid, name, category, default_target = _SIMPLE_PRESETS[mode]
    return VictorySystem(
        mode=mode,
        conditions=(_condition(cid, name, category, default_target if target is None else target),),
    )
