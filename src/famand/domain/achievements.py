"""One-time achievements unlocked from player statistics."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .models import GameState, PlayerStats


@dataclass(frozen=True, slots=True)
class Achievement:
    name: str
    description: str
    unlocked: Callable[[PlayerStats], bool]


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("Primeira Construção", "Construa sua primeira carta", lambda s: s.buildings_built >= 1),
    Achievement("Arquiteto", "Construa 10 cartas", lambda s: s.buildings_built >= 10),
    Achievement("Produtor Experiente", "Produza 100 recursos", lambda s: s.total_production >= 100),
    Achievement("Guardião de Marcos", "Complete um marco histórico", lambda s: s.landmarks_completed >= 1),
    Achievement("Sobrevivente", "Sobreviva a 3 crises", lambda s: s.crisis_survived >= 3),
)


def unlock_achievements(state: GameState) -> list[str]:
    """Record newly earned achievements, in catalog order; returns their names."""

    stats = state.player_stats
    unlocked = [
        achievement.name
        for achievement in ACHIEVEMENTS
        if achievement.name not in stats.achievements and achievement.unlocked(stats)
    ]
    stats.achievements.extend(unlocked)
    return unlocked
