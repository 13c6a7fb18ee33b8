"""JSON file store for Famand games.

Every game owns two documents in ``base_path``: the ``game_{id}.json``
snapshot of its :class:`~famand.domain.models.GameState` and the
``victory_{id}.json`` victory system it was created with. Both are written
with pydantic ``TypeAdapter`` dumps so the domain dataclasses need no
serialization code of their own.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import TypeAdapter

from famand.domain import models as dm

logger = logging.getLogger(__name__)

_SNAPSHOT_NAME = re.compile(r"^game_(\d+)\.json$")


class JsonGameRepository:
    """Game snapshots and their victory systems, one pair of files per game."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._games: TypeAdapter[dm.GameState] = TypeAdapter(dm.GameState)
        self._victories: TypeAdapter[dm.VictorySystem] = TypeAdapter(dm.VictorySystem)

    def _file(self, document: str, game_id: dm.GameID) -> Path:
        return self.base_path / f"{document}_{int(game_id)}.json"

    def save(self, state: dm.GameState) -> Path:
        """Write the game snapshot and return its path."""

        path = self._file("game", state.game_id)
        path.write_bytes(self._games.dump_json(state, indent=2))
        return path

    def load(self, game_id: dm.GameID) -> dm.GameState:
        """Read a snapshot; raises ``FileNotFoundError`` for unknown ids."""

        return self._games.validate_json(self._file("game", game_id).read_bytes())

    def save_victory(self, game_id: dm.GameID, victory: dm.VictorySystem) -> Path:
        path = self._file("victory", game_id)
        path.write_bytes(self._victories.dump_json(victory, indent=2))
        return path

    def load_victory(self, game_id: dm.GameID) -> dm.VictorySystem | None:
        """Return the stored victory system, or ``None`` if the game has none."""

        path = self._file("victory", game_id)
        if not path.exists():
            return None
        return self._victories.validate_json(path.read_bytes())

    def exists(self, game_id: dm.GameID) -> bool:
        return self._file("game", game_id).exists()

    def list_games(self) -> list[dm.GameID]:
        """Ids of every stored snapshot in ascending order."""

        ids = []
        for path in self.base_path.iterdir():
            match = _SNAPSHOT_NAME.match(path.name)
            if match is None:
                continue
            ids.append(dm.GameID(int(match.group(1))))
        return sorted(ids, key=int)

    def delete(self, game_id: dm.GameID) -> None:
        """Remove both documents of a game; missing files are ignored."""

        for document in ("game", "victory"):
            self._file(document, game_id).unlink(missing_ok=True)
        logger.debug("game %s removed from %s", int(game_id), self.base_path)
