"""UI selection kept apart from the game state.

Selecting a card or a cell is a presentation concern: it never changes the
game, so it lives in its own value object that hosts may keep or discard.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .models import CardID, CellRef


@dataclass(frozen=True, slots=True)
class Selection:
    card_id: CardID | None = None
    cell: CellRef | None = None


EMPTY_SELECTION = Selection()


def select_card(selection: Selection, card_id: CardID | None) -> Selection:
    """Select ``card_id``; selecting the current card again clears it."""

    if card_id is not None and card_id == selection.card_id:
        return replace(selection, card_id=None)
    return replace(selection, card_id=card_id)


def select_cell(selection: Selection, cell: CellRef | None) -> Selection:
    if cell is not None and cell == selection.cell:
        return replace(selection, cell=None)
    return replace(selection, cell=cell)


def clear_selection() -> Selection:
    return EMPTY_SELECTION
