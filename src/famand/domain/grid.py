"""Farm and city grid helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .enums import CardType, ErrorKind, GridKind
from .errors import IntentRejected
from .models import Card, Grid, GridCell

_GRID_CARD_TYPE = {GridKind.FARM: CardType.FARM, GridKind.CITY: CardType.CITY}

# Orthogonal neighbour offsets; diagonals never count as adjacent.
_NEIGHBOUR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def create_grid(kind: GridKind, rows: int, cols: int) -> Grid:
    if rows <= 0 or cols <= 0:
        raise ValueError(f"grid dimensions must be positive, got {rows}x{cols}")
    return Grid(
        kind=kind,
        cells=[[GridCell(grid=kind, row=r, col=c) for c in range(cols)] for r in range(rows)],
    )


def grid_shape(grid: Grid) -> tuple[int, int]:
    return len(grid.cells), len(grid.cells[0]) if grid.cells else 0


def in_bounds(grid: Grid, row: int, col: int) -> bool:
    rows, cols = grid_shape(grid)
    return 0 <= row < rows and 0 <= col < cols


def cell_at(grid: Grid, row: int, col: int) -> GridCell:
    if not in_bounds(grid, row, col):
        raise IntentRejected(
            ErrorKind.INVALID_PLACEMENT, f"({row}, {col}) is outside the {grid.kind} grid"
        )
    return grid.cells[row][col]


def iter_cells(grid: Grid) -> Iterator[GridCell]:
    """Row-major walk over every cell."""

    for row in grid.cells:
        yield from row


def orthogonal_neighbors(grid: Grid, row: int, col: int) -> list[GridCell]:
    """Cells sharing an edge with ``(row, col)``, in N, S, W, E order."""

    return [
        grid.cells[row + dr][col + dc]
        for dr, dc in _NEIGHBOUR_OFFSETS
        if in_bounds(grid, row + dr, col + dc)
    ]


def occupied_cells(*grids: Grid) -> list[GridCell]:
    return [cell for grid in grids for cell in iter_cells(grid) if cell.card is not None]


def count_cards(grids: tuple[Grid, ...] | list[Grid], predicate: Callable[[Card], bool]) -> int:
    return sum(1 for cell in occupied_cells(*grids) if predicate(cell.card))


def grid_accepts(grid: Grid, card: Card) -> bool:
    return _GRID_CARD_TYPE[grid.kind] == card.type


def check_placement(grid: Grid, row: int, col: int, card: Card) -> GridCell:
    """Validate a placement without changing the grid."""

    if not grid_accepts(grid, card):
        raise IntentRejected(
            ErrorKind.INVALID_CELL_TYPE,
            f"{card.type} card '{card.id}' cannot be placed on the {grid.kind} grid",
        )
    cell = cell_at(grid, row, col)
    if cell.card is not None:
        raise IntentRejected(
            ErrorKind.CELL_OCCUPIED, f"{grid.kind}[{row}][{col}] already holds '{cell.card.id}'"
        )
    return cell


def place_card(grid: Grid, row: int, col: int, card: Card) -> GridCell:
    cell = check_placement(grid, row, col, card)
    cell.card = card
    return cell
