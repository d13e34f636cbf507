from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .board import Board, SelectedTile, base_type, is_selected_code
from .config import CLEARED, DEFAULT_RULES, SELECTED_OFFSET, WILDCARD, RulesConfig


class MovesLeft(str, Enum):
    YES = "yes"
    NO = "no"
    CLEARED = "cleared"


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of a click that was not ignored."""
    board: Board
    selection: Tuple[SelectedTile, ...]
    pair: Optional[Tuple[SelectedTile, SelectedTile]] = None  # set when a pair was evaluated
    matched: bool = False


def is_selectable(board: Board, layer: int, row: int, column: int) -> bool:
    """
    A tile is free when nothing sits on top of it and at least one of its
    left/right neighbours is empty or cleared. Neighbours along the row axis
    are not considered.
    """
    top = board.depth - 1
    last_column = len(board.layout[layer][row]) - 1
    vertically_free = layer == top or board.at(layer + 1, row, column) <= 0
    horizontally_free = (
        column == 0
        or column == last_column
        or board.at(layer, row, column - 1) <= 0
        or board.at(layer, row, column + 1) <= 0
    )
    return vertically_free and horizontally_free


def tiles_match(a: int, b: int) -> bool:
    """Two tile types match when equal or when either one is the wildcard."""
    return a == b or a == WILDCARD or b == WILDCARD


def points_for_match(elapsed_ms: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Deducts a point for every full decay unit since the last match, never below the minimum."""
    decay = max(0, int(elapsed_ms)) // rules.decay_unit_ms
    return max(rules.min_points, rules.base_points - decay)


def evaluate_pair(board: Board, a: SelectedTile, b: SelectedTile) -> Tuple[Board, bool]:
    """Clears a matching pair, or drops the highlight from both tiles of a mismatch."""
    if tiles_match(a.type, b.type):
        return board.with_cells({a.cell: CLEARED, b.cell: CLEARED}), True
    return board.with_cells({
        a.cell: board.at(*a.cell) - SELECTED_OFFSET,
        b.cell: board.at(*b.cell) - SELECTED_OFFSET,
    }), False


def toggle_select(
    board: Board,
    selection: Tuple[SelectedTile, ...],
    layer: int,
    row: int,
    column: int,
) -> Optional[ToggleResult]:
    """
    Highlights or un-highlights the clicked tile.
    Returns None when the click is ignored (empty/cleared cell or a tile that is not free).
    Once two tiles are highlighted the pair is evaluated and the selection is emptied.
    """
    code = board.at(layer, row, column)
    if code <= 0 or not is_selectable(board, layer, row, column):
        return None

    if is_selected_code(code):
        new_board = board.with_cell(layer, row, column, code - SELECTED_OFFSET)
        new_selection = tuple(
            t for t in selection if t.cell != (layer, row, column)
        )
        return ToggleResult(board=new_board, selection=new_selection)

    new_board = board.with_cell(layer, row, column, code + SELECTED_OFFSET)
    new_selection = selection + (SelectedTile(layer, row, column, code),)
    if len(new_selection) < 2:
        return ToggleResult(board=new_board, selection=new_selection)

    a, b = new_selection[0], new_selection[1]
    new_board, matched = evaluate_pair(new_board, a, b)
    return ToggleResult(board=new_board, selection=tuple(), pair=(a, b), matched=matched)


def scan_moves(board: Board) -> MovesLeft:
    """
    Determines whether at least one move is left.
    A free wildcard always gives a move; otherwise two free tiles of one type are needed.
    """
    num_tiles = 0
    free_types: Counter = Counter()
    for l, r, c in board.cells():
        code = board.at(l, r, c)
        if code <= 0:
            continue
        num_tiles += 1
        if not is_selectable(board, l, r, c):
            continue
        tile_type = base_type(code)
        if tile_type == WILDCARD:
            return MovesLeft.YES
        free_types[tile_type] += 1

    if num_tiles == 0:
        return MovesLeft.CLEARED
    if any(count >= 2 for count in free_types.values()):
        return MovesLeft.YES
    return MovesLeft.NO
