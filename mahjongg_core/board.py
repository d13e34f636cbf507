from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import CLEARED, EMPTY, MIN_TILE_TYPE, SELECTED_OFFSET, WILDCARD

Cell = Tuple[int, int, int]  # (layer, row, column)
Layout = Tuple[Tuple[Tuple[int, ...], ...], ...]


def is_valid_code(code: int) -> bool:
    """True for 0, -1, a tile type in [1, 101] or a selected tile type."""
    if code == EMPTY or code == CLEARED:
        return True
    if code > SELECTED_OFFSET:
        code -= SELECTED_OFFSET
    return MIN_TILE_TYPE <= code <= WILDCARD


def is_selected_code(code: int) -> bool:
    return code > SELECTED_OFFSET


def base_type(code: int) -> int:
    """Strips the selection offset from a tile code."""
    return code - SELECTED_OFFSET if code > SELECTED_OFFSET else code


@dataclass(frozen=True)
class SelectedTile:
    """A tile recorded at the moment it was highlighted."""
    layer: int
    row: int
    column: int
    type: int

    @property
    def cell(self) -> Cell:
        return (self.layer, self.row, self.column)


@dataclass(frozen=True)
class Board:
    """Immutable layered tile grid. Updates return a new Board; snapshots are never modified."""
    layout: Layout = ()

    @classmethod
    def from_lists(
        cls,
        layout: Any,
        layers: Optional[int] = None,
        columns: Optional[int] = None,
    ) -> 'Board':
        """Builds a board from nested lists, checking shape and tile codes."""
        if not isinstance(layout, (list, tuple)):
            raise ValueError("layout must be a list of layers")
        if layers is not None and len(layout) != layers:
            raise ValueError(f"expected {layers} layers, got {len(layout)}")
        out: List[Tuple[Tuple[int, ...], ...]] = []
        height: Optional[int] = None
        for l, layer in enumerate(layout):
            if not isinstance(layer, (list, tuple)):
                raise ValueError(f"layer {l} must be a list of rows")
            if height is None:
                height = len(layer)
            elif len(layer) != height:
                raise ValueError(f"layer {l} has {len(layer)} rows, expected {height}")
            rows: List[Tuple[int, ...]] = []
            for r, row in enumerate(layer):
                if not isinstance(row, (list, tuple)):
                    raise ValueError(f"row {l},{r} must be a list of tile codes")
                if columns is not None and len(row) != columns:
                    raise ValueError(f"row {l},{r} has {len(row)} columns, expected {columns}")
                cells: List[int] = []
                for c, code in enumerate(row):
                    # bool is an int subclass; reject it along with floats and strings
                    if isinstance(code, bool) or not isinstance(code, int):
                        raise ValueError(f"cell {l},{r},{c} is not an integer: {code!r}")
                    if not is_valid_code(code):
                        raise ValueError(f"cell {l},{r},{c} has invalid tile code {code}")
                    cells.append(code)
                rows.append(tuple(cells))
            out.append(tuple(rows))
        return cls(layout=tuple(out))

    @property
    def depth(self) -> int:
        return len(self.layout)

    @property
    def height(self) -> int:
        return len(self.layout[0]) if self.layout else 0

    @property
    def width(self) -> int:
        if not self.layout or not self.layout[0]:
            return 0
        return len(self.layout[0][0])

    def at(self, layer: int, row: int, column: int) -> int:
        return self.layout[layer][row][column]

    def cells(self) -> Iterable[Cell]:
        """Iterates over every (layer, row, column) on the board."""
        for l, layer in enumerate(self.layout):
            for r, row in enumerate(layer):
                for c in range(len(row)):
                    yield (l, r, c)

    def with_cells(self, updates: Dict[Cell, int]) -> 'Board':
        """Returns a copy of the board with the given cells replaced."""
        if not updates:
            return self
        layers = [list(layer) for layer in self.layout]
        touched: Dict[Tuple[int, int], List[int]] = {}
        for (l, r, c), code in updates.items():
            row = touched.get((l, r))
            if row is None:
                row = list(layers[l][r])
                touched[(l, r)] = row
            row[c] = code
        for (l, r), row in touched.items():
            layers[l][r] = tuple(row)
        return Board(layout=tuple(tuple(layer) for layer in layers))

    def with_cell(self, layer: int, row: int, column: int, code: int) -> 'Board':
        return self.with_cells({(layer, row, column): code})

    def occupied_count(self) -> int:
        return sum(1 for l, r, c in self.cells() if self.at(l, r, c) > 0)

    def to_lists(self) -> List[List[List[int]]]:
        return [[list(row) for row in layer] for layer in self.layout]

    def pretty(self) -> str:
        """Generates a human-readable string of every layer, bottom first."""
        lines: List[str] = []
        for l, layer in enumerate(self.layout):
            lines.append(f"layer {l}:")
            for row in layer:
                cells: List[str] = []
                for code in row:
                    if code == EMPTY:
                        text = "."
                    elif code == CLEARED:
                        text = "x"
                    else:
                        t = base_type(code)
                        text = "W" if t == WILDCARD else str(t)
                        if is_selected_code(code):
                            text += "*"
                    cells.append(text.rjust(4))
                lines.append("".join(cells))
        return "\n".join(lines)
