"""Shared fixtures for board engine tests."""
from typing import Dict, List, Optional

import pytest

from hexpull.core.board_state import BoardState
from hexpull.core.hex_grid import neighbors
from hexpull.models.board import Position, Tile


def _build_board(colors: Dict[Position, int]) -> BoardState:
    return BoardState(
        Tile(index=i, color=color, position=position)
        for i, (position, color) in enumerate(colors.items())
    )


def _rectangle(columns: int, rows: int, overrides: Optional[Dict[Position, int]] = None) -> Dict[Position, int]:
    colors = {}
    for y in range(rows):
        for x in range(columns):
            colors[(x, y)] = 10 + y * columns + x
    colors.update(overrides or {})
    return colors


def _flower(center: Position, center_color: int, ring_color: int) -> Dict[Position, int]:
    colors = {center: center_color}
    for _, position in neighbors(center):
        colors[position] = ring_color
    return colors


@pytest.fixture
def board_factory():
    """Build a board from a position -> color mapping; indexes follow insertion order."""
    return _build_board


@pytest.fixture
def rectangle():
    """Build a rectangle mapping where every background tile has its own color (10 + index)."""
    return _rectangle


@pytest.fixture
def flower():
    """Build a mapping of a center tile followed by its six neighbors."""
    return _flower


@pytest.fixture
def flower_board():
    """7x7 board with a color 1 tile at (3, 3) ringed by color 0."""
    return _build_board(_rectangle(7, 7, _flower((3, 3), 1, 0)))


@pytest.fixture
def crossing_positions() -> List[Position]:
    """A vertical and a diagonal run of five that share (2, 3)."""
    vertical = [(2, y) for y in range(1, 6)]
    diagonal = [(0, 4), (1, 4), (3, 3), (4, 2)]
    return vertical + diagonal


@pytest.fixture
def crossing_board(crossing_positions):
    """5x7 board with color 0 lines crossing at (2, 3)."""
    return _build_board(_rectangle(5, 7, {p: 0 for p in crossing_positions}))
