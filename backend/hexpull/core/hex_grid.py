"""Offset hex-grid adjacency.

Columns are staggered: even columns sit half a row lower than odd ones, so the
row offset of a diagonal neighbor depends on the parity of the column.

Directions are numbered clockwise starting at the top:
    1 = up, 2 = upper-right, 3 = lower-right,
    4 = down, 5 = lower-left, 6 = upper-left
"""
from typing import List, Tuple

from ..models.board import Position
from .errors import InvalidDirectionError

DIRECTIONS: Tuple[int, ...] = (1, 2, 3, 4, 5, 6)

# One direction per physical axis; the other three are their opposites
LINE_AXES: Tuple[int, ...] = (1, 2, 3)


def validate_direction(direction: int) -> int:
    """Return the direction unchanged or raise InvalidDirectionError."""
    if isinstance(direction, bool) or not isinstance(direction, int) or direction not in DIRECTIONS:
        raise InvalidDirectionError(direction)
    return direction


def neighbor(position: Position, direction: int) -> Position:
    """
    Get the position adjacent to `position` in `direction`.

    Args:
        position: (column, row) of the source cell.
        direction: Direction number 1-6.

    Returns:
        (column, row) of the neighboring cell.

    Raises:
        InvalidDirectionError: If direction is not 1-6.
    """
    validate_direction(direction)
    x, y = position
    even_column = x % 2 == 0

    if direction == 1:
        return (x, y - 1)
    elif direction == 2:
        return (x + 1, y if even_column else y - 1)
    elif direction == 3:
        return (x + 1, y + 1 if even_column else y)
    elif direction == 4:
        return (x, y + 1)
    elif direction == 5:
        return (x - 1, y + 1 if even_column else y)
    else:
        return (x - 1, y if even_column else y - 1)


def opposite(direction: int) -> int:
    """Get the direction pointing the other way along the same axis."""
    validate_direction(direction)
    return ((direction + 2) % 6) + 1


def rotate_clockwise(direction: int) -> int:
    validate_direction(direction)
    return (direction % 6) + 1


def rotate_counterclockwise(direction: int) -> int:
    validate_direction(direction)
    return ((direction - 2 + 6) % 6) + 1


def neighbors(position: Position) -> List[Tuple[int, Position]]:
    """Get (direction, position) pairs for all six neighbors."""
    return [(direction, neighbor(position, direction)) for direction in DIRECTIONS]
