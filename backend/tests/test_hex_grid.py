"""Tests for hex grid adjacency."""
import pytest

from hexpull.core.errors import InvalidDirectionError
from hexpull.core.hex_grid import (
    DIRECTIONS,
    LINE_AXES,
    neighbor,
    neighbors,
    opposite,
    rotate_clockwise,
    rotate_counterclockwise,
    validate_direction,
)


class TestNeighbor:
    """Test cases for neighbor()."""

    def test_even_column_offsets(self):
        """Even columns keep the row for upper diagonals."""
        assert neighbor((2, 5), 1) == (2, 4)
        assert neighbor((2, 5), 2) == (3, 5)
        assert neighbor((2, 5), 3) == (3, 6)
        assert neighbor((2, 5), 4) == (2, 6)
        assert neighbor((2, 5), 5) == (1, 6)
        assert neighbor((2, 5), 6) == (1, 5)

    def test_odd_column_offsets(self):
        """Odd columns keep the row for lower diagonals."""
        assert neighbor((3, 5), 1) == (3, 4)
        assert neighbor((3, 5), 2) == (4, 4)
        assert neighbor((3, 5), 3) == (4, 5)
        assert neighbor((3, 5), 4) == (3, 6)
        assert neighbor((3, 5), 5) == (2, 5)
        assert neighbor((3, 5), 6) == (2, 4)

    def test_grid_is_unbounded(self):
        """Negative coordinates are valid positions."""
        assert neighbor((0, 0), 6) == (-1, 0)
        assert neighbor((-1, -3), 2) == (0, -4)

    @pytest.mark.parametrize("direction", [0, 7, -1, 12])
    def test_invalid_direction_rejected(self, direction):
        with pytest.raises(InvalidDirectionError):
            neighbor((0, 0), direction)

    def test_invalid_direction_is_value_error(self):
        with pytest.raises(ValueError):
            neighbor((0, 0), "1")

    def test_bool_is_not_a_direction(self):
        with pytest.raises(InvalidDirectionError):
            validate_direction(True)

    def test_neighbors_returns_six_distinct_positions(self):
        result = neighbors((4, 4))
        assert [d for d, _ in result] == list(DIRECTIONS)
        assert len({p for _, p in result}) == 6
        assert (4, 4) not in {p for _, p in result}


class TestOpposite:
    """Test cases for opposite()."""

    def test_opposite_table(self):
        assert {d: opposite(d) for d in DIRECTIONS} == {1: 4, 2: 5, 3: 6, 4: 1, 5: 2, 6: 3}

    def test_line_axes_cover_every_axis(self):
        axes = set(LINE_AXES) | {opposite(d) for d in LINE_AXES}
        assert axes == set(DIRECTIONS)

    def test_round_trip_returns_to_start(self):
        """Stepping forward then back lands on the starting position."""
        for x in range(-4, 5):
            for y in range(-4, 5):
                for direction in DIRECTIONS:
                    step = neighbor((x, y), direction)
                    assert neighbor(step, opposite(direction)) == (x, y)

    def test_opposite_rejects_invalid(self):
        with pytest.raises(InvalidDirectionError):
            opposite(0)


class TestRotation:
    """Test cases for direction rotation."""

    def test_clockwise_wraps(self):
        assert [rotate_clockwise(d) for d in DIRECTIONS] == [2, 3, 4, 5, 6, 1]

    def test_counterclockwise_wraps(self):
        assert [rotate_counterclockwise(d) for d in DIRECTIONS] == [6, 1, 2, 3, 4, 5]
