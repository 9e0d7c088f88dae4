"""Exceptions raised by the board engines."""


class HexBoardError(Exception):
    """Base class for board engine errors."""


class InvalidDirectionError(HexBoardError, ValueError):
    """Raised when a direction outside 1..6 reaches the adjacency model."""

    def __init__(self, direction):
        super().__init__(f"Invalid direction {direction!r}. Must be one of 1-6")
        self.direction = direction


class InconsistentBoardError(HexBoardError, RuntimeError):
    """Raised when the board violates its placement or pile invariants."""
