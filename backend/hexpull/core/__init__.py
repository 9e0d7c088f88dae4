"""Core business logic package.

This package contains the board engines: hex adjacency, board state,
spiral displacement, pattern detection and collection.
"""
from .errors import HexBoardError, InvalidDirectionError, InconsistentBoardError
from .hex_grid import DIRECTIONS, LINE_AXES, neighbor, neighbors, opposite, validate_direction
from .board_state import BoardState, BoardBatch
from .spiral import SpiralDisplacer, SpiralResult, SpiralMove, next_direction
from .pattern_detector import PatternDetector, BoardPatterns, get_pattern_detector
from .collector import CollectionResolver, CollectionResult, effect_for_color, powerup_level
from .session import GameSession, SessionStore, ActionResult, get_session_store

__all__ = [
    "HexBoardError",
    "InvalidDirectionError",
    "InconsistentBoardError",
    "DIRECTIONS",
    "LINE_AXES",
    "neighbor",
    "neighbors",
    "opposite",
    "validate_direction",
    "BoardState",
    "BoardBatch",
    "SpiralDisplacer",
    "SpiralResult",
    "SpiralMove",
    "next_direction",
    "PatternDetector",
    "BoardPatterns",
    "get_pattern_detector",
    "CollectionResolver",
    "CollectionResult",
    "effect_for_color",
    "powerup_level",
    "GameSession",
    "SessionStore",
    "ActionResult",
    "get_session_store",
]
