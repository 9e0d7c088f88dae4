"""Data models package.

This package contains board data models and API schemas.
"""
from .board import (
    Position,
    RotationMode,
    TapAction,
    PowerupEffect,
    CoreState,
    PowerupLocation,
    Powerup,
    Tile,
    LinePoint,
    TilePatterns,
    POWERUP_EFFECTS_BY_COLOR,
    DIRECTION_LABELS,
)
from .schemas import (
    TileItem,
    TilePatternsItem,
    NewBoardRequest,
    BoardResponse,
    TapRequest,
    PullRequest,
    CollectRequest,
    ClearRequest,
    BoardStatsResponse,
    DetectRequest,
    DetectResponse,
    ErrorResponse,
)

__all__ = [
    # Board models
    "Position",
    "RotationMode",
    "TapAction",
    "PowerupEffect",
    "CoreState",
    "PowerupLocation",
    "Powerup",
    "Tile",
    "LinePoint",
    "TilePatterns",
    "POWERUP_EFFECTS_BY_COLOR",
    "DIRECTION_LABELS",
    # API schemas
    "TileItem",
    "TilePatternsItem",
    "NewBoardRequest",
    "BoardResponse",
    "TapRequest",
    "PullRequest",
    "CollectRequest",
    "ClearRequest",
    "BoardStatsResponse",
    "DetectRequest",
    "DetectResponse",
    "ErrorResponse",
]
