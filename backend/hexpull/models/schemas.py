"""Pydantic schemas for API request/response validation."""
from pydantic import BaseModel, Field
from typing import Dict, List, Any, Optional, Tuple

from .board import DIRECTION_LABELS, RotationMode, TapAction

# "1 = top, 2 = upper right, ..." for direction field docs
DIRECTION_HELP = ", ".join(f"{d} = {label}" for d, label in DIRECTION_LABELS.items())


class PowerupLocationItem(BaseModel):
    """Slot location of a powerup."""
    is_on_board: bool = Field(default=False, description="Whether the powerup rests on the board")
    consumable_index: Optional[int] = Field(default=None, description="Consumable slot index")
    lasting_index: Optional[int] = Field(default=None, description="Lasting slot index")
    permanent_index: Optional[int] = Field(default=None, description="Permanent slot index")


class PowerupItem(BaseModel):
    """Powerup attached to a tile."""
    effect: str = Field(..., description="Effect (bomb/cut/turns/rotate/swap/clear/unknown)")
    level: int = Field(..., description="Powerup level (1 = one line of five)")
    location: PowerupLocationItem = Field(default_factory=PowerupLocationItem)


class TileItem(BaseModel):
    """A tile on the board or in the removed pile."""
    index: int = Field(..., ge=0, description="Stable tile identity")
    color: int = Field(..., ge=0, description="Palette color")
    position: Optional[Tuple[int, int]] = Field(default=None, description="(column, row) when on the board")
    removed_index: Optional[int] = Field(default=None, ge=0, description="Pile rank when removed")
    queued_for_collection: bool = Field(default=False, description="Queued for collection")
    powerup: Optional[PowerupItem] = Field(default=None, description="Attached powerup")


class LinePointItem(BaseModel):
    """Membership of a tile in a detected line."""
    line_id: int = Field(..., description="Line identifier")
    step: int = Field(..., ge=0, description="0-based step along the line")
    length: int = Field(..., description="Total line length")


class TilePatternsItem(BaseModel):
    """Classification record for one on-board tile."""
    index: int = Field(..., description="Tile index")
    edge: bool = Field(..., description="At least one neighboring position is empty")
    lines: List[LinePointItem] = Field(default=[], description="Line memberships")
    core: bool = Field(..., description="Tile is enclosed by a single-color ring")
    core_group: Optional[int] = Field(default=None, description="Core group id")
    loop: bool = Field(..., description="Tile borders a core")


class NewBoardRequest(BaseModel):
    """Request schema for creating a board."""
    columns: Optional[int] = Field(default=None, ge=1, le=64, description="Board columns")
    rows: Optional[int] = Field(default=None, ge=1, le=64, description="Board rows")
    palette_size: Optional[int] = Field(default=None, ge=1, le=12, description="Number of colors")
    seed: Optional[int] = Field(default=None, description="Random seed for colors")


class BoardResponse(BaseModel):
    """Full board state with classification records."""
    board_id: str = Field(..., description="Board identifier")
    tiles: List[TileItem] = Field(..., description="On-board tiles by index")
    removed: List[TileItem] = Field(default=[], description="Removed pile in rank order")
    patterns: List[TilePatternsItem] = Field(..., description="One record per on-board tile")
    changed: bool = Field(default=False, description="Whether the last action changed the board")
    result: Optional[Dict[str, Any]] = Field(default=None, description="Details of the last action")


class TapRequest(BaseModel):
    """Request schema for a tap on a tile."""
    tile_index: int = Field(..., ge=0, description="Tapped tile index")
    action: Optional[TapAction] = Field(default=None, description="Tap action (pull/line/ring/select/collect)")
    direction: Optional[int] = Field(default=None, ge=1, le=6, description=f"Initial pull direction ({DIRECTION_HELP})")
    rotation: Optional[RotationMode] = Field(default=None, description="Rotation mode")


class PullRequest(BaseModel):
    """Request schema for removing a tile."""
    tile_index: int = Field(..., ge=0, description="Tile index to remove")
    direction: Optional[int] = Field(default=None, ge=1, le=6, description=f"Initial pull direction ({DIRECTION_HELP})")
    rotation: Optional[RotationMode] = Field(default=None, description="Rotation mode")


class CollectRequest(BaseModel):
    """Request schema for collecting the patterns through a tile."""
    tile_index: int = Field(..., ge=0, description="Selected tile index")


class ClearRequest(BaseModel):
    """Request schema for clearing queued tiles."""
    direction: Optional[int] = Field(default=None, ge=1, le=6, description=f"Pull direction ({DIRECTION_HELP})")


class BoardStatsResponse(BaseModel):
    """Summary statistics for a board."""
    board_id: str = Field(..., description="Board identifier")
    on_board: int = Field(..., description="Tiles on the board")
    removed: int = Field(..., description="Tiles in the removed pile")
    colors: Dict[str, int] = Field(default={}, description="On-board tile count per color")
    lines: int = Field(..., description="Detected lines")
    core_groups: int = Field(..., description="Detected core groups")
    core_tiles: int = Field(..., description="Core tiles")
    loop_tiles: int = Field(..., description="Loop tiles")
    edge_tiles: int = Field(..., description="Edge tiles")
    queued: int = Field(..., description="Tiles queued for collection")
    powerups: int = Field(..., description="Tiles carrying a powerup")


class DetectRequest(BaseModel):
    """Request schema for stateless pattern detection."""
    tiles: List[TileItem] = Field(..., description="Tile snapshot")
    min_line_length: int = Field(default=5, ge=2, le=20, description="Minimum line length")


class DetectResponse(BaseModel):
    """Response schema for stateless pattern detection."""
    patterns: List[TilePatternsItem] = Field(..., description="One record per on-board tile")
    lines: Dict[str, List[int]] = Field(default={}, description="Line id -> member indexes")
    core_groups: Dict[str, List[int]] = Field(default={}, description="Group id -> core indexes")


class ErrorResponse(BaseModel):
    """Error response schema, the body FastAPI sends for an HTTPException."""
    detail: str = Field(..., description="Error message")
