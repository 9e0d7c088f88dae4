"""Spiral displacement engine.

When a tile leaves the board, its neighbors are pulled inward one at a time
along a path that starts in the configured direction and, unless the mode is
straight, turns one step after every arm while the arm length grows by one
every second turn. The walk stops when it looks at an empty position; a new
tile is spawned in the hole the walk left behind, so the board stays packed
and its tile count is unchanged.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Tuple

from ..models.board import Position, RotationMode, TapAction
from .board_state import BoardBatch
from .hex_grid import neighbor, rotate_clockwise, rotate_counterclockwise, validate_direction

logger = logging.getLogger(__name__)


@dataclass
class SpiralMove:
    """One tile shifted one cell toward the hole."""
    tile_index: int
    source: Position
    target: Position

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tile_index": self.tile_index,
            "from": list(self.source),
            "to": list(self.target),
        }


@dataclass
class SpiralResult:
    """Outcome of a single removal and refill."""
    removed_index: int
    removed_rank: int
    origin: Position
    moves: List[SpiralMove] = field(default_factory=list)
    spawned_index: Optional[int] = None
    spawned_position: Optional[Position] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "removed_index": self.removed_index,
            "removed_rank": self.removed_rank,
            "origin": list(self.origin),
            "moves": [m.to_dict() for m in self.moves],
            "spawned_index": self.spawned_index,
            "spawned_position": list(self.spawned_position) if self.spawned_position else None,
        }


def next_direction(
    direction: int,
    initial_direction: int,
    rotation: RotationMode,
    action: TapAction = TapAction.PULL,
) -> int:
    """Direction of the next arm after a turn."""
    # Clearing a collected pattern always pulls straight
    if rotation == RotationMode.STRAIGHT or action == TapAction.COLLECT:
        return initial_direction
    if rotation == RotationMode.CLOCKWISE:
        return rotate_clockwise(direction)
    return rotate_counterclockwise(direction)


class SpiralDisplacer:
    """Removes tiles and refills the hole by spiral displacement."""

    def __init__(self, palette_size: int = 6, rng: Optional[random.Random] = None):
        if palette_size < 1:
            raise ValueError("Palette needs at least 1 color")
        self.palette_size = palette_size
        self.rng = rng or random.Random()

    def remove(
        self,
        batch: BoardBatch,
        tile_index: int,
        initial_direction: int = 1,
        rotation: RotationMode = RotationMode.CLOCKWISE,
        action: TapAction = TapAction.PULL,
    ) -> SpiralResult:
        """
        Move a tile to the removed pile and close the hole it leaves.

        Args:
            batch: Staged board batch to apply changes to.
            tile_index: Index of the on-board tile to remove.
            initial_direction: Direction 1-6 of the first arm.
            rotation: Turning mode of the walk.
            action: Action that triggered the removal.

        Returns:
            SpiralResult describing the moves and the spawned tile.
        """
        validate_direction(initial_direction)
        origin = batch.position_of(tile_index)
        rank = batch.remove(tile_index)
        logger.debug("Removing tile %d at %s with pile rank %d", tile_index, origin, rank)

        result = SpiralResult(removed_index=tile_index, removed_rank=rank, origin=origin)
        result.moves, result.spawned_index, result.spawned_position = self.walk(
            batch, origin, initial_direction, rotation, action
        )
        return result

    def walk(
        self,
        batch: BoardBatch,
        hole: Position,
        initial_direction: int,
        rotation: RotationMode,
        action: TapAction = TapAction.PULL,
    ) -> Tuple[List[SpiralMove], int, Position]:
        """Pull tiles into `hole` along the spiral until empty space is reached."""
        length = 1
        steps = 0
        direction = initial_direction
        grow = False
        current = hole
        moves: List[SpiralMove] = []

        while True:
            target = neighbor(current, direction)
            occupant = batch.index_at(target)
            if occupant is None:
                color = self.rng.randrange(self.palette_size)
                spawned = batch.spawn(current, color)
                logger.debug("Spawned tile %d (color %d) at %s", spawned, color, current)
                return moves, spawned, current

            batch.move(occupant, current)
            moves.append(SpiralMove(tile_index=occupant, source=target, target=current))
            current = target
            steps += 1

            if steps >= length:
                steps = 0
                if grow:
                    length += 1
                grow = not grow
                direction = next_direction(direction, initial_direction, rotation, action)
