"""Collection resolver: turns detected lines into a single powerup tile."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from ..models.board import Powerup, PowerupEffect, TilePatterns
from .board_state import BoardBatch
from .pattern_detector import BoardPatterns

logger = logging.getLogger(__name__)

# One line of five tiles is a level 1 powerup
LEVEL_BASELINE = 5


def effect_for_color(color: int) -> PowerupEffect:
    """Get the powerup effect granted by a line of the given color."""
    return PowerupEffect.from_color(color)


def powerup_level(record: TilePatterns) -> int:
    """Longest line length plus number of lines, normalized so one 5-line is level 1."""
    if not record.lines:
        raise ValueError(f"Tile {record.index} is not part of any line")
    return max(line.length for line in record.lines) + len(record.lines) - LEVEL_BASELINE


@dataclass
class CollectionResult:
    """Outcome of collecting the lines through one tile."""
    tile_index: int
    line_ids: List[int] = field(default_factory=list)
    queued: List[int] = field(default_factory=list)
    powerup: Optional[Powerup] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "tile_index": self.tile_index,
            "line_ids": self.line_ids,
            "queued": self.queued,
            "powerup": self.powerup.to_dict() if self.powerup else None,
        }


class CollectionResolver:
    """Queues line tiles for collection and places a powerup on the selected tile."""

    def collect(
        self,
        batch: BoardBatch,
        patterns: BoardPatterns,
        tile_index: int,
    ) -> Optional[CollectionResult]:
        """
        Collect every line passing through a tile.

        Args:
            batch: Staged board batch to apply changes to.
            patterns: Classification of the board the batch was opened on.
            tile_index: Index of the selected tile.

        Returns:
            CollectionResult, or None when there is nothing to collect.
        """
        if batch.position_of(tile_index) is None:
            logger.debug("Tile %d is not on the board; nothing to collect", tile_index)
            return None

        record = patterns.get(tile_index)
        if record is None or not record.has_pattern:
            logger.debug("No pattern detected on tile %d", tile_index)
            return None

        if not record.lines:
            # Loops and cores are detected but carry no collection effect
            logger.debug("Tile %d is a loop or core without lines; nothing to collect", tile_index)
            return None

        line_ids = sorted({line.line_id for line in record.lines})
        members = patterns.line_members(line_ids)
        for index in members:
            batch.set_queued(index, True)

        powerup = Powerup(effect=effect_for_color(batch.color_of(tile_index)), level=powerup_level(record))
        # The selected tile becomes the powerup carrier instead of being collected
        batch.set_queued(tile_index, False)
        batch.set_powerup(tile_index, powerup)

        queued = [index for index in members if index != tile_index]
        logger.debug(
            "Collected lines %s through tile %d: %s level %d, %d tiles queued",
            line_ids, tile_index, powerup.effect.value, powerup.level, len(queued),
        )
        return CollectionResult(tile_index=tile_index, line_ids=line_ids, queued=queued, powerup=powerup)
