"""Utility helper functions."""
from typing import Dict, Any, List, Optional

from ..core.board_state import BoardState
from ..core.pattern_detector import BoardPatterns
from ..models.board import Powerup, PowerupEffect, PowerupLocation, Tile


def validate_board_snapshot(tiles: List[Dict[str, Any]]) -> tuple[bool, Optional[str]]:
    """
    Validate a tile snapshot structure.

    Args:
        tiles: List of tile dictionaries.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(tiles, list):
        return False, "Snapshot must be a list of tiles"

    seen_indexes = set()
    seen_positions = set()
    ranks = []

    for i, tile_data in enumerate(tiles):
        if not isinstance(tile_data, dict):
            return False, f"Tile {i} must be an object"

        for field in ("index", "color"):
            if field not in tile_data:
                return False, f"Tile {i} missing '{field}' field"

        index = tile_data["index"]
        if index in seen_indexes:
            return False, f"Duplicate tile index {index}"
        seen_indexes.add(index)

        position = tile_data.get("position")
        removed_index = tile_data.get("removed_index")

        if position is None and removed_index is None:
            return False, f"Tile {index} has neither a position nor a removed_index"
        if position is not None and removed_index is not None:
            return False, f"Tile {index} has both a position and a removed_index"

        if position is not None:
            if not isinstance(position, (list, tuple)) or len(position) != 2:
                return False, f"Invalid position for tile {index}: {position!r}"
            try:
                key = (int(position[0]), int(position[1]))
            except (TypeError, ValueError):
                return False, f"Invalid position coordinates for tile {index}: {position!r}"
            if key in seen_positions:
                return False, f"Position {key} is occupied more than once"
            seen_positions.add(key)
        else:
            ranks.append(removed_index)

    if sorted(ranks) != list(range(len(ranks))):
        return False, "Removed pile ranks must be exactly 0..n-1"

    return True, None


def tile_from_dict(tile_data: Dict[str, Any]) -> Tile:
    """Build a Tile from its dictionary form."""
    position = tile_data.get("position")
    powerup = None
    powerup_data = tile_data.get("powerup")
    if powerup_data:
        location = powerup_data.get("location") or {}
        powerup = Powerup(
            effect=PowerupEffect(powerup_data.get("effect", "unknown")),
            level=int(powerup_data.get("level", 0)),
            location=PowerupLocation(**location),
        )

    return Tile(
        index=int(tile_data["index"]),
        color=int(tile_data["color"]),
        position=(int(position[0]), int(position[1])) if position is not None else None,
        removed_index=tile_data.get("removed_index"),
        queued_for_collection=bool(tile_data.get("queued_for_collection", False)),
        powerup=powerup,
    )


def board_from_snapshot(tiles: List[Dict[str, Any]]) -> BoardState:
    """
    Build a BoardState from a tile snapshot.

    Raises:
        ValueError: If the snapshot is malformed.
    """
    is_valid, error = validate_board_snapshot(tiles)
    if not is_valid:
        raise ValueError(error)
    return BoardState(tile_from_dict(t) for t in tiles)


def format_board_for_display(board: BoardState, patterns: Optional[BoardPatterns] = None) -> str:
    """
    Format a board for human-readable display.

    Each cell shows the tile color followed by a marker: '*' core, 'o' loop,
    '-' line member, '.' no pattern. Empty cells inside the bounding box are
    shown as '  '. Even columns sit half a row lower on screen.

    Args:
        board: Board to format.
        patterns: Optional classification to mark patterns.

    Returns:
        Formatted string representation.
    """
    tiles = board.on_board_tiles()
    lines = [f"Board with {len(tiles)} tiles ({board.removed_count} removed):"]
    lines.append("-" * 40)
    if not tiles:
        return "\n".join(lines)

    xs = [t.position[0] for t in tiles]
    ys = [t.position[1] for t in tiles]

    for y in range(min(ys), max(ys) + 1):
        row = []
        for x in range(min(xs), max(xs) + 1):
            tile = board.tile_at((x, y))
            if tile is None:
                row.append("  ")
                continue
            marker = "."
            record = patterns.get(tile.index) if patterns else None
            if record is not None:
                if record.core:
                    marker = "*"
                elif record.loop:
                    marker = "o"
                elif record.lines:
                    marker = "-"
            row.append(f"{tile.color}{marker}")
        lines.append(" ".join(row).rstrip())

    return "\n".join(lines)


def extract_board_statistics(board: BoardState, patterns: BoardPatterns) -> Dict[str, Any]:
    """
    Extract summary statistics from a board and its classification.

    Args:
        board: Board to summarize.
        patterns: Classification of the board.

    Returns:
        Dictionary with board statistics.
    """
    stats = {
        "on_board": board.on_board_count,
        "removed": board.removed_count,
        "colors": {},
        "lines": len(patterns.lines),
        "core_groups": len(patterns.core_groups),
        "core_tiles": sum(len(members) for members in patterns.core_groups.values()),
        "loop_tiles": len(patterns.loop_indexes()),
        "edge_tiles": len(patterns.edge_indexes()),
        "queued": 0,
        "powerups": 0,
    }

    for tile in board.on_board_tiles():
        color_key = str(tile.color)
        stats["colors"][color_key] = stats["colors"].get(color_key, 0) + 1
        if tile.queued_for_collection:
            stats["queued"] += 1
        if tile.powerup is not None:
            stats["powerups"] += 1

    return stats
