"""Pattern detection engine.

Classifies every on-board tile from scratch:
- edge: at least one of the six neighboring positions is empty
- lines: runs of same-colored tiles along one of the three axes
- core: tiles enclosed by a ring of one color, grouped into clusters
- loop: non-core tiles touching a core
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Any, Iterable, Optional, Set

from ..models.board import CoreState, LinePoint, Position, Tile, TilePatterns
from .board_state import BoardState
from .hex_grid import LINE_AXES, neighbor, neighbors, opposite

logger = logging.getLogger(__name__)


@dataclass
class BoardPatterns:
    """Classification records for every on-board tile."""
    patterns: Dict[int, TilePatterns] = field(default_factory=dict)
    # line_id -> tile indexes in step order
    lines: Dict[int, List[int]] = field(default_factory=dict)
    # group_id -> core tile indexes
    core_groups: Dict[int, List[int]] = field(default_factory=dict)

    def get(self, index: int) -> Optional[TilePatterns]:
        return self.patterns.get(index)

    def records(self) -> List[TilePatterns]:
        return [self.patterns[i] for i in sorted(self.patterns)]

    def line_members(self, line_ids: Iterable[int]) -> List[int]:
        """Get every tile index belonging to any of the given lines."""
        members: Set[int] = set()
        for line_id in line_ids:
            members.update(self.lines.get(line_id, []))
        return sorted(members)

    def loop_indexes(self) -> List[int]:
        return [p.index for p in self.records() if p.loop]

    def edge_indexes(self) -> List[int]:
        return [p.index for p in self.records() if p.edge]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "patterns": [p.to_dict() for p in self.records()],
            "lines": {str(k): v for k, v in self.lines.items()},
            "core_groups": {str(k): v for k, v in self.core_groups.items()},
        }


class PatternDetector:
    """Detects edges, lines, cores and loops on a board."""

    def __init__(self, min_line_length: int = 5):
        if min_line_length < 2:
            raise ValueError("Lines need at least 2 tiles")
        self.min_line_length = min_line_length

    def detect(self, board: BoardState) -> BoardPatterns:
        """
        Classify every on-board tile.

        Args:
            board: Board to classify. It is not modified.

        Returns:
            BoardPatterns with one record per on-board tile.
        """
        tiles = board.on_board_tiles()
        by_position = board.position_index()
        result = BoardPatterns(patterns={t.index: TilePatterns(index=t.index) for t in tiles})

        edge_tiles = self._detect_edges(tiles, by_position, result)
        self._detect_lines(tiles, by_position, result)
        core_states = self._detect_cores(tiles, by_position, edge_tiles, board.colors())
        self._group_cores(tiles, by_position, core_states, result)
        self._detect_loops(by_position, result)

        logger.debug(
            "Detected %d edge tiles, %d lines, %d core groups",
            len(edge_tiles), len(result.lines), len(result.core_groups),
        )
        return result

    def _detect_edges(
        self,
        tiles: List[Tile],
        by_position: Dict[Position, Tile],
        result: BoardPatterns,
    ) -> List[Tile]:
        edge_tiles = []
        for tile in tiles:
            if any(pos not in by_position for _, pos in neighbors(tile.position)):
                result.patterns[tile.index].edge = True
                edge_tiles.append(tile)
        return edge_tiles

    def _detect_lines(
        self,
        tiles: List[Tile],
        by_position: Dict[Position, Tile],
        result: BoardPatterns,
    ) -> None:
        next_line_id = 0
        for tile in tiles:
            for axis in LINE_AXES:
                # The tile before the run reports it instead
                before = by_position.get(neighbor(tile.position, opposite(axis)))
                if before is not None and before.color == tile.color:
                    continue

                run = [tile]
                position = tile.position
                while True:
                    position = neighbor(position, axis)
                    following = by_position.get(position)
                    if following is None or following.color != tile.color:
                        break
                    run.append(following)

                if len(run) < self.min_line_length:
                    continue

                line_id = next_line_id
                next_line_id += 1
                result.lines[line_id] = [member.index for member in run]
                for step, member in enumerate(run):
                    result.patterns[member.index].lines.append(
                        LinePoint(line_id=line_id, step=step, length=len(run))
                    )

    def _detect_cores(
        self,
        tiles: List[Tile],
        by_position: Dict[Position, Tile],
        edge_tiles: List[Tile],
        colors: List[int],
    ) -> Dict[int, CoreState]:
        """
        Find tiles enclosed by a ring of a single color.

        For each color, tiles of that color act as walls and a flood starts
        from every edge tile of another color. Non-wall tiles the flood never
        reaches are cores; a tile stays a core once any color encloses it.
        A color that holds every edge tile is the board's own border and
        encloses nothing.
        """
        states = {tile.index: CoreState.UNKNOWN for tile in tiles}

        for color in colors:
            queue = deque(t for t in edge_tiles if t.color != color)
            if not queue:
                logger.debug("Color %d covers the whole border; skipping core round", color)
                continue

            scratch = {tile.index: CoreState.UNKNOWN for tile in tiles}
            for start in queue:
                scratch[start.index] = CoreState.NOT_CORE

            while queue:
                current = queue.popleft()
                for _, position in neighbors(current.position):
                    reached = by_position.get(position)
                    if reached is None or reached.color == color:
                        continue
                    if scratch[reached.index] == CoreState.NOT_CORE:
                        continue
                    scratch[reached.index] = CoreState.NOT_CORE
                    queue.append(reached)

            for tile in tiles:
                if tile.color != color and scratch[tile.index] == CoreState.UNKNOWN:
                    states[tile.index] = CoreState.CORE

        for index, state in states.items():
            if state != CoreState.CORE:
                states[index] = CoreState.NOT_CORE
        return states

    def _group_cores(
        self,
        tiles: List[Tile],
        by_position: Dict[Position, Tile],
        core_states: Dict[int, CoreState],
        result: BoardPatterns,
    ) -> None:
        next_group_id = 1
        for tile in tiles:
            if core_states[tile.index] != CoreState.CORE:
                continue
            if result.patterns[tile.index].core_group is not None:
                continue

            group_id = next_group_id
            next_group_id += 1
            members = []
            queue = deque([tile])
            result.patterns[tile.index].core_group = group_id
            while queue:
                current = queue.popleft()
                members.append(current.index)
                for _, position in neighbors(current.position):
                    adjacent = by_position.get(position)
                    if adjacent is None or core_states[adjacent.index] != CoreState.CORE:
                        continue
                    record = result.patterns[adjacent.index]
                    if record.core_group is not None:
                        continue
                    record.core_group = group_id
                    queue.append(adjacent)

            result.core_groups[group_id] = sorted(members)

    def _detect_loops(self, by_position: Dict[Position, Tile], result: BoardPatterns) -> None:
        by_index = {tile.index: tile for tile in by_position.values()}
        for group_id, members in result.core_groups.items():
            for index in members:
                for _, position in neighbors(by_index[index].position):
                    adjacent = by_position.get(position)
                    if adjacent is None:
                        continue
                    record = result.patterns.get(adjacent.index)
                    if record is None or record.core:
                        continue
                    record.loop = True
                    record.loop_groups.add(group_id)


# Singleton instance
_detector = None


def get_pattern_detector() -> PatternDetector:
    """Get or create pattern detector singleton instance."""
    global _detector
    if _detector is None:
        _detector = PatternDetector()
    return _detector
