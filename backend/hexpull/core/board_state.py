"""Authoritative board state with staged, atomically committed batches.

Every tile is either resting on the board at a unique position or sitting in
the removed pile with a unique rank. Mutations go through `BoardState.batch()`,
which stages changes on a private copy of the position index and commits them
together when the block exits, so a detector never sees a half-applied walk.
"""
import logging
import random
from contextlib import contextmanager
from typing import Dict, List, Iterable, Iterator, Optional

from ..models.board import Position, Powerup, Tile
from .errors import InconsistentBoardError

logger = logging.getLogger(__name__)


class BoardState:
    """Collection of tiles indexed by tile index and by board position."""

    def __init__(self, tiles: Iterable[Tile] = ()):
        self._tiles: Dict[int, Tile] = {}
        self._by_position: Dict[Position, int] = {}
        self._pile: List[int] = []

        removed: List[Tile] = []
        for tile in tiles:
            if tile.index in self._tiles:
                raise InconsistentBoardError(f"Duplicate tile index {tile.index}")
            if tile.on_board and tile.removed_index is not None:
                raise InconsistentBoardError(
                    f"Tile {tile.index} is both on the board and in the removed pile"
                )
            if not tile.on_board and tile.removed_index is None:
                raise InconsistentBoardError(
                    f"Tile {tile.index} is neither on the board nor in the removed pile"
                )

            self._tiles[tile.index] = tile
            if tile.on_board:
                occupant = self._by_position.get(tile.position)
                if occupant is not None:
                    raise InconsistentBoardError(
                        f"Tiles {occupant} and {tile.index} both occupy {tile.position}"
                    )
                self._by_position[tile.position] = tile.index
            else:
                removed.append(tile)

        removed.sort(key=lambda t: t.removed_index)
        ranks = [t.removed_index for t in removed]
        if ranks != list(range(len(removed))):
            raise InconsistentBoardError(f"Removed pile ranks are not contiguous from 0: {ranks}")
        self._pile = [t.index for t in removed]

    @classmethod
    def generate(
        cls,
        columns: int,
        rows: int,
        palette_size: int,
        rng: Optional[random.Random] = None,
    ) -> "BoardState":
        """
        Fill a columns x rows rectangle with randomly colored tiles.

        Tile `i` rests at (i % columns, i // columns).
        """
        if columns < 1 or rows < 1:
            raise ValueError("Board needs at least 1 column and 1 row")
        if palette_size < 1:
            raise ValueError("Palette needs at least 1 color")

        rng = rng or random.Random()
        tiles = [
            Tile(
                index=i,
                color=rng.randrange(palette_size),
                position=(i % columns, i // columns),
            )
            for i in range(columns * rows)
        ]
        return cls(tiles)

    # ----- Lookups -----

    def tile(self, index: int) -> Tile:
        """Get a tile by index, on the board or in the pile."""
        try:
            return self._tiles[index]
        except KeyError:
            raise KeyError(f"Unknown tile index {index}") from None

    def tile_at(self, position: Position) -> Optional[Tile]:
        """Get the on-board tile at a position, if any."""
        index = self._by_position.get(position)
        return self._tiles[index] if index is not None else None

    def position_index(self) -> Dict[Position, Tile]:
        """Map every occupied position to its tile."""
        return {position: self._tiles[index] for position, index in self._by_position.items()}

    def tiles(self) -> List[Tile]:
        return [self._tiles[i] for i in sorted(self._tiles)]

    def on_board_tiles(self) -> List[Tile]:
        return [t for t in self.tiles() if t.on_board]

    def removed_tiles(self) -> List[Tile]:
        """Get removed tiles in pile order."""
        return [self._tiles[i] for i in self._pile]

    @property
    def removed_count(self) -> int:
        return len(self._pile)

    @property
    def on_board_count(self) -> int:
        return len(self._by_position)

    def next_index(self) -> int:
        return max(self._tiles) + 1 if self._tiles else 0

    def colors(self) -> List[int]:
        """Distinct colors present on the board, ascending."""
        return sorted({t.color for t in self._tiles.values() if t.on_board})

    # ----- Mutation -----

    @contextmanager
    def batch(self) -> Iterator["BoardBatch"]:
        """Stage changes and commit them together when the block exits cleanly."""
        staged = BoardBatch(self)
        yield staged
        self._commit(staged)

    def _commit(self, staged: "BoardBatch") -> None:
        for index, tile in staged._spawned.items():
            self._tiles[index] = tile
        for index, position in staged._positions.items():
            self._tiles[index].position = position
        for index in staged._removed:
            self._tiles[index].removed_index = len(self._pile)
            self._pile.append(index)
        for index, flag in staged._queued.items():
            self._tiles[index].queued_for_collection = flag
        for index, powerup in staged._powerups.items():
            self._tiles[index].powerup = powerup
        self._by_position = staged._by_position

        if staged.changed:
            logger.debug(
                "Committed batch: %d moved, %d removed, %d spawned",
                len(staged._positions), len(staged._removed), len(staged._spawned),
            )

    def check_consistency(self) -> None:
        """Verify placement and pile invariants, raising InconsistentBoardError on violation."""
        seen: Dict[Position, int] = {}
        for tile in self._tiles.values():
            if tile.on_board:
                if tile.removed_index is not None:
                    raise InconsistentBoardError(f"Tile {tile.index} is on the board and removed")
                if tile.position in seen:
                    raise InconsistentBoardError(
                        f"Tiles {seen[tile.position]} and {tile.index} both occupy {tile.position}"
                    )
                seen[tile.position] = tile.index
        if seen != self._by_position:
            raise InconsistentBoardError("Position index is out of sync with tile locations")

        ranks = [self._tiles[i].removed_index for i in self._pile]
        if ranks != list(range(len(self._pile))):
            raise InconsistentBoardError(f"Removed pile ranks are not contiguous from 0: {ranks}")

    def to_dict(self) -> Dict[str, List[Dict]]:
        """Convert to dictionary."""
        return {
            "tiles": [t.to_dict() for t in self.on_board_tiles()],
            "removed": [t.to_dict() for t in self.removed_tiles()],
        }


class BoardBatch:
    """Changes staged against a BoardState; lookups see the staged view."""

    def __init__(self, board: BoardState):
        self._board = board
        self._by_position: Dict[Position, int] = dict(board._by_position)
        self._positions: Dict[int, Optional[Position]] = {}
        self._removed: List[int] = []
        self._spawned: Dict[int, Tile] = {}
        self._queued: Dict[int, bool] = {}
        self._powerups: Dict[int, Optional[Powerup]] = {}
        self._next_index = board.next_index()

    def _tile(self, index: int) -> Tile:
        if index in self._spawned:
            return self._spawned[index]
        return self._board.tile(index)

    @property
    def changed(self) -> bool:
        return bool(
            self._positions or self._removed or self._spawned or self._queued or self._powerups
        )

    def index_at(self, position: Position) -> Optional[int]:
        """Get the index of the tile staged at a position, if any."""
        return self._by_position.get(position)

    def position_of(self, index: int) -> Optional[Position]:
        if index in self._positions:
            return self._positions[index]
        return self._tile(index).position

    def color_of(self, index: int) -> int:
        return self._tile(index).color

    def is_queued(self, index: int) -> bool:
        if index in self._queued:
            return self._queued[index]
        return self._tile(index).queued_for_collection

    def on_board_indexes(self) -> List[int]:
        return sorted(self._by_position.values())

    def remove(self, index: int) -> int:
        """Take a tile off the board and return its pile rank."""
        position = self.position_of(index)
        if position is None:
            raise InconsistentBoardError(f"Tile {index} is not on the board")
        del self._by_position[position]
        self._positions[index] = None
        rank = self._board.removed_count + len(self._removed)
        self._removed.append(index)
        return rank

    def move(self, index: int, position: Position) -> None:
        """Move an on-board tile to an unoccupied position."""
        current = self.position_of(index)
        if current is None:
            raise InconsistentBoardError(f"Tile {index} is not on the board")
        occupant = self._by_position.get(position)
        if occupant is not None and occupant != index:
            logger.error("Move of tile %d onto %s collides with tile %d", index, position, occupant)
            raise InconsistentBoardError(
                f"Cannot move tile {index} to {position}: occupied by tile {occupant}"
            )
        del self._by_position[current]
        self._by_position[position] = index
        self._positions[index] = position

    def spawn(self, position: Position, color: int) -> int:
        """Create a new tile at an unoccupied position and return its index."""
        occupant = self._by_position.get(position)
        if occupant is not None:
            logger.error("Spawn at %s collides with tile %d", position, occupant)
            raise InconsistentBoardError(f"Cannot spawn at {position}: occupied by tile {occupant}")
        index = self._next_index
        self._next_index += 1
        self._spawned[index] = Tile(index=index, color=color)
        self._positions[index] = position
        self._by_position[position] = index
        return index

    def set_queued(self, index: int, flag: bool) -> None:
        self._tile(index)
        self._queued[index] = flag

    def set_powerup(self, index: int, powerup: Optional[Powerup]) -> None:
        self._tile(index)
        self._powerups[index] = powerup
