"""Game session: the action boundary around one board.

Every user action is applied as a single committed batch and followed by one
full pattern detection pass before the next action is accepted.
"""
import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Union

from ..models.board import RotationMode, TapAction
from .board_state import BoardState
from .collector import CollectionResolver, CollectionResult
from .hex_grid import validate_direction
from .pattern_detector import BoardPatterns, PatternDetector
from .spiral import SpiralDisplacer, SpiralResult

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of one user action."""
    action: TapAction
    changed: bool = False
    removals: List[SpiralResult] = field(default_factory=list)
    collection: Optional[CollectionResult] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "action": self.action.value,
            "changed": self.changed,
            "removals": [r.to_dict() for r in self.removals],
            "collection": self.collection.to_dict() if self.collection else None,
        }


class GameSession:
    """Owns a board, its engines and its latest classification."""

    def __init__(
        self,
        board: BoardState,
        palette_size: int = 6,
        min_line_length: int = 5,
        rng: Optional[random.Random] = None,
        board_id: Optional[str] = None,
        default_direction: int = 1,
        default_rotation: RotationMode = RotationMode.CLOCKWISE,
    ):
        self.board_id = board_id or uuid.uuid4().hex
        self.board = board
        self.palette_size = palette_size
        self.rng = rng or random.Random()
        self.default_direction = validate_direction(default_direction)
        self.default_rotation = RotationMode(default_rotation)

        self.displacer = SpiralDisplacer(palette_size=palette_size, rng=self.rng)
        self.detector = PatternDetector(min_line_length=min_line_length)
        self.resolver = CollectionResolver()
        self.patterns: BoardPatterns = self.detector.detect(board)

    @classmethod
    def new(
        cls,
        columns: int = 9,
        rows: int = 9,
        palette_size: int = 6,
        seed: Optional[int] = None,
        **kwargs,
    ) -> "GameSession":
        """Create a session on a freshly generated rectangular board."""
        rng = random.Random(seed)
        board = BoardState.generate(columns, rows, palette_size, rng)
        logger.info("Created %dx%d board with %d colors", columns, rows, palette_size)
        return cls(board, palette_size=palette_size, rng=rng, **kwargs)

    def _refresh(self) -> None:
        self.patterns = self.detector.detect(self.board)

    def _noop(self, action: TapAction, reason: str, *args) -> ActionResult:
        logger.debug(reason, *args)
        return ActionResult(action=action, changed=False)

    def tap(
        self,
        tile_index: int,
        action: Union[TapAction, str] = TapAction.PULL,
        direction: Optional[int] = None,
        rotation: Union[RotationMode, str, None] = None,
    ) -> ActionResult:
        """Dispatch a tap according to the selected tap-action mode."""
        action = TapAction(action)
        if action == TapAction.PULL:
            return self.pull(tile_index, direction, rotation)
        if action == TapAction.COLLECT:
            return self.collect(tile_index)
        return self._noop(action, "Tap action %s does not change the board", action.value)

    def pull(
        self,
        tile_index: int,
        direction: Optional[int] = None,
        rotation: Union[RotationMode, str, None] = None,
    ) -> ActionResult:
        """
        Remove a tile and refill the board by spiral displacement.

        Args:
            tile_index: Index of the tile to remove.
            direction: Initial pull direction 1-6 (session default if None).
            rotation: Rotation mode (session default if None).

        Returns:
            ActionResult with the removal details.

        Raises:
            InvalidDirectionError: If direction is not 1-6.
            KeyError: If the tile index is unknown.
        """
        direction = validate_direction(self.default_direction if direction is None else direction)
        rotation = RotationMode(rotation or self.default_rotation)

        tile = self.board.tile(tile_index)
        if not tile.on_board:
            return self._noop(TapAction.PULL, "Tile %d is not on the board", tile_index)

        with self.board.batch() as batch:
            if batch.is_queued(tile_index):
                batch.set_queued(tile_index, False)
            removal = self.displacer.remove(batch, tile_index, direction, rotation, TapAction.PULL)
        self._refresh()
        return ActionResult(action=TapAction.PULL, changed=True, removals=[removal])

    def collect(self, tile_index: int) -> ActionResult:
        """Collect the lines through a tile into a powerup."""
        tile = self.board.tile(tile_index)
        if not tile.on_board:
            return self._noop(TapAction.COLLECT, "Tile %d is not on the board", tile_index)

        with self.board.batch() as batch:
            collection = self.resolver.collect(batch, self.patterns, tile_index)
        if collection is None:
            return ActionResult(action=TapAction.COLLECT, changed=False)

        self._refresh()
        return ActionResult(action=TapAction.COLLECT, changed=True, collection=collection)

    def clear_queued(self, direction: Optional[int] = None) -> ActionResult:
        """
        Remove every tile queued for collection.

        Each removal pulls straight along the initial direction, and all of
        them commit together as one action.
        """
        direction = validate_direction(self.default_direction if direction is None else direction)
        queued = [t.index for t in self.board.on_board_tiles() if t.queued_for_collection]
        if not queued:
            return self._noop(TapAction.COLLECT, "No tiles queued for collection")

        removals = []
        with self.board.batch() as batch:
            for index in queued:
                batch.set_queued(index, False)
                removals.append(
                    self.displacer.remove(
                        batch, index, direction, self.default_rotation, TapAction.COLLECT
                    )
                )
        self._refresh()
        logger.debug("Cleared %d queued tiles", len(removals))
        return ActionResult(action=TapAction.COLLECT, changed=True, removals=removals)

    def snapshot(self) -> Dict[str, Any]:
        """Full board state and classification for the rendering layer."""
        board = self.board.to_dict()
        return {
            "board_id": self.board_id,
            "tiles": board["tiles"],
            "removed": board["removed"],
            "patterns": [p.to_dict() for p in self.patterns.records()],
        }


class SessionStore:
    """In-memory registry of game sessions keyed by board id."""

    def __init__(self):
        self._sessions: Dict[str, GameSession] = {}

    def add(self, session: GameSession) -> GameSession:
        self._sessions[session.board_id] = session
        return session

    def create(self, **kwargs) -> GameSession:
        return self.add(GameSession.new(**kwargs))

    def get(self, board_id: str) -> GameSession:
        try:
            return self._sessions[board_id]
        except KeyError:
            raise KeyError(f"Unknown board id {board_id}") from None

    def delete(self, board_id: str) -> None:
        self.get(board_id)
        del self._sessions[board_id]

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, board_id: str) -> bool:
        return board_id in self._sessions


# Singleton instance
_store = None


def get_session_store() -> SessionStore:
    """Get or create session store singleton instance."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store
