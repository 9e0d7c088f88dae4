"""Board data models and structures."""
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Set, Tuple
from enum import Enum


# (column, row) on the unbounded offset hex grid
Position = Tuple[int, int]


class RotationMode(str, Enum):
    """How the spiral walk turns after each arm."""
    CLOCKWISE = "clockwise"
    COUNTERCLOCKWISE = "counterclockwise"
    STRAIGHT = "straight"


class TapAction(str, Enum):
    """Tap-action modes offered by the UI."""
    PULL = "pull"
    LINE = "line"
    RING = "ring"
    SELECT = "select"
    COLLECT = "collect"


class PowerupEffect(str, Enum):
    """Powerup effects granted by collecting a line."""
    BOMB = "bomb"
    CUT = "cut"
    TURNS = "turns"
    ROTATE = "rotate"
    SWAP = "swap"
    CLEAR = "clear"
    UNKNOWN = "unknown"

    @classmethod
    def from_color(cls, color: int) -> "PowerupEffect":
        """Get effect for a tile color."""
        return POWERUP_EFFECTS_BY_COLOR.get(color, cls.UNKNOWN)


class CoreState(str, Enum):
    """Per-round core state of a tile during one detection pass."""
    UNKNOWN = "unknown"
    NOT_CORE = "not_core"
    CORE = "core"


@dataclass
class PowerupLocation:
    """Where a powerup currently lives (slot placement is handled by the UI)."""
    is_on_board: bool = False
    consumable_index: Optional[int] = None
    lasting_index: Optional[int] = None
    permanent_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "is_on_board": self.is_on_board,
            "consumable_index": self.consumable_index,
            "lasting_index": self.lasting_index,
            "permanent_index": self.permanent_index,
        }


@dataclass
class Powerup:
    """Powerup attached to a tile."""
    effect: PowerupEffect
    level: int
    location: PowerupLocation = field(default_factory=PowerupLocation)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "effect": self.effect.value,
            "level": self.level,
            "location": self.location.to_dict(),
        }


@dataclass
class Tile:
    """A tile either resting on the board or sitting in the removed pile."""
    index: int
    color: int
    position: Optional[Position] = None
    removed_index: Optional[int] = None
    queued_for_collection: bool = False
    powerup: Optional[Powerup] = None

    @property
    def on_board(self) -> bool:
        return self.position is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "color": self.color,
            "position": list(self.position) if self.position is not None else None,
            "removed_index": self.removed_index,
            "queued_for_collection": self.queued_for_collection,
            "powerup": self.powerup.to_dict() if self.powerup else None,
        }


@dataclass(frozen=True)
class LinePoint:
    """Membership of a tile in one detected line."""
    line_id: int
    step: int
    length: int

    def to_dict(self) -> Dict[str, Any]:
        return {"line_id": self.line_id, "step": self.step, "length": self.length}


@dataclass
class TilePatterns:
    """Classification record derived for one on-board tile."""
    index: int
    edge: bool = False
    lines: List[LinePoint] = field(default_factory=list)
    core_group: Optional[int] = None
    loop: bool = False
    # Core groups this loop tile touches; kept internal
    loop_groups: Set[int] = field(default_factory=set)

    @property
    def core(self) -> bool:
        return self.core_group is not None

    @property
    def has_pattern(self) -> bool:
        return bool(self.lines) or self.loop or self.core

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "edge": self.edge,
            "lines": [line.to_dict() for line in self.lines],
            "core": self.core,
            "core_group": self.core_group,
            "loop": self.loop,
        }


# Color -> powerup effect table
POWERUP_EFFECTS_BY_COLOR = {
    0: PowerupEffect.BOMB,
    1: PowerupEffect.CUT,
    2: PowerupEffect.TURNS,
    3: PowerupEffect.ROTATE,
    4: PowerupEffect.SWAP,
    5: PowerupEffect.CLEAR,
}

# Direction labels as shown by the direction selector
DIRECTION_LABELS = {
    1: "top",
    2: "upper right",
    3: "lower right",
    4: "bottom",
    5: "lower left",
    6: "upper left",
}
