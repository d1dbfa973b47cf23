"""
Base types and interfaces for the shapefit puzzle core.

This module defines the value objects shared by the generator, the snap
matcher and the game state machine, plus the abstract layout strategy that
puzzle layouts plug into.
"""

from __future__ import annotations
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, TYPE_CHECKING
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from abc import ABC, abstractmethod
if TYPE_CHECKING:
    from shapefit.core.config import DifficultyConfig
    from shapefit.puzzle.random_source import RandomSource


class ShapeType(Enum):
    """Shape kinds a puzzle can contain."""
    SQUARE = "square"
    RECTANGLE = "rectangle"
    PARALLELOGRAM = "parallelogram"
    EQUILATERAL_TRIANGLE = "equilateralTriangle"
    ISOSCELES_TRIANGLE = "isoscelesTriangle"


class Rotation(IntEnum):
    """Clockwise rotation in 90 degree steps."""
    DEG_0 = 0
    DEG_90 = 90
    DEG_180 = 180
    DEG_270 = 270

    def next(self) -> "Rotation":
        """The rotation one quarter turn further clockwise."""
        return Rotation((self.value + 90) % 360)


class Difficulty(Enum):
    """Difficulty tiers."""
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class GamePhase(Enum):
    """Top-level game modes."""
    MENU = "menu"
    PLAYING = "playing"
    STAGE_CLEAR = "stageClear"
    GAME_CLEAR = "gameClear"


class FailureReason(Enum):
    """Why a drop did not snap."""
    TYPE_MISMATCH = "type_mismatch"
    ROTATION_MISMATCH = "rotation_mismatch"
    DISTANCE_EXCEEDED = "distance_exceeded"


def _enum_value(value: Optional[Enum]) -> Any:
    return value.value if value is not None else None


@dataclass(frozen=True)
class Shape:
    """A draggable shape."""
    id: str
    type: ShapeType
    width: float
    height: float
    rotation: Rotation
    color: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert shape to dictionary representation."""
        return {
            "id": self.id,
            "type": self.type.value,
            "width": self.width,
            "height": self.height,
            "rotation": int(self.rotation),
            "color": self.color,
        }


@dataclass(frozen=True)
class TargetSlot:
    """A puzzle location expecting one shape type.

    ``x``/``y`` is the anchor point: the bounding-box centre for
    quadrilaterals and the centroid for triangles.
    """
    id: str
    shape_type: ShapeType
    x: float
    y: float
    width: float
    height: float
    required_rotation: Optional[Rotation] = None
    placed_shape_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert target slot to dictionary representation."""
        return {
            "id": self.id,
            "shape_type": self.shape_type.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "required_rotation": int(self.required_rotation) if self.required_rotation is not None else None,
            "placed_shape_id": self.placed_shape_id,
        }


@dataclass(frozen=True)
class DraggableShapeSlot:
    """A shape together with its starting position in the tray."""
    shape: Shape
    initial_x: float
    initial_y: float
    is_placed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert slot to dictionary representation."""
        return {
            "shape": self.shape.to_dict(),
            "initial_x": self.initial_x,
            "initial_y": self.initial_y,
            "is_placed": self.is_placed,
        }


@dataclass(frozen=True)
class PuzzleTemplate:
    """A generated puzzle: the shapes to drag and the slots to fill.

    ``shapes[i]`` was generated for ``targets[i]``; matching at drop time is
    still decided by type, not by index.
    """
    shapes: Tuple[DraggableShapeSlot, ...]
    targets: Tuple[TargetSlot, ...]

    def get_slot(self, shape_id: str) -> Optional[DraggableShapeSlot]:
        """Find the draggable slot holding ``shape_id``."""
        for slot in self.shapes:
            if slot.shape.id == shape_id:
                return slot
        return None

    def get_target(self, target_id: str) -> Optional[TargetSlot]:
        """Find a target slot by id."""
        for target in self.targets:
            if target.id == target_id:
                return target
        return None

    def open_targets(self) -> List[TargetSlot]:
        """Targets that have not received a shape yet."""
        return [t for t in self.targets if t.placed_shape_id is None]

    def to_dict(self) -> Dict[str, Any]:
        """Convert puzzle to dictionary representation."""
        return {
            "shapes": [slot.to_dict() for slot in self.shapes],
            "targets": [target.to_dict() for target in self.targets],
        }


@dataclass(frozen=True)
class TemplateShape:
    """One shape inside a template layout, offset from the template centre."""
    type: ShapeType
    relative_x: float
    relative_y: float
    rotation: Rotation = Rotation.DEG_0


@dataclass(frozen=True)
class TemplateLayout:
    """A named silhouette made of touching shapes."""
    name: str
    shapes: Tuple[TemplateShape, ...]

    @property
    def shape_types(self) -> List[ShapeType]:
        return [s.type for s in self.shapes]

    def to_dict(self) -> Dict[str, Any]:
        """Convert layout to dictionary representation."""
        return {
            "name": self.name,
            "shapes": [
                {
                    "type": s.type.value,
                    "relative_x": s.relative_x,
                    "relative_y": s.relative_y,
                    "rotation": int(s.rotation),
                }
                for s in self.shapes
            ],
        }


@dataclass(frozen=True)
class DropAttempt:
    """Where a dragged shape was released, and how it was turned."""
    x: float
    y: float
    shape_type: ShapeType
    rotation: Optional[Rotation] = None


@dataclass(frozen=True)
class SnapResult:
    """Outcome of evaluating one drop against one target."""
    should_snap: bool
    relative_offset: Tuple[float, float]
    failure_reason: Optional[FailureReason] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert snap result to dictionary representation."""
        return {
            "should_snap": self.should_snap,
            "relative_offset": list(self.relative_offset),
            "failure_reason": _enum_value(self.failure_reason),
        }


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the game."""
    difficulty: Difficulty = Difficulty.EASY
    current_stage: int = 1
    phase: GamePhase = GamePhase.MENU
    puzzle: Optional[PuzzleTemplate] = None
    placed_shape_ids: FrozenSet[str] = field(default_factory=frozenset)

    def is_stage_complete(self) -> bool:
        """True once every shape of the current puzzle is placed."""
        if self.puzzle is None:
            return False
        return len(self.placed_shape_ids) == len(self.puzzle.shapes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary representation."""
        return {
            "difficulty": self.difficulty.value,
            "current_stage": self.current_stage,
            "phase": self.phase.value,
            "puzzle": self.puzzle.to_dict() if self.puzzle is not None else None,
            "placed_shape_ids": sorted(self.placed_shape_ids),
        }


@dataclass(frozen=True)
class PlannedTarget:
    """A target position chosen by a layout strategy, before ids and colours."""
    shape_type: ShapeType
    x: float
    y: float
    rotation: Rotation = Rotation.DEG_0


class BaseLayout(ABC):
    """Base class for target layout strategies."""

    @abstractmethod
    def plan(
        self,
        config: DifficultyConfig,
        viewport_width: float,
        viewport_height: float,
        rng: RandomSource,
    ) -> Sequence[PlannedTarget]:
        """
        Choose shape types and target positions for one puzzle.

        Returns:
            Exactly ``config.shape_count`` planned targets.
        """
        pass
