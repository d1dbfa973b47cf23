"""
Core modules for shapefit.

This package contains the fundamental components:
- Value types for shapes, targets, puzzles and game state
- Configuration management
- Registry for layout strategy discovery
"""

from shapefit.core.base import (
    BaseLayout,
    Difficulty,
    DraggableShapeSlot,
    DropAttempt,
    FailureReason,
    GamePhase,
    GameState,
    PlannedTarget,
    PuzzleTemplate,
    Rotation,
    Shape,
    ShapeType,
    SnapResult,
    TargetSlot,
    TemplateLayout,
    TemplateShape,
)

from shapefit.core.config import (
    DEFAULT_SNAP_THRESHOLD,
    DIFFICULTY_CONFIG,
    TOTAL_STAGES,
    DifficultyConfig,
    GameConfig,
    create_default_config,
    load_config,
    validate_config,
)

from shapefit.core.registry import register_layout, get_layout, LAYOUT_REGISTRY

__all__ = [
    "BaseLayout",
    "Difficulty",
    "DraggableShapeSlot",
    "DropAttempt",
    "FailureReason",
    "GamePhase",
    "GameState",
    "PlannedTarget",
    "PuzzleTemplate",
    "Rotation",
    "Shape",
    "ShapeType",
    "SnapResult",
    "TargetSlot",
    "TemplateLayout",
    "TemplateShape",
    "DEFAULT_SNAP_THRESHOLD",
    "DIFFICULTY_CONFIG",
    "TOTAL_STAGES",
    "DifficultyConfig",
    "GameConfig",
    "create_default_config",
    "load_config",
    "validate_config",
    "register_layout",
    "get_layout",
    "LAYOUT_REGISTRY",
]
