"""
Configuration management for shapefit.

This module handles loading and validation of configuration files,
environment variables, and provides typed configuration objects for the
difficulty tiers and the game as a whole.
"""

import os
import yaml
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from pathlib import Path

from shapefit.core.base import Difficulty, ShapeType

# Number of stages in one game
TOTAL_STAGES = 5

# Drop distance (px) within which a matching shape snaps to its target
DEFAULT_SNAP_THRESHOLD = 50.0

LAYOUT_STRATEGIES = ("grid", "template")


@dataclass
class DifficultyConfig:
    """Settings bundle for one difficulty tier."""
    shape_count: int
    available_shapes: List[ShapeType]
    layout_strategy: str = "grid"
    enable_rotation: bool = False
    show_grid_lines: bool = False
    label: str = ""

    def __post_init__(self):
        self.available_shapes = [
            s if isinstance(s, ShapeType) else ShapeType(s) for s in self.available_shapes
        ]
        if not isinstance(self.shape_count, int) or self.shape_count <= 0:
            raise ValueError("shape_count must be a positive integer")
        if not self.available_shapes:
            raise ValueError("available_shapes must list at least one shape type")
        if not isinstance(self.layout_strategy, str) or not self.layout_strategy:
            raise ValueError("layout_strategy must be a non-empty string")
        if not isinstance(self.enable_rotation, bool):
            raise ValueError("enable_rotation must be a boolean")

    def to_dict(self) -> Dict[str, Any]:
        """Convert difficulty config to dictionary."""
        return {
            "shape_count": self.shape_count,
            "available_shapes": [s.value for s in self.available_shapes],
            "layout_strategy": self.layout_strategy,
            "enable_rotation": self.enable_rotation,
            "show_grid_lines": self.show_grid_lines,
            "label": self.label,
        }


DIFFICULTY_CONFIG: Dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: DifficultyConfig(
        shape_count=3,
        available_shapes=[
            ShapeType.SQUARE,
            ShapeType.RECTANGLE,
            ShapeType.EQUILATERAL_TRIANGLE,
        ],
        layout_strategy="grid",
        enable_rotation=False,
        show_grid_lines=True,
        label="Easy",
    ),
    Difficulty.NORMAL: DifficultyConfig(
        shape_count=4,
        available_shapes=[
            ShapeType.SQUARE,
            ShapeType.RECTANGLE,
            ShapeType.PARALLELOGRAM,
            ShapeType.EQUILATERAL_TRIANGLE,
        ],
        layout_strategy="template",
        enable_rotation=False,
        show_grid_lines=False,
        label="Normal",
    ),
    Difficulty.HARD: DifficultyConfig(
        shape_count=5,
        available_shapes=list(ShapeType),
        layout_strategy="template",
        enable_rotation=True,
        show_grid_lines=False,
        label="Hard",
    ),
}


def default_difficulties() -> Dict[Difficulty, DifficultyConfig]:
    """Fresh copies of the built-in tiers."""
    return {d: DifficultyConfig(**c.to_dict()) for d, c in DIFFICULTY_CONFIG.items()}


@dataclass
class GameConfig:
    """Main configuration object."""
    total_stages: int = TOTAL_STAGES
    snap_threshold: Optional[float] = None
    default_difficulty: Difficulty = Difficulty.EASY
    viewport_width: int = 1024
    viewport_height: int = 768
    seed: Optional[int] = None
    difficulties: Dict[Difficulty, DifficultyConfig] = field(default_factory=default_difficulties)

    def __post_init__(self):
        # Load from environment variables if not provided
        if self.snap_threshold is None:
            raw = os.getenv("SHAPEFIT_SNAP_THRESHOLD")
            try:
                self.snap_threshold = float(raw) if raw else DEFAULT_SNAP_THRESHOLD
            except ValueError:
                raise ValueError(f"SHAPEFIT_SNAP_THRESHOLD must be a number, got '{raw}'")
        if self.seed is None:
            raw = os.getenv("SHAPEFIT_SEED")
            if raw:
                try:
                    self.seed = int(raw)
                except ValueError:
                    raise ValueError(f"SHAPEFIT_SEED must be an integer, got '{raw}'")

        if isinstance(self.default_difficulty, str):
            self.default_difficulty = Difficulty(self.default_difficulty)
        if not isinstance(self.total_stages, int) or self.total_stages <= 0:
            raise ValueError("total_stages must be a positive integer")
        if not isinstance(self.snap_threshold, (float, int)) or self.snap_threshold < 0:
            raise ValueError("snap_threshold must be a non-negative number")
        if not isinstance(self.viewport_width, int) or self.viewport_width <= 0:
            raise ValueError("viewport_width must be a positive integer")
        if not isinstance(self.viewport_height, int) or self.viewport_height <= 0:
            raise ValueError("viewport_height must be a positive integer")
        missing = [d.value for d in Difficulty if d not in self.difficulties]
        if missing:
            raise ValueError(f"difficulties is missing tiers: {', '.join(missing)}")

    def difficulty_config(self, difficulty: Difficulty) -> DifficultyConfig:
        """Settings for ``difficulty``."""
        return self.difficulties[difficulty]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        """Create GameConfig from dictionary.

        Tier entries under ``difficulties`` are merged over the built-in
        defaults, so a file only needs the fields it changes.
        """
        data = dict(data)
        difficulties = default_difficulties()
        for name, overrides in (data.pop("difficulties", None) or {}).items():
            tier = Difficulty(name)
            merged = {**difficulties[tier].to_dict(), **(overrides or {})}
            difficulties[tier] = DifficultyConfig(**merged)
        return cls(difficulties=difficulties, **data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert GameConfig to dictionary."""
        return {
            "total_stages": self.total_stages,
            "snap_threshold": float(self.snap_threshold),
            "default_difficulty": self.default_difficulty.value,
            "viewport_width": self.viewport_width,
            "viewport_height": self.viewport_height,
            "seed": self.seed,
            "difficulties": {
                d.value: c.to_dict() for d, c in self.difficulties.items()
            },
        }


def load_config(config_path: str) -> GameConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        GameConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
        ValueError: If the file is empty or holds invalid values
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML config: {e}")

    if not data:
        raise ValueError("Configuration file is empty")

    try:
        return GameConfig.from_dict(data)
    except Exception as e:
        raise ValueError(f"Error creating config from data: {e}")


def create_default_config(output_path: str = "config.yaml") -> GameConfig:
    """
    Create a default configuration file.

    Args:
        output_path: Path where to save the default config

    Returns:
        Default GameConfig object
    """
    config = GameConfig()

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)

    return config


def validate_config(config: GameConfig) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation messages
    """
    # Imported here so the layout strategies are registered
    from shapefit.core.registry import LAYOUT_REGISTRY
    from shapefit.puzzle import layouts  # noqa: F401
    from shapefit.shapes.templates import templates_for

    issues = []

    for difficulty, tier in config.difficulties.items():
        name = difficulty.value
        if tier.layout_strategy not in LAYOUT_REGISTRY:
            issues.append(
                f"ERROR: {name}: unknown layout_strategy '{tier.layout_strategy}' "
                f"(expected one of {', '.join(sorted(LAYOUT_REGISTRY))})"
            )
        elif tier.layout_strategy == "template" and not templates_for(tier.shape_count, tier.available_shapes):
            issues.append(
                f"ERROR: {name}: no template has {tier.shape_count} shapes drawn from "
                f"{[s.value for s in tier.available_shapes]}"
            )
        if tier.shape_count > 9:
            issues.append(f"WARNING: {name}: {tier.shape_count} shapes will crowd the viewport")
        if len(set(tier.available_shapes)) != len(tier.available_shapes):
            issues.append(f"WARNING: {name}: available_shapes lists a type more than once")

    if config.snap_threshold == 0:
        issues.append("WARNING: snap_threshold is 0; only exact drops will snap")

    if config.viewport_width < 400 or config.viewport_height < 400:
        issues.append("WARNING: viewport is smaller than 400px; template silhouettes may not fit")

    return issues
