"""
Puzzle generation.

Builds a complete puzzle (draggable shapes plus target slots) for a
difficulty tier and a viewport. The tier's ``layout_strategy`` decides where
targets go; everything else (ids, colours, tray positions, rotation
requirements) is common post-processing done here.
"""

from typing import List, Optional, Sequence, Tuple, Union

from shapefit.core.base import (
    Difficulty, DraggableShapeSlot, PlannedTarget, PuzzleTemplate,
    Rotation, Shape, TargetSlot
)
from shapefit.core.config import GameConfig
from shapefit.core.registry import get_layout
from shapefit.puzzle import layouts  # noqa: F401  (registers the built-in strategies)
from shapefit.puzzle.random_source import RandomSource
from shapefit.shapes.catalog import SHAPE_COLORS, get_shape_size

# Distance (px) of the shape tray from the bottom edge
TRAY_BOTTOM_MARGIN = 100


def tray_positions(count: int, viewport_width: float, viewport_height: float) -> List[Tuple[float, float]]:
    """Evenly spaced starting points along the bottom band, left to right."""
    spacing = viewport_width / (count + 1)
    y = viewport_height - TRAY_BOTTOM_MARGIN
    return [(spacing * (i + 1), y) for i in range(count)]


def _left_to_right(xs: Sequence[Tuple[float, float]]) -> List[int]:
    return sorted(range(len(xs)), key=lambda i: xs[i])


def assign_tray_positions(planned: Sequence[PlannedTarget], viewport_width: float,
                          viewport_height: float, rng: RandomSource) -> List[Tuple[float, float]]:
    """
    Shuffle the tray so a shape's starting slot gives no hint of its target.

    If the shuffle happens to reproduce the targets' left-to-right order the
    assignment is rotated by one, which always breaks the correspondence.
    """
    positions = rng.shuffle(tray_positions(len(planned), viewport_width, viewport_height))
    if len(positions) > 1:
        target_order = _left_to_right([(p.x, p.y) for p in planned])
        if _left_to_right(positions) == target_order:
            positions = positions[1:] + positions[:1]
    return positions


class PuzzleGenerator:
    """Generates puzzles for any configured difficulty tier."""

    def __init__(self, config: Optional[GameConfig] = None,
                 random_source: Optional[RandomSource] = None):
        self.config = config if config is not None else GameConfig()
        self.rng = random_source if random_source is not None else RandomSource(self.config.seed)

    def generate(self, difficulty: Union[Difficulty, str],
                 viewport_width: Optional[float] = None,
                 viewport_height: Optional[float] = None) -> PuzzleTemplate:
        """
        Generate a puzzle.

        Args:
            difficulty: Tier to generate for
            viewport_width: Screen width in px (defaults to the configured viewport)
            viewport_height: Screen height in px (defaults to the configured viewport)

        Returns:
            PuzzleTemplate with ``shape_count`` shapes and as many targets
        """
        tier = self.config.difficulty_config(Difficulty(difficulty))
        width = viewport_width if viewport_width is not None else self.config.viewport_width
        height = viewport_height if viewport_height is not None else self.config.viewport_height

        planned = list(get_layout(tier.layout_strategy).plan(tier, width, height, self.rng))
        ids = self._unique_ids(len(planned))

        shapes: List[Shape] = []
        targets: List[TargetSlot] = []
        for shape_id, plan in zip(ids, planned):
            shape_width, shape_height = get_shape_size(plan.shape_type)
            shape = Shape(
                id=shape_id,
                type=plan.shape_type,
                width=shape_width,
                height=shape_height,
                # Shapes always start upright; rotation-enabled tiers make the player turn them
                rotation=Rotation.DEG_0,
                color=self.rng.choice(SHAPE_COLORS),
            )
            shapes.append(shape)
            targets.append(TargetSlot(
                id=f"target-{shape_id}",
                shape_type=plan.shape_type,
                x=plan.x,
                y=plan.y,
                width=shape_width,
                height=shape_height,
                required_rotation=plan.rotation if tier.enable_rotation else None,
            ))

        positions = assign_tray_positions(planned, width, height, self.rng)
        slots = tuple(
            DraggableShapeSlot(shape=shape, initial_x=x, initial_y=y, is_placed=False)
            for shape, (x, y) in zip(shapes, positions)
        )
        return PuzzleTemplate(shapes=slots, targets=tuple(targets))

    def _unique_ids(self, count: int) -> List[str]:
        ids: List[str] = []
        while len(ids) < count:
            candidate = self.rng.token()
            if candidate not in ids:
                ids.append(candidate)
        return ids


def generate_puzzle(difficulty: Union[Difficulty, str], viewport_width: float,
                    viewport_height: float, seed: Optional[int] = None,
                    config: Optional[GameConfig] = None) -> PuzzleTemplate:
    """One-shot helper: generate a single puzzle with an optional seed."""
    if seed is None and config is not None:
        seed = config.seed
    return PuzzleGenerator(config, RandomSource(seed)).generate(
        difficulty, viewport_width, viewport_height
    )
