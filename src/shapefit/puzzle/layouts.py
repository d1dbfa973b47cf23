"""
Target layout strategies.

``grid`` scatters randomly chosen shapes over a centred grid (easy tier).
``template`` reproduces a fixed silhouette from the template library
(normal and hard tiers). Strategies are looked up by the difficulty's
``layout_strategy`` field.
"""

from __future__ import annotations

import math
from typing import List, Tuple, TYPE_CHECKING

from shapefit.core.base import BaseLayout, PlannedTarget, Rotation
from shapefit.core.registry import register_layout
from shapefit.shapes.templates import random_template_for
if TYPE_CHECKING:
    from shapefit.core.config import DifficultyConfig
    from shapefit.puzzle.random_source import RandomSource

# Target area limits (px) and its upward shift from the viewport centre
MAX_AREA_WIDTH = 500
MAX_AREA_HEIGHT = 400
AREA_WIDTH_RATIO = 0.8
AREA_HEIGHT_RATIO = 0.5
AREA_CENTER_SHIFT_Y = 50


def layout_center(viewport_width: float, viewport_height: float) -> Tuple[float, float]:
    """Centre of the target area."""
    return viewport_width / 2, viewport_height / 2 - AREA_CENTER_SHIFT_Y


def grid_positions(count: int, viewport_width: float, viewport_height: float) -> List[Tuple[float, float]]:
    """
    Cell centres of a near-square grid holding ``count`` targets, row-major.
    """
    area_width = min(viewport_width * AREA_WIDTH_RATIO, MAX_AREA_WIDTH)
    area_height = min(viewport_height * AREA_HEIGHT_RATIO, MAX_AREA_HEIGHT)
    center_x, center_y = layout_center(viewport_width, viewport_height)

    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    cell_width = area_width / cols
    cell_height = area_height / rows
    start_x = center_x - area_width / 2
    start_y = center_y - area_height / 2

    positions = []
    for i in range(count):
        col = i % cols
        row = i // cols
        positions.append((
            start_x + col * cell_width + cell_width / 2,
            start_y + row * cell_height + cell_height / 2,
        ))
    return positions


@register_layout("grid")
class GridLayout(BaseLayout):
    """Random shape types on a grid, never rotated."""

    def plan(self, config: DifficultyConfig, viewport_width: float,
             viewport_height: float, rng: RandomSource) -> List[PlannedTarget]:
        types = [rng.choice(config.available_shapes) for _ in range(config.shape_count)]
        positions = grid_positions(len(types), viewport_width, viewport_height)
        return [
            PlannedTarget(shape_type=t, x=x, y=y, rotation=Rotation.DEG_0)
            for t, (x, y) in zip(types, positions)
        ]


@register_layout("template")
class SilhouetteLayout(BaseLayout):
    """Shapes packed into a randomly chosen template silhouette."""

    def plan(self, config: DifficultyConfig, viewport_width: float,
             viewport_height: float, rng: RandomSource) -> List[PlannedTarget]:
        template = random_template_for(config, rng)
        center_x, center_y = layout_center(viewport_width, viewport_height)
        return [
            PlannedTarget(
                shape_type=s.type,
                x=center_x + s.relative_x,
                y=center_y + s.relative_y,
                rotation=s.rotation,
            )
            for s in template.shapes
        ]
