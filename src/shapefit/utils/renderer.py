"""
Static puzzle preview rendering with PIL.
"""

from typing import Optional

from PIL import Image, ImageDraw

from shapefit.core.base import PuzzleTemplate, Rotation
from shapefit.shapes.geometry import shape_polygon

BACKGROUND_COLOR = "#FFFFFF"
TARGET_FILL = "#F3F4F6"
TARGET_OUTLINE = "#9CA3AF"
GRID_COLOR = "#E5E7EB"
GRID_SPACING = 50


def _points(polygon):
    return [(float(x), float(y)) for x, y in polygon]


def render_puzzle(puzzle: PuzzleTemplate, width: int, height: int,
                  show_grid_lines: bool = False,
                  image: Optional[Image.Image] = None) -> Image.Image:
    """
    Draw a puzzle: target outlines first, then shapes on top.

    Placed shapes are drawn at their target, the rest at their starting
    position in the tray.
    """
    if image is None:
        image = Image.new("RGB", (int(width), int(height)), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)

    if show_grid_lines:
        for x in range(0, int(width), GRID_SPACING):
            draw.line([(x, 0), (x, height)], fill=GRID_COLOR, width=1)
        for y in range(0, int(height), GRID_SPACING):
            draw.line([(0, y), (width, y)], fill=GRID_COLOR, width=1)

    for target in puzzle.targets:
        rotation = target.required_rotation if target.required_rotation is not None else Rotation.DEG_0
        polygon = shape_polygon(target.shape_type, target.x, target.y, rotation)
        draw.polygon(_points(polygon), fill=TARGET_FILL, outline=TARGET_OUTLINE)

    targets_by_shape = {t.placed_shape_id: t for t in puzzle.targets if t.placed_shape_id}
    for slot in puzzle.shapes:
        shape = slot.shape
        target = targets_by_shape.get(shape.id)
        if target is not None:
            rotation = target.required_rotation if target.required_rotation is not None else shape.rotation
            polygon = shape_polygon(shape.type, target.x, target.y, rotation)
        else:
            polygon = shape_polygon(shape.type, slot.initial_x, slot.initial_y, shape.rotation)
        draw.polygon(_points(polygon), fill=shape.color, outline="#1F2937")

    return image
