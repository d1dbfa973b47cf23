"""
Shape catalog: canonical sizes and the colour palette.
"""

from typing import Dict, Tuple

from shapefit.core.base import ShapeType

# Sizes in px. Shapes are sized for small fingers; 44px is the minimum touch target.
SQUARE_SIZE = 100
RECTANGLE_SIZE = (140, 70)
PARALLELOGRAM_SIZE = (140, 80)
PARALLELOGRAM_SKEW = 20
EQUILATERAL_TRIANGLE_SIZE = (100, 87)  # (base, height)
ISOSCELES_TRIANGLE_SIZE = (80, 100)  # (base, height)

SHAPE_SIZES: Dict[ShapeType, Tuple[int, int]] = {
    ShapeType.SQUARE: (SQUARE_SIZE, SQUARE_SIZE),
    ShapeType.RECTANGLE: RECTANGLE_SIZE,
    ShapeType.PARALLELOGRAM: PARALLELOGRAM_SIZE,
    ShapeType.EQUILATERAL_TRIANGLE: EQUILATERAL_TRIANGLE_SIZE,
    ShapeType.ISOSCELES_TRIANGLE: ISOSCELES_TRIANGLE_SIZE,
}

SHAPE_COLORS = (
    "#ec4899",  # pink
    "#f43f5e",  # rose
    "#facc15",  # yellow
    "#f59e0b",  # amber
    "#84cc16",  # lime
    "#06b6d4",  # cyan
    "#0ea5e9",  # sky
    "#a855f7",  # purple
)

TRIANGLE_TYPES = (ShapeType.EQUILATERAL_TRIANGLE, ShapeType.ISOSCELES_TRIANGLE)


def get_shape_size(shape_type: ShapeType) -> Tuple[int, int]:
    """Canonical (width, height) of an unrotated shape."""
    return SHAPE_SIZES[shape_type]


def is_triangle(shape_type: ShapeType) -> bool:
    return shape_type in TRIANGLE_TYPES
