"""
Shape data: canonical sizes, colours, polygon geometry and template layouts.
"""

from .catalog import (
    SHAPE_COLORS, SHAPE_SIZES, get_shape_size, is_triangle
)

from .geometry import (
    ROTATION_MATRICES, local_vertices, shape_polygon,
    polygon_bounds, polygon_separation
)

from .templates import (
    PUZZLE_TEMPLATES, get_template, random_template,
    templates_for, random_template_for, describe_templates
)

__all__ = [
    # Catalog
    'SHAPE_COLORS', 'SHAPE_SIZES', 'get_shape_size', 'is_triangle',
    # Geometry
    'ROTATION_MATRICES', 'local_vertices', 'shape_polygon',
    'polygon_bounds', 'polygon_separation',
    # Templates
    'PUZZLE_TEMPLATES', 'get_template', 'random_template',
    'templates_for', 'random_template_for', 'describe_templates',
]
