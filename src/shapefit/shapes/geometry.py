"""
Polygon geometry for puzzle shapes.

Screen coordinates: x grows right, y grows down, rotations are clockwise.
A shape is positioned by its anchor: the bounding-box centre for
quadrilaterals and the centroid for triangles (height/3 above the base,
2*height/3 below the apex).
"""

from typing import Dict, Tuple

import numpy as np

from shapefit.core.base import Rotation, ShapeType
from shapefit.shapes.catalog import PARALLELOGRAM_SKEW, get_shape_size, is_triangle


def _rotation_matrix(degrees: int) -> np.ndarray:
    # Clockwise as seen on a y-down screen
    c = int(round(np.cos(np.radians(degrees))))
    s = int(round(np.sin(np.radians(degrees))))
    return np.array([[c, -s], [s, c]], dtype=float)


ROTATION_MATRICES: Dict[Rotation, np.ndarray] = {r: _rotation_matrix(int(r)) for r in Rotation}


def local_vertices(shape_type: ShapeType) -> np.ndarray:
    """
    Vertices of an unrotated shape relative to its anchor.

    Returns:
        (k, 2) array, clockwise on screen starting at the top-left/apex
    """
    width, height = get_shape_size(shape_type)
    if is_triangle(shape_type):
        return np.array([
            [0.0, -2.0 * height / 3.0],
            [width / 2.0, height / 3.0],
            [-width / 2.0, height / 3.0],
        ])
    hw, hh = width / 2.0, height / 2.0
    if shape_type == ShapeType.PARALLELOGRAM:
        return np.array([
            [-hw + PARALLELOGRAM_SKEW, -hh],
            [hw, -hh],
            [hw - PARALLELOGRAM_SKEW, hh],
            [-hw, hh],
        ])
    return np.array([[-hw, -hh], [hw, -hh], [hw, hh], [-hw, hh]])


def shape_polygon(shape_type: ShapeType, x: float, y: float,
                  rotation: Rotation = Rotation.DEG_0) -> np.ndarray:
    """Vertices of a shape anchored at (x, y) and turned by ``rotation``."""
    rotated = local_vertices(shape_type) @ ROTATION_MATRICES[Rotation(rotation)].T
    return rotated + np.array([x, y])


def polygon_bounds(polygon: np.ndarray) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of a polygon."""
    mins = polygon.min(axis=0)
    maxs = polygon.max(axis=0)
    return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def _edge_normals(polygon: np.ndarray) -> np.ndarray:
    edges = np.roll(polygon, -1, axis=0) - polygon
    normals = np.stack([-edges[:, 1], edges[:, 0]], axis=1)
    return normals / np.linalg.norm(normals, axis=1, keepdims=True)


def polygon_separation(a: np.ndarray, b: np.ndarray) -> float:
    """
    Signed gap between two convex polygons along their best separating axis.

    Positive when the polygons are apart, about zero when they share an edge
    or a vertex, negative when their interiors overlap.
    """
    best = -np.inf
    for axis in np.vstack([_edge_normals(a), _edge_normals(b)]):
        pa = a @ axis
        pb = b @ axis
        gap = max(pb.min() - pa.max(), pa.min() - pb.max())
        best = max(best, gap)
    return float(best)
