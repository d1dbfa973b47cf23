"""
Snap matching.

A drop snaps onto a target only if all three checks pass, in this order:

1. Type: the dragged shape's type equals the target's type.
2. Rotation: only when the target requires one, the current rotation equals it.
3. Distance: the Euclidean distance between anchors is at most the threshold.

The first failing check decides the reported ``failure_reason``. A rectangle
dropped squarely on an isosceles-triangle slot still fails with
``type_mismatch``.
"""

import math
from typing import Iterable, Optional, Protocol, Tuple

from shapefit.core.base import DropAttempt, FailureReason, Rotation, ShapeType, SnapResult


class SnapTarget(Protocol):
    x: float
    y: float
    shape_type: ShapeType
    required_rotation: Optional[Rotation]


def evaluate(current: DropAttempt, target: SnapTarget, threshold: float) -> SnapResult:
    """
    Decide whether a drop snaps onto a target.

    Args:
        current: Drop position, shape type and rotation of the dragged shape
        target: Target anchor, expected type and optional required rotation
        threshold: Maximum snapping distance in px (inclusive)

    Returns:
        SnapResult. On success the offset is (0, 0) and the shape belongs at
        the target anchor. On failure the offset is the drop position
        relative to the target, so the shape can stay where it was dropped.

    Example:
        ```python
        target = TargetSlot("t", ShapeType.SQUARE, 500, 400, 100, 100)
        evaluate(DropAttempt(512, 384, ShapeType.SQUARE), target, 50)
        # SnapResult(should_snap=True, relative_offset=(0.0, 0.0), failure_reason=None)
        ```
    """
    offset = (current.x - target.x, current.y - target.y)

    if current.shape_type != target.shape_type:
        return SnapResult(False, offset, FailureReason.TYPE_MISMATCH)

    if target.required_rotation is not None and current.rotation != target.required_rotation:
        return SnapResult(False, offset, FailureReason.ROTATION_MISMATCH)

    if math.hypot(offset[0], offset[1]) > threshold:
        return SnapResult(False, offset, FailureReason.DISTANCE_EXCEEDED)

    return SnapResult(True, (0.0, 0.0))


def matches_target(shape_type: ShapeType, rotation: Optional[Rotation], target: SnapTarget) -> bool:
    """Type and rotation check only, ignoring distance."""
    if shape_type != target.shape_type:
        return False
    if target.required_rotation is not None:
        return rotation == target.required_rotation
    return True


def find_snap_target(current: DropAttempt, targets: Iterable[SnapTarget],
                     threshold: float) -> Tuple[Optional[SnapTarget], Optional[SnapResult]]:
    """
    Resolve a drop against every open target of a puzzle.

    Targets that already hold a shape are skipped. The first target that
    snaps wins. If none does, the result for the nearest open target is
    returned alongside ``None`` so callers can report why the drop failed.

    Returns:
        (target or None, SnapResult or None when there is no open target)
    """
    nearest: Optional[Tuple[float, SnapResult]] = None
    for target in targets:
        if getattr(target, "placed_shape_id", None) is not None:
            continue
        result = evaluate(current, target, threshold)
        if result.should_snap:
            return target, result
        distance = math.hypot(*result.relative_offset)
        if nearest is None or distance < nearest[0]:
            nearest = (distance, result)
    return None, (nearest[1] if nearest is not None else None)
