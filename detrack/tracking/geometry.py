from __future__ import annotations

import math

from detrack.utils.types import BoundingBox


def iou(a: BoundingBox, b: BoundingBox) -> float:
    """
    Intersection-over-Union of two axis-aligned boxes, in [0, 1].
    Disjoint boxes and degenerate unions give 0.0.
    """
    x1 = max(a.x1, b.x1)
    y1 = max(a.y1, b.y1)
    x2 = min(a.x2, b.x2)
    y2 = min(a.y2, b.y2)
    if x1 >= x2 or y1 >= y2:
        return 0.0

    intersection = (x2 - x1) * (y2 - y1)
    union = a.width * a.height + b.width * b.height - intersection
    if union <= 0.0:
        return 0.0
    value = intersection / union
    if not math.isfinite(value):
        return 0.0
    return min(1.0, max(0.0, value))
