import math

import pytest

from detrack.tracking.geometry import iou
from detrack.utils.types import BoundingBox


def test_iou_of_box_with_itself_is_one():
    a = BoundingBox(0, 0, 10, 10)
    assert iou(a, a) == 1.0


def test_iou_disjoint_and_touching_boxes_are_zero():
    a = BoundingBox(0, 0, 10, 10)
    assert iou(a, BoundingBox(20, 20, 30, 30)) == 0.0
    assert iou(a, BoundingBox(10, 0, 20, 10)) == 0.0


def test_iou_is_symmetric():
    a = BoundingBox(0, 0, 10, 10)
    b = BoundingBox(1, 1, 11, 11)
    assert iou(a, b) == iou(b, a)
    assert iou(a, b) == pytest.approx(81 / 119)


def test_iou_degenerate_boxes_fall_back_to_zero():
    point = BoundingBox(5, 5, 5, 5)
    assert iou(point, point) == 0.0
    bad = BoundingBox(math.nan, 0, 10, 10)
    assert iou(bad, BoundingBox(0, 0, 10, 10)) == 0.0
    assert iou(BoundingBox(0, 0, 10, 10), bad) == 0.0
