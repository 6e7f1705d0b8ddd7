"""Splitting camera-local triangles against the camera's visibility boundary."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from .camera import TRANSLATABLE_MIN_X, AngularCamera
from .errors import ClipClassificationError
from .geometry import Point3d, Segment3d, Triangle3d


class SegmentVisibility(Enum):
    VISIBLE = "visible"
    PARTIAL = "partial"
    HIDDEN = "hidden"


def boundary_intersection(a: Point3d, b: Point3d, boundary_x: float = TRANSLATABLE_MIN_X) -> Point3d:
    """Point where segment ``a``-``b`` crosses the plane ``x = boundary_x``."""
    t = (boundary_x - a.x) / (b.x - a.x)
    return Point3d(boundary_x, a.y + (b.y - a.y) * t, a.z + (b.z - a.z) * t)


def classify_segment(
    camera: AngularCamera, segment: Segment3d
) -> Tuple[SegmentVisibility, Optional[Point3d]]:
    can_a = camera.can_translate_point(segment.a)
    can_b = camera.can_translate_point(segment.b)
    if can_a and can_b:
        return SegmentVisibility.VISIBLE, None
    if not can_a and not can_b:
        return SegmentVisibility.HIDDEN, None
    return SegmentVisibility.PARTIAL, boundary_intersection(segment.a, segment.b)


def clip_triangle(camera: AngularCamera, triangle: Triangle3d) -> List[Triangle3d]:
    """Return the 0, 1 or 2 triangles covering the part of ``triangle`` in front.

    ``triangle`` must already be in camera-local coordinates. Vertices are
    ordered by depth from the front: ``a`` lies farthest in front of the
    boundary plane, ``c`` nearest to it or behind it.
    """
    c, b, a = triangle.xsort()

    visibility_bc, isect_bc = classify_segment(camera, Segment3d(b, c))
    if visibility_bc is SegmentVisibility.VISIBLE:
        return [triangle]

    if visibility_bc is SegmentVisibility.PARTIAL:
        visibility_ac, isect_ac = classify_segment(camera, Segment3d(a, c))
        if visibility_ac is SegmentVisibility.PARTIAL and isect_ac is not None and isect_bc is not None:
            return _valid((a, isect_ac, isect_bc), (a, b, isect_bc))
        raise ClipClassificationError(f"Inconsistent clip classification for {triangle}")

    visibility_ab, isect_ab = classify_segment(camera, Segment3d(a, b))
    visibility_ac, isect_ac = classify_segment(camera, Segment3d(a, c))
    if visibility_ab is SegmentVisibility.PARTIAL and visibility_ac is SegmentVisibility.PARTIAL:
        if isect_ab is not None and isect_ac is not None:
            return _valid((a, isect_ab, isect_ac))
    if visibility_ab is SegmentVisibility.HIDDEN and visibility_ac is SegmentVisibility.HIDDEN:
        return []
    raise ClipClassificationError(f"Inconsistent clip classification for {triangle}")


def _valid(*candidates: Tuple[Point3d, Point3d, Point3d]) -> List[Triangle3d]:
    # Pieces thinner than the collinearity tolerance are not drawable.
    pieces: List[Triangle3d] = []
    for a, b, c in candidates:
        piece = Triangle3d.try_from_points(a, b, c)
        if piece is not None:
            pieces.append(piece)
    return pieces


__all__ = ["SegmentVisibility", "boundary_intersection", "classify_segment", "clip_triangle"]
