"""Colour fillers and the screen -> object space coordinate recovery behind them.

The angular projection is not affine, so interpolating screen-space
barycentric weights over the original vertices would be wrong. Instead a
pixel is mapped back to 3D with two nested exact 1D recoveries: first along
the edge opposite vertex ``A`` (to the "pivot" where the line from ``A``
through the pixel meets it), then along ``A``-pivot. Each 1D recovery
intersects the 3D line through the two known points with the plane through
the camera that contains the pixel's viewing ray.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from .camera import AngularCamera, Viewport
from .depth import DepthBuffer
from .geometry import (
    Basis,
    Line,
    Line3d,
    Plane,
    Point,
    Point2d,
    Point3d,
    Triangle,
    Triangle3d,
    Vector3d,
)
from .raster import RGB

ObjectCoord = Union[Point2d, Point3d]


class CoordinateSpace(Enum):
    BASIS = "basis"
    WORLD = "world"


class ObjectColorFiller(ABC):
    """Colours a pixel from the object-space coordinate it was recovered to.

    By default the coordinate is a ``Point2d`` expressed in the caller's
    basis; fillers with ``coordinate_space = CoordinateSpace.WORLD`` receive
    the world-space ``Point3d`` instead. Returning ``None`` skips the pixel.
    """

    coordinate_space = CoordinateSpace.BASIS

    @abstractmethod
    def color_at(self, coord: ObjectCoord) -> Optional[RGB]:
        raise NotImplementedError

    def should_draw(self, coord: ObjectCoord) -> bool:
        return True


class ScreenColorFiller(ABC):
    """Colours a pixel from its raw screen position."""

    @abstractmethod
    def color_at(self, point: Point) -> Optional[RGB]:
        raise NotImplementedError

    def should_draw(self, point: Point) -> bool:
        return True


class FunctionObjectFiller(ObjectColorFiller):
    def __init__(
        self,
        func: Callable[[ObjectCoord], Optional[RGB]],
        *,
        should_draw: Optional[Callable[[ObjectCoord], bool]] = None,
        coordinate_space: CoordinateSpace = CoordinateSpace.BASIS,
    ) -> None:
        self._func = func
        self._should_draw = should_draw
        self.coordinate_space = coordinate_space

    def color_at(self, coord: ObjectCoord) -> Optional[RGB]:
        return self._func(coord)

    def should_draw(self, coord: ObjectCoord) -> bool:
        if self._should_draw is None:
            return True
        return self._should_draw(coord)


class FunctionScreenFiller(ScreenColorFiller):
    def __init__(
        self,
        func: Callable[[Point], Optional[RGB]],
        *,
        should_draw: Optional[Callable[[Point], bool]] = None,
    ) -> None:
        self._func = func
        self._should_draw = should_draw

    def color_at(self, point: Point) -> Optional[RGB]:
        return self._func(point)

    def should_draw(self, point: Point) -> bool:
        if self._should_draw is None:
            return True
        return self._should_draw(point)


def object_filler(func: Callable[[ObjectCoord], Optional[RGB]]) -> FunctionObjectFiller:
    return FunctionObjectFiller(func)


def world_filler(func: Callable[[ObjectCoord], Optional[RGB]]) -> FunctionObjectFiller:
    return FunctionObjectFiller(func, coordinate_space=CoordinateSpace.WORLD)


def screen_filler(func: Callable[[Point], Optional[RGB]]) -> FunctionScreenFiller:
    return FunctionScreenFiller(func)


def solid(color: RGB) -> FunctionObjectFiller:
    return FunctionObjectFiller(lambda _coord: color)


# Coordinate recovery ---------------------------------------------------


class CoordinateRecovery:
    """Maps pixels of a projected triangle back to camera-local 3D points."""

    def __init__(
        self,
        camera: AngularCamera,
        viewport: Viewport,
        triangle: Triangle3d,
        triangle_on_screen: Triangle,
    ) -> None:
        self.camera = camera
        self.viewport = viewport
        self.triangle = triangle
        self.triangle_on_screen = triangle_on_screen

    def recover(self, point: Point) -> Optional[Point3d]:
        """Camera-local point whose projection is ``point``, if it can be found."""
        screen = self.triangle_on_screen
        triangle = self.triangle
        if point == screen.a:
            return triangle.a
        if point == screen.b:
            return triangle.b
        if point == screen.c:
            return triangle.c

        pivot = Line.from_points(screen.b, screen.c).try_intersect(Line.from_points(screen.a, point))
        if pivot is None:
            return None
        pivot_3d = self.recover_along(pivot, (screen.b, triangle.b), (screen.c, triangle.c))
        if pivot_3d is None or point == pivot:
            return pivot_3d
        return self.recover_along(point, (screen.a, triangle.a), (pivot, pivot_3d))

    def recover_along(
        self,
        point: Point,
        start: Tuple[Point, Point3d],
        end: Tuple[Point, Point3d],
    ) -> Optional[Point3d]:
        """Point on the 3D segment ``start``-``end`` that projects onto ``point``.

        The plane through the camera spanned by the viewing rays of ``point``
        and of ``point`` shifted one pixel across the screen segment cuts the
        3D line through both ends at the wanted point.
        """
        (start_2d, start_3d), (end_2d, end_3d) = start, end
        if start_2d == end_2d:
            return start_3d
        line = Line3d.try_from_points(start_3d, end_3d)
        if line is None:
            return start_3d

        across = (end_2d - start_2d).perp()
        length = across.norm()
        ray = self._ray(point.x, point.y)
        shifted_ray = self._ray(point.x + across.x / length, point.y + across.y / length)
        plane = Plane.try_from_origin_and_vectors(Point3d.origin(), ray, shifted_ray)
        if plane is None:
            return None
        return plane.intersect(line)

    def to_world(self, point: Point3d) -> Point3d:
        return self.camera.unadjust(point)

    def basis_coordinates(self, point: Point3d, basis: Basis) -> Point2d:
        """Coordinates of the camera-local ``point`` in a world-space basis."""
        return basis.coordinates_of(self.to_world(point))

    def _ray(self, x: float, y: float) -> Vector3d:
        return self.camera.ray_direction(self.viewport.untranslate_xy(x, y))


class RecoveringFiller(ScreenColorFiller):
    """Screen filler that knows the 3D point and distance behind each pixel.

    Recovery results for the most recent pixel are memoized, so asking for
    ``should_draw``, ``depth_of`` and ``color_at`` in turn recovers once.
    """

    def __init__(self, recovery: CoordinateRecovery, distances: Tuple[float, float, float]) -> None:
        self.recovery = recovery
        self.distances = distances
        triangle = recovery.triangle
        self._edge_basis = Basis(triangle.a, triangle.b - triangle.a, triangle.c - triangle.a)
        self._cached_point: Optional[Point] = None
        self._cached_coords: Optional[Point3d] = None

    def coords_of(self, point: Point) -> Optional[Point3d]:
        if point != self._cached_point:
            self._cached_coords = self.recovery.recover(point)
            self._cached_point = point
        return self._cached_coords

    def depth_of(self, point: Point) -> Optional[float]:
        """Vertex distances blended by the pixel's coordinate along the edges."""
        coords = self.coords_of(point)
        if coords is None:
            return None
        weights = self._edge_basis.coordinates_of(coords)
        distance_a, distance_b, distance_c = self.distances
        return (
            distance_a
            + weights.x * (distance_b - distance_a)
            + weights.y * (distance_c - distance_a)
        )


class CoordinateTranslationFiller(RecoveringFiller):
    """Adapts an object-space filler to screen pixels of one drawn triangle."""

    def __init__(
        self,
        inner: ObjectColorFiller,
        recovery: CoordinateRecovery,
        distances: Tuple[float, float, float],
        basis: Basis,
    ) -> None:
        super().__init__(recovery, distances)
        self.inner = inner
        self.basis = basis
        self._cached_object_point: Optional[Point] = None
        self._cached_object_coord: Optional[ObjectCoord] = None

    def object_coord_of(self, point: Point) -> Optional[ObjectCoord]:
        if point == self._cached_object_point:
            return self._cached_object_coord
        coords = self.coords_of(point)
        result: Optional[ObjectCoord] = None
        if coords is not None:
            if self.inner.coordinate_space is CoordinateSpace.WORLD:
                result = self.recovery.to_world(coords)
            else:
                result = self.recovery.basis_coordinates(coords, self.basis)
        self._cached_object_point = point
        self._cached_object_coord = result
        return result

    def should_draw(self, point: Point) -> bool:
        coord = self.object_coord_of(point)
        return coord is not None and self.inner.should_draw(coord)

    def color_at(self, point: Point) -> Optional[RGB]:
        coord = self.object_coord_of(point)
        if coord is None:
            return None
        return self.inner.color_at(coord)


class ScreenSpaceAdapter(RecoveringFiller):
    """Gives a plain screen-space filler the depth of the triangle it paints."""

    def __init__(
        self,
        inner: ScreenColorFiller,
        recovery: CoordinateRecovery,
        distances: Tuple[float, float, float],
    ) -> None:
        super().__init__(recovery, distances)
        self.inner = inner

    def should_draw(self, point: Point) -> bool:
        return self.inner.should_draw(point)

    def color_at(self, point: Point) -> Optional[RGB]:
        return self.inner.color_at(point)


class DepthTestFiller:
    """Gates an inner filler behind the depth buffer.

    Order per pixel: bounds, ``should_draw``, depth, ``try_update`` and only
    then the inner colour. A pixel visited twice at the same depth keeps its
    first colour.
    """

    def __init__(self, inner: RecoveringFiller, depth_buffer: DepthBuffer) -> None:
        self.inner = inner
        self.depth_buffer = depth_buffer

    def color_at(self, point: Point) -> Optional[RGB]:
        if not self.depth_buffer.contains(point):
            return None
        inner = self.inner
        if not inner.should_draw(point):
            return None
        depth = inner.depth_of(point)
        if depth is None:
            return None
        if not self.depth_buffer.try_update(point.x, point.y, depth):
            return None
        return inner.color_at(point)


__all__ = [
    "CoordinateRecovery",
    "CoordinateSpace",
    "CoordinateTranslationFiller",
    "DepthTestFiller",
    "FunctionObjectFiller",
    "FunctionScreenFiller",
    "ObjectColorFiller",
    "RecoveringFiller",
    "ScreenColorFiller",
    "ScreenSpaceAdapter",
    "object_filler",
    "screen_filler",
    "solid",
    "world_filler",
]
