"""Frame renderer: clips, projects and rasterizes 3D primitives."""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Protocol, Tuple

from .camera import AngularCamera, Viewport
from .clipping import clip_triangle
from .depth import DepthBuffer
from .geometry import Basis, Point3d, Triangle, Triangle3d, Vector3d
from .raster import BLACK, RGB, PixelBuffer, ScanlineRasterizer
from .shading import (
    CoordinateRecovery,
    CoordinateTranslationFiller,
    DepthTestFiller,
    ObjectColorFiller,
    RecoveringFiller,
    ScreenColorFiller,
    ScreenSpaceAdapter,
)

ProjectedTriangle = Tuple[Triangle3d, Triangle, Tuple[float, float, float]]


class Renderer:
    """Draws triangles and parallelograms into one frame.

    The renderer owns the frame's depth buffer and viewport and writes into
    the supplied pixel buffer in place. Camera and viewport are fixed for the
    renderer's lifetime; build a new renderer for the next frame.
    """

    def __init__(
        self,
        buffer: PixelBuffer,
        camera: AngularCamera | None = None,
        *,
        background: RGB = BLACK,
    ) -> None:
        self.buffer = buffer
        self.camera = camera if camera is not None else AngularCamera()
        self.viewport = Viewport(buffer.width, buffer.height)
        self.depth_buffer = DepthBuffer(buffer.width, buffer.height)
        self.rasterizer = ScanlineRasterizer(buffer)
        self.background = background

    def clear(self) -> None:
        self.buffer.clear(self.background)
        self.depth_buffer.clear()

    def fill_triangle(self, triangle: Triangle3d, filler: ObjectColorFiller) -> None:
        """Fill ``triangle``; the filler sees coordinates along (b - a, c - a)."""
        basis = (triangle.b - triangle.a, triangle.c - triangle.a)
        self.fill_triangle_with_basis(triangle, filler, basis)

    def fill_triangle_with_basis(
        self,
        triangle: Triangle3d,
        filler: ObjectColorFiller,
        basis_vectors: Tuple[Vector3d, Vector3d],
        basis_origin: Optional[Point3d] = None,
    ) -> None:
        origin = basis_origin if basis_origin is not None else triangle.a
        basis = Basis(origin, basis_vectors[0], basis_vectors[1])
        for piece, on_screen, distances in self._projected_pieces(triangle):
            recovery = CoordinateRecovery(self.camera, self.viewport, piece, on_screen)
            adapted = CoordinateTranslationFiller(filler, recovery, distances, basis)
            self._rasterize(on_screen, adapted)

    def fill_screen_triangle(self, triangle: Triangle3d, filler: ScreenColorFiller) -> None:
        """Fill ``triangle`` with a filler that works on raw pixels."""
        for piece, on_screen, distances in self._projected_pieces(triangle):
            recovery = CoordinateRecovery(self.camera, self.viewport, piece, on_screen)
            self._rasterize(on_screen, ScreenSpaceAdapter(filler, recovery, distances))

    def fill_parallelogram(
        self,
        origin: Point3d,
        vec1: Vector3d,
        vec2: Vector3d,
        filler_factory: Callable[[], ObjectColorFiller],
    ) -> None:
        """Fill the parallelogram spanned by ``vec1`` and ``vec2`` at ``origin``.

        Both halves share the diagonal and the basis (vec1, vec2), so filler
        coordinates cover ``[0, 1] x [0, 1]`` across the whole shape.
        """
        basis = Basis(origin, vec1, vec2)
        far = origin + vec1 + vec2
        halves = (
            Triangle3d(origin, origin + vec1, origin + vec2),
            Triangle3d(far, origin + vec2, origin + vec1),
        )
        for half in halves:
            self.fill_triangle_with_basis(half, filler_factory(), (basis.u, basis.v), basis.origin)

    # Internal helpers -------------------------------------------------

    def _rasterize(self, on_screen: Triangle, filler: RecoveringFiller) -> None:
        self.rasterizer.fill_triangle(on_screen, DepthTestFiller(filler, self.depth_buffer))

    def _projected_pieces(self, triangle: Triangle3d) -> Iterator[ProjectedTriangle]:
        for piece in self.visible_pieces(triangle):
            projected = self.project(piece)
            if projected is not None:
                on_screen, distances = projected
                yield piece, on_screen, distances

    def visible_pieces(self, triangle: Triangle3d) -> List[Triangle3d]:
        """Camera-local triangles covering the part of ``triangle`` in view."""
        camera = self.camera
        adjusted = Triangle3d.try_from_points(
            camera.adjust(triangle.a), camera.adjust(triangle.b), camera.adjust(triangle.c)
        )
        if adjusted is None:
            return []
        return clip_triangle(camera, adjusted)

    def project(self, piece: Triangle3d) -> Optional[Tuple[Triangle, Tuple[float, float, float]]]:
        """Pixel triangle and vertex distances, or None when it collapses on screen."""
        points = []
        distances = []
        for vertex in piece.points():
            coord, distance = self.camera.translate(vertex)
            points.append(self.viewport.translate(coord))
            distances.append(distance)
        on_screen = Triangle.try_from_points(*points)
        if on_screen is None:
            return None
        return on_screen, (distances[0], distances[1], distances[2])


class Renderable(Protocol):
    def render(self, renderer: Renderer) -> None:
        ...


def render_frame(
    scene: Renderable,
    buffer: PixelBuffer,
    camera: AngularCamera | None = None,
    *,
    background: RGB = BLACK,
) -> Renderer:
    """Clear ``buffer``, draw ``scene`` into it and return the frame's renderer."""
    renderer = Renderer(buffer, camera, background=background)
    renderer.clear()
    scene.render(renderer)
    return renderer


__all__ = ["Renderable", "Renderer", "render_frame"]
