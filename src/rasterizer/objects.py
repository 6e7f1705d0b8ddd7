"""Predefined demo scene."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import partial
from typing import Dict, Optional, Tuple, cast

from .engine import Renderer
from .geometry import Angle, Point, Point2d, Point3d, Triangle3d, Vector3d
from .raster import RGB
from .shading import FunctionObjectFiller, ObjectCoord, object_filler, screen_filler, solid, world_filler

# Screen y grows with world y, so "down" on screen is +y in the world.
FLOOR_Y = 1.5


def ansi_component_colour(levels: Tuple[int, int, int]) -> RGB:
    """Expand a 0-5 colour-cube triple to 8-bit channels."""
    return RGB(*(level * 51 for level in levels))


CUBE_COLOURS: Dict[str, RGB] = {
    "front": ansi_component_colour((5, 2, 0)),
    "back": ansi_component_colour((0, 5, 2)),
    "left": ansi_component_colour((5, 0, 4)),
    "right": ansi_component_colour((1, 4, 5)),
    "top": ansi_component_colour((5, 5, 0)),
    "bottom": ansi_component_colour((0, 2, 5)),
}

# face -> (origin corner, corner along first edge, corner along second edge)
_CUBE_FACES: Dict[str, Tuple[str, str, str]] = {
    "front": ("lbf", "rbf", "ltf"),
    "back": ("lbb", "rbb", "ltb"),
    "left": ("lbf", "lbb", "ltf"),
    "right": ("rbf", "rbb", "rtf"),
    "top": ("ltf", "rtf", "ltb"),
    "bottom": ("lbf", "rbf", "lbb"),
}

_CHECKER_LIGHT = ansi_component_colour((4, 4, 4))
_CHECKER_DARK = ansi_component_colour((2, 2, 3))


def cube_corners(centre: Point3d, size: float, spin: Angle) -> Dict[str, Point3d]:
    """Corners of a cube around ``centre`` turned by ``spin`` about the vertical axis."""
    half = size / 2.0
    corners: Dict[str, Point3d] = {}
    for name in ("lbf", "rbf", "rtf", "ltf", "lbb", "rbb", "rtb", "ltb"):
        offset = Vector3d(
            half if name[0] == "r" else -half,
            # "top" faces the viewer's up, which is -y on screen.
            -half if name[1] == "t" else half,
            half if name[2] == "b" else -half,
        )
        corners[name] = centre + offset.rotate_azimuth(spin)
    return corners


def checkerboard(coord: ObjectCoord, *, tile: float, offset: float = 0.0) -> RGB:
    """World-space checkerboard over the xz plane."""
    point = cast(Point3d, coord)
    column = math.floor((point.x + offset) / tile)
    row = math.floor(point.z / tile)
    return _CHECKER_LIGHT if (column + row) % 2 == 0 else _CHECKER_DARK


def corner_gradient(coord: ObjectCoord) -> RGB:
    """Red at the origin vertex, green and blue towards the other two."""
    point = cast(Point2d, coord)
    s = min(max(point.x, 0.0), 1.0)
    t = min(max(point.y, 0.0), 1.0)
    r = max(0.0, 1.0 - s - t)
    return RGB.from_floats((r, s, t))


def _inside_disc(coord: ObjectCoord) -> bool:
    point = cast(Point2d, coord)
    return (point.x - 0.5) ** 2 + (point.y - 0.5) ** 2 <= 0.25


def disc_filler(colour: RGB, rim: RGB) -> FunctionObjectFiller:
    """Unit-square filler that only paints the inscribed disc."""

    def colour_at(coord: ObjectCoord) -> Optional[RGB]:
        if not _inside_disc(coord):
            return None
        point = cast(Point2d, coord)
        radius = math.hypot(point.x - 0.5, point.y - 0.5) * 2.0
        return colour.lerp(rim, radius)

    return FunctionObjectFiller(colour_at, should_draw=_inside_disc)


def stripes(point: Point, *, width: int = 4, phase: int = 0) -> RGB:
    band = ((point.x + point.y + phase) // width) % 2
    return RGB(230, 230, 230) if band == 0 else RGB(40, 40, 160)


@dataclass(frozen=True, slots=True)
class DemoScene:
    """Everything the demo draws, posed for a given time in seconds."""

    time: float = 0.0

    def render(self, renderer: Renderer) -> None:
        self._floor(renderer)
        self._cube(renderer)
        self._gradient_triangle(renderer)
        self._disc(renderer)
        self._striped_triangle(renderer)

    def _floor(self, renderer: Renderer) -> None:
        renderer.fill_parallelogram(
            Point3d(-8.0, FLOOR_Y, 0.5),
            Vector3d(16.0, 0.0, 0.0),
            Vector3d(0.0, 0.0, 16.0),
            lambda: world_filler(partial(checkerboard, tile=1.0, offset=self.time * 0.5)),
        )

    def _cube(self, renderer: Renderer) -> None:
        corners = cube_corners(Point3d(0.0, 0.3, 5.0), 1.6, Angle.from_radians(self.time * 0.9))
        for face, (origin, along_u, along_v) in _CUBE_FACES.items():
            start = corners[origin]
            renderer.fill_parallelogram(
                start,
                corners[along_u] - start,
                corners[along_v] - start,
                partial(solid, CUBE_COLOURS[face]),
            )

    def _gradient_triangle(self, renderer: Renderer) -> None:
        lift = 0.3 * math.sin(self.time)
        triangle = Triangle3d(
            Point3d(-3.5, 1.0 + lift, 6.0),
            Point3d(-1.5, 1.0 + lift, 6.5),
            Point3d(-2.5, -1.0 + lift, 6.2),
        )
        renderer.fill_triangle(triangle, object_filler(corner_gradient))

    def _disc(self, renderer: Renderer) -> None:
        tilt = Angle.from_radians(0.5 * math.sin(self.time * 0.7))
        renderer.fill_parallelogram(
            Point3d(1.8, -0.8, 6.0),
            Vector3d(1.8, 0.0, 0.0).rotate_azimuth(tilt),
            Vector3d(0.0, 1.8, 0.0),
            partial(disc_filler, RGB(255, 200, 40), RGB(200, 40, 20)),
        )

    def _striped_triangle(self, renderer: Renderer) -> None:
        triangle = Triangle3d(
            Point3d(-1.5, -1.8, 8.0),
            Point3d(1.5, -1.8, 8.0),
            Point3d(0.0, -3.0, 8.5),
        )
        phase = int(self.time * 8.0)
        renderer.fill_screen_triangle(triangle, screen_filler(partial(stripes, phase=phase)))


__all__ = [
    "CUBE_COLOURS",
    "DemoScene",
    "FLOOR_Y",
    "ansi_component_colour",
    "checkerboard",
    "corner_gradient",
    "cube_corners",
    "disc_filler",
    "stripes",
]
