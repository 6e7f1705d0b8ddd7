"""Pixel storage and exact-integer scanline triangle rasterization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Set, Tuple, Union

from .geometry import GluedTriangle, HorizontalSegment, Line, Point, Triangle

BufferLike = Union[bytearray, memoryview]


@dataclass(frozen=True, slots=True)
class RGB:
    """24-bit colour; stored as B, G, R in the pixel buffer."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"RGB channels must lie in 0..255, got {self}")

    @classmethod
    def from_floats(cls, rgb: Tuple[float, float, float]) -> "RGB":
        """Build a colour from channel intensities in ``[0, 1]`` (clamped)."""
        return cls(*(int(round(max(0.0, min(1.0, channel)) * 255)) for channel in rgb))

    def lerp(self, other: "RGB", t: float) -> "RGB":
        t = max(0.0, min(1.0, t))
        return RGB(
            round(self.r + (other.r - self.r) * t),
            round(self.g + (other.g - self.g) * t),
            round(self.b + (other.b - self.b) * t),
        )


BLACK = RGB(0, 0, 0)


class PixelFiller(Protocol):
    def color_at(self, point: Point) -> Optional[RGB]:
        ...


class PixelBuffer:
    """Row-major raster with 4 bytes per pixel in B, G, R, pad order.

    The buffer may wrap memory owned by a host surface; every write is range
    checked and silently ignored outside the raster.
    """

    BYTES_PER_PIXEL = 4

    def __init__(self, width: int, height: int, data: Optional[BufferLike] = None) -> None:
        if width < 1 or height < 1:
            raise ValueError("PixelBuffer requires width and height >= 1")
        expected = width * height * self.BYTES_PER_PIXEL
        if data is None:
            data = bytearray(expected)
        view = memoryview(data).cast("B")
        if view.readonly:
            raise ValueError("PixelBuffer requires a writable buffer")
        if view.nbytes != expected:
            raise ValueError(f"Pixel data holds {view.nbytes} bytes, expected {expected}")
        self.width = width
        self.height = height
        self._data = view

    @property
    def data(self) -> memoryview:
        return self._data

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set(self, x: int, y: int, color: RGB) -> None:
        if not self.in_bounds(x, y):
            return
        index = (y * self.width + x) * self.BYTES_PER_PIXEL
        data = self._data
        data[index] = color.b
        data[index + 1] = color.g
        data[index + 2] = color.r

    def get(self, x: int, y: int) -> Optional[RGB]:
        if not self.in_bounds(x, y):
            return None
        index = (y * self.width + x) * self.BYTES_PER_PIXEL
        data = self._data
        return RGB(data[index + 2], data[index + 1], data[index])

    def clear(self, color: RGB = BLACK) -> None:
        self._data[:] = bytes((color.b, color.g, color.r, 0)) * (self.width * self.height)

    def to_ppm(self) -> bytes:
        """Encode the raster as a binary (P6) PPM image."""
        rgb = bytearray(self.width * self.height * 3)
        rgb[0::3] = self._data[2::4].tobytes()
        rgb[1::3] = self._data[1::4].tobytes()
        rgb[2::3] = self._data[0::4].tobytes()
        header = f"P6\n{self.width} {self.height}\n255\n".encode("ascii")
        return header + bytes(rgb)


class ScanlineRasterizer:
    """Fills screen-space triangles row by row using exact line intersections.

    A triangle is cut along the row of its middle vertex into two glued
    triangles (a horizontal segment plus a free apex). Each glued triangle is
    walked from its segment to its apex; the two slanted edges bound every
    row. Pixels on the shared row are visited by both halves.
    """

    def __init__(self, buffer: PixelBuffer) -> None:
        self.buffer = buffer

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    def fill_triangle(self, triangle: Triangle, filler: PixelFiller) -> None:
        for glued in self.split(triangle):
            self.fill_glued_triangle(glued, filler)

    def fill_glued_triangle(self, glued: GluedTriangle, filler: PixelFiller) -> None:
        buffer = self.buffer
        for point in self.scan_glued_triangle(glued):
            color = filler.color_at(point)
            if color is not None:
                buffer.set(point.x, point.y, color)

    def split(self, triangle: Triangle) -> Tuple[GluedTriangle, ...]:
        a, b, c = triangle.ysort()
        split_point = Line.horizontal(b.y).intersect(Line.from_points(a, c))
        segment = HorizontalSegment.from_points(b, split_point)
        halves = (GluedTriangle.try_from_parts(segment, a), GluedTriangle.try_from_parts(segment, c))
        return tuple(half for half in halves if half is not None)

    def scan_triangle(self, triangle: Triangle) -> Iterator[Point]:
        for glued in self.split(triangle):
            yield from self.scan_glued_triangle(glued)

    def scan_glued_triangle(self, glued: GluedTriangle) -> Iterator[Point]:
        segment = glued.segment
        low, high = sorted((segment.y, glued.apex.y))
        left_line = Line.from_points(segment.left, glued.apex)
        right_line = Line.from_points(segment.right, glued.apex)
        max_x = self.width - 1

        for y in range(max(low, 0), min(high, self.height - 1) + 1):
            row = Line.horizontal(y)
            left = row.intersect(left_line).x
            right = row.intersect(right_line).x
            for x in range(max(left, 0), min(right, max_x) + 1):
                yield Point(x, y)

    def covered_pixels(self, triangle: Triangle) -> Set[Point]:
        return set(self.scan_triangle(triangle))


__all__ = ["BLACK", "PixelBuffer", "PixelFiller", "RGB", "ScanlineRasterizer"]
