"""Angular camera model and the normalized-to-pixel viewport mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Tuple

from .errors import InvalidProjectionError
from .geometry import Angle, Point, Point2d, Point3d, Vector3d

# Stricter than the projector's own ``x > 0`` precondition.
TRANSLATABLE_MIN_X = 1e-3


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True, slots=True)
class AngularCamera:
    """Camera that maps directions to the screen by their angles.

    A camera-local point is described by its azimuth (angle from +x towards
    +z) and its vertical angle above the horizontal plane. Each angle is sent
    through ``tan(angle) * cot(fov / 2) * 0.5 + 0.5`` to obtain a normalized
    screen coordinate in ``[0, 1]`` for directions inside the field of view.
    """

    position: Point3d = Point3d(0.0, 0.0, 0.0)
    azimuth: Angle = Angle.quarter_circle()
    vertical_angle: Angle = Angle.zero()
    hfov: Angle = Angle.from_degrees(100.0)
    vfov: Angle = Angle.from_degrees(70.0)
    _h_factor: float = field(init=False, repr=False, compare=False)
    _v_factor: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name, fov in (("hfov", self.hfov), ("vfov", self.vfov)):
            if not 0.0 < fov.radians < math.pi:
                raise ValueError(f"{name} must lie strictly between 0 and 180 degrees, got {fov.degrees}")
        object.__setattr__(self, "_h_factor", 0.5 / (self.hfov * 0.5).tan())
        object.__setattr__(self, "_v_factor", 0.5 / (self.vfov * 0.5).tan())

    def with_position(self, position: Point3d) -> "AngularCamera":
        return replace(self, position=position)

    def with_angles(self, azimuth: Angle, vertical_angle: Angle) -> "AngularCamera":
        return replace(self, azimuth=azimuth, vertical_angle=vertical_angle)

    def turned(self, delta_azimuth: Angle, delta_vangle: Angle) -> "AngularCamera":
        return self.with_angles(
            (self.azimuth + delta_azimuth).normalized_signed(),
            self.vertical_angle + delta_vangle,
        )

    def adjust(self, point: Point3d) -> Point3d:
        """World space -> camera-local space (camera looks along +x)."""
        return self.adjust_vector(point - self.position).as_point()

    def adjust_vector(self, vector: Vector3d) -> Vector3d:
        return vector.rotate_azimuth(-self.azimuth).rotate_vangle(-self.vertical_angle)

    def unadjust(self, local_point: Point3d) -> Point3d:
        offset = local_point.as_vector().rotate_vangle(self.vertical_angle).rotate_azimuth(self.azimuth)
        return self.position + offset

    def can_translate_point(self, adjusted_point: Point3d) -> bool:
        return adjusted_point.x > TRANSLATABLE_MIN_X

    def translate(self, adjusted_point: Point3d) -> Tuple[Point2d, float]:
        if adjusted_point.x <= 0.0:
            raise InvalidProjectionError(
                f"A point behind the camera cannot be projected onto the screen: {adjusted_point}"
            )
        vector = adjusted_point.as_vector()
        x = vector.azimuth().tan() * self._h_factor + 0.5
        y = vector.vangle().tan() * self._v_factor + 0.5
        return Point2d(x, y), vector.norm()

    def ray_direction(self, coord: Point2d) -> Vector3d:
        """Camera-local direction that ``translate`` maps onto ``coord``."""
        tan_azimuth = (coord.x - 0.5) / self._h_factor
        tan_vangle = (coord.y - 0.5) / self._v_factor
        return Vector3d(1.0, tan_vangle * math.hypot(1.0, tan_azimuth), tan_azimuth)


@dataclass(frozen=True, slots=True)
class Viewport:
    """Maps ``[0, 1] x [0, 1]`` screen coordinates to integer pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("Viewport requires width and height >= 1")

    def translate(self, coord: Point2d) -> Point:
        return Point(
            _round_half_away(coord.x * (self.width - 1)),
            _round_half_away(coord.y * (self.height - 1)),
        )

    def untranslate(self, point: Point) -> Point2d:
        return self.untranslate_xy(point.x, point.y)

    def untranslate_xy(self, x: float, y: float) -> Point2d:
        return Point2d(x / max(1, self.width - 1), y / max(1, self.height - 1))

    def contains(self, point: Point) -> bool:
        return 0 <= point.x < self.width and 0 <= point.y < self.height


__all__ = ["AngularCamera", "TRANSLATABLE_MIN_X", "Viewport"]
