"""Exact integer 2D geometry and floating-point 3D geometry for the rasterizer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple, TypeVar, Union

from .errors import AmbiguousPlaneError, ConstructionError, ParallelLinesError

Number = Union[int, float]
_P = TypeVar("_P")

APPROX_TOLERANCE = 1e-10
COLLINEAR_TOLERANCE = 1e-10
PARALLEL_TOLERANCE = 1e-12


def _div_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _sorted3(points: Sequence[_P], key: Callable[[_P], tuple]) -> Tuple[_P, _P, _P]:
    a, b, c = sorted(points, key=key)
    return a, b, c


# 2D --------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """Integer pixel location."""

    x: int
    y: int

    def __add__(self, other: "Vector") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Union["Point", "Vector"]) -> Union["Point", "Vector"]:
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, slots=True)
class Vector:
    """2D displacement; integer when built from pixels, float otherwise."""

    x: Number
    y: Number

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y)

    def __mul__(self, scalar: Number) -> "Vector":
        if not isinstance(scalar, (int, float)):
            raise TypeError("Vector can only be multiplied by a scalar")
        return Vector(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: Number) -> "Vector":
        return self.__mul__(scalar)

    def dot(self, other: "Vector") -> Number:
        return self.x * other.x + self.y * other.y

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def perp(self) -> "Vector":
        return Vector(-self.y, self.x)

    def azimuth(self) -> "Angle":
        return Angle(math.atan2(self.y, self.x))


@dataclass(frozen=True, slots=True)
class Point2d:
    """Floating-point 2D coordinate (normalized screen space or basis space)."""

    x: float
    y: float

    def __add__(self, other: Vector) -> "Point2d":
        return Point2d(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2d") -> Vector:
        return Vector(self.x - other.x, self.y - other.y)


# Angles ----------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class Angle:
    """An angle stored in radians."""

    radians: float

    @classmethod
    def from_radians(cls, radians: float) -> "Angle":
        return cls(float(radians))

    @classmethod
    def from_degrees(cls, degrees: float) -> "Angle":
        return cls(math.radians(degrees))

    @classmethod
    def zero(cls) -> "Angle":
        return cls(0.0)

    @classmethod
    def quarter_circle(cls) -> "Angle":
        return cls(math.pi / 2.0)

    @property
    def degrees(self) -> float:
        return math.degrees(self.radians)

    def __add__(self, other: "Angle") -> "Angle":
        return Angle(self.radians + other.radians)

    def __sub__(self, other: "Angle") -> "Angle":
        return Angle(self.radians - other.radians)

    def __neg__(self) -> "Angle":
        return Angle(-self.radians)

    def __mul__(self, scalar: Number) -> "Angle":
        if not isinstance(scalar, (int, float)):
            raise TypeError("Angle can only be multiplied by a scalar")
        return Angle(self.radians * scalar)

    def __rmul__(self, scalar: Number) -> "Angle":
        return self.__mul__(scalar)

    def __truediv__(self, other: Union["Angle", Number]) -> Union["Angle", float]:
        if isinstance(other, Angle):
            return self.radians / other.radians
        if other == 0:
            raise ZeroDivisionError("Division by zero in Angle")
        return Angle(self.radians / other)

    def normalized_signed(self) -> "Angle":
        """Equivalent angle in [-pi, pi]."""
        return Angle(math.remainder(self.radians, math.tau))

    def normalized_positive(self) -> "Angle":
        """Equivalent angle in [0, 2*pi)."""
        wrapped = math.fmod(self.radians, math.tau)
        if wrapped < 0.0:
            wrapped += math.tau
        if wrapped >= math.tau:
            wrapped = 0.0
        return Angle(wrapped)

    def tan(self) -> float:
        return math.tan(self.radians)


# Exact lines and triangles -----------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Line:
    """Line ``a*x + b*y + c = 0`` with exact integer coefficients.

    Two lines compare equal when their coefficient triples are proportional,
    so the orientation of the defining points does not matter.
    """

    a: int
    b: int
    c: int

    @classmethod
    def from_points(cls, p: Point, q: Point) -> "Line":
        if p == q:
            raise ConstructionError("More than one line passes through two coinciding points")
        if p.x == q.x:
            return cls(1, 0, -p.x)
        return cls(p.y - q.y, q.x - p.x, p.x * q.y - p.y * q.x)

    @classmethod
    def try_from_points(cls, p: Point, q: Point) -> Optional["Line"]:
        try:
            return cls.from_points(p, q)
        except ConstructionError:
            return None

    @classmethod
    def horizontal(cls, y: int) -> "Line":
        return cls(0, 1, -y)

    def canonical(self) -> Tuple[int, int, int]:
        divisor = math.gcd(self.a, self.b, self.c)
        if divisor == 0:
            return (0, 0, 0)
        a, b, c = self.a // divisor, self.b // divisor, self.c // divisor
        if a < 0 or (a == 0 and b < 0):
            a, b, c = -a, -b, -c
        return (a, b, c)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.canonical() == other.canonical()

    def __hash__(self) -> int:
        return hash(self.canonical())

    def contains_point(self, point: Point) -> bool:
        return self.a * point.x + self.b * point.y + self.c == 0

    def try_intersect(self, other: "Line") -> Optional[Point]:
        """Cramer's rule on the integer coefficients, truncating toward zero."""
        denominator = self.b * other.a - self.a * other.b
        if denominator == 0:
            return None
        x_numerator = self.c * other.b - self.b * other.c
        y_numerator = self.a * other.c - self.c * other.a
        return Point(
            _div_toward_zero(x_numerator, denominator),
            _div_toward_zero(y_numerator, denominator),
        )

    def intersect(self, other: "Line") -> Point:
        point = self.try_intersect(other)
        if point is None:
            raise ParallelLinesError(f"{self} and {other} do not intersect in a single point")
        return point


def _lies_on_2d(point: Point, a: Point, b: Point) -> bool:
    return Line.from_points(a, b).contains_point(point)


@dataclass(frozen=True, slots=True)
class Triangle:
    """Screen-space triangle with three distinct, non-collinear vertices."""

    a: Point
    b: Point
    c: Point

    def __post_init__(self) -> None:
        a, b, c = self.a, self.b, self.c
        if a == b or b == c or a == c:
            raise ConstructionError(f"Triangle vertices must be distinct: {a}, {b}, {c}")
        if _lies_on_2d(a, b, c) or _lies_on_2d(b, a, c) or _lies_on_2d(c, a, b):
            raise ConstructionError(f"Triangle vertices are collinear: {a}, {b}, {c}")

    @classmethod
    def try_from_points(cls, a: Point, b: Point, c: Point) -> Optional["Triangle"]:
        try:
            return cls(a, b, c)
        except ConstructionError:
            return None

    def points(self) -> Tuple[Point, Point, Point]:
        return self.a, self.b, self.c

    def ysort(self) -> Tuple[Point, Point, Point]:
        return _sorted3(self.points(), key=lambda p: (p.y, p.x))

    def xsort(self) -> Tuple[Point, Point, Point]:
        return _sorted3(self.points(), key=lambda p: (p.x, p.y))


@dataclass(frozen=True, slots=True)
class HorizontalSegment:
    """Horizontal run of pixels from ``left`` spanning ``width`` columns."""

    left: Point
    width: int

    @classmethod
    def from_points(cls, p: Point, q: Point) -> "HorizontalSegment":
        if p.y != q.y:
            raise ConstructionError("Y coordinates of points of a horizontal segment must coincide")
        if p.x > q.x:
            p, q = q, p
        return cls(p, q.x - p.x)

    @property
    def right(self) -> Point:
        return Point(self.left.x + self.width, self.left.y)

    @property
    def y(self) -> int:
        return self.left.y

    def as_line(self) -> Line:
        return Line.horizontal(self.y)


@dataclass(frozen=True, slots=True)
class GluedTriangle:
    """A horizontal segment glued to one free apex off the segment's row."""

    segment: HorizontalSegment
    apex: Point

    def __post_init__(self) -> None:
        if self.segment.as_line().contains_point(self.apex):
            raise ConstructionError(
                "GluedTriangle's free point cannot lie on the same line as its horizontal segment"
            )

    @classmethod
    def try_from_parts(cls, segment: HorizontalSegment, apex: Point) -> Optional["GluedTriangle"]:
        try:
            return cls(segment, apex)
        except ConstructionError:
            return None

    def points(self) -> Tuple[Point, Point, Point]:
        return self.apex, self.segment.left, self.segment.right


# 3D --------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Vector3d:
    """Immutable 3D displacement."""

    x: float
    y: float
    z: float

    def __add__(self, other: "Vector3d") -> "Vector3d":
        return Vector3d(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3d") -> "Vector3d":
        return Vector3d(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3d":
        if not isinstance(scalar, (int, float)):
            raise TypeError("Vector3d can only be multiplied by a scalar")
        return Vector3d(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> "Vector3d":
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> "Vector3d":
        if scalar == 0:
            raise ZeroDivisionError("Division by zero in Vector3d")
        return Vector3d(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> "Vector3d":
        return Vector3d(-self.x, -self.y, -self.z)

    def dot(self, other: "Vector3d") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3d") -> "Vector3d":
        return Vector3d(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def norm(self) -> float:
        return math.sqrt(self.norm_sq())

    def norm_sq(self) -> float:
        return self.dot(self)

    def normalized(self) -> "Vector3d":
        length = self.norm()
        if length <= 1e-12:
            return Vector3d(0.0, 0.0, 0.0)
        return self / length

    def approx(self, other: "Vector3d") -> bool:
        return (self - other).norm_sq() < APPROX_TOLERANCE

    def angle_with(self, other: "Vector3d") -> Angle:
        norms = self.norm() * other.norm()
        if norms == 0.0:
            raise ValueError("The angle with a zero vector is undefined")
        cosine = max(-1.0, min(1.0, self.dot(other) / norms))
        return Angle(math.acos(cosine))

    def onto_xz(self) -> "Vector3d":
        return Vector3d(self.x, 0.0, self.z)

    def azimuth(self) -> Angle:
        """Horizontal angle, measured from +x towards +z."""
        return Angle(math.atan2(self.z, self.x))

    def vangle(self) -> Angle:
        """Elevation above the horizontal xz plane, negative below it."""
        horizontal = self.onto_xz()
        if horizontal.norm_sq() == 0.0:
            if self.y == 0.0:
                return Angle.zero()
            return Angle.quarter_circle() * math.copysign(1.0, self.y)
        magnitude = self.angle_with(horizontal)
        return magnitude * math.copysign(1.0, self.y)

    def rotate_azimuth(self, angle: Angle) -> "Vector3d":
        cos_a, sin_a = math.cos(angle.radians), math.sin(angle.radians)
        return Vector3d(
            self.x * cos_a - self.z * sin_a,
            self.y,
            self.x * sin_a + self.z * cos_a,
        )

    def rotate_vangle(self, angle: Angle) -> "Vector3d":
        cos_a, sin_a = math.cos(angle.radians), math.sin(angle.radians)
        return Vector3d(
            self.x * cos_a - self.y * sin_a,
            self.x * sin_a + self.y * cos_a,
            self.z,
        )

    def as_point(self) -> "Point3d":
        return Point3d(self.x, self.y, self.z)


@dataclass(frozen=True, slots=True)
class Point3d:
    """Immutable position in world or camera-local space."""

    x: float
    y: float
    z: float

    def __add__(self, other: Vector3d) -> "Point3d":
        return Point3d(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Union["Point3d", Vector3d]) -> Union["Point3d", Vector3d]:
        if isinstance(other, Point3d):
            return Vector3d(self.x - other.x, self.y - other.y, self.z - other.z)
        return Point3d(self.x - other.x, self.y - other.y, self.z - other.z)

    @classmethod
    def origin(cls) -> "Point3d":
        return cls(0.0, 0.0, 0.0)

    def as_vector(self) -> Vector3d:
        return Vector3d(self.x, self.y, self.z)


def _collinear_3d(a: Point3d, b: Point3d, c: Point3d) -> bool:
    # sine of the angle at ``a`` compared against the tolerance
    u = b - a
    v = c - a
    scale = u.norm() * v.norm()
    if scale == 0.0:
        return True
    return u.cross(v).norm() <= COLLINEAR_TOLERANCE * scale


@dataclass(frozen=True, slots=True)
class Triangle3d:
    """Triangle with three distinct, non-collinear 3D vertices."""

    a: Point3d
    b: Point3d
    c: Point3d

    def __post_init__(self) -> None:
        a, b, c = self.a, self.b, self.c
        if a == b or b == c or a == c:
            raise ConstructionError(f"Triangle3d vertices must be distinct: {a}, {b}, {c}")
        if _collinear_3d(a, b, c):
            raise ConstructionError(f"Triangle3d vertices are collinear: {a}, {b}, {c}")

    @classmethod
    def try_from_points(cls, a: Point3d, b: Point3d, c: Point3d) -> Optional["Triangle3d"]:
        try:
            return cls(a, b, c)
        except ConstructionError:
            return None

    def points(self) -> Tuple[Point3d, Point3d, Point3d]:
        return self.a, self.b, self.c

    def xsort(self) -> Tuple[Point3d, Point3d, Point3d]:
        return _sorted3(self.points(), key=lambda p: (p.x, p.y, p.z))

    def ysort(self) -> Tuple[Point3d, Point3d, Point3d]:
        return _sorted3(self.points(), key=lambda p: (p.y, p.x, p.z))

    def zsort(self) -> Tuple[Point3d, Point3d, Point3d]:
        return _sorted3(self.points(), key=lambda p: (p.z, p.x, p.y))


@dataclass(frozen=True, slots=True)
class Segment3d:
    a: Point3d
    b: Point3d

    def __post_init__(self) -> None:
        if self.a == self.b:
            raise ConstructionError("Ends of segment cannot coincide")

    @classmethod
    def try_from_points(cls, a: Point3d, b: Point3d) -> Optional["Segment3d"]:
        try:
            return cls(a, b)
        except ConstructionError:
            return None


@dataclass(frozen=True, slots=True)
class Line3d:
    origin: Point3d
    direction: Vector3d

    @classmethod
    def from_points(cls, a: Point3d, b: Point3d) -> "Line3d":
        if (a - b).approx(Vector3d(0.0, 0.0, 0.0)):
            raise ConstructionError(
                "More than one line passes through two coinciding points in 3D space"
            )
        return cls(a, b - a)

    @classmethod
    def try_from_points(cls, a: Point3d, b: Point3d) -> Optional["Line3d"]:
        try:
            return cls.from_points(a, b)
        except ConstructionError:
            return None

    def point_at(self, t: float) -> Point3d:
        return self.origin + self.direction * t


@dataclass(frozen=True, slots=True)
class Plane:
    """Plane ``a*x + b*y + c*z + d = 0``."""

    a: float
    b: float
    c: float
    d: float

    @classmethod
    def from_triangle(cls, triangle: Triangle3d) -> "Plane":
        # (a, b, c) are the cofactors of the 3x3 system, i.e. the edge cross product
        p1, p2, p3 = triangle.points()
        normal = (p2 - p1).cross(p3 - p1)
        d = -normal.dot(p1.as_vector())
        return cls(normal.x, normal.y, normal.z, d)

    @classmethod
    def try_from_origin_and_vectors(
        cls, origin: Point3d, vec1: Vector3d, vec2: Vector3d
    ) -> Optional["Plane"]:
        triangle = Triangle3d.try_from_points(origin, origin + vec1, origin + vec2)
        if triangle is None:
            return None
        return cls.from_triangle(triangle)

    @classmethod
    def from_origin_and_vectors(cls, origin: Point3d, vec1: Vector3d, vec2: Vector3d) -> "Plane":
        plane = cls.try_from_origin_and_vectors(origin, vec1, vec2)
        if plane is None:
            raise AmbiguousPlaneError("Plane is not uniquely determined by collinear vectors")
        return plane

    def coefficients(self) -> Tuple[float, float, float, float]:
        return self.a, self.b, self.c, self.d

    def normal(self) -> Vector3d:
        return Vector3d(self.a, self.b, self.c)

    def evaluate(self, point: Point3d) -> float:
        return self.a * point.x + self.b * point.y + self.c * point.z + self.d

    def is_parallel_to(self, vector: Vector3d) -> bool:
        normal = self.normal()
        return abs(normal.dot(vector)) <= PARALLEL_TOLERANCE * normal.norm() * vector.norm()

    def intersect(self, line: Line3d) -> Optional[Point3d]:
        if self.is_parallel_to(line.direction):
            return None
        k = -self.evaluate(line.origin) / self.normal().dot(line.direction)
        return line.point_at(k)

    def project(self, point: Point3d) -> Point3d:
        normal = self.normal()
        t = -self.evaluate(point) / normal.norm_sq()
        return point + normal * t

    def basis_coordinates(
        self,
        point: Point3d,
        basis_origin: Point3d,
        basis: Tuple[Vector3d, Vector3d],
    ) -> Point2d:
        """Solve ``point = basis_origin + x*u + y*v`` with Cramer's rule.

        The point is projected onto the plane first; the solve then uses the
        two axes on which the plane normal has the smallest components.
        """
        u, v = basis
        normal = self.normal()
        offset = self.project(point) - basis_origin

        drop = max(range(3), key=lambda axis: abs((normal.x, normal.y, normal.z)[axis]))
        keep = [axis for axis in range(3) if axis != drop]

        def pick(vector: Vector3d) -> Tuple[float, float]:
            components = (vector.x, vector.y, vector.z)
            return components[keep[0]], components[keep[1]]

        p0, p1 = pick(u)
        q0, q1 = pick(v)
        s0, s1 = pick(offset)
        determinant = p0 * q1 - p1 * q0
        if determinant == 0.0:
            raise AmbiguousPlaneError("Basis vectors are collinear")
        return Point2d(
            (s0 * q1 - s1 * q0) / determinant,
            (p0 * s1 - p1 * s0) / determinant,
        )


@dataclass(frozen=True, slots=True)
class Basis:
    """Two spanning vectors anchored at ``origin``; coordinates are (u, v)."""

    origin: Point3d
    u: Vector3d
    v: Vector3d
    _plane: Plane = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_plane", Plane.from_origin_and_vectors(self.origin, self.u, self.v))

    def plane(self) -> Plane:
        return self._plane

    def point_at(self, coord: Point2d) -> Point3d:
        return self.origin + self.u * coord.x + self.v * coord.y

    def coordinates_of(self, point: Point3d) -> Point2d:
        return self._plane.basis_coordinates(point, self.origin, (self.u, self.v))


__all__ = [
    "Angle",
    "Basis",
    "GluedTriangle",
    "HorizontalSegment",
    "Line",
    "Line3d",
    "Plane",
    "Point",
    "Point2d",
    "Point3d",
    "Segment3d",
    "Triangle",
    "Triangle3d",
    "Vector",
    "Vector3d",
]
