"""Exception hierarchy shared by the rasterizer modules."""

from __future__ import annotations


class RasterizerError(Exception):
    """Base class for every error raised by the rasterizer."""


class ConstructionError(RasterizerError, ValueError):
    """Degenerate geometry was passed to a validating constructor."""


class AmbiguousPlaneError(ConstructionError):
    """Collinear spanning vectors do not determine a unique plane."""


class ParallelLinesError(ConstructionError):
    """Two parallel lines were asked for their point of intersection."""


class InvalidProjectionError(RasterizerError, RuntimeError):
    """A point behind the camera reached the projector directly."""


class ClipClassificationError(RasterizerError, RuntimeError):
    """The frustum clipper met a vertex ordering it cannot produce."""


__all__ = [
    "AmbiguousPlaneError",
    "ClipClassificationError",
    "ConstructionError",
    "InvalidProjectionError",
    "ParallelLinesError",
    "RasterizerError",
]
