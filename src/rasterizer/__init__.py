"""Angular-projection software rasterizer."""

from .camera import AngularCamera, Viewport
from .clock import ApproximateTimer, Clock, EventsPerSecondTracker
from .engine import Renderer, render_frame
from .errors import (
    AmbiguousPlaneError,
    ClipClassificationError,
    ConstructionError,
    InvalidProjectionError,
    ParallelLinesError,
    RasterizerError,
)
from .geometry import Angle, Point, Point2d, Point3d, Triangle, Triangle3d, Vector3d
from .objects import DemoScene
from .raster import RGB, PixelBuffer
from .shading import object_filler, screen_filler, solid, world_filler
from .terminal import TerminalController

__all__ = [
    "AmbiguousPlaneError",
    "Angle",
    "AngularCamera",
    "ApproximateTimer",
    "ClipClassificationError",
    "Clock",
    "ConstructionError",
    "DemoScene",
    "EventsPerSecondTracker",
    "InvalidProjectionError",
    "ParallelLinesError",
    "PixelBuffer",
    "Point",
    "Point2d",
    "Point3d",
    "RGB",
    "RasterizerError",
    "Renderer",
    "TerminalController",
    "Triangle",
    "Triangle3d",
    "Vector3d",
    "Viewport",
    "object_filler",
    "render_frame",
    "screen_filler",
    "solid",
    "world_filler",
]
