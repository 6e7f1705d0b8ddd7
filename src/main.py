"""Interactive entry point for the angular rasterizer demo."""

from __future__ import annotations

import argparse
import contextlib
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import ContextManager, Optional, Sequence, Tuple

from .rasterizer.camera import AngularCamera
from .rasterizer.clock import ApproximateTimer, Clock, EventsPerSecondTracker
from .rasterizer.engine import render_frame
from .rasterizer.geometry import Angle
from .rasterizer.objects import DemoScene
from .rasterizer.raster import PixelBuffer
from .rasterizer.terminal import TerminalController

HEADLESS_SIZE = (160, 90)
TURN_STEP = Angle.from_degrees(3.0)
TILT_LIMIT = Angle.from_degrees(65.0)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Angular-projection software rasterizer for your terminal")
    parser.add_argument("--width", type=int, default=0, help="Raster width in pixels (default: terminal width)")
    parser.add_argument(
        "--height",
        type=int,
        default=0,
        help="Raster height in pixels (default: twice the terminal height)",
    )
    parser.add_argument("--fps", type=float, default=20.0, help="Target frames per second (default: 20)")
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Run for a fixed number of frames (0 = infinite)",
    )
    parser.add_argument("--hfov", type=float, default=100.0, help="Horizontal field of view in degrees (default: 100)")
    parser.add_argument("--vfov", type=float, default=70.0, help="Vertical field of view in degrees (default: 70)")
    parser.add_argument("--speed", type=float, default=1.0, help="Multiplier for the scene animation speed")
    parser.add_argument("--ppm", type=Path, default=None, help="Write the last rendered frame to this PPM file")
    parser.add_argument(
        "--no-terminal",
        action="store_true",
        help="Render without drawing to the terminal (useful with --ppm)",
    )
    return parser.parse_args(argv)


@dataclass
class RuntimeConfig:
    controller: Optional[TerminalController]
    warnings: list[str]
    fps: float
    frames: int
    size: Optional[Tuple[int, int]]
    camera: AngularCamera
    speed: float
    ppm_path: Optional[Path]


def _setup_runtime(args: argparse.Namespace) -> RuntimeConfig:
    warnings: list[str] = []

    fps = args.fps
    if not math.isfinite(fps) or fps <= 0.0:
        warnings.append(f"Ignoring invalid --fps {fps}; using 20")
        fps = 20.0

    controller = None if args.no_terminal else TerminalController()

    size: Optional[Tuple[int, int]] = None
    if args.width > 0 and args.height > 0:
        size = (args.width, args.height)
    elif args.width > 0 or args.height > 0:
        warnings.append("Both --width and --height are needed to fix the raster size; ignoring")
    if controller is None and size is None:
        size = HEADLESS_SIZE

    frames = max(0, args.frames)
    if controller is None and frames == 0:
        frames = 1
        warnings.append("Headless mode renders a single frame unless --frames is given")

    camera = AngularCamera(hfov=Angle.from_degrees(args.hfov), vfov=Angle.from_degrees(args.vfov))

    return RuntimeConfig(
        controller=controller,
        warnings=warnings,
        fps=fps,
        frames=frames,
        size=size,
        camera=camera,
        speed=args.speed,
        ppm_path=args.ppm,
    )


def _emit_warnings(warnings: Sequence[str]) -> None:
    if not warnings:
        return
    for warning in warnings:
        sys.stderr.write(f"[rasterizer] {warning}\n")
    sys.stderr.flush()


def _steer(camera: AngularCamera, keys: Sequence[str]) -> AngularCamera:
    for key in keys:
        if key == "LEFT":
            camera = camera.turned(TURN_STEP, Angle.zero())
        elif key == "RIGHT":
            camera = camera.turned(-TURN_STEP, Angle.zero())
        elif key == "UP" and camera.vertical_angle - TURN_STEP >= -TILT_LIMIT:
            camera = camera.turned(Angle.zero(), -TURN_STEP)
        elif key == "DOWN" and camera.vertical_angle + TURN_STEP <= TILT_LIMIT:
            camera = camera.turned(Angle.zero(), TURN_STEP)
    return camera


def _run_loop(config: RuntimeConfig) -> Optional[PixelBuffer]:
    controller = config.controller
    display: ContextManager[Optional[TerminalController]] = (
        controller if controller is not None else contextlib.nullcontext()
    )
    camera = config.camera
    clock = Clock()
    tracker = EventsPerSecondTracker()
    fps_timer = ApproximateTimer(1.0)
    shown_fps = 0.0
    scene_time = 0.0
    frame_counter = 0
    buffer: Optional[PixelBuffer] = None

    with display:
        try:
            while True:
                width, height = config.size or controller.size_tuple()  # type: ignore[union-attr]
                if buffer is None or (buffer.width, buffer.height) != (width, height):
                    buffer = PixelBuffer(width, height)

                if controller is not None:
                    camera = _steer(camera, controller.poll_keys())

                render_frame(DemoScene(scene_time), buffer, camera)
                tracker.event()

                if controller is not None:
                    hud = (
                        f"FPS {shown_fps:5.1f}",
                        f"az {camera.azimuth.degrees:6.1f}",
                        f"tilt {camera.vertical_angle.degrees:5.1f}",
                        "Arrow keys: turn camera",
                    )
                    controller.present(buffer, hud)

                frame_counter += 1
                if config.frames and frame_counter >= config.frames:
                    break

                delta = clock.tick(config.fps)
                scene_time += delta * config.speed
                if fps_timer.update(delta) > 0:
                    shown_fps = tracker.mean()
                    tracker.reset()
        except KeyboardInterrupt:  # pragma: no cover - interactive loop
            if controller is not None:
                controller.restore()
            sys.stdout.write("\nInterrupted. Bye!\n")
            sys.stdout.flush()
    return buffer


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_arguments(argv)
    config = _setup_runtime(args)
    _emit_warnings(config.warnings)

    buffer = _run_loop(config)
    if config.ppm_path is not None and buffer is not None:
        config.ppm_path.write_bytes(buffer.to_ppm())


def main() -> None:
    run()


if __name__ == "__main__":
    main()
