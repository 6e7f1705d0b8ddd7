import os
import tempfile
import unittest
from pathlib import Path

from src.main import _setup_runtime, _steer, parse_arguments, run
from src.rasterizer.camera import AngularCamera


class RuntimeSetupTests(unittest.TestCase):
    def test_headless_defaults(self) -> None:
        config = _setup_runtime(parse_arguments(["--no-terminal"]))
        self.assertIsNone(config.controller)
        self.assertEqual(config.frames, 1)
        self.assertEqual(config.size, (160, 90))
        self.assertTrue(config.warnings)

    def test_field_of_view_flags(self) -> None:
        config = _setup_runtime(parse_arguments(["--no-terminal", "--hfov", "90", "--vfov", "60", "--frames", "3"]))
        self.assertAlmostEqual(config.camera.hfov.degrees, 90.0)
        self.assertAlmostEqual(config.camera.vfov.degrees, 60.0)
        self.assertEqual(config.frames, 3)
        self.assertEqual(config.warnings, [])

    def test_invalid_fps_falls_back(self) -> None:
        config = _setup_runtime(parse_arguments(["--no-terminal", "--fps", "0", "--frames", "1"]))
        self.assertEqual(config.fps, 20.0)
        self.assertEqual(len(config.warnings), 1)


class SteeringTests(unittest.TestCase):
    def test_arrow_keys_turn_camera(self) -> None:
        camera = _steer(AngularCamera(), ["LEFT", "LEFT", "DOWN"])
        self.assertAlmostEqual(camera.azimuth.degrees, 96.0)
        self.assertAlmostEqual(camera.vertical_angle.degrees, 3.0)

    def test_tilt_is_limited(self) -> None:
        camera = _steer(AngularCamera(), ["UP"] * 50)
        self.assertGreaterEqual(camera.vertical_angle.degrees, -65.0 - 1e-9)
        self.assertLess(camera.vertical_angle.degrees, -60.0)


class HeadlessRunTests(unittest.TestCase):
    def test_writes_ppm_frame(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "frame.ppm"
            run(["--no-terminal", "--width", "32", "--height", "18", "--frames", "1", "--ppm", os.fspath(target)])
            data = target.read_bytes()
        self.assertTrue(data.startswith(b"P6\n32 18\n255\n"))
        self.assertEqual(len(data), len(b"P6\n32 18\n255\n") + 32 * 18 * 3)


if __name__ == "__main__":
    unittest.main()
