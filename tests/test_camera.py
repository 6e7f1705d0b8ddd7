import unittest

from src.rasterizer.camera import TRANSLATABLE_MIN_X, AngularCamera, Viewport
from src.rasterizer.errors import InvalidProjectionError
from src.rasterizer.geometry import Angle, Point, Point2d, Point3d, Vector3d


class AngularCameraTests(unittest.TestCase):
    def setUp(self) -> None:
        self.camera = AngularCamera()

    def test_forward_point_lands_in_centre(self) -> None:
        coord, distance = self.camera.translate(Point3d(2.0, 0.0, 0.0))
        self.assertAlmostEqual(coord.x, 0.5)
        self.assertAlmostEqual(coord.y, 0.5)
        self.assertAlmostEqual(distance, 2.0)

    def test_field_of_view_edges(self) -> None:
        # A direction at half the horizontal fov maps to the screen border.
        edge = Vector3d(1.0, 0.0, 0.0).rotate_azimuth(Angle.from_degrees(50.0))
        coord, _ = self.camera.translate(edge.as_point())
        self.assertAlmostEqual(coord.x, 1.0)
        self.assertAlmostEqual(coord.y, 0.5)

    def test_points_behind_are_rejected(self) -> None:
        with self.assertRaises(InvalidProjectionError):
            self.camera.translate(Point3d(-1.0, 0.0, 0.0))
        with self.assertRaises(InvalidProjectionError):
            self.camera.translate(Point3d(0.0, 1.0, 1.0))

    def test_can_translate_threshold(self) -> None:
        self.assertFalse(self.camera.can_translate_point(Point3d(TRANSLATABLE_MIN_X, 0.0, 0.0)))
        self.assertTrue(self.camera.can_translate_point(Point3d(0.01, 5.0, 5.0)))

    def test_default_camera_looks_along_world_z(self) -> None:
        local = self.camera.adjust(Point3d(0.0, 0.0, 5.0))
        self.assertAlmostEqual(local.x, 5.0)
        self.assertAlmostEqual(local.y, 0.0)
        self.assertAlmostEqual(local.z, 0.0)

    def test_adjust_unadjust_round_trip(self) -> None:
        camera = AngularCamera(
            position=Point3d(1.0, -2.0, 0.5),
            azimuth=Angle.from_degrees(35.0),
            vertical_angle=Angle.from_degrees(-20.0),
        )
        point = Point3d(4.0, 1.5, -3.0)
        back = camera.unadjust(camera.adjust(point))
        self.assertTrue((back - point).approx(Vector3d(0.0, 0.0, 0.0)))

    def test_adjust_preserves_distances(self) -> None:
        camera = AngularCamera(azimuth=Angle.from_degrees(123.0), vertical_angle=Angle.from_degrees(10.0))
        a, b = Point3d(1.0, 2.0, 3.0), Point3d(-2.0, 0.5, 7.0)
        self.assertAlmostEqual((camera.adjust(a) - camera.adjust(b)).norm(), (a - b).norm())

    def test_ray_direction_inverts_translate(self) -> None:
        point = Point3d(4.0, 1.0, -2.0)
        coord, _ = self.camera.translate(point)
        ray = self.camera.ray_direction(coord).normalized()
        self.assertTrue(ray.approx(point.as_vector().normalized()))

    def test_turned_normalizes_azimuth(self) -> None:
        camera = self.camera.turned(Angle.from_degrees(180.0), Angle.from_degrees(5.0))
        self.assertAlmostEqual(camera.azimuth.degrees, -90.0)
        self.assertAlmostEqual(camera.vertical_angle.degrees, 5.0)

    def test_with_angles_replaces_orientation_only(self) -> None:
        moved = self.camera.with_position(Point3d(1.0, 2.0, 3.0))
        camera = moved.with_angles(Angle.from_degrees(30.0), Angle.from_degrees(-10.0))
        self.assertAlmostEqual(camera.azimuth.degrees, 30.0)
        self.assertAlmostEqual(camera.vertical_angle.degrees, -10.0)
        self.assertEqual(camera.position, Point3d(1.0, 2.0, 3.0))
        self.assertEqual(camera.hfov, moved.hfov)
        self.assertAlmostEqual(moved.azimuth.degrees, 90.0)
        # the camera now looks along its new azimuth
        ahead = camera.position + Vector3d(1.0, 0.0, 0.0).rotate_azimuth(Angle.from_degrees(30.0))
        self.assertTrue(camera.adjust(ahead).as_vector().approx(Vector3d(1.0, 0.0, 0.0)))

    def test_defaults(self) -> None:
        self.assertAlmostEqual(self.camera.hfov.degrees, 100.0)
        self.assertAlmostEqual(self.camera.vfov.degrees, 70.0)
        self.assertAlmostEqual(self.camera.azimuth.degrees, 90.0)
        self.assertEqual(self.camera.vertical_angle, Angle.zero())
        self.assertEqual(self.camera.position, Point3d(0.0, 0.0, 0.0))

    def test_invalid_field_of_view(self) -> None:
        with self.assertRaises(ValueError):
            AngularCamera(hfov=Angle.from_degrees(180.0))
        with self.assertRaises(ValueError):
            AngularCamera(vfov=Angle.zero())


class ViewportTests(unittest.TestCase):
    def test_translate_rounds_half_away_from_zero(self) -> None:
        viewport = Viewport(800, 600)
        self.assertEqual(viewport.translate(Point2d(0.5, 0.5)), Point(400, 300))
        self.assertEqual(viewport.translate(Point2d(-0.5, 0.0)), Point(-400, 0))
        self.assertEqual(viewport.translate(Point2d(1.0, 1.0)), Point(799, 599))

    def test_untranslate_corners(self) -> None:
        viewport = Viewport(800, 600)
        self.assertEqual(viewport.untranslate(Point(0, 0)), Point2d(0.0, 0.0))
        self.assertEqual(viewport.untranslate(Point(799, 599)), Point2d(1.0, 1.0))

    def test_round_trip_on_pixels(self) -> None:
        viewport = Viewport(81, 61)
        for point in (Point(0, 0), Point(40, 30), Point(13, 57), Point(80, 60)):
            self.assertEqual(viewport.translate(viewport.untranslate(point)), point)

    def test_single_pixel_viewport(self) -> None:
        viewport = Viewport(1, 1)
        self.assertEqual(viewport.untranslate(Point(0, 0)), Point2d(0.0, 0.0))
        with self.assertRaises(ValueError):
            Viewport(0, 10)


if __name__ == "__main__":
    unittest.main()
