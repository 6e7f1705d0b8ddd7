import io
import os
import unittest

from src.rasterizer.raster import RGB, PixelBuffer
from src.rasterizer.terminal import TerminalController, compose_half_blocks, parse_keys


class HalfBlockTests(unittest.TestCase):
    def test_two_pixel_rows_per_line(self) -> None:
        buffer = PixelBuffer(2, 3)
        buffer.set(0, 0, RGB(10, 20, 30))
        buffer.set(0, 1, RGB(40, 50, 60))
        buffer.set(1, 2, RGB(7, 8, 9))
        lines = compose_half_blocks(buffer).split("\n")
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith("\033[38;2;10;20;30;48;2;40;50;60m▀"))
        self.assertIn("\033[38;2;7;8;9;48;2;0;0;0m▀", lines[1])
        for line in lines:
            self.assertEqual(line.count("▀"), 2)
            self.assertTrue(line.endswith("\033[0m"))

    def test_repeated_colours_share_one_escape(self) -> None:
        buffer = PixelBuffer(5, 2)
        line = compose_half_blocks(buffer)
        self.assertEqual(line.count("\033[38;2;"), 1)
        self.assertEqual(line.count("▀"), 5)


class ParseKeysTests(unittest.TestCase):
    def test_arrows_and_plain_keys(self) -> None:
        self.assertEqual(parse_keys("\x1b[Aq\x1b[D"), ["UP", "q", "LEFT"])

    def test_modified_arrow_is_a_single_key(self) -> None:
        self.assertEqual(parse_keys("\x1b[1;5Ax\x1b[1;2C"), ["UP", "x", "RIGHT"])

    def test_lone_escape_does_not_swallow_later_keys(self) -> None:
        self.assertEqual(parse_keys("\x1bab"), ["\x1b", "a", "b"])
        self.assertEqual(parse_keys("q\x1b"), ["q", "\x1b"])

    def test_unknown_and_truncated_sequences_are_dropped(self) -> None:
        self.assertEqual(parse_keys("\x1b[3~z"), ["z"])
        self.assertEqual(parse_keys("w\x1b[1;"), ["w"])


class TerminalControllerTests(unittest.TestCase):
    def test_present_writes_frame_and_hud(self) -> None:
        stream = io.StringIO()
        controller = TerminalController(stream=stream)
        buffer = PixelBuffer(3, 2)
        controller.present(buffer, ("FPS  20.0",))
        output = stream.getvalue()
        self.assertTrue(output.startswith("\033[H"))
        self.assertIn(compose_half_blocks(buffer), output)
        self.assertIn("FPS  20.0", output)

    def test_poll_keys_without_tty(self) -> None:
        self.assertEqual(TerminalController(stream=io.StringIO()).poll_keys(), [])

    def _controller_reading(self, data: bytes) -> TerminalController:
        read_fd, write_fd = os.pipe()
        self.addCleanup(os.close, read_fd)
        os.write(write_fd, data)
        os.close(write_fd)
        controller = TerminalController(stream=io.StringIO())
        controller._stdin_fd = read_fd
        return controller

    def test_poll_keys_drains_pending_input(self) -> None:
        controller = self._controller_reading(b"\x1b[1;5Bq\x1bz\x1b[C")
        self.assertEqual(controller.poll_keys(), ["DOWN", "q", "\x1b", "z", "RIGHT"])
        self.assertEqual(controller.poll_keys(), [])

    def test_ctrl_c_interrupts(self) -> None:
        controller = self._controller_reading(b"a\x03")
        with self.assertRaises(KeyboardInterrupt):
            controller.poll_keys()


if __name__ == "__main__":
    unittest.main()
