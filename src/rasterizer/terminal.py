"""ANSI terminal presenter for pixel buffers."""

from __future__ import annotations

import os
import select
import shutil
import sys
import termios
import tty
from typing import List, Optional, Sequence, TextIO, Tuple

from .raster import PixelBuffer

TermiosAttr = List[int | List[bytes | int]]

_UPPER_HALF = "▀"
_ARROWS = {"A": "UP", "B": "DOWN", "C": "RIGHT", "D": "LEFT"}


def compose_half_blocks(buffer: PixelBuffer) -> str:
    """Encode two pixel rows per text row as upper-half blocks.

    The upper pixel becomes the 24-bit foreground colour and the lower pixel
    the background colour. An odd last row is paired with black.
    """
    data = buffer.data
    width = buffer.width
    stride = width * PixelBuffer.BYTES_PER_PIXEL
    blank = bytes(stride)
    lines: List[str] = []

    for top_row in range(0, buffer.height, 2):
        top = data[top_row * stride:(top_row + 1) * stride]
        bottom_row = top_row + 1
        bottom = data[bottom_row * stride:(bottom_row + 1) * stride] if bottom_row < buffer.height else blank
        parts: List[str] = []
        previous: Optional[Tuple[int, ...]] = None
        for x in range(width):
            i = x * PixelBuffer.BYTES_PER_PIXEL
            colours = (top[i + 2], top[i + 1], top[i], bottom[i + 2], bottom[i + 1], bottom[i])
            if colours != previous:
                parts.append("\033[38;2;{};{};{};48;2;{};{};{}m".format(*colours))
                previous = colours
            parts.append(_UPPER_HALF)
        parts.append("\033[0m")
        lines.append("".join(parts))
    return "\n".join(lines)


class TerminalController:
    """Context manager that prepares the terminal for frame-by-frame output."""

    def __init__(self, *, clear: bool = True, stream: TextIO | None = None) -> None:
        self._clear = clear
        self._stream = stream if stream is not None else sys.stdout
        self._cursor_hidden = False
        self._stdin_fd: Optional[int] = None
        self._termios_before: Optional[TermiosAttr] = None

    def __enter__(self) -> "TerminalController":
        stream = self._stream
        if self._clear:
            stream.write("\033[2J")
        stream.write("\033[H\033[?25l")
        stream.flush()
        self._cursor_hidden = True

        if sys.stdin.isatty():
            fd = sys.stdin.fileno()
            try:
                self._termios_before = termios.tcgetattr(fd)
                tty.setcbreak(fd)
                self._stdin_fd = fd
            except termios.error:
                self._termios_before = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if self._cursor_hidden:
            self._stream.write("\033[0m\033[?25h\n")
            self._stream.flush()
            self._cursor_hidden = False

        if self._stdin_fd is not None and self._termios_before is not None:
            try:
                termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._termios_before)
            except termios.error:
                pass
        self._stdin_fd = None
        self._termios_before = None

    def size_tuple(self) -> Tuple[int, int]:
        """Usable raster size in pixels: one column per cell, two rows per line."""
        size = shutil.get_terminal_size(fallback=(100, 40))
        return max(2, size.columns), max(2, (size.lines - 1) * 2)

    def present(self, buffer: PixelBuffer, hud: Sequence[str] = ()) -> None:
        stream = self._stream
        stream.write("\033[H")
        stream.write(compose_half_blocks(buffer))
        if hud:
            stream.write("\n\033[2K" + "  ".join(hud))
        stream.write("\033[0m")
        stream.flush()

    def poll_keys(self) -> List[str]:
        """Drain pending key presses; arrow keys are reported by name."""
        if self._stdin_fd is None:
            return []

        raw = bytearray()
        while self._readable():
            data = os.read(self._stdin_fd, 64)
            if not data:
                break
            raw += data
        text = raw.decode("utf-8", errors="ignore")
        if "\x03" in text:
            raise KeyboardInterrupt
        return parse_keys(text)

    def _readable(self) -> bool:
        if self._stdin_fd is None:
            return False
        try:
            readable, _, _ = select.select([self._stdin_fd], [], [], 0)
        except OSError:
            return False
        return bool(readable)


def parse_keys(text: str) -> List[str]:
    """Split raw terminal input into keys.

    A CSI sequence (``ESC [`` up to a letter or ``~``) counts as one key and
    is reported by name when its final letter is an arrow, modifiers and all;
    other CSI sequences are dropped. An ESC not followed by ``[`` is a key of
    its own.
    """
    keys: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char != "\x1b" or not text.startswith("[", index + 1):
            keys.append(char)
            index += 1
            continue
        end = index + 2
        while end < len(text) and not (text[end].isalpha() or text[end] == "~"):
            end += 1
        if end == len(text):
            break
        key = _ARROWS.get(text[end])
        if key is not None:
            keys.append(key)
        index = end + 1
    return keys


__all__ = ["TerminalController", "compose_half_blocks", "parse_keys"]
