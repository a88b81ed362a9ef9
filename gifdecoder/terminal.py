"""Terminal and PPM output of composited frames.

A `Frame` is flattened onto a 50%-gray checkerboard (GIF transparency has
no color of its own), scaled down to fit, and then either printed (ANSI
truecolor, two pixel rows per text row, or ASCII) or written as PPM.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Tuple

from .compositor import Frame

RGB = Tuple[int, int, int]

CSI = "\x1b["
RESET = CSI + "0m"
CLEAR_SCREEN = CSI + "H" + CSI + "2J"

HALF_BLOCK = "▄"

CHECKER_CELL = 8
CHECKER_COLORS = ((128, 128, 128), (192, 192, 192))

ASCII_RAMP = " .:-=+*#%@"


def supports_truecolor() -> bool:
    return os.environ.get("COLORTERM", "").lower() in {"truecolor", "24bit"}


def checker(x: int, y: int) -> RGB:
    return CHECKER_COLORS[(x // CHECKER_CELL + y // CHECKER_CELL) % 2]


@dataclass
class Raster:
    """Opaque RGB pixels, row-major."""
    width: int
    height: int
    rgb: List[RGB]

    @classmethod
    def from_frame(cls, frame: Frame) -> "Raster":
        w, h, px = frame.width, frame.height, frame.pixels
        rgb: List[RGB] = []
        for i in range(0, w * h * 4, 4):
            r, g, b, a = px[i:i+4]
            if a:
                rgb.append((r, g, b))
            else:
                n = i // 4
                rgb.append(checker(n % w, n // w))
        return cls(w, h, rgb)

    def row(self, y: int) -> List[RGB]:
        return self.rgb[y*self.width:(y+1)*self.width]

    def fitted(self, max_w: int, max_h: int) -> "Raster":
        """Nearest-neighbour downscale keeping the aspect ratio; never upscales."""
        w, h = self.width, self.height
        if not w or not h or (w <= max_w and h <= max_h):
            return self
        scale = min(max_w / w, max_h / h)
        nw, nh = max(1, int(w * scale)), max(1, int(h * scale))
        cols = [x * w // nw for x in range(nw)]
        rgb = []
        for y in range(nh):
            src = self.row(y * h // nh)
            rgb.extend(src[c] for c in cols)
        return Raster(nw, nh, rgb)

    def ascii(self) -> str:
        top = len(ASCII_RAMP) - 1

        def shade(px: RGB) -> str:
            r, g, b = px
            return ASCII_RAMP[(r*299 + g*587 + b*114) // 1000 * top // 255]

        return "\n".join("".join(shade(px) for px in self.row(y)) for y in range(self.height))

    def ansi(self) -> str:
        # cell background is the upper pixel, the half block draws the lower one
        lines = []
        for y in range(0, self.height, 2):
            upper = self.row(y)
            lower = self.row(y + 1) if y + 1 < self.height else upper
            cells = [f"{CSI}48;2;{u[0]};{u[1]};{u[2]}m{CSI}38;2;{d[0]};{d[1]};{d[2]}m{HALF_BLOCK}"
                     for u, d in zip(upper, lower)]
            lines.append("".join(cells) + RESET)
        return "\n".join(lines)

    def render(self, ascii_only: bool = False) -> str:
        if ascii_only or not supports_truecolor():
            return self.ascii()
        return self.ansi()

    def ppm(self) -> bytes:
        header = b"P6\n%d %d\n255\n" % (self.width, self.height)
        return header + bytes(c for px in self.rgb for c in px)


def frame_raster(frame: Frame, max_w: int, max_h: int) -> Raster:
    return Raster.from_frame(frame).fitted(max_w, max_h)


def write_ppm(path: str, frame: Frame, max_w: int, max_h: int) -> None:
    with open(path, "wb") as f:
        f.write(frame_raster(frame, max_w, max_h).ppm())
