"""Animation compositing.

Turns a parsed `Document` into full-canvas RGBA frames. Graphics are grouped
into compositing steps: every graphic up to and including the next one with
a nonzero delay (or the last graphic) is drawn into the same frame.

Two canvases are kept: `next_base`, carried into the next step, and the
frame being built, a copy of `next_base` with the step's graphics drawn on
top. Disposal methods only ever touch `next_base`.
"""
from __future__ import annotations

import enum
import itertools
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .model import DisposalMethod, Document, Graphic, Image

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)

# -----------------------------
# Output
# -----------------------------
@dataclass
class Frame:
    width: int
    height: int
    pixels: bytes  # RGBA, row-major
    delay_cs: int  # centiseconds

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        i = (y*self.width + x) * 4
        return tuple(self.pixels[i:i+4])


class Animation:
    """Frames in playback order; the frame after the last one is the first."""

    def __init__(self, frames: List[Frame]):
        self.frames = frames

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.frames)

    def __getitem__(self, index: int) -> Frame:
        return self.frames[self._wrap(index)]

    def _wrap(self, index: int) -> int:
        if not self.frames:
            raise IndexError("animation has no frames")
        return index % len(self.frames)

    def next_index(self, index: int) -> int:
        return self._wrap(index + 1)

    def successor(self, frame: Frame) -> Frame:
        for i, f in enumerate(self.frames):
            if f is frame:
                return self.frames[self.next_index(i)]
        raise ValueError("frame is not part of this animation")

    def cycle(self) -> Iterator[Frame]:
        return itertools.cycle(self.frames)

    @property
    def total_duration(self) -> int:
        return sum(f.delay_cs for f in self.frames)

# -----------------------------
# Disposal
# -----------------------------
class CanvasAction(enum.Enum):
    BLIT = "blit"
    FILL_BACKGROUND = "fill-background"
    KEEP = "keep"


def disposal_action(method: DisposalMethod) -> CanvasAction:
    """What a graphic with this disposal method does to the next base canvas."""
    if method == DisposalMethod.RESTORE_BACKGROUND:
        return CanvasAction.FILL_BACKGROUND
    if method == DisposalMethod.RESTORE_PREVIOUS:
        return CanvasAction.KEEP
    # None, DoNotDispose and Undefined leave the graphic in place
    return CanvasAction.BLIT


def background_rgba(document: Document, graphic: Graphic) -> Tuple[int, int, int, int]:
    bg = document.background_color
    if bg is None:
        return TRANSPARENT
    alpha = 0 if graphic.transparent_index == document.bg_color_index else 255
    return (*bg, alpha)

# -----------------------------
# Rasterization
# -----------------------------
_GREY_RAMP = [bytes((i, i, i, 255)) for i in range(256)]


def graphic_rgba(document: Document, graphic: Graphic) -> Optional[bytes]:
    """RGBA pixels of a graphic's own rect, or None when nothing is drawn."""
    if not isinstance(graphic.content, Image):
        # plain text glyphs are not rendered
        return None
    image = graphic.content
    table = document.color_table_for(graphic)
    if table is None:
        logger.warning("Image at (%d,%d) has no color table; drawing indices as grey",
                       image.left, image.top)
        palette = list(_GREY_RAMP)
    else:
        palette = [bytes(table.rgba(i)) for i in range(table.size)]
    t_index = graphic.transparent_index
    if t_index is not None and t_index < len(palette):
        palette[t_index] = palette[t_index][:3] + b"\x00"
    return b"".join([palette[i] for i in image.pixels])


def blit(canvas: bytearray, cw: int, ch: int, rgba: bytes,
         left: int, top: int, w: int, h: int) -> None:
    """Draw `rgba` (w x h) at (left, top); fully transparent pixels are skipped."""
    x0, x1 = max(left, 0), min(left + w, cw)
    if x0 >= x1:
        return
    for yy in range(h):
        ty = top + yy
        if not 0 <= ty < ch:
            continue
        src = rgba[(yy*w + x0 - left)*4:(yy*w + x1 - left)*4]
        dst = (ty*cw + x0)*4
        if 0 not in src[3::4]:
            canvas[dst:dst+len(src)] = src
            continue
        for i in range(0, len(src), 4):
            if src[i+3]:
                canvas[dst+i:dst+i+4] = src[i:i+4]


def fill_rect(canvas: bytearray, cw: int, ch: int, color: Tuple[int, int, int, int],
              left: int, top: int, w: int, h: int) -> None:
    x0, x1 = max(left, 0), min(left + w, cw)
    if x0 >= x1:
        return
    row = bytes(color) * (x1 - x0)
    for ty in range(max(top, 0), min(top + h, ch)):
        dst = (ty*cw + x0)*4
        canvas[dst:dst+len(row)] = row

# -----------------------------
# Compositing
# -----------------------------
def compositing_steps(graphics: List[Graphic]) -> Iterator[List[Graphic]]:
    step: List[Graphic] = []
    for graphic in graphics:
        step.append(graphic)
        if graphic.delay != 0:
            yield step
            step = []
    if step:
        yield step


def apply_graphic(document: Document, graphic: Graphic,
                  frame: bytearray, next_base: bytearray) -> None:
    cw, ch = document.width, document.height
    rect = graphic.rect
    rgba = graphic_rgba(document, graphic)
    if rgba is not None:
        blit(frame, cw, ch, rgba, *rect)

    action = disposal_action(graphic.disposal)
    if action is CanvasAction.BLIT:
        if rgba is not None:
            blit(next_base, cw, ch, rgba, *rect)
    elif action is CanvasAction.FILL_BACKGROUND:
        fill_rect(next_base, cw, ch, background_rgba(document, graphic), *rect)


def composite(document: Document) -> Animation:
    """Build the looping frame sequence of a parsed document."""
    cw, ch = document.width, document.height
    next_base = bytearray(cw * ch * 4)
    frames: List[Frame] = []
    for step in compositing_steps(document.graphics):
        frame = bytearray(next_base)
        for graphic in step:
            apply_graphic(document, graphic, frame, next_base)
        frames.append(Frame(cw, ch, bytes(frame), step[-1].delay))
    logger.debug("composited %d graphics into %d frames", len(document.graphics), len(frames))
    return Animation(frames)
