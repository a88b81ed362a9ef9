from __future__ import annotations

from typing import List

# GIF 4-pass interlacing: (first row, row step)
#     pass 1: rows 0,  8, 16, ...
#     pass 2: rows 4, 12, 20, ...
#     pass 3: rows 2,  6, 10, ...
#     pass 4: rows 1,  3,  5, ...
PASSES = ((0, 8), (4, 8), (2, 4), (1, 2))


def interlaced_row_order(height: int) -> List[int]:
    """Destination row of each stored row, in the order rows are stored."""
    return [y for start, step in PASSES for y in range(start, height, step)]


def deinterlace(pixels: bytes, width: int, height: int) -> bytes:
    if len(pixels) != width * height:
        raise ValueError(f"expected {width * height} pixels, got {len(pixels)}")
    out = bytearray(width * height)
    for i, y in enumerate(interlaced_row_order(height)):
        out[y*width:(y+1)*width] = pixels[i*width:(i+1)*width]
    return bytes(out)
