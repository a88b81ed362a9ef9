"""LZW decompression for GIF image data."""
from __future__ import annotations

import logging
from typing import List, Optional

from .errors import LZWError
from .reader import BitReader

logger = logging.getLogger(__name__)

MAX_CODE_WIDTH = 12
MAX_TABLE_SIZE = 1 << MAX_CODE_WIDTH  # 4096


def lzw_decompress(min_code_size: int, data: bytes) -> bytes:
    """Decode GIF LZW data into one color index byte per pixel.

    `data` is the concatenation of the image's data sub-blocks. Running out
    of data before the End-of-Information code is tolerated: the pixels
    decoded so far are returned and a warning is logged.
    """
    if not 2 <= min_code_size <= MAX_CODE_WIDTH - 1:
        raise LZWError(f"LZW: invalid minimum code size {min_code_size}")

    bits = BitReader(data)
    clear_code = 1 << min_code_size
    end_code = clear_code + 1

    # slots for the clear and end codes are never looked up
    table: List[bytes] = [bytes((i,)) for i in range(clear_code)] + [b"", b""]
    code_width = min_code_size + 1
    out = bytearray()

    def read_code() -> Optional[int]:
        code = bits.read(code_width)
        if code is None:
            logger.warning("LZW: data ended without End-of-Information code")
        return code

    def first_entry() -> Optional[bytes]:
        # the table is freshly reset, so extra clear codes are no-ops
        code = read_code()
        while code == clear_code:
            code = read_code()
        if code is None or code == end_code:
            return None
        if code > end_code:
            raise LZWError(f"LZW: code {code} used before any table growth")
        return table[code]

    previous = first_entry()
    if previous is None:
        return bytes(out)
    out += previous

    while True:
        code = read_code()
        if code is None or code == end_code:
            break
        if code == clear_code:
            del table[clear_code + 2:]
            code_width = min_code_size + 1
            previous = first_entry()
            if previous is None:
                break
            out += previous
            continue

        next_code = len(table)
        if code < next_code:
            entry = table[code]
            if next_code < MAX_TABLE_SIZE:
                table.append(previous + entry[:1])
        elif code == next_code:
            # KwKwK: the code being defined right now
            entry = previous + previous[:1]
            if next_code < MAX_TABLE_SIZE:
                table.append(entry)
        else:
            raise LZWError(f"LZW: code {code} beyond next table slot {next_code}")

        out += entry
        previous = entry
        if len(table) == (1 << code_width) and code_width < MAX_CODE_WIDTH:
            code_width += 1

    return bytes(out)
