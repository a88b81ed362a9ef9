"""Structural GIF parser.

Walks Header -> Logical Screen Descriptor -> {Extension | Image | Trailer}*
and builds a `Document`. The grammar is relaxed in one respect: a pending
Graphic Control Extension survives other extensions (comments, application
extensions) until the next Image or Plain Text block picks it up.
"""
from __future__ import annotations

import io
import logging
import os
import struct
from typing import BinaryIO, Callable, Optional, Union

from .errors import BlockError, ColorIndexError, ProtocolError, SignatureError
from .interlace import deinterlace
from .lzw import lzw_decompress
from .model import (ApplicationExtension, ColorTable, Document, DisposalMethod,
                    Graphic, GraphicControl, Image, PlainText, Version)
from .reader import ByteReader

logger = logging.getLogger(__name__)

EXTENSION_INTRODUCER = 0x21
IMAGE_SEPARATOR = 0x2C
TRAILER = 0x3B

EXT_PLAIN_TEXT = 0x01
EXT_GRAPHIC_CONTROL = 0xF9
EXT_COMMENT = 0xFE
EXT_APPLICATION = 0xFF

Source = Union[str, os.PathLike, bytes, bytearray, memoryview, BinaryIO]
State = Optional[Callable[[], "State"]]


def parse_color_table(reader: ByteReader, size: int, sorted_: bool) -> ColorTable:
    data = reader.read_bytes(3*size)
    return ColorTable([(data[i], data[i+1], data[i+2]) for i in range(0, len(data), 3)], sorted_)


def _check_index(index: int, table: Optional[ColorTable], what: str) -> None:
    if table is not None and index >= table.size:
        raise ColorIndexError(f"{what} {index} outside color table of {table.size} colors")


class Parser:
    def __init__(self, data: bytes):
        self.reader = ByteReader(data)
        self.document: Optional[Document] = None
        # Graphic Control Extension waiting for its Image / Plain Text
        self.pending: Optional[GraphicControl] = None
        self.state: State = self.state_header

    def parse(self) -> Document:
        while self.state is not None:
            logger.debug("state %s at offset %d", self.state.__name__, self.reader.pos)
            self.state = self.state()
        return self.document

    def _error(self, exc_type, message: str):
        return exc_type(f"{message} (offset {self.reader.pos})")

    # -----------------------------
    # States
    # -----------------------------
    def state_header(self) -> State:
        header = self.reader.read_bytes(6)
        if header[:3] != b"GIF":
            raise SignatureError(f"Not a GIF file: bad signature {header[:3]!r}")
        try:
            version = Version(header[3:].decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            logger.warning("Unknown GIF version %r", header[3:])
            version = Version.UNKNOWN
        self.document = Document(version, 0, 0, 0, 0, 0)
        return self.state_logical_screen_descriptor

    def state_logical_screen_descriptor(self) -> State:
        r = self.reader
        doc = self.document
        doc.width = r.read_u16le()
        doc.height = r.read_u16le()
        packed = r.read_u8()
        doc.bg_color_index = r.read_u8()
        doc.pixel_aspect_ratio = r.read_u8()

        gct_flag = (packed & 0b1000_0000) != 0
        doc.color_resolution = (packed & 0b0111_0000) >> 4
        sort_flag = (packed & 0b0000_1000) != 0
        if gct_flag:
            gct_size = 2 ** ((packed & 0b0000_0111) + 1)
            doc.global_color_table = parse_color_table(r, gct_size, sort_flag)
        logger.debug("canvas %dx%d, global color table: %s", doc.width, doc.height,
                     doc.global_color_table.size if gct_flag else "none")
        return self.state_data

    def state_data(self) -> State:
        b0 = self.reader.peek()
        if b0 == EXTENSION_INTRODUCER:
            return self.state_extension
        if b0 == IMAGE_SEPARATOR:
            return self.state_image
        if b0 == TRAILER:
            return self.state_trailer
        raise self._error(BlockError, f"Unknown block introducer: 0x{b0:02X}")

    def state_extension(self) -> State:
        r = self.reader
        r.read_u8()  # introducer, already peeked
        label = r.read_u8()
        data = r.read_sub_blocks()
        if label == EXT_GRAPHIC_CONTROL:
            self.add_graphic_control(data)
        elif label == EXT_PLAIN_TEXT:
            self.add_plain_text(data)
        elif label == EXT_COMMENT:
            self.document.comments.append(data.decode("utf-8", "replace"))
        elif label == EXT_APPLICATION:
            self.add_application(data)
        else:
            logger.warning("Skipping unknown extension label 0x%02X (%d bytes)", label, len(data))
        return self.state_data

    def state_image(self) -> State:
        r = self.reader
        r.read_u8()  # separator, already peeked
        left = r.read_u16le()
        top = r.read_u16le()
        width = r.read_u16le()
        height = r.read_u16le()
        packed = r.read_u8()
        lct_flag = (packed & 0b1000_0000) != 0
        interlace = (packed & 0b0100_0000) != 0
        sort_flag = (packed & 0b0010_0000) != 0
        lct = None
        if lct_flag:
            lct = parse_color_table(r, 2 ** ((packed & 0b0000_0111) + 1), sort_flag)

        min_code_size = r.read_u8()
        compressed = r.read_sub_blocks()
        pixels = lzw_decompress(min_code_size, compressed)
        expected = width * height
        if len(pixels) != expected:
            logger.warning("Image at (%d,%d) decoded %d pixels, expected %d",
                           left, top, len(pixels), expected)
            pixels = pixels[:expected] + bytes(max(0, expected - len(pixels)))
        if interlace:
            pixels = deinterlace(pixels, width, height)

        image = Image(left, top, width, height, interlace, lct, min_code_size, pixels)
        table = lct if lct is not None else self.document.global_color_table
        if table is None:
            logger.warning("Image at (%d,%d) has no color table", left, top)
        elif pixels:
            _check_index(max(pixels), table, "Pixel color index")
        self.take_graphic(image, table)
        logger.debug("image %dx%d at (%d,%d)%s", width, height, left, top,
                     " interlaced" if interlace else "")
        return self.state_data

    def state_trailer(self) -> State:
        b = self.reader.read_u8()
        if b != TRAILER:
            raise self._error(BlockError, f"Expected trailer 0x3B, got 0x{b:02X}")
        if self.pending is not None:
            logger.warning("Graphic Control Extension without a graphic before trailer")
        return None

    # -----------------------------
    # Extension blocks
    # -----------------------------
    def add_graphic_control(self, data: bytes) -> None:
        if len(data) < 4:
            raise self._error(BlockError, f"Bad Graphic Control Extension size {len(data)}")
        if self.pending is not None:
            raise self._error(ProtocolError,
                              "Graphic Control Extension appears without a matching graphic")
        packed = data[0]
        self.pending = GraphicControl(
            disposal=DisposalMethod.from_field((packed >> 2) & 0b111),
            user_input=(packed & 0b10) != 0,
            transparent_flag=(packed & 0b1) != 0,
            delay_cs=data[1] | (data[2] << 8),
            transparent_index=data[3],
        )

    def add_plain_text(self, data: bytes) -> None:
        # the fixed 12-byte header arrives as the first sub-block
        if len(data) < 12:
            raise self._error(BlockError, f"Bad Plain Text Extension size {len(data)}")
        (left, top, width, height, cell_w, cell_h, fg, bg) = struct.unpack_from("<4H4B", data)
        text = PlainText(left, top, width, height, cell_w, cell_h, fg, bg, data[12:])
        table = self.document.global_color_table
        _check_index(text.fg_index, table, "Plain text foreground index")
        _check_index(text.bg_index, table, "Plain text background index")
        self.take_graphic(text, table)

    def add_application(self, data: bytes) -> None:
        if len(data) < 11:
            raise self._error(BlockError, f"Bad Application Extension size {len(data)}")
        ext = ApplicationExtension(data[:8], data[8:11], data[11:])
        self.document.app_extensions.append(ext)

    def take_graphic(self, content, table: Optional[ColorTable]) -> None:
        control = self.pending
        self.pending = None
        if control is not None and control.transparent_flag:
            _check_index(control.transparent_index, table, "Transparent color index")
        self.document.graphics.append(Graphic(content, control))


# -----------------------------
# Entry points
# -----------------------------
def read_source(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return f.read()
    if isinstance(source, io.IOBase) or hasattr(source, "read"):
        data = source.read()
        if isinstance(data, (bytes, bytearray, memoryview)):
            return bytes(data)
    raise TypeError(f"Cannot read GIF data from {type(source).__name__}")


def parse_gif(source: Source) -> Document:
    """Parse a whole GIF datastream; raises `GIFError` on malformed input."""
    return Parser(read_source(source)).parse()
