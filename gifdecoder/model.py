from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

# -----------------------------
# Enumerations
# -----------------------------
class Version(enum.Enum):
    UNKNOWN = "unknown"
    GIF87A = "87a"
    GIF89A = "89a"


class DisposalMethod(enum.IntEnum):
    NONE = 0
    DO_NOT_DISPOSE = 1
    RESTORE_BACKGROUND = 2
    RESTORE_PREVIOUS = 3
    # the field is 3 bits wide; values 4-7 are reserved
    UNDEFINED = 8

    @classmethod
    def from_field(cls, value: int) -> "DisposalMethod":
        if 0 <= value <= 3:
            return cls(value)
        return cls.UNDEFINED


DISPOSAL_NAMES = {
    DisposalMethod.NONE: "None (unspecified)",
    DisposalMethod.DO_NOT_DISPOSE: "Keep",
    DisposalMethod.RESTORE_BACKGROUND: "Restore to BG",
    DisposalMethod.RESTORE_PREVIOUS: "Restore to previous",
    DisposalMethod.UNDEFINED: "Undefined",
}

# -----------------------------
# GIF structures
# -----------------------------
@dataclass
class ColorTable:
    colors: List[Tuple[int, int, int]]
    sorted: bool = False

    @property
    def size(self) -> int:
        return len(self.colors)

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, index: int) -> Tuple[int, int, int]:
        return self.colors[index]

    def rgba(self, index: int, alpha: int = 255) -> Tuple[int, int, int, int]:
        r, g, b = self.colors[index]
        return (r, g, b, alpha)


@dataclass
class GraphicControl:
    disposal: DisposalMethod
    user_input: bool
    transparent_flag: bool
    delay_cs: int  # centiseconds
    transparent_index: int

    @property
    def transparent(self) -> Optional[int]:
        return self.transparent_index if self.transparent_flag else None


@dataclass
class Image:
    left: int
    top: int
    width: int
    height: int
    interlace: bool
    local_color_table: Optional[ColorTable]
    lzw_min_code_size: int
    pixels: bytes  # one color index per pixel, row-major


@dataclass
class PlainText:
    left: int
    top: int
    width: int
    height: int
    cell_width: int
    cell_height: int
    fg_index: int
    bg_index: int
    text: bytes


@dataclass
class ApplicationExtension:
    identifier: bytes  # 8 bytes
    auth_code: bytes  # 3 bytes
    data: bytes

    @property
    def loop_count(self) -> Optional[int]:
        """Netscape looping sub-block ("\\x01" <u16>); 0 means forever."""
        if (self.identifier, self.auth_code) not in (
                (b"NETSCAPE", b"2.0"), (b"ANIMEXTS", b"1.0")):
            return None
        if len(self.data) >= 3 and self.data[0] == 1:
            return self.data[1] | (self.data[2] << 8)
        return None


@dataclass
class Graphic:
    content: Union[Image, PlainText]
    control: Optional[GraphicControl] = None

    @property
    def is_image(self) -> bool:
        return isinstance(self.content, Image)

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        c = self.content
        return (c.left, c.top, c.width, c.height)

    @property
    def delay(self) -> int:
        return self.control.delay_cs if self.control else 0

    @property
    def disposal(self) -> DisposalMethod:
        return self.control.disposal if self.control else DisposalMethod.NONE

    @property
    def transparent_index(self) -> Optional[int]:
        return self.control.transparent if self.control else None


@dataclass
class Document:
    version: Version
    width: int
    height: int
    bg_color_index: int
    pixel_aspect_ratio: int
    color_resolution: int  # bits per primary - 1 (from packed field)
    global_color_table: Optional[ColorTable] = None
    graphics: List[Graphic] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    app_extensions: List[ApplicationExtension] = field(default_factory=list)

    def color_table_for(self, graphic: Graphic) -> Optional[ColorTable]:
        # images borrow the global table when they carry no local one
        content = graphic.content
        if isinstance(content, Image) and content.local_color_table is not None:
            return content.local_color_table
        return self.global_color_table

    @property
    def images(self) -> List[Image]:
        return [g.content for g in self.graphics if g.is_image]

    @property
    def background_color(self) -> Optional[Tuple[int, int, int]]:
        gct = self.global_color_table
        if gct is None or self.bg_color_index >= gct.size:
            return None
        return gct[self.bg_color_index]

    @property
    def pixel_aspect(self) -> Optional[float]:
        if self.pixel_aspect_ratio == 0:
            return None
        return (self.pixel_aspect_ratio + 15) / 64.0

    @property
    def loop_count(self) -> Optional[int]:
        for ext in self.app_extensions:
            loops = ext.loop_count
            if loops is not None:
                return loops
        return None
