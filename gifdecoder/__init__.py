"""GIF 87a/89a decoder and animation compositor (no external deps)."""
from __future__ import annotations

from typing import Tuple

from .compositor import Animation, Frame, composite
from .errors import (BlockError, ColorIndexError, GIFError, LZWError, ProtocolError,
                     SignatureError, TruncatedError)
from .model import (ApplicationExtension, ColorTable, DisposalMethod, Document, Graphic,
                    GraphicControl, Image, PlainText, Version)
from .parser import Source, parse_gif
from .player import Player

__version__ = "1.0.0"


def decode(source: Source) -> Tuple[Document, Animation]:
    """Parse `source` and composite its frames."""
    document = parse_gif(source)
    return document, composite(document)


__all__ = [
    "Animation", "ApplicationExtension", "BlockError", "ColorIndexError", "ColorTable",
    "DisposalMethod", "Document", "Frame", "GIFError", "Graphic", "GraphicControl", "Image",
    "LZWError", "PlainText", "Player", "ProtocolError", "SignatureError", "TruncatedError",
    "Version", "composite", "decode", "parse_gif",
]
