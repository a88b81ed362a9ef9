"""Exceptions raised while decoding a GIF datastream."""


class GIFError(Exception):
    pass


class TruncatedError(GIFError):
    pass


class SignatureError(GIFError):
    pass


class BlockError(GIFError):
    # unexpected block introducer, trailer or fixed block size
    pass


class ProtocolError(GIFError):
    # Graphic Control Extension without a matching graphic
    pass


class LZWError(GIFError):
    pass


class ColorIndexError(GIFError):
    pass
