import logging

from .errors import (
    ChannelClosedError,
    DecodeError,
    EncodingError,
    ProtocolError,
    RasterPosError,
    TransportError,
)
from .printer import Printer
from .profiles import PrinterProfile, PrinterProfileRegistry
from .protocol import BitMatrix, RasterMode, encode_matrix
from .rendering import image_to_matrix
from .transport import LpdChannel, RawChannel, open_channel

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BitMatrix",
    "ChannelClosedError",
    "DecodeError",
    "encode_matrix",
    "EncodingError",
    "image_to_matrix",
    "LpdChannel",
    "open_channel",
    "Printer",
    "PrinterProfile",
    "PrinterProfileRegistry",
    "ProtocolError",
    "RasterMode",
    "RasterPosError",
    "RawChannel",
    "TransportError",
]
