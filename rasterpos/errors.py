from __future__ import annotations


class RasterPosError(RuntimeError):
    """Base class for all errors raised by rasterpos."""


class DecodeError(RasterPosError):
    """Raised when an image file cannot be read or decoded."""


class EncodingError(RasterPosError, ValueError):
    """Raised when a bit matrix has invalid or inconsistent dimensions."""


class ChannelClosedError(RasterPosError):
    """Raised when writing to a channel that has already been closed."""

    def __init__(self, message: str = "channel closed") -> None:
        super().__init__(message)


class TransportError(RasterPosError):
    """Raised when the underlying connection fails."""


class ProtocolError(RasterPosError):
    """Raised when an LPD handshake stage is rejected or times out."""

    def __init__(self, stage: int, reason: str) -> None:
        super().__init__(f"LPD: stage {stage} failed: {reason}")
        self.stage = stage
        self.reason = reason
