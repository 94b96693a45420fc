from .channel import Channel, ChannelState, RawChannel
from .lpd import LpdChannel, PrintJob
from .network import LPD_PORT, RAW_PORT, NetworkConnection
from .selector import is_lpd_connection, open_channel
from .serial import SerialConnection

__all__ = [
    "Channel",
    "ChannelState",
    "is_lpd_connection",
    "LPD_PORT",
    "LpdChannel",
    "NetworkConnection",
    "open_channel",
    "PrintJob",
    "RAW_PORT",
    "RawChannel",
    "SerialConnection",
]
