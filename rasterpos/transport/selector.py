from __future__ import annotations

import logging
import socket
from typing import Optional

from .channel import Channel, ConnectionLike, RawChannel
from .lpd import DEFAULT_ACK_TIMEOUT, LpdChannel
from .network import LPD_PORT, NetworkConnection

logger = logging.getLogger(__name__)


def is_lpd_connection(connection: ConnectionLike) -> bool:
    """Return True for network connections addressed to the LPD service port."""
    return isinstance(connection, NetworkConnection) and connection.remote_port == LPD_PORT


def open_channel(
    connection: ConnectionLike,
    queue: Optional[str] = None,
    ack_timeout: float = DEFAULT_ACK_TIMEOUT,
) -> Channel:
    """Wrap a connection in the channel variant suited to it."""
    if isinstance(connection, socket.socket):
        connection = NetworkConnection(connection)
    if is_lpd_connection(connection):
        logger.debug("Using LPD channel (queue %r)", queue)
        return LpdChannel(connection, queue=queue, ack_timeout=ack_timeout)
    logger.debug("Using raw channel")
    return RawChannel(connection)
