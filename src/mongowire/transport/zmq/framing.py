"""Wire message framing over a ZeroMQ STREAM socket.

A STREAM socket delivers whatever the TCP stack hands it:

    routing_id, chunk

where a chunk may hold part of a wire message, exactly one, or several.
Every wire message starts with its own total length as a little-endian
int32, which is all that is needed to cut the stream back into messages.
An empty chunk signals that the peer connected (the first one) or
disconnected (any later one).
"""

from __future__ import annotations

import struct
from typing import List, Optional

from ..base import TransportConnectionError


_unpack_length = struct.Struct("<i").unpack_from

MINIMUM_LENGTH = 16
MAXIMUM_LENGTH = 48 * 1000 * 1000


class StreamBuffer:
    """Accumulate stream chunks and yield complete wire messages."""

    def __init__(self, maximum: int = MAXIMUM_LENGTH):
        self.maximum = maximum
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()

    def feed(self, chunk: bytes) -> None:
        self._buffer += chunk

    def _expected(self) -> Optional[int]:
        if len(self._buffer) < 4:
            return None

        (length,) = _unpack_length(self._buffer)
        if length < MINIMUM_LENGTH or length > self.maximum:
            raise TransportConnectionError(f"invalid message length on stream: {length}")
        return length

    def pop(self) -> Optional[bytes]:
        """Remove and return the next complete message, or None."""

        length = self._expected()
        if length is None or len(self._buffer) < length:
            return None

        message = bytes(self._buffer[:length])
        del self._buffer[:length]
        return message

    def pop_all(self) -> List[bytes]:
        messages = []
        while True:
            message = self.pop()
            if message is None:
                return messages
            messages.append(message)


def to_stream_frames(routing_id: bytes, data: bytes):
    """Frames for sending *data* to the peer identified by *routing_id*."""
    return (routing_id, data)


def close_frames(routing_id: bytes):
    """Frames asking the socket to close the TCP connection to the peer."""
    return (routing_id, b"")


def from_stream_frames(parts) -> tuple:
    """Split received parts into (routing_id, chunk)."""

    if len(parts) != 2:
        raise TransportConnectionError(f"expected 2 stream frames, received {len(parts)}")
    return parts[0], parts[1]
