"""ZeroMQ single-node connection.

The server does not speak ZeroMQ; a STREAM socket is the ZeroMQ socket type
for exchanging raw TCP data with a non-ZeroMQ peer. One NodeConnection owns
one STREAM socket connected to exactly one server.
"""

from __future__ import annotations

import logging
from typing import Optional

import zmq

from ... import config
from ..base import Connection, TransportConnectionError, TransportError, TransportTimeout
from .framing import StreamBuffer, close_frames, from_stream_frames, to_stream_frames


logger = logging.getLogger(__name__)

zmq_context = zmq.Context()


class NodeConnection(Connection):
    """Connection to a single, unreplicated server (or a cluster router)."""

    def __init__(self, address: str, port: int, timeout: Optional[float] = None):
        self.address = address
        self.port = int(port)
        self.timeout = timeout if timeout is not None else config.timeout()

        self.socket: Optional[zmq.Socket] = None
        self.routing_id: Optional[bytes] = None
        self._buffer = StreamBuffer()

    def __repr__(self) -> str:
        return f"NodeConnection({self.address!r}, {self.port})"

    @property
    def is_open(self) -> bool:
        return self.socket is not None

    def _poll(self) -> None:
        if self.socket.poll(int(self.timeout * 1000), zmq.POLLIN) == 0:
            raise TransportTimeout(f"{self.address}:{self.port}: nothing received in {self.timeout:.2f} sec")

    def _recv_frames(self) -> tuple:
        self._poll()
        return from_stream_frames(self.socket.recv_multipart())

    def _recv_chunk(self) -> bytes:
        routing_id, chunk = self._recv_frames()

        if routing_id != self.routing_id:
            raise TransportConnectionError(f"{self.address}:{self.port}: data from unexpected peer")
        return chunk

    def connect(self) -> None:
        if self.socket is not None:
            raise TransportConnectionError(f"{self.address}:{self.port}: already connected")

        server = f"tcp://{self.address}:{self.port}"

        socket = zmq_context.socket(zmq.STREAM)
        socket.setsockopt(zmq.LINGER, 0)

        try:
            socket.connect(server)
        except zmq.ZMQError as exc:
            socket.close()
            raise TransportConnectionError(f"cannot connect to {server}: {exc}") from exc

        self.socket = socket
        self._buffer.clear()

        # The socket announces an established TCP connection with an empty
        # chunk carrying the routing id of the peer. Nothing else may arrive
        # before the first request is sent.

        try:
            routing_id, chunk = self._recv_frames()
        except TransportError:
            self._close()
            raise
        except zmq.ZMQError as exc:
            self._close()
            raise TransportConnectionError(f"cannot connect to {server}: {exc}") from exc

        if chunk != b"":
            self._close()
            raise TransportConnectionError(f"{server}: unexpected data before first request")

        self.routing_id = routing_id

        logger.info("connected to %s:%d", self.address, self.port)

    def send(self, data: bytes, expect_reply: bool) -> None:
        if self.socket is None:
            raise TransportConnectionError(f"{self.address}:{self.port}: not connected")

        try:
            self.socket.send_multipart(to_stream_frames(self.routing_id, data))
        except zmq.ZMQError as exc:
            raise TransportConnectionError(f"{self.address}:{self.port}: send failed: {exc}") from exc

        logger.debug("sent %d bytes to %s:%d", len(data), self.address, self.port)

    def recv(self, expect_reply: bool) -> bytes:
        if self.socket is None:
            raise TransportConnectionError(f"{self.address}:{self.port}: not connected")

        if not expect_reply:
            return b""

        while True:
            message = self._buffer.pop()
            if message is not None:
                logger.debug("received %d bytes from %s:%d", len(message), self.address, self.port)
                return message

            try:
                chunk = self._recv_chunk()
            except zmq.ZMQError as exc:
                raise TransportConnectionError(f"{self.address}:{self.port}: receive failed: {exc}") from exc

            if chunk == b"":
                self._close()
                raise TransportConnectionError(f"{self.address}:{self.port}: connection closed by peer")

            self._buffer.feed(chunk)

    def _close(self) -> None:
        socket = self.socket
        self.socket = None
        self.routing_id = None
        self._buffer.clear()

        if socket is not None:
            socket.close()

    def disconnect(self) -> None:
        if self.socket is None:
            return

        try:
            self.socket.send_multipart(close_frames(self.routing_id))
        except zmq.ZMQError as exc:
            raise TransportConnectionError(f"{self.address}:{self.port}: disconnect failed: {exc}") from exc
        finally:
            self._close()

        logger.info("disconnected from %s:%d", self.address, self.port)
