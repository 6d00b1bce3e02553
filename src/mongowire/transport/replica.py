"""Replica set connection.

A ReplicaSetConnection is built from a seed list of (host, port) pairs. On
connect it probes each seed in order with ``ismaster`` and adopts the first
member that reports itself primary; all traffic then flows to that member.
Members are only ever taken from the seed list: the ``hosts`` field of an
``ismaster`` reply is not followed.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import List, Optional, Sequence, Tuple

from ..errors import MongoError
from ..protocol import command, fields, message, reply
from .base import Connection, TransportConnectionError, TransportError


logger = logging.getLogger(__name__)


class ReplicaSetConnection(Connection):
    """Connection to the primary member of a replica set."""

    def __init__(self, seeds: Sequence[Tuple[str, int]], node_class=None, timeout: Optional[float] = None):
        seeds = [(str(address), int(port)) for address, port in seeds]
        if len(seeds) == 0:
            raise ValueError("the seed list must not be empty")

        if node_class is None:
            from .zmq import node
            node_class = node.NodeConnection

        self.seeds: List[Tuple[str, int]] = seeds
        self.node_class = node_class
        self.timeout = timeout

        self.primary: Optional[Tuple[str, int]] = None
        self.failures: List[str] = []

        self._node: Optional[Connection] = None
        self._probe_ids = itertools.count(0)
        self._probe_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"ReplicaSetConnection({self.seeds!r})"

    @property
    def is_open(self) -> bool:
        return self._node is not None

    def _probe_id(self) -> int:
        with self._probe_lock:
            return next(self._probe_ids) & fields.MAX_REQUEST_ID

    def _is_primary(self, node: Connection) -> bool:
        data = message.command(self._probe_id(), fields.ADMIN, command.is_master())
        node.send(data, True)
        response = reply.classify(reply.parse(node.recv(True)))

        document = response.first()
        if document is None:
            return False
        return document.get("ismaster") is True

    def _select(self) -> None:
        self.failures = []

        for address, port in self.seeds:
            node = self.node_class(address, port, timeout=self.timeout)

            try:
                node.connect()
            except TransportError as exc:
                self.failures.append(f"{address}:{port}: {exc}")
                continue

            try:
                primary = self._is_primary(node)
            except (TransportError, MongoError) as exc:
                self.failures.append(f"{address}:{port}: {exc}")
                primary = False

            if primary:
                self._node = node
                self.primary = (address, port)
                logger.info("replica set primary is %s:%d", address, port)
                return

            self.failures.append(f"{address}:{port}: not primary")
            node.disconnect()

        raise TransportConnectionError("no primary among seeds: " + "; ".join(self.failures))

    def connect(self) -> None:
        if self._node is not None:
            raise TransportConnectionError(f"already connected to {self.primary}")
        self._select()

    def reconnect(self) -> Tuple[str, int]:
        """Drop the current member, if any, and select a primary again.

        Returns the (host, port) of the new primary. When the connection is
        owned by a client, go through :meth:`mongowire.client.Client.reconnect`
        instead, which holds the client lock for the swap.
        """
        self._release()
        self._select()
        return self.primary

    def _current(self) -> Connection:
        if self._node is None:
            raise TransportConnectionError("replica set not connected")
        return self._node

    def send(self, data: bytes, expect_reply: bool) -> None:
        # Without read preferences every message goes to the primary.
        self._current().send(data, expect_reply)

    def recv(self, expect_reply: bool) -> bytes:
        return self._current().recv(expect_reply)

    def _release(self) -> None:
        node = self._node
        self._node = None
        self.primary = None

        if node is not None:
            node.disconnect()

    def disconnect(self) -> None:
        self._release()
