"""Connection interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`mongowire.protocol` so the protocol remains
transport-agnostic; :class:`mongowire.client.Client` depends on nothing
else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A reply did not arrive in time."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class Connection(ABC):
    """Minimal contract for a stream connection to a server.

    Every method raises a :class:`TransportError` on failure. Messages are
    complete wire messages: ``send`` takes one, ``recv`` returns one.
    """

    @abstractmethod
    def connect(self) -> None:
        """Establish the underlying connection."""

    @abstractmethod
    def send(self, data: bytes, expect_reply: bool) -> None:
        """Send one wire message; *expect_reply* says whether a reply will
        be collected with :meth:`recv`."""

    @abstractmethod
    def recv(self, expect_reply: bool) -> bytes:
        """Receive the next complete wire message."""

    @abstractmethod
    def disconnect(self) -> None:
        """Tear down the underlying connection."""

    @property
    def is_open(self) -> bool:
        """Whether the connection is currently established."""
        return False

    def reconnect(self) -> None:
        """Tear down and re-establish the underlying connection."""
        self.disconnect()
        self.connect()
