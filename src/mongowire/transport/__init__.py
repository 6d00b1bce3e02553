"""Transport layer implementations."""

from .. import config

from .base import (
    Connection,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)

_BACKEND = config.transport()

if _BACKEND == "zmq":
    from .zmq import node
else:
    raise ImportError(f"unknown MONGOWIRE_TRANSPORT backend: {_BACKEND!r}")

from . import replica

NodeConnection = node.NodeConnection
ReplicaSetConnection = replica.ReplicaSetConnection
