""" Python client driver for MongoDB, speaking the binary request/response
    wire protocol. The :class:`Client` owns the connection and dispatches
    every message; :class:`DB` and :class:`Collection` are the everyday
    facades, and :class:`ShardController` administers a sharded cluster
    through its router.
"""

# Utility components.

from . import config
from . import errors

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .client import Client
from .db import DB
from .collection import Collection
from .cursor import Cursor
from .shard import ShardController

from .protocol import CountOptions, CursorType, FindOptions, WriteConcern
from .errors import MongoError

__version__ = '0.6.7'

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
