from . import fields
from . import message
from . import reply
from . import command
from . import concern
from . import options

from .reply import Reply
from .concern import WriteConcern
from .options import CountOptions, CursorType, FindOptions


"""
mongowire Protocol Layer
========================

This package defines the wire-level vocabulary of the driver: how request
messages are packed, how replies are decoded and classified, and how
command documents are built and their results interpreted.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Facades (db.py, collection.py, cursor.py, shard.py)
    - run_command()
    - find() / insert() / update() / remove()
    - cluster administration

    │
    ▼
Dispatcher (client.py)
    - request id allocation
    - send, then acknowledge (writes) or receive (reads)
    - one lock around the connection

    │
    ▼
Protocol (this package)
    - message.py   request packing
    - reply.py     OP_REPLY decoding and flag classification
    - command.py   command documents, ok interpretation
    - concern.py   write concern directives
    - options.py   query and count options
    - fields.py    opcodes and flag bits

    │
    ▼
Transport (mongowire.transport)
    Moves bytes
    - single node
    - replica set seed list

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
