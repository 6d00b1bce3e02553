"""Protocol constants.

Keep these in one place to avoid magic numbers in message handling. The
values are defined by the server's wire protocol and must match it
bit-for-bit.
"""

# Operation codes.
OP_REPLY = 1
OP_UPDATE = 2001
OP_INSERT = 2002
OP_QUERY = 2004
OP_GET_MORE = 2005
OP_DELETE = 2006
OP_KILL_CURSORS = 2007

OPCODE_NAMES = {
    OP_REPLY: "OP_REPLY",
    OP_UPDATE: "OP_UPDATE",
    OP_INSERT: "OP_INSERT",
    OP_QUERY: "OP_QUERY",
    OP_GET_MORE: "OP_GET_MORE",
    OP_DELETE: "OP_DELETE",
    OP_KILL_CURSORS: "OP_KILL_CURSORS",
}

# OP_REPLY responseFlags.
CURSOR_NOT_FOUND = 1 << 0
QUERY_FAILURE = 1 << 1
SHARD_CONFIG_STALE = 1 << 2
AWAIT_CAPABLE = 1 << 3

# OP_QUERY flags.
TAILABLE_CURSOR = 1 << 1
SLAVE_OK = 1 << 2
OPLOG_REPLAY = 1 << 3
NO_CURSOR_TIMEOUT = 1 << 4
AWAIT_DATA = 1 << 5
EXHAUST = 1 << 6
PARTIAL = 1 << 7

# OP_UPDATE flags.
UPSERT = 1 << 0
MULTI_UPDATE = 1 << 1

# OP_INSERT flags.
CONTINUE_ON_ERROR = 1 << 0

# OP_DELETE flags.
SINGLE_REMOVE = 1 << 0

# Well-known names.
ADMIN = "admin"
CONFIG = "config"
COMMAND_COLLECTION = "$cmd"
ROUTER_MSG = "isdbgrid"

MAX_REQUEST_ID = 0x7FFFFFFF
