"""Option structures for collection queries and counts.

These only shape the payload of a message; the dispatch of that message is
handled by :class:`mongowire.client.Client`.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from . import fields


DEFAULT_BATCH_SIZE = 20


class CursorType:
    """Describes the type of cursor to return on collection queries."""

    NON_TAILABLE = "non-tailable"
    TAILABLE = "tailable"
    TAILABLE_AWAIT = "tailable-await"

    valid = frozenset((NON_TAILABLE, TAILABLE, TAILABLE_AWAIT))


class FindOptions:
    """Options for collection queries.

    A *limit* of zero means no limit. A negative *limit* asks the server for
    a single batch of at most ``abs(limit)`` documents and closes the cursor.
    """

    def __init__(
        self,
        skip: int = 0,
        limit: int = 0,
        batch_size: int = DEFAULT_BATCH_SIZE,
        projection: Optional[Dict[str, Any]] = None,
        sort: Optional[Dict[str, Any]] = None,
        comment: Optional[str] = None,
        max_time_ms: Optional[int] = None,
        cursor_type: str = CursorType.NON_TAILABLE,
        no_cursor_timeout: bool = False,
        allow_partial_results: bool = False,
        op_log_replay: bool = False,
        slave_ok: bool = False,
    ):
        if skip < 0:
            raise ValueError("skip must be non-negative")
        if batch_size < 0:
            raise ValueError("batch_size must be non-negative")
        if cursor_type not in CursorType.valid:
            raise ValueError(f"invalid cursor type: {cursor_type!r}")

        self.skip = skip
        self.limit = limit
        self.batch_size = batch_size
        self.projection = projection
        self.sort = sort
        self.comment = comment
        self.max_time_ms = max_time_ms
        self.cursor_type = cursor_type
        self.no_cursor_timeout = no_cursor_timeout
        self.allow_partial_results = allow_partial_results
        self.op_log_replay = op_log_replay
        self.slave_ok = slave_ok

    def with_limit(self, limit: int) -> "FindOptions":
        """Copy the current options with a new limit."""
        options = copy.copy(self)
        options.limit = limit
        return options

    def flags(self) -> int:
        """Return the OP_QUERY flag bits for these options."""

        flags = 0
        if self.cursor_type != CursorType.NON_TAILABLE:
            flags |= fields.TAILABLE_CURSOR
        if self.cursor_type == CursorType.TAILABLE_AWAIT:
            flags |= fields.AWAIT_DATA
        if self.no_cursor_timeout:
            flags |= fields.NO_CURSOR_TIMEOUT
        if self.allow_partial_results:
            flags |= fields.PARTIAL
        if self.op_log_replay:
            flags |= fields.OPLOG_REPLAY
        if self.slave_ok:
            flags |= fields.SLAVE_OK
        return flags

    def wrap(self, spec: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Return the query document to send for *spec*.

        Query modifiers require the ``$query`` wrapped form; a plain spec is
        sent as-is when no modifier is set.
        """

        if spec is None:
            spec = {}

        modifiers: Dict[str, Any] = {}
        if self.sort:
            modifiers["$orderby"] = self.sort
        if self.comment is not None:
            modifiers["$comment"] = self.comment
        if self.max_time_ms is not None:
            modifiers["$maxTimeMS"] = self.max_time_ms

        if not modifiers:
            return spec

        wrapped: Dict[str, Any] = {"$query": spec}
        wrapped.update(modifiers)
        return wrapped

    def number_to_return(self, returned: int = 0) -> int:
        """Return the numberToReturn field for the next batch.

        *returned* is the number of documents already delivered to the
        caller; a positive limit is never exceeded.
        """

        if self.limit < 0:
            return self.limit

        if self.limit == 0:
            return self.batch_size

        remaining = self.limit - returned
        if self.batch_size == 0:
            return remaining
        return min(remaining, self.batch_size)


class CountOptions:
    """Options for count queries."""

    def __init__(
        self,
        hint: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
        max_time_ms: Optional[int] = None,
    ):
        self.hint = hint
        self.limit = limit
        self.skip = skip
        self.max_time_ms = max_time_ms

    def to_command(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        if self.limit is not None:
            document["limit"] = self.limit
        if self.skip is not None:
            document["skip"] = self.skip
        if self.hint is not None:
            document["hint"] = self.hint
        if self.max_time_ms is not None:
            document["maxTimeMS"] = self.max_time_ms
        return document
