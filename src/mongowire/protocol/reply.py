""" Decoding and classification of OP_REPLY messages.
"""

import logging
import struct

import bson
import bson.errors

from . import fields
from .message import HEADER_SIZE, unpack_header
from ..errors import CursorNotFound, MalformedReply, QueryFailure


logger = logging.getLogger(__name__)

_unpack_reply = struct.Struct('<iqii').unpack_from
_REPLY_SIZE = 20


class Reply:
    """ A decoded server response to a read-style message. Only two of the
        flag bits carry meaning for the driver: *cursor not found* and
        *query failure*, exposed as the :attr:`cursor_not_found` and
        :attr:`query_failure` predicates. The remaining bits are kept in
        :attr:`flags` as-is.

        :ivar flags: The responseFlags bitmask.
        :ivar cursor_id: Server-side cursor id; zero when exhausted.
        :ivar start: Offset of the first document in the overall result.
        :ivar count: Number of documents the server says it returned.
        :ivar documents: The decoded documents, a list of dicts.
        :ivar response_to: Request id this reply answers.
    """

    def __init__(self, flags, cursor_id, start, count, documents, response_to=None):

        self.flags = flags
        self.cursor_id = cursor_id
        self.start = start
        self.count = count
        self.documents = documents
        self.response_to = response_to


    def __repr__(self):
        return 'Reply(flags=%d, cursor_id=%d, start=%d, count=%d)' % (
                self.flags, self.cursor_id, self.start, self.count)


    @property
    def cursor_not_found(self):
        return bool(self.flags & fields.CURSOR_NOT_FOUND)


    @property
    def query_failure(self):
        return bool(self.flags & fields.QUERY_FAILURE)


    @property
    def shard_config_stale(self):
        return bool(self.flags & fields.SHARD_CONFIG_STALE)


    @property
    def await_capable(self):
        return bool(self.flags & fields.AWAIT_CAPABLE)


    def first(self):
        """ Return the first document, or None if the reply is empty.
        """

        if self.documents:
            return self.documents[0]


# end of class Reply



def parse(data):
    """ Decode the raw bytes of an OP_REPLY message, header included, into
        a :class:`Reply`. Raises :class:`MalformedReply` if the bytes do not
        describe a well-formed reply.
    """

    call = 'reply.parse'

    try:
        length, request_id, response_to, opcode = unpack_header(data)
    except ValueError as e:
        raise MalformedReply(call, 'truncated header', str(e)) from e

    if opcode != fields.OP_REPLY:
        raise MalformedReply(call, 'unexpected opcode', 'expected %d, got %d' % (fields.OP_REPLY, opcode))

    if length != len(data):
        raise MalformedReply(call, 'length mismatch', 'header says %d bytes, received %d' % (length, len(data)))

    if length < HEADER_SIZE + _REPLY_SIZE:
        raise MalformedReply(call, 'truncated reply', '%d bytes' % (length))

    flags, cursor_id, start, count = _unpack_reply(data, HEADER_SIZE)

    try:
        documents = bson.decode_all(data[HEADER_SIZE + _REPLY_SIZE:])
    except bson.errors.BSONError as e:
        raise MalformedReply(call, 'invalid documents', str(e)) from e

    if len(documents) != count:
        raise MalformedReply(call, 'document count mismatch', 'header says %d, decoded %d' % (count, len(documents)))

    return Reply(flags, cursor_id, start, count, documents, response_to)



def classify(reply):
    """ Inspect the flags of a :class:`Reply`. Raises
        :class:`CursorNotFound` if the cursor-not-found bit is set,
        otherwise :class:`QueryFailure` if the query-failure bit is set;
        returns the reply unchanged if neither is set. Cursor-not-found
        takes precedence when both bits are present.
    """

    call = 'reply.classify'

    if reply.cursor_not_found:
        logger.debug("reply to %s: cursor not found", reply.response_to)
        raise CursorNotFound(call, 'CursorNotFound', 'cursor ID not valid at server')

    if reply.query_failure:
        logger.debug("reply to %s: query failure", reply.response_to)

        # On query failure the server returns a single document whose $err
        # field describes the problem.

        detail = 'query failed'
        document = reply.first()
        if document is not None and '$err' in document:
            detail = str(document['$err'])

        raise QueryFailure(call, 'QueryFailure', detail)

    return reply


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
