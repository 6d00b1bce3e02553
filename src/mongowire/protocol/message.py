""" Packing of request messages for the wire. Every function here takes the
    request identification number as its first argument and returns the
    complete message as bytes, header included; the caller, normally
    :func:`mongowire.client.Client.request`, is responsible for allocating
    the identification number.

    Documents are encoded with the :mod:`bson` package; the layout of each
    message body is defined by the server's wire protocol:

    Header
        int32 messageLength, int32 requestID, int32 responseTo, int32 opCode

    OP_QUERY
        int32 flags, cstring namespace, int32 numberToSkip,
        int32 numberToReturn, document query, [document fieldSelector]

    OP_GET_MORE
        int32 zero, cstring namespace, int32 numberToReturn, int64 cursorID

    OP_INSERT
        int32 flags, cstring namespace, document*

    OP_UPDATE
        int32 zero, cstring namespace, int32 flags, document selector,
        document update

    OP_DELETE
        int32 zero, cstring namespace, int32 flags, document selector

    OP_KILL_CURSORS
        int32 zero, int32 numberOfCursorIDs, int64* cursorIDs
"""

import struct

import bson

from . import fields


_pack_header = struct.Struct('<iiii').pack
_pack_int = struct.Struct('<i').pack
_pack_long = struct.Struct('<q').pack

HEADER_SIZE = 16


def _cstring(text):

    encoded = text.encode('utf-8')

    if b'\x00' in encoded:
        raise ValueError('namespace must not contain NUL: ' + repr(text))

    return encoded + b'\x00'



def _encode(document):

    if document is None:
        document = dict()

    return bson.encode(document)



def pack(request_id, opcode, body, response_to=0):
    """ Prefix *body* with a message header for the given *opcode*.
    """

    header = _pack_header(HEADER_SIZE + len(body), request_id, response_to, opcode)
    return header + body



def namespace(db, collection):
    """ Return the full collection name used on the wire. """

    return db + '.' + collection



def query(request_id, ns, spec, fields_selector=None, skip=0, limit=0, flags=0):
    """ Pack an OP_QUERY message for namespace *ns*. A negative *limit*
        requests a single batch, after which the server closes the cursor.
    """

    body = [
        _pack_int(flags),
        _cstring(ns),
        _pack_int(skip),
        _pack_int(limit),
        _encode(spec),
    ]

    if fields_selector is not None:
        body.append(_encode(fields_selector))

    return pack(request_id, fields.OP_QUERY, b''.join(body))



def command(request_id, db, spec):
    """ Pack a database command: an OP_QUERY against the ``$cmd``
        pseudo-collection requesting exactly one document back.
    """

    ns = namespace(db, fields.COMMAND_COLLECTION)
    return query(request_id, ns, spec, limit=-1)



def get_more(request_id, ns, cursor_id, limit=0):

    body = b''.join((
        _pack_int(0),
        _cstring(ns),
        _pack_int(limit),
        _pack_long(cursor_id),
    ))

    return pack(request_id, fields.OP_GET_MORE, body)



def insert(request_id, ns, documents, continue_on_error=False):
    """ Pack an OP_INSERT message carrying one or more *documents*.
    """

    documents = list(documents)
    if len(documents) == 0:
        raise ValueError('cannot insert an empty sequence of documents')

    flags = 0
    if continue_on_error:
        flags |= fields.CONTINUE_ON_ERROR

    body = [_pack_int(flags), _cstring(ns)]

    for document in documents:
        body.append(_encode(document))

    return pack(request_id, fields.OP_INSERT, b''.join(body))



def update(request_id, ns, selector, document, upsert=False, multi=False):

    flags = 0
    if upsert:
        flags |= fields.UPSERT
    if multi:
        flags |= fields.MULTI_UPDATE

    body = b''.join((
        _pack_int(0),
        _cstring(ns),
        _pack_int(flags),
        _encode(selector),
        _encode(document),
    ))

    return pack(request_id, fields.OP_UPDATE, body)



def delete(request_id, ns, selector, single=False):

    flags = 0
    if single:
        flags |= fields.SINGLE_REMOVE

    body = b''.join((
        _pack_int(0),
        _cstring(ns),
        _pack_int(flags),
        _encode(selector),
    ))

    return pack(request_id, fields.OP_DELETE, body)



def kill_cursors(request_id, cursor_ids):

    cursor_ids = list(cursor_ids)

    body = [_pack_int(0), _pack_int(len(cursor_ids))]
    for cursor_id in cursor_ids:
        body.append(_pack_long(cursor_id))

    return pack(request_id, fields.OP_KILL_CURSORS, b''.join(body))



def unpack_header(data):
    """ Return the (length, request_id, response_to, opcode) tuple from the
        first sixteen bytes of *data*.
    """

    if len(data) < HEADER_SIZE:
        raise ValueError('message shorter than its header: %d bytes' % (len(data)))

    return struct.unpack_from('<iiii', data)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
