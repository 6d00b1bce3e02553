""" Construction of command documents, and interpretation of command
    results. Command documents are built as plain dictionaries; the command
    name must be the first key, which insertion order guarantees.
"""

from bson.int64 import Int64

from . import fields
from ..errors import CommandNotOk


OK_DETAIL = 'the server returned ok: 0'


def ok(reply):
    """ Return True if the command *reply* reports success. Success is an
        ``ok`` field equal to one, encoded as a double (1.0), a 32-bit
        integer (1), or a 64-bit integer (1); the three encodings are
        alternatives, and whichever one the server chose is accepted. Any
        other value or type, including a boolean, or a missing field, is
        failure.
    """

    try:
        value = reply['ok']
    except (KeyError, TypeError):
        return False

    # bool is a subclass of int; a boolean is not one of the accepted
    # encodings. Int64 is likewise a subclass of int, so it is tested first.

    if isinstance(value, bool):
        return False

    if isinstance(value, Int64):
        return value == 1

    if isinstance(value, int):
        return value == 1

    if isinstance(value, float):
        return value == 1.0

    return False



def check(reply, call, category):
    """ Return *reply* unchanged if it reports success, otherwise raise
        :class:`CommandNotOk` attributed to *call* with the given
        *category*. The detail is the server's own ``errmsg`` when one is
        present.
    """

    if ok(reply):
        return reply

    detail = OK_DETAIL

    try:
        errmsg = reply['errmsg']
    except (KeyError, TypeError):
        pass
    else:
        if errmsg:
            detail = str(errmsg)

    raise CommandNotOk(call, category, detail)



def is_master():
    return {'ismaster': 1}


def list_databases():
    return {'listDatabases': 1}


def drop_database():
    return {'dropDatabase': 1}


def list_shards():
    return {'listShards': 1}


def enable_sharding(db):
    return {'enableSharding': db}


def add_shard(hostname):
    return {'addShard': hostname}



def shard_collection(db, collection, key, unique=False):
    """ The ``unique`` field is sent as the string ``'true'`` or
        ``'false'``.
    """

    if unique:
        unique = 'true'
    else:
        unique = 'false'

    return {
        'shardCollection': db + '.' + collection,
        'key': key,
        'unique': unique,
    }



def count(collection, spec=None, options=None):

    document = {'count': collection}

    if spec:
        document['query'] = spec

    if options is not None:
        document.update(options.to_command())

    return document



def get_last_error(concern=None):

    document = {'getlasterror': 1}

    if concern is not None:
        document.update(concern.to_command())

    return document



def add_to_set(field, value):
    return {'$addToSet': {field: value}}


def pull(field, value):
    return {'$pull': {field: value}}


def by_id(value):
    return {'_id': value}


def is_router(reply):
    """ Return True if an ``ismaster`` *reply* identifies a cluster router.
    """

    try:
        msg = reply['msg']
    except (KeyError, TypeError):
        return False

    return msg == fields.ROUTER_MSG


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
