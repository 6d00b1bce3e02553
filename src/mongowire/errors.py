""" Exceptions raised by the driver. Every error carries three fields: the
    *call* site that raised it, a short *category* label, and a free-text
    *detail*. When an error crosses a component boundary it is re-raised
    via :func:`MongoError.wrap`, which embeds the rendering of the lower
    level error in the detail of the new one; the resulting chain reads
    top-down without needing a traceback.
"""


class MongoError(Exception):
    """ Base class for all driver errors.

        :ivar call: Identifier of the raising call site, such as
            ``'client.dispatch'``.
        :ivar category: Short label describing what went wrong.
        :ivar detail: Free-text detail, possibly a nested rendering.
    """

    def __init__(self, call, category, detail=''):

        Exception.__init__(self, call, category, detail)

        self.call = call
        self.category = category
        self.detail = detail


    def __str__(self):

        if self.detail:
            return '%s: %s: %s' % (self.call, self.category, self.detail)
        else:
            return '%s: %s' % (self.call, self.category)


    def wrap(self, call, category=None):
        """ Return a new error of the same class, attributed to *call*, whose
            detail embeds the rendering of this error. The *category* is
            carried over unless a new one is provided. Callers are expected
            to ``raise error.wrap(...) from error``.
        """

        if category is None:
            category = self.category

        return type(self)(call, category, '-->\n' + str(self))


# end of class MongoError



class AlreadyConnected(MongoError):
    """ A connection was requested while one is already owned. """

class NotConnected(MongoError):
    """ An operation required a connection and none is owned. """

class TransportFailure(MongoError):
    """ The underlying connection failed to send or receive. """

class MalformedReply(MongoError):
    """ A reply could not be decoded, or did not have the expected shape.
        Against a correct server this indicates a protocol-level bug.
    """

class CursorNotFound(MongoError):
    """ The server reported that the cursor id is not valid. """

class QueryFailure(MongoError):
    """ The server reported that the query failed. """

class WriteConcernError(MongoError):
    """ The acknowledgment command following a write failed or reported an
        error.
    """

class CommandNotOk(MongoError):
    """ A command reply did not carry ``ok: 1``. """

class EntityNotFound(MongoError):
    """ A database or shard required to exist was not found. """

class NotRouter(MongoError):
    """ A cluster administration handle was requested against a server
        that is not a cluster router.
    """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
