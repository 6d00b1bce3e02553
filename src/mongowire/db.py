""" Database facade. A :class:`DB` is a lightweight handle: a name and the
    :class:`mongowire.client.Client` through which every operation is
    dispatched. Constructing one does not touch the server.
"""

from . import protocol
from .collection import Collection
from .errors import MalformedReply, WriteConcernError


class DB:
    """ Handle for the database *name*, issuing messages via *client*.
    """

    def __init__(self, name, client):

        if not name:
            raise ValueError('the database name must be specified')

        self.name = name
        self.client = client


    def __repr__(self):
        return 'DB(%r)' % (self.name,)


    def __eq__(self, other):
        if isinstance(other, DB):
            return self.name == other.name and self.client is other.client
        return NotImplemented


    def __hash__(self):
        return hash((self.name, id(self.client)))


    def get_collection(self, name):
        return Collection(self.name, name, self.client)


    def run_command(self, spec):
        """ Run the command document *spec* against this database and return
            the reply document. The ``ok`` field is not interpreted here; see
            :func:`command`.
        """

        def build(request_id):
            return protocol.message.command(request_id, self.name, spec)

        response = self.client.request(build, read=True)
        document = response.first()

        if document is None:
            name = next(iter(spec), None)
            raise MalformedReply('db.run_command', 'empty reply', 'no document in reply to %r' % (name,))

        return document


    def command(self, spec, category):
        """ Run the command document *spec* and require ``ok: 1`` in the
            reply, raising :class:`mongowire.errors.CommandNotOk` with the
            given *category* otherwise. Returns the reply document.
        """

        document = self.run_command(spec)
        return protocol.command.check(document, 'db.command', category)


    def get_last_error(self, concern=None):
        """ Return the reply to ``getlasterror``, issued with the directives
            of *concern*, a :class:`mongowire.protocol.WriteConcern`. Raises
            :class:`mongowire.errors.CommandNotOk` if the command itself
            failed, and :class:`mongowire.errors.WriteConcernError` if it
            reports an error for the previous write.
        """

        spec = protocol.command.get_last_error(concern)
        document = self.run_command(spec)
        protocol.command.check(document, 'db.get_last_error', 'getlasterror failed')

        error = document.get('err')

        if error is not None:
            raise WriteConcernError('db.get_last_error', 'last error', str(error))

        return document


# end of class DB


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
