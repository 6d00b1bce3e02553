""" The :class:`Client` is the request dispatcher: every message sent to the
    server, whether issued through a :class:`mongowire.db.DB`, a
    :class:`mongowire.collection.Collection`, or a
    :class:`mongowire.shard.ShardController`, goes through one.
"""

import logging
import threading

from . import config
from . import protocol
from . import transport
from .collection import Collection
from .db import DB
from .errors import (
    AlreadyConnected,
    MalformedReply,
    MongoError,
    NotConnected,
    TransportFailure,
    WriteConcernError,
)
from .protocol import fields


logger = logging.getLogger(__name__)


class Client:
    """ A :class:`Client` owns at most one connection to the server, and
        allocates the request identification numbers for every message
        sent over it. Identification numbers start at zero and increase by
        exactly one per message, for the lifetime of the instance.

        There are two styles of message. A read-style message (a query or a
        command) expects a reply, which is received, decoded, and inspected
        for error flags before being handed back. A write-style message
        (insert, update, delete) gets no reply from the server; its success
        is only established by an explicit ``getlasterror`` command sent
        immediately afterwards over the same connection.

        A single re-entrant lock covers the connection and the request
        counter. A complete send/receive exchange, including the
        acknowledgment of a write, happens while holding it, so concurrent
        callers take turns on the connection rather than interleaving
        messages on it.

        :ivar connection: The owned :class:`mongowire.transport.Connection`,
            or None if not connected.
        :ivar lock: The lock guarding the connection and the counter.
    """

    node_class = None
    replica_class = None

    def __init__(self):

        self.connection = None
        self.lock = threading.RLock()
        self._request_id = 0


    def __enter__(self):
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.disconnect()


    def __repr__(self):
        return 'Client(connection=%r)' % (self.connection,)


    @property
    def is_connected(self):
        return self.connection is not None


    def _connect_to(self, call, connection):
        """ Adopt *connection* after connecting it, unless a connection is
            already owned.
        """

        with self.lock:
            if self.connection is not None:
                raise AlreadyConnected(call, 'already connected',
                        'cannot connect if already connected; please first disconnect')

            try:
                connection.connect()
            except transport.TransportError as e:
                raise TransportFailure(call, 'connecting', '-->\n' + str(e)) from e

            self.connection = connection

        logger.info("client connected via %r", connection)


    def attach(self, connection):
        """ Connect and adopt an already constructed *connection*, which
            may be any :class:`mongowire.transport.Connection`
            implementation. The same rules apply as for :func:`connect`.
        """

        self._connect_to('client.attach', connection)


    def connect(self, address=None, port=None):
        """ Connect to a single server. If the *address* or *port* are not
            specified the configured defaults are used; see
            :mod:`mongowire.config`. Raises :class:`AlreadyConnected` if a
            connection is already owned, and :class:`TransportFailure` if
            the connection could not be established.
        """

        if address is None:
            address = config.host()
        if port is None:
            port = config.port()

        node_class = self.node_class
        if node_class is None:
            node_class = transport.NodeConnection

        self._connect_to('client.connect', node_class(address, port))


    def connect_to_rs(self, seeds=None):
        """ Connect to a replica set using the *seeds* list of (host, port)
            pairs, or the configured seed list if none is specified. The
            replica set connection is returned as well as adopted, for
            callers that need its topology-specific methods.
        """

        if seeds is None:
            seeds = config.seeds()

        replica_class = self.replica_class
        if replica_class is None:
            replica_class = transport.ReplicaSetConnection

        connection = replica_class(seeds)
        self._connect_to('client.connect_to_rs', connection)
        return connection


    def disconnect(self):
        """ Disconnect from the server, if connected. Disconnecting a
            client that is not connected is not an error.
        """

        with self.lock:
            connection = self.connection
            if connection is None:
                return

            self.connection = None

            try:
                connection.disconnect()
            except transport.TransportError as e:
                raise TransportFailure('client.disconnect', 'disconnecting', '-->\n' + str(e)) from e

        logger.info("client disconnected from %r", connection)


    def reconnect(self):
        """ Re-establish the owned connection. For a replica set a primary
            is selected again and its (host, port) returned; other
            connections return None. The swap happens under :attr:`lock`,
            so no exchange is in flight on the old connection. If the
            connection cannot be re-established it is dropped.
        """

        call = 'client.reconnect'

        with self.lock:
            connection = self.connection
            if connection is None:
                raise NotConnected(call, 'client not connected',
                        'there is no connection to reconnect')

            try:
                primary = connection.reconnect()
            except transport.TransportError as e:
                self.connection = None
                raise TransportFailure(call, 'reconnecting', '-->\n' + str(e)) from e

        logger.info("client reconnected via %r", connection)
        return primary


    def get_request_id(self):
        """ Return the first unused request identification number, without
            consuming it.
        """

        with self.lock:
            return self._request_id


    def next_request_id(self):
        """ Consume and return the first unused request identification
            number. The counter wraps to zero past the largest positive
            32-bit value.
        """

        with self.lock:
            request_id = self._request_id
            self._request_id = (request_id + 1) & fields.MAX_REQUEST_ID
            return request_id


    def _send(self, data, read):

        if self.connection is None:
            raise NotConnected('client.send', 'client not connected',
                    'attempted to send on nonexistent connection')

        try:
            self.connection.send(data, read)
        except transport.TransportError as e:
            raise TransportFailure('client.send', 'network', str(e)) from e


    def _recv(self, read):

        if self.connection is None:
            raise NotConnected('client.recv', 'client not connected',
                    'attempted to receive on nonexistent connection')

        try:
            return self.connection.recv(read)
        except transport.TransportError as e:
            raise TransportFailure('client.recv', 'network', str(e)) from e


    def dispatch(self, data, concern=None, read=True):
        """ Send the wire message *data* over the owned connection.

            If *read* is False the message is treated as a write: a
            ``getlasterror`` command is issued against the database named
            by *concern*, a (database name, :class:`WriteConcern` or None)
            pair, and None is returned if it reports success. Otherwise
            :class:`WriteConcernError` is raised.

            If *read* is True a reply is received, decoded, and classified;
            the :class:`mongowire.protocol.Reply` is returned if the server
            flagged no error, otherwise :class:`CursorNotFound` or
            :class:`QueryFailure` is raised.

            If the reply is unreadable or answers some other request, the
            connection is dropped before the error is raised, and
            :attr:`is_connected` is False afterwards.
        """

        call = 'client.dispatch'

        if not read and concern is None:
            raise ValueError('a write-style message requires a database to acknowledge against')

        length, request_id, response_to, opcode = protocol.message.unpack_header(data)

        with self.lock:
            logger.debug("dispatch %s request %d (%d bytes)",
                    fields.OPCODE_NAMES.get(opcode, opcode), request_id, len(data))

            try:
                self._send(data, read)
            except MongoError as e:
                raise e.wrap(call) from e

            # A message built with the first unused id consumes it once it
            # is on the wire.

            if request_id == self._request_id:
                self._request_id = (request_id + 1) & fields.MAX_REQUEST_ID

            if read:
                return self._reply(call, request_id)
            else:
                self._acknowledge(call, concern)
                return None


    def _acknowledge(self, call, concern):
        """ Confirm the previous write by way of ``getlasterror``. A write is
            only as acknowledged as this command says it is.
        """

        db_name, write_concern = concern

        try:
            DB(db_name, self).get_last_error(write_concern)
        except MongoError as e:
            logger.debug("write concern error on %s: %s", db_name, e)
            raise WriteConcernError(call, 'write concern error', '-->\n' + str(e)) from e


    def _abandon(self, reason):
        """ Release the owned connection after a failed receive. The
            stream position is unknown at that point; a late or partial
            reply left on it would be read as the answer to the next
            request. The caller must connect again.
        """

        connection = self.connection
        if connection is None:
            return

        self.connection = None

        logger.info("dropping connection %r: %s", connection, reason)

        try:
            connection.disconnect()
        except transport.TransportError as e:
            logger.debug("error while dropping connection %r: %s", connection, e)


    def _reply(self, call, request_id):

        try:
            data = self._recv(True)
            response = protocol.reply.parse(data)
        except MongoError as e:
            self._abandon(e.category)
            raise e.wrap(call, 'error in response') from e

        if response.response_to != request_id:
            self._abandon('reply out of sequence')
            raise MalformedReply(call, 'error in response',
                    'reply is to request %s, expected %d' % (response.response_to, request_id))

        try:
            return protocol.reply.classify(response)
        except MongoError as e:
            raise e.wrap(call) from e


    def request(self, build, concern=None, read=True):
        """ Pass the first unused request identification number to *build*
            to produce the wire message, and :func:`dispatch` the result.
            The number is only consumed once the message is sent; if
            *build* raises, or the message cannot be sent, the next message
            reuses it. Allocation and dispatch happen under the same lock,
            so the ids observed on the wire are strictly sequential even
            when several threads share this client.
        """

        with self.lock:
            data = build(self.get_request_id())
            return self.dispatch(data, concern, read)


    def get_admin(self):
        return DB(fields.ADMIN, self)


    def get_db(self, name):
        return DB(name, self)


    def get_collection(self, db, collection):
        return Collection(db, collection, self)


    def get_dbs(self):
        """ Return the list of database names on the server, as reported by
            the ``listDatabases`` command. Raises :class:`MalformedReply` if
            the reply does not have the expected shape.
        """

        call = 'client.get_dbs'

        response = self.get_admin().command(protocol.command.list_databases(), 'could not get databases')

        try:
            databases = response['databases']
        except KeyError:
            raise MalformedReply(call, 'could not get databases', 'missing "databases" field in reply')

        if not isinstance(databases, list):
            raise MalformedReply(call, 'could not get databases', '"databases" field in reply not an array')

        names = list()

        for document in databases:
            if not isinstance(document, dict):
                raise MalformedReply(call, 'could not extract database name', 'no document in %r' % (document,))

            try:
                name = document['name']
            except KeyError:
                raise MalformedReply(call, 'could not extract database name', 'no name field in %r' % (document,))

            if not isinstance(name, str):
                raise MalformedReply(call, 'could not extract database name', 'name field %r not a string' % (name,))

            names.append(name)

        return names


    def drop_db(self, name):
        """ Drop the database *name*.
        """

        self.get_db(name).command(protocol.command.drop_database(), 'error dropping database ' + name)


# end of class Client



# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
