""" Collection facade. Reads are sent as OP_QUERY messages and return
    documents or a :class:`mongowire.cursor.Cursor`; writes are sent as
    OP_INSERT, OP_UPDATE, or OP_DELETE messages, each acknowledged with
    ``getlasterror`` against the collection's database before returning.
"""

from . import protocol
from .cursor import Cursor
from .errors import MalformedReply
from .protocol.options import FindOptions


class Collection:
    """ Handle for the collection *name* in database *db*.
    """

    def __init__(self, db, name, client):

        if not db:
            raise ValueError('the database name must be specified')
        if not name:
            raise ValueError('the collection name must be specified')

        self.db = db
        self.name = name
        self.client = client


    def __repr__(self):
        return 'Collection(%r)' % (self.namespace,)


    @property
    def namespace(self):
        return protocol.message.namespace(self.db, self.name)


    def find(self, spec=None, options=None):
        """ Return a :class:`Cursor` over the documents matching *spec*,
            shaped by *options*, a :class:`FindOptions` instance. No message
            is sent until the cursor is first iterated.
        """

        if options is None:
            options = FindOptions()

        return Cursor(self, spec, options)


    def find_one(self, spec=None, options=None):
        """ Return the first document matching *spec*, or None if there is
            no match.
        """

        if options is None:
            options = FindOptions()

        options = options.with_limit(-1)
        cursor = Cursor(self, spec, options)

        for document in cursor:
            return document

        return None


    def count(self, spec=None, options=None):
        """ Return the number of documents matching *spec*; *options* is a
            :class:`mongowire.protocol.CountOptions` instance.
        """

        spec = protocol.command.count(self.name, spec, options)
        document = self.client.get_db(self.db).command(spec, 'error counting ' + self.namespace)

        try:
            return int(document['n'])
        except (KeyError, TypeError, ValueError):
            raise MalformedReply('collection.count', 'error counting ' + self.namespace, 'missing "n" field in reply')


    def insert(self, documents, concern=None, continue_on_error=False):
        """ Insert a single document, or a sequence of documents. *concern*
            is an optional :class:`mongowire.protocol.WriteConcern`.
        """

        if isinstance(documents, dict):
            documents = (documents,)

        def build(request_id):
            return protocol.message.insert(request_id, self.namespace, documents, continue_on_error)

        self.client.request(build, (self.db, concern), read=False)


    def update(self, selector, document, upsert=False, multi=False, concern=None):
        """ Apply the update *document* to the document(s) matching
            *selector*. Only the first match is updated unless *multi* is
            set.
        """

        def build(request_id):
            return protocol.message.update(request_id, self.namespace, selector, document, upsert, multi)

        self.client.request(build, (self.db, concern), read=False)


    def remove(self, selector=None, single=False, concern=None):
        """ Remove the documents matching *selector*; all documents if no
            selector is given.
        """

        def build(request_id):
            return protocol.message.delete(request_id, self.namespace, selector, single)

        self.client.request(build, (self.db, concern), read=False)


# end of class Collection


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
