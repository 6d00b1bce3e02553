""" Iteration over query results. A :class:`Cursor` sends its OP_QUERY on
    first use, then fetches further batches with OP_GET_MORE as needed,
    and releases the server-side cursor with OP_KILL_CURSORS when closed
    before exhaustion.
"""

import collections
import logging

from . import protocol


logger = logging.getLogger(__name__)


class Cursor:
    """ Iterator over the documents matching *spec* in *collection*.

        :ivar cursor_id: The server-side cursor id; None before the first
            query is sent, zero once the server has no further results.
        :ivar returned: The number of documents handed to the caller.
    """

    def __init__(self, collection, spec, options):

        self.collection = collection
        self.spec = spec
        self.options = options

        self.cursor_id = None
        self.returned = 0
        self._batch = collections.deque()


    def __repr__(self):
        return 'Cursor(%r, %r)' % (self.collection.namespace, self.spec)


    def __iter__(self):
        return self


    def __enter__(self):
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


    @property
    def alive(self):
        """ True if more results may be available. """

        if self._batch:
            return True
        return not self._exhausted()


    def _exhausted(self):

        if self.cursor_id is None:
            return False

        if self.cursor_id == 0:
            return True

        limit = self.options.limit

        if limit < 0:
            return True

        if limit > 0 and self.returned >= limit:
            return True

        return False


    def _query(self, request_id):

        options = self.options

        return protocol.message.query(request_id,
                self.collection.namespace,
                options.wrap(self.spec),
                options.projection,
                options.skip,
                options.number_to_return(),
                options.flags())


    def _get_more(self, request_id):

        return protocol.message.get_more(request_id,
                self.collection.namespace,
                self.cursor_id,
                self.options.number_to_return(self.returned))


    def _refresh(self):
        """ Fetch the next batch from the server.
        """

        if self.cursor_id is None:
            build = self._query
        else:
            build = self._get_more

        client = self.collection.client
        response = client.request(build, read=True)

        self.cursor_id = response.cursor_id
        self._batch.extend(response.documents)

        logger.debug("cursor on %s: %d documents, cursor id %d",
                self.collection.namespace, len(response.documents), self.cursor_id)


    def __next__(self):

        if not self._batch:
            if self._exhausted():
                self.close()
                raise StopIteration

            self._refresh()

            if not self._batch:
                raise StopIteration

        limit = self.options.limit
        if limit > 0 and self.returned >= limit:
            self._batch.clear()
            self.close()
            raise StopIteration

        self.returned += 1
        return self._batch.popleft()


    def close(self):
        """ Release the server-side cursor, if one is still open. Closing an
            exhausted or unstarted cursor is a no-op.
        """

        cursor_id = self.cursor_id
        self._batch.clear()

        if cursor_id is None:
            self.cursor_id = 0
            return

        if cursor_id == 0:
            return

        self.cursor_id = 0

        def build(request_id):
            return protocol.message.kill_cursors(request_id, (cursor_id,))

        concern = (self.collection.db, None)
        self.collection.client.request(build, concern, read=False)


# end of class Cursor


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
