""" Cluster administration through a router (``mongos``). Every operation
    here follows the same pattern: build a command document, dispatch it as
    a read-style message against a fixed database, and require ``ok: 1`` in
    the reply, raising :class:`mongowire.errors.CommandNotOk` with an
    operation-specific category otherwise.
"""

import logging

from bson import json_util

from . import protocol
from .db import DB
from .errors import EntityNotFound, MongoError, NotRouter
from .protocol import fields


logger = logging.getLogger(__name__)


class ShardController:
    """ Wraps a connected :class:`mongowire.client.Client` whose server is a
        cluster router. The router check is done once, here in the
        constructor; if the server is not a router, or the check cannot be
        completed, :class:`mongowire.errors.NotRouter` is raised.
    """

    def __init__(self, client):

        call = 'shard.ShardController'
        admin = client.get_admin()

        try:
            reply = admin.run_command(protocol.command.is_master())
        except MongoError as e:
            raise NotRouter(call, 'cannot identify server', '-->\n' + str(e)) from e

        if not protocol.command.is_router(reply):
            msg = reply.get('msg')
            raise NotRouter(call, 'not a router',
                    'ShardController requires a mongos instance; ismaster msg was %r' % (msg,))

        self.mongos = client


    def _admin(self, spec, call, category):

        admin = self.mongos.get_admin()

        try:
            reply = admin.run_command(spec)
        except MongoError as e:
            raise e.wrap(call, category) from e

        return protocol.command.check(reply, call, category)


    def enable_sharding(self, db):
        """ Enable sharding on the database *db*, which must already exist.
        """

        call = 'shard.enable_sharding'

        try:
            names = self.mongos.get_dbs()
        except MongoError as e:
            raise e.wrap(call, 'error enabling sharding on %s' % (db)) from e

        if db not in names:
            raise EntityNotFound(call, 'db %s not found' % (db),
                    'sharding can only be enabled on an existing db')

        self._admin(protocol.command.enable_sharding(db), call,
                'error enabling sharding on %s' % (db))

        logger.info("enabled sharding on %s", db)


    def add_shard(self, hostname):
        """ Allow the cluster to use a new shard. The *hostname* can take any
            of these forms; it is passed through to the server as-is:

            * ``<hostname>``
            * ``<hostname>:<port>``
            * ``<replset>/<hostname>``
            * ``<replset>/<hostname>:<port>``
        """

        call = 'shard.add_shard'

        self._admin(protocol.command.add_shard(hostname), call,
                'error adding shard at %s' % (hostname))

        logger.info("added shard %s", hostname)


    def shard_collection(self, db, collection, key, unique=False):
        """ Shard *db.collection* on the shard *key* document.
        """

        call = 'shard.shard_collection'

        spec = protocol.command.shard_collection(db, collection, key, unique)
        self._admin(spec, call, 'error sharding collection %s.%s' % (db, collection))

        logger.info("sharded collection %s.%s", db, collection)


    def list_shards(self):
        """ Return the list of shard documents known to the cluster.
        """

        call = 'shard.list_shards'
        reply = self._admin(protocol.command.list_shards(), call, 'error listing shards')
        return list(reply.get('shards', ()))


    def _shards(self):
        return DB(fields.CONFIG, self.mongos).get_collection('shards')


    def _require_shard(self, shard, call):

        shards = self._shards()

        try:
            found = shards.find_one(protocol.command.by_id(shard))
        except MongoError as e:
            raise e.wrap(call, 'error looking up shard %s' % (shard)) from e

        if found is None:
            raise EntityNotFound(call, 'shard %s not found' % (shard),
                    'no such shard in the cluster registry')

        return shards


    def add_shard_tag(self, shard, tag):
        """ Add *tag* to the tag set of *shard*.
        """

        call = 'shard.add_shard_tag'
        shards = self._require_shard(shard, call)

        try:
            shards.update(protocol.command.by_id(shard), protocol.command.add_to_set('tags', tag))
        except MongoError as e:
            raise e.wrap(call) from e


    def remove_shard_tag(self, shard, tag):
        """ Remove *tag* from the tag set of *shard*.
        """

        call = 'shard.remove_shard_tag'
        shards = self._require_shard(shard, call)

        try:
            shards.update(protocol.command.by_id(shard), protocol.command.pull('tags', tag))
        except MongoError as e:
            raise e.wrap(call) from e


    def status(self, verbose=False):
        """ Return a human-readable report of the cluster's sharding
            version and shards. The same registry is read either way;
            *verbose* only controls how much of each shard document is
            shown: its ``_id`` and ``host`` by default, every field when
            set.
        """

        call = 'shard.status'
        config = DB(fields.CONFIG, self.mongos)

        try:
            version = config.get_collection('version').find_one()
            shards = list(config.get_collection('shards').find())
        except MongoError as e:
            raise e.wrap(call, 'error reading cluster status') from e

        lines = list()
        lines.append('--- Sharding Status ---')
        lines.append('  sharding version: %s' % (_render(version)))
        lines.append('  shards:')

        for shard in shards:
            if not verbose:
                shard = dict((key, shard[key]) for key in ('_id', 'host') if key in shard)
            lines.append('    %s' % (_render(shard)))

        return '\n'.join(lines) + '\n'


# end of class ShardController



def _render(document):

    if document is None:
        return 'none'

    return json_util.dumps(document)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
