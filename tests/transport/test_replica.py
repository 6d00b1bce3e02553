import pytest

import mongowire
from mongowire import errors
from mongowire.protocol import fields
from mongowire.transport import ReplicaSetConnection, TransportConnectionError


class Members:
    """ Stands in for the node class: builds a scripted connection for
        each seed, answering ``ismaster`` according to *roles*.
    """

    def __init__(self, wire, roles):

        self.wire = wire
        self.roles = roles
        self.created = list()


    def __call__(self, address, port, timeout=None):

        role = self.roles[(address, port)]

        if role == 'down':
            node = self.wire.FakeConnection(fail_connect=True)
        else:
            node = self.wire.FakeConnection()
            node.reply({'ismaster': role == 'primary', 'ok': 1.0})

        self.created.append(((address, port), node))
        return node


    def node(self, address, port):
        for seed, node in reversed(self.created):
            if seed == (address, port):
                return node


# end of class Members



SEEDS = [('db1', 27017), ('db2', 27017), ('db3', 27017)]


def test_second_seed_primary(wire):

    members = Members(wire, {SEEDS[0]: 'secondary', SEEDS[1]: 'primary', SEEDS[2]: 'secondary'})
    connection = ReplicaSetConnection(SEEDS, node_class=members)

    connection.connect()

    assert connection.primary == ('db2', 27017)
    assert connection.is_open
    assert len(members.created) == 2

    secondary = members.node('db1', 27017)
    assert not secondary.connected
    assert secondary.commands() == [('admin.$cmd', {'ismaster': 1})]


def test_traffic_goes_to_primary(wire):

    members = Members(wire, {SEEDS[0]: 'primary', SEEDS[1]: 'secondary', SEEDS[2]: 'secondary'})
    connection = ReplicaSetConnection(SEEDS, node_class=members)

    client = mongowire.Client()
    client.attach(connection)

    primary = members.node('db1', 27017)
    primary.reply({'pong': 1, 'ok': 1.0})

    assert client.get_admin().run_command({'ping': 1}) == {'pong': 1, 'ok': 1.0}
    assert primary.commands()[-1] == ('admin.$cmd', {'ping': 1})

    client.disconnect()
    assert not primary.connected
    assert not connection.is_open


def test_unreachable_seed_skipped(wire):

    members = Members(wire, {SEEDS[0]: 'down', SEEDS[1]: 'primary', SEEDS[2]: 'secondary'})
    connection = ReplicaSetConnection(SEEDS, node_class=members)

    connection.connect()

    assert connection.primary == ('db2', 27017)
    assert 'db1:27017' in connection.failures[0]


def test_no_primary(wire):

    members = Members(wire, {SEEDS[0]: 'down', SEEDS[1]: 'secondary', SEEDS[2]: 'secondary'})
    connection = ReplicaSetConnection(SEEDS, node_class=members)

    with pytest.raises(TransportConnectionError) as info:
        connection.connect()

    assert 'no primary' in str(info.value)
    assert len(connection.failures) == 3
    assert not connection.is_open


def test_no_primary_through_client(wire):

    members = Members(wire, {SEEDS[0]: 'secondary', SEEDS[1]: 'secondary', SEEDS[2]: 'secondary'})

    client = mongowire.Client()
    client.replica_class = lambda seeds: ReplicaSetConnection(seeds, node_class=members)

    with pytest.raises(errors.TransportFailure):
        client.connect_to_rs(SEEDS)

    assert not client.is_connected


def test_probe_failure_skipped(wire):

    def node_class(address, port, timeout=None):
        node = wire.FakeConnection()
        if address == 'db1':
            node.reply({'$err': 'not authorized'}, flags=fields.QUERY_FAILURE)
        else:
            node.reply({'ismaster': True, 'ok': 1.0})
        return node

    connection = ReplicaSetConnection(SEEDS, node_class=node_class)
    connection.connect()

    assert connection.primary == ('db2', 27017)


def test_reconnect(wire):

    roles = {SEEDS[0]: 'primary', SEEDS[1]: 'secondary', SEEDS[2]: 'secondary'}
    members = Members(wire, roles)
    connection = ReplicaSetConnection(SEEDS, node_class=members)

    connection.connect()
    old = members.node('db1', 27017)

    roles[SEEDS[0]] = 'secondary'
    roles[SEEDS[2]] = 'primary'

    assert connection.reconnect() == ('db3', 27017)
    assert not old.connected

    with pytest.raises(TransportConnectionError):
        connection.connect()


def test_reconnect_through_client(wire):

    roles = {SEEDS[0]: 'primary', SEEDS[1]: 'secondary', SEEDS[2]: 'secondary'}
    members = Members(wire, roles)

    client = mongowire.Client()
    client.attach(ReplicaSetConnection(SEEDS, node_class=members))

    roles[SEEDS[0]] = 'secondary'
    roles[SEEDS[1]] = 'primary'

    assert client.reconnect() == ('db2', 27017)
    assert client.connection.primary == ('db2', 27017)

    roles[SEEDS[1]] = 'down'

    with pytest.raises(errors.TransportFailure):
        client.reconnect()

    assert not client.is_connected


def test_connect_to_rs(wire, clean_config):

    clean_config.setenv('MONGOWIRE_SEEDS', 'db1:27017,db2:27017,db3:27017')

    members = Members(wire, {SEEDS[0]: 'secondary', SEEDS[1]: 'secondary', SEEDS[2]: 'primary'})

    client = mongowire.Client()
    client.replica_class = lambda seeds: ReplicaSetConnection(seeds, node_class=members)

    connection = client.connect_to_rs()

    assert client.connection is connection
    assert connection.primary == ('db3', 27017)

    client.disconnect()


def test_empty_seeds():

    with pytest.raises(ValueError):
        ReplicaSetConnection([])


def test_not_connected():

    connection = ReplicaSetConnection(SEEDS, node_class=lambda *args, **kwargs: None)

    with pytest.raises(TransportConnectionError):
        connection.send(b'', True)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
