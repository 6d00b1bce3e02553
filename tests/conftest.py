import collections
import struct

import bson
import pytest

import mongowire
from mongowire.protocol import fields, message
from mongowire.transport import Connection, TransportConnectionError, TransportTimeout


def op_reply(documents=(), flags=0, cursor_id=0, start=0, response_to=0, request_id=0):
    """ Pack an OP_REPLY message the way a server would.
    """

    documents = list(documents)
    body = struct.pack('<iqii', flags, cursor_id, start, len(documents))
    body += b''.join(bson.encode(document) for document in documents)
    return message.pack(request_id, fields.OP_REPLY, body, response_to)



def _cstring(data, offset):
    end = data.index(b'\x00', offset)
    return data[offset:end].decode(), end + 1



def parse_sent(data):
    """ Decode a request message into a dictionary of its fields. Only the
        fields relevant to each opcode are present.
    """

    length, request_id, response_to, opcode = message.unpack_header(data)
    assert length == len(data)

    parsed = dict(request_id=request_id, opcode=opcode)
    offset = message.HEADER_SIZE

    if opcode == fields.OP_QUERY:
        parsed['flags'], = struct.unpack_from('<i', data, offset)
        parsed['ns'], offset = _cstring(data, offset + 4)
        parsed['skip'], parsed['limit'] = struct.unpack_from('<ii', data, offset)
        documents = bson.decode_all(data[offset + 8:])
        parsed['spec'] = documents[0]
        parsed['selector'] = documents[1] if len(documents) > 1 else None

    elif opcode == fields.OP_GET_MORE:
        parsed['ns'], offset = _cstring(data, offset + 4)
        parsed['limit'], parsed['cursor_id'] = struct.unpack_from('<iq', data, offset)

    elif opcode == fields.OP_INSERT:
        parsed['flags'], = struct.unpack_from('<i', data, offset)
        parsed['ns'], offset = _cstring(data, offset + 4)
        parsed['documents'] = bson.decode_all(data[offset:])

    elif opcode in (fields.OP_UPDATE, fields.OP_DELETE):
        parsed['ns'], offset = _cstring(data, offset + 4)
        parsed['flags'], = struct.unpack_from('<i', data, offset)
        parsed['documents'] = bson.decode_all(data[offset + 4:])

    elif opcode == fields.OP_KILL_CURSORS:
        count, = struct.unpack_from('<i', data, offset + 4)
        parsed['cursor_ids'] = list(struct.unpack_from('<%dq' % (count), data, offset + 8))

    return parsed



class FakeConnection(Connection):
    """ A scripted connection. Replies are queued ahead of time with
        :func:`reply`, and are answered to whichever request was sent last.
        If the queue is empty and *default* is set, *default* is replied;
        otherwise :func:`recv` times out.
    """

    def __init__(self, fail_connect=False, default=None):

        self.fail_connect = fail_connect
        self.fail_send = False
        self.fail_recv = False
        self.default = default

        self.connected = False
        self.connects = 0
        self.disconnects = 0

        self.sent = list()
        self.replies = collections.deque()


    @property
    def is_open(self):
        return self.connected


    def connect(self):
        if self.fail_connect:
            raise TransportConnectionError('connection refused')
        self.connected = True
        self.connects += 1


    def send(self, data, expect_reply):
        if self.fail_send:
            raise TransportConnectionError('broken pipe')
        self.sent.append((data, expect_reply))


    def recv(self, expect_reply):
        if self.fail_recv:
            raise TransportTimeout('nothing received')

        if self.replies:
            reply = self.replies.popleft()
        elif self.default is not None:
            reply = self._answer((self.default,), 0, 0)
        else:
            raise TransportTimeout('no reply scripted')

        if callable(reply):
            return reply(self.last_request_id())
        return reply


    def disconnect(self):
        self.connected = False
        self.disconnects += 1


    def _answer(self, documents, flags, cursor_id):

        def build(response_to):
            return op_reply(documents, flags, cursor_id, response_to=response_to)

        return build


    def reply(self, *documents, flags=0, cursor_id=0):
        self.replies.append(self._answer(documents, flags, cursor_id))


    def raw(self, data):
        self.replies.append(data)


    def last_request_id(self):
        data, expect_reply = self.sent[-1]
        return message.unpack_header(data)[1]


    def request_ids(self):
        return [message.unpack_header(data)[1] for data, expect_reply in self.sent]


    def opcodes(self):
        return [message.unpack_header(data)[3] for data, expect_reply in self.sent]


    def parsed(self, index=-1):
        data, expect_reply = self.sent[index]
        return parse_sent(data)


    def commands(self):
        """ Return the (namespace, spec) of every command sent. """

        found = list()
        for data, expect_reply in self.sent:
            parsed = parse_sent(data)
            if parsed['opcode'] == fields.OP_QUERY and parsed['ns'].endswith('.$cmd'):
                found.append((parsed['ns'], parsed['spec']))
        return found


# end of class FakeConnection



@pytest.fixture
def fake():
    return FakeConnection()


@pytest.fixture
def client(fake):
    client = mongowire.Client()
    client.attach(fake)
    yield client
    client.disconnect()


@pytest.fixture
def router(client, fake):
    fake.reply({'ismaster': True, 'msg': 'isdbgrid', 'ok': 1.0})
    return mongowire.ShardController(client)


@pytest.fixture
def wire():
    """ Access to the packing and parsing helpers defined here. """

    helpers = collections.namedtuple('helpers', ('op_reply', 'parse_sent', 'FakeConnection'))
    return helpers(op_reply, parse_sent, FakeConnection)


@pytest.fixture
def clean_config(monkeypatch):
    for variable in ('MONGOWIRE_HOST', 'MONGOWIRE_PORT', 'MONGOWIRE_SEEDS', 'MONGOWIRE_TIMEOUT'):
        monkeypatch.delenv(variable, raising=False)

    mongowire.config.reset()
    yield monkeypatch
    mongowire.config.reset()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
