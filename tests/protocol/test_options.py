import pytest

from mongowire.protocol import CountOptions, CursorType, FindOptions, WriteConcern, fields


def test_find_defaults():

    options = FindOptions()

    assert options.flags() == 0
    assert options.number_to_return() == 20
    assert options.wrap({'a': 1}) == {'a': 1}
    assert options.wrap(None) == {}


def test_number_to_return():

    assert FindOptions(limit=-1).number_to_return() == -1
    assert FindOptions(limit=5).number_to_return() == 5
    assert FindOptions(limit=50, batch_size=20).number_to_return(40) == 10
    assert FindOptions(limit=50, batch_size=0).number_to_return(10) == 40
    assert FindOptions(batch_size=0).number_to_return() == 0


def test_with_limit():

    options = FindOptions(skip=2, limit=10)
    single = options.with_limit(-1)

    assert single.limit == -1
    assert single.skip == 2
    assert options.limit == 10


def test_flags():

    options = FindOptions(
        cursor_type=CursorType.TAILABLE,
        no_cursor_timeout=True,
        allow_partial_results=True,
        op_log_replay=True,
    )

    expected = fields.TAILABLE_CURSOR | fields.NO_CURSOR_TIMEOUT | fields.PARTIAL | fields.OPLOG_REPLAY
    assert options.flags() == expected


def test_wrap_modifiers():

    options = FindOptions(sort={'a': 1}, comment='report', max_time_ms=100)
    wrapped = options.wrap({'x': 1})

    assert wrapped == {'$query': {'x': 1}, '$orderby': {'a': 1}, '$comment': 'report', '$maxTimeMS': 100}
    assert list(wrapped)[0] == '$query'


@pytest.mark.parametrize('arguments', (
    dict(skip=-1),
    dict(batch_size=-1),
    dict(cursor_type='sideways'),
))
def test_find_invalid(arguments):

    with pytest.raises(ValueError):
        FindOptions(**arguments)


def test_count_options():

    assert CountOptions().to_command() == {}

    options = CountOptions(hint={'a': 1}, limit=5, skip=1, max_time_ms=10)
    assert options.to_command() == {'limit': 5, 'skip': 1, 'hint': {'a': 1}, 'maxTimeMS': 10}


def test_write_concern():

    assert WriteConcern().to_command() == {}

    concern = WriteConcern(w=2, wtimeout='100', j=1, fsync=False)
    assert concern.to_command() == {'w': 2, 'wtimeout': 100, 'j': True, 'fsync': False}

    assert WriteConcern(w='majority') == WriteConcern(w='majority')
    assert WriteConcern(w='majority') != WriteConcern(w=1)
    assert 'majority' in repr(WriteConcern(w='majority'))


@pytest.mark.parametrize('arguments, exception', (
    (dict(w=True), TypeError),
    (dict(w=1.5), TypeError),
    (dict(wtimeout=-1), ValueError),
))
def test_write_concern_invalid(arguments, exception):

    with pytest.raises(exception):
        WriteConcern(**arguments)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
