import pytest

from mongowire import config


def test_defaults(clean_config):

    assert config.host() == 'localhost'
    assert config.port() == 27017
    assert config.timeout() == 30.0
    assert config.seeds() == [('localhost', 27017)]


def test_environment(clean_config):

    clean_config.setenv('MONGOWIRE_HOST', 'db1')
    clean_config.setenv('MONGOWIRE_PORT', '27018')
    clean_config.setenv('MONGOWIRE_TIMEOUT', '2.5')
    clean_config.setenv('MONGOWIRE_SEEDS', 'db1:27018, db2 ,db3:27020')

    assert config.host() == 'db1'
    assert config.port() == 27018
    assert config.timeout() == 2.5
    assert config.seeds() == [('db1', 27018), ('db2', 27017), ('db3', 27020)]


def test_cached(clean_config):

    clean_config.setenv('MONGOWIRE_HOST', 'first')
    assert config.host() == 'first'

    clean_config.setenv('MONGOWIRE_HOST', 'second')
    assert config.host() == 'first'

    config.reset()
    assert config.host() == 'second'


def test_explicit_default(clean_config):

    # Explicit values are written back to the environment; setting the
    # variable first lets monkeypatch restore it afterwards.
    clean_config.setenv('MONGOWIRE_PORT', '1')
    clean_config.setenv('MONGOWIRE_TIMEOUT', '1')

    assert config.port('28000') == 28000
    assert config.port() == 28000
    assert config.timeout(0.5) == 0.5

    seeds = config.seeds([('db1', '27018')])
    assert seeds == [('db1', 27018)]

    seeds.append(('other', 1))
    assert config.seeds() == [('db1', 27018)]


@pytest.mark.parametrize('variable, value', (
    ('MONGOWIRE_PORT', 'abc'),
    ('MONGOWIRE_PORT', '0'),
    ('MONGOWIRE_PORT', '70000'),
    ('MONGOWIRE_TIMEOUT', 'soon'),
    ('MONGOWIRE_TIMEOUT', '0'),
    ('MONGOWIRE_TIMEOUT', '-1'),
))
def test_invalid(clean_config, variable, value):

    clean_config.setenv(variable, value)

    with pytest.raises(ValueError):
        config.port()
        config.timeout()


@pytest.mark.parametrize('text', ('', ' , ', ':27017', 'db1:port'))
def test_invalid_seeds(text):

    with pytest.raises(ValueError):
        config.parse_seeds(text)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
