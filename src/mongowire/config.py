""" Runtime configuration, read from environment variables. Each function
    here caches its answer on the function object the first time it is
    called; changes to the environment after that point are ignored unless
    a new value is passed in explicitly, which also updates the cache.

    =====================  ===========  ====================================
    variable               default      meaning
    =====================  ===========  ====================================
    ``MONGOWIRE_HOST``     localhost    address for :func:`Client.connect`
    ``MONGOWIRE_PORT``     27017        port for :func:`Client.connect`
    ``MONGOWIRE_SEEDS``    host:port    replica set seed list
    ``MONGOWIRE_TIMEOUT``  30           transport receive timeout, seconds
    ``MONGOWIRE_TRANSPORT`` zmq         transport backend
    =====================  ===========  ====================================
"""

import os


default_host = 'localhost'
default_port = 27017
default_timeout = 30.0
default_transport = 'zmq'


def host(default=None):
    """ Return the default server address.
    """

    if default is not None:
        default = str(default)
        if default == '':
            raise ValueError('the host must not be empty')

        os.environ['MONGOWIRE_HOST'] = default
        host.found = default


    found = host.found

    if found is not None:
        return found

    found = os.environ.get('MONGOWIRE_HOST', default_host)

    host.found = found
    return found

host.found = None



def port(default=None):
    """ Return the default server port.
    """

    if default is not None:
        default = _port(default)
        os.environ['MONGOWIRE_PORT'] = str(default)
        port.found = default


    found = port.found

    if found is not None:
        return found

    try:
        found = os.environ['MONGOWIRE_PORT']
    except KeyError:
        found = default_port
    else:
        found = _port(found)

    port.found = found
    return found

port.found = None



def seeds(default=None):
    """ Return the replica set seed list as a list of (host, port) tuples.
        The environment variable holds a comma-separated list of
        ``host:port`` pairs; the port may be omitted.
    """

    if default is not None:
        if isinstance(default, str):
            default = parse_seeds(default)
        else:
            default = [(str(address), _port(number)) for address, number in default]

        if len(default) == 0:
            raise ValueError('the seed list must not be empty')

        seeds.found = default


    found = seeds.found

    if found is not None:
        return list(found)

    try:
        found = os.environ['MONGOWIRE_SEEDS']
    except KeyError:
        found = [(host(), port())]
    else:
        found = parse_seeds(found)

    seeds.found = found
    return list(found)

seeds.found = None



def timeout(default=None):
    """ Return the transport receive timeout in seconds. Zero or a negative
        value is rejected; there is no way to request an unbounded wait.
    """

    if default is not None:
        default = _timeout(default)
        os.environ['MONGOWIRE_TIMEOUT'] = str(default)
        timeout.found = default


    found = timeout.found

    if found is not None:
        return found

    try:
        found = os.environ['MONGOWIRE_TIMEOUT']
    except KeyError:
        found = default_timeout
    else:
        found = _timeout(found)

    timeout.found = found
    return found

timeout.found = None



def transport():
    """ Return the name of the transport backend. This is consulted once,
        when :mod:`mongowire.transport` is first imported.
    """

    return os.environ.get('MONGOWIRE_TRANSPORT', default_transport)



def parse_seeds(text):
    """ Parse a comma-separated list of ``host[:port]`` pairs.
    """

    found = list()

    for entry in text.split(','):
        entry = entry.strip()
        if entry == '':
            continue

        if ':' in entry:
            address, number = entry.rsplit(':', 1)
            number = _port(number)
        else:
            address = entry
            number = default_port

        if address == '':
            raise ValueError('missing host in seed: ' + repr(entry))

        found.append((address, number))

    if len(found) == 0:
        raise ValueError('no seeds in ' + repr(text))

    return found



def reset():
    """ Forget any cached values; the next call to each function consults
        the environment again.
    """

    host.found = None
    port.found = None
    seeds.found = None
    timeout.found = None



def _port(value):

    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValueError('invalid port: ' + repr(value))

    if value < 1 or value > 65535:
        raise ValueError('port out of range: %d' % (value))

    return value



def _timeout(value):

    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValueError('invalid timeout: ' + repr(value))

    if value <= 0:
        raise ValueError('timeout must be positive, not %s' % (value))

    return value


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
