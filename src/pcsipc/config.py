""" Default settings for pcsipc. Every default can be overridden via an
    environment variable; arguments passed explicitly to a
    :class:`pcsipc.Client` always take precedence over both.
"""

import os

from . import errors


defaults = dict()
defaults['PCSIPC_REQUEST_PATH'] = '/var/run/Ipc0Request'
defaults['PCSIPC_RESPONSE_PATH'] = '/var/run/Ipc0Response'
defaults['PCSIPC_POLL_TIME'] = '0.1'
defaults['PCSIPC_TYPE_TIMEOUT'] = '1.0'
defaults['PCSIPC_LIBRARY'] = 'ipcclient'
defaults['PCSIPC_ENCODING'] = 'utf-8'


def setting(name):
    """ Return the raw string value of the setting *name*, preferring the
        environment over the built-in default.
    """

    try:
        default = defaults[name]
    except KeyError:
        raise errors.ConfigurationError('unknown setting: ' + name)

    return os.environ.get(name, default)



def _seconds(name):

    value = setting(name)

    try:
        value = float(value)
    except ValueError:
        raise errors.ConfigurationError("%s must be a number of seconds, not %r" % (name, value))

    if value < 0:
        raise errors.ConfigurationError("%s cannot be negative" % (name))

    return value



def request_path():
    return setting('PCSIPC_REQUEST_PATH')


def response_path():
    return setting('PCSIPC_RESPONSE_PATH')


def poll_time():
    """ The interval, in seconds, between subscription ticks and between
        the transport's own background request cycles.
    """

    return _seconds('PCSIPC_POLL_TIME')


def type_timeout():
    """ How long, in seconds, to wait for the runtime to report the type of
        a variable when it is created with automatic typing.
    """

    return _seconds('PCSIPC_TYPE_TIMEOUT')


def library():
    return setting('PCSIPC_LIBRARY')


def encoding():
    return setting('PCSIPC_ENCODING')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
