""" A process-wide, reference-counted :class:`pcsipc.Client`. Several
    independent consumers in one process can each :func:`connect` and
    :func:`pcsipc.Client.close` as they see fit; the underlying client is
    created on the first connection and closed with the last.
"""

import threading

from . import config
from . import errors
from .client import Client


class SharedClient(Client):
    """ A :class:`pcsipc.Client` handed out by a :class:`Registry`. Calling
        :func:`close` releases one reference; the connection is only closed
        when the last reference is released.
    """

    def __init__(self, registry, *args, **kwargs):
        self.registry = registry
        Client.__init__(self, *args, **kwargs)


    def close(self):
        self.registry.release(self)


# end of class SharedClient



class Registry:
    """ Hands out a single shared client for one set of connection
        parameters. The *factory* is invoked with this registry followed by
        the request path, response path, and poll time whenever a new client
        is required; it defaults to :class:`SharedClient`.
    """

    def __init__(self, factory=None):

        if factory is None:
            factory = SharedClient

        self.factory = factory
        self.instance = None
        self.parameters = None
        self.count = 0
        self.lock = threading.Lock()


    def connect(self, request_path=None, response_path=None, poll_time=None):
        """ Return the shared client, creating it if necessary. Requesting a
            client with parameters different from those of the existing
            client raises :class:`pcsipc.errors.ConfigurationError`.
        """

        if request_path is None:
            request_path = config.request_path()
        if response_path is None:
            response_path = config.response_path()
        if poll_time is None:
            poll_time = config.poll_time()

        parameters = (request_path, response_path, float(poll_time))

        with self.lock:
            if self.instance is None:
                self.instance = self.factory(self, *parameters)
                self.parameters = parameters
                self.count = 0

            elif parameters != self.parameters:
                raise errors.ConfigurationError("the shared client uses %r, not %r" % (self.parameters, parameters))

            self.count += 1
            return self.instance


    def release(self, client):
        """ Drop one reference to the shared *client*, closing it if this was
            the last one. Releasing more often than connecting raises
            :class:`pcsipc.errors.ConfigurationError`.
        """

        with self.lock:
            if client is not self.instance or self.count <= 0:
                raise errors.ConfigurationError('close() has been called too often')

            self.count -= 1

            if self.count > 0:
                return

            self.instance = None
            self.parameters = None

        Client.close(client)


# end of class Registry



registry = Registry()


def connect(request_path=None, response_path=None, poll_time=None):
    """ Return the process-wide shared :class:`pcsipc.Client`; see
        :func:`Registry.connect`.
    """

    return registry.connect(request_path, response_path, poll_time)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
