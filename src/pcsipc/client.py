""" The :class:`Client` owns the connection to the runtime and the periodic
    subscription tick that drives every change, error, and server state
    notification.
"""

import logging
import threading

from . import config
from . import errors
from . import pending
from . import poll
from . import types
from .errors import Result
from .transport import Library
from .variable import Variable, dispatch

logger = logging.getLogger(__name__)


class _UnknownType(errors.Error):
    """ The runtime reported a type code with no matching descriptor. This is
        retried as if it were pending; the runtime may still be settling.
    """

    def pending(self):
        return True



class Client:
    """ A connection to the runtime's IPC server. The *request_path* and
        *response_path* are the domain sockets used for the exchange;
        *poll_time* is the interval, in seconds, for both the transport's
        background processing and the subscription tick. Any argument left
        as None is taken from :mod:`pcsipc.config`.

        The *transport* defaults to :class:`pcsipc.transport.Library`; the
        *scheduler* defaults to :mod:`pcsipc.poll`, and can be replaced by
        any object with compatible ``start(method, period)`` and
        ``stop(method)`` functions.

        Never create two clients for the same socket paths; use
        :func:`pcsipc.connect` to share a single client instead.

        :ivar lock: Held by every operation and by the subscription tick.
    """

    STARTED = 'started'
    STOPPED = 'stopped'

    def __init__(self, request_path=None, response_path=None, poll_time=None, transport=None, scheduler=None):

        if request_path is None:
            request_path = config.request_path()
        if response_path is None:
            response_path = config.response_path()
        if poll_time is None:
            poll_time = config.poll_time()

        poll_time = float(poll_time)
        if poll_time <= 0:
            raise errors.ConfigurationError('poll_time must be positive')

        if transport is None:
            transport = Library()

        if scheduler is None:
            scheduler = poll

        self.request_path = request_path
        self.response_path = response_path
        self.poll_time = poll_time
        self.transport = transport
        self.scheduler = scheduler
        self.closed = False
        self.lock = threading.RLock()

        self.events = set()
        self.event_removals = set()
        self.variables = set()
        self.variable_removals = set()

        self.active = False
        self.server_running = None

        self._open()


    def __enter__(self):
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False


    def __repr__(self):
        return 'Client(%r, %r)' % (self.request_path, self.response_path)


    def _check(self, result):
        errors.check(result, self.transport.error_to_string)


    def _require_open(self):
        if self.closed == True:
            raise errors.Closed('the client has been closed')


    def _expired(self):
        message = self.transport.error_to_string(Result.CLIENT_TIMEOUT)
        return errors.error(Result.CLIENT_TIMEOUT, message)


    def _open(self):

        result = self.transport.open(self.request_path, self.response_path)
        self._check(result)

        milliseconds = int(round(self.poll_time * 1000))
        result = self.transport.start_processing(milliseconds)

        if result != Result.SUCCESS:
            self.closed = True
            self.transport.close()
            self._check(result)

        logger.debug('opened %s, %s', self.request_path, self.response_path)


    def close(self):
        """ Stop the subscription tick, forget every subscription, and close
            the transport. Any further use of this client, or of a variable
            registered with it, raises :class:`pcsipc.errors.Closed`. Closing
            an already closed client does nothing.
        """

        with self.lock:
            if self.closed == True:
                return

            self._stop()

            self.events.clear()
            self.event_removals.clear()
            self.variables.clear()
            self.variable_removals.clear()

            self.closed = True
            result = self.transport.close()

        self._check(result)
        logger.debug('closed %s, %s', self.request_path, self.response_path)


    def register(self, variable):
        """ Register a :class:`pcsipc.Variable` with this client. This is
            required before any operation on the variable is possible. The
            variable is only bound to this client if the transport accepts
            the subscription; a variable already registered with another
            open client is rejected.
        """

        with self.lock:
            self._require_open()

            current = variable.client
            if current is not None and current is not self and current.closed == False:
                raise errors.RegistrationError("%s is already registered with %r" % (variable.name, current))

            result = self.transport.subscribe(variable.name)
            self._check(result)
            variable._bind(self)

        logger.debug('registered %r', variable)


    def variable(self, name, type='auto', timeout=None):
        """ Create, register, and return a :class:`pcsipc.Variable`. If the
            *type* is 'auto' (or None) the type is requested from the runtime
            via :func:`resolve_type`, waiting at most *timeout* seconds.
        """

        automatic = type is None

        if isinstance(type, str):
            if type.strip().upper() in ('AUTO', 'VARTYPE_AUTO'):
                automatic = True

        if automatic == True:
            descriptor = self.resolve_type(name, timeout)
        else:
            descriptor = types.lookup(type)

        variable = Variable(name, descriptor)
        self.register(variable)
        return variable


    def resolve_type(self, name, timeout=None):
        """ Ask the runtime for the type of the named variable, returning the
            matching :class:`pcsipc.types.TypeDescriptor`. The answer may
            take several cycles of the runtime; the query is repeated until
            a known type is reported or *timeout* seconds elapse, at which
            point :class:`pcsipc.errors.Timeout` is raised.
        """

        if timeout is None:
            timeout = config.type_timeout()

        with self.lock:
            self._require_open()
            result = self.transport.subscribe(name)
            self._check(result)

        def attempt():
            code = self._get_type(name)
            descriptor = types.by_code(code)

            if descriptor is None:
                raise _UnknownType("%s has unsupported type code %d" % (name, code))

            return descriptor

        return pending.retry(attempt, timeout, self._expired)


    def is_server_running(self):
        """ Return True if the runtime is currently running. Any failure to
            determine the state raises an exception.
        """

        with self.lock:
            self._require_open()
            result, running = self.transport.get_server_running()

        self._check(result)
        return bool(running)


    def subscribe_events(self, callback):
        """ Register a *callback* to be invoked with :attr:`STARTED` or
            :attr:`STOPPED` whenever the running state of the runtime
            changes. The callback is returned for convenience.
        """

        with self.lock:
            self._require_open()

            # Start first: a failed start leaves nothing behind.

            if self.active == False:
                self._start()

            self.events.add(callback)
            self.event_removals.discard(callback)

        return callback


    def unsubscribe_events(self, callback):
        """ Remove an event callback. The removal takes effect at the start of
            the next tick.
        """

        with self.lock:
            self._require_open()
            self.event_removals.add(callback)
            self._start_stop()


    def tick(self):
        """ One pass of subscription processing. This is invoked on every
            poll interval while any subscription is active; it should not
            normally be called directly.
        """

        with self.lock:
            if self.closed == True:
                return

            running = self.is_server_running()

            if self.event_removals:
                self.events.difference_update(self.event_removals)
                self.event_removals.clear()

            if self.variable_removals:
                self.variables.difference_update(self.variable_removals)
                self.variable_removals.clear()

            self._start_stop()

            if self.active == False:
                return

            if running != self.server_running:
                if running == True:
                    event = self.STARTED
                else:
                    event = self.STOPPED

                logger.info('runtime %s', event)
                dispatch(tuple(self.events), event)
                self.server_running = running

                if self.closed == True:
                    return

            if running == False:
                return

            for variable in tuple(self.variables):
                if self.closed == True:
                    break

                variable._tick()


    def _get_type(self, name):

        with self.lock:
            self._require_open()
            result, code = self.transport.get_type(name)
            self._check(result)

        return code


    def _get(self, name, capacity):

        with self.lock:
            self._require_open()
            result, data = self.transport.get_value(name, capacity)
            self._check(result)

        return data


    def _set(self, name, data):

        with self.lock:
            self._require_open()
            result = self.transport.set_value(name, data)
            self._check(result)


    def _subscribe_variable(self, variable):

        if self.active == False:
            self._start()

        self.variables.add(variable)
        self.variable_removals.discard(variable)


    def _unsubscribe_variable(self, variable):
        self.variable_removals.add(variable)
        self._start_stop()


    def _start_stop(self):
        """ Start the subscription tick if there is anything to process, or
            stop it if there is not.
        """

        if not self.events and not self.variables:
            self._stop()
        elif self.active == False:
            self._start()


    def _start(self):

        self.server_running = self.is_server_running()
        self.active = True
        self.scheduler.start(self.tick, self.poll_time)

        logger.debug('subscription processing started')


    def _stop(self):

        if self.active == False:
            return

        self.active = False
        self.scheduler.stop(self.tick)

        logger.debug('subscription processing stopped')


# end of class Client


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
