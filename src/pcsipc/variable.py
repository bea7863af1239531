""" The :class:`Variable` handle for a single process variable, and the
    :class:`Subscription` records used to deliver its change and error
    notifications.
"""

import logging
import weakref

from . import config
from . import errors
from . import pending
from . import types

logger = logging.getLogger(__name__)


def dispatch(callbacks, *args):
    """ Invoke every callback in *callbacks* with the same arguments. A
        failing callback is logged and does not prevent the others from
        being called.
    """

    for callback in callbacks:
        try:
            callback(*args)
        except Exception:
            logger.exception('callback %r failed', callback)



class Subscription:
    """ Handle returned by :func:`Variable.subscribe`; pass it back to
        :func:`Variable.unsubscribe` to discontinue notifications.
    """

    def __init__(self, on_value, on_error=None):
        self.on_value = on_value
        self.on_error = on_error


    def __repr__(self):
        return 'Subscription(%r, %r)' % (self.on_value, self.on_error)


# end of class Subscription



class Variable:
    """ A Variable is a typed handle on a single named process variable in
        the remote runtime. The *type* is a :class:`pcsipc.types.TypeDescriptor`
        or anything :func:`pcsipc.types.lookup` understands, such as 'dint'.

        A Variable must be registered with a :class:`pcsipc.Client` before
        its value can be read, written, or subscribed to; see
        :func:`pcsipc.Client.register`. The Variable only holds a weak
        reference to its client.

        :ivar name: The fully qualified name of the variable in the runtime.
        :ivar type: The :class:`pcsipc.types.TypeDescriptor` for the variable.
    """

    def __init__(self, name, type):

        self.name = name
        self.type = types.lookup(type)
        self.encoding = config.encoding()

        self._client = None
        self._value = None
        self._error = None

        self._type_callbacks = set()
        self._subscriptions = set()
        self._removals = set()


    def __repr__(self):
        return 'Variable(%r, %s)' % (self.name, self.type.name)


    @property
    def client(self):
        """ The :class:`pcsipc.Client` this variable is registered with, or
            None if it has not been registered (or the client no longer
            exists).
        """

        if self._client is None:
            return None

        return self._client()


    @property
    def value(self):
        """ The value observed by the most recent subscription tick, or None
            if that tick did not produce one.
        """

        return self._value


    @property
    def error(self):
        """ The error observed by the most recent subscription tick, if any.
        """

        return self._error


    @property
    def subscriptions(self):
        return frozenset(self._subscriptions)


    def _bind(self, client):
        self._client = weakref.ref(client)


    def _bound(self):
        """ Return the client this variable is registered with, raising an
            exception if there is no usable client.
        """

        if self._client is None:
            raise errors.NotRegistered("%s is not registered with a client" % (self.name))

        client = self._client()

        if client is None or client.closed == True:
            raise errors.Closed("the client for %s has been closed" % (self.name))

        return client


    def check_type(self):
        """ Confirm the runtime agrees on the type of this variable. The
            type query itself may raise :class:`pcsipc.errors.Pending`; a
            definitive disagreement raises :class:`pcsipc.errors.TypeMismatch`.
        """

        client = self._bound()
        code = client._get_type(self.name)

        if code != self.type.code:
            expected = self.type
            actual = types.by_code(code)
            if actual is None:
                actual = 'unknown type code %d' % (code)
            else:
                actual = actual.name

            raise errors.TypeMismatch("%s is %s in the runtime, not %s" % (self.name, actual, expected.name))


    def get(self):
        """ Read the current value from the runtime. This will raise
            :class:`pcsipc.errors.Pending` if the runtime has not answered
            yet; that is expected, particularly for the first read of a
            variable, or the first read after a :func:`set`. Use
            :func:`get_sync` to block until the answer arrives.
        """

        client = self._bound()

        with client.lock:
            self.check_type()
            data = client._get(self.name, self.type.width)

        return self.type.decode(data, self.encoding)


    def set(self, value):
        """ Write a new value. The value is checked locally first: a value of
            the wrong Python type, outside the numeric range, or too long for
            the string buffer raises a :class:`pcsipc.errors.ValidationError`
            and nothing is sent to the runtime. The new value is not
            immediately visible via :func:`get`, which will report pending
            until the next read cycle has completed.
        """

        client = self._bound()
        data = self.type.encode(value, self.encoding)

        with client.lock:
            self.check_type()
            client._set(self.name, data)


    def get_sync(self, timeout):
        """ Call :func:`get` repeatedly until it returns a value, raises a
            hard error, or *timeout* seconds elapse; in the last case a
            :class:`pcsipc.errors.Timeout` is raised.
        """

        client = self._bound()
        return pending.retry(self.get, timeout, client._expired)


    def set_sync(self, value, timeout):
        """ Call :func:`set` repeatedly until the runtime accepts it, with the
            same timeout behavior as :func:`get_sync`. A value that fails
            local validation is rejected before the first attempt.
        """

        client = self._bound()
        self.type.encode(value, self.encoding)

        method = lambda: self.set(value)
        pending.retry(method, timeout, client._expired)


    def subscribe_type_match(self, callback):
        """ Register a one-time callback, invoked as soon as the type of this
            variable has been checked against the runtime. The callback is
            invoked with three arguments: this variable, a boolean that is
            True if the types match, and the exception describing the failure
            if they do not (None if they do).
        """

        client = self._bound()

        with client.lock:
            client._subscribe_variable(self)
            self._type_callbacks.add(callback)


    def subscribe(self, on_value, on_error=None):
        """ Request notification of changes to this variable. *on_value* is
            invoked with this variable and the new value whenever a changed
            value is observed; *on_error*, if provided, is invoked with this
            variable and the exception whenever a new error is observed. An
            error that persists unchanged is only reported once. Returns a
            :class:`Subscription` that can be passed to :func:`unsubscribe`.
        """

        client = self._bound()
        subscription = Subscription(on_value, on_error)

        with client.lock:
            client._subscribe_variable(self)
            self._subscriptions.add(subscription)

        return subscription


    def unsubscribe(self, subscription):
        """ Discontinue a :class:`Subscription`. The removal takes effect at
            the start of the next tick; if called from within a callback the
            remaining callbacks for the current tick are still invoked.
        """

        client = self._bound()

        with client.lock:
            self._removals.add(subscription)


    def _tick(self):
        """ Process subscriptions for one tick of the owning client. The
            client holds its lock for the duration.
        """

        client = self._bound()

        if self._type_callbacks:
            success = None
            error = None

            try:
                self.check_type()
            except Exception as e:
                if isinstance(e, errors.Error) and e.pending():
                    pass
                else:
                    success = False
                    error = e
            else:
                success = True

            if success is not None:
                callbacks = tuple(self._type_callbacks)
                self._type_callbacks.difference_update(callbacks)
                dispatch(callbacks, self, success, error)

                if client.closed == True:
                    return

        if self._removals:
            self._subscriptions.difference_update(self._removals)
            self._removals.clear()

        if not self._type_callbacks and not self._subscriptions:
            client._unsubscribe_variable(self)
            return

        if not self._subscriptions:
            return

        value = None
        error = None

        try:
            value = self.get()
        except Exception as e:
            if isinstance(e, errors.Error) and e.pending():
                # No new information this tick.
                return
            error = e

        subscriptions = tuple(self._subscriptions)

        if error is None:
            if value != self._value:
                callbacks = [subscription.on_value for subscription in subscriptions]
                dispatch(callbacks, self, value)

        elif errors.same(error, self._error) == False:
            callbacks = list()
            for subscription in subscriptions:
                if subscription.on_error is not None:
                    callbacks.append(subscription.on_error)

            dispatch(callbacks, self, error)

        self._value = value
        self._error = error


# end of class Variable


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
