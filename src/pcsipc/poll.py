""" Recurring background calls. :func:`start` invokes a method on a fixed
    cadence from a dedicated thread until :func:`stop` is called; this is
    what drives the subscription tick of every :class:`pcsipc.Client`.
"""

import logging
import threading
import time
import weakref

logger = logging.getLogger(__name__)

active = dict()
active_lock = threading.Lock()


def _key(method):
    """ Bound methods are created anew on every attribute access, so their
        id() is not stable; identify them by instance and function instead.
    """

    try:
        return (id(method.__self__), id(method.__func__))
    except AttributeError:
        return (id(method), None)



def _reference(method):

    try:
        method.__func__
        method.__self__
    except AttributeError:
        return weakref.ref(method)
    else:
        return weakref.WeakMethod(method)



def period(method):
    """ Return the currently set polling period for the provided *method*.
        Returns None if no polling is presently active for that method.
    """

    try:
        poller = active[_key(method)]
    except KeyError:
        return None

    if poller.shutdown == True:
        return None

    return poller.interval



def start(method, period):
    """ Call the provided *method* every *period* seconds. The first call
        occurs immediately. If a poller is already active for the method its
        period is updated instead; there is never more than one poller per
        method. A *period* of None or zero is equivalent to :func:`stop`.
    """

    if period is None or period == 0:
        stop(method)
        return

    key = _key(method)

    with active_lock:
        try:
            poller = active[key]
        except KeyError:
            poller = None

        # A poller that was asked to stop may not have exited yet; it cannot
        # be revived, a new one takes its place.

        if poller is None or poller.shutdown == True:
            poller = _Poller(method, key)
            active[key] = poller

    poller.period(period)



def stop(method):
    """ Discontinue calling the provided *method*. A call to :func:`stop`
        made from within *method* itself takes effect once it returns.
    """

    with active_lock:
        try:
            poller = active.pop(_key(method))
        except KeyError:
            return

    poller.stop()



class _Poller:
    """ Background thread to invoke a single method on a steady cadence.
    """

    def __init__(self, method, key):

        self.key = key
        self.interval = None
        self.reference = _reference(method)
        self.shutdown = False

        self.alarm = threading.Event()
        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    def period(self, period):
        """ Update the polling interval to *period* seconds.
        """

        period = float(period)
        self.interval = period
        self.wake()


    def run(self):

        interval = None
        next = time.monotonic()

        while True:
            if self.shutdown == True:
                break

            begin = time.monotonic()

            if self.alarm.is_set() == True:
                self.alarm.clear()

                # A new interval starts an entirely new cadence.

                interval = self.interval
                next = begin + interval

            elif interval is None:
                self.alarm.wait(1)
                continue

            else:
                # Keep the cadence constant regardless of when we woke up.
                next += interval

            method = self.reference()

            if method is None:
                # The owner is gone. No further calls are possible.
                break

            try:
                method()
            except Exception:
                logger.exception('periodic call to %r failed', method)

            del method

            delay = next - time.monotonic()
            if delay > 0:
                self.alarm.wait(delay)

        with active_lock:
            if active.get(self.key) is self:
                del active[self.key]


    def stop(self):
        self.shutdown = True
        self.wake()


    def wake(self):
        self.alarm.set()


# end of class _Poller


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
