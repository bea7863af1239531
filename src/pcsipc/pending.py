""" Synchronous handling of operations the runtime answers asynchronously.
    A read or type query may report :class:`pcsipc.errors.Pending` for
    several request/response cycles before the answer arrives; :func:`retry`
    turns that into a blocking call with a deadline.
"""

import time

from . import errors


def retry(method, timeout, expired):
    """ Call *method* repeatedly until it returns, raises anything other than
        a pending error, or *timeout* seconds have elapsed. There is no sleep
        between attempts. On expiration the exception returned by calling
        *expired* is raised; it is expected to be a
        :class:`pcsipc.errors.Timeout` instance.
    """

    expiration = time.monotonic() + timeout

    while time.monotonic() < expiration:
        try:
            return method()
        except errors.Error as e:
            if e.pending():
                continue
            raise

    raise expired()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
