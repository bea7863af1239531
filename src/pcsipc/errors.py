""" Result codes reported by the IPC transport, and the exception hierarchy
    used throughout pcsipc. Transport failures are :class:`IpcError`
    instances, subclassed by result code family; failures detected locally,
    before any data is moved, are :class:`ValidationError` instances.
"""

import enum


class Family(enum.Enum):
    """ Broad category of a :class:`Result` code, taken from the high nibble
        of the code.
    """

    SUCCESS = 0
    ARGUMENT = 1
    CONNECTION = 2
    FRAME = 3
    CLIENT = 4
    SERVER = 5


class Result(enum.IntEnum):
    """ Every result code the IPC transport can return. The numeric values
        are defined by the native library and must not change.
    """

    SUCCESS = 0x00
    INVALIDARGUMENT = 0x01

    UDSSOCKET_CREATION = 0x11
    UDSSOCKET_BIND = 0x12
    UDSSOCKET_CONNECT = 0x13
    UDSSOCKET_SEND = 0x14
    UDSSOCKET_RECV = 0x15

    FRAME_INVALID = 0x21
    FRAME_BUFFERTOSMALL = 0x22

    CLIENT_PENDING = 0x31
    CLIENT_TIMEOUT = 0x32
    CLIENT_PROTOCOL = 0x33
    CLIENT_BUFFERTOSMALL = 0x34
    CLIENT_SUBSCRIBE = 0x35
    CLIENT_NOTSUBSCRIBED = 0x36
    CLIENT_NOTEXIST = 0x37
    CLIENT_INVALIDTYPE = 0x38
    CLIENT_THREADSTART = 0x39

    SERVER_PROTOCOL = 0x41
    SERVER_BUFFERTOSMALL = 0x42


    @property
    def family(self):
        if self == Result.SUCCESS:
            return Family.SUCCESS

        return _families[self >> 4]


_families = {
    0x0: Family.ARGUMENT,
    0x1: Family.CONNECTION,
    0x2: Family.FRAME,
    0x3: Family.CLIENT,
    0x4: Family.SERVER,
}


class Error(Exception):
    """ Base class for every exception raised by pcsipc. The *code* is a
        :class:`Result` for transport failures, and None for anything
        detected locally.
    """

    def __init__(self, message, code=None):
        Exception.__init__(self, message)
        self.message = message
        self.code = code


    def pending(self):
        """ Return True if this error only means the requested operation
            has not completed yet.
        """

        return False


    def __repr__(self):
        if self.code is None:
            return '%s(%r)' % (type(self).__name__, self.message)

        return '%s(%r, code=0x%02x)' % (type(self).__name__, self.message, int(self.code))



class IpcError(Error):
    """ A non-success result code returned by the transport.
    """

    def __init__(self, message, code):
        Error.__init__(self, message, code)


class ArgumentError(IpcError):
    pass


class SocketError(IpcError):
    """ The transport could not create, bind, connect, send or receive on
        its domain sockets.
    """


class FrameError(IpcError):
    pass


class ClientError(IpcError):
    pass


class ServerError(IpcError):
    pass


class Pending(ClientError):
    """ The request was accepted, but the answer is not available yet. This
        is the only transport condition worth retrying.
    """

    def pending(self):
        return True


class Timeout(ClientError):
    """ A synchronous call gave up waiting on a pending operation.
    """



class ValidationError(Error):
    """ A value or type check failed locally; nothing was sent or written.
    """


class TypeMismatch(ValidationError):
    pass


class RangeError(ValidationError, ValueError):
    pass


class SizeError(ValidationError, ValueError):
    pass


class ValueTypeError(ValidationError, TypeError):
    pass



class NotRegistered(Error):
    """ A :class:`pcsipc.Variable` was used before being registered with a
        :class:`pcsipc.Client`.
    """


class RegistrationError(Error):
    pass


class Closed(Error):
    """ The :class:`pcsipc.Client` involved has been closed.
    """


class ConfigurationError(Error):
    pass


class LibraryError(Error):
    pass



_classes = {
    Family.ARGUMENT: ArgumentError,
    Family.CONNECTION: SocketError,
    Family.FRAME: FrameError,
    Family.CLIENT: ClientError,
    Family.SERVER: ServerError,
}


def error(code, message):
    """ Return (not raise) the :class:`IpcError` subclass appropriate for
        the result *code*. Codes outside the known enumeration are kept as
        plain integers on a bare :class:`IpcError`.
    """

    try:
        code = Result(code)
    except ValueError:
        return IpcError(message, code)

    if code == Result.CLIENT_PENDING:
        return Pending(message, code)
    if code == Result.CLIENT_TIMEOUT:
        return Timeout(message, code)

    cls = _classes[code.family]
    return cls(message, code)



def check(result, describe):
    """ Raise the matching :class:`IpcError` if *result* is anything other
        than success. *describe* is a callable translating a result code
        into a human-readable string, typically
        :func:`pcsipc.transport.Transport.error_to_string`.
    """

    if result == Result.SUCCESS:
        return

    raise error(result, describe(result))



def same(first, second):
    """ Return True if two errors are equivalent for notification purposes:
        same class, same code, same message. None is only the same as None.
    """

    if first is None or second is None:
        return first is second

    if type(first) is not type(second):
        return False

    if getattr(first, 'code', None) != getattr(second, 'code', None):
        return False

    first = getattr(first, 'message', str(first))
    second = getattr(second, 'message', str(second))

    return first == second


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
