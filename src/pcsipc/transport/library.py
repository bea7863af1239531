""" Transport implementation backed by the native ``libipcclient`` shared
    library shipped with the OpenPCS runtime, accessed via :mod:`ctypes`.
"""

import ctypes
import ctypes.util
import logging

from .. import config
from .. import errors
from .base import Transport

logger = logging.getLogger(__name__)


class _IpcClient(ctypes.Structure):
    _fields_ = [('m_pInternal', ctypes.c_void_p)]


_handle = ctypes.POINTER(_IpcClient)
_uint8_p = ctypes.POINTER(ctypes.c_uint8)
_uint32_p = ctypes.POINTER(ctypes.c_uint32)

prototypes = dict()
prototypes['IpcClientOpen'] = (ctypes.c_uint8, (_handle, ctypes.c_char_p, ctypes.c_char_p))
prototypes['IpcClientStartProcessThread'] = (ctypes.c_uint8, (_handle, ctypes.c_uint32))
prototypes['IpcClientSubscribe'] = (ctypes.c_uint8, (_handle, ctypes.c_char_p))
prototypes['IpcClientVarGetType'] = (ctypes.c_uint8, (_handle, ctypes.c_char_p, _uint8_p))
prototypes['IpcClientVarGet'] = (ctypes.c_uint8, (_handle, ctypes.c_char_p, _uint8_p, ctypes.c_uint32, _uint32_p))
prototypes['IpcClientVarSet'] = (ctypes.c_uint8, (_handle, ctypes.c_char_p, _uint8_p, ctypes.c_uint32))
prototypes['IpcClientGetServerState'] = (ctypes.c_uint8, (_handle, _uint8_p))
prototypes['IpcClientClose'] = (ctypes.c_uint8, (_handle,))
prototypes['IpcCommonErrorToString'] = (ctypes.c_char_p, (ctypes.c_uint8,))


def load(name=None):
    """ Load the native library and declare the signature of every function
        used here. *name* is either a bare library name, such as 'ipcclient',
        or a path to the shared object; the configured default is used if
        no *name* is given.
    """

    if name is None:
        name = config.library()

    path = ctypes.util.find_library(name)
    if path is None:
        path = name

    try:
        library = ctypes.CDLL(path)
    except OSError as e:
        raise errors.LibraryError("cannot load %s: %s" % (path, e))

    for function, prototype in prototypes.items():
        restype, argtypes = prototype

        try:
            method = getattr(library, function)
        except AttributeError:
            raise errors.LibraryError("%s does not provide %s()" % (path, function))

        method.restype = restype
        method.argtypes = argtypes

    logger.debug('loaded %s', path)
    return library



class Library(Transport):
    """ Call into ``libipcclient`` directly. Names and paths are encoded with
        the configured text encoding before they are handed to the library.
    """

    def __init__(self, name=None, library=None):

        if library is None:
            library = load(name)

        self.library = library
        self.client = _IpcClient()
        self.encoding = config.encoding()


    def _encode(self, string):
        return string.encode(self.encoding)


    def open(self, request_path, response_path):
        request_path = self._encode(request_path)
        response_path = self._encode(response_path)
        return self.library.IpcClientOpen(ctypes.byref(self.client), request_path, response_path)


    def start_processing(self, poll_time):
        return self.library.IpcClientStartProcessThread(ctypes.byref(self.client), poll_time)


    def subscribe(self, name):
        return self.library.IpcClientSubscribe(ctypes.byref(self.client), self._encode(name))


    def get_type(self, name):
        code = ctypes.c_uint8(0)
        result = self.library.IpcClientVarGetType(ctypes.byref(self.client), self._encode(name), ctypes.byref(code))
        return result, code.value


    def get_value(self, name, capacity):
        buffer = (ctypes.c_uint8 * capacity)()
        actual = ctypes.c_uint32(0)

        result = self.library.IpcClientVarGet(ctypes.byref(self.client), self._encode(name), buffer, capacity, ctypes.byref(actual))

        length = min(actual.value, capacity)
        return result, bytes(buffer[:length])


    def set_value(self, name, data):
        length = len(data)
        buffer = (ctypes.c_uint8 * length).from_buffer_copy(data)
        return self.library.IpcClientVarSet(ctypes.byref(self.client), self._encode(name), buffer, length)


    def get_server_running(self):
        state = ctypes.c_uint8(0)
        result = self.library.IpcClientGetServerState(ctypes.byref(self.client), ctypes.byref(state))
        return result, state.value != 0


    def close(self):
        return self.library.IpcClientClose(ctypes.byref(self.client))


    def error_to_string(self, result):
        message = self.library.IpcCommonErrorToString(result)

        if message is None:
            return "unknown result code 0x%02x" % (result)

        return message.decode(self.encoding, 'replace')


# end of class Library


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
