""" The static registry of variable types supported by the IPC channel. Each
    :class:`TypeDescriptor` knows its wire type code, its byte width, the
    range of acceptable values, and how to translate a Python value to and
    from the bytes exchanged with the runtime.

    All multi-byte values travel in network (big-endian) byte order.
"""

import enum
import struct

from . import errors


STRING_CAPACITY = 250


class Kind(enum.Enum):
    BOOL = 'bool'
    INTEGER = 'integer'
    FLOAT = 'float'
    STRING = 'string'


class TypeDescriptor:
    """ Immutable description of one variable type. *format* is the
        :mod:`struct` format character for the fixed-width kinds; it is
        None for strings, where *width* is the buffer capacity including
        the terminating null byte.
    """

    __slots__ = ('name', 'code', 'kind', 'width', 'minimum', 'maximum', 'format')

    def __init__(self, name, code, kind, width, format=None, minimum=None, maximum=None):

        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'code', code)
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 'width', width)
        object.__setattr__(self, 'format', format)
        object.__setattr__(self, 'minimum', minimum)
        object.__setattr__(self, 'maximum', maximum)


    def __setattr__(self, name, value):
        raise AttributeError('TypeDescriptor instances are immutable')


    def __repr__(self):
        return 'TypeDescriptor(%s, code=%d)' % (self.name, self.code)


    @property
    def range(self):
        if self.minimum is None:
            return None

        return (self.minimum, self.maximum)


    def encode(self, value, encoding='utf-8'):
        """ Return the wire representation of *value*, after confirming it is
            acceptable for this type; a :class:`pcsipc.errors.ValidationError`
            is raised if it is not.
        """

        kind = self.kind

        if kind == Kind.BOOL:
            if isinstance(value, bool):
                pass
            else:
                raise errors.ValueTypeError("%s expects a bool, not %s" % (self.name, type(value).__name__))

            if value == True:
                return b'\xff'
            else:
                return b'\x00'

        if kind == Kind.STRING:
            if isinstance(value, str):
                pass
            else:
                raise errors.ValueTypeError("%s expects a str, not %s" % (self.name, type(value).__name__))

            encoded = value.encode(encoding) + b'\x00'
            if len(encoded) > self.width:
                raise errors.SizeError("%d bytes exceeds the %d byte capacity of %s" % (len(encoded), self.width, self.name))

            return encoded

        # Numeric types from here on. A bool is technically an int, but it is
        # never what the caller meant for a numeric variable.

        if isinstance(value, bool):
            raise errors.ValueTypeError("%s expects a number, not bool" % (self.name))

        if kind == Kind.INTEGER:
            if isinstance(value, int):
                pass
            else:
                raise errors.ValueTypeError("%s expects an int, not %s" % (self.name, type(value).__name__))

            if value < self.minimum or value > self.maximum:
                raise errors.RangeError("%d is outside the %s range [%d, %d]" % (value, self.name, self.minimum, self.maximum))

            return struct.pack('>' + self.format, value)

        if isinstance(value, (int, float)):
            pass
        else:
            raise errors.ValueTypeError("%s expects a float, not %s" % (self.name, type(value).__name__))

        try:
            return struct.pack('>' + self.format, value)
        except (OverflowError, struct.error):
            raise errors.RangeError("%r cannot be represented as %s" % (value, self.name))


    def decode(self, data, encoding='utf-8'):
        """ Interpret the bytes received from the runtime. Strings stop at the
            first null byte, and bytes that are not valid in *encoding* are
            replaced rather than rejected; fixed-width kinds require at least
            *width* bytes.
        """

        if self.kind == Kind.STRING:
            data = bytes(data[:self.width])
            data = data.split(b'\x00', 1)[0]
            return data.decode(encoding, 'replace')

        if len(data) < self.width:
            raise errors.SizeError("%s expects %d bytes, received %d" % (self.name, self.width, len(data)))

        value = struct.unpack_from('>' + self.format, data)[0]

        if self.kind == Kind.BOOL:
            return value != 0

        return value


# end of class TypeDescriptor



BOOL = TypeDescriptor('BOOL', 1, Kind.BOOL, 1, 'B')
BYTE = TypeDescriptor('BYTE', 2, Kind.INTEGER, 1, 'B', 0, 0xff)
WORD = TypeDescriptor('WORD', 3, Kind.INTEGER, 2, 'H', 0, 0xffff)
DWORD = TypeDescriptor('DWORD', 4, Kind.INTEGER, 4, 'I', 0, 0xffffffff)
USINT = TypeDescriptor('USINT', 5, Kind.INTEGER, 1, 'B', 0, 0xff)
UINT = TypeDescriptor('UINT', 6, Kind.INTEGER, 2, 'H', 0, 0xffff)
UDINT = TypeDescriptor('UDINT', 7, Kind.INTEGER, 4, 'I', 0, 0xffffffff)
SINT = TypeDescriptor('SINT', 8, Kind.INTEGER, 1, 'b', -0x80, 0x7f)
INT = TypeDescriptor('INT', 9, Kind.INTEGER, 2, 'h', -0x8000, 0x7fff)
DINT = TypeDescriptor('DINT', 10, Kind.INTEGER, 4, 'i', -0x80000000, 0x7fffffff)
REAL = TypeDescriptor('REAL', 11, Kind.FLOAT, 4, 'f')
STRING = TypeDescriptor('STRING', 20, Kind.STRING, STRING_CAPACITY)

registry = (BOOL, BYTE, WORD, DWORD, USINT, UINT, UDINT, SINT, INT, DINT, REAL, STRING)

_by_code = dict()
_by_name = dict()

for descriptor in registry:
    _by_code[descriptor.code] = descriptor
    _by_name[descriptor.name] = descriptor

del descriptor


def by_code(code):
    """ Return the :class:`TypeDescriptor` for a wire type *code*, or None
        if the code is not one we know how to handle.
    """

    try:
        return _by_code[code]
    except KeyError:
        return None



def lookup(kind):
    """ Return the :class:`TypeDescriptor` matching *kind*, which can be a
        descriptor, a wire type code, or a case-insensitive type name such
        as 'dint' or 'VARTYPE_DINT'.
    """

    if isinstance(kind, TypeDescriptor):
        return kind

    if isinstance(kind, int) and not isinstance(kind, bool):
        descriptor = by_code(kind)
        if descriptor is None:
            raise errors.ConfigurationError('unknown wire type code: ' + repr(kind))
        return descriptor

    name = str(kind).strip().upper()
    if name.startswith('VARTYPE_'):
        name = name[8:]

    try:
        return _by_name[name]
    except KeyError:
        raise errors.ConfigurationError('unknown variable type: ' + repr(kind))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
