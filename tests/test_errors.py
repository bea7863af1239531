import pytest

from pcsipc import errors
from pcsipc.errors import Family, Result


def test_families():

    assert Result.SUCCESS.family == Family.SUCCESS
    assert Result.INVALIDARGUMENT.family == Family.ARGUMENT
    assert Result.UDSSOCKET_CONNECT.family == Family.CONNECTION
    assert Result.FRAME_INVALID.family == Family.FRAME
    assert Result.CLIENT_PENDING.family == Family.CLIENT
    assert Result.CLIENT_THREADSTART.family == Family.CLIENT
    assert Result.SERVER_BUFFERTOSMALL.family == Family.SERVER


def test_error_classes():

    assert type(errors.error(0x01, 'x')) is errors.ArgumentError
    assert type(errors.error(0x13, 'x')) is errors.SocketError
    assert type(errors.error(0x22, 'x')) is errors.FrameError
    assert type(errors.error(0x31, 'x')) is errors.Pending
    assert type(errors.error(0x32, 'x')) is errors.Timeout
    assert type(errors.error(0x37, 'x')) is errors.ClientError
    assert type(errors.error(0x41, 'x')) is errors.ServerError

    unknown = errors.error(0x99, 'mystery')
    assert type(unknown) is errors.IpcError
    assert unknown.code == 0x99


def test_pending():

    pending = errors.error(Result.CLIENT_PENDING, 'pending')
    timeout = errors.error(Result.CLIENT_TIMEOUT, 'timeout')

    assert pending.pending() == True
    assert timeout.pending() == False
    assert errors.TypeMismatch('no').pending() == False


def test_check():

    errors.check(Result.SUCCESS, str)

    with pytest.raises(errors.ClientError) as info:
        errors.check(Result.CLIENT_NOTEXIST, lambda code: 'does not exist')

    assert info.value.code == Result.CLIENT_NOTEXIST
    assert info.value.message == 'does not exist'
    assert str(info.value) == 'does not exist'


def test_same():

    first = errors.error(0x37, 'does not exist')
    second = errors.error(0x37, 'does not exist')
    other = errors.error(0x37, 'something else')
    different = errors.error(0x38, 'does not exist')

    assert first is not second
    assert errors.same(first, second) == True
    assert errors.same(first, other) == False
    assert errors.same(first, different) == False
    assert errors.same(first, None) == False
    assert errors.same(None, None) == True

    assert errors.same(ValueError('a'), ValueError('a')) == True
    assert errors.same(ValueError('a'), TypeError('a')) == False


def test_validation_family():

    for cls in (errors.TypeMismatch, errors.RangeError, errors.SizeError, errors.ValueTypeError):
        assert issubclass(cls, errors.ValidationError)
        assert not issubclass(cls, errors.IpcError)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
