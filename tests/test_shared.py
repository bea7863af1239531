import pcsipc
import pytest
import unitruntime

from pcsipc import errors


class Factory:
    """ Build shared clients around a simulated runtime, keeping track of
        every runtime handed out.
    """

    def __init__(self):
        self.runtimes = list()


    def __call__(self, registry, request_path, response_path, poll_time):
        runtime = unitruntime.Runtime()
        self.runtimes.append(runtime)

        scheduler = unitruntime.Scheduler()
        return pcsipc.SharedClient(registry, request_path, response_path, poll_time, transport=runtime, scheduler=scheduler)


# end of class Factory



@pytest.fixture
def factory():
    return Factory()


@pytest.fixture
def registry(factory):
    return pcsipc.Registry(factory)



def test_shared(registry, factory):

    first = registry.connect('/tmp/a.request', '/tmp/a.response', 0.1)
    second = registry.connect('/tmp/a.request', '/tmp/a.response', 0.1)

    assert first is second
    assert registry.count == 2
    assert len(factory.runtimes) == 1

    runtime = factory.runtimes[0]

    first.close()
    assert registry.count == 1
    assert runtime.closes == 0
    assert second.closed == False
    assert second.is_server_running() == True

    second.close()
    assert registry.count == 0
    assert runtime.closes == 1
    assert second.closed == True

    with pytest.raises(errors.ConfigurationError):
        second.close()

    assert runtime.closes == 1


def test_parameters(registry, factory):

    client = registry.connect('/tmp/a.request', '/tmp/a.response', 0.1)

    with pytest.raises(errors.ConfigurationError):
        registry.connect('/tmp/b.request', '/tmp/a.response', 0.1)

    with pytest.raises(errors.ConfigurationError):
        registry.connect('/tmp/a.request', '/tmp/a.response', 0.2)

    assert registry.count == 1

    # Poll times are compared by value.

    again = registry.connect('/tmp/a.request', '/tmp/a.response', 1 / 10)
    assert again is client

    client.close()
    again.close()

    # With the last reference released, new parameters are acceptable.

    other = registry.connect('/tmp/b.request', '/tmp/b.response', 0.2)
    assert other is not client
    assert len(factory.runtimes) == 2
    assert factory.runtimes[1].opened == ('/tmp/b.request', '/tmp/b.response')

    other.close()


def test_defaults(registry, monkeypatch):

    monkeypatch.setenv('PCSIPC_REQUEST_PATH', '/tmp/env.request')
    monkeypatch.setenv('PCSIPC_RESPONSE_PATH', '/tmp/env.response')
    monkeypatch.setenv('PCSIPC_POLL_TIME', '0.1')

    client = registry.connect()
    assert registry.parameters == ('/tmp/env.request', '/tmp/env.response', 0.1)

    assert registry.connect('/tmp/env.request', '/tmp/env.response', 0.1) is client

    client.close()
    client.close()


def test_release_foreign(registry, runtime, scheduler):

    plain = pcsipc.Client('/tmp/a.request', '/tmp/a.response', 0.1, transport=runtime, scheduler=scheduler)

    with pytest.raises(errors.ConfigurationError):
        registry.release(plain)

    plain.close()


def test_shared_variables(registry, factory):

    client = registry.connect('/tmp/a.request', '/tmp/a.response', 0.1)
    runtime = factory.runtimes[0]
    runtime.define('counter', 'dint', 3)

    variable = client.variable('counter', 'dint')

    other = registry.connect('/tmp/a.request', '/tmp/a.response', 0.1)
    other.close()

    assert variable.get() == 3

    client.close()

    with pytest.raises(errors.Closed):
        variable.get()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
