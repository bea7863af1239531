import pytest

import pcsipc
import unitruntime


@pytest.fixture
def runtime():
    return unitruntime.Runtime()


@pytest.fixture
def scheduler():
    return unitruntime.Scheduler()


@pytest.fixture
def client(runtime, scheduler):

    client = pcsipc.Client('/tmp/unittest.request', '/tmp/unittest.response', 0.1, transport=runtime, scheduler=scheduler)

    yield client

    client.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
