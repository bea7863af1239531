""" Python client for the OpenPCS IPC channel. Read and write named process
    variables in a running PLC runtime as typed :class:`Variable` instances,
    with change, error, and server state notifications driven by a periodic
    :class:`Client` tick.
"""

# Utility components.

from . import config
from . import errors
from . import pending
from . import poll
from . import types

# The channel to the runtime.

from . import transport

# Primary public-facing interfaces.

from .variable import Variable, Subscription
from .client import Client
from .shared import Registry, SharedClient

from . import shared
connect = shared.connect

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
