"""Transport layer implementations."""

from .base import Transport
from .library import Library
