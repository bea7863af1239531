"""Transport interface.

This is the contract between pcsipc and whatever actually talks to the
runtime. Every call is synchronous and returns the integer result code from
:class:`pcsipc.errors.Result` first; interpreting that code is left to the
caller. Background request processing, if any, is the transport's business.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Tuple


class Transport(ABC):
    """Minimal contract for an IPC channel to the runtime."""

    @abstractmethod
    def open(self, request_path: str, response_path: str) -> int:
        """Connect the request and response sockets."""

    @abstractmethod
    def start_processing(self, poll_time: int) -> int:
        """Begin background request processing, cycling every *poll_time* ms."""

    @abstractmethod
    def subscribe(self, name: str) -> int:
        """Ask the runtime to start serving the named variable."""

    @abstractmethod
    def get_type(self, name: str) -> Tuple[int, int]:
        """Return (result, wire type code) for the named variable."""

    @abstractmethod
    def get_value(self, name: str, capacity: int) -> Tuple[int, bytes]:
        """Return (result, data); *data* holds at most *capacity* bytes."""

    @abstractmethod
    def set_value(self, name: str, data: bytes) -> int:
        """Request that the named variable be set to the raw *data*."""

    @abstractmethod
    def get_server_running(self) -> Tuple[int, bool]:
        """Return (result, running) describing the remote runtime."""

    @abstractmethod
    def close(self) -> int:
        """Tear down the connection and any background processing."""

    @abstractmethod
    def error_to_string(self, result: int) -> str:
        """Human-readable description of a result code."""
