"""Pytest configuration for integration tests against real sockets."""

import socket

import pytest


@pytest.fixture
def unused_port() -> int:
    """Return a local TCP port with no listener."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
