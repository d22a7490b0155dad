"""Shared pytest configuration."""

import logging
import signal

import pytest

from healthprobe.settings import ProbeSettings

PROBE_ENV_VARS = ("HEALTH_CHECK_HOST", "PORT", "HEALTH_CHECK_PATH", "HEALTH_CHECK_TIMEOUT")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove probe variables inherited from the shell running the tests."""
    for name in PROBE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_probe_logger():
    """Drop handlers installed by configure_logging() after each test.

    Handlers bound to captured streams must not outlive the test that created them.
    """
    yield
    probe_logger = logging.getLogger("healthprobe")
    for handler in list(probe_logger.handlers):
        probe_logger.removeHandler(handler)
    probe_logger.setLevel(logging.NOTSET)


@pytest.fixture
def probe_settings():
    """Settings pointing at a test host with a short timeout."""
    return ProbeSettings(host="service.test", port=8080, path="/health", timeout_ms=200)


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    """Restore SIGTERM and SIGINT handlers replaced during a test."""
    previous = {sig: signal.getsignal(sig) for sig in (signal.SIGTERM, signal.SIGINT)}
    yield
    for sig, handler in previous.items():
        if handler is not None:
            signal.signal(sig, handler)
