"""Probe runner: one request, one verdict, one exit code."""

import asyncio
import logging
import signal
import sys
from enum import IntEnum

import httpx
from pydantic import ValidationError

from healthprobe.classifier import classify, report
from healthprobe.errors import NetworkError, ProbeTimeoutError
from healthprobe.logging_config import configure_logging
from healthprobe.probe import fetch
from healthprobe.settings import ProbeSettings, load_settings

logger = logging.getLogger(__name__)

STOP_SIGNALS = (signal.SIGTERM, signal.SIGINT)
SIGNAL_DISPATCH_PASSES = 3


class ExitCode(IntEnum):
    """Process exit status reported to the container runtime."""

    HEALTHY = 0
    UNHEALTHY = 1


def _on_signal(sig: signal.Signals, stop_event: asyncio.Event) -> None:
    logger.info("Received %s, shutting down...", sig.name)
    stop_event.set()


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop, stop_event: asyncio.Event
) -> list[signal.Signals]:
    """Set stop_event when SIGTERM or SIGINT is received.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop
        Running event loop
    stop_event : asyncio.Event
        Event observed by the runner

    Returns
    -------
    list[signal.Signals]
        Signals a handler was installed for, to be removed afterwards

    """
    installed: list[signal.Signals] = []
    for sig in STOP_SIGNALS:
        try:
            loop.add_signal_handler(sig, _on_signal, sig, stop_event)
        except (NotImplementedError, RuntimeError) as exc:
            logger.debug("Cannot install handler for %s: %s", sig.name, exc)
            continue
        installed.append(sig)
    return installed


async def _dispatch_pending_signals() -> None:
    """Yield to the loop until signals already delivered have run their handlers.

    The loop reads a delivered signal from its wakeup pipe on one pass and runs the
    handler on the next.
    """
    for _ in range(SIGNAL_DISPATCH_PASSES):
        await asyncio.sleep(0)


def _log_probe_error(exc: Exception) -> None:
    logger.error("Health check failed: %s", exc)
    if isinstance(exc, ProbeTimeoutError):
        logger.error("Request timed out")
    elif isinstance(exc, NetworkError):
        if exc.cause_code == "ECONNREFUSED":
            logger.error("Application unavailable (connection refused)")
        elif exc.cause_code == "ENOTFOUND":
            logger.error("Host not found")
        else:
            logger.error("Network error (%s)", exc.cause_code)


def _conclude(probe_task: asyncio.Task) -> ExitCode:
    """Turn a finished probe task into an exit code, logging diagnostics."""
    try:
        response = probe_task.result()
        classification = classify(response)
        report(classification, response)
    except (NetworkError, ProbeTimeoutError) as exc:
        _log_probe_error(exc)
        return ExitCode.UNHEALTHY
    except Exception:
        logger.exception("Health check failed with an unexpected error")
        return ExitCode.UNHEALTHY

    return ExitCode.HEALTHY if classification.is_healthy else ExitCode.UNHEALTHY


async def run_probe(
    settings: ProbeSettings,
    *,
    stop_event: asyncio.Event | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ExitCode:
    """Probe the health endpoint once, unless stopped first.

    SIGTERM and SIGINT set the stop event. A set stop event wins over the probe:
    the in-flight request is cancelled and the run reports HEALTHY, so that a
    shutdown is not mistaken for a crash.

    Parameters
    ----------
    settings : ProbeSettings
        Target and timeout
    stop_event : asyncio.Event | None
        Event that stops the run. A new one is created if None.
    transport : httpx.AsyncBaseTransport | None
        Transport override, used by tests

    Returns
    -------
    ExitCode
        HEALTHY for a 2xx response or a stop, UNHEALTHY otherwise

    """
    loop = asyncio.get_running_loop()
    if stop_event is None:
        stop_event = asyncio.Event()
    previous = {sig: signal.getsignal(sig) for sig in STOP_SIGNALS}
    installed = install_signal_handlers(loop, stop_event)

    try:
        logger.info("Checking health at %s", settings.target)
        probe_task = asyncio.create_task(fetch(settings, transport=transport))
        stop_task = asyncio.create_task(stop_event.wait())
        try:
            await asyncio.wait(
                {probe_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (probe_task, stop_task):
                task.cancel()
            # Wait for the request to be torn down so the connection is closed
            await asyncio.wait({probe_task, stop_task})
            await _dispatch_pending_signals()

        if stop_event.is_set():
            if not probe_task.cancelled() and probe_task.exception() is not None:
                logger.debug("Probe result discarded: %s", probe_task.exception())
            return ExitCode.HEALTHY
        return _conclude(probe_task)
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
            if previous[sig] is not None:
                signal.signal(sig, previous[sig])


def _exit_on_sigterm(signum: int, _frame: object) -> None:
    logger.info("Received %s, shutting down...", signal.Signals(signum).name)
    sys.exit(ExitCode.HEALTHY.value)


def main() -> None:
    """Run the healthcheck and exit with its status.

    Outside run_probe, SIGTERM exits 0 straight away.
    """
    configure_logging()
    signal.signal(signal.SIGTERM, _exit_on_sigterm)

    try:
        settings = load_settings()
    except ValidationError as exc:
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"])
            logger.error("Invalid configuration for %s: %s", location, error["msg"])
        sys.exit(ExitCode.UNHEALTHY.value)

    try:
        exit_code = asyncio.run(run_probe(settings))
    except KeyboardInterrupt:
        logger.info("Received SIGINT, shutting down...")
        exit_code = ExitCode.HEALTHY

    sys.exit(exit_code.value)
