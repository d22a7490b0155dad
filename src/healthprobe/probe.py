"""Single HTTP GET against the health endpoint."""

import asyncio
import errno
import logging
import socket
from dataclasses import dataclass, field

import httpx
from pydantic import BaseModel, ConfigDict, JsonValue, TypeAdapter, ValidationError

from healthprobe.errors import MalformedBodyError, NetworkError, ProbeTimeoutError
from healthprobe.settings import ProbeSettings

logger = logging.getLogger(__name__)

USER_AGENT = "Docker-Healthcheck/1.0"
REQUEST_HEADERS = {"User-Agent": USER_AGENT, "Accept": "application/json"}


@dataclass(frozen=True)
class ProbeResponse:
    """Response received from the health endpoint.

    Attributes
    ----------
    status_code : int
        HTTP status code
    headers : dict[str, str]
        Response headers, names lowercased
    body : str
        Decoded response body

    """

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


class HealthData(BaseModel):
    """Fields of interest in the JSON body returned by the endpoint."""

    model_config = ConfigDict(frozen=True)

    status: str | None = None
    uptime: float | None = None


json_adapter: TypeAdapter[JsonValue] = TypeAdapter(JsonValue)
uptime_adapter: TypeAdapter[float] = TypeAdapter(float)


def _status_field(value: JsonValue) -> str | None:
    # Numbers are reported as written; booleans, arrays and objects are dropped
    if isinstance(value, bool):
        return None
    if isinstance(value, str | int | float):
        return str(value)
    return None


def _uptime_field(value: JsonValue) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return uptime_adapter.validate_python(value)
    except ValidationError:
        logger.debug("Ignoring uptime that is not a number: %r", value)
        return None


def decode_health_data(body: str) -> HealthData:
    """Decode a response body as a health document.

    Any JSON value is accepted. ``status`` and ``uptime`` are extracted one at a
    time, so a field of the wrong type is dropped without affecting the other. A
    JSON value that is not an object yields empty health data.

    Parameters
    ----------
    body : str
        Raw response body

    Returns
    -------
    HealthData
        Decoded document

    Raises
    ------
    MalformedBodyError
        If the body is not JSON

    """
    try:
        document = json_adapter.validate_json(body)
    except ValidationError as exc:
        raise MalformedBodyError(str(exc)) from exc

    if not isinstance(document, dict):
        return HealthData()
    return HealthData(
        status=_status_field(document.get("status")),
        uptime=_uptime_field(document.get("uptime")),
    )


def parse_health_data(body: str) -> HealthData | None:
    """Best-effort variant of decode_health_data. Returns None for non-JSON bodies."""
    try:
        return decode_health_data(body)
    except MalformedBodyError as exc:
        logger.debug("Response body is not JSON: %s", exc)
        return None


def cause_code(exc: BaseException) -> str:
    """Find the symbolic cause of a connection failure.

    Walks the exception chain, including exception groups raised for multiple
    connection attempts, looking for a DNS failure or an OSError with an errno.

    Parameters
    ----------
    exc : BaseException
        Exception raised by the HTTP client

    Returns
    -------
    str
        ENOTFOUND for DNS failures, the errno name (e.g. ECONNREFUSED) when one is
        found, ECONNRESET for a peer dropping the connection, otherwise EUNKNOWN

    """
    pending: list[BaseException] = [exc]
    seen: set[int] = set()
    while pending:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))

        if isinstance(current, socket.gaierror):
            return "ENOTFOUND"
        if isinstance(current, OSError) and current.errno in errno.errorcode:
            return errno.errorcode[current.errno]

        if isinstance(current, BaseExceptionGroup):
            pending.extend(current.exceptions)
        pending.extend(
            chained
            for chained in (current.__cause__, current.__context__)
            if chained is not None
        )

    if isinstance(exc, httpx.RemoteProtocolError | httpx.ReadError | httpx.WriteError):
        return "ECONNRESET"
    return "EUNKNOWN"


async def fetch(
    settings: ProbeSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ProbeResponse:
    """Perform exactly one GET request against the configured endpoint.

    The whole exchange is bounded by the configured timeout. When it fires the
    request is aborted and the connection closed.

    Parameters
    ----------
    settings : ProbeSettings
        Target and timeout
    transport : httpx.AsyncBaseTransport | None
        Transport override, used by tests

    Returns
    -------
    ProbeResponse
        Status code, headers and fully read body

    Raises
    ------
    ProbeTimeoutError
        If the response is not fully received before the timeout
    NetworkError
        If the connection is refused, the host is not found or the peer resets

    """
    timeout = httpx.Timeout(settings.timeout_seconds)
    try:
        async with (
            asyncio.timeout(settings.timeout_seconds),
            httpx.AsyncClient(
                transport=transport,
                timeout=timeout,
                follow_redirects=False,
                trust_env=False,
            ) as client,
        ):
            response = await client.get(settings.url, headers=REQUEST_HEADERS)
    except (httpx.TimeoutException, TimeoutError) as exc:
        raise ProbeTimeoutError(settings.timeout_ms) from exc
    except httpx.TransportError as exc:
        raise NetworkError(str(exc) or type(exc).__name__, cause_code(exc)) from exc

    return ProbeResponse(
        status_code=response.status_code,
        headers=dict(response.headers),
        body=response.text,
    )
