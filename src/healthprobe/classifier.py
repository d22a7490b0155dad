"""Classification of health endpoint responses."""

import logging
from dataclasses import dataclass
from enum import StrEnum

from healthprobe.errors import BadStatusError
from healthprobe.probe import HealthData, ProbeResponse, parse_health_data

logger = logging.getLogger(__name__)


class Verdict(StrEnum):
    """Outcome of a probe."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class Classification:
    """Verdict for a response, with the decoded health document if any.

    Attributes
    ----------
    verdict : Verdict
        HEALTHY for 2xx status codes, UNHEALTHY otherwise
    status_code : int
        HTTP status code of the response
    health_data : HealthData | None
        Decoded body for healthy responses, None if it was not JSON

    """

    verdict: Verdict
    status_code: int
    health_data: HealthData | None = None

    @property
    def is_healthy(self) -> bool:
        """True if the response was classified HEALTHY."""
        return self.verdict is Verdict.HEALTHY


def is_success(status_code: int) -> bool:
    """Check whether a status code is in the 2xx range."""
    return 200 <= status_code < 300  # noqa: PLR2004


def classify(response: ProbeResponse) -> Classification:
    """Classify a response by status code.

    The body of a healthy response is decoded on a best-effort basis; the body of
    an unhealthy response is left alone.
    """
    if not is_success(response.status_code):
        return Classification(Verdict.UNHEALTHY, response.status_code)
    return Classification(
        Verdict.HEALTHY,
        response.status_code,
        parse_health_data(response.body),
    )


def ensure_healthy(response: ProbeResponse) -> Classification:
    """Classify a response, raising BadStatusError if it is unhealthy."""
    classification = classify(response)
    if not classification.is_healthy:
        raise BadStatusError(response.status_code, response.body)
    return classification


def report(classification: Classification, response: ProbeResponse) -> None:
    """Log the diagnostics for a classified response.

    Parameters
    ----------
    classification : Classification
        Result of classify()
    response : ProbeResponse
        The response that was classified

    """
    if not classification.is_healthy:
        logger.error("Invalid HTTP status: %d", classification.status_code)
        logger.error("Response body: %s", response.body)
        return

    health_data = classification.health_data
    if health_data is None:
        logger.info("Non-JSON response received, but status OK")

    logger.info("Application healthy")
    logger.info("Status: %d", classification.status_code)

    if health_data is not None:
        if health_data.status is not None:
            logger.info("Reported status: %s", health_data.status)
        if health_data.uptime is not None:
            logger.info("Uptime: %ss", _format_number(health_data.uptime))


def _format_number(value: float) -> str:
    """Format a number without a trailing .0 for whole values."""
    return str(int(value)) if value.is_integer() else str(value)
