"""Container healthcheck probe."""

from healthprobe.classifier import Classification, Verdict, classify, report
from healthprobe.errors import (
    BadStatusError,
    MalformedBodyError,
    NetworkError,
    ProbeError,
    ProbeTimeoutError,
)
from healthprobe.probe import HealthData, ProbeResponse, fetch, parse_health_data
from healthprobe.runner import ExitCode, main, run_probe
from healthprobe.settings import ProbeSettings, load_settings

__all__ = [
    "BadStatusError",
    "Classification",
    "ExitCode",
    "HealthData",
    "MalformedBodyError",
    "NetworkError",
    "ProbeError",
    "ProbeResponse",
    "ProbeSettings",
    "ProbeTimeoutError",
    "Verdict",
    "classify",
    "fetch",
    "load_settings",
    "main",
    "parse_health_data",
    "report",
    "run_probe",
]
