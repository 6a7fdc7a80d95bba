# usdcheck core: check registry, run engine, and reporting

from .types import CheckEntry, CheckId, Outcome, RunConfig, RunConfigError
from .registry import CheckRegistry, build_default_registry, select
from .reporting import RecordingReporter, ReportSink, RunSummary, TextReporter
from .runner import CheckRunner, RunReport

__all__ = [
    "CheckEntry",
    "CheckId",
    "Outcome",
    "RunConfig",
    "RunConfigError",
    "CheckRegistry",
    "build_default_registry",
    "select",
    "RecordingReporter",
    "ReportSink",
    "RunSummary",
    "TextReporter",
    "CheckRunner",
    "RunReport",
]
