# Reporting sinks for usdcheck runs.
#
# The runner and the analyzers only produce structured Outcomes; a ReportSink
# decides how they are shown. TextReporter reproduces the console transcript
# (open-status line, one line per outcome, summary) and can export it to a file.
# RecordingReporter keeps the structured events only.

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import IO, Iterable, Optional

from .types import Outcome

logger = logging.getLogger(__name__)

OPENED_MESSAGE = "Opened USD file Successfully."
OPEN_FAILED_MESSAGE = "Failed to open USD file. Ensure the file path is correct and the file is accessible."


@dataclass(frozen=True)
class RunSummary:
    passed: int = 0
    failed: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[Outcome]) -> "RunSummary":
        passed = failed = 0
        for outcome in outcomes:
            if outcome.passed:
                passed += 1
            else:
                failed += 1
        return cls(passed=passed, failed=failed)

    @property
    def total(self) -> int:
        return self.passed + self.failed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0

    @property
    def conclusion(self) -> str:
        if self.failed > 0 and self.passed > 0:
            return "Some tests failed. Please review the USD file and address the failing tests."
        if self.failed > 0:
            return "All tests failed. The USD file may have serious issues. Please review it thoroughly."
        return "Congratulations, all tests were successful!"


class ReportSink:
    """Receives run events from the runner. Default implementation ignores them."""

    def scene_opened(self, scene_path: str) -> None:
        pass

    def scene_failed(self, scene_path: str) -> None:
        pass

    def outcome(self, outcome: Outcome) -> None:
        pass

    def summary(self, summary: RunSummary) -> None:
        pass

    def export(self, path: str) -> bool:
        return False


class RecordingReporter(ReportSink):
    """Structured-only sink; useful for library callers that render results themselves."""

    def __init__(self) -> None:
        self.opened: Optional[bool] = None
        self.outcomes: list[Outcome] = []
        self.summaries: list[RunSummary] = []
        self.exports: list[str] = []

    def scene_opened(self, scene_path: str) -> None:
        self.opened = True

    def scene_failed(self, scene_path: str) -> None:
        self.opened = False

    def outcome(self, outcome: Outcome) -> None:
        self.outcomes.append(outcome)

    def summary(self, summary: RunSummary) -> None:
        self.summaries.append(summary)

    def export(self, path: str) -> bool:
        self.exports.append(path)
        return True


class TextReporter(ReportSink):
    """
    Console reporter. Every line written to the console is also kept in a transcript
    so the full run can be exported with export().
    """

    def __init__(self, stream: Optional[IO[str]] = None, err_stream: Optional[IO[str]] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.err_stream = err_stream if err_stream is not None else sys.stderr
        self._transcript: list[str] = []

    @property
    def transcript(self) -> str:
        return "".join(self._transcript)

    def _emit(self, text: str, error: bool = False) -> None:
        target = self.err_stream if error else self.stream
        target.write(text)
        target.flush()
        self._transcript.append(text)

    def scene_opened(self, scene_path: str) -> None:
        self._emit(f"{OPENED_MESSAGE}\n\n")

    def scene_failed(self, scene_path: str) -> None:
        self._emit(f"{OPEN_FAILED_MESSAGE}\n\n", error=True)

    def outcome(self, outcome: Outcome) -> None:
        self._emit(f"{outcome}\n")

    def summary(self, summary: RunSummary) -> None:
        self._emit(
            "\nSummary:\n"
            f"  Passed: {summary.passed}\n"
            f"  Failed: {summary.failed}\n\n"
            f"{summary.conclusion}\n\n"
        )

    def export(self, path: str) -> bool:
        """Write the transcript to `path`. Failure is reported, never raised."""
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(self.transcript)
        except OSError as ex:
            logger.warning(f"Failed to export results to {path}: {ex}")
            self.err_stream.write(f"Error: Could not open output file: {path}\n")
            self.err_stream.flush()
            return False
        self.stream.write(f"Results exported to: {path}\n")
        self.stream.flush()
        return True
