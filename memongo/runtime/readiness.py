"""
Readiness detection for mongod startup.

mongod announces its startup outcome in its own log stream. The classifier
reads that stream one line at a time and maps the known log vocabulary to a
structured verdict: either the port mongod is listening on, or the reason it
failed. Both the legacy text log format and the structured JSON format
(mongod 4.4+) are understood.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Pattern, Tuple, Union

from memongo.errors import (
    AddressInUseError,
    AlreadyRunningError,
    DataDirectoryMissingError,
    ExitedBeforeReadyError,
    PermissionDeniedError,
    PortParseError,
    StartupFailedError,
    UnexpectedShutdownError,
)

logger = logging.getLogger(__name__)


class ReadinessState(str, Enum):
    """Classifier states."""
    SCANNING = "scanning"
    READY = "ready"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Startup failure reasons recognised in mongod output."""
    ADDRESS_IN_USE = "address_in_use"
    ALREADY_RUNNING = "already_running"
    PERMISSION_DENIED = "permission_denied"
    DATA_DIRECTORY_MISSING = "data_directory_missing"
    UNEXPECTED_SHUTDOWN = "unexpected_shutdown"
    EXITED_BEFORE_READY = "exited_before_ready"


FAILURE_ERRORS = {
    FailureReason.ADDRESS_IN_USE: AddressInUseError,
    FailureReason.ALREADY_RUNNING: AlreadyRunningError,
    FailureReason.PERMISSION_DENIED: PermissionDeniedError,
    FailureReason.DATA_DIRECTORY_MISSING: DataDirectoryMissingError,
    FailureReason.UNEXPECTED_SHUTDOWN: UnexpectedShutdownError,
    FailureReason.EXITED_BEFORE_READY: ExitedBeforeReadyError,
}


# Marker outcome for the readiness pattern; its first group is the port.
READY = "ready"

# Ordered (pattern, outcome) table, first match wins. Patterns run against the
# lower-cased line. Append new phrasings here when mongod changes its wording.
LOG_PATTERNS: List[Tuple[Pattern[str], Union[str, FailureReason]]] = [
    (re.compile(r"(?:waiting|listening) for connections.*?\bport\b\W*([^\s,\"'}\]]+)"), READY),
    (re.compile(r"addr(?:ess)? already in use"), FailureReason.ADDRESS_IN_USE),
    (re.compile(r"already running"), FailureReason.ALREADY_RUNNING),
    (re.compile(r"permission denied"), FailureReason.PERMISSION_DENIED),
    (re.compile(r"data directory.*?not found"), FailureReason.DATA_DIRECTORY_MISSING),
    (re.compile(r"shutting down|now exiting"), FailureReason.UNEXPECTED_SHUTDOWN),
]


@dataclass(frozen=True)
class ReadinessVerdict:
    """
    Terminal outcome of one startup attempt.

    Attributes:
        port: Port mongod reported it is listening on (ready verdicts only)
        reason: Why startup failed (failed verdicts only)
        line: The log line that produced the verdict, if any
    """
    port: Optional[int] = None
    reason: Optional[FailureReason] = None
    line: Optional[str] = None

    @classmethod
    def ready(cls, port: int, line: Optional[str] = None) -> 'ReadinessVerdict':
        return cls(port=port, line=line)

    @classmethod
    def failed(cls, reason: FailureReason, line: Optional[str] = None) -> 'ReadinessVerdict':
        return cls(reason=reason, line=line)

    @property
    def is_ready(self) -> bool:
        return self.reason is None

    def to_error(self) -> StartupFailedError:
        """Build the exception matching a failed verdict."""
        if self.is_ready:
            raise ValueError("A ready verdict has no error")
        return FAILURE_ERRORS[self.reason](self.line)


class ReadinessClassifier:
    """
    Single-pass state machine over mongod log lines.

    Feed lines in order with ``feed``; the first line matching a known
    pattern produces a verdict and moves the classifier to a terminal state.
    Call ``finish`` when the stream ends without a match. The classifier has
    no notion of time; deadlines belong to whoever produces the lines.
    """

    def __init__(self, patterns: Optional[List[Tuple[Pattern[str], Union[str, FailureReason]]]] = None):
        self.patterns = patterns if patterns is not None else LOG_PATTERNS
        self.state = ReadinessState.SCANNING
        self.verdict: Optional[ReadinessVerdict] = None

    def feed(self, line: str) -> Optional[ReadinessVerdict]:
        """
        Classify one line of output.

        Args:
            line: Raw log line from mongod

        Returns:
            The verdict if this line is terminal, otherwise None

        Raises:
            PortParseError: If the readiness line carries an unparsable port
            RuntimeError: If the classifier already reached a verdict
        """
        self._ensure_scanning()
        downcase_line = line.strip().lower()

        for pattern, outcome in self.patterns:
            match = pattern.search(downcase_line)
            if not match:
                continue

            if outcome == READY:
                try:
                    port = int(match.group(1))
                except (IndexError, ValueError) as e:
                    self.state = ReadinessState.FAILED
                    raise PortParseError(downcase_line) from e
                return self._conclude(ReadinessVerdict.ready(port, downcase_line))

            return self._conclude(ReadinessVerdict.failed(outcome, downcase_line))

        return None

    def finish(self) -> ReadinessVerdict:
        """Signal end of stream; returns the verdict for a stream with no match."""
        if self.verdict is not None:
            return self.verdict
        self._ensure_scanning()
        return self._conclude(ReadinessVerdict.failed(FailureReason.EXITED_BEFORE_READY))

    def classify(self, lines: Iterable[str]) -> ReadinessVerdict:
        """Consume lines until a verdict is reached or the iterable is exhausted."""
        for line in lines:
            verdict = self.feed(line)
            if verdict is not None:
                return verdict
        return self.finish()

    def _ensure_scanning(self):
        if self.state != ReadinessState.SCANNING:
            raise RuntimeError(f"Classifier already finished in state {self.state.value}")

    def _conclude(self, verdict: ReadinessVerdict) -> ReadinessVerdict:
        self.verdict = verdict
        self.state = ReadinessState.READY if verdict.is_ready else ReadinessState.FAILED
        logger.debug(f"mongod readiness verdict: {verdict}")
        return verdict
