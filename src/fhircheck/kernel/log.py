"""Append-only diagnostic log shared by one validation call."""

import logging
from typing import Iterable, List, Optional, Tuple

from fhircheck.codes import ErrorCode
from fhircheck.contracts import Diagnostic, Severity

logger = logging.getLogger(__name__)

_LOGGING_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


def format_diagnostics(
    title: str,
    diagnostics: Iterable[Diagnostic],
    min_severity: Severity = Severity.INFO,
) -> str:
    """Render diagnostics at or above ``min_severity`` as plain text."""
    lines = [title]
    for entry in diagnostics:
        if entry.severity.rank < min_severity.rank:
            continue
        line = f"  [{entry.severity.value}] {entry.message}"
        if entry.code is not None:
            line += f" ({entry.code.value})"
        lines.append(line)
    return "\n".join(lines)


class DiagnosticLog:
    """Ordered, append-only channel of severity-tagged diagnostics.

    Every method returns the log itself so calls can be chained or
    returned directly. Emitted diagnostics are also forwarded to the
    ``fhircheck.kernel.log`` logger.
    """

    def __init__(self, title: str):
        self.title = title
        self.failed = False
        self._entries: List[Diagnostic] = []

    @property
    def entries(self) -> Tuple[Diagnostic, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def debug(self, message: str) -> "DiagnosticLog":
        return self._add(Severity.DEBUG, message)

    def info(self, message: str) -> "DiagnosticLog":
        return self._add(Severity.INFO, message)

    def warn(
        self,
        message: str,
        code: ErrorCode,
        entry_index: Optional[int] = None,
        path: Optional[str] = None,
    ) -> "DiagnosticLog":
        return self._add(Severity.WARNING, message, code, entry_index, path)

    def error(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ERROR,
        entry_index: Optional[int] = None,
        path: Optional[str] = None,
    ) -> "DiagnosticLog":
        return self._add(Severity.ERROR, message, code, entry_index, path)

    def fatal(
        self,
        message: str,
        code: ErrorCode,
        entry_index: Optional[int] = None,
        path: Optional[str] = None,
    ) -> "DiagnosticLog":
        self.failed = True
        return self._add(Severity.FATAL, message, code, entry_index, path)

    def format(self, min_severity: Severity = Severity.INFO) -> str:
        return format_diagnostics(self.title, self._entries, min_severity)

    def _add(
        self,
        severity: Severity,
        message: str,
        code: Optional[ErrorCode] = None,
        entry_index: Optional[int] = None,
        path: Optional[str] = None,
    ) -> "DiagnosticLog":
        self._entries.append(Diagnostic(
            severity=severity,
            message=message,
            code=code,
            entry_index=entry_index,
            path=path,
        ))
        if code is not None:
            logger.log(_LOGGING_LEVELS[severity], "%s: %s [%s]", self.title, message, code.value)
        else:
            logger.log(_LOGGING_LEVELS[severity], "%s: %s", self.title, message)
        return self
