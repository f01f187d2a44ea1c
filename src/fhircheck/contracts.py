"""Public result models for fhircheck package."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from fhircheck.codes import ErrorCode


class Severity(str, Enum):
    """Diagnostic severity, lowest to highest."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.DEBUG: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
    Severity.FATAL: 4,
}


class Diagnostic(BaseModel):
    """A single emitted diagnostic. Immutable once created."""
    severity: Severity
    message: str
    code: Optional[ErrorCode] = None
    entry_index: Optional[int] = None  # Bundle.entry[] position the diagnostic refers to
    path: Optional[str] = None  # Dotted property path ("Patient.identifier.type") or JSON pointer for schema errors

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    """Result of validating a bundle.

    ``result`` is the parsed document, or None when the text could not be
    parsed or failed bundle-level schema validation.
    """
    result: Optional[Dict[str, Any]] = None
    diagnostics: List[Diagnostic]  # Emission order
    ok: bool  # True if no error/fatal diagnostics (warnings don't block)
    fatal: bool  # True if a fatal diagnostic was emitted

    def by_severity(self, severity: Severity) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == severity]

    @property
    def warnings(self) -> List[Diagnostic]:
        return self.by_severity(Severity.WARNING)

    @property
    def errors(self) -> List[Diagnostic]:
        """Blocking diagnostics (error and fatal)."""
        return [d for d in self.diagnostics if d.severity.rank >= Severity.ERROR.rank]
