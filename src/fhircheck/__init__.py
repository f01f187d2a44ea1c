"""fhircheck: schema and house-rule validation for FHIR bundles."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("fhircheck")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from fhircheck.api import validate, validate_file
from fhircheck.contracts import Diagnostic, Severity, ValidationResult
from fhircheck.codes import ErrorCode

__all__ = [
    "__version__",
    "validate",
    "validate_file",
    "Diagnostic",
    "Severity",
    "ValidationResult",
    "ErrorCode",
]
