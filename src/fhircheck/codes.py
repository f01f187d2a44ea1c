"""Error code constants for fhircheck diagnostics.

These constants prevent stringly-typed error codes and ensure
client code classifies diagnostics with the correct codes.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Diagnostic classification codes."""

    # Generic
    ERROR = "ERROR"

    # Input / document level
    TRAILING_CHARACTERS = "TRAILING_CHARACTERS"
    JSON_PARSE_ERROR = "JSON_PARSE_ERROR"
    CRITICAL_DATA_MISSING = "CRITICAL_DATA_MISSING"

    # Schema validation
    SCHEMA_ERROR = "SCHEMA_ERROR"
    UNKNOWN_RESOURCE_TYPE = "UNKNOWN_RESOURCE_TYPE"

    # House rules (non-blocking)
    FHIR_SCHEMA_ERROR = "FHIR_SCHEMA_ERROR"

    # Tooling
    DEBUG_OUTPUT_ERROR = "DEBUG_OUTPUT_ERROR"
