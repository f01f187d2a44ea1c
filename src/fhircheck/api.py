"""Public API for fhircheck.

High-level functions that return complete, structured results.
Callers should use these functions instead of importing from kernel.
"""

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Union

from fhircheck.codes import ErrorCode
from fhircheck.contracts import Severity, ValidationResult
from fhircheck.kernel.log import DiagnosticLog
from fhircheck.kernel.rules import RuleEngine, check_entry
from fhircheck.kernel.schema import SchemaValidator, load_fhir_schema
from fhircheck.kernel.walker import walk_properties
from fhircheck._internal.canonical_json import pretty_dumps

logger = logging.getLogger(__name__)

SchemaInput = Union[SchemaValidator, str, os.PathLike, Path, Dict]

_TOO_DEEP = "FhirBundle is nested too deeply to validate against the schema."


def _normalize_path(path: Union[str, os.PathLike, Path]) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


@lru_cache(maxsize=1)
def _default_schema() -> SchemaValidator:
    return SchemaValidator(load_fhir_schema())


def _load_schema(schema: Optional[SchemaInput]) -> SchemaValidator:
    if schema is None:
        return _default_schema()
    if isinstance(schema, SchemaValidator):
        return schema
    if isinstance(schema, dict):
        return SchemaValidator(schema)
    return SchemaValidator(load_fhir_schema(_normalize_path(schema)))


def _build_result(document: Optional[Dict], log: DiagnosticLog) -> ValidationResult:
    diagnostics = list(log.entries)
    blocking = any(d.severity.rank >= Severity.ERROR.rank for d in diagnostics)
    return ValidationResult(
        result=document,
        diagnostics=diagnostics,
        ok=not blocking,
        fatal=log.failed,
    )


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def _write_debug_output(text: str, path: Path, log: DiagnosticLog) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except (OSError, UnicodeError) as e:
        log.warn(f"Failed to write debug output to {path}: {e}", ErrorCode.DEBUG_OUTPUT_ERROR)


def validate(
    text: str,
    schema: Optional[SchemaInput] = None,
    debug_output_path: Optional[Union[str, os.PathLike, Path]] = None,
) -> ValidationResult:
    """
    Validate FHIR bundle text against the schema and the bundle house rules.

    Args:
        text: Raw bundle text (JSON)
        schema: Optional schema (SchemaValidator, schema dict or path to a
            schema file). Defaults to the packaged FHIR schema.
        debug_output_path: Optional file receiving the raw input text

    Returns:
        ValidationResult with the parsed bundle and every diagnostic in
        emission order.

    Never raises for bad input; problems are reported as diagnostics.
    """
    log = DiagnosticLog("FhirBundle")
    validator = _load_schema(schema)

    if debug_output_path is not None:
        _write_debug_output(text, _normalize_path(debug_output_path), log)

    # 1. Whitespace normalization (WARNING)
    trimmed = text.strip()
    if trimmed != text:
        log.warn("FHIR bundle has leading or trailing spaces", ErrorCode.TRAILING_CHARACTERS)
        text = trimmed

    # 2. Parse (FATAL, abort); NaN and Infinity are not JSON
    try:
        bundle = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        log.fatal(f"Failed to parse FhirBundle data as JSON. {e}", ErrorCode.JSON_PARSE_ERROR)
        return _build_result(None, log)

    # 3. Bundle schema (abort; schema diagnostics explain the failure)
    try:
        if not validator.validate(bundle, log):
            return _build_result(None, log)
    except RecursionError:
        log.fatal(_TOO_DEEP, ErrorCode.SCHEMA_ERROR)
        return _build_result(None, log)

    # 4. A non-empty .entry[] is required to continue (FATAL, abort)
    if not isinstance(bundle, dict):
        log.fatal("FhirBundle must be a JSON object.", ErrorCode.CRITICAL_DATA_MISSING)
        return _build_result(None, log)
    entries = bundle.get("entry")
    if not isinstance(entries, list) or len(entries) == 0:
        log.fatal("FhirBundle.entry[] required to continue.", ErrorCode.CRITICAL_DATA_MISSING)
        return _build_result(bundle, log)

    # 5. Per-entry checks; a bad entry never stops the others, a too-deep one does
    resolver = validator.type_resolver()
    for i, entry in enumerate(entries):
        resource = entry.get("resource") if isinstance(entry, dict) else None
        resource_type = resource.get("resourceType") if isinstance(resource, dict) else None

        if isinstance(resource_type, str) and resource_type:
            if validator.has_definition(resource_type):
                pointer = "/".join(["", "entry", str(i), resource_type])
                try:
                    validator.validate(resource, log, pointer, definition=resource_type)
                except RecursionError:
                    log.fatal(_TOO_DEEP, ErrorCode.SCHEMA_ERROR, entry_index=i, path=pointer)
                    return _build_result(None, log)
            else:
                log.error(
                    f"Bundle.entry[{i}].resource has unknown resourceType '{resource_type}'",
                    ErrorCode.UNKNOWN_RESOURCE_TYPE,
                    entry_index=i,
                )

        resource = check_entry(entry, i, log)
        if resource is None:
            continue

        walk_properties(resource, (resource.get("resourceType", ""),), RuleEngine(resolver, log, i))

    # 6. Summary
    log.info("FHIR bundle validated")
    log.debug("FHIR Bundle Contents:")
    log.debug(pretty_dumps(bundle))

    return _build_result(bundle, log)


def validate_file(
    path: Union[str, os.PathLike, Path],
    schema: Optional[SchemaInput] = None,
    debug_output_path: Optional[Union[str, os.PathLike, Path]] = None,
) -> ValidationResult:
    """Read a bundle file (UTF-8, optional BOM) and validate it.

    Raises:
        FileNotFoundError: if ``path`` does not exist
    """
    path = _normalize_path(path)
    logger.debug("Validating bundle file %s", path)
    text = path.read_text(encoding="utf-8-sig")
    return validate(text, schema=schema, debug_output_path=debug_output_path)
