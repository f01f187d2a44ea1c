"""JSON-Schema validation against the bundled FHIR schema."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from jsonschema import ValidationError
from jsonschema.validators import validator_for

from fhircheck.codes import ErrorCode
from fhircheck.kernel.log import DiagnosticLog
from fhircheck.kernel.type_resolver import TypeResolver

FHIR_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schema" / "fhir-schema.json"


def load_fhir_schema(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load the packaged FHIR schema, or a caller-supplied schema file."""
    schema_path = Path(path) if path is not None else FHIR_SCHEMA_PATH
    with open(schema_path, "r", encoding="utf-8") as f:
        return json.load(f)


def _pointer(prefix: str, error: ValidationError) -> str:
    """JSON pointer of the failing instance, relative to ``prefix``."""
    segments = [str(p).replace("~", "~0").replace("/", "~1") for p in error.absolute_path]
    return "/".join([prefix] + segments) if segments else (prefix or "/")


class SchemaValidator:
    """Validates values against a schema root or one of its definitions."""

    def __init__(self, schema: Dict[str, Any], check: bool = False):
        self.schema = schema
        self._validator_cls = validator_for(schema)
        if check:
            self._validator_cls.check_schema(schema)
        self._validators: Dict[Optional[str], Any] = {}
        self._resolver: Optional[TypeResolver] = None

    @property
    def definitions(self) -> Dict[str, Dict[str, Any]]:
        return self.schema.get("definitions", {})

    def has_definition(self, name: str) -> bool:
        return name in self.definitions

    def type_resolver(self) -> TypeResolver:
        if self._resolver is None:
            self._resolver = TypeResolver(self.definitions)
        return self._resolver

    def iter_errors(self, value: Any, definition: Optional[str] = None) -> Iterator[ValidationError]:
        """Yield schema violations, with ``oneOf`` resource failures narrowed."""
        for error in self._validator(definition).iter_errors(value):
            yield from self._narrow(error)

    def validate(
        self,
        value: Any,
        log: DiagnosticLog,
        path_prefix: str = "",
        definition: Optional[str] = None,
    ) -> bool:
        """Validate ``value``; record one error diagnostic per violation.

        Args:
            value: Parsed JSON value
            log: Sink receiving the diagnostics
            path_prefix: JSON pointer prepended to every reported location
            definition: Validate against ``#/definitions/<definition>``
                instead of the schema root

        Returns:
            True if the value conforms.
        """
        errors = list(self.iter_errors(value, definition))
        for error in errors:
            pointer = _pointer(path_prefix, error)
            if error.validator in ("oneOf", "anyOf"):
                # The default message embeds the whole instance.
                message = "does not match any of the allowed schemas"
            else:
                message = error.message
            log.error(f"Schema: {pointer} {message}", ErrorCode.SCHEMA_ERROR, path=pointer)
        return not errors

    def _validator(self, definition: Optional[str]):
        if definition not in self._validators:
            if definition is None:
                schema = self.schema
            else:
                if definition not in self.definitions:
                    raise KeyError(f"Schema has no definition '{definition}'")
                schema = {
                    "$ref": f"#/definitions/{definition}",
                    "definitions": self.definitions,
                }
                if "$schema" in self.schema:
                    schema["$schema"] = self.schema["$schema"]
            self._validators[definition] = self._validator_cls(schema)
        return self._validators[definition]

    def _narrow(self, error: ValidationError) -> Iterable[ValidationError]:
        """Replace a resource-union ``oneOf`` failure by its matching branch errors.

        A resource fails every ``oneOf`` branch of ``ResourceList`` at once;
        the useful errors are the ones from the branch named by its
        ``resourceType``. Anything else is reported as-is.
        """
        if error.validator != "oneOf" or not isinstance(error.instance, dict):
            return [error]
        resource_type = error.instance.get("resourceType")
        if not isinstance(resource_type, str):
            return [error]

        branch = None
        for index, option in enumerate(error.validator_value):
            ref = option.get("$ref", "") if isinstance(option, dict) else ""
            if ref.endswith(f"/{resource_type}"):
                branch = index
                break
        if branch is None:
            return [error]

        narrowed: List[ValidationError] = []
        for sub_error in error.context:
            if sub_error.relative_schema_path and sub_error.relative_schema_path[0] == branch:
                narrowed.extend(self._narrow(sub_error))
        return narrowed or [error]
