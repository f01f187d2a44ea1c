"""House rules evaluated on bundle entries after schema validation passes.

Entry-level rules look at the entry and its resource root. Node-level rules
are keyed by the schema type resolved for a node's path and run as the
walker callback. Rules only emit diagnostics; they never modify the bundle.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from fhircheck.codes import ErrorCode
from fhircheck.kernel.log import DiagnosticLog
from fhircheck.kernel.type_resolver import TypeResolver
from fhircheck.kernel.walker import PropertyPath

SHORT_REFERENCE = re.compile(r"[^:]+:\d+")  # e.g. "resource:0"
SHORT_FULL_URL = re.compile(r"resource:\d+")


@dataclass(frozen=True)
class NodeRule:
    """Warn when a node of ``type_name`` carries a violating ``property_name``."""
    type_name: str
    property_name: str
    code: ErrorCode
    message: str
    violates: Callable[[Any], bool]


def _present(value: Any) -> bool:
    return bool(value)


def _not_short_reference(value: Any) -> bool:
    if not value:
        return False
    return not (isinstance(value, str) and SHORT_REFERENCE.search(value))


NODE_RULES: Tuple[NodeRule, ...] = (
    NodeRule(
        type_name="CodeableConcept",
        property_name="text",
        code=ErrorCode.FHIR_SCHEMA_ERROR,
        message="should not include .text elements",
        violates=_present,
    ),
    NodeRule(
        type_name="Coding",
        property_name="display",
        code=ErrorCode.FHIR_SCHEMA_ERROR,
        message="should not include .display elements",
        violates=_present,
    ),
    NodeRule(
        type_name="Reference",
        property_name="reference",
        code=ErrorCode.SCHEMA_ERROR,
        message='should be short resource-scheme URIs (e.g., {"patient": {"reference": "resource:0"}})',
        violates=_not_short_reference,
    ),
)


def _rules_by_type(rules: Tuple[NodeRule, ...]) -> Dict[str, Tuple[NodeRule, ...]]:
    table: Dict[str, Tuple[NodeRule, ...]] = {}
    for rule in rules:
        table[rule.type_name] = table.get(rule.type_name, ()) + (rule,)
    return table


class RuleEngine:
    """Walker callback applying node-level rules for one bundle entry."""

    def __init__(
        self,
        resolver: TypeResolver,
        log: DiagnosticLog,
        entry_index: int,
        rules: Tuple[NodeRule, ...] = NODE_RULES,
    ):
        self.resolver = resolver
        self.log = log
        self.entry_index = entry_index
        self._rules = _rules_by_type(rules)

    def __call__(self, node: Dict[str, Any], path: PropertyPath) -> None:
        type_name = self.resolver.resolve(path)
        if type_name is None:
            return
        for rule in self._rules.get(type_name, ()):
            if rule.property_name in node and rule.violates(node[rule.property_name]):
                dotted = ".".join(path)
                self.log.warn(
                    f"Bundle.entry[{self.entry_index}].resource.{dotted} ({type_name}) {rule.message}",
                    rule.code,
                    entry_index=self.entry_index,
                    path=dotted,
                )


def check_entry(entry: Any, index: int, log: DiagnosticLog) -> Optional[Dict[str, Any]]:
    """Run the entry-level rules for ``Bundle.entry[index]``.

    Returns:
        The entry's resource when node-level rules should run on it,
        or None when the resource is missing (an error is logged and the
        remaining checks for this entry are skipped).
    """
    resource = entry.get("resource") if isinstance(entry, dict) else None
    if not isinstance(resource, dict):
        log.error(
            f"Bundle.entry[{index}].resource missing",
            ErrorCode.CRITICAL_DATA_MISSING,
            entry_index=index,
        )
        return None

    resource_type = resource.get("resourceType", "")
    prefix = f"Bundle.entry[{index}].resource[{resource_type}]"

    if "id" in resource:
        log.warn(
            f"{prefix} should not include .id elements",
            ErrorCode.FHIR_SCHEMA_ERROR,
            entry_index=index,
            path=f"{resource_type}.id",
        )

    if "meta" in resource:
        # .meta.security is allowed on its own; nothing else may appear on .meta
        meta = resource["meta"]
        if not isinstance(meta, dict) or "security" not in meta or len(meta) > 1:
            log.warn(
                f"{prefix}.meta should only include .security property with an array of identity assurance codes",
                ErrorCode.FHIR_SCHEMA_ERROR,
                entry_index=index,
                path=f"{resource_type}.meta",
            )

    if "text" in resource:
        log.warn(
            f"{prefix} should not include .text elements",
            ErrorCode.FHIR_SCHEMA_ERROR,
            entry_index=index,
            path=f"{resource_type}.text",
        )

    full_url = entry.get("fullUrl")
    if not isinstance(full_url, str) or not SHORT_FULL_URL.search(full_url):
        log.warn(
            f'Bundle.entry[{index}].fullUrl should be short resource-scheme URIs (e.g., {{"fullUrl": "resource:0"}})',
            ErrorCode.FHIR_SCHEMA_ERROR,
            entry_index=index,
        )

    return resource
