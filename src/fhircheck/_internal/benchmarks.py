"""Performance sentinel budgets and synthetic bundles for the gated perf tests."""

from __future__ import annotations

import json
import os
from typing import Any, Dict


def _budget_from_env(var_name: str, default_ms: float) -> float:
    raw = os.getenv(var_name)
    if not raw:
        return default_ms
    try:
        return float(raw)
    except ValueError:
        return default_ms


MAX_WIDE_BUNDLE_MS = _budget_from_env("FHIRCHECK_MAX_WIDE_BUNDLE_MS", 2000.0)
MAX_DEEP_RESOURCE_MS = _budget_from_env("FHIRCHECK_MAX_DEEP_RESOURCE_MS", 1000.0)


def _immunization(index: int, patient_index: int) -> Dict[str, Any]:
    return {
        "fullUrl": f"resource:{index}",
        "resource": {
            "resourceType": "Immunization",
            "status": "completed",
            "vaccineCode": {
                "coding": [{"system": "http://hl7.org/fhir/sid/cvx", "code": "207"}]
            },
            "patient": {"reference": f"resource:{patient_index}"},
            "occurrenceDateTime": "2021-01-01",
            "performer": [{"actor": {"display": "ABC General Hospital"}}],
            "lotNumber": f"LOT{index:06d}",
        },
    }


def build_wide_bundle(entry_count: int) -> str:
    """One Patient followed by ``entry_count - 1`` Immunizations."""
    entries = [{
        "fullUrl": "resource:0",
        "resource": {
            "resourceType": "Patient",
            "name": [{"family": "Anyperson", "given": ["John", "B."]}],
            "birthDate": "1951-01-20",
        },
    }]
    entries.extend(_immunization(i, 0) for i in range(1, entry_count))
    return json.dumps({"resourceType": "Bundle", "type": "collection", "entry": entries})


def build_deep_resource(depth: int) -> str:
    """A Patient whose extension chain nests ``depth`` levels deep."""
    extension: Dict[str, Any] = {
        "url": "http://example.org/leaf",
        "valueCodeableConcept": {"coding": [{"code": "leaf"}]},
    }
    for level in range(depth):
        extension = {"url": f"http://example.org/level/{level}", "extension": [extension]}
    bundle = {
        "resourceType": "Bundle",
        "type": "collection",
        "entry": [{
            "fullUrl": "resource:0",
            "resource": {"resourceType": "Patient", "extension": [extension]},
        }],
    }
    return json.dumps(bundle)
