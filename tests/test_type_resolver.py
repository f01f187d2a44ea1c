"""Tests for kernel/type_resolver.py."""

import pytest

from fhircheck.kernel.schema import load_fhir_schema
from fhircheck.kernel.type_resolver import UNRESOLVED, TypeResolver


@pytest.fixture(scope="module")
def resolver():
    return TypeResolver(load_fhir_schema()["definitions"])


@pytest.mark.parametrize("path,expected", [
    ("Patient", "Patient"),
    ("Patient.identifier", "Identifier"),
    ("Patient.identifier.type", "CodeableConcept"),
    ("Patient.identifier.type.coding", "Coding"),
    ("Patient.identifier.assigner", "Reference"),
    ("Patient.meta.security", "Coding"),
    ("Patient.birthDate", "date"),
    ("Immunization.vaccineCode", "CodeableConcept"),
    ("Immunization.patient", "Reference"),
    ("Immunization.performer", "Immunization_Performer"),
    ("Immunization.performer.actor", "Reference"),
    ("Immunization.protocolApplied.targetDisease", "CodeableConcept"),
    ("Observation.component.valueCodeableConcept", "CodeableConcept"),
    ("Observation.referenceRange.age.low", "Quantity"),
    ("Patient.extension.extension.valueCoding", "Coding"),
])
def test_resolves_declared_types(resolver, path, expected):
    """Test that $ref and items.$ref declarations resolve to the type name."""
    assert resolver.resolve(path) == expected


def test_accepts_segment_tuples(resolver):
    """Test that tuple paths resolve like dotted strings."""
    assert resolver.resolve(("Patient", "identifier", "type")) == "CodeableConcept"
    assert resolver.resolve(["Immunization", "patient"]) == "Reference"


@pytest.mark.parametrize("path", [
    "Patient.gender",                      # inline enum
    "Patient.deceasedBoolean",             # inline scalar
    "Patient.resourceType",                # const
    "Patient.doesNotExist",                # unknown property
    "Patient.doesNotExist.deeper",         # below an unknown property
    "Patient.birthDate.value",             # below a primitive
    "NotAResource",                        # unknown root type
    "NotAResource.code",
    "",
])
def test_unknown_or_scalar_paths_are_unresolved(resolver, path):
    """Test that paths without a named type resolve to UNRESOLVED, never raise."""
    assert resolver.resolve(path) is UNRESOLVED


@pytest.mark.parametrize("path", [
    "Patient.contained",
    "Patient.contained.code",
    "Observation.contained.identifier.type",
    "Bundle.entry.resource",
    "Bundle.entry.resource.vaccineCode",
    "ResourceList",
])
def test_one_of_unions_are_unresolved(resolver, path):
    """Test that paths through oneOf unions (ResourceList) are not followed."""
    assert resolver.resolve(path) is UNRESOLVED


def test_first_segment_is_resource_type_not_schema_root(resolver):
    """Test that the first segment is looked up as a definition name."""
    assert resolver.resolve("Bundle.entry") == "Bundle_Entry"
    assert resolver.resolve("Observation.code") == "CodeableConcept"


def test_results_are_stable_across_calls(resolver):
    """Test that repeated lookups (cached) return the same answers."""
    first = [resolver.resolve("Patient.identifier.type"), resolver.resolve("Patient.gender")]
    second = [resolver.resolve("Patient.identifier.type"), resolver.resolve("Patient.gender")]
    assert first == second == ["CodeableConcept", UNRESOLVED]


def test_small_inline_schema():
    """Test resolution over a hand-written definitions mapping."""
    definitions = {
        "Thing": {
            "properties": {
                "part": {"$ref": "#/definitions/Part"},
                "parts": {"items": {"$ref": "#/definitions/Part"}, "type": "array"},
                "either": {"$ref": "#/definitions/Choice"},
                "label": {"type": "string"},
            }
        },
        "Part": {"properties": {"name": {"type": "string"}}},
        "Choice": {"oneOf": [{"$ref": "#/definitions/Part"}, {"$ref": "#/definitions/Thing"}]},
    }
    resolver = TypeResolver(definitions)

    assert resolver.resolve("Thing.part") == "Part"
    assert resolver.resolve("Thing.parts") == "Part"
    assert resolver.resolve("Thing.either") is UNRESOLVED
    assert resolver.resolve("Thing.either.name") is UNRESOLVED
    assert resolver.resolve("Thing.label") is UNRESOLVED
