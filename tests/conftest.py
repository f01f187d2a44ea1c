"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed fhircheck package.
"""

import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def pytest_addoption(parser):
    """Add gated perf test option."""
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Run performance sentinel benchmarks (gated)."
    )


def pytest_collection_modifyitems(config, items):
    """Skip perf-marked tests unless --run-perf is set."""
    if config.getoption("--run-perf"):
        return
    skip_perf = pytest.mark.skip(reason="perf tests gated; pass --run-perf")
    for item in items:
        if "perf" in item.keywords:
            item.add_marker(skip_perf)


def make_bundle(*resources, full_urls=None):
    """Build bundle text with one entry per resource (fullUrl resource:<i>)."""
    entries = []
    for i, resource in enumerate(resources):
        full_url = full_urls[i] if full_urls is not None else f"resource:{i}"
        entry = {"fullUrl": full_url}
        if resource is not None:
            entry["resource"] = resource
        entries.append(entry)
    return json.dumps({"resourceType": "Bundle", "type": "collection", "entry": entries})


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def clean_bundle_text() -> str:
    return (FIXTURES / "example-bundle-clean.json").read_text(encoding="utf-8")


@pytest.fixture
def house_rules_bundle_text() -> str:
    return (FIXTURES / "example-bundle-house-rules.json").read_text(encoding="utf-8")


@pytest.fixture
def bundle_factory():
    return make_bundle
