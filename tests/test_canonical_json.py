"""Tests for _internal/canonical_json.py."""

import json

from fhircheck._internal.canonical_json import canonical_dumps, pretty_dumps


def test_canonical_dumps_sorts_keys_and_is_compact():
    """Test that canonical output sorts keys and has no whitespace."""
    assert canonical_dumps({"b": 1, "a": [2, 1]}) == '{"a":[2,1],"b":1}'


def test_canonical_dumps_is_byte_stable():
    """Test that equal dicts built in different orders serialize identically."""
    first = {"ok": True, "diagnostics": [], "fatal": False}
    second = {"fatal": False, "diagnostics": [], "ok": True}
    assert canonical_dumps(first) == canonical_dumps(second)


def test_canonical_dumps_keeps_unicode():
    """Test that non-ASCII text is written as UTF-8, not escaped."""
    assert canonical_dumps({"family": "Müller"}) == '{"family":"Müller"}'


def test_pretty_dumps_keeps_key_order_with_three_space_indent():
    """Test the debug dump layout."""
    text = pretty_dumps({"resourceType": "Bundle", "entry": []})

    assert text == '{\n   "resourceType": "Bundle",\n   "entry": []\n}'
    assert json.loads(text) == {"resourceType": "Bundle", "entry": []}
