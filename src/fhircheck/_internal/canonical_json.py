"""JSON serialization helpers.

``canonical_dumps`` is used for report files written by the CLI, so
repeated runs on the same input produce byte-identical output.
``pretty_dumps`` is used for the human-oriented document dump.
"""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Canonical JSON serialization for byte-stable reports.

    Rules:
    - UTF-8 encoding
    - Sorted keys
    - Stable separators (",", ":")
    - Lists keep their order (diagnostics are already in emission order)
    - No trailing whitespace
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False  # UTF-8 encoding
    )


def pretty_dumps(obj: Any) -> str:
    """Indented dump (3 spaces, input key order) for debug output."""
    return json.dumps(obj, indent=3, ensure_ascii=False)
