"""Generic pre-order walk over a parsed JSON value tree."""

from typing import Any, Callable, Dict, Tuple

PropertyPath = Tuple[str, ...]
Visitor = Callable[[Dict[str, Any], PropertyPath], None]


def walk_properties(node: Any, path: PropertyPath, visit: Visitor) -> None:
    """Call ``visit(obj, path)`` once for every object in ``node``.

    Rules:
    - Objects are visited before their children, children in key order.
    - Each child is walked with ``path + (key,)``; paths are tuples, so
      sibling branches never observe each other's segments.
    - List elements are walked at the list's own path (no index segment).
    - Scalars are never visited; their parent's visit sees them as values.

    The input must be a tree (parsed JSON always is); cycles are not detected.
    """
    if isinstance(node, list):
        for element in node:
            walk_properties(element, path, visit)
        return

    if not isinstance(node, dict):
        return

    visit(node, path)

    for name, value in node.items():
        walk_properties(value, path + (name,), visit)
