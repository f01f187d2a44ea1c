"""Resolve a property path within a resource to its schema type name."""

from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

# Returned when the schema declares no named type at a path.
UNRESOLVED = None


def _ref_name(ref: str) -> str:
    """'#/definitions/CodeableConcept' -> 'CodeableConcept'."""
    return ref[ref.rfind("/") + 1:]


class TypeResolver:
    """Maps property paths to the type names declared in a schema.

    The first segment of a path is the resource type (``resourceType``),
    which is looked up as a definition name. Each following segment is a
    property name; array indices must already be elided. A property's type
    is the definition named by its ``$ref`` (or ``items.$ref`` for arrays).

    Unknown properties, inline scalar declarations (``type``/``enum``/
    ``const``) and ``oneOf`` unions such as ``ResourceList`` resolve to
    ``UNRESOLVED``. Polymorphic branches are not followed.
    """

    def __init__(self, definitions: Mapping[str, Dict[str, Any]]):
        self._definitions = definitions
        self._cache: Dict[Tuple[str, ...], Optional[str]] = {}

    def resolve(self, path: Union[str, Sequence[str]]) -> Optional[str]:
        """Return the type name at ``path``, or ``UNRESOLVED``."""
        if isinstance(path, str):
            key = tuple(path.split("."))
        else:
            key = tuple(path)
        if not key or not key[0]:
            return UNRESOLVED
        if key not in self._cache:
            self._cache[key] = self._resolve(key)
        return self._cache[key]

    def _resolve(self, path: Tuple[str, ...]) -> Optional[str]:
        if len(path) > 1:
            # Shares work with every prefix already looked up.
            parent_type = self.resolve(path[:-1])
            if parent_type is UNRESOLVED:
                return UNRESOLVED
            return self._property_type(parent_type, path[-1])
        return path[0] if self._is_named_type(path[0]) else UNRESOLVED

    def _is_named_type(self, type_name: str) -> bool:
        definition = self._definitions.get(type_name)
        return definition is not None and "oneOf" not in definition

    def _property_type(self, type_name: str, property_name: str) -> Optional[str]:
        properties = self._definitions[type_name].get("properties")
        if not properties:
            return UNRESOLVED
        declaration = properties.get(property_name)
        if not isinstance(declaration, dict):
            return UNRESOLVED

        ref = declaration.get("$ref")
        if ref is None:
            items = declaration.get("items")
            if isinstance(items, dict):
                ref = items.get("$ref")
        if ref is None:
            return UNRESOLVED

        target = _ref_name(ref)
        return target if self._is_named_type(target) else UNRESOLVED
