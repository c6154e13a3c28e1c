"""Classify schema nodes by shape before they are resolved into resources.

A response can be an array of objects declared two ways: as a reference to a
model that itself declares ``type: array``, or inline as ``{"type": "array",
"items": {...}}``. :func:`classify_schema` aligns both: it unwraps ``items``
to find the node that actually carries the properties, and keeps the outer
``array`` type on the result so the resource is still documented as an array.

Classification never touches the input graph. The result is a frozen
:class:`ClassifiedSchema` view holding the effective node, the original node
and the computed type list, so the same raw schema can be resolved any number
of times with identical results.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence


class SchemaKind(str, enum.Enum):
    """Shape categories of a schema node."""

    PRIMITIVE = "primitive"
    OBJECT = "object"
    ARRAY_OF_PRIMITIVES = "array of primitives"
    ARRAY_OF_OBJECTS = "array of objects"
    MAP = "map"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ClassifiedSchema:
    """Classification result for one schema node.

    Attributes:
        kind: The shape category.
        node: The effective node: the ``items`` schema for arrays, the
            schema itself otherwise. Titles, properties and ``allOf`` are
            read from here.
        original: The node as it was declared, before unwrapping.
            ``description``, ``readOnly`` and vendor extensions are read
            from here.
        types: ``(primary,)`` or ``(primary, element)`` with any declared
            ``format`` already substituted into the last slot.
    """

    kind: SchemaKind
    node: Mapping[str, Any]
    original: Mapping[str, Any]
    types: tuple[str, ...]

    @property
    def primary_type(self) -> str:
        return self.types[0]


def declared_types(schema: Mapping[str, Any]) -> list[str]:
    """Return the ``type`` of *schema* as a list, ignoring ``"null"``.

    Swagger 2.0 and OpenAPI 3.0 declare a single string; OpenAPI 3.1 allows
    a list such as ``["string", "null"]``. An undeclared type yields ``[]``.
    """
    type_value = schema.get("type")
    if type_value is None:
        return []
    if isinstance(type_value, list):
        return [str(t) for t in type_value if t != "null"]
    return [str(type_value)]


def items_schema(schema: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Return the ``items`` sub-schema of *schema*, or ``None``.

    Tuple-style ``items`` lists yield their first member. A boolean ``true``
    schema is an untyped object; ``false`` yields ``None``.
    """
    items = schema.get("items")
    if isinstance(items, list) and items:
        items = items[0]
    if items is True:
        return {}
    if isinstance(items, Mapping):
        return items
    return None


def classify_schema(
    schema: Mapping[str, Any],
    declared: Optional[Sequence[str]] = None,
) -> ClassifiedSchema:
    """Classify *schema* and compute its effective node and type list.

    Args:
        schema: The schema node to classify.
        declared: Type list to use instead of the node's own ``type``. The
            value schema of ``additionalProperties`` is classified with
            ``["map", <value type>]``.

    Returns:
        A :class:`ClassifiedSchema`. The input mapping is not modified.

    Example::

        view = classify_schema({"type": "array", "items": {"type": "string"}})
        # view.kind == SchemaKind.ARRAY_OF_PRIMITIVES
        # view.types == ("array", "string")
    """
    outer = list(declared) if declared else declared_types(schema)
    if not outer:
        outer = ["object"]

    node: Mapping[str, Any] = schema
    items = None if outer[0] == "map" else items_schema(schema)

    if items is None:
        types = outer
        kind = _leaf_kind(outer[0])
    else:
        node = items
        inner = declared_types(items)
        if "array" not in outer:
            types = inner or outer
            kind = SchemaKind.UNKNOWN
        elif not inner or "object" in inner:
            types = outer
            kind = SchemaKind.ARRAY_OF_OBJECTS
        elif "array" in inner:
            types = ["array", "array"]
            kind = SchemaKind.ARRAY_OF_PRIMITIVES
        elif not items.get("properties"):
            types = ["array", inner[0]]
            kind = SchemaKind.ARRAY_OF_PRIMITIVES
        else:
            types = inner
            kind = SchemaKind.UNKNOWN

    fmt = node.get("format")
    if fmt:
        types = types[:-1] + [str(fmt)]

    return ClassifiedSchema(
        kind=kind, node=node, original=schema, types=tuple(types)
    )


def _leaf_kind(primary: str) -> SchemaKind:
    if primary == "object":
        return SchemaKind.OBJECT
    if primary == "map":
        return SchemaKind.MAP
    return SchemaKind.PRIMITIVE
