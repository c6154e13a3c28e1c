"""Resolve schema graphs into documented resources and example payloads.

:class:`ResourceResolver` walks a ``$ref``-expanded schema depth-first and
produces two parallel trees:

* a :class:`~specdoc.models.Resource` tree, each node annotated with its
  fully-qualified namespace (``fqns``) and an ID; and
* an example tree of plain dicts and lists in which every leaf is the name of
  its type (``{"name": "string", "age": "integer"}``).

Identity rules:

* A node's ID is the kebab-cased ``title`` of its schema.
* Untitled nodes take the last segment of their namespace as ID (the
  namespace is *chopped*), and :func:`~specdoc.parser.namespace.prepare_namespace`
  puts it back when building the namespaces of their children.
* Arrays below the root never keep their own title: they are named after the
  property that holds them, suffixed with ``[]``.
* The root of every tree must have a title; otherwise
  :class:`~specdoc.exceptions.SpecResolutionError` is raised.

Visibility rules: when resolving a request body (``only_writable=True``),
``readOnly`` properties are dropped, and any property whose
``x-excludeFromOperations`` list names the current operation is dropped in
every context.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence

from specdoc.exceptions import SpecResolutionError
from specdoc.models import Method, Resource
from specdoc.parser.classifier import classify_schema, declared_types
from specdoc.parser.namespace import prepare_namespace
from specdoc.parser.text import (
    DescriptionRenderer,
    passthrough_renderer,
    title_to_kebab,
)

logger = logging.getLogger(__name__)

ADDITIONAL_PROPERTIES_KEY = "<key>"
EXCLUDE_EXTENSION = "x-excludeFromOperations"


def json_marshal_indent(value: Any) -> str:
    """Serialise *value* as 4-space indented JSON.

    ``<``, ``>`` and ``&`` are written literally so that placeholders such as
    ``<key>`` read naturally in the rendered documentation.
    """
    return json.dumps(value, indent=4, ensure_ascii=False, default=str)


def render_example(example: Mapping[str, Any], resource_type: Sequence[str]) -> str:
    """Serialise the example of a resource at a request/response boundary.

    Array resources are wrapped in a single-element list. When the array
    members are primitives (``resource_type == ["array", "string"]``) the
    member is the element type name rather than an empty object.

    Args:
        example: The example map returned by :meth:`ResourceResolver.resolve`.
        resource_type: The resource's type list.

    Returns:
        The example as indented JSON text.
    """
    primary = resource_type[0].lower() if resource_type else ""
    if primary != "array":
        return json_marshal_indent(dict(example))
    if not example and len(resource_type) > 1:
        return json_marshal_indent([resource_type[1]])
    return json_marshal_indent([dict(example)])


class ResourceResolver:
    """Converts schema nodes into :class:`~specdoc.models.Resource` trees.

    A resolver is stateless apart from the description renderer; the
    per-version deduplication of resources is the caller's concern (see
    :meth:`~specdoc.models.APISpecification.register_resource`).

    Args:
        render_description: Applied to every schema description before it
            is stored on a resource.

    Example::

        resolver = ResourceResolver()
        resource, example = resolver.resolve(schema, method)
        resource.schema_ = render_example(example, resource.type)
    """

    def __init__(self, render_description: DescriptionRenderer = passthrough_renderer):
        self._render = render_description

    def resolve(
        self,
        schema: Optional[Mapping[str, Any]],
        method: Method,
        namespace: Sequence[str] = (),
        only_writable: bool = False,
        declared: Optional[Sequence[str]] = None,
    ) -> tuple[Optional[Resource], Optional[dict[str, Any]]]:
        """Resolve *schema* into a resource and its example map.

        Args:
            schema: The schema node, or ``None``.
            method: The operation being documented. Its ``operation_name``
                drives ``x-excludeFromOperations`` filtering; its verb and
                path appear in error messages.
            namespace: Namespace of the node; empty at the root of a
                request or response schema.
            only_writable: Drop ``readOnly`` properties (request bodies).
            declared: Type list overriding the node's own ``type``.

        Returns:
            ``(resource, example)``, or ``(None, None)`` when *schema* is
            ``None``.

        Raises:
            SpecResolutionError: If the root node has no title.
        """
        if schema is None:
            return None, None

        view = classify_schema(schema, declared)
        node, original = view.node, view.original
        types = list(view.types)
        fqns = list(namespace)

        logger.debug("Resolving %s schema at %s", view.kind.value, fqns)

        title = str(node.get("title") or original.get("title") or "")
        resource_id = title_to_kebab(title)

        if not fqns and not resource_id:
            raise SpecResolutionError(
                f"{method.method.upper()} {method.path} references a model "
                "definition that does not have a title member."
            )

        if fqns and "array" in types:
            resource_id = ""
        if types[0].lower() == "array" and fqns:
            fqns[-1] = fqns[-1] + "[]"

        chopped = False
        if not resource_id and fqns:
            resource_id = fqns.pop()
            chopped = True
            logger.debug("Chopped %s from namespace leaving %s", resource_id, fqns)

        resource_fqns = fqns
        if not chopped and "object" in types and resource_fqns:
            resource_fqns = resource_fqns[:-1]

        description = original.get("description") or ""
        if description:
            description = self._render(description)
        else:
            description = str(original.get("title") or "")

        resource = Resource(
            id=resource_id,
            title=title,
            description=description,
            type=types,
            fqns=resource_fqns,
            read_only=bool(original.get("readOnly", False)),
            exclude_from_operations=[
                op for op in original.get(EXCLUDE_EXTENSION) or [] if isinstance(op, str)
            ],
        )
        declared_example = node.get("example", original.get("example"))
        if declared_example is not None:
            resource.example = json_marshal_indent(declared_example)
        if node.get("enum"):
            resource.enum = [str(value) for value in node["enum"]]

        example: dict[str, Any] = {}
        required = _required_names(node)
        for part in _composition(node):
            self._compile_properties(
                part, resource, method, required, example, fqns, chopped, only_writable
            )

        return resource, example

    def _compile_properties(
        self,
        schema: Mapping[str, Any],
        resource: Resource,
        method: Method,
        required: set[str],
        example: dict[str, Any],
        namespace: list[str],
        chopped: bool,
        only_writable: bool,
    ) -> None:
        """Resolve the declared properties of *schema* into *resource*.

        An ``additionalProperties`` schema becomes one synthetic property,
        ``<key>``, typed as a map of the declared value type.
        """
        for name, prop in (schema.get("properties") or {}).items():
            if prop is True:
                prop = {}
            if not isinstance(prop, Mapping):
                continue
            self._process_property(
                prop, name, resource, method, required, example,
                namespace, chopped, only_writable,
            )

        additional = schema.get("additionalProperties")
        if additional is True:
            additional = {}
        if isinstance(additional, Mapping):
            value_types = declared_types(additional) or ["object"]
            self._process_property(
                additional, ADDITIONAL_PROPERTIES_KEY, resource, method, required,
                example, namespace, chopped, only_writable,
                declared=("map", value_types[0]),
            )

    def _process_property(
        self,
        schema: Mapping[str, Any],
        name: str,
        resource: Resource,
        method: Method,
        required: set[str],
        example: dict[str, Any],
        namespace: list[str],
        chopped: bool,
        only_writable: bool,
        declared: Optional[Sequence[str]] = None,
    ) -> None:
        if name in resource.properties:
            # allOf members declaring the same property: first one wins
            logger.debug("Property %s already compiled on %s, skipping", name, resource.id)
            return

        child_namespace = prepare_namespace(namespace, resource.id, name, chopped)
        child, child_example = self.resolve(
            schema, method, child_namespace, only_writable, declared
        )
        # resolve() only returns None for a None schema
        assert child is not None and child_example is not None

        if only_writable and child.read_only:
            return
        if method.operation_name in child.exclude_from_operations:
            logger.debug("Property %s excluded from %s", name, method.operation_name)
            return

        child.required = name in required
        resource.properties[name] = child
        example[name] = _property_example(child, child_example)


def _property_example(child: Resource, child_example: dict[str, Any]) -> Any:
    """Shape the example value of a property from its resolved type."""
    primary = child.type[0].lower()
    if primary == "object":
        return child_example
    if primary == "array":
        if child_example or len(child.type) < 2:
            return [child_example]
        return [child.type[1]]
    if primary == "map":
        element = child.type[1] if len(child.type) > 1 else "object"
        if element.lower() == "object":
            return child_example
        return element
    return child.type[0]


def _composition(schema: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return *schema* followed by its ``allOf`` members, depth-first."""
    parts = [schema]
    for member in schema.get("allOf") or []:
        if isinstance(member, Mapping):
            parts.extend(_composition(member))
    return parts


def _required_names(schema: Mapping[str, Any]) -> set[str]:
    """Collect ``required`` names from *schema* and all of its ``allOf`` members."""
    names: set[str] = set()
    for part in _composition(schema):
        required = part.get("required")
        if isinstance(required, list):
            names.update(str(n) for n in required)
    return names
