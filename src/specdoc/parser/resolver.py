"""Expand ``$ref`` JSON Reference pointers before documentation is built.

Swagger documents point at shared models with ``{"$ref": "#/definitions/Pet"}``
(OpenAPI 3: ``#/components/schemas/Pet``). The resource resolver needs every
schema inlined, so :func:`resolve_refs` returns a deep copy of the document
in which each reference is replaced by a fresh copy of its target. Two
operations returning ``Pet`` get two independent dicts; the per-version resource
table restores the shared identity by title.

Only internal references (``#/...``) are supported. A reference that
re-enters a model already being expanded on the current branch is left as
the ``$ref`` dict, which the resolver documents as an untyped object.
"""

from __future__ import annotations

import copy
from typing import Any

from specdoc.exceptions import SpecLoadError


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *spec* with all internal ``$ref`` pointers expanded.

    Raises:
        SpecLoadError: If a reference is external or points at a missing
            location.

    Example::

        raw = load_spec("petstore.yaml")
        expanded = resolve_refs(raw)
        # expanded["paths"]["/pets"]["get"]["responses"]["200"]["schema"]
        # is now the Pet model itself.
    """
    root = copy.deepcopy(spec)
    return _expand(root, root, frozenset())


def _lookup(ref: str, root: dict[str, Any]) -> Any:
    """Follow the JSON Pointer *ref* (``#/a/b``) from *root*.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).
    """
    if not ref.startswith("#/"):
        raise SpecLoadError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            if segment not in current:
                raise SpecLoadError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecLoadError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecLoadError(
                f"Cannot resolve $ref '{ref}': cannot navigate into "
                f"{type(current).__name__}"
            )
    return current


def _expand(obj: Any, root: dict[str, Any], active: frozenset[str]) -> Any:
    """Recursively expand references in *obj*.

    *active* holds the references being expanded on the current branch;
    siblings each get their own set so that a model used twice in one
    schema is expanded both times.
    """
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str):
            if ref in active:
                return obj
            target = _lookup(ref, root)
            expanded = _expand(target, root, active | {ref})
            siblings = {k: v for k, v in obj.items() if k != "$ref"}
            if siblings and isinstance(expanded, dict):
                # Sibling keys (e.g. a description next to $ref) override the target
                return {**expanded, **_expand(siblings, root, active)}
            return expanded
        return {key: _expand(value, root, active) for key, value in obj.items()}

    if isinstance(obj, list):
        return [_expand(item, root, active) for item in obj]

    return obj
