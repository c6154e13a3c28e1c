"""Fully-qualified namespace paths for nodes of a resolved schema tree."""

from __future__ import annotations

from typing import Sequence


def prepare_namespace(
    namespace: Sequence[str], parent_id: str, name: str, chopped: bool
) -> list[str]:
    """Return the namespace of property *name* of a parent resource.

    When the parent took its ID from the tail of its own namespace (it was
    *chopped*), that ID is put back before *name* so the child's path keeps
    every segment. The input sequence is never modified.

    Args:
        namespace: The parent's namespace after any chopping.
        parent_id: The parent resource's ID.
        name: The property name being resolved.
        chopped: Whether *parent_id* was taken from the namespace tail.

    Returns:
        A new list ending with *name*.

    Example::

        >>> prepare_namespace(["pet"], "tags[]", "name", True)
        ['pet', 'tags[]', 'name']
        >>> prepare_namespace(["pet"], "category", "id", False)
        ['pet', 'id']
    """
    result = list(namespace)
    if chopped and parent_id:
        result.append(parent_id)
    result.append(name)
    return result
