"""Identifier slugs and description rendering.

Group, method and resource IDs are URL-friendly slugs derived from titles,
summaries and operation IDs. Free-text descriptions pass through a
:data:`DescriptionRenderer` before they are stored on the model; the default
keeps the source text unchanged so that a rendering layer can apply its own
markdown pipeline.
"""

from __future__ import annotations

import re
from typing import Callable

DescriptionRenderer = Callable[[str], str]
"""Converts a description (markdown in most specs) into its stored form."""

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def passthrough_renderer(text: str) -> str:
    """Default :data:`DescriptionRenderer`: return *text* unchanged."""
    return text


def title_to_kebab(title: str) -> str:
    """Lower-case *title* and replace spaces with dashes.

    Example::

        >>> title_to_kebab("Pet Store")
        'pet-store'
    """
    return title.lower().replace(" ", "-")


def camel_to_kebab(name: str) -> str:
    """Split a camelCase or PascalCase *name* into a dash-separated slug.

    Acronyms stay together, and names that are already kebab-case are
    returned unchanged.

    Example::

        >>> camel_to_kebab("getUserByID")
        'get-user-by-id'
        >>> camel_to_kebab("HTTPServerList")
        'http-server-list'
    """
    snake = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    snake = _WORD_BOUNDARY.sub(r"\1_\2", snake)
    return snake.lower().replace("_", "-")
