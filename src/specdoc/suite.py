"""Process-wide registry of loaded specifications.

An :class:`APISuite` maps specification IDs (the kebab-cased document title,
or ``""`` for a collapsed suite) to :class:`~specdoc.models.APISpecification`
objects. A serving or rendering layer creates the suite once at startup,
fills it with :func:`load_specifications`, and passes it to whatever needs
lookups; nothing in this package reads the global instance implicitly.

:func:`get_suite` / :func:`set_suite` / :func:`reset_suite` manage the
optional process-wide instance the CLI uses. :func:`get_suite` creates it on
first use and returns the same object afterwards.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from specdoc.models import APISpecification, DocsConfig
from specdoc.parser.specification import load_specification
from specdoc.parser.text import DescriptionRenderer, passthrough_renderer

logger = logging.getLogger(__name__)

COLLAPSED_ID = ""


class APISuite:
    """Registry of specifications keyed by ID.

    Example::

        suite = APISuite()
        load_specifications(DocsConfig(spec_filenames=["petstore.json"]), suite)
        spec = suite.get("swagger-petstore")
    """

    def __init__(self) -> None:
        self._specs: dict[str, APISpecification] = {}

    def register(self, specification: APISpecification) -> None:
        """Store *specification* under its ID, replacing any previous entry."""
        self._specs[specification.id] = specification

    def get(self, spec_id: str) -> Optional[APISpecification]:
        return self._specs.get(spec_id)

    def ids(self) -> list[str]:
        return list(self._specs)

    def clear(self) -> None:
        self._specs.clear()

    def __contains__(self, spec_id: object) -> bool:
        return spec_id in self._specs

    def __iter__(self) -> Iterator[APISpecification]:
        return iter(list(self._specs.values()))

    def __len__(self) -> int:
        return len(self._specs)


def load_specifications(
    config: DocsConfig,
    suite: APISuite,
    render_description: DescriptionRenderer = passthrough_renderer,
) -> APISuite:
    """Load every configured specification file into *suite*.

    Without ``collapse`` each file becomes its own specification, keyed by
    its title. With ``collapse`` all files are merged into one specification
    stored under ``""``.

    Loading stops at the first failing file; specifications loaded before it
    stay registered.

    Raises:
        SpecLoadError: If a file cannot be fetched or parsed.
        SpecResolutionError: If a file cannot be documented.
    """
    for filename in config.spec_filenames:
        existing = suite.get(COLLAPSED_ID) if config.collapse else None
        logger.info("Loading specification %s", filename)
        specification = load_specification(
            filename,
            host=config.host,
            specification=existing,
            render_description=render_description,
        )
        if config.collapse:
            specification.id = COLLAPSED_ID
        suite.register(specification)
    return suite


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_suite: Optional[APISuite] = None


def get_suite() -> APISuite:
    """Return the process-wide :class:`APISuite`, creating it on first use."""
    global _suite
    if _suite is None:
        _suite = APISuite()
    return _suite


def set_suite(suite: APISuite) -> None:
    """Install *suite* as the process-wide instance."""
    global _suite
    _suite = suite


def reset_suite() -> None:
    """Drop the process-wide instance. Primarily useful in test suites."""
    global _suite
    _suite = None
