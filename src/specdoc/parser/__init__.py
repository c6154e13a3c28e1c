"""Specification parser -- load, expand ``$ref``, and compile documentation.

This sub-package turns a raw Swagger 2.0 / OpenAPI 3.x document (JSON or
YAML, local file or remote URL) into an
:class:`~specdoc.models.APISpecification`.

Typical usage::

    from specdoc.parser import load_specification

    spec = load_specification("petstore.json")

Sub-modules, leaves first:

* :mod:`~specdoc.parser.text` -- ID slugs and the description renderer hook.
* :mod:`~specdoc.parser.namespace` -- Namespace paths of schema tree nodes.
* :mod:`~specdoc.parser.classifier` -- Shape classification of schema nodes.
* :mod:`~specdoc.parser.resources` -- Schema to resource/example resolution.
* :mod:`~specdoc.parser.methods` -- Operation to method compilation.
* :mod:`~specdoc.parser.specification` -- Tag/path iteration and grouping.
* :mod:`~specdoc.parser.loader` -- I/O layer (URL, file, stdin).
* :mod:`~specdoc.parser.resolver` -- ``$ref`` expansion.
"""

from specdoc.parser.loader import load_spec, validate_spec_version
from specdoc.parser.specification import build_specification, load_specification

__all__ = [
    "load_spec",
    "validate_spec_version",
    "build_specification",
    "load_specification",
]
