"""Load specification documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw Swagger/OpenAPI documents and
converting them into Python dictionaries. JSON and YAML are both accepted,
with the format detected from the file extension, the HTTP content type, or
the content itself.

The two public functions are:

* :func:`load_spec` -- Load and parse a document from any supported source.
* :func:`validate_spec_version` -- Check and return the ``swagger`` or
  ``openapi`` version string.

Every failure is reported as :class:`~specdoc.exceptions.SpecLoadError` so
that a caller loading several documents can skip or report one of them
without losing the rest.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specdoc.exceptions import SpecLoadError

logger = logging.getLogger(__name__)


def load_spec(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load a specification from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        timeout: HTTP timeout in seconds for URL sources.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecLoadError: If the source cannot be loaded or parsed.
    """
    logger.debug("Loading specification from %s", source)
    if source == "-":
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        return _load_from_url(source, timeout)
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecLoadError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str, timeout: float) -> dict[str, Any]:
    """Fetch a document over HTTP, using the content type as a format hint."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecLoadError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecLoadError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from disk; ``.json``/``.yaml``/``.yml`` set the format hint."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecLoadError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecLoadError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecLoadError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    JSON is tried first unless the hint says YAML. A JSON hint that fails to
    parse is an error; anything else falls back to YAML, since valid JSON is
    also valid YAML.

    Raises:
        SpecLoadError: If the content cannot be parsed, or is not a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecLoadError(f"Invalid JSON: {exc}") from exc
            json_error = exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecLoadError(msg) from exc

    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        got = type(result).__name__ if result is not None else "empty document"
        raise SpecLoadError(f"Spec must be a JSON/YAML object (got {got})")
    return result


def validate_spec_version(spec: dict[str, Any]) -> str:
    """Return the declared ``swagger`` or ``openapi`` version string.

    Swagger 2.0 is the primary dialect; OpenAPI 3.x documents are accepted
    and read through the same model (``requestBody`` becomes the body
    parameter, ``servers`` the base URL).

    Raises:
        SpecLoadError: If neither field is present, or the version is not
            2.0 or 3.x.
    """
    if "swagger" in spec:
        version = str(spec["swagger"])
        if version.startswith("2."):
            return version
        raise SpecLoadError(f"Unsupported Swagger version: {version}")

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise SpecLoadError(
            "Missing 'swagger' or 'openapi' field. Is this a Swagger/OpenAPI document?"
        )

    version = str(openapi_version)
    if version.startswith("3."):
        return version

    raise SpecLoadError(
        f"Unsupported OpenAPI version: {version}. "
        "Only Swagger 2.0 and OpenAPI 3.x are supported."
    )
