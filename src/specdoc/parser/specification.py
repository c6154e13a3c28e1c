"""Build an :class:`~specdoc.models.APISpecification` from a parsed document.

The top-level ``tags`` list orders and groups the documentation. Each tag
becomes one :class:`~specdoc.models.APIGroup` holding every operation that
carries that tag; operations without tags are left out. A document that
declares no tags is documented path by path instead: each path becomes its
own group, named by ``x-pathName`` or its first operation's summary, and
every operation is included.

Paths are visited in document order and verbs in the order get, post, put,
delete, head, options, patch. ``x-version`` on a path item (default
``latest``) assigns its methods to a version; once all groups are built,
:attr:`~specdoc.models.APISpecification.api_versions` re-indexes them by
version.

Typical usage::

    spec = load_specification("petstore.json")
    pets = spec.get_by_id("pet")
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from specdoc.models import (
    DEFAULT_VERSION,
    APIGroup,
    APIInfo,
    APISpecification,
    SecurityScheme,
)
from specdoc.parser.loader import load_spec, validate_spec_version
from specdoc.parser.methods import MethodCompiler, resolve_security
from specdoc.parser.resolver import resolve_refs
from specdoc.parser.resources import ResourceResolver
from specdoc.parser.text import (
    DescriptionRenderer,
    passthrough_renderer,
    title_to_kebab,
)

logger = logging.getLogger(__name__)

HTTP_VERBS = ("get", "post", "put", "delete", "head", "options", "patch")


def load_specification(
    source: str,
    host: Optional[str] = None,
    specification: Optional[APISpecification] = None,
    render_description: DescriptionRenderer = passthrough_renderer,
) -> APISpecification:
    """Load, expand and compile the document at *source*.

    Args:
        source: File path, URL, ``-`` for stdin, or, when *host* is set, a
            file name served by that host.
        host: ``host[:port]`` to fetch bare file names from over HTTP.
        specification: An existing specification to add the document's
            groups and resources to; a new one is created when ``None``.
        render_description: Applied to every description before storage.

    Returns:
        The populated specification.

    Raises:
        SpecLoadError: If the document cannot be fetched, parsed, or its
            references expanded.
        SpecResolutionError: If the document cannot be documented.
    """
    raw = load_spec(spec_location(source, host))
    version = validate_spec_version(raw)
    logger.debug("Loaded %s document version %s", source, version)
    return build_specification(resolve_refs(raw), specification, render_description)


def spec_location(source: str, host: Optional[str]) -> str:
    """Return where to read *source* from, given the configured *host*.

    Example::

        >>> spec_location("petstore.json", "localhost:8080")
        'http://localhost:8080/petstore.json'
        >>> spec_location("petstore.json", None)
        'petstore.json'
    """
    if not host or source == "-" or source.startswith(("http://", "https://")):
        return source
    return f"http://{host}/{source.lstrip('/')}"


def build_specification(
    document: Mapping[str, Any],
    specification: Optional[APISpecification] = None,
    render_description: DescriptionRenderer = passthrough_renderer,
) -> APISpecification:
    """Compile a ``$ref``-expanded *document* into a documentation model.

    Args:
        document: The expanded Swagger/OpenAPI document.
        specification: Specification to extend (collapsed loading), or
            ``None`` for a new one.
        render_description: Applied to every description before storage.

    Returns:
        *specification* (or a new one) with the document's groups appended
        and ``api_versions`` rebuilt.

    Raises:
        SpecResolutionError: If a root model has no title or an untagged
            operation cannot be named.
    """
    spec = specification if specification is not None else APISpecification()
    render = render_description

    info = document.get("info") or {}
    spec.info = APIInfo(
        title=str(info.get("title") or ""),
        description=render(str(info.get("description") or "")),
    )
    spec.id = title_to_kebab(spec.info.title)
    logger.debug("Parse OpenAPI specification '%s'", spec.info.title)

    spec.security_definitions.update(extract_security_definitions(document, render))
    spec.default_security = resolve_security(
        document.get("security"), spec.security_definitions
    )

    url = base_url(document)
    prefix = base_path(document)
    navigate_by_name = document.get("x-navigateMethodsByName") is True
    compiler = MethodCompiler(spec, ResourceResolver(render), render)

    paths = [
        (path, item)
        for path, item in (document.get("paths") or {}).items()
        if isinstance(item, Mapping) and not str(path).startswith("x-")
    ]

    for tag in declared_tags(document):
        tag_name = str(tag.get("name") or "")
        group: Optional[APIGroup] = None
        if tag_name:
            group = APIGroup(
                id=title_to_kebab(tag_name),
                name=tag_name,
                description=render(str(tag.get("description") or "")),
                url=url,
                method_navigation_by_name=navigate_by_name,
            )
        logger.debug("Processing tag '%s'", tag_name)

        for path, item in paths:
            if not tag_name:
                group = APIGroup(url=url, method_navigation_by_name=navigate_by_name)
            assert group is not None

            version = item.get("x-version")
            if not isinstance(version, str) or not version:
                version = DEFAULT_VERSION
            group.current_version = version

            for verb in HTTP_VERBS:
                operation = item.get(verb)
                if not isinstance(operation, Mapping):
                    continue
                if not operation_matches_tag(operation, tag_name):
                    logger.debug(
                        "Skipping %s %s: not tagged '%s'", verb.upper(), path, tag_name
                    )
                    continue
                method = compiler.compile(group, item, operation, prefix + path, verb, version)
                group.methods.append(method)
                group.versions.setdefault(version, []).append(method)

            if not tag_name and group.methods:
                _add_group(spec, group)

        if tag_name and group is not None and group.methods:
            _add_group(spec, group)

    spec.api_versions = index_versions(spec.apis)
    return spec


def declared_tags(document: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the document's tags, or a single unnamed tag when it declares none."""
    tags = [t for t in document.get("tags") or [] if isinstance(t, Mapping)]
    return tags or [{}]


def operation_matches_tag(operation: Mapping[str, Any], tag_name: str) -> bool:
    """Decide whether *operation* belongs in the group for *tag_name*.

    With the unnamed tag (the document declares no tags) every operation
    matches. With a named tag, the operation must list that tag; untagged
    operations never match.
    """
    tags = operation.get("tags") or []
    if not tags:
        return not tag_name
    return not tag_name or tag_name in tags


def index_versions(apis: list[APIGroup]) -> dict[str, list[APIGroup]]:
    """Partition *apis* by version.

    Each version maps to copies of the groups that have methods in it, the
    copy holding only that version's methods and no nested versions.
    """
    versions: dict[str, list[APIGroup]] = {}
    for api in apis:
        for version, methods in api.versions.items():
            versions.setdefault(version, []).append(
                api.model_copy(update={"methods": list(methods), "versions": {}})
            )
    return versions


def base_url(document: Mapping[str, Any]) -> str:
    """Return the API's base URL: ``servers[0].url`` or ``<scheme>://<host>``."""
    servers = document.get("servers")
    if isinstance(servers, list) and servers and isinstance(servers[0], Mapping):
        return str(servers[0].get("url") or "")

    host = document.get("host")
    if not host:
        return ""
    schemes = document.get("schemes") or ["http"]
    return f"{schemes[0]}://{host}"


def base_path(document: Mapping[str, Any]) -> str:
    """Return the Swagger ``basePath`` to prefix paths with (``""`` for ``/``)."""
    path = str(document.get("basePath") or "")
    return path.rstrip("/")


def extract_security_definitions(
    document: Mapping[str, Any],
    render_description: DescriptionRenderer = passthrough_renderer,
) -> dict[str, SecurityScheme]:
    """Extract security schemes from ``securityDefinitions`` (Swagger 2.0)
    or ``components/securitySchemes`` (OpenAPI 3).

    For OpenAPI 3 ``oauth2`` schemes the first declared flow is used.
    """
    raw = document.get("securityDefinitions")
    if raw is None:
        raw = (document.get("components") or {}).get("securitySchemes")

    schemes: dict[str, SecurityScheme] = {}
    for name, definition in (raw or {}).items():
        if not isinstance(definition, Mapping):
            continue

        scheme_type = str(definition.get("type") or "")
        scheme = SecurityScheme(
            name=name,
            type=scheme_type,
            description=render_description(str(definition.get("description") or "")),
            param_name=definition.get("name"),
            param_location=definition.get("in"),
        )

        if scheme_type == "apiKey":
            scheme.is_api_key = True
        elif scheme_type == "basic" or (
            scheme_type == "http" and str(definition.get("scheme", "")).lower() == "basic"
        ):
            scheme.is_basic = True
        elif scheme_type == "oauth2":
            scheme.is_oauth2 = True
            flow = definition
            scheme.oauth2_flow = definition.get("flow")
            flows = definition.get("flows")
            if isinstance(flows, Mapping) and flows:
                scheme.oauth2_flow, flow = next(iter(flows.items()))
                if not isinstance(flow, Mapping):
                    flow = {}
            scheme.authorization_url = flow.get("authorizationUrl")
            scheme.token_url = flow.get("tokenUrl")
            scheme.scopes = {
                str(scope): str(text) for scope, text in (flow.get("scopes") or {}).items()
            }

        schemes[name] = scheme

    return schemes


def _add_group(spec: APISpecification, group: APIGroup) -> None:
    logger.debug("Adding group %s", group.name)
    for method in group.methods:
        method.api_group = group.id
    spec.apis.append(group)
