"""Compile operations into documented :class:`~specdoc.models.Method` objects.

For each (path, verb) pair that passes tag filtering,
:class:`MethodCompiler` builds a :class:`~specdoc.models.Method`:

* Parameters are merged (path-level defaults, operation-level overrides) and
  split into path, query, header, form and body buckets.
* The body schema is resolved in write mode (``readOnly`` properties
  omitted). Body resources are specific to their operation and are not
  shared through the resource table.
* Every response schema, status-coded or default, is resolved in read mode
  and registered in the specification's per-version resource table, so that
  all methods returning the same titled model share one resource.
* Security requirements are cross-referenced against the document's
  security definitions.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from specdoc.exceptions import SpecResolutionError
from specdoc.models import (
    APIGroup,
    APISpecification,
    Method,
    Parameter,
    Response,
    Security,
    SecurityScheme,
)
from specdoc.parser.classifier import declared_types
from specdoc.parser.resources import ResourceResolver, render_example
from specdoc.parser.text import (
    DescriptionRenderer,
    camel_to_kebab,
    passthrough_renderer,
    title_to_kebab,
)

logger = logging.getLogger(__name__)

_FORM_LOCATIONS = frozenset({"form", "formdata"})


class MethodCompiler:
    """Builds :class:`~specdoc.models.Method` objects for one specification.

    Args:
        specification: The specification being built. Its security
            definitions are read and its resource table is written.
        resolver: Resolver used for body and response schemas.
        render_description: Applied to descriptions before storage.
    """

    def __init__(
        self,
        specification: APISpecification,
        resolver: ResourceResolver,
        render_description: DescriptionRenderer = passthrough_renderer,
    ) -> None:
        self._spec = specification
        self._resolver = resolver
        self._render = render_description

    def compile(
        self,
        group: APIGroup,
        path_item: Mapping[str, Any],
        operation: Mapping[str, Any],
        path: str,
        verb: str,
        version: str,
    ) -> Method:
        """Compile one operation of *path_item* into a method of *group*.

        The method's ID is the operation ID, else the kebab-cased
        ``x-operationName``, else the kebab-cased summary, else the verb.
        A group that is still unnamed (untagged documents) is named after the
        path item's ``x-pathName`` or the operation summary.

        Raises:
            SpecResolutionError: If the group cannot be named, or a response
                schema has no title.
        """
        summary = str(operation.get("summary") or "")
        operation_name = verb
        named_operation = operation.get("x-operationName")
        if isinstance(named_operation, str) and named_operation:
            operation_name = named_operation

        method_id = str(operation.get("operationId") or "")
        if not method_id:
            if operation_name != verb:
                method_id = title_to_kebab(operation_name)
            else:
                method_id = title_to_kebab(summary) or verb

        method = Method(
            id=camel_to_kebab(method_id),
            name=summary,
            description=self._render(str(operation.get("description") or "")),
            method=verb,
            path=path,
            operation_name=operation_name,
            navigation_name=summary if group.method_navigation_by_name else operation_name,
        )

        _name_group(group, path_item, summary, method.id)
        method.api_group = group.id

        self._compile_parameters(method, path_item, operation)
        self._compile_responses(method, operation, version)

        security = resolve_security(operation.get("security"), self._spec.security_definitions)
        method.security = security or dict(self._spec.default_security)

        return method

    # ------------------------------------------------------------------ #
    # Parameters
    # ------------------------------------------------------------------ #

    def _compile_parameters(
        self,
        method: Method,
        path_item: Mapping[str, Any],
        operation: Mapping[str, Any],
    ) -> None:
        params = merge_parameters(
            path_item.get("parameters") or [], operation.get("parameters") or []
        )
        for param in params:
            location = str(param.get("in", "")).lower()
            parameter = Parameter(
                name=str(param.get("name", "")),
                location=str(param.get("in", "")),
                description=self._render(str(param.get("description") or "")),
                required=location == "path" or bool(param.get("required", False)),
                type=_parameter_type(param),
                enum=_parameter_enum(param),
            )

            if location == "path":
                method.path_params.append(parameter)
            elif location == "query":
                method.query_params.append(parameter)
            elif location == "header":
                method.header_params.append(parameter)
            elif location in _FORM_LOCATIONS:
                method.form_params.append(parameter)
            elif location == "body":
                self._attach_body(method, parameter, param.get("schema"))
            else:
                logger.debug(
                    "Skipping %s parameter %s of %s", location, parameter.name, method.id
                )

        request_body = operation.get("requestBody")
        if method.body_param is None and isinstance(request_body, Mapping):
            parameter = Parameter(
                name="body",
                location="body",
                description=self._render(str(request_body.get("description") or "")),
                required=bool(request_body.get("required", False)),
            )
            self._attach_body(method, parameter, content_schema(request_body))

    def _attach_body(
        self, method: Method, parameter: Parameter, schema: Optional[Mapping[str, Any]]
    ) -> None:
        resource, example = self._resolver.resolve(schema, method, only_writable=True)
        if resource is not None and example is not None:
            resource.schema_ = render_example(example, resource.type)
            parameter.resource = resource
        method.body_param = parameter

    # ------------------------------------------------------------------ #
    # Responses
    # ------------------------------------------------------------------ #

    def _compile_responses(
        self, method: Method, operation: Mapping[str, Any], version: str
    ) -> None:
        for status, response in (operation.get("responses") or {}).items():
            if not isinstance(response, Mapping):
                continue
            if str(status) == "default":
                method.default_response = self._response(method, response, version)
                continue
            try:
                code = int(status)
            except (TypeError, ValueError):
                logger.warning(
                    "Ignoring response '%s' of %s %s: not a numeric status code",
                    status, method.method.upper(), method.path,
                )
                continue
            logger.debug("Response for status %d", code)
            method.responses[code] = self._response(method, response, version)

    def _response(
        self, method: Method, response: Mapping[str, Any], version: str
    ) -> Response:
        schema = response.get("schema")
        if schema is None:
            schema = content_schema(response)

        resource = None
        resolved, example = self._resolver.resolve(schema, method)
        if resolved is not None and example is not None:
            resolved.schema_ = render_example(example, resolved.type)
            logger.debug("Resource version %s ID %s", version, resolved.id)
            resource = self._spec.register_resource(version, resolved, method.ref())
            if resource.id not in method.resources:
                method.resources.append(resource.id)

        return Response(
            description=self._render(str(response.get("description") or "")),
            resource=resource,
        )


# ---------------------------------------------------------------------- #
# Helpers
# ---------------------------------------------------------------------- #


def _name_group(
    group: APIGroup, path_item: Mapping[str, Any], summary: str, method_id: str
) -> None:
    """Name *group* from ``x-pathName`` or, if it has no name yet, *summary*."""
    path_name = path_item.get("x-pathName")
    if isinstance(path_name, str) and path_name:
        group.name = path_name
        group.id = title_to_kebab(path_name)

    if not group.name:
        if not summary:
            raise SpecResolutionError(
                f"Operation '{method_id}' does not have an operationId or summary member."
            )
        group.name = summary
        group.id = title_to_kebab(summary)


def merge_parameters(
    path_params: list[Any], op_params: list[Any]
) -> list[Mapping[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    ``name`` and ``in`` values. Non-mapping entries are dropped.
    """
    op_params = [p for p in op_params if isinstance(p, Mapping)]
    overridden = {(p.get("name", ""), p.get("in", "")) for p in op_params}
    merged = [
        p
        for p in path_params
        if isinstance(p, Mapping) and (p.get("name", ""), p.get("in", "")) not in overridden
    ]
    merged.extend(op_params)
    return merged


def content_schema(entry: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Return the schema of the first media type of an OpenAPI 3 ``content`` map."""
    for media in (entry.get("content") or {}).values():
        if isinstance(media, Mapping) and isinstance(media.get("schema"), Mapping):
            return media["schema"]
    return None


def _parameter_type(param: Mapping[str, Any]) -> Optional[str]:
    if param.get("type"):
        return str(param["type"])
    schema = param.get("schema")
    if isinstance(schema, Mapping):
        types = declared_types(schema)
        if types:
            return types[0]
    return None


def _parameter_enum(param: Mapping[str, Any]) -> list[str]:
    values = param.get("enum")
    schema = param.get("schema")
    if not values and isinstance(schema, Mapping) and "properties" not in schema:
        values = schema.get("enum")
    return [str(v) for v in values or []]


def resolve_security(
    requirements: Optional[list[Any]],
    definitions: Mapping[str, SecurityScheme],
) -> dict[str, Security]:
    """Cross-reference security *requirements* against *definitions*.

    Each requirement maps scheme names to requested scopes. Schemes that are
    not defined are ignored; requested scopes that the scheme does not
    declare are dropped.

    Returns:
        Scheme name to :class:`~specdoc.models.Security`. Empty when no
        requirement names a defined scheme.
    """
    security: dict[str, Security] = {}
    for requirement in requirements or []:
        if not isinstance(requirement, Mapping):
            continue
        for name, scopes in requirement.items():
            scheme = definitions.get(name)
            if scheme is None:
                logger.debug("Security scheme %s is not defined", name)
                continue
            security[name] = Security(
                scheme=scheme,
                scopes={
                    scope: scheme.scopes[scope]
                    for scope in scopes or []
                    if scope in scheme.scopes
                },
            )
    return security
