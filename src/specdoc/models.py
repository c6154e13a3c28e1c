"""Canonical Pydantic models shared across all specdoc modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
or the project directory:
    :class:`DocsConfig`.

**Documentation models** -- produced by the specification parser and
consumed by a rendering layer:
    :class:`Resource`, :class:`MethodRef`, :class:`Parameter`,
    :class:`Response`, :class:`SecurityScheme`, :class:`Security`,
    :class:`Method`, :class:`APIGroup`, :class:`APIInfo`, and
    :class:`APISpecification`.

Ownership is strictly top-down: an :class:`APISpecification` owns its groups,
their methods, and the per-version resource table. Cross links pointing back
up the tree (:attr:`Resource.methods`, :attr:`Method.api_group`) hold
identifiers, never the objects themselves, so the model stays acyclic and
serialises with ``model_dump``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_VERSION = "latest"


# --- Config ---


class DocsConfig(BaseModel):
    """Settings for loading specifications into an :class:`~specdoc.suite.APISuite`.

    Loaded by :func:`~specdoc.config.resolve_config` from CLI flags,
    environment variables, ``./specdoc.json`` and the user config file.

    Example::

        DocsConfig(spec_filenames=["petstore.json"], host="localhost:8080")
    """

    spec_filenames: list[str] = Field(
        default_factory=list,
        description="Specification files (paths, URLs, or names served by host)",
    )
    host: Optional[str] = Field(
        default=None,
        description="host[:port] serving the specification files over HTTP",
    )
    collapse: bool = Field(
        default=False,
        description="Merge every specification file into one documentation set",
    )


# --- Documentation model ---


class MethodRef(BaseModel):
    """Identifier-based reference from a :class:`Resource` to a :class:`Method`.

    Resolve with :meth:`APISpecification.find_method`.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    verb: str
    path: str
    operation_name: str


class Resource(BaseModel):
    """A node in a resolved schema tree.

    ``type`` is ``[primary]`` or ``[primary, element]``: the primary kind is
    ``object``, ``array``, ``map`` or a primitive/format name, and the element
    kind is the member type of an array or map of primitives.

    ``fqns`` is the path of property names from the root of the tree down to
    this node; array properties appear with a ``[]`` suffix.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    fqns: list[str] = Field(default_factory=list)
    title: str = ""
    description: str = ""
    example: str = ""
    schema_: str = Field(default="", alias="schema")
    type: list[str] = Field(default_factory=lambda: ["object"])
    properties: dict[str, Resource] = Field(default_factory=dict)
    required: bool = False
    read_only: bool = False
    exclude_from_operations: list[str] = Field(default_factory=list)
    enum: list[str] = Field(default_factory=list)
    methods: list[MethodRef] = Field(default_factory=list)


class Parameter(BaseModel):
    """A single operation parameter. Body parameters carry a :class:`Resource`."""

    name: str
    description: str = ""
    location: str
    required: bool = False
    type: Optional[str] = None
    enum: list[str] = Field(default_factory=list)
    resource: Optional[Resource] = None


class Response(BaseModel):
    """A documented response, optionally with the resource it returns."""

    description: str = ""
    resource: Optional[Resource] = None


class SecurityScheme(BaseModel):
    """A security definition declared at the document level.

    ``type`` is ``basic``, ``apiKey`` or ``oauth2`` in Swagger 2.0 documents;
    OpenAPI 3 ``http``/``openIdConnect`` schemes keep their own type name.
    """

    name: str
    type: str
    description: str = ""
    is_api_key: bool = False
    is_basic: bool = False
    is_oauth2: bool = False
    param_name: Optional[str] = None
    param_location: Optional[str] = None
    oauth2_flow: Optional[str] = None
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    scopes: dict[str, str] = Field(default_factory=dict)


class Security(BaseModel):
    """A security requirement: the scheme and the subset of its scopes requested."""

    scheme: SecurityScheme
    scopes: dict[str, str] = Field(default_factory=dict)


class Method(BaseModel):
    """One documented HTTP operation (path + verb, within one group)."""

    id: str
    name: str = ""
    description: str = ""
    method: str
    operation_name: str
    navigation_name: str = ""
    path: str
    path_params: list[Parameter] = Field(default_factory=list)
    query_params: list[Parameter] = Field(default_factory=list)
    header_params: list[Parameter] = Field(default_factory=list)
    form_params: list[Parameter] = Field(default_factory=list)
    body_param: Optional[Parameter] = None
    responses: dict[int, Response] = Field(default_factory=dict)
    default_response: Optional[Response] = None
    resources: list[str] = Field(
        default_factory=list, description="IDs of the response resources used"
    )
    security: dict[str, Security] = Field(default_factory=dict)
    api_group: str = Field(default="", description="ID of the owning APIGroup")

    def ref(self) -> MethodRef:
        """Return the identifier-based reference for this method."""
        return MethodRef(
            id=self.id,
            verb=self.method,
            path=self.path,
            operation_name=self.operation_name,
        )


class APIInfo(BaseModel):
    """Title and rendered description of the whole document."""

    title: str = ""
    description: str = ""


class APIGroup(BaseModel):
    """A named bucket of methods, one per tag or (untagged documents) per path."""

    id: str = ""
    name: str = ""
    description: str = ""
    url: str = ""
    method_navigation_by_name: bool = False
    methods: list[Method] = Field(default_factory=list)
    versions: dict[str, list[Method]] = Field(default_factory=dict)
    current_version: str = DEFAULT_VERSION


class APISpecification(BaseModel):
    """The documentation model of one (or, collapsed, several) specification files.

    ``resource_list`` is the per-version deduplication table: the first
    resource registered under an ID wins, later registrations only add their
    method reference to it. ``api_versions`` is a view of ``apis`` partitioned
    by version.

    See Also:
        :func:`~specdoc.parser.specification.build_specification`
    """

    id: str = ""
    info: APIInfo = Field(default_factory=APIInfo)
    apis: list[APIGroup] = Field(default_factory=list)
    security_definitions: dict[str, SecurityScheme] = Field(default_factory=dict)
    default_security: dict[str, Security] = Field(default_factory=dict)
    resource_list: dict[str, dict[str, Resource]] = Field(default_factory=dict)
    api_versions: dict[str, list[APIGroup]] = Field(default_factory=dict)

    def get_by_name(self, name: str) -> Optional[APIGroup]:
        """Return the first group called *name*, or ``None``."""
        for api in self.apis:
            if api.name == name:
                return api
        return None

    def get_by_id(self, group_id: str) -> Optional[APIGroup]:
        """Return the first group whose ID is *group_id*, or ``None``."""
        for api in self.apis:
            if api.id == group_id:
                return api
        return None

    def get_resource(self, version: str, resource_id: str) -> Optional[Resource]:
        """Look up a deduplicated resource by version and ID."""
        return self.resource_list.get(version, {}).get(resource_id)

    def register_resource(
        self, version: str, resource: Resource, ref: MethodRef
    ) -> Resource:
        """Record that the method *ref* uses *resource* in *version*.

        Returns the canonical resource for ``(version, resource.id)``: the
        one registered first. *resource* itself is discarded when an entry
        already exists.
        """
        table = self.resource_list.setdefault(version, {})
        canonical = table.setdefault(resource.id, resource)
        canonical.methods.append(ref)
        return canonical

    def find_method(self, ref: MethodRef) -> Optional[Method]:
        """Resolve a :class:`MethodRef` back to the first matching method."""
        for api in self.apis:
            for method in api.methods:
                if (
                    method.id == ref.id
                    and method.method == ref.verb
                    and method.path == ref.path
                ):
                    return method
        return None