"""Inspect commands -- examine the documentation model.

Each command resolves the configuration, loads every configured
specification into the process-wide :class:`~specdoc.suite.APISuite`, and
prints one facet of the result as a table (or JSON with ``--json``):

* ``groups`` -- API groups and their versions.
* ``methods`` -- documented operations, optionally for one group.
* ``resources`` -- the deduplicated response resources per version.
* ``example`` -- the rendered example payload of one resource.
* ``security`` -- declared security schemes.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

import typer

from specdoc.exceptions import InvalidUsageError, SpecdocError
from specdoc.models import DEFAULT_VERSION, APISpecification, Resource
from specdoc.output import error, get_output, info, print_example
from specdoc.suite import APISuite, get_suite, load_specifications

logger = logging.getLogger(__name__)


def load_suite(ctx: typer.Context) -> APISuite:
    """Load the configured specifications into the process-wide suite.

    Configuration flags stored by :func:`~specdoc.app.main_callback` in
    ``ctx.obj`` take precedence over the environment and config files.

    Raises:
        typer.Exit: With the error's exit code when configuration or
            loading fails.
    """
    from specdoc.config import resolve_config

    obj = ctx.obj or {}
    try:
        config = resolve_config(
            cli_specs=obj.get("specs"),
            cli_host=obj.get("host"),
            cli_collapse=obj.get("collapse"),
        )
        if not config.spec_filenames:
            raise InvalidUsageError(
                "No specification files configured. Pass --spec or set SPECDOC_SPECS."
            )
        suite = get_suite()
        suite.clear()
        load_specifications(config, suite)
    except SpecdocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    logger.debug("Loaded specifications: %s", ", ".join(suite.ids()) or "(collapsed)")
    return suite


def _label(spec: APISpecification) -> str:
    return spec.id or spec.info.title or "-"


def _resources(
    suite: APISuite, version: Optional[str]
) -> Iterator[tuple[APISpecification, str, Resource]]:
    for spec in suite:
        for resource_version, table in spec.resource_list.items():
            if version is not None and resource_version != version:
                continue
            for resource in table.values():
                yield spec, resource_version, resource


def groups_command(ctx: typer.Context) -> None:
    """List API groups with their method counts and versions.

    Example::

        specdoc --spec petstore.json groups
    """
    suite = load_suite(ctx)

    headers = ["Spec", "Group", "Name", "Methods", "Versions"]
    rows: list[list[str]] = []
    for spec in suite:
        for api in spec.apis:
            rows.append([
                _label(spec),
                api.id,
                api.name,
                str(len(api.methods)),
                ", ".join(api.versions) or DEFAULT_VERSION,
            ])

    get_output().print_table(headers, rows, title=f"Groups ({len(rows)})")


def methods_command(
    ctx: typer.Context,
    group: Optional[str] = typer.Argument(None, help="Only list methods of this group ID."),
    version: Optional[str] = typer.Option(
        None, "--version", help="Only list methods of this API version."
    ),
) -> None:
    """List documented methods.

    Example::

        specdoc --spec petstore.json methods pet --version latest
    """
    suite = load_suite(ctx)

    headers = ["Group", "ID", "Method", "Path", "Navigation", "Resources"]
    rows: list[list[str]] = []
    for spec in suite:
        apis = spec.api_versions.get(version, []) if version else spec.apis
        for api in apis:
            if group is not None and api.id != group:
                continue
            for method in api.methods:
                rows.append([
                    api.id,
                    method.id,
                    method.method.upper(),
                    method.path,
                    method.navigation_name,
                    ", ".join(method.resources) or "-",
                ])

    if group is not None and not rows:
        error(f"No methods found for group '{group}'.")
        raise typer.Exit(code=InvalidUsageError.exit_code)

    get_output().print_table(headers, rows, title=f"Methods ({len(rows)})")


def resources_command(
    ctx: typer.Context,
    version: Optional[str] = typer.Option(
        None, "--version", help="Only list resources of this API version."
    ),
) -> None:
    """List the deduplicated response resources.

    Example::

        specdoc --spec petstore.json resources
    """
    suite = load_suite(ctx)

    headers = ["Version", "ID", "Type", "Title", "Used by"]
    rows = [
        [
            resource_version,
            resource.id,
            " ".join(resource.type),
            resource.title or "-",
            ", ".join(ref.id for ref in resource.methods),
        ]
        for _, resource_version, resource in _resources(suite, version)
    ]

    if not rows:
        info("No resources found.")
        return

    get_output().print_table(headers, rows, title=f"Resources ({len(rows)})")


def example_command(
    ctx: typer.Context,
    resource_id: str = typer.Argument(help="Resource ID, e.g. 'pet'."),
    version: str = typer.Option(DEFAULT_VERSION, "--version", help="API version."),
) -> None:
    """Print the rendered example payload of a resource.

    Example::

        specdoc --spec petstore.json example pet
    """
    suite = load_suite(ctx)

    for spec in suite:
        resource = spec.get_resource(version, resource_id)
        if resource is not None:
            print_example(resource.schema_)
            return

    error(f"Resource '{resource_id}' not found in version '{version}'.")
    raise typer.Exit(code=InvalidUsageError.exit_code)


def security_command(ctx: typer.Context) -> None:
    """List security schemes declared by the loaded specifications.

    Example::

        specdoc --spec petstore.json security
    """
    suite = load_suite(ctx)

    headers = ["Spec", "Name", "Type", "Location", "Scopes", "Description"]
    rows: list[list[str]] = []
    for spec in suite:
        for name, scheme in spec.security_definitions.items():
            if scheme.is_api_key:
                location = f"{scheme.param_location or '-'}: {scheme.param_name or '-'}"
            elif scheme.is_oauth2:
                location = scheme.oauth2_flow or "-"
            else:
                location = "-"
            rows.append([
                _label(spec),
                name,
                scheme.type,
                location,
                ", ".join(scheme.scopes) or "-",
                (scheme.description or "-")[:60],
            ])

    if not rows:
        info("No security schemes defined.")
        return

    get_output().print_table(headers, rows, title="Security Schemes")
