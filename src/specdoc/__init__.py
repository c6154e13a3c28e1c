"""specdoc -- Build an API documentation model from Swagger/OpenAPI specs.

This package reads a Swagger 2.0 (or OpenAPI 3.x) document and compiles it
into a documentation model: API groups (one per tag, or per path when the
document declares no tags), the methods inside them, and the request and
response *resources* those methods use, each with a rendered example payload.

Typical workflow::

    from specdoc.parser import load_specification

    spec = load_specification("petstore.json")
    for group in spec.apis:
        for method in group.methods:
            print(method.method.upper(), method.path)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    suite: Process-wide registry of loaded specifications.
"""

__version__ = "0.3.0"
