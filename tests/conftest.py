"""Shared test fixtures for specdoc.

Provides reusable fixtures for loading specification fixtures, building
documentation models, isolating configuration, managing output state, and
running CLI commands.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from specdoc.models import APISpecification, Method
from specdoc.output import OutputFormat, OutputManager, reset_output, set_output
from specdoc.parser.resolver import resolve_refs
from specdoc.parser.specification import build_specification
from specdoc.suite import reset_suite


FIXTURES_DIR = Path(__file__).parent / "fixtures"
PETSTORE_PATH = FIXTURES_DIR / "petstore_2.0.json"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals_between_tests() -> None:
    """Reset the global OutputManager and APISuite after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during a
    test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()
    reset_suite()

    # CLI invocations install a RichHandler and stop propagation; undo that
    # so caplog keeps working in later tests.
    logger = logging.getLogger("specdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Specification fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw Swagger 2.0 petstore document."""
    with open(PETSTORE_PATH) as f:
        return json.load(f)


@pytest.fixture
def petstore_spec(petstore_raw: dict[str, Any]) -> APISpecification:
    """The petstore document compiled into a documentation model."""
    return build_specification(resolve_refs(petstore_raw))


@pytest.fixture
def get_method() -> Method:
    """A bare GET method, for resolving schemas outside of a document."""
    return Method(id="get-thing", method="get", operation_name="get", path="/things")


@pytest.fixture
def post_method() -> Method:
    """A bare POST method, for resolving request bodies outside of a document."""
    return Method(id="create-thing", method="post", operation_name="post", path="/things")


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME into tmp_path, forces XDG path resolution,
    clears all SPECDOC_* environment variables and changes the working
    directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("specdoc.config._is_xdg_platform", lambda: True)

    for var in ["SPECDOC_SPECS", "SPECDOC_HOST", "SPECDOC_COLLAPSE"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
