"""CLI tests for specdoc.app and specdoc.commands."""

from __future__ import annotations

import json
from pathlib import Path

from specdoc.app import app

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PETSTORE = str(FIXTURES_DIR / "petstore_2.0.json")


class TestRoot:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "specdoc" in result.output

    def test_no_args_shows_help(self, cli_runner) -> None:
        result = cli_runner.invoke(app, [])
        assert "groups" in result.output


class TestGroups:
    def test_json_table(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "--spec", PETSTORE, "groups"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [row["Group"] for row in rows] == ["pet", "store"]
        assert rows[0]["Methods"] == "5"
        assert rows[0]["Versions"] == "latest"

    def test_spec_from_environment(self, cli_runner, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("SPECDOC_SPECS", PETSTORE)
        result = cli_runner.invoke(app, ["--json", "groups"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)) == 2

    def test_no_specs_configured(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "--no-color", "groups"])
        assert result.exit_code == 2
        assert "No specification files configured" in result.output

    def test_missing_file(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "--spec", "missing.json", "groups"])
        assert result.exit_code == 7

    def test_untitled_model(self, cli_runner, isolated_config: Path) -> None:
        broken = isolated_config / "broken.json"
        broken.write_text(
            json.dumps({
                "swagger": "2.0",
                "info": {"title": "Broken"},
                "paths": {
                    "/things": {
                        "get": {
                            "summary": "List things",
                            "responses": {"200": {"schema": {"type": "object"}}},
                        }
                    }
                },
            }),
            encoding="utf-8",
        )
        result = cli_runner.invoke(app, ["--plain", "--no-color", "--spec", str(broken), "groups"])
        assert result.exit_code == 8
        assert "does not have a title member" in result.output


class TestMethods:
    def test_group_filter(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "--spec", PETSTORE, "methods", "store"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [row["ID"] for row in rows] == ["get-inventory", "place-order"]
        assert rows[1]["Method"] == "POST"
        assert rows[1]["Resources"] == "order, api-response"

    def test_unknown_group(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "--spec", PETSTORE, "methods", "nope"])
        assert result.exit_code == 2

    def test_plain_output(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "--spec", PETSTORE, "methods"])
        assert result.exit_code == 0, result.output
        assert "pet\tadd-pet\tPOST\t/v2/pet" in result.stdout


class TestResources:
    def test_lists_used_by(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "--spec", PETSTORE, "resources"])
        assert result.exit_code == 0, result.output
        rows = {row["ID"]: row for row in json.loads(result.stdout)}
        assert rows["pet"]["Used by"] == "add-pet, find-pets-by-status, get-pet-by-id"
        assert rows["inventory"]["Type"] == "object"

    def test_unknown_version(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["--plain", "--no-color", "--spec", PETSTORE, "resources", "--version", "v9"]
        )
        assert result.exit_code == 0
        assert "No resources found" in result.output


class TestExample:
    def test_prints_rendered_example(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "--spec", PETSTORE, "example", "inventory"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"<key>": "int32"}

    def test_unknown_resource(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "--no-color", "--spec", PETSTORE, "example", "nope"])
        assert result.exit_code == 2
        assert "not found" in result.output


class TestSecurity:
    def test_lists_schemes(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "--spec", PETSTORE, "security"])
        assert result.exit_code == 0, result.output
        rows = {row["Name"]: row for row in json.loads(result.stdout)}
        assert rows["api_key"]["Location"] == "header: api_key"
        assert rows["petstore_auth"]["Location"] == "implicit"
        assert rows["petstore_auth"]["Scopes"] == "write:pets, read:pets"


class TestConfigCommands:
    def test_set_and_show(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "spec_filenames", f"{PETSTORE},other.json"])
        assert result.exit_code == 0, result.output

        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["spec_filenames"] == [PETSTORE, "other.json"]

    def test_set_unknown_key(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "colour", "blue"])
        assert result.exit_code == 2

    def test_saved_config_drives_commands(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "spec_filenames", PETSTORE])
        result = cli_runner.invoke(app, ["--json", "groups"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)) == 2

    def test_reset(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "collapse", "true"])
        result = cli_runner.invoke(app, ["config", "reset", "--yes"])
        assert result.exit_code == 0, result.output
        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert json.loads(result.stdout)["collapse"] is False
