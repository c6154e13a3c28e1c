"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet mode
- print_example, print_settings and print_table in JSON and plain modes
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from specdoc import output as output_module
from specdoc.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("specdoc.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("specdoc.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, non_tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_disables_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStreams:
    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_data("hello world")
        captured = capfd.readouterr()
        assert "hello world" in captured.out
        assert captured.err == ""

    def test_info_goes_to_stderr(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).info("some info")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "some info" in captured.err

    def test_error_is_prefixed(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).error("boom")
        assert "Error: boom" in capfd.readouterr().err

    def test_quiet_suppresses_info_but_not_warnings(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        mgr.warning("careful")
        err = capfd.readouterr().err
        assert "hidden" not in err
        assert "Warning: careful" in err


# ------------------------------------------------------------------ #
# Data formatting
# ------------------------------------------------------------------ #


class TestPrintExample:
    def test_plain_keeps_rendered_layout(self, capfd):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_example('[\n    "string"\n]')
        assert capfd.readouterr().out == '[\n    "string"\n]\n'

    def test_json_reserialises(self, capfd):
        OutputManager(format=OutputFormat.JSON).print_example('{\n    "name": "string"\n}')
        out = capfd.readouterr().out
        assert json.loads(out) == {"name": "string"}
        assert out.startswith('{\n  "name"')

    def test_json_wraps_unparseable_example_as_string(self, capfd):
        OutputManager(format=OutputFormat.JSON).print_example("not json")
        assert json.loads(capfd.readouterr().out) == "not json"


class TestPrintSettings:
    def test_json_object(self, capfd):
        OutputManager(format=OutputFormat.JSON).print_settings({"host": None, "collapse": False})
        assert json.loads(capfd.readouterr().out) == {"host": None, "collapse": False}

    def test_plain_matches_config_set_syntax(self, capfd):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_settings(
            {"spec_filenames": ["a.json", "b.yaml"], "host": None, "collapse": True}
        )
        assert capfd.readouterr().out == (
            "spec_filenames\ta.json,b.yaml\nhost\t\ncollapse\ttrue\n"
        )


class TestPrintTable:
    def test_json_records(self, capfd):
        OutputManager(format=OutputFormat.JSON).print_table(["ID", "Name"], [["pet", "Pet"]])
        assert json.loads(capfd.readouterr().out) == [{"ID": "pet", "Name": "Pet"}]

    def test_plain_rows(self, capfd):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_table(
            ["ID", "Name"], [["pet", "Pet"], ["store", "Store"]]
        )
        assert capfd.readouterr().out == "ID\tName\npet\tPet\nstore\tStore\n"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        reset_output()
        assert get_output() is get_output()

    def test_set_output_installs_instance(self, capfd):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        set_output(mgr)
        assert get_output() is mgr
        output_module.print_data("via module")
        assert "via module" in capfd.readouterr().out
