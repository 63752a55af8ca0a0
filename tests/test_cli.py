"""Tests for the walnut command line."""

from __future__ import annotations

import json
from pathlib import Path
from textwrap import dedent

import click
import pytest
from click.testing import CliRunner

from walnut.cli import cli, parse_var

METHODS = dedent(
    '''
    def remember(ctx):
        """@walnut_method
        name: Remember
        actionType: custom_remember
        context: shared
        category: Data
        """
        ctx.set_variable(ctx.params["key"], ctx.params["value"])


    def explode(ctx):
        """@walnut_method
        name: Explode
        actionType: custom_explode
        context: shared
        """
        raise RuntimeError("kaboom")
    '''
)


@pytest.fixture
def methods_file(tmp_path: Path) -> Path:
    path = tmp_path / "methods.py"
    path.write_text(METHODS)
    return path


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WALNUT_LOG_LEVEL", "WARNING")


def write_suite(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "suite.yaml"
    path.write_text(dedent(body))
    return path


class TestParseVar:
    def test_values_keep_yaml_types(self) -> None:
        assert parse_var("count=3") == ("count", 3)
        assert parse_var("flag=true") == ("flag", True)
        assert parse_var("name=bob") == ("name", "bob")
        assert parse_var("empty=") == ("empty", "")

    def test_missing_equals(self) -> None:
        with pytest.raises(click.BadParameter):
            parse_var("oops")


class TestRunCommand:
    def test_passing_suite_exits_zero(self, tmp_path: Path, methods_file: Path) -> None:
        suite = write_suite(
            tmp_path,
            """
            steps:
              - action: custom_remember
                params:
                  key: greeting
                  value: "{{salutation}}"
            """,
        )
        result = CliRunner().invoke(
            cli,
            ["run", str(suite), "--methods", str(methods_file), "--var", "salutation=hello", "--json"],
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["success"] is True
        assert payload["variables"] == {"salutation": "hello", "greeting": "hello"}

    def test_failing_suite_exits_one(self, tmp_path: Path, methods_file: Path) -> None:
        suite = write_suite(
            tmp_path,
            """
            steps:
              - action: custom_explode
              - action: custom_remember
                params: {key: a, value: b}
            """,
        )
        result = CliRunner().invoke(cli, ["run", str(suite), "-m", str(methods_file)])

        assert result.exit_code == 1
        assert "kaboom" in result.output
        assert "Failed 1 of 2 steps" in result.output

    def test_invalid_suite(self, tmp_path: Path) -> None:
        suite = write_suite(tmp_path, "steps:\n  - params: {}\n")
        result = CliRunner().invoke(cli, ["run", str(suite)])
        assert result.exit_code != 0
        assert "Invalid suite" in result.output


class TestMethodsCommand:
    def test_lists_bundled_and_loaded_methods(self, methods_file: Path) -> None:
        result = CliRunner().invoke(cli, ["methods", "--methods", str(methods_file)])
        assert result.exit_code == 0, result.output
        for action_type in ("custom_login", "custom_zip_folder", "custom_remember"):
            assert action_type in result.output
