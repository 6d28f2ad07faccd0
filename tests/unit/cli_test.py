"""Tests for the buildview CLI."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from buildview.cli.app import app
from buildview.db import InMemoryStore

runner = CliRunner()


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["call"],
        ["services"],
        ["serve"],
        ["serve", "api"],
    ],
    ids=["root", "call", "services", "serve", "serve-api"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_services_lists_catalogue() -> None:
    result = runner.invoke(app, ["services"])
    assert result.exit_code == 0
    assert "repository.find" in result.output


def test_call_renders_document() -> None:
    result = runner.invoke(app, ["call", "repository.find", "--arg", "id=1"])
    assert result.exit_code == 0, result.output
    document = json.loads(result.output)
    assert document["slug"] == "svenfuchs/minimal"
    assert document["last_build"]["@representation"] == "minimal"


def test_call_passes_params_and_token() -> None:
    result = runner.invoke(
        app,
        ["call", "repository.find", "-a", "id=3", "-p", "include=repository.owner", "-t", "svenfuchs-token"],
    )
    assert result.exit_code == 0, result.output
    document = json.loads(result.output)
    assert document["owner"]["@representation"] == "standard"


def test_call_uses_patched_store(store: InMemoryStore) -> None:
    store.update("repository", 1, description="patched")
    with patch("buildview.cli.call._get_store", return_value=store):
        result = runner.invoke(app, ["call", "repository.find", "-a", "id=1"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["description"] == "patched"


def test_call_reports_errors() -> None:
    result = runner.invoke(app, ["call", "repository.find", "--arg", "id=3"])
    assert result.exit_code == 1
    assert json.loads(result.output)["error_type"] == "not_found"


def test_call_rejects_malformed_pairs() -> None:
    result = runner.invoke(app, ["call", "repository.find", "--arg", "id"])
    assert result.exit_code == 2
