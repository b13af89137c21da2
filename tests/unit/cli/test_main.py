"""Tests for the kadnode command."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from kadnode.cli.main import main

pytestmark = [pytest.mark.unit, pytest.mark.cli]


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


def test_help(runner):
    """--help is handled by KadNode, not click."""
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Usage: kadnode [OPTIONS]*" in result.output
    assert "--value-id" in result.output


def test_short_version(runner):
    """-v prints the version."""
    result = runner.invoke(main, ["-v"])
    assert result.exit_code == 0
    assert result.output.startswith("KadNode v")


def test_valid_configuration(runner):
    """A valid command line exits 0."""
    result = runner.invoke(main, ["--port", "7000", "--mode", "ipv6", "--lpd-disable"])
    assert result.exit_code == 0


def test_invalid_configuration(runner):
    """Any configuration error exits 1."""
    result = runner.invoke(main, ["--mode", "ipv4", "--mode", "ipv6"])
    assert result.exit_code == 1


def test_config_file(runner, tmp_path):
    """Options are read from --config."""
    path = tmp_path / "kadnode.conf"
    path.write_text("--port 0\n")
    result = runner.invoke(main, ["--config", str(path)])
    assert result.exit_code == 1
