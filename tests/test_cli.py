"""Tests for the Typer command-line interface."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from convertio_cli import __main__ as entry_point
from convertio_cli import __version__
from convertio_cli.cli import app as app_module
from convertio_cli.cli.app import app
from convertio_cli.exceptions import RemoteRejection
from convertio_cli.models.stats import ConversionStats
from convertio_cli.storage.config_manager import API_KEY_ENV_VAR

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    config_file = tmp_path / "config" / "config.ini"
    monkeypatch.setattr(app_module, "CONFIG_FILE", config_file)
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    return config_file


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_writes_api_key(isolated_config):
    result = runner.invoke(app, ["init", "my-key"])

    assert result.exit_code == 0
    assert "api_key = my-key" in isolated_config.read_text()


def test_init_keeps_existing_key_when_declined(isolated_config):
    runner.invoke(app, ["init", "first-key"])

    result = runner.invoke(app, ["init", "second-key"], input="n\n")

    assert result.exit_code != 0
    assert "api_key = first-key" in isolated_config.read_text()


def test_init_force_overwrites(isolated_config):
    runner.invoke(app, ["init", "first-key"])

    result = runner.invoke(app, ["init", "second-key", "--force"])

    assert result.exit_code == 0
    assert "api_key = second-key" in isolated_config.read_text()


def test_show_config_hides_the_key(monkeypatch):
    monkeypatch.setenv(API_KEY_ENV_VAR, "super-secret")

    result = runner.invoke(app, ["--show-config"])

    assert result.exit_code == 0
    assert "super-secret" not in result.output
    assert "[hidden]" in result.output


def test_convert_runs_with_merged_configuration(monkeypatch):
    monkeypatch.setenv(API_KEY_ENV_VAR, "env-key")
    run = AsyncMock(return_value=ConversionStats(submitted=2, converted=2))

    with patch.object(app_module, "run_conversions", run):
        result = runner.invoke(
            app,
            ["convert", "-f", "PDF", "a.jpg", "b.png", "a.jpg", "--interval", "0.5"],
        )

    assert result.exit_code == 0, result.output
    config = run.await_args.args[0]
    assert config.api_key == "env-key"
    assert config.output_format == "pdf"
    assert config.input_files == ["a.jpg", "b.png"]
    assert config.poll_interval == 0.5
    assert "Conversion Summary" in result.output


def test_convert_fails_with_exit_code_1_on_rejection(monkeypatch):
    monkeypatch.setenv(API_KEY_ENV_VAR, "env-key")
    run = AsyncMock(side_effect=RemoteRejection("unsupported format", code=400))

    with patch.object(app_module, "run_conversions", run):
        result = runner.invoke(app, ["convert", "-f", "xyz", "a.jpg"])

    assert result.exit_code == 1
    assert "unsupported format" in result.output


def test_convert_without_key_is_a_configuration_error():
    run = AsyncMock()

    with patch.object(app_module, "run_conversions", run):
        result = runner.invoke(app, ["convert", "-f", "pdf", "a.jpg"])

    assert result.exit_code == 1
    assert "ConfigurationError" in result.output
    run.assert_not_awaited()


def test_convert_refuses_inputs_that_share_an_output(monkeypatch):
    monkeypatch.setenv(API_KEY_ENV_VAR, "env-key")
    run = AsyncMock()

    with patch.object(app_module, "run_conversions", run):
        result = runner.invoke(app, ["convert", "-f", "pdf", "a.jpg", "a.png"])

    assert result.exit_code == 1
    assert "a.pdf" in result.output
    run.assert_not_awaited()


def test_convert_refuses_to_overwrite_its_input(monkeypatch):
    monkeypatch.setenv(API_KEY_ENV_VAR, "env-key")
    run = AsyncMock()

    with patch.object(app_module, "run_conversions", run):
        result = runner.invoke(app, ["convert", "-f", "pdf", "report.pdf"])

    assert result.exit_code == 1
    assert "overwritten by its own output" in result.output
    run.assert_not_awaited()


def test_convert_requires_a_format():
    result = runner.invoke(app, ["convert", "a.jpg"])
    assert result.exit_code != 0


def test_entry_point_reports_unexpected_errors_with_exit_code_1():
    with patch.object(entry_point, "app", side_effect=RuntimeError("boom")):
        with pytest.raises(SystemExit) as excinfo:
            entry_point.main()

    assert excinfo.value.code == 1
