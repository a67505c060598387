"""Tests for CLI main module."""

import os
from unittest.mock import MagicMock, patch

import pytest
import typer
from typer.testing import CliRunner

from incus_compose.cli.main import _run_cli_command, app
from incus_compose.errors import MissingField


runner = CliRunner()

INVALID_DOCUMENT = """\
version: "1.0"
containers:
  web:
    image: ubuntu/22.04
    networks: [frontend]
    depends_on: [web]
"""


@patch("incus_compose.cli.main.console")
def test_run_cli_command_success(mock_console):
    """Test the CLI command runner on a successful execution."""
    mock_handler = MagicMock(return_value=True)

    result = _run_cli_command(mock_handler, config="lab.yaml", log_level="info", arg1="value1")

    assert result is True
    settings = mock_handler.call_args.args[0]
    assert settings.compose_file == "lab.yaml"
    assert settings.log_level == "INFO"
    assert mock_handler.call_args.kwargs == {"arg1": "value1"}
    mock_console.print.assert_not_called()


@patch("incus_compose.cli.main.console")
def test_run_cli_command_compose_error(mock_console):
    """Test the CLI command runner when a ComposeError is raised."""
    mock_handler = MagicMock(side_effect=MissingField("containers.web.image"))

    with pytest.raises(typer.Exit) as exc_info:
        _run_cli_command(mock_handler, config="lab.yaml", log_level="INFO")

    mock_console.print.assert_called_once_with(
        "[red]Error:[/red] Missing required field: containers.web.image"
    )
    assert exc_info.value.exit_code == 1


@patch("incus_compose.cli.main.console")
def test_run_cli_command_bad_log_level(mock_console):
    """Test invalid settings stop before the handler runs."""
    mock_handler = MagicMock()

    with pytest.raises(typer.Exit):
        _run_cli_command(mock_handler, config="lab.yaml", log_level="LOUD")

    mock_handler.assert_not_called()


class TestCommands:
    """Test the commands end to end."""

    def test_validate_ok(self, sample_file):
        """Test a valid document."""
        result = runner.invoke(app, ["validate", "--config", str(sample_file)])

        assert result.exit_code == 0
        assert "is valid" in result.output

    def test_validate_reports_violations(self, tmp_path):
        """Test violations are listed and the exit code is non-zero."""
        path = tmp_path / "bad.yaml"
        path.write_text(INVALID_DOCUMENT)

        result = runner.invoke(app, ["validate", "-c", str(path)])

        assert result.exit_code == 1
        assert "2 problem(s)" in result.output

    def test_missing_file(self, tmp_path):
        """Test a missing configuration file."""
        result = runner.invoke(app, ["validate", "-c", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_unreadable_file(self, tmp_path):
        """Test a directory or undecodable file is reported without a traceback."""
        bad = tmp_path / "bad.yaml"
        bad.write_bytes(b"\xff\xfe\x00")

        for path in (tmp_path, bad):
            result = runner.invoke(app, ["validate", "-c", str(path)])

            assert result.exit_code == 1
            assert isinstance(result.exception, SystemExit)
            assert "Invalid YAML" in result.output

    def test_config_from_environment(self, sample_file):
        """Test the compose file can come from the environment."""
        result = runner.invoke(app, ["order"], env={"INCUS_COMPOSE_FILE": str(sample_file)})

        assert result.exit_code == 0
        assert "db" in result.output

    def test_show(self, sample_file):
        """Test the summary tables."""
        result = runner.invoke(app, ["show", "-c", str(sample_file)])

        assert result.exit_code == 0
        assert "frontend" in result.output
        assert "fast" in result.output

    def test_plan_to_stdout(self, sample_file):
        """Test the dry-run script on stdout."""
        result = runner.invoke(app, ["plan", "-c", str(sample_file)])

        assert result.exit_code == 0
        assert result.output.startswith("#!/bin/bash")
        assert "incus start web" in result.output

    def test_plan_to_file(self, sample_file, tmp_path):
        """Test the dry-run script is written executable."""
        out = tmp_path / "deploy.sh"

        result = runner.invoke(app, ["plan", "-c", str(sample_file), "-o", str(out), "-v"])

        assert result.exit_code == 0
        assert out.read_text().startswith("#!/bin/bash")
        assert "echo 'Executing:" in out.read_text()
        assert os.access(out, os.X_OK)

    def test_plan_refuses_invalid_document(self, tmp_path):
        """Test no script is produced for an invalid document."""
        path = tmp_path / "bad.yaml"
        path.write_text(INVALID_DOCUMENT)

        result = runner.invoke(app, ["plan", "-c", str(path)])

        assert result.exit_code == 1
        assert "#!/bin/bash" not in result.output
