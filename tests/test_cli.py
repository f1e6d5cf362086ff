"""
Tests for the command-line interface.
"""

from typer.testing import CliRunner

from webcalc.cli import app

runner = CliRunner()


class TestPressCommand:
    """Test replaying button presses from the command line."""

    def test_chained_addition(self):
        result = runner.invoke(app, ["press", "5", "+", "3", "+", "2", "="])
        assert result.exit_code == 0
        assert "10" in result.output

    def test_subtraction(self):
        result = runner.invoke(app, ["press", "9", "-", "4", "="])
        assert result.exit_code == 0
        assert "5" in result.output

    def test_invalid_expression_is_not_a_failure(self):
        result = runner.invoke(app, ["press", "5", "+", "="])
        assert result.exit_code == 0
        assert "Invalid Expression" in result.output

    def test_generic_failure_exits_nonzero(self):
        result = runner.invoke(app, ["press", "=", "+"])
        assert result.exit_code == 1
        assert "could not convert" in result.output

    def test_verbose(self):
        result = runner.invoke(app, ["press", "--verbose", "1", "+", "1"])
        assert result.exit_code == 0
        assert "1+1" in result.output


class TestConfigCommand:
    """Test the config command."""

    def test_shows_settings(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Settings" in result.output
        assert "port" in result.output
