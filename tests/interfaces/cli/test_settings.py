"""Tests for CLI settings commands."""

import pytest
from click.testing import CliRunner

from config import Config
from launcher.interfaces.cli.commands import cli
from launcher.startup import startup_checks


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def app_context(tmp_path, collaborators):
    """A started application over a temporary data directory."""
    context = startup_checks(Config(data_dir=tmp_path / "data"), collaborators)
    yield context
    context.close()


class TestSettingsCLI:
    """Test cases for settings CLI commands."""

    def test_list_settings(self, runner, app_context):
        """Test listing all settings."""
        result = runner.invoke(cli, ["settings", "list"], obj=app_context)

        assert result.exit_code == 0
        assert "AppWidth: 800" in result.output
        assert "ShowTray: true" in result.output

    def test_get_setting(self, runner, app_context):
        """Test getting a specific setting."""
        result = runner.invoke(cli, ["settings", "get", "MaxResultCount"], obj=app_context)

        assert result.exit_code == 0
        assert "MaxResultCount: 10" in result.output

    def test_get_unknown_setting(self, runner, app_context):
        """Test getting a setting that doesn't exist."""
        result = runner.invoke(cli, ["settings", "get", "Bogus"], obj=app_context)

        assert result.exit_code == 1
        assert "unknown key: Bogus" in result.output

    def test_set_setting(self, runner, app_context):
        """Test setting a value."""
        result = runner.invoke(
            cli, ["settings", "set", "ThemeId", "dark"], obj=app_context
        )

        assert result.exit_code == 0
        assert app_context.manager.get_settings().theme_id == "dark"

    def test_set_invalid_value(self, runner, app_context):
        """Test that invalid values are rejected without changing anything."""
        result = runner.invoke(
            cli, ["settings", "set", "AppWidth", "wide"], obj=app_context
        )

        assert result.exit_code == 1
        assert "Failed to set AppWidth" in result.output
        assert app_context.manager.get_settings().app_width == 800

    def test_set_unknown_setting(self, runner, app_context):
        """Test setting a key that doesn't exist."""
        result = runner.invoke(cli, ["settings", "set", "Bogus", "1"], obj=app_context)

        assert result.exit_code == 1
        assert "unknown key: Bogus" in result.output
