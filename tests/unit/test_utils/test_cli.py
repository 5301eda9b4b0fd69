"""Tests for the command line interface."""

from click.testing import CliRunner

from socialhub import cli as cli_module
from socialhub.cli import cli, mask_secret


def test_mask_secret():
    assert mask_secret(None) == "<not set>"
    assert mask_secret("abc") == "****"
    assert mask_secret("supersecretvalue") == "****alue"


def test_show_config_masks_secrets(monkeypatch):
    monkeypatch.setattr(cli_module, "setup_logging", lambda: None)

    result = CliRunner().invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert "Environment: testing" in result.output
    assert "test-access-secret" not in result.output
    assert "JWT access secret: ****cret" in result.output


def test_help_lists_commands(monkeypatch):
    monkeypatch.setattr(cli_module, "setup_logging", lambda: None)

    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("init-db", "migrate", "create-admin", "check-db", "test-redis", "runserver"):
        assert command in result.output
