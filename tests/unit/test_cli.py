"""Tests for the steam-idler CLI."""
import base64
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from steamidler import (
    ChallengeRequiredError,
    LoginRejectedError,
    RetryExhaustedError,
    SteamIdler,
)
from steamidler.cli.main import app

runner = CliRunner()


@pytest.fixture
def empty_env(tmp_path, monkeypatch):
    """Run commands in an empty directory without Steam settings."""
    monkeypatch.chdir(tmp_path)
    for name in ('SHARED_SECRET', 'shared', 'SENTRY', 'SENTRY_PATH', 'USERNAME', 'username',
                 'PASSWORD', 'password', 'MAX_RETRIES', 'PORT', 'KEEPALIVE_PORT', 'GAMES', 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestCodeCommand:
    """Test suite for the code command."""

    def test_prints_code(self, empty_env, shared_secret):
        """Test code command prints a code and its remaining validity."""
        result = runner.invoke(app, ['code', '--secret', shared_secret])

        assert result.exit_code == 0
        assert 'valid for' in result.output

    def test_reads_secret_from_env_file(self, empty_env, shared_secret):
        """Test code command reads SHARED_SECRET from an env file."""
        env_file = empty_env / 'idler.env'
        env_file.write_text(f"SHARED_SECRET={shared_secret}\n")

        result = runner.invoke(app, ['code', '--env-file', str(env_file)])

        assert result.exit_code == 0

    def test_missing_secret(self, empty_env):
        """Test code command fails without a secret."""
        result = runner.invoke(app, ['code'])

        assert result.exit_code == 1
        assert 'No shared secret' in result.output

    def test_invalid_secret(self, empty_env):
        """Test code command fails on a secret that decodes to nothing."""
        result = runner.invoke(app, ['code', '--secret', '!!!'])

        assert result.exit_code == 1


class TestExportTokenCommand:
    """Test suite for the export-token command."""

    def test_prints_base64(self, empty_env):
        """Test export-token prints the token file as base64."""
        sentry = empty_env / 'sentry'
        sentry.write_bytes(b'token-bytes')

        result = runner.invoke(app, ['export-token', '--path', str(sentry)])

        assert result.exit_code == 0
        assert base64.b64encode(b'token-bytes').decode() in result.output

    def test_uses_sentry_path(self, empty_env, monkeypatch):
        """Test export-token defaults to SENTRY_PATH."""
        sentry = empty_env / 'custom.bin'
        sentry.write_bytes(b'abc')
        monkeypatch.setenv('SENTRY_PATH', str(sentry))

        result = runner.invoke(app, ['export-token'])

        assert result.exit_code == 0
        assert 'YWJj' in result.output

    def test_missing_file(self, empty_env):
        """Test export-token fails when no token file exists."""
        result = runner.invoke(app, ['export-token', '--path', str(empty_env / 'missing')])

        assert result.exit_code == 1


class TestRunCommand:
    """Test suite for the run command."""

    def test_bad_config_exits(self, empty_env, monkeypatch):
        """Test run exits 1 on an unparsable setting."""
        monkeypatch.setenv('MAX_RETRIES', 'many')

        result = runner.invoke(app, ['run'])

        assert result.exit_code == 1
        assert 'MAX_RETRIES' in result.output

    def test_missing_credentials_exits(self, empty_env, monkeypatch):
        """Test run exits 1 without USERNAME and PASSWORD."""
        monkeypatch.setenv('USERNAME', 'acct')

        result = runner.invoke(app, ['run'])

        assert result.exit_code == 1

    @pytest.mark.parametrize("error", [
        ChallengeRequiredError("Steam Guard code requested for domain: gmail.com"),
        RetryExhaustedError(7, 6, 84),
        LoginRejectedError("Login failed with non-retryable result InvalidPassword (5)", 5),
    ])
    def test_fatal_run_errors_exit_non_zero(self, empty_env, monkeypatch, error):
        """Test run exits 1 when the idler stops with a fatal error."""
        run = AsyncMock(side_effect=error)
        monkeypatch.setattr(SteamIdler, 'run', run)

        result = runner.invoke(app, ['run'])

        assert result.exit_code == 1
        run.assert_awaited_once()

    def test_clean_run_exits_zero(self, empty_env, monkeypatch):
        """Test run exits 0 when the idler returns."""
        run = AsyncMock(return_value=None)
        monkeypatch.setattr(SteamIdler, 'run', run)

        result = runner.invoke(app, ['run', '--log-level', 'debug'])

        assert result.exit_code == 0
        run.assert_awaited_once()
