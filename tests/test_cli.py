"""Tests for CLI commands using Click's testing utilities."""

import logging

import pytest
from click.testing import CliRunner

from oauth2_utils.cli import cli


@pytest.fixture
def runner():
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the CLI from replacing the test session's logging handlers."""
    calls = []
    monkeypatch.setattr(
        "oauth2_utils.cli.setup_logging",
        lambda **kwargs: calls.append(kwargs),
    )
    return calls


@pytest.fixture
def clean_env(monkeypatch):
    """Clean environment variables before each test."""
    for var in ["OAUTH2_UTILS_STANDARD_SETS", "LOG_LEVEL", "LOG_FORMAT"]:
        monkeypatch.delenv(var, raising=False)


def test_help_message_lists_command_groups(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0

    assert "scope" in result.output
    assert "registry" in result.output
    assert "param" in result.output
    assert "--log-level" in result.output
    assert "--log-format" in result.output


def test_logging_options_are_passed_to_setup(runner, clean_env, no_logging_setup):
    result = runner.invoke(
        cli, ["--log-level", "debug", "--log-format", "json", "scope", "check", "a"]
    )
    assert result.exit_code == 0
    assert no_logging_setup == [{"log_format": "json", "log_level": "debug"}]


def test_logging_options_from_env(runner, clean_env, monkeypatch, no_logging_setup):
    monkeypatch.setenv("LOG_LEVEL", "info")
    result = runner.invoke(cli, ["scope", "check", "a"])
    assert result.exit_code == 0
    assert no_logging_setup[0]["log_level"] == "info"


def test_invalid_log_level_is_rejected(runner):
    result = runner.invoke(cli, ["--log-level", "verbose", "scope", "check", "a"])
    assert result.exit_code != 0
    assert "Invalid value" in result.output


class TestScopeCommands:
    def test_check_valid(self, runner):
        result = runner.invoke(cli, ["scope", "check", "users:read feed:edit"])
        assert result.exit_code == 0
        assert result.output.strip() == "valid"

    def test_check_double_space(self, runner):
        result = runner.invoke(cli, ["scope", "check", "a b  c"])
        assert result.exit_code == 1
        assert "Malformed scope parameter" in result.output
        assert "empty scope token" in result.output

    def test_check_forbidden_character(self, runner):
        result = runner.invoke(cli, ["scope", "check", "ok a\\b"])
        assert result.exit_code == 1
        assert "invalid scope token: 'a\\\\b'" in result.output

    def test_check_empty(self, runner):
        result = runner.invoke(cli, ["scope", "check", ""])
        assert result.exit_code == 1

    def test_check_failure_reports_click_error(self, runner):
        result = runner.invoke(cli, ["scope", "check", " a  b"])
        assert result.exit_code == 1
        assert "Error: 2 invalid segment(s) in scope parameter" in result.output

    def test_normalize(self, runner):
        result = runner.invoke(cli, ["scope", "normalize", "room:manage users:read room:manage"])
        assert result.exit_code == 0
        assert result.output == "room:manage users:read\n"

    def test_normalize_malformed(self, runner):
        result = runner.invoke(cli, ["scope", "normalize", "a b c "])
        assert result.exit_code != 0
        assert "Invalid scope parameter" in result.output

    def test_normalize_empty_requires_flag(self, runner):
        result = runner.invoke(cli, ["scope", "normalize", ""])
        assert result.exit_code != 0

        result = runner.invoke(cli, ["scope", "normalize", "--allow-empty", ""])
        assert result.exit_code == 0
        assert result.output == "\n"

    def test_normalize_allow_empty_still_rejects_whitespace(self, runner):
        result = runner.invoke(cli, ["scope", "normalize", "--allow-empty", " "])
        assert result.exit_code != 0

    def test_diff(self, runner):
        result = runner.invoke(
            cli, ["scope", "diff", "notes:read notes:write", "notes:read openid"]
        )
        assert result.exit_code == 0
        assert result.output == "missing: notes:write\nextra: openid\n"

    def test_diff_identical(self, runner):
        result = runner.invoke(cli, ["scope", "diff", "a b", "b a"])
        assert result.exit_code == 0
        assert result.output == "missing: \nextra: \n"

    def test_diff_malformed_granted(self, runner):
        result = runner.invoke(cli, ["scope", "diff", "a", "a  b"])
        assert result.exit_code != 0
        assert "GRANTED" in result.output


class TestRegistryCommands:
    def test_list_defaults_to_oauth2(self, runner, clean_env):
        result = runner.invoke(cli, ["registry", "list", "token_endpoint_authentication_methods"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "client_secret_basic",
            "client_secret_post",
            "none",
        ]

    def test_list_with_standard_sets(self, runner, clean_env):
        result = runner.invoke(
            cli, ["registry", "list", "extension_errors", "-s", "uma2"]
        )
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "need_info",
            "request_denied",
            "request_submitted",
        ]

    def test_list_uses_standard_sets_from_env(self, runner, clean_env, monkeypatch):
        monkeypatch.setenv("OAUTH2_UTILS_STANDARD_SETS", "oauth2,oidc")
        result = runner.invoke(cli, ["registry", "list", "token_endpoint_authentication_methods"])
        assert result.exit_code == 0
        assert "private_key_jwt" in result.output.splitlines()

    def test_list_with_invalid_env(self, runner, clean_env, monkeypatch):
        monkeypatch.setenv("OAUTH2_UTILS_STANDARD_SETS", "saml")
        result = runner.invoke(cli, ["registry", "list", "grant_types"])
        assert result.exit_code != 0
        assert "Invalid OAUTH2_UTILS_STANDARD_SETS" in result.output

    def test_list_unknown_table(self, runner):
        result = runner.invoke(cli, ["registry", "list", "scopes"])
        assert result.exit_code != 0
        assert "Invalid value" in result.output

    def test_parameters_for_location(self, runner, clean_env):
        result = runner.invoke(
            cli,
            ["registry", "parameters", "authorization_server_response", "-s", "uma2"],
        )
        assert result.exit_code == 0
        assert result.output.splitlines() == ["pct", "upgraded"]

    def test_parameters_unknown_location(self, runner):
        result = runner.invoke(cli, ["registry", "parameters", "header"])
        assert result.exit_code != 0


class TestParamCommands:
    @pytest.mark.parametrize(
        "kind,value",
        [
            ("client-id", "my_client_23"),
            ("code", "SplxlOBeZQQYbYS6WxSbIA"),
            ("refresh-token", "tGzv3JOkF0XG5Qx2TlKWIA"),
            ("username", "молду"),
        ],
    )
    def test_valid_values(self, runner, kind, value):
        result = runner.invoke(cli, ["param", "check", kind, value])
        assert result.exit_code == 0
        assert result.output.strip() == "valid"

    def test_invalid_value(self, runner):
        result = runner.invoke(cli, ["param", "check", "access-token", ""])
        assert result.exit_code == 1
        assert "Invalid access-token parameter" in result.output

    def test_unknown_kind(self, runner):
        result = runner.invoke(cli, ["param", "check", "nonce", "abc"])
        assert result.exit_code != 0
        assert "Invalid value" in result.output

    def test_invalid_value_reports_click_error(self, runner):
        result = runner.invoke(cli, ["param", "check", "client-id", "tab\there"])
        assert result.exit_code == 1
        assert "Error: client_id does not match the RFC6749 syntax" in result.output

    def test_value_is_not_logged(self, runner, caplog):
        caplog.set_level(logging.DEBUG, logger="oauth2_utils.cli")
        result = runner.invoke(
            cli, ["param", "check", "password", "hunter2 correct-horse"]
        )
        assert result.exit_code == 0
        assert "Checking password (21 characters)" in caplog.text
        assert "hunter2" not in caplog.text
        assert "correct-horse" not in caplog.text
