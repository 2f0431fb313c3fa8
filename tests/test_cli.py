"""Tests for the talk-ha-bot CLI."""

import json

import pytest
from click.testing import CliRunner

from talk_ha_bot.cli import main as cli_main
from talk_ha_bot.cli.common import load_config_or_exit
from talk_ha_bot.cli.main import main
from talk_ha_bot.signature import verify

from conftest import SECRET

CONFIG = """\
bot:
  port: 9000
  secret: "%s"
  ha:
    url: "http://ha.local:8123"
    webhook_id: "talk_bot"
""" % SECRET


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG)
    return path


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


class TestSign:
    def test_json_output(self, runner):
        result = runner.invoke(main, ["sign", "Done!", "--secret", SECRET, "--nonce", "N" * 64, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["random"] == "N" * 64
        assert verify("Done!", data["random"], data["signature"], SECRET)

    def test_secret_from_config(self, runner, config_file):
        result = runner.invoke(main, ["sign", "hello", "-c", str(config_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data["random"]) == 64
        assert verify("hello", data["random"], data["signature"], SECRET)

    def test_plain_output(self, runner):
        result = runner.invoke(main, ["sign", "x", "--secret", "s", "--nonce", "n" * 64])
        assert result.exit_code == 0
        assert "Signature" in result.output


class TestParse:
    def test_command(self, runner):
        result = runner.invoke(main, ["parse", "@ha turn_on light1"])
        assert result.exit_code == 0
        assert '{"action":"turn_on","target":"light1"}' in result.output

    def test_not_a_command(self, runner):
        result = runner.invoke(main, ["parse", "hello @ha turn_on light1"])
        assert result.exit_code == 0
        assert "Not a command" in result.output


class TestCheckConfig:
    def test_valid(self, runner, config_file):
        result = runner.invoke(main, ["check-config", "-c", str(config_file)])
        assert result.exit_code == 0
        assert "Config OK" in result.output
        assert SECRET not in result.output

    def test_invalid_exits_1(self, runner, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("bot:\n  secret: ''\n")
        result = runner.invoke(main, ["check-config", "-c", str(path)])
        assert result.exit_code == 1
        assert "Fatal error config file" in result.output


class TestServe:
    def test_runs_uvicorn_with_config_port(self, runner, config_file, monkeypatch):
        calls = {}

        def fake_run(app, host, port, log_level):
            calls.update(app=app, host=host, port=port, log_level=log_level)

        monkeypatch.setattr(cli_main.uvicorn, "run", fake_run)
        result = runner.invoke(main, ["serve", "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        assert calls["port"] == 9000
        assert calls["host"] == "0.0.0.0"
        assert calls["log_level"] == "info"
        assert any(getattr(r, "path", None) == "/message" for r in calls["app"].routes)

    def test_port_override(self, runner, config_file, monkeypatch):
        calls = {}
        monkeypatch.setattr(cli_main.uvicorn, "run", lambda app, host, port, log_level: calls.update(port=port))
        result = runner.invoke(main, ["serve", "-c", str(config_file), "--port", "9100"])
        assert result.exit_code == 0
        assert calls["port"] == 9100

    def test_missing_config_exits_1(self, runner, tmp_path):
        result = runner.invoke(main, ["serve", "-c", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1


class TestLoadConfigOrExit:
    def test_returns_config(self, config_file):
        assert load_config_or_exit(config_file).port == 9000

    def test_exits_1_on_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            load_config_or_exit(tmp_path / "missing.yaml")
        assert exc_info.value.code == 1

    def test_sign_without_secret_uses_same_error_path(self, runner, tmp_path):
        result = runner.invoke(main, ["sign", "x", "-c", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1
        assert "Fatal error config file" in result.output
