"""
Tests for Settings and the command line overlay.
"""

from pathlib import Path

import pytest

from colorrelay import __main__ as cli
from colorrelay.config import DEFAULT_STATIC_DIR, Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.port == 8080
        assert settings.buffer_size == 20
        assert settings.confidence_threshold == 0.6
        assert settings.ping_interval == 30.0
        assert settings.static_dir == DEFAULT_STATIC_DIR
        assert settings.log_level == "INFO"

    def test_from_env(self):
        settings = Settings.from_env({
            "PORT": "9000",
            "HOST": "127.0.0.1",
            "BUFFER_SIZE": "5",
            "CONFIDENCE_THRESHOLD": "0.75",
            "PING_INTERVAL": "2.5",
            "SEND_TIMEOUT": "0.5",
            "STATIC_DIR": "/srv/ui",
            "LOG_LEVEL": "debug",
        })

        assert settings.port == 9000
        assert settings.host == "127.0.0.1"
        assert settings.buffer_size == 5
        assert settings.confidence_threshold == 0.75
        assert settings.ping_interval == 2.5
        assert settings.send_timeout == 0.5
        assert settings.static_dir == Path("/srv/ui")
        assert settings.log_level == "DEBUG"

    def test_blank_values_use_defaults(self):
        assert Settings.from_env({"PORT": "", "BUFFER_SIZE": "  "}).port == 8080

    @pytest.mark.parametrize(
        "env",
        [
            {"PORT": "abc"},
            {"PORT": "70000"},
            {"BUFFER_SIZE": "0"},
            {"CONFIDENCE_THRESHOLD": "1.2"},
            {"CONFIDENCE_THRESHOLD": "high"},
            {"PING_INTERVAL": "0"},
            {"SEND_TIMEOUT": "-1"},
            {"LOG_LEVEL": "LOUD"},
        ],
    )
    def test_invalid_values(self, env):
        with pytest.raises(ValueError):
            Settings.from_env(env)

    def test_without_smoothing(self):
        settings = Settings(buffer_size=20, confidence_threshold=0.6).without_smoothing()

        assert settings.buffer_size == 1
        assert settings.confidence_threshold == 0.0


class TestCommandLine:

    def test_flags_override_env(self):
        args = cli.build_parser().parse_args(["--port", "9001", "--threshold", "0.8", "--log-level", "warning"])
        settings = cli.settings_from_args(args, base=Settings(buffer_size=7))

        assert settings.port == 9001
        assert settings.confidence_threshold == 0.8
        assert settings.buffer_size == 7
        assert settings.log_level == "WARNING"

    def test_no_smoothing_flag(self):
        args = cli.build_parser().parse_args(["--no-smoothing", "--buffer-size", "40"])
        settings = cli.settings_from_args(args, base=Settings())

        assert settings.buffer_size == 1
        assert settings.confidence_threshold == 0.0

    def test_invalid_config_exits_nonzero(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        with pytest.raises(SystemExit) as exc:
            cli.main(["--threshold", "2"])
        assert exc.value.code == 2

    def test_runs_uvicorn_with_settings(self, monkeypatch):
        calls = []
        monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kw: calls.append((app, kw)))
        monkeypatch.delenv("HOST", raising=False)

        cli.main(["--port", "8123", "--host", "127.0.0.1"])

        app, kwargs = calls[0]
        assert kwargs["port"] == 8123
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["ws_ping_interval"] == app.state.relay.settings.ping_interval
        assert kwargs["ws_ping_timeout"] == app.state.relay.settings.ping_interval
        assert app.state.relay.settings.port == 8123

