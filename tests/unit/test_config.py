"""
Unit tests for ServerConfig and the CLI argument parser.
"""

import pytest

from simplewebserver import ServerConfig
from simplewebserver.__main__ import build_parser


class TestServerConfig:

    def test_defaults(self):
        config = ServerConfig()

        assert config.port == 8080
        assert config.default_document == "test.html"
        assert config.not_found_document == "404page.html"
        assert config.mime_type == "text/html"
        assert config.date_token == "<cs371date>"
        assert config.server_token == "<cs371server>"
        assert config.server_name == "Julio's very own server"
        assert config.server_label == "Julio's Server"

    def test_valid_config_passes(self, config):
        config.validate()

    @pytest.mark.parametrize("changes, message", [
        ({"port": 70000}, "port"),
        ({"port": -1}, "port"),
        ({"backlog": 0}, "backlog"),
        ({"timeout": 0}, "timeout"),
        ({"log_level": "CHATTY"}, "log level"),
    ])
    def test_invalid_values(self, docroot, changes, message):
        config = ServerConfig(root=str(docroot), **changes)

        with pytest.raises(ValueError) as exc_info:
            config.validate()

        assert message in str(exc_info.value)

    def test_missing_root(self, tmp_path):
        with pytest.raises(ValueError):
            ServerConfig(root=str(tmp_path / "nope")).validate()

    def test_no_timeout_allowed(self, docroot):
        ServerConfig(root=str(docroot), timeout=None).validate()

    def test_from_env(self, monkeypatch, docroot):
        monkeypatch.setenv("WEB_HOST", "0.0.0.0")
        monkeypatch.setenv("WEB_PORT", "3000")
        monkeypatch.setenv("WEB_ROOT", str(docroot))
        monkeypatch.setenv("WEB_TIMEOUT", "2.5")
        monkeypatch.setenv("WEB_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.root == str(docroot)
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"

    def test_from_env_without_timeout(self, monkeypatch):
        monkeypatch.setenv("WEB_TIMEOUT", "none")
        assert ServerConfig.from_env().timeout is None

    def test_from_env_defaults(self, monkeypatch):
        for name in ("WEB_HOST", "WEB_PORT", "WEB_ROOT", "WEB_TIMEOUT", "WEB_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = ServerConfig.from_env()

        assert config.port == 8080
        assert config.timeout == 30.0


class TestArgumentParser:

    def test_defaults_come_from_config(self):
        args = build_parser(ServerConfig(port=9999, root="/srv")).parse_args([])

        assert args.port == 9999
        assert args.root == "/srv"
        assert args.log_level == "INFO"

    def test_overrides(self):
        args = build_parser(ServerConfig()).parse_args([
            "--host", "0.0.0.0",
            "-p", "3000",
            "--root", "./public",
            "--timeout", "5",
            "--server-name", "Mine",
            "--log-level", "debug",
        ])

        assert args.host == "0.0.0.0"
        assert args.port == 3000
        assert args.root == "./public"
        assert args.timeout == 5.0
        assert args.server_name == "Mine"
        assert args.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(SystemExit):
            build_parser(ServerConfig()).parse_args(["--log-level", "loud"])
