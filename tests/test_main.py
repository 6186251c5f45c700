"""Tests for CLI parsing and fatal startup paths."""

import socket

import pytest

import main as main_module
from main import build_cli_parser, main
from src.config import Config


class TestCliParser:
    def test_defaults_left_unset(self):
        args = build_cli_parser().parse_args([])
        assert args.logfile is None
        assert args.mode is None
        assert args.config is None

    def test_flags(self):
        args = build_cli_parser().parse_args(
            ["--logfile", "app.log", "--mode", "http", "--config", "golog.yaml"]
        )
        assert args.logfile == "app.log"
        assert args.mode == "http"
        assert args.config == "golog.yaml"


class TestFatalStartup:
    def test_unsupported_mode_exits(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SERVER_MODE", raising=False)
        log_path = tmp_path / "log.txt"
        with pytest.raises(SystemExit) as exc_info:
            main(["--mode", "zmq", "--logfile", str(log_path)])
        assert 'mode "zmq" not supported' in str(exc_info.value.code)
        assert not log_path.exists()

    def test_unopenable_logfile_exits(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SERVER_MODE", raising=False)
        log_path = tmp_path / "missing-dir" / "log.txt"
        with pytest.raises(SystemExit) as exc_info:
            main(["--logfile", str(log_path)])
        assert str(log_path) in str(exc_info.value.code)

    def test_logfile_is_directory_exits(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SERVER_MODE", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            main(["--logfile", str(tmp_path)])
        assert exc_info.value.code != 0

    def test_invalid_log_level_exits(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        with pytest.raises(SystemExit) as exc_info:
            main(["--logfile", str(tmp_path / "log.txt")])
        assert 'log level "VERBOSE" not supported' in str(exc_info.value.code)


class TestTransportFailure:
    def test_port_in_use_exits_nonzero(self, tmp_path, monkeypatch):
        log_path = tmp_path / "log.txt"
        busy = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]
        monkeypatch.setattr(
            main_module, "load_config",
            lambda *args, **kwargs: Config(logfile=str(log_path), host="127.0.0.1", port=port),
        )
        try:
            with pytest.raises(SystemExit) as exc_info:
                main([])
        finally:
            busy.close()

        code = exc_info.value.code
        assert code not in (0, None)
        assert "http transport failed" in str(code)
        assert str(port) in str(code)
        # file was opened before the bind attempt and is left intact
        assert log_path.exists()
