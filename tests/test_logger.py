"""Tests for logger.py: setup_logging() and JsonFormatter.

Strategy: Mock logging.basicConfig to verify setup_logging passes correct args,
since pytest's log capture plugin interferes with actual basicConfig calls.
"""

import json
import logging
import sys
from unittest.mock import patch

from template_sync.logger import JsonFormatter, setup_logging


# ---------------------------------------------------------------------------
# setup_logging tests
# ---------------------------------------------------------------------------


class TestSetupLogging:
    """Tests for setup_logging()."""

    @patch("template_sync.logger.logging.basicConfig")
    def test_logs_to_stderr(self, mock_basic, monkeypatch):
        monkeypatch.delenv("LOG_FILE", raising=False)
        setup_logging()

        mock_basic.assert_called_once()
        handlers = mock_basic.call_args[1]["handlers"]
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr

    @patch("template_sync.logger.logging.basicConfig")
    def test_log_file_adds_file_handler(self, mock_basic, tmp_path):
        log_file = tmp_path / "sync.log"
        setup_logging(log_file=str(log_file))

        handlers = mock_basic.call_args[1]["handlers"]
        assert len(handlers) == 2
        assert isinstance(handlers[1], logging.FileHandler)
        assert handlers[1].baseFilename == str(log_file)
        handlers[1].close()

    @patch("template_sync.logger.logging.basicConfig")
    def test_log_file_from_env(self, mock_basic, tmp_path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("LOG_FILE", str(log_file))
        setup_logging()

        handlers = mock_basic.call_args[1]["handlers"]
        assert handlers[-1].baseFilename == str(log_file)
        handlers[-1].close()

    @patch("template_sync.logger.logging.basicConfig")
    def test_debug_overrides_level(self, mock_basic):
        setup_logging(debug=True)
        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("template_sync.logger.logging.basicConfig")
    def test_env_log_level_honored(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging()
        assert mock_basic.call_args[1]["level"] == logging.ERROR

    @patch("template_sync.logger.logging.basicConfig")
    def test_debug_beats_env(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging(debug=True)
        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("template_sync.logger.logging.basicConfig")
    def test_invalid_env_level_defaults_to_info(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "NOPE")
        setup_logging()
        assert mock_basic.call_args[1]["level"] == logging.INFO

    @patch("template_sync.logger.logging.basicConfig")
    def test_third_party_silenced(self, mock_basic, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        logging.getLogger("watchdog").setLevel(logging.NOTSET)
        setup_logging()
        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("watchdog").level == logging.WARNING

    @patch("template_sync.logger.logging.basicConfig")
    def test_json_format_selects_json_formatter(self, mock_basic):
        setup_logging(debug_format="json")
        handler = mock_basic.call_args[1]["handlers"][0]
        assert isinstance(handler.formatter, JsonFormatter)


# ---------------------------------------------------------------------------
# JsonFormatter tests
# ---------------------------------------------------------------------------


class TestJsonFormatter:
    def _record(self, msg="Pushed %s", args=("a.ejs",), exc_info=None):
        return logging.LogRecord(
            name="template_sync.sync.pusher",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=msg,
            args=args,
            exc_info=exc_info,
        )

    def test_fields(self):
        entry = json.loads(JsonFormatter().format(self._record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "template_sync.sync.pusher"
        assert entry["msg"] == "Pushed a.ejs"
        assert "ts" in entry
        assert "exc" not in entry

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            exc_info = sys.exc_info()
        entry = json.loads(
            JsonFormatter().format(self._record(exc_info=exc_info))
        )
        assert "ValueError: boom" in entry["exc"]


@patch("template_sync.logger.logging.basicConfig")
def test_config_level_used_without_env(mock_basic, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    setup_logging(level="warning")
    assert mock_basic.call_args[1]["level"] == logging.WARNING


@patch("template_sync.logger.logging.basicConfig")
def test_env_level_beats_config_level(mock_basic, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    setup_logging(level="DEBUG")
    assert mock_basic.call_args[1]["level"] == logging.ERROR
