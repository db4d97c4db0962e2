"""Tests for the output formatting system.

Covers:
- JSON / YAML marshaling
- stdout vs stderr discipline
- NO_COLOR / TERM=dumb color disabling
- Output file redirection
- Log level parsing and the diagnostic logging handler
- Global instance management
"""

from __future__ import annotations

import json
import logging

import pytest
import yaml

from apispec.exceptions import InvalidUsageError
from apispec.models import DocumentFormat
from apispec.output import (
    OutputManager,
    _should_disable_color,
    configure_logging,
    get_output,
    marshal,
    parse_format,
    parse_level,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("apispec.output._is_tty", lambda: False)


# ------------------------------------------------------------------ #
# Marshaling
# ------------------------------------------------------------------ #


class TestMarshal:
    def test_json_indented_and_unicode(self) -> None:
        text = marshal({"name": "café", "n": [1, 2]}, DocumentFormat.JSON)
        assert text.startswith('{\n  "name": "café"')
        assert json.loads(text) == {"name": "café", "n": [1, 2]}

    def test_yaml_preserves_key_order(self) -> None:
        text = marshal({"z": 1, "a": {"b": [True]}}, DocumentFormat.YAML)
        assert text.splitlines()[0] == "z: 1"
        assert yaml.safe_load(text) == {"z": 1, "a": {"b": [True]}}
        assert not text.endswith("\n")

    def test_null_result(self) -> None:
        assert marshal(None, DocumentFormat.JSON) == "null"
        assert marshal(None, DocumentFormat.YAML) == "null"

    def test_yaml_scalar(self) -> None:
        assert marshal("1.0.0", DocumentFormat.YAML) == "1.0.0"

    def test_parse_format(self) -> None:
        assert parse_format("YAML") is DocumentFormat.YAML
        assert parse_format("json") is DocumentFormat.JSON
        with pytest.raises(InvalidUsageError, match="Unsupported output format"):
            parse_format("xml")


# ------------------------------------------------------------------ #
# stdout / stderr discipline
# ------------------------------------------------------------------ #


class TestStreams:
    def test_emit_writes_to_stdout_only(self, non_tty, capsys) -> None:
        mgr = OutputManager(format=DocumentFormat.JSON)
        mgr.emit({"a": 1})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"a": 1}
        assert captured.err == ""

    def test_emit_yaml(self, non_tty, capsys) -> None:
        OutputManager(format=DocumentFormat.YAML).emit({"a": [1]})
        assert capsys.readouterr().out == "a:\n- 1\n"

    def test_diagnostics_go_to_stderr(self, non_tty, capsys) -> None:
        mgr = OutputManager(no_color=True)
        mgr.warning("careful")
        mgr.error("broken")
        mgr.debug("details")
        mgr.info("note")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Warning: careful" in captured.err
        assert "Error: broken" in captured.err
        assert "[debug] details" in captured.err
        assert "note" in captured.err

    def test_rich_diagnostics_keep_brackets(self, non_tty, capsys, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager()
        mgr.error("bad key [x]")
        assert "bad key [x]" in capsys.readouterr().err

    def test_output_file(self, non_tty, tmp_path, capsys) -> None:
        target = tmp_path / "out.yaml"
        mgr = OutputManager(format=DocumentFormat.YAML, output_file=str(target))
        mgr.emit({"k": "v"})
        assert target.read_text(encoding="utf-8") == "k: v\n"
        assert capsys.readouterr().out == ""


class TestColor:
    def test_no_color_env(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_color_enabled_by_default(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


class TestLogging:
    @pytest.mark.parametrize(
        ("name", "level"),
        [
            ("trace", logging.DEBUG),
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warn", logging.WARNING),
            ("error", logging.ERROR),
            ("fatal", logging.CRITICAL),
            ("panic", logging.CRITICAL),
        ],
    )
    def test_parse_level(self, name: str, level: int) -> None:
        assert parse_level(name) == level

    def test_unknown_level(self) -> None:
        with pytest.raises(InvalidUsageError, match="Invalid log level"):
            parse_level("loud")

    def test_records_routed_to_stderr(self, non_tty, capsys) -> None:
        set_output(OutputManager(no_color=True))
        configure_logging("warn")
        log = logging.getLogger("apispec.parser.resolver")

        log.info("hidden")
        log.warning("Cannot resolve #/x")
        log.error("Cannot resolve #/y")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "hidden" not in captured.err
        assert "Warning: Cannot resolve #/x" in captured.err
        assert "Error: Cannot resolve #/y" in captured.err

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging("debug")
        configure_logging("error")
        logger = logging.getLogger("apispec")
        assert len(logger.handlers) == 1
        assert logger.level == logging.ERROR


# ------------------------------------------------------------------ #
# Global instance management
# ------------------------------------------------------------------ #


class TestGlobalOutput:
    def test_lazy_default(self) -> None:
        reset_output()
        assert get_output().format is DocumentFormat.JSON

    def test_set_and_reset(self) -> None:
        mgr = OutputManager(format=DocumentFormat.YAML)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr
