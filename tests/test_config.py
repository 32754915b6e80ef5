"""
tests/test_config.py
--------------------
Unit tests for config.py.
Run with: python -m pytest tests/
"""
from __future__ import annotations

from pathlib import Path

import pytest

from config import ReportConfig


class TestReportConfig:
    # --- Layout is part of the report format ---
    def test_layout_defaults(self) -> None:
        cfg = ReportConfig()
        assert cfg.line_width == 80
        assert cfg.hanging_indent == 3

    def test_layout_ignores_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPORT_LINE_WIDTH", "120")
        monkeypatch.setenv("REPORT_HANGING_INDENT", "8")
        cfg = ReportConfig()
        assert cfg.line_width == 80
        assert cfg.hanging_indent == 3

    # --- Output settings still come from the environment ---
    def test_output_settings_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPORT_FILE", "out/conv.txt")
        monkeypatch.setenv("REPORT_ENCODING", "latin-1")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        cfg = ReportConfig()
        assert cfg.report_file == Path("out/conv.txt")
        assert cfg.encoding == "latin-1"
        assert cfg.log_level == "DEBUG"
