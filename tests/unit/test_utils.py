"""Unit tests for q_mcp_setup.utils."""

from __future__ import annotations

import logging

import pytest

from q_mcp_setup.utils import (
    GREEN,
    SUCCESS,
    SetupFormatter,
    configure_logging,
    log_debug,
    log_info,
    log_plain,
    log_step,
    log_success,
    log_warn,
    mask_secret,
)


def _record(level: int, msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("q_mcp_setup", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSetupFormatter:
    @pytest.mark.parametrize(
        "level,expected",
        [
            (logging.INFO, "INFO: hello"),
            (SUCCESS, "✅ hello"),
            (logging.WARNING, "⚠️  WARNING: hello"),
            (logging.ERROR, "❌ ERROR: hello"),
            (logging.DEBUG, "DEBUG: hello"),
        ],
    )
    def test_prefixes_without_color(self, level: int, expected: str) -> None:
        assert SetupFormatter(use_colors=False).format(_record(level, "hello")) == expected

    def test_plain_records_unprefixed(self) -> None:
        fmt = SetupFormatter(use_colors=True)
        assert fmt.format(_record(logging.INFO, "  Platform: Linux", plain=True)) == "  Platform: Linux"

    def test_colors(self) -> None:
        out = SetupFormatter(use_colors=True).format(_record(SUCCESS, "done"))
        assert out.startswith(GREEN)


class TestConfigureLogging:
    def test_streams_split_by_level(self, make_options, capsys) -> None:
        configure_logging(make_options())
        log_info("info line")
        log_success("success line")
        log_warn("warn line")
        log_debug("hidden")
        out, err = capsys.readouterr()
        assert "INFO: info line" in out
        assert "✅ success line" in out
        assert "warn line" not in out
        assert "⚠️  WARNING: warn line" in err
        assert "hidden" not in out + err

    def test_verbose_shows_debug(self, make_options, capsys) -> None:
        configure_logging(make_options(verbose=True))
        log_debug("shown")
        assert "DEBUG: shown" in capsys.readouterr().out

    def test_step_and_plain(self, make_options, capsys) -> None:
        configure_logging(make_options())
        log_step("uv Version: 0.5")
        log_plain("=====")
        out = capsys.readouterr().out
        assert "  uv Version: 0.5\n" in out
        assert "=====\n" in out

    def test_reconfigure_replaces_handlers(self, make_options) -> None:
        configure_logging(make_options())
        configure_logging(make_options())
        assert len(logging.getLogger("q_mcp_setup").handlers) == 2


class TestMaskSecret:
    def test_masks_long_values(self) -> None:
        masked = mask_secret("ghp_" + "a" * 32 + "WXYZ")
        assert masked.startswith("ghp_")
        assert masked.endswith("WXYZ")
        assert "a" * 8 not in masked

    def test_short_and_empty(self) -> None:
        assert mask_secret("abc") == "****"
        assert mask_secret("") == ""
