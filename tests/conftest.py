"""
Shared pytest fixtures for q-mcp-setup tests.

Provides:
    config_dir     - temporary Amazon Q config directory (Q_CONFIG_DIR)
    make_options   - factory for InstallOptions rooted at config_dir
    write_prior    - writes an existing mcp.json into config_dir
"""

import json
import logging

import pytest

from q_mcp_setup.options import InstallOptions


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep host environment from leaking into option defaults."""
    for key in (
        "Q_CONFIG_DIR",
        "Q_MCP_ASSUME_YES",
        "Q_MCP_NONINTERACTIVE",
        "Q_MCP_JSON_CODEC",
        "NO_COLOR",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_logger():
    """Drop handlers bound to per-test streams (CliRunner, capsys)."""
    yield
    logger = logging.getLogger("q_mcp_setup")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    path = tmp_path / "amazonq"
    path.mkdir()
    monkeypatch.setenv("Q_CONFIG_DIR", str(path))
    return path


@pytest.fixture
def make_options(config_dir):
    def _make(**overrides):
        values = {"config_dir": config_dir, "use_colors": False}
        values.update(overrides)
        return InstallOptions(**values)

    return _make


@pytest.fixture
def write_prior(config_dir):
    """Write an mcp.json with the given providers, tab-indented like the Q CLI."""

    def _write(servers, raw=None):
        path = config_dir / "mcp.json"
        if raw is not None:
            path.write_text(raw)
        else:
            path.write_text(json.dumps({"mcpServers": servers}, indent="\t") + "\n")
        return path

    return _write
