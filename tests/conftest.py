"""Pytest configuration and fixtures for shiftleft tests."""

import sys
import tempfile
from pathlib import Path

import pytest

from shiftleft.core.log import ConsoleSink, setup_logger


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging for the whole test session."""
    test_log_root = Path(tempfile.gettempdir()) / "shiftleft-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def mock_argv():
    """Save and restore sys.argv."""
    original = sys.argv.copy()
    sys.argv = ["shiftleft"]
    yield
    sys.argv = original


@pytest.fixture
def make_state(tmp_path, mock_argv):
    """Build a State whose commands run inside tmp_path.

    Keyword arguments become Config fields; stages, prerequisites
    and the build stage default to empty so nothing touches docker.
    """
    from shiftleft.core.config import Config, State, StageConfig

    def _make_state(**overrides):
        overrides.setdefault("prerequisites", [])
        overrides.setdefault("build", StageConfig(name="BUILD"))
        overrides.setdefault("stages", [])
        config = Config(
            project="test",
            workdir=tmp_path,
            log_root=tmp_path / "logs",
            output_dir=tmp_path / "checks",
            **overrides,
        )
        return State(config=config, _cli_parse_args=False)

    return _make_state
