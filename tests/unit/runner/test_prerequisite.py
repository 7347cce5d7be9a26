"""Tests for prerequisite probing."""

import pytest

from shiftleft.core.config import PrerequisiteConfig
from shiftleft.core.result import FatalError
from shiftleft.runner.prerequisite import check_prerequisite


def test_satisfied_prerequisite(tmp_path):
    check_prerequisite(
        PrerequisiteConfig(name="Shell", probes=["true"]), cwd=tmp_path
    )


def test_any_probe_satisfies(tmp_path):
    """docker-compose or docker compose: one working probe is enough."""
    check_prerequisite(
        PrerequisiteConfig(
            name="Docker Compose",
            probes=["shiftleft-no-such-tool --version", "true"],
        ),
        cwd=tmp_path,
    )


def test_probing_stops_at_first_success(tmp_path):
    check_prerequisite(
        PrerequisiteConfig(
            name="Shell",
            probes=["touch first", "touch second"],
        ),
        cwd=tmp_path,
    )

    assert (tmp_path / "first").exists()
    assert not (tmp_path / "second").exists()


def test_missing_prerequisite_is_fatal(tmp_path):
    prerequisite = PrerequisiteConfig(
        name="Docker",
        probes=["shiftleft-no-such-tool --version"],
        hint="Please install Docker first.",
    )

    with pytest.raises(FatalError) as excinfo:
        check_prerequisite(prerequisite, cwd=tmp_path)

    fatal = excinfo.value.fatal
    assert fatal.kind == "prerequisite"
    assert fatal.message == "Docker not found. Please install Docker first."
    assert fatal.returncode == 127


def test_probe_output_is_hidden(tmp_path, capsys):
    check_prerequisite(
        PrerequisiteConfig(name="Echo", probes=["echo probe-noise"]),
        cwd=tmp_path,
    )

    assert "probe-noise" not in capsys.readouterr().out


def test_prerequisite_needs_a_probe():
    with pytest.raises(ValueError):
        PrerequisiteConfig(name="Nothing", probes=[])
