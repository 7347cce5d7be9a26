"""Tests for YAML loading and the include: directive."""

from pathlib import Path

import pytest

from shiftleft.core.config import State
from shiftleft.core.yaml_settings import (
    YamlWithIncludesSettingsSource,
    cli_includes,
    deep_merge,
)


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent.parent / "fixtures"


def load(yaml_file):
    return YamlWithIncludesSettingsSource(State, yaml_file=str(yaml_file))()


def test_package_defaults_always_load(mock_argv, tmp_path):
    """Without any project file the Playground pipeline is configured."""
    data = load(tmp_path / "absent.yaml")

    assert data["config"]["project"] == "Playground"
    names = [p["name"] for p in data["config"]["prerequisites"]]
    assert names == ["Docker", "Docker Compose"]


def test_project_file_overrides_defaults(fixtures_dir, mock_argv):
    data = load(fixtures_dir / "minimal.yaml")

    assert data["config"]["project"] == "fixture"
    # Lists are replaced, not appended to
    assert data["config"]["prerequisites"] == []
    assert len(data["config"]["stages"]) == 1
    # Keys the project file does not mention keep their defaults
    assert data["config"]["summary"]["hint"].startswith("Run 'make github-ci'")


def test_yaml_include_directive(fixtures_dir, mock_argv):
    """include: loads the named file underneath the including one."""
    data = load(fixtures_dir / "with_include.yaml")

    assert data["config"]["project"] == "with-include"
    assert data["config"]["clean"]["commands"] == ["echo custom"]
    assert data["config"]["summary"]["hint"] == "Run 'make lint' to see details"
    assert "include" not in data


def test_nested_includes(fixtures_dir, mock_argv):
    """nested_include -> with_include -> extra_checks."""
    data = load(fixtures_dir / "nested_include.yaml")

    assert data["config"]["project"] == "nested"
    assert data["config"]["clean"]["commands"] == ["echo custom"]


def test_include_with_relative_path(tmp_path, mock_argv):
    """Include paths resolve relative to the including file."""
    subdir = tmp_path / "subdir"
    subdir.mkdir()
    (subdir / "child.yaml").write_text("config:\n  image: child-image\n")
    (tmp_path / "parent.yaml").write_text(
        "include: subdir/child.yaml\nconfig:\n  project: parent\n"
    )

    data = load(tmp_path / "parent.yaml")

    assert data["config"]["image"] == "child-image"
    assert data["config"]["project"] == "parent"


def test_circular_include_detected(fixtures_dir, mock_argv):
    with pytest.raises(ValueError, match="Circular include"):
        load(fixtures_dir / "circular_a.yaml")


def test_cli_include_overrides_project_file(fixtures_dir, mock_argv):
    import sys

    sys.argv = [
        "shiftleft",
        "--include",
        str(fixtures_dir / "override_project.yaml"),
    ]

    data = load(fixtures_dir / "minimal.yaml")

    assert data["config"]["project"] == "overridden"
    assert data["config"]["stages"][0]["checks"][0]["name"] == "lint"


def test_cli_includes_parsing():
    argv = ["shiftleft", "--include", "a.yaml", "run", "--include=b.yaml"]

    assert cli_includes(argv) == ["a.yaml", "b.yaml"]


def test_cli_includes_ignores_dangling_flag():
    assert cli_includes(["shiftleft", "--include"]) == []


def test_deep_merge_override_wins():
    base = {"a": {"x": 1, "y": 2}, "list": [1, 2]}
    override = {"a": {"y": 3}, "list": [3]}

    merged = deep_merge(base, override)

    assert merged == {"a": {"x": 1, "y": 3}, "list": [3]}
    assert base == {"a": {"x": 1, "y": 2}, "list": [1, 2]}


def test_missing_include_file_raises_error(tmp_path, mock_argv):
    (tmp_path / "broken.yaml").write_text("include: nowhere.yaml\n")

    with pytest.raises(FileNotFoundError):
        load(tmp_path / "broken.yaml")


def test_empty_yaml_file(tmp_path, mock_argv):
    """An empty project file leaves the defaults in place."""
    (tmp_path / "empty.yaml").write_text("")

    data = load(tmp_path / "empty.yaml")

    assert data["config"]["project"] == "Playground"


def test_absolute_include_path(fixtures_dir, tmp_path, mock_argv):
    target = (fixtures_dir / "extra_checks.yaml").resolve()
    (tmp_path / "abs.yaml").write_text(f"include: {target}\n")

    data = load(tmp_path / "abs.yaml")

    assert data["config"]["clean"]["commands"] == ["echo custom"]


def test_include_list_merges_in_order(tmp_path, mock_argv):
    """Later includes win over earlier ones; the includer wins over both."""
    (tmp_path / "one.yaml").write_text("config:\n  image: one\n  goal: one\n")
    (tmp_path / "two.yaml").write_text("config:\n  image: two\n")
    (tmp_path / "main.yaml").write_text(
        "include:\n  - one.yaml\n  - two.yaml\nconfig:\n  project: main\n"
    )

    data = load(tmp_path / "main.yaml")

    assert data["config"]["image"] == "two"
    assert data["config"]["goal"] == "one"
    assert data["config"]["project"] == "main"


def test_read_files_accepts_base_class_options(fixtures_dir, mock_argv):
    """pydantic-settings passes extra options such as deep_merge."""
    source = YamlWithIncludesSettingsSource(State)

    data = source._read_files(fixtures_dir / "minimal.yaml", deep_merge=True)

    assert data["config"]["project"] == "fixture"


def test_state_reads_project_file_from_cwd(tmp_path, monkeypatch, mock_argv):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "shiftleft.yaml").write_text(
        "config:\n  project: from-cwd\n  prerequisites: []\n"
    )

    state = State(_cli_parse_args=False)

    assert state.config.project == "from-cwd"
    assert state.config.prerequisites == []
