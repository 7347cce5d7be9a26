"""End-to-end tests of the parity run workflow."""

import asyncio

from shiftleft.command.run import RunCommand
from shiftleft.core.config import (
    CheckConfig,
    CheckStageConfig,
    PrerequisiteConfig,
    StageConfig,
)
from shiftleft.core.result import RunPhase


def stage(name, *checks):
    return CheckStageConfig(
        name=name,
        checks=[
            CheckConfig(name=check_name, command=command)
            for check_name, command in checks
        ],
    )


def run(state, **options):
    exit_code = asyncio.run(RunCommand(**options).run_workflow(state))
    return exit_code, state.runtime.run.report


def test_all_checks_pass(make_state):
    state = make_state(stages=[
        stage("QUALITY", ("lint", "true"), ("scan", "true")),
    ])

    exit_code, report = run(state)

    assert exit_code == 0
    assert report.phase == RunPhase.PASSED
    assert report.summary.failed == []
    assert [r.name for r in report.results] == ["lint", "scan"]


def test_one_failure_still_runs_the_rest(make_state, tmp_path):
    state = make_state(stages=[
        stage("ENV", ("first", "touch first")),
        stage(
            "QUALITY",
            ("broken", "false"),
            ("after", "touch after"),
        ),
    ])

    exit_code, report = run(state)

    assert exit_code == 1
    assert report.phase == RunPhase.FAILED
    assert report.summary.failed == ["broken"]
    assert [r.name for r in report.results] == ["first", "broken", "after"]
    assert (tmp_path / "after").exists()


def test_scenario_lint_linkcheck_scan(make_state, capsys):
    """link-check fails; the other two pass and say so first."""
    state = make_state(stages=[
        stage(
            "QUALITY CHECKS",
            ("lint", "true"),
            ("link-check", "false"),
            ("security-scan", "true"),
        ),
    ])

    exit_code, report = run(state)
    out = capsys.readouterr().out

    assert exit_code == 1
    assert report.summary.failed == ["link-check"]
    summary_at = out.index("TEST SUMMARY")
    assert out.index("PASSED: lint") < summary_at
    assert out.index("PASSED: security-scan") < summary_at
    assert out.index("FAILED: link-check") < summary_at
    assert "  • link-check" in out[summary_at:]


def test_missing_prerequisite_runs_no_checks(make_state, tmp_path, capsys):
    state = make_state(
        prerequisites=[
            PrerequisiteConfig(
                name="Docker",
                probes=["shiftleft-no-such-tool --version"],
            ),
        ],
        build=StageConfig(name="BUILD", commands=["touch built"]),
        stages=[stage("QUALITY", ("lint", "touch linted"))],
    )

    exit_code, report = run(state)
    out = capsys.readouterr().out

    assert exit_code == 2
    assert report.phase == RunPhase.FATAL
    assert report.fatal.kind == "prerequisite"
    assert report.results == []
    assert report.summary is None
    assert not (tmp_path / "built").exists()
    assert not (tmp_path / "linted").exists()
    assert "Docker not found." in out
    assert "TEST SUMMARY" not in out


def test_failed_build_runs_no_checks(make_state, tmp_path, capsys):
    state = make_state(
        build=StageConfig(
            name="BUILD",
            commands=["echo 'pull access denied' >&2; exit 1"],
        ),
        stages=[stage("QUALITY", ("lint", "touch linted"))],
    )

    exit_code, report = run(state)
    captured = capsys.readouterr()

    assert exit_code == 2
    assert report.phase == RunPhase.FATAL
    assert report.fatal.kind == "stage"
    assert not (tmp_path / "linted").exists()
    assert "pull access denied" in captured.err
    assert "ENVIRONMENT BROKEN" in captured.out


def test_build_runs_before_checks(make_state, tmp_path):
    state = make_state(
        build=StageConfig(name="BUILD", commands=["touch image"]),
        stages=[stage("ENV", ("image-present", "test -f image"))],
    )

    exit_code, _ = run(state)

    assert exit_code == 0


def test_skip_build(make_state, tmp_path):
    state = make_state(
        build=StageConfig(name="BUILD", commands=["touch built"]),
        stages=[stage("ENV", ("ok", "true"))],
    )

    exit_code, report = run(state, skip_build=True)

    assert exit_code == 0
    assert not (tmp_path / "built").exists()


def test_only_selected_checks_run(make_state, tmp_path):
    state = make_state(stages=[
        stage("ENV", ("dev-env", "touch dev")),
        stage("QUALITY", ("lint", "touch lint"), ("scan", "false")),
    ])

    exit_code, report = run(state, only=["lint"])

    assert exit_code == 0
    assert [r.name for r in report.results] == ["lint"]
    assert not (tmp_path / "dev").exists()


def test_unknown_selected_check_is_fatal(make_state, tmp_path):
    state = make_state(
        build=StageConfig(name="BUILD", commands=["touch built"]),
        stages=[stage("QUALITY", ("lint", "true"))],
    )

    exit_code, report = run(state, only=["lnit"])

    assert exit_code == 2
    assert report.fatal.kind == "config"
    assert "lnit" in report.fatal.message
    assert not (tmp_path / "built").exists()


def test_repeated_runs_agree(make_state):
    stages = [stage("QUALITY", ("a", "true"), ("b", "false"), ("c", "true"))]

    _, first = run(make_state(stages=stages))
    _, second = run(make_state(stages=stages))

    assert first.summary.passed == second.summary.passed
    assert first.summary.failed == second.summary.failed


def test_stage_headers_printed_for_stages_with_checks(make_state, capsys):
    state = make_state(stages=[
        stage("ENVIRONMENT VERIFICATION", ("env", "true")),
        CheckStageConfig(name="EMPTY", checks=[]),
    ])

    run(state)
    out = capsys.readouterr().out

    assert "STAGE: ENVIRONMENT VERIFICATION" in out
    assert "STAGE: EMPTY" not in out


def walk(state):
    """Drive the graph by hand, recording node types and phases."""
    from shiftleft.workflow.graph import create_workflow
    from shiftleft.workflow.nodes.prerequisites import CheckPrerequisites

    async def _walk():
        nodes, phases = [], []
        workflow = create_workflow()
        async with workflow.iter(CheckPrerequisites(), state=state) as run:
            async for node in run:
                nodes.append(type(node).__name__)
                phase = state.runtime.run.phase
                if not phases or phases[-1] != phase:
                    phases.append(phase)
        return nodes, phases

    return asyncio.run(_walk())


def test_phase_transitions_on_pass(make_state):
    state = make_state(stages=[
        stage("ENV", ("env", "true")),
        stage("QUALITY", ("lint", "true")),
    ])

    nodes, phases = walk(state)

    assert nodes[-2:] == ["Summarize", "End"]
    assert nodes.count("RunChecks") == 3
    assert phases[-4:] == [
        RunPhase.PREREQUISITES_CHECKED,
        RunPhase.BUILT,
        RunPhase.CHECKING,
        RunPhase.PASSED,
    ]


def test_phase_transitions_on_fatal(make_state):
    state = make_state(
        prerequisites=[
            PrerequisiteConfig(name="Missing", probes=["exit 1"]),
        ],
        stages=[stage("ENV", ("env", "true"))],
    )

    nodes, phases = walk(state)

    assert nodes[-2:] == ["Abort", "End"]
    assert "RunChecks" not in nodes
    assert phases[-1] == RunPhase.FATAL
    assert RunPhase.CHECKING not in phases
    assert state.runtime.run.phase.terminal


def test_workflow_graphs_build():
    from shiftleft.workflow.graph import create_task_workflow, create_workflow

    assert set(create_workflow().node_defs) == {
        "CheckPrerequisites", "Build", "RunChecks", "Summarize", "Abort",
    }
    assert set(create_task_workflow().node_defs) == {"RunTask", "Abort"}
