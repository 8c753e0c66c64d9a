import subprocess
import sys

import pytest

import run_pipeline


def plan_for(*argv):
    return run_pipeline.plan_steps(run_pipeline.build_parser().parse_args(list(argv)))


def test_full_run_builds_then_publishes():
    assert plan_for() == [("build", []), ("publish", [])]


def test_options_are_forwarded_to_the_scripts(tmp_path):
    plan = plan_for("--content-dir", str(tmp_path), "--workers", "4", "--prune")

    assert plan == [
        ("build", ["--content-dir", str(tmp_path), "--workers", "4"]),
        ("publish", ["--prune"]),
    ]


@pytest.mark.parametrize(
    "argv, steps",
    [
        (["--validate-only", "--skip-build"], ["validate"]),
        (["--skip-build"], ["publish"]),
        (["--skip-publish"], ["build"]),
        (["--skip-build", "--skip-publish"], []),
    ],
)
def test_step_selection(argv, steps):
    assert [step for step, _ in plan_for(*argv)] == steps


def test_prerequisites_cover_only_planned_steps(tmp_path):
    assert run_pipeline.check_prerequisites([("publish", [])], tmp_path / "missing")
    assert not run_pipeline.check_prerequisites([("build", [])], tmp_path / "missing")
    assert run_pipeline.check_prerequisites([("build", [])], tmp_path)


def test_failed_build_stops_before_publish(monkeypatch, tmp_path):
    calls = []

    def fake_run(cmd, cwd=None):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 1)

    monkeypatch.setattr(run_pipeline.subprocess, "run", fake_run)

    assert run_pipeline.main(["--content-dir", str(tmp_path)]) == 1
    assert len(calls) == 1
    assert calls[0][:2] == [sys.executable, str(run_pipeline.INGRESS_DIR / "build_content.py")]


def test_successful_run_executes_every_step(monkeypatch, tmp_path):
    calls = []

    def fake_run(cmd, cwd=None):
        calls.append(cmd[1])
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(run_pipeline.subprocess, "run", fake_run)

    assert run_pipeline.main(["--content-dir", str(tmp_path), "--prune"]) == 0
    assert calls == [
        str(run_pipeline.INGRESS_DIR / "build_content.py"),
        str(run_pipeline.INGRESS_DIR / "publish_search.py"),
    ]
