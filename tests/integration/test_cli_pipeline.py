from __future__ import annotations

import json
from pathlib import Path

import pytest
from dependency_injector import providers
from typer.testing import CliRunner

from skillassess.cli import app
from skillassess.container import create_container
from skillassess.core import NARRATIVES
from skillassess.errors import SubmissionIncomplete
from skillassess.pipeline import AssessmentPipeline
from skillassess.schemas import VoiceScores


class FixedEvaluator:
    def __init__(self, value: float):
        self.value = value

    def evaluate(self, audio_ref: str) -> VoiceScores:
        return VoiceScores(clarity=self.value, confidence=self.value, content_quality=self.value)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


def write_inputs(tmp_path: Path, *, voice: dict[str, int] | None = None) -> tuple[Path, Path]:
    job_path = tmp_path / "job.json"
    script_path = tmp_path / "script.yaml"
    write_json(
        job_path,
        {
            "job_id": "1",
            "title": "Senior Frontend Developer",
            "description": "We are looking for a skilled frontend developer with 5+ years of experience in React.",
            "requirements": "React, TypeScript, CSS, state management (Redux or Context API)",
        },
    )
    voice = {"1": 30, "2": 200, "3": 45} if voice is None else voice
    lines = [
        "candidate_id: C-001",
        "candidate_name: Ada Lovelace",
        "mcq:",
        '  "1": 1',
        '  "2": 0',
        '  "3": 3',
        '  "4": 2',
        '  "5": 1',
        "voice:",
    ]
    lines.extend(f'  "{question_id}": {duration}' for question_id, duration in voice.items())
    script_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return job_path, script_path


def test_cli_runs_assessment_and_writes_report(tmp_path: Path, runner: CliRunner) -> None:
    job_path, script_path = write_inputs(tmp_path)
    output_path = tmp_path / "out" / "report.json"
    audit_path = tmp_path / "audit.jsonl"
    config_path = tmp_path / "config.yaml"
    config_path.write_text("evaluator:\n  seed: 11\nvoice:\n  max_duration: 120\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "--job",
            str(job_path),
            "--script",
            str(script_path),
            "--output",
            str(output_path),
            "--config",
            str(config_path),
            "--audit-log",
            str(audit_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Report" in result.output

    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    report = rendered["report"]
    assert rendered["metadata"]["job_id"] == "1"
    assert rendered["metadata"]["candidate_id"] == "C-001"
    assert report["mcq_score"] == pytest.approx(80.0)
    assert 0.0 <= report["voice_score"] <= 100.0
    assert len(report["mcq_results"]) == 5
    assert len(report["voice_results"]) == 3
    assert report["summary"] in NARRATIVES.values()

    audit = [json.loads(line) for line in audit_path.read_text(encoding="utf-8").splitlines()]
    assert len(audit) == 1
    assert audit[0]["report_id"] == report["id"]


def test_cli_reports_incomplete_script(tmp_path: Path, runner: CliRunner) -> None:
    job_path, script_path = write_inputs(tmp_path, voice={"1": 10})
    output_path = tmp_path / "report.json"

    result = runner.invoke(
        app,
        ["--job", str(job_path), "--script", str(script_path), "--output", str(output_path)],
    )

    assert result.exit_code == 1
    assert "Assessment failed" in result.output
    assert not output_path.exists()


def test_cli_rejects_invalid_config(tmp_path: Path, runner: CliRunner) -> None:
    job_path, script_path = write_inputs(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("voice:\n  max_duration: -5\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "--job",
            str(job_path),
            "--script",
            str(script_path),
            "--output",
            str(tmp_path / "report.json"),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code != 0


@pytest.mark.asyncio
async def test_pipeline_report_matches_scripted_answers(tmp_path: Path) -> None:
    job_path, script_path = write_inputs(tmp_path)
    output_path = tmp_path / "report.json"
    container = create_container()
    container.voice_evaluator.override(providers.Object(FixedEvaluator(4.0)))
    store = container.application_store()

    report = await container.pipeline().run(
        job_path=job_path,
        script_path=script_path,
        output_path=output_path,
    )

    assert report.mcq_score == pytest.approx(80.0)
    assert report.voice_score == pytest.approx(80.0)
    assert report.summary == NARRATIVES["strong"]
    assert [r.question_id for r in report.voice_results] == ["1", "2", "3"]
    application = store.get_application("C-001", "1")
    assert application.candidate_name == "Ada Lovelace"
    assert application.test_taken is True
    assert application.report_id == report.id


@pytest.mark.asyncio
async def test_pipeline_incomplete_script_creates_no_report(tmp_path: Path) -> None:
    job_path, script_path = write_inputs(tmp_path, voice={"1": 5, "3": 5})
    container = create_container()
    store = container.application_store()

    with pytest.raises(SubmissionIncomplete):
        await container.pipeline().run(
            job_path=job_path,
            script_path=script_path,
            output_path=tmp_path / "report.json",
        )

    assert store.find_report("C-001", "1") is None
    assert store.get_application("C-001", "1").test_taken is False


@pytest.mark.asyncio
async def test_pipeline_with_engine_clock_waits_for_clock_ticks(tmp_path: Path) -> None:
    job_path, script_path = write_inputs(tmp_path, voice={"1": 3, "2": 50, "3": 4})
    container = create_container(settings={"voice": {"max_duration": 8, "tick_interval": 0.001}})
    container.voice_evaluator.override(providers.Object(FixedEvaluator(3.0)))
    controllers = []

    def controller_factory():
        controller = container.controller()
        controllers.append(controller)
        return controller

    pipeline = AssessmentPipeline(controller_factory=controller_factory, store=container.application_store())

    report = await pipeline.run(job_path=job_path, script_path=script_path, output_path=tmp_path / "report.json")

    voice = controllers[0].voice
    assert 3 <= voice.slot("1").elapsed < 8
    assert voice.slot("2").elapsed == 8
    assert 4 <= voice.slot("3").elapsed < 8
    assert container.capture().active == []
    assert report.voice_score == pytest.approx(60.0)
