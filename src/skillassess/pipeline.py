"""Scripted assessment pipeline assembly and execution."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Callable

import pendulum
import structlog
import yaml

from . import __version__
from .adapters import InMemoryApplicationStore
from .core import AssessmentController, RecordingState, VoiceTestEngine
from .errors import ScoringFailure
from .schemas import AnswerScript, JobPosting, Report


def _load_mapping(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(handle)
        else:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain an object")
    return data


class JobLoader:
    """Load job postings from JSON or YAML."""

    def load(self, path: Path) -> JobPosting:
        return JobPosting.model_validate(_load_mapping(path))


class ScriptLoader:
    """Load candidate answer scripts from JSON or YAML."""

    def load(self, path: Path) -> AnswerScript:
        return AnswerScript.model_validate(_load_mapping(path))


class OutputWriter:
    """Persist assessment reports."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


class AssessmentPipeline:
    """Run one candidate through both sections from an answer script."""

    def __init__(
        self,
        *,
        controller_factory: Callable[[], AssessmentController],
        store: InMemoryApplicationStore,
        job_loader: JobLoader | None = None,
        script_loader: ScriptLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._controller_factory = controller_factory
        self._store = store
        self._jobs = job_loader or JobLoader()
        self._scripts = script_loader or ScriptLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    async def run(self, *, job_path: Path, script_path: Path, output_path: Path) -> Report:
        job = self._jobs.load(job_path)
        script = self._scripts.load(script_path)
        self._store.apply(script.candidate_id, job.job_id, candidate_name=script.candidate_name)

        controller = self._controller_factory()
        await controller.start(job.job_id, script.candidate_id, job_description=job.generation_text())
        await controller.load_questions()

        self._answer_mcq(controller, script)
        await self._answer_voice(controller, script)

        report = await controller.finalize()

        metadata = {
            "job_id": job.job_id,
            "candidate_id": script.candidate_id,
            "composite_score": report.composite_score,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(
            output_path,
            {"metadata": metadata, "report": report.model_dump(mode="json")},
        )
        self._logger.info(
            "pipeline.completed",
            job_id=job.job_id,
            candidate_id=script.candidate_id,
            report_id=report.id,
        )
        return report

    def _answer_mcq(self, controller: AssessmentController, script: AnswerScript) -> None:
        engine = controller.mcq
        for position, question in enumerate(controller.mcq_questions):
            answer = script.mcq.get(question.id)
            if answer is None:
                self._logger.warning("pipeline.mcq_unanswered", question_id=question.id)
                continue
            engine.navigate(position - engine.index)
            engine.select_option(answer)
            engine.submit_answer()

    async def _answer_voice(self, controller: AssessmentController, script: AnswerScript) -> None:
        engine = controller.voice
        for position, question in enumerate(controller.voice_questions):
            duration = script.voice.get(question.id)
            if duration is None:
                self._logger.warning("pipeline.voice_unanswered", question_id=question.id)
                continue
            engine.navigate(position - engine.index)
            await engine.start()
            await self._record_for(engine, duration)
            if engine.state is RecordingState.RECORDING:
                engine.stop()
            engine.submit_in_background()

        outcomes = await engine.wait_pending()
        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        if failures:
            raise ScoringFailure(f"{len(failures)} voice submission(s) failed") from failures[0]

    @staticmethod
    async def _record_for(engine: VoiceTestEngine, duration: int) -> None:
        interval = engine.tick_interval
        if interval is None:
            for _ in range(duration):
                if not engine.tick():
                    break
            return
        # the engine clock owns ticking; only wait for it
        while engine.state is RecordingState.RECORDING and engine.elapsed < duration:
            await asyncio.sleep(interval)
