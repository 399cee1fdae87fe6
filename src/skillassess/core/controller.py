"""Assessment session lifecycle: start, question loading and finalization."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import structlog
from pydantic import ValidationError

from ..adapters.base import (
    ApplicationStore,
    CaptureBoundary,
    QuestionGenerator,
    VoiceEvaluator,
    maybe_await,
)
from ..errors import (
    AssessmentClosed,
    AssessmentStateError,
    GenerationFailure,
    QuestionsNotLoaded,
    SubmissionIncomplete,
)
from ..schemas import MCQQuestion, MCQResult, QuestionSet, Report, VoiceQuestion, VoiceResult
from .mcq import MCQTestEngine
from .report import ReportBuilder
from .session import AssessmentSession
from .voice import VoiceConfig, VoiceTestEngine


@dataclass
class ControllerConfig:
    """Session lifecycle options."""

    allow_retake: bool = False


@dataclass(slots=True, frozen=True)
class AssessmentProgress:
    """Completion percentages per section and overall."""

    mcq_percent: float
    voice_percent: float
    total_percent: float


class AssessmentController:
    """Own one assessment session and compose the two test engines around it."""

    def __init__(
        self,
        *,
        generator: QuestionGenerator,
        store: ApplicationStore,
        capture: CaptureBoundary,
        evaluator: VoiceEvaluator,
        report_builder: ReportBuilder | None = None,
        voice_config: VoiceConfig | None = None,
        config: ControllerConfig | None = None,
    ) -> None:
        self._generator = generator
        self._store = store
        self._capture = capture
        self._evaluator = evaluator
        self._report_builder = report_builder or ReportBuilder(store=store)
        self._voice_config = voice_config or VoiceConfig()
        self._config = config or ControllerConfig()
        self._session: AssessmentSession | None = None
        self._job_description = ""
        self._mcq: MCQTestEngine | None = None
        self._voice: VoiceTestEngine | None = None
        self._load_lock = asyncio.Lock()
        self._logger = structlog.get_logger(__name__)

    async def start(self, job_id: str, candidate_id: str, *, job_description: str = "") -> AssessmentSession:
        """Begin a fresh session, discarding whatever this controller held before."""
        if not self._config.allow_retake and await self._has_report(candidate_id, job_id):
            raise AssessmentClosed(
                f"Candidate {candidate_id!r} already completed the assessment for job {job_id!r}"
            )

        if self._voice is not None:
            self._voice.close()
        self._mcq = None
        self._voice = None

        session = AssessmentSession(candidate_id=candidate_id, job_id=job_id)
        session.started = True
        self._session = session
        self._job_description = job_description
        self._logger.info("session.started", candidate_id=candidate_id, job_id=job_id)
        return session

    async def _has_report(self, candidate_id: str, job_id: str) -> bool:
        return await maybe_await(self._store.find_report(candidate_id, job_id)) is not None

    async def load_questions(self) -> QuestionSet:
        """Generate the session's questions once and build the test engines."""
        session = self.session
        async with self._load_lock:
            if session.questions_loaded:
                return QuestionSet(mcq=list(session.mcq_questions), voice=list(session.voice_questions))

            try:
                raw = await maybe_await(
                    self._generator.generate(session.job_id, self._job_description)
                )
                questions = raw if isinstance(raw, QuestionSet) else QuestionSet.model_validate(raw)
            except GenerationFailure as exc:
                self._logger.warning("questions.generation_failed", job_id=session.job_id, error=str(exc))
                raise
            except ValidationError as exc:
                self._logger.warning("questions.generation_failed", job_id=session.job_id, error=str(exc))
                raise GenerationFailure(f"Generated questions for job {session.job_id!r} are invalid") from exc
            except Exception as exc:  # noqa: BLE001
                self._logger.warning("questions.generation_failed", job_id=session.job_id, error=str(exc))
                raise GenerationFailure(f"Question generation failed for job {session.job_id!r}") from exc

            if self._session is not session:
                raise AssessmentStateError("Session was restarted while questions were loading")

            session.load_questions(questions)
            self._mcq = MCQTestEngine(session)
            self._voice = VoiceTestEngine(
                session,
                capture=self._capture,
                evaluator=self._evaluator,
                config=self._voice_config,
            )
            self._logger.info(
                "questions.loaded",
                job_id=session.job_id,
                mcq_count=len(questions.mcq),
                voice_count=len(questions.voice),
            )
            return questions

    @property
    def session(self) -> AssessmentSession:
        if self._session is None:
            raise AssessmentStateError("No assessment has been started")
        return self._session

    @property
    def mcq(self) -> MCQTestEngine:
        if self._mcq is None:
            raise QuestionsNotLoaded("Questions have not been loaded yet")
        return self._mcq

    @property
    def voice(self) -> VoiceTestEngine:
        if self._voice is None:
            raise QuestionsNotLoaded("Questions have not been loaded yet")
        return self._voice

    @property
    def mcq_questions(self) -> tuple[MCQQuestion, ...]:
        return self.session.mcq_questions

    @property
    def voice_questions(self) -> tuple[VoiceQuestion, ...]:
        return self.session.voice_questions

    @property
    def mcq_results(self) -> tuple[MCQResult, ...]:
        return self.session.mcq_results

    @property
    def voice_results(self) -> tuple[VoiceResult, ...]:
        return self.session.voice_results

    @property
    def is_complete(self) -> bool:
        return self._session is not None and self._session.is_complete

    def progress(self) -> AssessmentProgress:
        session = self.session
        mcq = _percent(len(session.mcq_results), len(session.mcq_questions))
        voice = _percent(len(session.voice_results), len(session.voice_questions))
        return AssessmentProgress(mcq_percent=mcq, voice_percent=voice, total_percent=(mcq + voice) / 2)

    async def finalize(self) -> Report:
        """Build the report for a completed session."""
        session = self.session
        if not session.is_complete:
            self._logger.info(
                "session.finalize_rejected",
                candidate_id=session.candidate_id,
                job_id=session.job_id,
                mcq_answered=len(session.mcq_results),
                voice_answered=len(session.voice_results),
            )
            raise SubmissionIncomplete(
                mcq_answered=len(session.mcq_results),
                mcq_total=len(session.mcq_questions),
                voice_answered=len(session.voice_results),
                voice_total=len(session.voice_questions),
            )
        report = await self._report_builder.build_report(session)
        self._logger.info(
            "session.completed",
            candidate_id=session.candidate_id,
            job_id=session.job_id,
            report_id=report.id,
        )
        return report


def _percent(done: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return done * 100 / total
