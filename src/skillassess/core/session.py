"""Assessment session state shared by the test engines."""

from __future__ import annotations

from typing import Generic, TypeVar

from ..errors import AssessmentStateError, UnknownQuestion
from ..schemas import MCQQuestion, MCQResult, QuestionSet, VoiceQuestion, VoiceResult

R = TypeVar("R", MCQResult, VoiceResult)


class ResultLedger(Generic[R]):
    """Ordered results keyed by question id; saving replaces, never duplicates."""

    def __init__(self) -> None:
        self._results: list[R] = []

    def upsert(self, result: R) -> bool:
        """Store the result, returning True when it replaced an earlier one."""
        for position, existing in enumerate(self._results):
            if existing.question_id == result.question_id:
                self._results[position] = result
                return True
        self._results.append(result)
        return False

    def get(self, question_id: str) -> R | None:
        for result in self._results:
            if result.question_id == question_id:
                return result
        return None

    def snapshot(self) -> tuple[R, ...]:
        return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)


class AssessmentSession:
    """One assessment attempt by one candidate for one job.

    Owned by :class:`~skillassess.core.controller.AssessmentController` and
    handed to the engines by reference. Question lists are fixed once loaded;
    result lists only change through the upsert methods and freeze once the
    session is completed.
    """

    def __init__(self, *, candidate_id: str, job_id: str) -> None:
        self.candidate_id = candidate_id
        self.job_id = job_id
        self.started = False
        self.completed = False
        self.report_id: str | None = None
        self._mcq_questions: tuple[MCQQuestion, ...] = ()
        self._voice_questions: tuple[VoiceQuestion, ...] = ()
        self._mcq_results: ResultLedger[MCQResult] = ResultLedger()
        self._voice_results: ResultLedger[VoiceResult] = ResultLedger()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return (
            f"AssessmentSession(candidate_id={self.candidate_id!r}, job_id={self.job_id!r}, "
            f"mcq={len(self._mcq_results)}/{len(self._mcq_questions)}, "
            f"voice={len(self._voice_results)}/{len(self._voice_questions)}, "
            f"completed={self.completed})"
        )

    @property
    def mcq_questions(self) -> tuple[MCQQuestion, ...]:
        return self._mcq_questions

    @property
    def voice_questions(self) -> tuple[VoiceQuestion, ...]:
        return self._voice_questions

    @property
    def mcq_results(self) -> tuple[MCQResult, ...]:
        return self._mcq_results.snapshot()

    @property
    def voice_results(self) -> tuple[VoiceResult, ...]:
        return self._voice_results.snapshot()

    @property
    def questions_loaded(self) -> bool:
        return bool(self._mcq_questions and self._voice_questions)

    @property
    def is_mcq_complete(self) -> bool:
        return bool(self._mcq_questions) and len(self._mcq_results) == len(self._mcq_questions)

    @property
    def is_voice_complete(self) -> bool:
        return bool(self._voice_questions) and len(self._voice_results) == len(self._voice_questions)

    @property
    def is_complete(self) -> bool:
        return self.is_mcq_complete and self.is_voice_complete

    def load_questions(self, questions: QuestionSet) -> None:
        if self.questions_loaded:
            raise AssessmentStateError("Questions are already loaded for this session")
        self._mcq_questions = tuple(questions.mcq)
        self._voice_questions = tuple(questions.voice)

    def mcq_result(self, question_id: str) -> MCQResult | None:
        return self._mcq_results.get(question_id)

    def voice_result(self, question_id: str) -> VoiceResult | None:
        return self._voice_results.get(question_id)

    def upsert_mcq_result(self, result: MCQResult) -> bool:
        self._check_writable(result, self._mcq_questions)
        return self._mcq_results.upsert(result)

    def upsert_voice_result(self, result: VoiceResult) -> bool:
        self._check_writable(result, self._voice_questions)
        return self._voice_results.upsert(result)

    def mark_completed(self, report_id: str) -> None:
        if self.completed:
            raise AssessmentStateError("Session is already completed")
        self.completed = True
        self.report_id = report_id

    def _check_writable(self, result: MCQResult | VoiceResult, questions: tuple) -> None:
        if self.completed:
            raise AssessmentStateError("Session is completed; results are frozen")
        question_id = result.question_id
        if not any(question.id == question_id for question in questions):
            raise UnknownQuestion(f"Question {question_id!r} is not part of this session")
