"""Multiple-choice test engine."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from ..errors import AssessmentStateError, InvalidSelection
from ..schemas import MCQQuestion, MCQResult
from .session import AssessmentSession


@dataclass(slots=True, frozen=True)
class MCQView:
    """What the MCQ section shows for the current question."""

    index: int
    count: int
    answered: int
    question: MCQQuestion
    selected_index: int | None
    feedback_shown: bool
    locked: bool
    is_correct: bool | None
    result: MCQResult | None


class MCQTestEngine:
    """Drive answering of the session's multiple-choice questions.

    Pending selection and the feedback flag are transient per displayed
    question; persisted answers live only in the session.
    """

    def __init__(self, session: AssessmentSession) -> None:
        if not session.mcq_questions:
            raise AssessmentStateError("Session has no multiple-choice questions")
        self._session = session
        self._index = 0
        self._pending: int | None = None
        self._feedback_shown = False
        self._logger = structlog.get_logger(__name__).bind(
            candidate_id=session.candidate_id, job_id=session.job_id
        )

    @property
    def index(self) -> int:
        return self._index

    @property
    def current_question(self) -> MCQQuestion:
        return self._session.mcq_questions[self._index]

    @property
    def pending_selection(self) -> int | None:
        return self._pending

    @property
    def feedback_shown(self) -> bool:
        return self._feedback_shown

    @property
    def is_locked(self) -> bool:
        """Whether selection is closed for the displayed question."""
        return self._feedback_shown or self._session.mcq_result(self.current_question.id) is not None

    def select_option(self, index: int) -> bool:
        """Set the pending selection; returns False when the question is locked."""
        question = self.current_question
        if not 0 <= index < len(question.options):
            raise InvalidSelection(
                f"Option {index} out of range for question {question.id!r} "
                f"with {len(question.options)} options"
            )
        if self.is_locked:
            return False
        self._pending = index
        return True

    def submit_answer(self) -> MCQResult:
        if self._pending is None:
            raise AssessmentStateError("No option selected for the current question")
        result = MCQResult.for_answer(self.current_question, self._pending)
        replaced = self._session.upsert_mcq_result(result)
        self._feedback_shown = True
        self._logger.info(
            "mcq.answer_saved",
            question_id=result.question_id,
            selected_index=result.selected_index,
            is_correct=result.is_correct,
            replaced=replaced,
        )
        return result

    def navigate(self, delta: int) -> int:
        last = len(self._session.mcq_questions) - 1
        self._index = min(max(self._index + delta, 0), last)
        self._pending = None
        self._feedback_shown = False
        return self._index

    def next(self) -> int:
        return self.navigate(1)

    def previous(self) -> int:
        return self.navigate(-1)

    def view(self) -> MCQView:
        question = self.current_question
        result = self._session.mcq_result(question.id)
        selected = result.selected_index if result is not None else self._pending
        if result is not None:
            is_correct: bool | None = result.is_correct
        elif self._feedback_shown and selected is not None:
            is_correct = question.is_correct(selected)
        else:
            is_correct = None
        return MCQView(
            index=self._index,
            count=len(self._session.mcq_questions),
            answered=len(self._session.mcq_results),
            question=question,
            selected_index=selected,
            feedback_shown=self._feedback_shown,
            locked=self.is_locked,
            is_correct=is_correct,
            result=result,
        )
