from __future__ import annotations

import pytest

from skillassess.core import AssessmentSession, MCQTestEngine
from skillassess.errors import AssessmentStateError, InvalidSelection
from skillassess.schemas import QuestionSet


def build_engine(count: int = 3) -> tuple[MCQTestEngine, AssessmentSession]:
    session = AssessmentSession(candidate_id="C-001", job_id="1")
    session.load_questions(
        QuestionSet(
            mcq=[
                {"id": f"m{i}", "prompt": f"Question {i}", "options": ["a", "b", "c", "d"], "correct_index": i % 4}
                for i in range(count)
            ],
            voice=[{"id": "v0", "prompt": "Voice"}],
        )
    )
    return MCQTestEngine(session), session


def test_submit_answer_records_correctness_and_shows_feedback():
    engine, session = build_engine()

    assert engine.select_option(0) is True
    result = engine.submit_answer()

    assert result.question_id == "m0"
    assert result.is_correct is True
    assert engine.feedback_shown
    assert session.mcq_results == (result,)


def test_submit_incorrect_answer():
    engine, _ = build_engine()
    engine.next()

    engine.select_option(3)
    result = engine.submit_answer()

    assert result.question_id == "m1"
    assert result.is_correct is False
    assert engine.view().is_correct is False


def test_submit_without_selection_is_rejected():
    engine, session = build_engine()

    with pytest.raises(AssessmentStateError):
        engine.submit_answer()
    assert session.mcq_results == ()


def test_out_of_range_option_is_invalid():
    engine, _ = build_engine()

    with pytest.raises(InvalidSelection):
        engine.select_option(4)
    with pytest.raises(InvalidSelection):
        engine.select_option(-1)
    assert engine.pending_selection is None


def test_selection_is_ignored_after_feedback():
    engine, _ = build_engine()
    engine.select_option(0)
    engine.submit_answer()

    assert engine.select_option(2) is False
    assert engine.view().selected_index == 0


def test_navigation_clamps_and_resets_transient_state():
    engine, session = build_engine(count=3)
    engine.select_option(1)

    assert engine.navigate(10) == 2
    assert engine.pending_selection is None
    assert not engine.feedback_shown
    assert engine.navigate(-10) == 0
    assert engine.previous() == 0
    assert session.mcq_results == ()


def test_revisiting_answered_question_shows_persisted_result_and_locks():
    engine, session = build_engine()
    engine.select_option(2)
    engine.submit_answer()
    engine.next()
    engine.previous()

    view = engine.view()
    assert view.feedback_shown is False
    assert view.locked is True
    assert view.selected_index == 2
    assert view.is_correct is False
    assert engine.select_option(0) is False
    assert len(session.mcq_results) == 1


def test_view_reports_progress():
    engine, _ = build_engine(count=3)
    engine.select_option(0)
    engine.submit_answer()
    engine.next()

    view = engine.view()
    assert (view.index, view.count, view.answered) == (1, 3, 1)
    assert view.question.id == "m1"
    assert view.result is None
    assert view.locked is False
