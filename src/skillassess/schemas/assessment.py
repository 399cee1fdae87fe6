"""Question, result and report records exchanged across the assessment engine."""

from __future__ import annotations

from datetime import datetime

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MCQQuestion(BaseModel):
    """Multiple-choice question with a single correct option."""

    id: str
    prompt: str
    options: list[str] = Field(min_length=2)
    correct_index: int = Field(ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _check_correct_index(self) -> "MCQQuestion":
        if self.correct_index >= len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index} out of range for {len(self.options)} options"
            )
        return self

    def is_correct(self, index: int) -> bool:
        return index == self.correct_index


class VoiceQuestion(BaseModel):
    """Open question answered with a spoken recording."""

    id: str
    prompt: str

    model_config = ConfigDict(extra="forbid", frozen=True)


class QuestionSet(BaseModel):
    """Complete output of a question generator for one job."""

    mcq: list[MCQQuestion]
    voice: list[VoiceQuestion]

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("mcq", "voice")
    @classmethod
    def _non_empty_unique(cls, value: list) -> list:
        if not value:
            raise ValueError("question list must not be empty")
        ids = [question.id for question in value]
        if len(set(ids)) != len(ids):
            raise ValueError("question ids must be unique")
        return value


class MCQResult(BaseModel):
    """Persisted answer to a multiple-choice question."""

    question_id: str
    selected_index: int = Field(ge=0)
    is_correct: bool

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def for_answer(cls, question: MCQQuestion, selected_index: int) -> "MCQResult":
        return cls(
            question_id=question.id,
            selected_index=selected_index,
            is_correct=question.is_correct(selected_index),
        )


class VoiceScores(BaseModel):
    """Rubric scores returned by the voice scoring capability."""

    clarity: float = Field(ge=0.0, le=5.0)
    confidence: float = Field(ge=0.0, le=5.0)
    content_quality: float = Field(ge=0.0, le=5.0)

    model_config = ConfigDict(extra="ignore", frozen=True)


class VoiceResult(BaseModel):
    """Persisted evaluation of a recorded spoken answer."""

    question_id: str
    audio_ref: str
    clarity: float = Field(ge=0.0, le=5.0)
    confidence: float = Field(ge=0.0, le=5.0)
    content_quality: float = Field(ge=0.0, le=5.0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_scores(cls, question_id: str, audio_ref: str, scores: VoiceScores) -> "VoiceResult":
        return cls(
            question_id=question_id,
            audio_ref=audio_ref,
            clarity=scores.clarity,
            confidence=scores.confidence,
            content_quality=scores.content_quality,
        )


class ReportFields(BaseModel):
    """Report payload handed to the application store before an id exists."""

    candidate_id: str
    job_id: str
    mcq_score: float = Field(ge=0.0, le=100.0)
    voice_score: float = Field(ge=0.0, le=100.0)
    summary: str
    timestamp: datetime = Field(default_factory=lambda: pendulum.now("UTC"))
    mcq_results: list[MCQResult] = Field(default_factory=list)
    voice_results: list[VoiceResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class Report(ReportFields):
    """Immutable evaluation report for one completed assessment session."""

    id: str

    @property
    def composite_score(self) -> float:
        return (self.mcq_score + self.voice_score) / 2

    @classmethod
    def from_fields(cls, report_id: str, fields: ReportFields) -> "Report":
        return cls(id=report_id, **fields.model_dump())


class Application(BaseModel):
    """Candidate application record owned by the application store."""

    id: str
    candidate_id: str
    job_id: str
    candidate_name: str | None = None
    applied_at: datetime = Field(default_factory=lambda: pendulum.now("UTC"))
    test_taken: bool = False
    report_id: str | None = None

    model_config = ConfigDict(extra="forbid")
