"""Pydantic schema definitions for assessment records and configuration."""

from __future__ import annotations

from .assessment import (
    Application,
    MCQQuestion,
    MCQResult,
    QuestionSet,
    Report,
    ReportFields,
    VoiceQuestion,
    VoiceResult,
    VoiceScores,
)
from .job import JobPosting
from .script import AnswerScript

__all__ = [
    "AnswerScript",
    "Application",
    "JobPosting",
    "MCQQuestion",
    "MCQResult",
    "QuestionSet",
    "Report",
    "ReportFields",
    "VoiceQuestion",
    "VoiceResult",
    "VoiceScores",
]
