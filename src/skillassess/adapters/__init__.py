"""Boundary contracts and reference collaborators for the assessment engine."""

from __future__ import annotations

from .base import (
    ApplicationStore,
    CaptureBoundary,
    CaptureHandle,
    QuestionGenerator,
    VoiceEvaluator,
    maybe_await,
)
from .capture import ScriptedCapture, ScriptedHandle
from .evaluators import RandomVoiceEvaluator
from .sample import SampleQuestionGenerator
from .store import InMemoryApplicationStore

__all__ = [
    "ApplicationStore",
    "CaptureBoundary",
    "CaptureHandle",
    "InMemoryApplicationStore",
    "QuestionGenerator",
    "RandomVoiceEvaluator",
    "SampleQuestionGenerator",
    "ScriptedCapture",
    "ScriptedHandle",
    "VoiceEvaluator",
    "maybe_await",
]
