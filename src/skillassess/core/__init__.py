"""Core assessment engine components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .controller import AssessmentController, AssessmentProgress, ControllerConfig
from .mcq import MCQTestEngine, MCQView
from .report import NARRATIVES, ReportBuilder, ReportConfig
from .scoring import composite_score, mcq_score, voice_metric, voice_score
from .session import AssessmentSession, ResultLedger
from .voice import RecordingSlot, RecordingState, VoiceConfig, VoiceTestEngine, VoiceView

__all__ = [
    "AssessmentController",
    "AssessmentProgress",
    "AssessmentSession",
    "ControllerConfig",
    "MCQTestEngine",
    "MCQView",
    "NARRATIVES",
    "RecordingSlot",
    "RecordingState",
    "ReportBuilder",
    "ReportConfig",
    "ResultLedger",
    "VoiceConfig",
    "VoiceTestEngine",
    "VoiceView",
    "composite_score",
    "mcq_score",
    "voice_metric",
    "voice_score",
]
