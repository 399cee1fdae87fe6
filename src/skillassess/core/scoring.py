"""Score aggregation for the MCQ and voice sections."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..schemas import MCQResult, VoiceResult

VOICE_SCALE = 20.0


def mcq_score(results: Iterable[MCQResult], question_count: int) -> float:
    """Percentage of questions answered correctly, 0 when nothing was answered."""
    results = list(results)
    if not results or question_count <= 0:
        return 0.0
    correct = sum(1 for result in results if result.is_correct)
    return correct * 100 / question_count


def voice_metric(result: VoiceResult) -> float:
    """Mean of the three rubric dimensions, in [0, 5]."""
    return (result.clarity + result.confidence + result.content_quality) / 3


def voice_score(results: Sequence[VoiceResult]) -> float:
    """Average per-question metric mapped from [0, 5] onto [0, 100]."""
    if not results:
        return 0.0
    total = sum(voice_metric(result) for result in results)
    return total / len(results) * VOICE_SCALE


def composite_score(mcq: float, voice: float) -> float:
    return (mcq + voice) / 2
