"""Development-mode voice scoring stand-in."""

from __future__ import annotations

import asyncio
import random

import structlog

from ..schemas import VoiceScores


class RandomVoiceEvaluator:
    """Return uniformly random in-range rubric scores.

    Only suitable for development; production wiring replaces it with
    :class:`skillassess.remote.HTTPVoiceEvaluator` or another real evaluator.
    """

    def __init__(self, *, seed: int | None = None, delay: float = 0.0) -> None:
        self._random = random.Random(seed)
        self._delay = delay
        self._logger = structlog.get_logger(__name__)

    async def evaluate(self, audio_ref: str) -> VoiceScores:
        if self._delay:
            await asyncio.sleep(self._delay)
        scores = VoiceScores(
            clarity=self._random.uniform(0.0, 5.0),
            confidence=self._random.uniform(0.0, 5.0),
            content_quality=self._random.uniform(0.0, 5.0),
        )
        self._logger.debug("evaluator.random_scores", audio_ref=audio_ref, **scores.model_dump())
        return scores
