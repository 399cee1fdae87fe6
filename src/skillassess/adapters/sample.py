"""Question generator backed by a static YAML question bank."""

from __future__ import annotations

import asyncio
from importlib import resources
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from ..errors import GenerationFailure
from ..schemas import QuestionSet

_BUNDLED_BANK = "question_bank.yaml"


def load_question_bank(path: str | Path | None = None) -> dict[str, Any]:
    """Load a question bank mapping; defaults to the bank shipped with the package."""
    if path is None:
        text = resources.files(__package__).joinpath(_BUNDLED_BANK).read_text(encoding="utf-8")
    else:
        text = Path(path).read_text(encoding="utf-8")
    loaded = yaml.safe_load(text) or {}
    if not isinstance(loaded, dict):
        raise ValueError("Question bank must be a YAML mapping")
    return loaded


class SampleQuestionGenerator:
    """Serve per-job question sets from a question bank.

    The job description is ignored; sets are chosen by job id with the bank's
    ``default`` entry as fallback.
    """

    def __init__(self, *, bank: dict[str, Any] | None = None, delay: float = 0.0) -> None:
        self._bank = bank if bank is not None else load_question_bank()
        self._delay = delay
        self._logger = structlog.get_logger(__name__)

    async def generate(self, job_id: str, job_description: str) -> QuestionSet:
        if self._delay:
            await asyncio.sleep(self._delay)

        jobs = self._bank.get("jobs") or {}
        entry = jobs.get(str(job_id)) or self._bank.get("default")
        if not entry:
            raise GenerationFailure(f"No questions available for job {job_id!r}")
        try:
            questions = QuestionSet.model_validate(entry)
        except ValidationError as exc:
            raise GenerationFailure(f"Invalid question bank entry for job {job_id!r}") from exc

        self._logger.debug(
            "generator.sample_selected",
            job_id=job_id,
            mcq_count=len(questions.mcq),
            voice_count=len(questions.voice),
        )
        return questions
