"""HTTP clients for remote question generation and voice scoring services."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from urllib import error, request

import structlog
from pydantic import ValidationError

from .errors import GenerationFailure, ScoringFailure
from .schemas import QuestionSet, VoiceScores


class _JSONEndpoint:
    """Blocking JSON POST helper shared by the remote clients."""

    def __init__(self, endpoint: str, api_key: str | None = None, *, timeout: float = 10.0):
        self._endpoint = endpoint
        self._api_key = api_key
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        req = request.Request(self._endpoint, data=data, headers=headers, method="POST")
        with request.urlopen(req, timeout=self._timeout) as resp:
            body = resp.read().decode("utf-8")
        decoded = json.loads(body) if body else {}
        if not isinstance(decoded, dict):
            raise ValueError("Response body must be a JSON object")
        return decoded


class HTTPQuestionGenerator(_JSONEndpoint):
    """Question generator calling a remote service.

    The service receives ``{"job_id", "job_description"}`` and must answer
    with ``{"mcq": [...], "voice": [...]}`` in the :class:`QuestionSet` shape.
    """

    async def generate(self, job_id: str, job_description: str) -> QuestionSet:
        payload = {"job_id": job_id, "job_description": job_description}
        try:
            body = await asyncio.to_thread(self._post, payload)
        except (error.URLError, TimeoutError, ValueError) as exc:
            self._logger.warning("generator.request_failed", job_id=job_id, error=str(exc))
            raise GenerationFailure(f"Question service request failed for job {job_id!r}") from exc
        try:
            return QuestionSet.model_validate(body)
        except ValidationError as exc:
            raise GenerationFailure(f"Question service returned an invalid set for job {job_id!r}") from exc


class HTTPVoiceEvaluator(_JSONEndpoint):
    """Voice evaluator calling a remote scoring service.

    The service receives ``{"audio_ref"}`` and answers with ``clarity``,
    ``confidence`` and ``content_quality`` in [0, 5].
    """

    async def evaluate(self, audio_ref: str) -> VoiceScores:
        try:
            body = await asyncio.to_thread(self._post, {"audio_ref": audio_ref})
        except (error.URLError, TimeoutError, ValueError) as exc:
            self._logger.warning("evaluator.request_failed", audio_ref=audio_ref, error=str(exc))
            raise ScoringFailure(f"Scoring service request failed for {audio_ref!r}") from exc
        try:
            return VoiceScores.model_validate(body)
        except ValidationError as exc:
            raise ScoringFailure(f"Scoring service returned invalid scores for {audio_ref!r}") from exc
