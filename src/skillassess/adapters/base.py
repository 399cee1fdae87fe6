"""Protocols for the external collaborators the assessment engine consumes."""

from __future__ import annotations

import inspect
from typing import Awaitable, Protocol, TypeVar, runtime_checkable

from ..schemas import QuestionSet, Report, ReportFields, VoiceScores

T = TypeVar("T")


@runtime_checkable
class QuestionGenerator(Protocol):
    """Produces the ordered MCQ and voice question sets for a job.

    Implementations return the full set or raise; partial sets are never
    accepted by the session controller.
    """

    async def generate(self, job_id: str, job_description: str) -> QuestionSet:
        """Return questions tailored to the job."""


@runtime_checkable
class ApplicationStore(Protocol):
    """Owns candidate applications and their report linkage; may be synchronous or asynchronous."""

    def record_report(self, candidate_id: str, job_id: str, fields: ReportFields) -> str | Awaitable[str]:
        """Persist the report, mark the application tested and return the report id."""

    def find_report(self, candidate_id: str, job_id: str) -> Report | None | Awaitable[Report | None]:
        """Return the report already linked to the candidate's application, if any."""


@runtime_checkable
class CaptureHandle(Protocol):
    """Exclusive handle to an open audio capture device."""

    def pause(self) -> None:
        """Suspend capture without finalizing."""

    def resume(self) -> None:
        """Continue a suspended capture."""

    def stop(self) -> str:
        """Finalize the recording, release the device and return an artifact reference."""


@runtime_checkable
class CaptureBoundary(Protocol):
    """Source of capture devices; may be synchronous or asynchronous."""

    def open_device(self) -> CaptureHandle | Awaitable[CaptureHandle]:
        """Acquire the device or raise ``DeviceAccessError``."""


@runtime_checkable
class VoiceEvaluator(Protocol):
    """Scores a recorded answer; may be synchronous or asynchronous."""

    def evaluate(self, audio_ref: str) -> VoiceScores | Awaitable[VoiceScores]:
        """Return clarity, confidence and content quality for the recording."""


async def maybe_await(value: T | Awaitable[T]) -> T:
    """Resolve a collaborator return value that may or may not be awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value
