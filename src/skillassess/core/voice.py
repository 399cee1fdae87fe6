"""Voice response test engine: capture state machine, capped timer and scoring."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum

import structlog

from ..adapters.base import CaptureBoundary, CaptureHandle, VoiceEvaluator, maybe_await
from ..errors import (
    AssessmentStateError,
    DeviceAccessError,
    InvalidTransition,
    NavigationLocked,
    ScoringFailure,
)
from ..schemas import VoiceQuestion, VoiceResult, VoiceScores
from .session import AssessmentSession


class RecordingState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"
    STOPPED = "stopped"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


@dataclass
class VoiceConfig:
    """Timer configuration for voice recordings.

    ``max_duration`` is in timer units. ``tick_interval`` is the wall-clock
    length of one unit in seconds; ``None`` leaves ticking to the host.
    """

    max_duration: int = 120
    tick_interval: float | None = None


@dataclass(slots=True)
class RecordingSlot:
    """Recording progress for a single voice question."""

    question_id: str
    state: RecordingState = RecordingState.IDLE
    elapsed: int = 0
    artifact_ref: str | None = None
    error: str | None = None


@dataclass(slots=True, frozen=True)
class VoiceView:
    """What the voice section shows for the current question."""

    index: int
    count: int
    answered: int
    question: VoiceQuestion
    state: RecordingState
    elapsed: int
    remaining: int
    artifact_ref: str | None
    result: VoiceResult | None
    error: str | None


class VoiceTestEngine:
    """Record, time and score spoken answers for the session's voice questions.

    The engine exclusively owns the capture handle for one recording attempt
    at a time and releases it on manual stop, timer expiry and :meth:`close`.
    Submissions are tagged with the question id captured when they begin, so
    results land on that question even if the user navigates before scoring
    resolves.
    """

    def __init__(
        self,
        session: AssessmentSession,
        *,
        capture: CaptureBoundary,
        evaluator: VoiceEvaluator,
        config: VoiceConfig | None = None,
    ) -> None:
        if not session.voice_questions:
            raise AssessmentStateError("Session has no voice questions")
        self._session = session
        self._capture = capture
        self._evaluator = evaluator
        self._config = config or VoiceConfig()
        self._index = 0
        self._slots: dict[str, RecordingSlot] = {}
        for question in session.voice_questions:
            slot = RecordingSlot(question_id=question.id)
            existing = session.voice_result(question.id)
            if existing is not None:
                slot.state = RecordingState.SUBMITTED
                slot.artifact_ref = existing.audio_ref
            self._slots[question.id] = slot
        self._handle: CaptureHandle | None = None
        self._recording: RecordingSlot | None = None
        self._acquiring = False
        self._closed = False
        self._clock: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()
        self._logger = structlog.get_logger(__name__).bind(
            candidate_id=session.candidate_id, job_id=session.job_id
        )

    @property
    def index(self) -> int:
        return self._index

    @property
    def current_question(self) -> VoiceQuestion:
        return self._session.voice_questions[self._index]

    @property
    def current_slot(self) -> RecordingSlot:
        return self._slots[self.current_question.id]

    @property
    def state(self) -> RecordingState:
        return self.current_slot.state

    @property
    def elapsed(self) -> int:
        return self.current_slot.elapsed

    @property
    def tick_interval(self) -> float | None:
        return self._config.tick_interval

    @property
    def holds_device(self) -> bool:
        return self._handle is not None

    @property
    def pending_submissions(self) -> int:
        return len(self._pending)

    def slot(self, question_id: str) -> RecordingSlot:
        return self._slots[question_id]

    async def start(self) -> None:
        """Acquire the capture device and begin recording the current question."""
        slot = self.current_slot
        if self._closed:
            raise InvalidTransition("start recording", "closed")
        if slot.state is not RecordingState.IDLE or self._acquiring or self._handle is not None:
            raise InvalidTransition("start recording", slot.state.value)

        slot.error = None
        self._acquiring = True
        try:
            handle = await maybe_await(self._capture.open_device())
        except DeviceAccessError as exc:
            slot.error = str(exc)
            self._logger.warning("device.access_denied", question_id=slot.question_id, error=str(exc))
            raise
        except Exception as exc:  # noqa: BLE001
            slot.error = str(exc)
            self._logger.warning("device.access_denied", question_id=slot.question_id, error=str(exc))
            raise DeviceAccessError("Could not access the capture device") from exc
        finally:
            self._acquiring = False

        if self._closed:
            self._release_orphan(handle, slot)
            raise InvalidTransition("start recording", "closed")

        self._handle = handle
        self._recording = slot
        slot.state = RecordingState.RECORDING
        slot.elapsed = 0
        slot.artifact_ref = None
        self._start_clock()
        self._logger.info("voice.recording_started", question_id=slot.question_id)

    def pause(self) -> None:
        slot, handle = self._active_slot("pause", RecordingState.RECORDING)
        self._cancel_clock()
        handle.pause()
        slot.state = RecordingState.PAUSED
        self._logger.info("voice.recording_paused", question_id=slot.question_id, elapsed=slot.elapsed)

    def resume(self) -> None:
        slot, handle = self._active_slot("resume", RecordingState.PAUSED)
        handle.resume()
        slot.state = RecordingState.RECORDING
        self._start_clock()
        self._logger.info("voice.recording_resumed", question_id=slot.question_id, elapsed=slot.elapsed)

    def stop(self) -> str:
        """Finalize the recording and release the device; returns the artifact reference."""
        slot, _ = self._active_slot("stop", RecordingState.RECORDING, RecordingState.PAUSED)
        return self._finish_recording(slot, reason="manual")

    def tick(self) -> bool:
        """Advance the active recording by one time unit.

        Returns False when nothing is recording (paused time does not count).
        Reaching ``max_duration`` stops the recording.
        """
        slot = self._recording
        if slot is None or slot.state is not RecordingState.RECORDING:
            return False
        slot.elapsed += 1
        if slot.elapsed >= self._config.max_duration:
            self._finish_recording(slot, reason="max_duration")
            self._logger.info("voice.auto_stopped", question_id=slot.question_id, elapsed=slot.elapsed)
        return True

    def discard(self) -> None:
        """Drop an unsubmitted recording so the question can be recorded again."""
        slot = self.current_slot
        if slot.state is not RecordingState.STOPPED:
            raise InvalidTransition("discard recording", slot.state.value)
        slot.state = RecordingState.IDLE
        slot.elapsed = 0
        slot.artifact_ref = None
        slot.error = None
        self._logger.info("voice.recording_discarded", question_id=slot.question_id)

    async def submit(self) -> VoiceResult:
        """Score the stopped recording of the current question and store the result."""
        slot, artifact_ref = self._begin_submission()
        return await self._complete_submission(slot, artifact_ref)

    def submit_in_background(self) -> asyncio.Task:
        """Start scoring the current recording without waiting for it."""
        slot, artifact_ref = self._begin_submission()
        task = asyncio.get_running_loop().create_task(self._complete_submission(slot, artifact_ref))
        self._pending.add(task)
        task.add_done_callback(self._submission_done)
        return task

    async def wait_pending(self) -> list[VoiceResult | BaseException]:
        """Wait for every background submission; failures are returned, not raised."""
        if not self._pending:
            return []
        return await asyncio.gather(*list(self._pending), return_exceptions=True)

    def navigate(self, delta: int) -> int:
        if self._recording is not None or self._acquiring:
            raise NavigationLocked("Stop the current recording before changing questions")
        last = len(self._session.voice_questions) - 1
        self._index = min(max(self._index + delta, 0), last)
        return self._index

    def next(self) -> int:
        return self.navigate(1)

    def previous(self) -> int:
        return self.navigate(-1)

    def close(self) -> None:
        """Tear down an in-flight recording, discarding it and releasing the device.

        A device acquisition still in progress is released as soon as it
        completes, and the engine refuses further recordings.
        """
        self._closed = True
        self._cancel_clock()
        handle = self._handle
        slot = self._recording
        self._handle = None
        self._recording = None
        if slot is not None:
            slot.state = RecordingState.IDLE
            slot.elapsed = 0
            slot.artifact_ref = None
        if handle is not None:
            self._logger.info("voice.recording_aborted", question_id=slot.question_id if slot else None)
            handle.stop()

    def view(self) -> VoiceView:
        question = self.current_question
        slot = self._slots[question.id]
        return VoiceView(
            index=self._index,
            count=len(self._session.voice_questions),
            answered=len(self._session.voice_results),
            question=question,
            state=slot.state,
            elapsed=slot.elapsed,
            remaining=max(self._config.max_duration - slot.elapsed, 0),
            artifact_ref=slot.artifact_ref,
            result=self._session.voice_result(question.id),
            error=slot.error,
        )

    def _active_slot(self, action: str, *allowed: RecordingState) -> tuple[RecordingSlot, CaptureHandle]:
        slot = self._recording
        handle = self._handle
        if slot is None or handle is None:
            raise InvalidTransition(action, self.current_slot.state.value)
        if slot.state not in allowed:
            raise InvalidTransition(action, slot.state.value)
        return slot, handle

    def _release_orphan(self, handle: CaptureHandle, slot: RecordingSlot) -> None:
        self._logger.info("voice.recording_aborted", question_id=slot.question_id, reason="closed")
        try:
            handle.stop()
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("voice.finalize_failed", question_id=slot.question_id, error=str(exc))
            raise DeviceAccessError("Recording could not be finalized") from exc

    def _finish_recording(self, slot: RecordingSlot, *, reason: str) -> str:
        handle = self._handle
        self._handle = None
        self._recording = None
        self._cancel_clock()
        if handle is None:
            raise InvalidTransition("stop recording", slot.state.value)
        try:
            artifact_ref = handle.stop()
        except Exception as exc:  # noqa: BLE001
            slot.state = RecordingState.IDLE
            slot.elapsed = 0
            slot.artifact_ref = None
            slot.error = str(exc)
            self._logger.warning("voice.finalize_failed", question_id=slot.question_id, error=str(exc))
            if isinstance(exc, DeviceAccessError):
                raise
            raise DeviceAccessError("Recording could not be finalized") from exc
        slot.artifact_ref = artifact_ref
        slot.state = RecordingState.STOPPED
        self._logger.info(
            "voice.recording_stopped",
            question_id=slot.question_id,
            elapsed=slot.elapsed,
            reason=reason,
        )
        return artifact_ref

    def _begin_submission(self) -> tuple[RecordingSlot, str]:
        slot = self.current_slot
        if slot.state is not RecordingState.STOPPED or slot.artifact_ref is None:
            raise InvalidTransition("submit recording", slot.state.value)
        slot.state = RecordingState.SUBMITTING
        slot.error = None
        self._logger.info("voice.submitting", question_id=slot.question_id)
        return slot, slot.artifact_ref

    async def _complete_submission(self, slot: RecordingSlot, artifact_ref: str) -> VoiceResult:
        try:
            raw = await maybe_await(self._evaluator.evaluate(artifact_ref))
            scores = raw if isinstance(raw, VoiceScores) else VoiceScores.model_validate(raw)
        except Exception as exc:  # noqa: BLE001
            slot.state = RecordingState.STOPPED
            slot.error = str(exc)
            self._logger.warning("voice.scoring_failed", question_id=slot.question_id, error=str(exc))
            raise ScoringFailure(f"Scoring failed for question {slot.question_id!r}") from exc

        result = VoiceResult.from_scores(slot.question_id, artifact_ref, scores)
        replaced = self._session.upsert_voice_result(result)
        slot.state = RecordingState.SUBMITTED
        self._logger.info(
            "voice.submitted",
            question_id=slot.question_id,
            displayed_question_id=self.current_question.id,
            clarity=result.clarity,
            confidence=result.confidence,
            content_quality=result.content_quality,
            replaced=replaced,
        )
        return result

    def _submission_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.warning("voice.background_submission_failed", error=str(exc))

    def _start_clock(self) -> None:
        if self._config.tick_interval is None:
            return
        self._clock = asyncio.get_running_loop().create_task(self._run_clock(self._config.tick_interval))

    def _cancel_clock(self) -> None:
        clock = self._clock
        self._clock = None
        if clock is not None and clock is not asyncio.current_task():
            clock.cancel()

    async def _run_clock(self, interval: float) -> None:
        while self._recording is not None and self._recording.state is RecordingState.RECORDING:
            await asyncio.sleep(interval)
            try:
                self.tick()
            except DeviceAccessError:
                # Timer-driven stop failed; the slot is already back to idle.
                break
