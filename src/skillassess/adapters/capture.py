"""In-process capture boundary for scripted runs and tests."""

from __future__ import annotations

import itertools

import structlog

from ..errors import DeviceAccessError


class ScriptedHandle:
    """Capture handle that records lifecycle calls instead of audio."""

    def __init__(self, artifact_ref: str, *, owner: "ScriptedCapture") -> None:
        self.artifact_ref = artifact_ref
        self.paused = False
        self.released = False
        self.calls: list[str] = []
        self._owner = owner

    def pause(self) -> None:
        self.calls.append("pause")
        self.paused = True

    def resume(self) -> None:
        self.calls.append("resume")
        self.paused = False

    def stop(self) -> str:
        if self.released:
            raise DeviceAccessError("Capture handle already released")
        self.calls.append("stop")
        self.released = True
        self._owner._release(self)
        return self.artifact_ref


class ScriptedCapture:
    """Capture boundary handing out :class:`ScriptedHandle` instances.

    ``deny`` makes every acquisition fail; ``failures`` makes only the next
    that many acquisitions fail, which models a permission prompt the user
    later accepts.
    """

    def __init__(self, *, deny: bool = False, failures: int = 0, prefix: str = "memory://recording") -> None:
        self.deny = deny
        self._failures = failures
        self._prefix = prefix
        self._counter = itertools.count(1)
        self.opened: list[ScriptedHandle] = []
        self.active: list[ScriptedHandle] = []
        self._logger = structlog.get_logger(__name__)

    def open_device(self) -> ScriptedHandle:
        if self.deny or self._failures > 0:
            self._failures = max(self._failures - 1, 0)
            self._logger.info("capture.denied")
            raise DeviceAccessError("Microphone access was denied")
        handle = ScriptedHandle(f"{self._prefix}-{next(self._counter)}", owner=self)
        self.opened.append(handle)
        self.active.append(handle)
        return handle

    def _release(self, handle: ScriptedHandle) -> None:
        if handle in self.active:
            self.active.remove(handle)
