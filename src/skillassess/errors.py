"""Exception hierarchy for the assessment engine."""

from __future__ import annotations


class AssessmentError(Exception):
    """Base class for all assessment engine errors."""


class DeviceAccessError(AssessmentError):
    """Raised when the capture device cannot be acquired or fails mid-recording.

    Recoverable: the affected recording slot is left idle and the user may retry.
    """


class GenerationFailure(AssessmentError):
    """Raised when question generation fails or yields an unusable set."""


class SubmissionIncomplete(AssessmentError):
    """Raised when finalization is requested before both sections are complete."""

    def __init__(
        self,
        *,
        mcq_answered: int,
        mcq_total: int,
        voice_answered: int,
        voice_total: int,
    ) -> None:
        super().__init__("Assessment is incomplete")
        self.mcq_answered = mcq_answered
        self.mcq_total = mcq_total
        self.voice_answered = voice_answered
        self.voice_total = voice_total

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            "Assessment is incomplete: "
            f"mcq {self.mcq_answered}/{self.mcq_total}, "
            f"voice {self.voice_answered}/{self.voice_total}"
        )


class ReportCreationFailure(AssessmentError):
    """Raised when the application store rejects the report or its linkage."""


class ScoringFailure(AssessmentError):
    """Raised when the voice scoring capability fails for a recording."""


class AssessmentStateError(AssessmentError, RuntimeError):
    """Raised when an operation is invoked in a state that does not allow it."""


class InvalidTransition(AssessmentStateError):
    """Raised for an illegal voice recording state transition."""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(f"Cannot {action} while {state}")
        self.action = action
        self.state = state


class NavigationLocked(AssessmentStateError):
    """Raised when navigation is attempted during an active recording."""


class ReportAlreadyBuilt(AssessmentStateError):
    """Raised when a report is requested for a session that is already terminal."""


class QuestionsNotLoaded(AssessmentStateError):
    """Raised when test engines are requested before questions are generated."""


class AssessmentClosed(AssessmentStateError):
    """Raised when starting an assessment that already produced a report."""


class InvalidSelection(AssessmentError, ValueError):
    """Raised when an MCQ option index is outside the question's options."""


class UnknownQuestion(AssessmentError, ValueError):
    """Raised when a result references a question not in the session."""


__all__ = [
    "AssessmentError",
    "AssessmentClosed",
    "AssessmentStateError",
    "DeviceAccessError",
    "GenerationFailure",
    "InvalidSelection",
    "InvalidTransition",
    "NavigationLocked",
    "QuestionsNotLoaded",
    "ReportAlreadyBuilt",
    "ReportCreationFailure",
    "ScoringFailure",
    "SubmissionIncomplete",
    "UnknownQuestion",
]
