"""Report construction and application linkage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal

import pendulum
import structlog

from ..adapters.base import ApplicationStore, maybe_await
from ..errors import ReportAlreadyBuilt, ReportCreationFailure, SubmissionIncomplete
from ..schemas import Report, ReportFields
from .scoring import composite_score, mcq_score, voice_score
from .session import AssessmentSession

PerformanceBand = Literal["strong", "moderate", "developing"]

NARRATIVES: dict[PerformanceBand, str] = {
    "strong": (
        "The candidate demonstrated excellent knowledge and communication skills. "
        "Their responses to technical questions were accurate and comprehensive, "
        "showing strong domain expertise. The candidate's verbal communication was "
        "clear, confident, and well-structured, indicating strong potential for the role."
    ),
    "moderate": (
        "The candidate showed good understanding of the key concepts with some minor "
        "knowledge gaps. Their technical responses were generally accurate. The candidate "
        "communicated clearly but could improve on confidence and depth in some areas. "
        "Overall, they show promising potential for the role with some additional development."
    ),
    "developing": (
        "The candidate demonstrated basic understanding but had significant knowledge gaps "
        "in key areas. Their technical responses lacked depth and precision. The candidate's "
        "verbal communication was hesitant and sometimes unclear. Further development would "
        "be necessary before they are ready for this role."
    ),
}


@dataclass
class ReportConfig:
    """Composite score thresholds (inclusive lower bounds) for narrative bands."""

    strong_threshold: float = 80.0
    moderate_threshold: float = 60.0


class ReportBuilder:
    """Turn a completed session into an immutable report linked to its application."""

    def __init__(
        self,
        *,
        store: ApplicationStore,
        config: ReportConfig | None = None,
        audit_logger: Any | None = None,
        clock: Callable[[], Any] | None = None,
    ) -> None:
        self._store = store
        self._config = config or ReportConfig()
        self._audit_logger = audit_logger
        self._clock = clock or (lambda: pendulum.now("UTC"))
        self._logger = structlog.get_logger(__name__)

    def band(self, composite: float) -> PerformanceBand:
        if composite >= self._config.strong_threshold:
            return "strong"
        if composite >= self._config.moderate_threshold:
            return "moderate"
        return "developing"

    def narrative(self, mcq: float, voice: float) -> str:
        return NARRATIVES[self.band(composite_score(mcq, voice))]

    async def build_report(self, session: AssessmentSession) -> Report:
        if session.completed:
            raise ReportAlreadyBuilt(
                f"Report {session.report_id!r} already built for candidate "
                f"{session.candidate_id!r} and job {session.job_id!r}"
            )
        if not session.is_complete:
            raise SubmissionIncomplete(
                mcq_answered=len(session.mcq_results),
                mcq_total=len(session.mcq_questions),
                voice_answered=len(session.voice_results),
                voice_total=len(session.voice_questions),
            )

        mcq = mcq_score(session.mcq_results, len(session.mcq_questions))
        voice = voice_score(session.voice_results)
        fields = ReportFields(
            candidate_id=session.candidate_id,
            job_id=session.job_id,
            mcq_score=mcq,
            voice_score=voice,
            summary=self.narrative(mcq, voice),
            timestamp=self._clock(),
            mcq_results=list(session.mcq_results),
            voice_results=list(session.voice_results),
        )

        try:
            report_id = await maybe_await(
                self._store.record_report(session.candidate_id, session.job_id, fields)
            )
        except Exception as exc:  # noqa: BLE001
            self._logger.error(
                "report.creation_failed",
                candidate_id=session.candidate_id,
                job_id=session.job_id,
                error=str(exc),
            )
            raise ReportCreationFailure(
                f"Could not record report for candidate {session.candidate_id!r} "
                f"and job {session.job_id!r}"
            ) from exc

        report = Report.from_fields(str(report_id), fields)
        session.mark_completed(report.id)

        self._logger.info(
            "report.created",
            report_id=report.id,
            candidate_id=report.candidate_id,
            job_id=report.job_id,
            mcq_score=report.mcq_score,
            voice_score=report.voice_score,
            band=self.band(report.composite_score),
        )
        if self._audit_logger is not None:
            self._audit_logger.append(
                {
                    "report_id": report.id,
                    "candidate_id": report.candidate_id,
                    "job_id": report.job_id,
                    "mcq_score": report.mcq_score,
                    "voice_score": report.voice_score,
                    "composite_score": report.composite_score,
                    "band": self.band(report.composite_score),
                    "timestamp": report.timestamp.isoformat(),
                }
            )
        return report
