"""In-memory application store with report linkage."""

from __future__ import annotations

import uuid
from typing import Callable

import structlog

from ..schemas import Application, Report, ReportFields


class InMemoryApplicationStore:
    """Application store keeping applications and reports in process memory."""

    def __init__(self, *, id_factory: Callable[[], str] | None = None) -> None:
        self._applications: dict[tuple[str, str], Application] = {}
        self._reports: dict[str, Report] = {}
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._logger = structlog.get_logger(__name__)

    def apply(self, candidate_id: str, job_id: str, *, candidate_name: str | None = None) -> Application:
        """Register an application; an existing one for the pair is returned unchanged."""
        key = (candidate_id, job_id)
        existing = self._applications.get(key)
        if existing is not None:
            return existing
        application = Application(
            id=self._id_factory(),
            candidate_id=candidate_id,
            job_id=job_id,
            candidate_name=candidate_name,
        )
        self._applications[key] = application
        return application

    def get_application(self, candidate_id: str, job_id: str) -> Application | None:
        return self._applications.get((candidate_id, job_id))

    def applications(self) -> list[Application]:
        return list(self._applications.values())

    def record_report(self, candidate_id: str, job_id: str, fields: ReportFields) -> str:
        key = (candidate_id, job_id)
        application = self._applications.get(key)
        if application is None:
            raise LookupError(f"No application for candidate {candidate_id!r} and job {job_id!r}")

        report_id = self._id_factory()
        self._reports[report_id] = Report.from_fields(report_id, fields)
        self._applications[key] = application.model_copy(
            update={"test_taken": True, "report_id": report_id}
        )
        self._logger.info(
            "store.report_recorded",
            candidate_id=candidate_id,
            job_id=job_id,
            report_id=report_id,
        )
        return report_id

    def find_report(self, candidate_id: str, job_id: str) -> Report | None:
        application = self._applications.get((candidate_id, job_id))
        if application is None or application.report_id is None:
            return None
        return self._reports.get(application.report_id)

    def get_report(self, report_id: str) -> Report | None:
        return self._reports.get(report_id)
