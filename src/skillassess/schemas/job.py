"""Job posting schema consumed by question generation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class JobPosting(BaseModel):
    """Job the candidate is being assessed for."""

    job_id: str
    title: str = ""
    description: str = ""
    requirements: str = ""

    model_config = ConfigDict(extra="allow")

    def generation_text(self) -> str:
        """Text passed to question generators as the job description."""
        parts = [self.title, self.description]
        if self.requirements:
            parts.append(f"Requirements: {self.requirements}")
        return "\n".join(part for part in parts if part)
