"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


class AssessmentSection(BaseModel):
    allow_retake: bool | None = None


class VoiceSection(BaseModel):
    max_duration: int | None = Field(default=None, gt=0)
    tick_interval: float | None = Field(default=None, gt=0)


class ReportSection(BaseModel):
    strong_threshold: float | None = None
    moderate_threshold: float | None = None


class GeneratorSection(BaseModel):
    endpoint: str | None = None
    api_key: str | None = None
    timeout: float | None = None
    delay: float | None = Field(default=None, ge=0)


class EvaluatorSection(BaseModel):
    endpoint: str | None = None
    api_key: str | None = None
    timeout: float | None = None
    seed: int | None = None


class AppConfig(BaseModel):
    assessment: AssessmentSection = Field(default_factory=AssessmentSection)
    voice: VoiceSection = Field(default_factory=VoiceSection)
    report: ReportSection = Field(default_factory=ReportSection)
    generator: GeneratorSection = Field(default_factory=GeneratorSection)
    evaluator: EvaluatorSection = Field(default_factory=EvaluatorSection)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for name in ("assessment", "voice", "report", "generator", "evaluator"):
            section = getattr(self, name).model_dump(exclude_none=True)
            if section:
                settings[name] = section
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
