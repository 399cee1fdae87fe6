"""Dependency injection container for the assessment engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .adapters import (
    InMemoryApplicationStore,
    RandomVoiceEvaluator,
    SampleQuestionGenerator,
    ScriptedCapture,
)
from .core import (
    AssessmentController,
    ControllerConfig,
    ReportBuilder,
    ReportConfig,
    VoiceConfig,
)
from .pipeline import AssessmentPipeline
from .remote import HTTPQuestionGenerator, HTTPVoiceEvaluator


class AssessmentContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    question_generator = providers.Singleton(SampleQuestionGenerator)
    application_store = providers.Singleton(InMemoryApplicationStore)
    capture = providers.Singleton(ScriptedCapture)
    voice_evaluator = providers.Singleton(RandomVoiceEvaluator)

    voice_config = providers.Singleton(VoiceConfig)
    report_config = providers.Singleton(ReportConfig)
    controller_config = providers.Singleton(ControllerConfig)

    audit_logger = providers.Object(None)

    report_builder = providers.Singleton(
        ReportBuilder,
        store=application_store,
        config=report_config,
        audit_logger=audit_logger,
    )

    controller = providers.Factory(
        AssessmentController,
        generator=question_generator,
        store=application_store,
        capture=capture,
        evaluator=voice_evaluator,
        report_builder=report_builder,
        voice_config=voice_config,
        config=controller_config,
    )

    pipeline = providers.Factory(
        AssessmentPipeline,
        controller_factory=controller.provider,
        store=application_store,
    )


def create_container(*, settings: dict | None = None) -> AssessmentContainer:
    """Instantiate container with optional overrides."""

    container = AssessmentContainer()

    if not settings:
        return container

    if "assessment" in settings:
        controller_config = ControllerConfig(**settings["assessment"])
        container.controller_config.override(providers.Object(controller_config))

    if "voice" in settings:
        voice_config = VoiceConfig(**settings["voice"])
        container.voice_config.override(providers.Object(voice_config))

    if "report" in settings:
        report_config = ReportConfig(**settings["report"])
        container.report_config.override(providers.Object(report_config))

    generator_settings = dict(settings.get("generator") or {})
    if generator_settings.get("endpoint"):
        container.question_generator.override(
            providers.Singleton(
                HTTPQuestionGenerator,
                generator_settings["endpoint"],
                generator_settings.get("api_key"),
                timeout=generator_settings.get("timeout") or 10.0,
            )
        )
    elif "delay" in generator_settings:
        container.question_generator.override(
            providers.Singleton(SampleQuestionGenerator, delay=generator_settings["delay"])
        )

    evaluator_settings = dict(settings.get("evaluator") or {})
    if evaluator_settings.get("endpoint"):
        container.voice_evaluator.override(
            providers.Singleton(
                HTTPVoiceEvaluator,
                evaluator_settings["endpoint"],
                evaluator_settings.get("api_key"),
                timeout=evaluator_settings.get("timeout") or 10.0,
            )
        )
    elif "seed" in evaluator_settings:
        container.voice_evaluator.override(
            providers.Singleton(RandomVoiceEvaluator, seed=evaluator_settings["seed"])
        )

    return container
