from __future__ import annotations

from skillassess.adapters import RandomVoiceEvaluator, SampleQuestionGenerator
from skillassess.container import create_container
from skillassess.remote import HTTPQuestionGenerator, HTTPVoiceEvaluator
from skillassess.schemas.config import AppConfig, load_config


def test_create_container_defaults():
    container = create_container()

    controller = container.controller()

    assert isinstance(container.question_generator(), SampleQuestionGenerator)
    assert isinstance(container.voice_evaluator(), RandomVoiceEvaluator)
    assert controller._voice_config.max_duration == 120
    assert controller._config.allow_retake is False
    assert container.application_store() is container.application_store()


def test_create_container_with_overrides():
    container = create_container(
        settings={
            "assessment": {"allow_retake": True},
            "voice": {"max_duration": 90, "tick_interval": 0.5},
            "report": {"strong_threshold": 85.0},
            "evaluator": {"seed": 7},
        }
    )

    controller = container.controller()
    builder = container.report_builder()

    assert controller._config.allow_retake is True
    assert controller._voice_config.max_duration == 90
    assert controller._voice_config.tick_interval == 0.5
    assert builder._config.strong_threshold == 85.0
    assert builder._config.moderate_threshold == 60.0
    assert isinstance(container.voice_evaluator(), RandomVoiceEvaluator)


def test_remote_endpoints_replace_reference_collaborators():
    container = create_container(
        settings={
            "generator": {"endpoint": "http://localhost:9000/questions", "timeout": 3.0},
            "evaluator": {"endpoint": "http://localhost:9000/score", "api_key": "secret"},
        }
    )

    generator = container.question_generator()
    evaluator = container.voice_evaluator()

    assert isinstance(generator, HTTPQuestionGenerator)
    assert generator._timeout == 3.0
    assert isinstance(evaluator, HTTPVoiceEvaluator)
    assert evaluator._api_key == "secret"


def test_load_config_validation():
    data = {
        "voice": {"max_duration": 60},
        "report": {"moderate_threshold": 55},
    }
    app_config = load_config(data)
    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings == {"voice": {"max_duration": 60}, "report": {"moderate_threshold": 55.0}}
