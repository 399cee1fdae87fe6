"""Typer CLI entrypoint for scripted assessment runs."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from dependency_injector import providers
from pydantic import ValidationError

from .container import create_container
from .errors import AssessmentError
from .logging import configure_logging
from .pipeline import AuditLogger
from .schemas.config import load_config

app = typer.Typer(help="Candidate skills assessment CLI.")


@app.command()
def run(
    job: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job posting JSON/YAML path."),
    script: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, help="Candidate answer script JSON/YAML path."
    ),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output report JSON path.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Run a scripted assessment and write the resulting report."""
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        try:
            settings = load_config(loaded).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(f"Invalid config: {exc}", param_name="config") from exc

    configure_logging(log_level)

    container = create_container(settings=settings)
    if audit_log:
        container.audit_logger.override(providers.Object(AuditLogger(audit_log)))
    pipeline = container.pipeline()

    try:
        report = asyncio.run(pipeline.run(job_path=job, script_path=script, output_path=output))
    except AssessmentError as exc:
        typer.echo(f"Assessment failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        f"Report {report.id}: mcq {report.mcq_score:.1f}, voice {report.voice_score:.1f}. "
        f"Saved to {output}."
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
