"""Answer script schema used to drive a scripted assessment run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AnswerScript(BaseModel):
    """Scripted candidate answers keyed by question id.

    ``voice`` maps each voice question id to the recording length in timer
    units; the recording is stopped after that many ticks unless the maximum
    duration stops it first. With a configured tick interval the engine clock
    supplies the ticks and the run waits for them.
    """

    candidate_id: str
    candidate_name: str | None = None
    mcq: dict[str, int] = Field(default_factory=dict)
    voice: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")
