"""Observability schemas (logging) extracted for modularity."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LoggingConfig(BaseModel):
    level: str = Field("info", pattern="^(debug|info|warn|error)$")
    format: str = Field("json", pattern="^(json|text)$")

    model_config = ConfigDict(extra="forbid")
