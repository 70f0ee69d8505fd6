"""Selection session limits for long-lived hosts (HTTP layer)."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SessionsConfig(BaseModel):
    ttl_seconds: int = 60 * 60
    max_sessions: int = 64

    model_config = ConfigDict(extra="forbid")
