"""Module selection schema: enabled ids, core id and declared modules."""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ModulesConfig(BaseModel):
    enabled: List[str] = Field(default_factory=list)
    core_id: str = "core"
    # Raw module records; validated into ModuleInfo by the static provider.
    available: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
