"""Module record schema."""
from __future__ import annotations

from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# Reserved id of the always-active engine module.
CORE_MODULE_ID = "core"


class ModuleInfo(BaseModel):
    id: str
    display_name: str = ""
    description: str = ""
    dependencies: Tuple[str, ...] = ()
    core: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("id")
    @classmethod
    def _id_not_empty(cls, v: str) -> str:  # noqa: D401
        if not v.strip():
            raise ValueError("id cannot be empty")
        return v

    @field_validator("dependencies", mode="before")
    @classmethod
    def _dedupe_dependencies(cls, v: Any) -> Any:  # noqa: D401
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (set, frozenset)):
            v = sorted(v)
        return tuple(dict.fromkeys(v))

    @model_validator(mode="before")
    @classmethod
    def _default_display_name(cls, data: Any) -> Any:  # noqa: D401
        if isinstance(data, dict) and not data.get("display_name"):
            data = dict(data)
            data["display_name"] = data.get("id", "")
        return data

    def depends_on(self, module_id: str) -> bool:
        return module_id in self.dependencies
