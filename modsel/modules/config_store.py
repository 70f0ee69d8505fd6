"""Configuration store holding the committed list of active module ids."""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol


class ConfigStore(Protocol):  # pragma: no cover
    def list_mods(self) -> Iterable[str]:  # noqa: D401
        ...

    def copy(self, other: "ConfigStore") -> None:  # noqa: D401
        ...


class ModuleConfig:
    """In-memory ConfigStore; insertion order of ids is preserved."""

    def __init__(self, module_ids: Iterable[str] = ()) -> None:
        self._mods: List[str] = list(dict.fromkeys(module_ids))

    @classmethod
    def from_config(cls, cfg: Optional[Any] = None) -> "ModuleConfig":
        if cfg is None:
            from modsel.config import get_config  # local import

            cfg = get_config()
        return cls(cfg.modules.enabled)

    def list_mods(self) -> List[str]:
        return list(self._mods)

    def has_mod(self, module_id: str) -> bool:
        return module_id in self._mods

    def add_mod(self, module_id: str) -> None:
        if module_id not in self._mods:
            self._mods.append(module_id)

    def remove_mod(self, module_id: str) -> None:
        if module_id in self._mods:
            self._mods.remove(module_id)

    def replace(self, module_ids: Iterable[str]) -> None:
        """Overwrite contents in one step."""
        self._mods = list(dict.fromkeys(module_ids))

    def copy(self, other: ConfigStore) -> None:
        self.replace(other.list_mods())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleConfig):
            return NotImplemented
        return set(self._mods) == set(other._mods)

    def __repr__(self) -> str:
        return f"ModuleConfig({self._mods!r})"


__all__ = ["ConfigStore", "ModuleConfig"]
