"""Module discovery providers.

The catalog never looks modules up on its own: a provider hands over the
full set of records once, at catalog construction.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Protocol, Union

from pydantic import ValidationError

from .exceptions import CatalogError
from .module_info import ModuleInfo

ModuleRecord = Union[ModuleInfo, Mapping[str, Any]]


class ModuleProvider(Protocol):  # pragma: no cover
    def modules(self) -> Iterable[ModuleInfo]:  # noqa: D401
        ...


def _coerce(record: ModuleRecord, position: int) -> ModuleInfo:
    if isinstance(record, ModuleInfo):
        return record
    try:
        return ModuleInfo.model_validate(dict(record))
    except (ValidationError, TypeError, ValueError) as e:
        label = record.get("id") if isinstance(record, Mapping) else None
        raise CatalogError(
            f"Invalid module record #{position} ({label or '?'}): {e}",
            "invalid-module-record",
        ) from e


class StaticModuleProvider:
    """Provider over an in-memory list of records (dicts or ModuleInfo)."""

    def __init__(self, records: Iterable[ModuleRecord]) -> None:
        self._modules: List[ModuleInfo] = [
            _coerce(rec, i) for i, rec in enumerate(records)
        ]

    def modules(self) -> List[ModuleInfo]:
        return list(self._modules)


def provider_from_config(cfg: Optional[Any] = None) -> StaticModuleProvider:
    """Provider over `modules.available` of the application config."""
    if cfg is None:
        from modsel.config import get_config  # local import

        cfg = get_config()
    return StaticModuleProvider(cfg.modules.available)


__all__ = [
    "ModuleProvider",
    "ModuleRecord",
    "StaticModuleProvider",
    "provider_from_config",
]
