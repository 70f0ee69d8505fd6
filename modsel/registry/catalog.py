"""ModuleCatalog: read-only index of known modules and their dependency edges.

Built once per host from a ModuleProvider; never mutated afterwards.

Responsibilities:
 - O(1) lookup by id (dangling dependency ids simply resolve to None)
 - Deciding which id is the protected core module (single place)
 - Presentation ordering: display name, then id, core excluded
 - Data-quality diagnostics (dangling references, dependency cycles),
   logged as warnings, never raised
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from modsel.events import CatalogBuilt, emit
from modsel.graph import find_cycles

from .exceptions import CatalogError
from .module_info import CORE_MODULE_ID, ModuleInfo
from .provider import ModuleProvider

logger = logging.getLogger("modsel.catalog")


class ModuleCatalog:
    def __init__(
        self,
        modules: Iterable[ModuleInfo],
        core_id: str = CORE_MODULE_ID,
    ) -> None:
        index: Dict[str, ModuleInfo] = {}
        for module in modules:
            if module.id in index:
                raise CatalogError(
                    f"Duplicate module id in catalog: {module.id}",
                    "duplicate-module-id",
                )
            index[module.id] = module
        flagged = sorted(m.id for m in index.values() if m.core)
        if len(flagged) > 1:
            raise CatalogError(
                f"More than one module flagged core: {flagged}",
                "multiple-core-modules",
            )
        self._index = index
        self._core_id = flagged[0] if flagged else core_id
        self._ordered: List[ModuleInfo] = sorted(
            (m for m in index.values() if m.id != self._core_id),
            key=lambda m: (m.display_name, m.id),
        )
        dependents: Dict[str, List[str]] = {}
        for m in index.values():
            for dep in m.dependencies:
                dependents.setdefault(dep, []).append(m.id)
        self._dependents = {k: sorted(v) for k, v in dependents.items()}
        self._report_quality()

    @classmethod
    def from_provider(
        cls,
        provider: ModuleProvider,
        core_id: str = CORE_MODULE_ID,
    ) -> "ModuleCatalog":
        return cls(provider.modules(), core_id=core_id)

    # --- Core sentinel -----------------------------------------------------
    @property
    def core_id(self) -> str:
        return self._core_id

    def is_core(self, module_id: str) -> bool:
        return module_id == self._core_id

    # --- Lookup ------------------------------------------------------------
    def lookup(self, module_id: str) -> Optional[ModuleInfo]:
        return self._index.get(module_id)

    def all_modules(self) -> List[ModuleInfo]:
        """Modules in presentation order, core sentinel excluded."""
        return list(self._ordered)

    def ids(self) -> List[str]:
        return sorted(self._index)

    def dependents(self, module_id: str) -> List[str]:
        """Ids that directly declare ``module_id`` as a dependency."""
        return list(self._dependents.get(module_id, ()))

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[ModuleInfo]:
        return iter(self.all_modules())

    # --- Diagnostics -------------------------------------------------------
    def dangling_dependencies(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for mid in sorted(self._index):
            missing = [
                d for d in self._index[mid].dependencies if d not in self._index
            ]
            if missing:
                out[mid] = missing
        return out

    def dependency_cycles(self) -> List[List[str]]:
        graph = {
            mid: [d for d in m.dependencies if d in self._index]
            for mid, m in self._index.items()
        }
        return find_cycles(graph)

    def _report_quality(self) -> None:
        dangling = self.dangling_dependencies()
        cycles = self.dependency_cycles()
        for mid, missing in dangling.items():
            logger.warning(
                "module %s declares unknown dependencies %s (skipped)",
                mid,
                missing,
            )
        for cycle in cycles:
            logger.warning("dependency cycle: %s", " -> ".join(cycle))
        logger.debug(
            "catalog built modules=%d core=%s", len(self._index), self._core_id
        )
        emit(
            CatalogBuilt(
                modules=len(self._index),
                core_id=self._core_id,
                dangling=len(dangling),
                cycles=len(cycles),
            )
        )


__all__ = ["ModuleCatalog"]
