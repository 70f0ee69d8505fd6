"""ActivationSet: working copy of active module ids with closure propagation.

Invariants (hold before and after every public call):
 - activating m leaves every catalog-known dependency of m active,
   transitively (downward closure)
 - deactivating m leaves no active module depending on m, directly or
   transitively (upward closure)
 - the catalog's core module is always a member and never removed

Both traversals are explicit stacks with a per-call visited set, so cyclic
dependency graphs terminate and every id is expanded at most once per call.
Ids without a catalog entry are never added by propagation and never
removed by it; they simply have no edges.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Set, Tuple

from modsel import metrics
from modsel.registry import ModuleCatalog

logger = logging.getLogger("modsel.activation")


class ActivationSet:
    def __init__(
        self, catalog: ModuleCatalog, initial: Iterable[str] = ()
    ) -> None:
        self._catalog = catalog
        self._active: Set[str] = set()
        self.reset_from(initial)

    @property
    def catalog(self) -> ModuleCatalog:
        return self._catalog

    # --- Queries -----------------------------------------------------------
    def is_active(self, module_id: str) -> bool:
        return self._catalog.is_core(module_id) or module_id in self._active

    def __contains__(self, module_id: object) -> bool:
        return isinstance(module_id, str) and self.is_active(module_id)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._active))

    def __len__(self) -> int:
        return len(self._active)

    def closure_violations(self) -> List[Tuple[str, str]]:
        """(module, missing dependency) pairs among catalog-known ids.

        Empty whenever the set was only changed through activate/deactivate
        from a consistent starting snapshot.
        """
        out: List[Tuple[str, str]] = []
        for mid in sorted(self._active):
            if self._catalog.is_core(mid):
                continue
            info = self._catalog.lookup(mid)
            if info is None:
                continue
            for dep in info.dependencies:
                if dep in self._catalog and not self.is_active(dep):
                    out.append((mid, dep))
        return out

    # --- Propagation -------------------------------------------------------
    def activate(self, module_id: str) -> List[str]:
        """Activate ``module_id`` and everything it transitively requires.

        Returns the ids newly added, in depth-first visit order.
        """
        if self._catalog.is_core(module_id):
            return []
        if module_id not in self._catalog:
            logger.debug("activate unknown module %s ignored", module_id)
            return []
        added: List[str] = []
        visited: Set[str] = set()
        stack = [module_id]
        while stack:
            mid = stack.pop()
            if mid in visited:
                continue
            visited.add(mid)
            info = self._catalog.lookup(mid)
            if info is None:
                metrics.inc_dangling_dependency(mid)
                continue
            if not self._catalog.is_core(mid) and mid not in self._active:
                self._active.add(mid)
                added.append(mid)
            # reversed so the first declared dependency is expanded first
            stack.extend(
                d for d in reversed(info.dependencies) if d not in visited
            )
        metrics.inc_propagation("activate", module_id, len(added))
        if added:
            logger.debug("activate %s -> +%s", module_id, added)
        return added

    def deactivate(self, module_id: str) -> List[str]:
        """Deactivate ``module_id`` and every module depending on it.

        Dependents are removed pre-order: each one is taken out before its
        own dependents are looked up against a fresh sorted snapshot of the
        active set. Returns the ids removed, in visit order.
        """
        if self._catalog.is_core(module_id):
            logger.debug("deactivate core module %s ignored", module_id)
            return []
        if module_id not in self._catalog:
            # no edges to follow; only drop a stale id from the snapshot
            if module_id in self._active:
                self._active.discard(module_id)
                metrics.inc_propagation("deactivate", module_id, 1)
                return [module_id]
            return []
        removed: List[str] = []
        visited: Set[str] = set()
        stack = [module_id]
        while stack:
            mid = stack.pop()
            if mid in visited:
                continue
            visited.add(mid)
            if self._catalog.is_core(mid):
                continue
            if mid in self._active:
                self._active.discard(mid)
                removed.append(mid)
            dependents = []
            for active_id in sorted(self._active):
                if active_id in visited:
                    continue
                info = self._catalog.lookup(active_id)
                if info is not None and info.depends_on(mid):
                    dependents.append(active_id)
            stack.extend(reversed(dependents))
        metrics.inc_propagation("deactivate", module_id, len(removed))
        if removed:
            logger.debug("deactivate %s -> -%s", module_id, removed)
        return removed

    def toggle(self, module_id: str) -> List[str]:
        """Flip ``module_id``; returns the ids whose state changed."""
        if self._catalog.is_core(module_id):
            return []
        if self.is_active(module_id):
            return self.deactivate(module_id)
        return self.activate(module_id)

    # --- Data transfer -----------------------------------------------------
    def snapshot(self) -> Set[str]:
        return set(self._active)

    def reset_from(self, module_ids: Iterable[str]) -> None:
        """Replace contents without propagation; core is always re-added."""
        self._active = set(module_ids)
        self._active.add(self._catalog.core_id)


__all__ = ["ActivationSet"]
