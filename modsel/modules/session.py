"""SelectionSession: one module-selection dialog lifetime.

Open -> toggle* -> commit | discard. The session works on its own
ActivationSet copied from the store at open; the store is written exactly
once, on commit. Once closed, further calls are ignored (logged and counted)
rather than raised, so a late click from the presentation layer is harmless.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

from modsel import metrics
from modsel.errors import validate_error_type
from modsel.events import (
    ModuleToggled,
    SelectionCommitted,
    SelectionDiscarded,
    SelectionOpened,
    emit,
)
from modsel.registry import ModuleCatalog, ModuleInfo

from .activation import ActivationSet
from .config_store import ConfigStore, ModuleConfig

logger = logging.getLogger("modsel.session")


@dataclass(frozen=True, slots=True)
class ModuleEntry:
    id: str
    display_name: str
    description: str
    active: bool
    toggleable: bool


class SelectionSession:
    def __init__(
        self,
        catalog: ModuleCatalog,
        store: ConfigStore,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self._catalog = catalog
        self._store = store
        self._initial: List[str] = list(dict.fromkeys(store.list_mods()))
        self._active = ActivationSet(catalog, self._initial)
        self._closed = False
        emit(
            SelectionOpened(
                session_id=self.session_id, active_count=len(self._active)
            )
        )

    @property
    def catalog(self) -> ModuleCatalog:
        return self._catalog

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Presentation queries ----------------------------------------------
    def is_active(self, module_id: str) -> bool:
        return self._active.is_active(module_id)

    def _entry(self, info: ModuleInfo) -> ModuleEntry:
        return ModuleEntry(
            id=info.id,
            display_name=info.display_name,
            description=info.description,
            active=self._active.is_active(info.id),
            toggleable=not self._catalog.is_core(info.id),
        )

    def entries(self) -> List[ModuleEntry]:
        return [self._entry(m) for m in self._catalog.all_modules()]

    def entry(self, module_id: str) -> Optional[ModuleEntry]:
        info = self._catalog.lookup(module_id)
        if info is None:
            return None
        return self._entry(info)

    def changes(self) -> Tuple[List[str], List[str]]:
        """(added, removed) relative to the store contents at open."""
        initial = set(self._initial) | {self._catalog.core_id}
        current = self._active.snapshot()
        return sorted(current - initial), sorted(initial - current)

    # --- Mutation ------------------------------------------------------------
    def toggle(self, module_id: str) -> List[str]:
        if self._closed:
            self._ignore_closed("toggle")
            return []
        if self._catalog.is_core(module_id):
            action = "ignored"
            changed: List[str] = []
        elif self._active.is_active(module_id):
            action = "deactivate"
            changed = self._active.deactivate(module_id)
        else:
            action = "activate"
            changed = self._active.activate(module_id)
        emit(
            ModuleToggled(
                session_id=self.session_id,
                module_id=module_id,
                action=action,
                cascade=list(changed),
            )
        )
        return changed

    def commit(self) -> bool:
        """Overwrite the store with the working set; closes the session."""
        if self._closed:
            self._ignore_closed("commit")
            return False
        added, removed = self.changes()
        current = self._active.snapshot()
        ordered = [m for m in self._initial if m in current]
        ordered += sorted(current - set(ordered))
        self._store.copy(ModuleConfig(ordered))
        self._closed = True
        logger.info(
            "selection committed session=%s added=%s removed=%s",
            self.session_id,
            added,
            removed,
        )
        emit(
            SelectionCommitted(
                session_id=self.session_id,
                added=added,
                removed=removed,
                active_count=len(ordered),
            )
        )
        return True

    def discard(self) -> bool:
        """Close without touching the store."""
        if self._closed:
            self._ignore_closed("discard")
            return False
        added, removed = self.changes()
        self._closed = True
        emit(
            SelectionDiscarded(
                session_id=self.session_id,
                pending_changes=len(added) + len(removed),
            )
        )
        return True

    def _ignore_closed(self, op: str) -> None:
        metrics.inc_session_closed_op(op)
        logger.warning(
            "%s on closed session %s ignored", op, self.session_id,
            extra={
                "session_id": self.session_id,
                "error_type": validate_error_type("session-closed"),
            },
        )


__all__ = ["ModuleEntry", "SelectionSession"]
