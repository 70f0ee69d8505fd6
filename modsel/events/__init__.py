"""Event dataclasses + any-subscriber bridge.

Typed events are emitted through ``modsel.eventbus`` under their class name.
``on(handler)`` registers a handler(name, payload) receiving every event.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from time import time
from typing import Any, Callable, Dict, List, Protocol

from modsel import metrics as _metrics
from modsel.eventbus import emit as _emit_bus

EventHandler = Callable[[str, Dict[str, Any]], None]


class SupportsEvent(Protocol):  # pragma: no cover
    def to_event(self) -> Dict[str, Any]:  # noqa: D401
        ...


@dataclass(slots=True)
class BaseEvent:
    def to_event(self) -> Dict[str, Any]:  # noqa: D401
        data = asdict(self)
        data["ts"] = data.get("ts") or time()
        return data


@dataclass(slots=True)
class CatalogBuilt(BaseEvent):
    """Catalog assembled from a provider.

    dangling: number of modules with at least one unknown dependency id.
    cycles: number of dependency cycles found (data-quality signal only).
    """
    modules: int
    core_id: str
    dangling: int = 0
    cycles: int = 0


@dataclass(slots=True)
class SelectionOpened(BaseEvent):
    session_id: str
    active_count: int


@dataclass(slots=True)
class ModuleToggled(BaseEvent):
    """One user toggle and the ids it changed.

    action: activate|deactivate|ignored (core sentinel)
    cascade: changed ids in visit order (requested id first when changed)
    """
    session_id: str
    module_id: str
    action: str
    cascade: list[str]


@dataclass(slots=True)
class SelectionCommitted(BaseEvent):
    session_id: str
    added: list[str]
    removed: list[str]
    active_count: int


@dataclass(slots=True)
class SelectionDiscarded(BaseEvent):
    session_id: str
    pending_changes: int


_ANY_SUBS: List[EventHandler] = []


def _metrics_collector(
    name: str, payload: Dict[str, Any]
) -> None:  # noqa: D401
    if name == "SelectionCommitted":
        _metrics.inc("selection_commits_total")
    elif name == "SelectionDiscarded":
        _metrics.inc("selection_discards_total")
    elif name == "ModuleToggled":
        _metrics.inc(
            "module_toggles_total",
            {"action": payload.get("action", "unknown")},
        )
    elif name == "CatalogBuilt":
        _metrics.observe("catalog_modules", payload.get("modules", 0))


_ANY_SUBS.append(_metrics_collector)


def emit(ev: BaseEvent | SupportsEvent) -> None:
    name = ev.__class__.__name__
    payload = ev.to_event()
    _emit_bus(name, payload)
    for h in list(_ANY_SUBS):  # copy for isolation
        try:
            h(name, dict(payload))
        except Exception:  # noqa: BLE001
            _metrics.inc("handler_exceptions_total", {"event": name})


def on(handler: EventHandler) -> Callable[[], None]:
    _ANY_SUBS.append(handler)

    def _unsub() -> None:  # noqa: D401
        try:
            _ANY_SUBS.remove(handler)
        except ValueError:
            pass
    return _unsub


def reset_listeners_for_tests() -> None:  # pragma: no cover
    _ANY_SUBS.clear()
    _ANY_SUBS.append(_metrics_collector)


__all__ = [
    "emit",
    "on",
    "CatalogBuilt",
    "SelectionOpened",
    "ModuleToggled",
    "SelectionCommitted",
    "SelectionDiscarded",
    "reset_listeners_for_tests",
]
