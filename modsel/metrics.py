"""Minimal in-memory metrics collector.

Purpose:
    - Counters and simple samples describing selection activity.
    - Zero external deps; can be swapped by a Prometheus exporter later.

Core API (intentionally tiny):
    inc(name, labels=None, value=1)
    observe(name, value, labels=None)
    snapshot() -> dict (copy for safe reading)

Thread-safety: coarse RLock; overhead negligible for low event volume.

Selection related metric names (documented for discoverability):
    - module_activations_total{module}
    - module_deactivations_total{module}
    - propagation_cascade_size{op}
    - dangling_dependency_skipped_total{dependency}
    - selection_commits_total
    - selection_discards_total
    - session_closed_ops_total{op}
    - env_override_total{path}
    - config_validation_errors_total{path,code}
    - events_emitted_total{event}, handler_exceptions_total{event}
    - api_request_total{route,method}, api_request_latency_ms{route,method}
"""
from __future__ import annotations

from threading import RLock
from time import time
from typing import Any, Dict, Tuple

_COUNTERS: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], float] = {}
_HIST: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], list] = {}
_LOCK = RLock()


def _norm_labels(labels: dict[str, Any] | None) -> Tuple[Tuple[str, str], ...]:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _label_suffix(labels: Tuple[Tuple[str, str], ...]) -> str:
    if not labels:
        return ""
    return "{" + ",".join(f"{k}={v}" for k, v in labels) + "}"


def inc(
    name: str,
    labels: dict[str, Any] | None = None,
    value: float = 1.0,
) -> None:
    key = (name, _norm_labels(labels))
    with _LOCK:
        _COUNTERS[key] = _COUNTERS.get(key, 0.0) + value


def observe(
    name: str,
    value: float,
    labels: dict[str, Any] | None = None,
) -> None:
    key = (name, _norm_labels(labels))
    with _LOCK:
        _HIST.setdefault(key, []).append(value)


def counter_value(name: str, labels: dict[str, Any] | None = None) -> float:
    """Current value of one counter series (0.0 when never incremented)."""
    with _LOCK:
        return _COUNTERS.get((name, _norm_labels(labels)), 0.0)


def snapshot() -> dict[str, Any]:
    with _LOCK:
        counters: dict[str, float] = {}
        for (name, labels), v in _COUNTERS.items():
            counters[name + _label_suffix(labels)] = v
        hist = {}
        for (name, labels), vals in _HIST.items():
            if not vals:
                continue
            ordered = sorted(vals)
            hist[name + _label_suffix(labels)] = {
                "count": len(vals),
                "min": ordered[0],
                "max": ordered[-1],
                "p50": ordered[len(ordered) // 2],
                "last": vals[-1],
            }
        return {
            "ts": time(),
            "counters": counters,
            "histograms": hist,
        }


def reset_for_tests() -> None:  # pragma: no cover
    with _LOCK:
        _COUNTERS.clear()
        _HIST.clear()


__all__ = [
    "inc",
    "observe",
    "counter_value",
    "snapshot",
    "reset_for_tests",
]


# ------------------- Helper wrappers (selection) -------------------

def inc_propagation(op: str, module_id: str, cascade: int) -> None:
    """Count one activate/deactivate call and record how many ids changed.

    op: activate|deactivate
    """
    noun = "activations" if op == "activate" else "deactivations"
    inc(f"module_{noun}_total", {"module": module_id})
    observe("propagation_cascade_size", float(cascade), {"op": op})


def inc_dangling_dependency(dependency_id: str) -> None:
    """A declared dependency id has no catalog entry and was skipped."""
    if dependency_id:
        inc("dangling_dependency_skipped_total", {"dependency": dependency_id})


def inc_session_closed_op(op: str) -> None:
    """Operation attempted on an already committed/discarded session."""
    inc("session_closed_ops_total", {"op": op})


__all__ += [
    "inc_propagation",
    "inc_dangling_dependency",
    "inc_session_closed_op",
]
