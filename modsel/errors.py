"""Central error taxonomy.

Every error code surfaced through exceptions, events or HTTP payloads must be
registered here; unknown codes fail loudly in tests.
"""
from __future__ import annotations

_ALLOWED_ERROR_TYPES = {
    # catalog.build
    "duplicate-module-id",
    "multiple-core-modules",
    "invalid-module-record",
    # config.load
    "config-invalid",
    "config-out-of-range",
    # selection.session
    "session-not-found",
    "session-closed",
    "module-not-found",
    # infra
    "event-handler-error",
}


def validate_error_type(code: str) -> str:
    assert (
        code in _ALLOWED_ERROR_TYPES
    ), f"Unknown error_type '{code}' (not in taxonomy)"
    return code


class ModselError(Exception):
    """Base exception carrying a taxonomy code."""

    error_type = "config-invalid"

    def __init__(self, message: str, error_type: str | None = None):
        super().__init__(message)
        if error_type is not None:
            self.error_type = validate_error_type(error_type)


__all__ = ["validate_error_type", "ModselError"]
