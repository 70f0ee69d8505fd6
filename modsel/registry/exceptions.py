"""Catalog related exception hierarchy."""
from __future__ import annotations

from modsel.errors import ModselError


class CatalogError(ModselError):
    """Raised when a catalog cannot be built from the supplied records.

    Typical reasons: duplicate module id, two modules flagged core,
    a record failing schema validation.
    """

    error_type = "invalid-module-record"
