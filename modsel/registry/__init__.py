"""Module registry: record schema, discovery providers and the catalog.

Responsibilities:
- Validate module records (ModuleInfo)
- Accept records from a provider (no filesystem scanning here)
- Provide lookup by id and presentation ordering (ModuleCatalog)
"""
from .catalog import ModuleCatalog  # noqa: F401
from .exceptions import CatalogError  # noqa: F401
from .module_info import CORE_MODULE_ID, ModuleInfo  # noqa: F401
from .provider import (  # noqa: F401
    ModuleProvider,
    StaticModuleProvider,
    provider_from_config,
)

__all__ = [
    "CORE_MODULE_ID",
    "CatalogError",
    "ModuleCatalog",
    "ModuleInfo",
    "ModuleProvider",
    "StaticModuleProvider",
    "provider_from_config",
]
