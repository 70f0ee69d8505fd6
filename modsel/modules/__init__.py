from .activation import ActivationSet
from .config_store import ConfigStore, ModuleConfig
from .session import ModuleEntry, SelectionSession

__all__ = [
    "ActivationSet",
    "ConfigStore",
    "ModuleConfig",
    "ModuleEntry",
    "SelectionSession",
]
