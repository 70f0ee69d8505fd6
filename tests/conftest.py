"""Pytest configuration ensuring project root and src/ are importable.

Each test gets its own config directory (MODSEL_CONFIG_DIR) pointing at an
empty tmp dir unless the test writes a base.yaml there, so the repository's
configs/ never leaks into unit tests.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _isolate_config_env(tmp_path_factory):  # noqa: D401
    """Clear config cache and point MODSEL_CONFIG_DIR at a fresh dir."""
    from modsel.config import clear_config_cache  # local import

    prev = os.environ.get("MODSEL_CONFIG_DIR")
    cfg_dir = tmp_path_factory.mktemp("configs")
    os.environ["MODSEL_CONFIG_DIR"] = str(cfg_dir)
    clear_config_cache()
    try:
        yield cfg_dir
    finally:
        clear_config_cache()
        if prev is None:
            os.environ.pop("MODSEL_CONFIG_DIR", None)
        else:
            os.environ["MODSEL_CONFIG_DIR"] = prev


@pytest.fixture
def config_dir(_isolate_config_env) -> Path:
    return _isolate_config_env


@pytest.fixture
def make_catalog():
    """Build a catalog from ``{id: [deps]}`` (plus a core module)."""
    from modsel.registry import ModuleCatalog, ModuleInfo

    def _make(graph: dict, with_core: bool = True):
        modules = [
            ModuleInfo(id=mid, dependencies=deps)
            for mid, deps in graph.items()
        ]
        if with_core and "core" not in graph:
            modules.append(ModuleInfo(id="core", core=True))
        return ModuleCatalog(modules)

    return _make
