import pytest

from modsel.registry import (
    CatalogError,
    ModuleCatalog,
    ModuleInfo,
    StaticModuleProvider,
)


def _mods(*records):
    return [ModuleInfo(**r) for r in records]


def test_all_modules_sorted_by_display_name_then_id_without_core():
    catalog = ModuleCatalog(
        _mods(
            {"id": "core", "display_name": "Core"},
            {"id": "b2", "display_name": "beta"},
            {"id": "b1", "display_name": "beta"},
            {"id": "z", "display_name": "Alpha"},
            {"id": "a", "display_name": "alpha"},
        )
    )
    # case-sensitive: uppercase sorts before lowercase
    assert [m.id for m in catalog.all_modules()] == ["z", "a", "b1", "b2"]
    assert catalog.core_id == "core"
    assert "core" in catalog
    assert len(catalog) == 5


def test_lookup_and_dangling_reference():
    catalog = ModuleCatalog(_mods({"id": "x", "dependencies": ["ghost"]}))
    assert catalog.lookup("x").dependencies == ("ghost",)
    assert catalog.lookup("ghost") is None
    assert catalog.dangling_dependencies() == {"x": ["ghost"]}


def test_duplicate_id_rejected():
    with pytest.raises(CatalogError) as exc:
        ModuleCatalog(_mods({"id": "a"}, {"id": "a"}))
    assert exc.value.error_type == "duplicate-module-id"


def test_multiple_core_flags_rejected():
    with pytest.raises(CatalogError) as exc:
        ModuleCatalog(_mods({"id": "e1", "core": True}, {"id": "e2", "core": True}))
    assert exc.value.error_type == "multiple-core-modules"


def test_flagged_core_overrides_configured_id():
    catalog = ModuleCatalog(
        _mods({"id": "engine", "core": True}, {"id": "core"}), core_id="core"
    )
    assert catalog.is_core("engine")
    assert not catalog.is_core("core")
    assert [m.id for m in catalog.all_modules()] == ["core"]


def test_configured_core_id_without_flag():
    catalog = ModuleCatalog(_mods({"id": "base"}, {"id": "x"}), core_id="base")
    assert catalog.is_core("base")
    assert [m.id for m in catalog] == ["x"]


def test_dependents_and_cycles(caplog):
    caplog.set_level("WARNING", logger="modsel.catalog")
    catalog = ModuleCatalog(
        _mods(
            {"id": "A", "dependencies": ["B"]},
            {"id": "B", "dependencies": ["C"]},
            {"id": "C", "dependencies": ["A"]},
            {"id": "D", "dependencies": ["A"]},
        )
    )
    assert catalog.dependents("A") == ["C", "D"]
    assert catalog.dependents("D") == []
    assert catalog.dependency_cycles() == [["A", "B", "C", "A"]]
    assert "dependency cycle" in caplog.text


def test_catalog_built_event_emitted():
    from modsel.events import on

    seen = []
    unsub = on(lambda name, payload: seen.append((name, payload)))
    try:
        ModuleCatalog(_mods({"id": "core"}, {"id": "x", "dependencies": ["y"]}))
    finally:
        unsub()
    built = [p for n, p in seen if n == "CatalogBuilt"]
    assert built and built[-1]["modules"] == 2
    assert built[-1]["dangling"] == 1


def test_module_info_validation():
    info = ModuleInfo(id="m", dependencies=["a", "b", "a"])
    assert info.display_name == "m"
    assert info.dependencies == ("a", "b")
    assert info.depends_on("b")
    with pytest.raises(ValueError):
        ModuleInfo(id="  ")
    with pytest.raises(ValueError):
        ModuleInfo(id="m", unexpected=1)


def test_static_provider_wraps_invalid_records():
    provider = StaticModuleProvider(
        [{"id": "a", "display_name": "A"}, ModuleInfo(id="b")]
    )
    assert [m.id for m in provider.modules()] == ["a", "b"]
    with pytest.raises(CatalogError) as exc:
        StaticModuleProvider([{"id": "ok"}, {"display_name": "no id"}])
    assert exc.value.error_type == "invalid-module-record"
    assert "#1" in str(exc.value)


def test_from_provider():
    provider = StaticModuleProvider([{"id": "core"}, {"id": "x"}])
    catalog = ModuleCatalog.from_provider(provider)
    assert catalog.ids() == ["core", "x"]
