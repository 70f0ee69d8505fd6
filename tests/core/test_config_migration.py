from modsel.config import get_config


def test_migration_adds_schema_version_and_modules(config_dir, caplog):
    caplog.set_level("WARNING", logger="modsel.config")
    (config_dir / "base.yaml").write_text(
        "modules: [core, a, a]\n", encoding="utf-8"
    )
    cfg = get_config()
    assert cfg.schema_version == 1
    assert cfg.modules.enabled == ["core", "a"]
    assert "schema_version missing" in caplog.text


def test_missing_modules_section(config_dir):
    (config_dir / "base.yaml").write_text(
        "schema_version: 1\nlogging: {}\n", encoding="utf-8"
    )
    cfg = get_config()
    assert cfg.modules.enabled == []
