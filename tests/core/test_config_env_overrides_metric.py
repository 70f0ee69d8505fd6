from modsel import metrics
from modsel.config import as_dict, clear_config_cache


def test_env_override_metric_and_logging(monkeypatch, caplog):
    caplog.set_level("INFO", logger="modsel.config")
    monkeypatch.setenv("MODSEL__SESSIONS__TTL_SECONDS", "90")
    monkeypatch.setenv("MODSEL__MODULES__ENABLED", "core, a ,b")
    clear_config_cache()
    cfg = as_dict()
    assert cfg["sessions"]["ttl_seconds"] == 90
    assert cfg["modules"]["enabled"] == ["core", "a", "b"]
    counters = metrics.snapshot()["counters"]
    assert any(
        k.startswith("env_override_total{path=sessions.ttl_seconds")
        for k in counters
    )
    assert "config-env-override" in caplog.text
    assert "path=modules.enabled" in caplog.text
