from fastapi.testclient import TestClient

from modsel_app.api.app import create_app


def test_api_health_ok():
    client = TestClient(create_app())
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["sessions"] == 0


def test_api_builds_catalog_from_config(config_dir):
    (config_dir / "base.yaml").write_text(
        "schema_version: 1\n"
        "modules:\n"
        "  core_id: engine\n"
        "  enabled: [engine, a]\n"
        "  available:\n"
        "    - {id: engine, display_name: Engine}\n"
        "    - {id: a, display_name: Alpha}\n"
        "    - {id: b, display_name: Beta, dependencies: [a]}\n"
        "sessions: {ttl_seconds: 120}\n",
        encoding="utf-8",
    )
    client = TestClient(create_app())
    cfg = client.get("/config").json()
    assert cfg["core_id"] == "engine"
    assert cfg["session_ttl_seconds"] == 120
    mods = client.get("/modules").json()["modules"]
    assert [(m["id"], m["active"]) for m in mods] == [("a", True), ("b", False)]
    assert client.get("/selection").json()["active"] == ["a", "engine"]
