from fastapi.testclient import TestClient

from modsel import metrics
from modsel.modules import ModuleConfig
from modsel.registry import ModuleCatalog, ModuleInfo
from modsel_app.api.app import create_app
from modsel_app.api.session_store import SessionStore


def _client(store=None, sessions=None):
    catalog = ModuleCatalog(
        [
            ModuleInfo(id="core", display_name="Core", core=True),
            ModuleInfo(id="A", display_name="Alpha"),
            ModuleInfo(id="B", display_name="Beta", dependencies=["A"]),
            ModuleInfo(
                id="C",
                display_name="Gamma",
                description="needs beta",
                dependencies=["B", "ghost"],
            ),
        ]
    )
    store = store if store is not None else ModuleConfig(["core"])
    app = create_app(catalog=catalog, config_store=store, sessions=sessions)
    return TestClient(app), store


def test_open_toggle_commit_flow():
    client, store = _client()
    r = client.post("/sessions")
    assert r.status_code == 200
    sid = r.json()["session_id"]
    assert [m["id"] for m in r.json()["modules"]] == ["A", "B", "C"]

    r = client.post(f"/sessions/{sid}/toggle", json={"module_id": "C"})
    body = r.json()
    assert body["active"] is True
    assert body["changed"] == ["C", "B", "A"]
    assert store.list_mods() == ["core"]

    pending = client.get(f"/sessions/{sid}").json()["pending"]
    assert pending == {"added": ["A", "B", "C"], "removed": []}

    r = client.post(f"/sessions/{sid}/commit")
    assert r.json()["ok"] is True
    assert r.json()["active"] == ["A", "B", "C", "core"]
    assert client.get("/selection").json()["active"] == ["A", "B", "C", "core"]
    # session is gone after commit
    assert client.get(f"/sessions/{sid}").status_code == 404


def test_deactivate_cascades_and_discard_keeps_store():
    client, store = _client(ModuleConfig(["core", "A", "B", "C"]))
    sid = client.post("/sessions").json()["session_id"]
    r = client.post(f"/sessions/{sid}/toggle", json={"module_id": "A"})
    assert r.json()["changed"] == ["A", "B", "C"]
    assert all(not m["active"] for m in r.json()["modules"])
    r = client.post(f"/sessions/{sid}/discard")
    assert r.json() == {"ok": True}
    assert store.list_mods() == ["core", "A", "B", "C"]


def test_details_view():
    client, _ = _client()
    sid = client.post("/sessions").json()["session_id"]
    b = client.get(f"/sessions/{sid}/modules/B").json()
    assert b["dependencies"] == ["A"]
    assert b["required_by"] == ["C"]
    assert b["action"] == "activate"
    core = client.get(f"/sessions/{sid}/modules/core").json()
    assert core["active"] is True
    assert core["toggleable"] is False
    assert core["action"] is None
    r = client.get(f"/sessions/{sid}/modules/ghost")
    assert r.status_code == 404
    assert r.json()["detail"] == "module-not-found"


def test_core_toggle_is_noop():
    client, _ = _client()
    sid = client.post("/sessions").json()["session_id"]
    r = client.post(f"/sessions/{sid}/toggle", json={"module_id": "core"})
    assert r.json()["changed"] == []
    assert r.json()["active"] is True


def test_unknown_session_404_and_error_metric():
    client, _ = _client()
    labels = {"route": "/sessions/nope", "method": "GET", "status": 404}
    before = metrics.counter_value("api_request_errors_total", labels)
    r = client.get("/sessions/nope")
    assert r.status_code == 404
    assert r.json()["detail"] == "session-not-found"
    assert metrics.counter_value("api_request_errors_total", labels) == before + 1


def test_session_store_evicts_oldest():
    sessions = SessionStore(ttl_seconds=3600, max_sessions=2)
    client, _ = _client(sessions=sessions)
    first = client.post("/sessions").json()["session_id"]
    client.post("/sessions")
    client.post("/sessions")
    assert client.get("/health").json()["sessions"] == 2
    assert client.get(f"/sessions/{first}").status_code == 404


def test_session_store_expires(monkeypatch):
    import modsel_app.api.session_store as store_mod

    now = [1000.0]
    monkeypatch.setattr(store_mod, "time", lambda: now[0])
    sessions = SessionStore(ttl_seconds=10, max_sessions=8)
    client, _ = _client(sessions=sessions)
    sid = client.post("/sessions").json()["session_id"]
    now[0] += 11
    assert client.get(f"/sessions/{sid}").status_code == 404
