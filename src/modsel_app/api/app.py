"""FastAPI application factory for the module selection API.

The app owns one catalog and one committed configuration store; every
/sessions dialog works on its own copy until commit.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request

from modsel import metrics
from modsel.config import get_config
from modsel.modules import ConfigStore, ModuleConfig
from modsel.observability import configure_logging
from modsel.registry import ModuleCatalog, provider_from_config
from modsel_app.api.routes.sessions import router as sessions_router
from modsel_app.api.session_store import SessionStore

logger = logging.getLogger("modsel.api")


def create_app(
    catalog: Optional[ModuleCatalog] = None,
    config_store: Optional[ConfigStore] = None,
    sessions: Optional[SessionStore] = None,
) -> FastAPI:
    cfg = get_config()
    configure_logging(cfg.logging)
    if catalog is None:
        catalog = ModuleCatalog.from_provider(
            provider_from_config(cfg), core_id=cfg.modules.core_id
        )
    if config_store is None:
        config_store = ModuleConfig.from_config(cfg)
    if sessions is None:
        sessions = SessionStore(
            ttl_seconds=cfg.sessions.ttl_seconds,
            max_sessions=cfg.sessions.max_sessions,
        )

    app = FastAPI(
        title="Module Selection API",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
    )
    app.state.catalog = catalog
    app.state.config_store = config_store
    app.state.sessions = sessions

    @app.get("/health")
    def health():  # noqa: D401
        return {"status": "ok", **app.state.sessions.stats()}

    @app.get("/config")
    def config():  # noqa: D401
        return {
            "core_id": app.state.catalog.core_id,
            "modules_enabled": list(cfg.modules.enabled),
            "session_ttl_seconds": app.state.sessions.ttl_seconds,
            "max_sessions": app.state.sessions.max_sessions,
        }

    @app.get("/modules")
    def modules():  # noqa: D401
        committed = set(app.state.config_store.list_mods())
        return {
            "core_id": app.state.catalog.core_id,
            "modules": [
                {
                    "id": m.id,
                    "display_name": m.display_name,
                    "description": m.description,
                    "dependencies": list(m.dependencies),
                    "active": m.id in committed,
                }
                for m in app.state.catalog.all_modules()
            ],
        }

    @app.get("/selection")
    def selection():  # noqa: D401
        return {"active": sorted(app.state.config_store.list_mods())}

    app.include_router(sessions_router)

    @app.middleware("http")
    async def _metrics_mw(request: Request, call_next):  # noqa: D401
        start = time.time()
        labels = {"route": request.url.path, "method": request.method}
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            duration_ms = (time.time() - start) * 1000.0
            metrics.inc("api_request_total", labels)
            metrics.observe("api_request_latency_ms", duration_ms, labels)
            if status >= 400:
                metrics.inc(
                    "api_request_errors_total", labels | {"status": status}
                )

    logger.info(
        "selection api ready modules=%d committed=%d",
        len(catalog),
        len(list(config_store.list_mods())),
    )
    return app


def main() -> None:  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "modsel_app.api.app:create_app",
        factory=True,
        host="127.0.0.1",
        port=8000,
        reload=False,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
