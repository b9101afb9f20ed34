"""FastAPI entrypoint for the catalog change tracker."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from catalog_tracer.api.v1.api import api_router
from catalog_tracer.core.config import settings
from catalog_tracer.db import session as db_session
from catalog_tracer.db.base import Base
from catalog_tracer.db.migrations import ensure_sqlite_schema

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    engine = db_session.engine
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema(engine)
    logger.info(
        "[BOOTSTRAP] env=%s dialect=%s ancestor_hints=%s",
        settings.app_env,
        engine.dialect.name,
        "on" if settings.use_ancestor_hints else "off",
    )


@app.get("/", summary="Service status")
def root() -> dict[str, str]:
    return {"status": "ok", "service": settings.app_name}
