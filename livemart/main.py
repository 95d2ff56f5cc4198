"""FastAPI entrypoint for the LiveMart order service."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from livemart.api.v1.api import api_router
from livemart.core.config import settings
from livemart.db.base import Base
from livemart.db.migrations import ensure_sqlite_schema
from livemart.db.session import SessionLocal, engine
from livemart.services.account_service import ensure_default_admin

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    logger.info("[BOOTSTRAP] Starting %s (env=%s)", settings.app_name, settings.app_env)
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema(engine)
    with SessionLocal() as session:
        try:
            admin_existed = ensure_default_admin(session)
            logger.info("[BOOTSTRAP] default admin existed before startup: %s", "yes" if admin_existed else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Admin bootstrap failed; continuing startup.")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
