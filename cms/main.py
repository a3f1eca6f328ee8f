from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cms.api.router import api_router
from cms.core.config import get_settings
from cms.core.errors import CMSError, StorageError
from cms.db.session import SessionLocal, engine
from cms.services.bootstrap_service import init_database

logger = logging.getLogger("cms")


def _error_response(exc: CMSError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.kind, "detail": exc.detail}, headers=exc.headers)


async def cms_error_handler(request: Request, exc: CMSError) -> JSONResponse:
    return _error_response(exc)


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.__class__.__name__)
    return _error_response(StorageError())


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.auto_init_db:
        db = SessionLocal()
        try:
            init_database(engine, db)
        finally:
            db.close()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_exception_handler(CMSError, cms_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
