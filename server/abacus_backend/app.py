"""
FastAPI application entry point for the site backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from abacus_backend.config import get_settings
from abacus_backend.dependencies import get_mailer, get_review_store
from abacus_backend.mailer import MailerError
from abacus_backend.routes import router
from abacus_backend.store import JsonFileReviewStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)

    store = app.dependency_overrides.get(get_review_store, get_review_store)()
    if isinstance(store, JsonFileReviewStore):
        store.initialize()

    mailer = app.dependency_overrides.get(get_mailer, get_mailer)()
    try:
        mailer.verify()
        logger.info("Email server is ready to send messages")
    except MailerError as exc:
        logger.error("Email transporter error: %s", exc)
    yield


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Matrix Abacus Backend (FastAPI)", version="0.1.0", lifespan=lifespan
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
