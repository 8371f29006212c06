import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from app.api import router as api_router
from app.api.core.config import settings
from app.api.core.dependencies.page_templates import page_templates
from app.api.core.exceptions import (
    WaitlistError,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    waitlist_exception_handler,
)
from app.api.core.logger import setup_logging
from app.api.db.database import Datastore

setup_logging()
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the datastore handle on startup and release it on shutdown.

    Args:
        app (FastAPI): FastAPI application instance supplied by the framework.

    Returns:
        AsyncIterator[None]: Asynchronous context manager controlling startup/shutdown.

    Examples:
        >>> async with lifespan(app):
        ...     yield
    """

    datastore = Datastore.from_settings(settings)

    if settings.DB_CREATE_TABLES:
        try:
            await datastore.create_tables()
        except (SQLAlchemyError, OSError) as exc:
            logger.warning(
                f"Could not create tables, datastore unreachable at startup: {exc}"
            )

    app.state.datastore = datastore
    logger.info(
        f"{settings.APP_NAME} started (datastore configured: {datastore.is_configured})"
    )

    try:
        yield
    finally:
        await datastore.dispose()


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description=f"{settings.APP_NAME} waitlist landing page and signup API",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(WaitlistError, waitlist_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(api_router)


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
def landing_page(request: Request):
    return page_templates.TemplateResponse(request, "landing.html")


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "environment": "Development" if settings.DEBUG else "Production",
    }


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.APP_PORT, reload=False)
