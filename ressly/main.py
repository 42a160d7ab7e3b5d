from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from ressly.api.v1.router import build_api_router
from ressly.core.config import Settings, settings
from ressly.core.errors import AppError
from ressly.core.logging import configure_logging, log_requests
from ressly.db.init_db import init_db
from ressly.db.session import Database
from ressly.schemas.error import ErrorOut
from ressly.services.image_store import ImageStore, build_image_store


async def handle_app_error(_: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.opt(exception=exc).error("{}: {}", exc.kind, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=ErrorOut(error=exc.kind, detail=exc.detail).model_dump())


async def handle_request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = '.'.join(str(part) for part in first.get('loc', ()) if part != 'body')
        detail = f"{location}: {first.get('msg')}" if location else str(first.get('msg'))
    else:
        detail = 'Invalid request'
    return JSONResponse(status_code=400, content=ErrorOut(error="validation_error", detail=detail).model_dump())


def create_app(
    config: Optional[Settings] = None,
    database: Optional[Database] = None,
    image_store: Optional[ImageStore] = None,
) -> FastAPI:
    """Build the API.

    ``database`` and ``image_store`` are created from ``config`` at startup
    unless they are passed in. Whatever the app creates itself is closed again
    at shutdown.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_database = database is None
        owned_store = image_store is None
        app.state.database = database or Database(config.DATABASE_URL)
        app.state.image_store = image_store or build_image_store(config)
        init_db(app.state.database.engine, config=config)
        logger.info("{} started ({})", config.PROJECT_NAME, config.ENV)
        try:
            yield
        finally:
            if owned_store:
                app.state.image_store.close()
            if owned_database:
                app.state.database.dispose()
            logger.info("{} stopped", config.PROJECT_NAME)

    app = FastAPI(title=config.PROJECT_NAME, debug=config.DEBUG, lifespan=lifespan)
    app.state.settings = config

    allow_origins = config.CORS_ORIGINS
    allow_credentials = '*' not in allow_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=['GET', 'POST', 'DELETE'],
        allow_headers=['*'],
    )
    app.middleware('http')(log_requests)
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.include_router(build_api_router(config.API_V1_PREFIX))
    return app


configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

app = create_app()
