import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from rewardapi.config import get_settings
from rewardapi.containers import Container
from rewardapi.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from rewardapi.core.exceptions import BaseAPIException
from rewardapi.core.logging_middleware import LoggingMiddleware
from rewardapi.logging_config import setup_logging
from rewardapi.routers import admin_router, auth_router, health_router, reward_router

load_dotenv("rewardapi/.env")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: Container = app.container  # type: ignore[attr-defined]
    settings = container.config.config()
    store = container.repositories.record_store()

    await store.startup()
    logger.info(f"Record store ready: {store.backend_name}")
    if settings.SEED_INITIAL_REWARDS:
        await container.services.reward_service().seed_initial_rewards()

    yield

    await store.shutdown()
    logger.info("Record store closed")


def create_app(container: Optional[Container] = None) -> FastAPI:
    container = container or Container()
    settings = container.config.config()
    setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)
    app.container = container  # type: ignore[attr-defined]

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router)
    app.include_router(auth_router.router, prefix=settings.API_V1_STR)
    app.include_router(reward_router.router, prefix=settings.API_V1_STR)
    app.include_router(admin_router.router, prefix=settings.API_V1_STR)

    return app


app = create_app()

handler = Mangum(app)
