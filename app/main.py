import logging
import os
import sys
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.api.handlers.demo import DemoHandler
from app.api.handlers.errors import ErrorHandler
from app.api.router import register_routes
from app.core.config import ConfigError, Settings, load_settings
from app.core.storage import ensure_storage_dirs
from app.core.validation import Validator

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        addr = request.client.host if request.client else "-"
        logger.info(f'{addr} - "{request.method} {request.url.path}" {response.status_code} ({elapsed:.0f}ms)')
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("worker process %d started", os.getpid())
    yield
    logger.info("worker process %d stopped", os.getpid())


def create_app(settings: Settings | None = None) -> FastAPI:
    """应用工厂；未传 settings 时读取 config.json（uvicorn factory 模式下每个 worker 调用一次）。"""
    if settings is None:
        settings = load_settings()
    ensure_storage_dirs(settings)

    app = FastAPI(title="Request Tour", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(RequestLogMiddleware)
    ErrorHandler().register(app)

    @app.get("/test")
    async def always_fail():
        raise HTTPException(status_code=500, detail="error internal")

    register_routes(app, DemoHandler(Validator(), settings))
    return app


def run() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.critical(str(e))
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        workers=settings.workers,
        timeout_keep_alive=settings.idle_timeout,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
