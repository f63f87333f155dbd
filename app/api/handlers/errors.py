import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.response import envelope

logger = logging.getLogger(__name__)


class ErrorHandler:
    """所有错误统一返回 500 信封，不区分错误类型（404/405 也一样）。"""

    async def handle(self, request: Request, exc: Exception):
        message = _error_message(exc)
        logger.error('%s "%s %s": %s', type(exc).__name__, request.method, request.url.path, message)
        return envelope(500, message)

    def register(self, app: FastAPI) -> None:
        app.add_exception_handler(StarletteHTTPException, self.handle)
        app.add_exception_handler(RequestValidationError, self.handle)
        app.add_exception_handler(Exception, self.handle)


def _error_message(exc: Exception) -> str:
    if isinstance(exc, StarletteHTTPException):
        return str(exc.detail)
    if isinstance(exc, RequestValidationError):
        return ", ".join(
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
    return str(exc) or type(exc).__name__
