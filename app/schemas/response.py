"""统一响应体 {status_code, status, message, data}。"""
from http import HTTPStatus
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    status_code: int = Field(..., description="与 HTTP 状态码一致")
    status: str = Field(..., description="状态短语，如 ok / bad request")
    message: str = ""
    data: Any = None


def status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase.lower()
    except ValueError:
        return "unknown"


def envelope(status_code: int, message: str, data: Any = None) -> JSONResponse:
    body = ApiResponse(
        status_code=status_code,
        status=status_text(status_code),
        message=message,
        data=data,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())
