"""API 请求/响应 Pydantic 模型。按模块组织，路由从本包或子模块导入。"""
from app.schemas.auth import LoginRequest, RegisterUser
from app.schemas.response import ApiResponse, envelope, status_text

__all__ = [
    "LoginRequest",
    "RegisterUser",
    "ApiResponse",
    "envelope",
    "status_text",
]
