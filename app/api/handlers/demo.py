"""演示各类请求数据读取方式的 handler：query / header / cookie / path / form / multipart / body。"""
import json
import logging
import re
from xml.parsers.expat import ExpatError

import xmltodict

from fastapi import Cookie, Form, Header, Query, Request
from fastapi.responses import FileResponse
from fastapi.templating import Jinja2Templates
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings
from app.core.validation import DecodeFailed, ValidationFailed, Validator
from app.schemas.auth import LoginRequest, RegisterUser
from app.schemas.response import envelope
from app.services.storage_service import (
    UploadTooLarge,
    download_source_path,
    save_upload_async,
    uploaded_file_path,
)

logger = logging.getLogger(__name__)

JSON_TYPES = {"application/json"}
FORM_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}
XML_TYPES = {"application/xml", "text/xml"}

_DIGITS = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


def _atoi(value: str) -> int:
    """只接受 ASCII 十进制整数（可带符号），其余按 0 处理并记录告警。"""
    if _DIGITS.fullmatch(value):
        number = int(value)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    logger.warning("path parameter %r is not a number, using 0", value)
    return 0


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


def _parse_xml(body: bytes):
    """取根元素下的子元素作为字段，空元素按空字符串处理。"""
    document = xmltodict.parse(body)
    root = next(iter(document.values()), None)
    if not isinstance(root, dict):
        return root
    return {key: "" if value is None else value for key, value in root.items()}


class DemoHandler:
    def __init__(self, validator: Validator, settings: Settings):
        self.validator = validator
        self.settings = settings
        self.templates = Jinja2Templates(directory=settings.view_dir)

    async def root(self):
        return envelope(200, "success")

    async def hello(self, name: str = Query("guest")):
        return envelope(200, f"hello {name}")

    async def request_info(
        self,
        firstname: str = Header("this"),
        lastname: str = Cookie("guest"),
    ):
        """名字取自 header，姓取自 cookie。"""
        return envelope(200, f"hello {firstname} {lastname}")

    async def route_parameters(self, userId: str, orderId: str):
        return {
            "status_code": 200,
            "user": _atoi(userId),
            "order": _atoi(orderId),
        }

    async def request_form(self, name: str = Form("guest")):
        return envelope(200, f"hello {name}")

    async def upload_file(self, request: Request):
        """
        保存 multipart 中的 file 字段到 upload_dir。
        文件名只取 basename，同名覆盖，超过 max_upload_bytes 返回 413。
        """
        try:
            async with request.form() as form:
                upload = form.get("file")
                if not isinstance(upload, UploadFile):
                    return envelope(500, "there is no uploaded file associated with the given key")
                path, size = await save_upload_async(upload.file, upload.filename or "", self.settings)
        except StarletteHTTPException as e:
            return envelope(500, str(e.detail))
        except UploadTooLarge as e:
            return envelope(413, str(e))
        except (OSError, ValueError) as e:
            logger.error("save upload failed: %s", e)
            return envelope(500, str(e))

        logger.info("saved upload %s (%d bytes)", path, size)
        return envelope(200, "success upload file")

    async def login(self, request: Request):
        # 反序列化失败（JSON 语法错误、字段类型不符）返回 500，与 register 的 400 不一致，保留原有行为
        body = await request.body()
        try:
            payload = json.loads(body)
        except ValueError as e:
            return envelope(500, str(e))

        try:
            login = self.validator.validate(LoginRequest, payload)
        except DecodeFailed as e:
            return envelope(500, e.message)
        except ValidationFailed as e:
            return envelope(400, e.message)

        return envelope(
            200,
            "success login",
            {"email": login.email, "password": login.password},
        )

    async def register(self, request: Request):
        """按 Content-Type 自动解析 JSON、XML 或表单；解析失败与校验失败都返回 400。"""
        media_type = _media_type(request)
        try:
            if media_type in JSON_TYPES:
                payload = json.loads(await request.body())
            elif media_type in XML_TYPES:
                payload = _parse_xml(await request.body())
            elif media_type in FORM_TYPES:
                async with request.form() as form:
                    payload = {k: v for k, v in form.items() if isinstance(v, str)}
            else:
                return envelope(400, f"unsupported content type {media_type or 'none'}")
        except (ValueError, ExpatError) as e:
            return envelope(400, str(e))
        except StarletteHTTPException as e:
            return envelope(400, str(e.detail))

        try:
            user = self.validator.validate(RegisterUser, payload)
        except ValidationFailed as e:
            return envelope(400, e.message)

        return envelope(
            200,
            "success register",
            {"username": user.username, "password": user.password, "name": user.name},
        )

    async def response_json(self, name: str = Query("guest")):
        return envelope(200, "success", f"your name is [{name}]")

    async def download_file(self):
        try:
            path = download_source_path(self.settings)
        except FileNotFoundError as e:
            return envelope(500, str(e))
        return FileResponse(path, filename=self.settings.download_name)

    async def download_uploaded(self, filename: str):
        try:
            path = uploaded_file_path(filename, self.settings)
        except (FileNotFoundError, ValueError) as e:
            return envelope(500, str(e))
        return FileResponse(path, filename=path.name)

    async def routing_group(self):
        return envelope(200, "success routing group")

    async def render_view(self, request: Request):
        return self.templates.TemplateResponse(
            request,
            "index.html",
            {
                "title": "FastAPI",
                "header": "Python web framework",
                "content": "rendered with Jinja2",
            },
        )
