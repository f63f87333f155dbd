"""登录/注册请求体。规则顺序与错误 tag 对应：required -> email / min。"""
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field
from pydantic_core import PydanticCustomError


def _required(value: str) -> str:
    if not value:
        raise PydanticCustomError("required", "field is required")
    return value


def _email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise PydanticCustomError("email", "value is not a valid email address: {reason}", {"reason": str(e)})
    return value


def _min_length(size: int):
    def check(value: str) -> str:
        if len(value) < size:
            raise PydanticCustomError(
                "min", "value must be at least {min} characters long", {"min": size}
            )
        return value

    return check


RequiredStr = Annotated[str, AfterValidator(_required)]
Email = Annotated[str, AfterValidator(_required), AfterValidator(_email)]
Password = Annotated[str, AfterValidator(_required), AfterValidator(_min_length(6))]


class LoginRequest(BaseModel):
    email: Email = Field(..., description="邮箱")
    password: Password = Field(..., description="密码（至少 6 位）")


class RegisterUser(BaseModel):
    username: Email = Field(..., description="用户名，必须是邮箱")
    password: Password = Field(..., description="密码（至少 6 位）")
    name: RequiredStr = Field(..., description="姓名")
