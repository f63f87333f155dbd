"""请求体字段校验：包装 pydantic，把错误整理成 (字段, 规则) 列表。"""
import dataclasses
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# pydantic 内置错误类型 -> 规则名；自定义规则（email/required/min）直接使用其 type
_TAGS = {"missing": "required"}


@dataclasses.dataclass(frozen=True)
class FieldError:
    field: str
    tag: str
    detail: str = dataclasses.field(default="", compare=False)

    def __str__(self) -> str:
        return f"error on field [{self.field}] with tag [{self.tag}]"


class ValidationFailed(Exception):
    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return ", ".join(str(e) for e in self.errors)


class DecodeFailed(ValidationFailed):
    """类型不匹配（如 email 传了数字、body 不是对象），属于反序列化失败而不是规则校验失败。"""

    @property
    def message(self) -> str:
        return ", ".join(f"cannot decode field [{e.field}]: {e.detail}" for e in self.errors)


class Validator:
    """按模型声明顺序校验，失败时一次性返回所有字段错误。"""

    def validate(self, model: type[ModelT], data: Any) -> ModelT:
        # JSON null 等同于空对象，交给 required 规则处理
        if data is None:
            data = {}
        try:
            return model.model_validate(data)
        except ValidationError as e:
            errors = e.errors()
            type_errors = [err for err in errors if _is_type_error(err)]
            if type_errors:
                raise DecodeFailed([_to_field_error(err) for err in type_errors]) from e
            raise ValidationFailed([_to_field_error(err) for err in errors]) from e


def _is_type_error(err: dict) -> bool:
    return err["type"].endswith("_type")


def _to_field_error(err: dict) -> FieldError:
    loc = err.get("loc") or ()
    name = ".".join(str(part) for part in loc) or "__root__"
    return FieldError(field=name, tag=_TAGS.get(err["type"], err["type"]), detail=err.get("msg", ""))
