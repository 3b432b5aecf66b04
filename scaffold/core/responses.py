"""响应封装：构建系统统一的返回结构。

所有接口（成功或失败）都返回同一形状的 ``Envelope``：

- ``code``：200 表示成功，失败默认 500，其余取值留给业务自定义；
- ``message``：成功时固定为“成功”，失败时为面向用户的提示；
- ``data``：成功时的业务数据，失败时恒为 ``None``。
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from scaffold.core.constants import (
    FALLBACK_FAILURE_MESSAGE,
    HTTP_STATUS_INTERNAL_ERROR,
    HTTP_STATUS_OK,
    SUCCESS_MESSAGE,
)

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """系统统一的响应外层结构，构造后不可修改。"""

    model_config = ConfigDict(frozen=True)

    code: int
    message: str
    data: Optional[T] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "Envelope[T]":
        if self.code == HTTP_STATUS_OK:
            return self
        if self.data is not None:
            raise ValueError("failure envelope must not carry data")
        if not self.message or not self.message.strip():
            raise ValueError("failure envelope requires a message")
        return self

    @property
    def is_success(self) -> bool:
        return self.code == HTTP_STATUS_OK


def success(data: Any = None) -> Envelope:
    """包装成功结果。"""
    return Envelope(code=HTTP_STATUS_OK, message=SUCCESS_MESSAGE, data=data)


def failure(message: Optional[str], code: int = HTTP_STATUS_INTERNAL_ERROR) -> Envelope:
    """包装失败结果，空提示会被替换为通用兜底文案。"""
    if code == HTTP_STATUS_OK:
        raise ValueError("failure envelope cannot use the success code")
    if message is None or not str(message).strip():
        message = FALLBACK_FAILURE_MESSAGE
    return Envelope(code=code, message=str(message), data=None)
