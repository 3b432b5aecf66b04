"""异常处理模块：定义业务异常，并把任意异常统一翻译为响应信封。

异常分为两类：

- 已声明的业务异常（``AppException`` 及其子类、框架抛出的 ``HTTPException``），
  其提示信息面向用户，原样返回；
- 未分类异常（其余所有异常），完整堆栈只写入日志，对外统一返回通用提示。
"""

import logging
from typing import Any, Iterable, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from scaffold.core.constants import GENERIC_ERROR_MESSAGE, HTTP_STATUS_INTERNAL_ERROR, HTTP_STATUS_OK
from scaffold.core.logger import logger
from scaffold.core.responses import Envelope, failure


class AppException(Exception):
    """业务主动抛出的异常，``msg`` 必须是可以直接展示给用户的文案。"""

    def __init__(self, msg: str, code: int = HTTP_STATUS_INTERNAL_ERROR) -> None:
        super().__init__(msg)
        self.msg = msg
        self.code = code


class ValidationException(AppException):
    """请求参数不满足约束时抛出。"""

    def __init__(self, msg: str, code: int = HTTP_STATUS_INTERNAL_ERROR, *, field: Optional[str] = None) -> None:
        super().__init__(msg, code)
        self.field = field


def translate_exception(
    exc: BaseException,
    *,
    sink: Optional[logging.Logger] = None,
    context: Optional[str] = None,
) -> Envelope:
    """将异常转换为失败信封，本函数自身不会抛出异常。"""
    if isinstance(exc, AppException):
        return failure(exc.msg, _failure_code(exc.code))
    if isinstance(exc, StarletteHTTPException):
        return failure(str(exc.detail) if exc.detail else None, _failure_code(exc.status_code))

    _log_unclassified(exc, sink or logger, context)
    return failure(GENERIC_ERROR_MESSAGE, HTTP_STATUS_INTERNAL_ERROR)


def _failure_code(code: int) -> int:
    # 失败信封不能使用成功码
    return HTTP_STATUS_INTERNAL_ERROR if code == HTTP_STATUS_OK else code


def _log_unclassified(exc: BaseException, sink: logging.Logger, context: Optional[str]) -> None:
    # 日志写入失败不能影响响应
    try:
        sink.error(
            "Unhandled exception%s: %s",
            f" during {context}" if context else "",
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
    except Exception:
        pass


def describe_validation_errors(errors: Iterable[dict[str, Any]]) -> ValidationException:
    """取第一条 pydantic 校验错误，转换为带字段名的业务校验异常。"""
    for error in errors:
        field = _field_from_loc(error.get("loc") or ())
        if error.get("type") == "missing":
            return ValidationException(f"{field} must not be blank", field=field)
        reason = str(error.get("msg") or "is invalid")
        return ValidationException(f"{field} {reason[:1].lower()}{reason[1:]}", field=field)
    return ValidationException("request is invalid")


def _field_from_loc(loc: Iterable[Any]) -> str:
    parts = [str(item) for item in loc if item not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) if parts else "request body"


def http_status_for(code: int) -> int:
    """响应码在合法 HTTP 状态范围内时直接复用，否则使用 500。"""
    if 100 <= code <= 599:
        return code
    return HTTP_STATUS_INTERNAL_ERROR


def render_envelope(envelope: Envelope) -> JSONResponse:
    return JSONResponse(status_code=http_status_for(envelope.code), content=envelope.model_dump(mode="json"))


async def fault_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """业务异常与框架 HTTP 异常统一转换为标准响应结构；未分类异常由 UnhandledErrorMiddleware 兜底。"""
    envelope = translate_exception(exc, context=f"{request.method} {request.url.path}")
    return render_envelope(envelope)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求体/查询参数解析失败时，返回第一个失败字段的提示。"""
    return render_envelope(translate_exception(describe_validation_errors(exc.errors())))
