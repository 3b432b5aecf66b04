"""异常翻译的单元测试：业务异常透传提示，未分类异常隐藏细节。"""

import pytest
from starlette.exceptions import HTTPException

from scaffold.core.constants import GENERIC_ERROR_MESSAGE
from scaffold.core.exceptions import (
    AppException,
    ValidationException,
    describe_validation_errors,
    http_status_for,
    translate_exception,
)


class RecordingSink:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def error(self, *args, **kwargs) -> None:
        self.calls.append((args, kwargs))


class BrokenSink:
    def error(self, *args, **kwargs) -> None:
        raise OSError("disk full")


@pytest.mark.parametrize("message", ["用户不存在", "username must not be blank", "库存不足：剩余 0 件"])
def test_declared_fault_message_is_kept(message):
    sink = RecordingSink()
    envelope = translate_exception(AppException(message), sink=sink)
    assert envelope.code == 500
    assert envelope.message == message
    assert envelope.data is None
    assert sink.calls == []


def test_declared_fault_keeps_domain_code():
    assert translate_exception(AppException("用户不存在", 404)).code == 404


def test_validation_fault_is_declared():
    envelope = translate_exception(ValidationException("age must be a number", field="age"))
    assert envelope.message == "age must be a number"


@pytest.mark.parametrize(
    "exc",
    [
        RuntimeError("psycopg2.OperationalError: password authentication failed"),
        KeyError("SELECT * FROM users WHERE id = 1"),
        ZeroDivisionError("division by zero"),
    ],
)
def test_unclassified_fault_hides_detail(exc):
    sink = RecordingSink()
    envelope = translate_exception(exc, sink=sink)
    assert envelope.code == 500
    assert envelope.message == GENERIC_ERROR_MESSAGE
    assert str(exc) not in envelope.message
    assert len(sink.calls) == 1
    _, kwargs = sink.calls[0]
    assert kwargs["exc_info"][1] is exc


def test_unclassified_fault_renders_when_logging_fails():
    envelope = translate_exception(RuntimeError("boom"), sink=BrokenSink())
    assert envelope.message == GENERIC_ERROR_MESSAGE


def test_framework_http_exception_is_declared():
    envelope = translate_exception(HTTPException(status_code=404, detail="Not Found"))
    assert envelope.code == 404
    assert envelope.message == "Not Found"


def test_describe_missing_field():
    fault = describe_validation_errors([{"loc": ("body", "username"), "type": "missing", "msg": "Field required"}])
    assert fault.msg == "username must not be blank"
    assert fault.field == "username"


def test_describe_uses_first_error_only():
    fault = describe_validation_errors(
        [
            {"loc": ("body", "age"), "type": "int_parsing", "msg": "Input should be a valid integer"},
            {"loc": ("body", "email"), "type": "string_type", "msg": "Input should be a valid string"},
        ]
    )
    assert fault.msg == "age input should be a valid integer"


def test_describe_body_level_error():
    fault = describe_validation_errors([{"loc": ("body",), "type": "json_invalid", "msg": "JSON decode error"}])
    assert fault.msg.startswith("request body")


@pytest.mark.parametrize("code, expected", [(200, 200), (404, 404), (429, 429), (1001, 500), (0, 500)])
def test_http_status_for(code, expected):
    assert http_status_for(code) == expected


def test_declared_fault_with_success_code_still_renders_failure():
    envelope = translate_exception(AppException("ok?", code=200))
    assert envelope.code == 500
    assert envelope.message == "ok?"
    assert not envelope.is_success


def test_framework_exception_with_success_code_renders_failure():
    envelope = translate_exception(HTTPException(status_code=200, detail="odd"))
    assert envelope.code == 500
