"""统一响应信封的单元测试。"""

import pytest
from pydantic import ValidationError

from scaffold.core.constants import FALLBACK_FAILURE_MESSAGE
from scaffold.core.responses import Envelope, failure, success


@pytest.mark.parametrize("payload", [None, 0, "text", [1, 2], {"id": "1"}])
def test_success_wraps_payload(payload):
    envelope = success(payload)
    assert envelope.code == 200
    assert envelope.message == "成功"
    assert envelope.data == payload
    assert envelope.is_success


def test_failure_has_no_data():
    envelope = failure("用户不存在")
    assert envelope.code == 500
    assert envelope.message == "用户不存在"
    assert envelope.data is None
    assert not envelope.is_success


@pytest.mark.parametrize("message", [None, "", "   "])
def test_failure_substitutes_fallback_message(message):
    assert failure(message).message == FALLBACK_FAILURE_MESSAGE


def test_failure_accepts_domain_code():
    assert failure("请求过于频繁", 429).code == 429


def test_failure_rejects_success_code():
    with pytest.raises(ValueError):
        failure("oops", 200)


def test_envelope_is_immutable():
    envelope = success({"a": 1})
    with pytest.raises(ValidationError):
        envelope.code = 500


def test_failure_envelope_cannot_carry_data():
    with pytest.raises(ValidationError):
        Envelope(code=500, message="bad", data={"leak": True})


def test_failure_envelope_requires_message():
    with pytest.raises(ValidationError):
        Envelope(code=500, message=" ")


def test_envelope_serializes_to_plain_dict():
    assert failure("bad", 404).model_dump() == {"code": 404, "message": "bad", "data": None}
