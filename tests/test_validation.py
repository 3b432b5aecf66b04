"""字段约束校验的单元测试。"""

import pytest
from pydantic import BaseModel

from scaffold.core.exceptions import ValidationException
from scaffold.core.validation import Email, Length, NotBlank, NotNull, OneOf, Pattern, Range, validate
from scaffold.schemas.users import USER_CREATE_RULES, UserCreateRequest


class Payload(BaseModel):
    name: str | None = None
    age: int | None = None


def test_valid_payload_is_returned_unchanged():
    payload = {"name": "alice", "age": 30}
    assert validate(payload, {"name": [NotBlank()], "age": [Range(0, 150)]}) is payload


@pytest.mark.parametrize("value", [None, "", "   "])
def test_not_blank(value):
    with pytest.raises(ValidationException) as exc_info:
        validate({"name": value}, {"name": [NotBlank()]})
    assert exc_info.value.msg == "name must not be blank"
    assert exc_info.value.field == "name"


def test_not_null():
    with pytest.raises(ValidationException, match="age must not be null"):
        validate(Payload(), {"age": [NotNull()]})


def test_optional_fields_skip_non_null_constraints():
    validate(Payload(), {"age": [Range(0, 150)], "name": [Length(max=3), Email()]})


def test_range_bounds():
    with pytest.raises(ValidationException, match="greater than or equal to 0"):
        validate({"age": -1}, {"age": [Range(0, 150)]})
    with pytest.raises(ValidationException, match="less than or equal to 150"):
        validate({"age": 151}, {"age": [Range(0, 150)]})


def test_length_bounds():
    with pytest.raises(ValidationException, match="length must be between 2 and 4"):
        validate({"name": "abcde"}, {"name": [Length(2, 4)]})
    with pytest.raises(ValidationException, match="length must be at most 4"):
        validate({"name": "abcde"}, {"name": [Length(max=4)]})


def test_pattern_and_email():
    with pytest.raises(ValidationException, match="name only letters"):
        validate({"name": "a b"}, {"name": [Pattern(r"[a-z]+", "only letters")]})
    with pytest.raises(ValidationException, match="email must be a well-formed email address"):
        validate({"email": "nobody"}, {"email": [Email()]})
    validate({"email": "a@b.cn"}, {"email": [Email()]})


def test_one_of():
    with pytest.raises(ValidationException, match="status must be one of: normal, disabled"):
        validate({"status": "deleted"}, {"status": [OneOf(["normal", "disabled"])]})


def test_first_failure_wins():
    rules = {"name": [NotBlank(), Length(max=2)], "age": [Range(0, 10)]}
    with pytest.raises(ValidationException) as exc_info:
        validate({"name": "", "age": 99}, rules)
    assert exc_info.value.field == "name"
    assert exc_info.value.msg == "name must not be blank"


def test_rules_of_a_field_run_in_order():
    with pytest.raises(ValidationException, match="name must not be blank"):
        validate({"name": " "}, {"name": [NotBlank(), Length(min=5)]})


def test_reads_attributes_of_models():
    request = UserCreateRequest(username="bob", age=200)
    with pytest.raises(ValidationException, match="age must be less than or equal to 150"):
        validate(request, USER_CREATE_RULES)


def test_business_logic_not_reached_on_invalid_input():
    calls = []

    def handler(payload):
        validate(payload, {"name": [NotBlank()]})
        calls.append(payload)

    with pytest.raises(ValidationException):
        handler({"name": ""})
    assert calls == []

    handler({"name": "ok"})
    assert len(calls) == 1
