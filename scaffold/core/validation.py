"""请求参数校验：按字段声明约束，在进入业务逻辑前完成检查。

规则按声明顺序逐条执行，遇到第一个失败的约束立即抛出 ``ValidationException``，
提示中包含字段名与约束说明；全部通过时原样返回输入。
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any, Optional, TypeVar

from scaffold.core.exceptions import ValidationException

P = TypeVar("P")

_MISSING = object()


class Constraint:
    """单个字段约束。``check`` 返回 ``None`` 表示通过，否则返回失败说明。"""

    skip_none = True

    def check(self, value: Any) -> Optional[str]:  # pragma: no cover - interface definition
        raise NotImplementedError

    def evaluate(self, field: str, value: Any) -> Optional[str]:
        if value is None and self.skip_none:
            return None
        reason = self.check(value)
        if reason is None:
            return None
        return f"{field} {reason}"


class NotNull(Constraint):
    skip_none = False

    def check(self, value: Any) -> Optional[str]:
        return "must not be null" if value is None else None


class NotBlank(Constraint):
    skip_none = False

    def check(self, value: Any) -> Optional[str]:
        if value is None:
            return "must not be blank"
        if isinstance(value, str) and not value.strip():
            return "must not be blank"
        return None


class Length(Constraint):
    def __init__(self, min: Optional[int] = None, max: Optional[int] = None) -> None:
        self.min = min
        self.max = max

    def check(self, value: Any) -> Optional[str]:
        size = len(value)
        if self.min is not None and size < self.min:
            if self.max is not None:
                return f"length must be between {self.min} and {self.max}"
            return f"length must be at least {self.min}"
        if self.max is not None and size > self.max:
            if self.min is not None:
                return f"length must be between {self.min} and {self.max}"
            return f"length must be at most {self.max}"
        return None


class Range(Constraint):
    def __init__(self, min: Optional[float] = None, max: Optional[float] = None) -> None:
        self.min = min
        self.max = max

    def check(self, value: Any) -> Optional[str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "must be a number"
        if self.min is not None and value < self.min:
            return f"must be greater than or equal to {self.min}"
        if self.max is not None and value > self.max:
            return f"must be less than or equal to {self.max}"
        return None


class Pattern(Constraint):
    def __init__(self, regex: str, message: str = "format is invalid") -> None:
        self.regex = re.compile(regex)
        self.message = message

    def check(self, value: Any) -> Optional[str]:
        if not isinstance(value, str) or not self.regex.fullmatch(value):
            return self.message
        return None


class Email(Pattern):
    def __init__(self) -> None:
        super().__init__(r"[^@\s]+@[^@\s]+\.[^@\s]+", "must be a well-formed email address")


class OneOf(Constraint):
    def __init__(self, values: Sequence[Any]) -> None:
        self.values = tuple(values)

    def check(self, value: Any) -> Optional[str]:
        if value not in self.values:
            allowed = ", ".join(str(item) for item in self.values)
            return f"must be one of: {allowed}"
        return None


Rules = Mapping[str, Sequence[Constraint]]


def _read_field(payload: Any, field: str) -> Any:
    if isinstance(payload, Mapping):
        return payload.get(field)
    value = getattr(payload, field, _MISSING)
    return None if value is _MISSING else value


def validate(payload: P, rules: Rules) -> P:
    """依次执行字段约束，首个失败即抛出 ``ValidationException``。"""
    for field, constraints in rules.items():
        value = _read_field(payload, field)
        for constraint in constraints:
            message = constraint.evaluate(field, value)
            if message is not None:
                raise ValidationException(message, field=field)
    return payload
