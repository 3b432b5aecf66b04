"""枚举定义：约束业务字段的可选值。"""

from enum import Enum


class UserStatusEnum(str, Enum):
    NORMAL = "normal"
    DISABLED = "disabled"

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]
