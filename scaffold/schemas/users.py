"""用户相关的请求与响应模型定义，以及请求体的字段约束。"""

from typing import Optional

from pydantic import BaseModel, Field

from scaffold.core.enums import UserStatusEnum
from scaffold.core.pagination import PagedResult
from scaffold.core.responses import Envelope
from scaffold.core.validation import Email, Length, NotBlank, OneOf, Pattern, Range


class UserCreateRequest(BaseModel):
    """新增用户的请求体，字段约束见 ``USER_CREATE_RULES``。"""

    username: Optional[str] = Field(default=None, description="登录用户名")
    nickname: Optional[str] = Field(default=None, description="用户昵称")
    email: Optional[str] = Field(default=None, description="邮箱")
    age: Optional[int] = Field(default=None, description="年龄")
    status: str = Field(default=UserStatusEnum.NORMAL.value, description="用户状态")
    remark: Optional[str] = Field(default=None, description="备注")


class UserUpdateRequest(BaseModel):
    """更新用户的请求体，仅提交需要修改的字段。"""

    nickname: Optional[str] = Field(default=None, description="用户昵称")
    email: Optional[str] = Field(default=None, description="邮箱")
    age: Optional[int] = Field(default=None, description="年龄")
    status: Optional[str] = Field(default=None, description="用户状态")
    remark: Optional[str] = Field(default=None, description="备注")


USER_UPDATE_RULES = {
    "nickname": [Length(max=100)],
    "email": [Email(), Length(max=255)],
    "age": [Range(min=0, max=150)],
    "status": [OneOf(UserStatusEnum.values())],
    "remark": [Length(max=255)],
}

USER_CREATE_RULES = {
    "username": [
        NotBlank(),
        Length(max=50),
        Pattern(r"[A-Za-z0-9_]+", "may only contain letters, digits and underscores"),
    ],
    **USER_UPDATE_RULES,
}


class UserDetail(BaseModel):
    """用户详情；雪花 ID 以字符串返回，避免前端精度丢失。"""

    id: str
    username: str
    nickname: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None
    status: str
    remark: Optional[str] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None


class UserDeletionPayload(BaseModel):
    id: str


UserDetailResponse = Envelope[UserDetail]
UserPageResponse = Envelope[PagedResult[UserDetail]]
UserDeletionResponse = Envelope[UserDeletionPayload]
