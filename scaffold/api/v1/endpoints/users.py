"""用户相关路由定义。"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from scaffold.core.dependencies import get_db, get_id_generator, get_page_params
from scaffold.core.pagination import PageParams
from scaffold.core.responses import success
from scaffold.core.snowflake import SnowflakeIdGenerator
from scaffold.core.validation import validate
from scaffold.schemas.users import (
    USER_CREATE_RULES,
    USER_UPDATE_RULES,
    UserCreateRequest,
    UserDeletionResponse,
    UserDetailResponse,
    UserPageResponse,
    UserUpdateRequest,
)
from scaffold.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["users"])

# 主键为 BIGINT，超出范围的路径参数在进入数据库前即判为校验失败
MAX_USER_ID = 2**63 - 1


@router.post("", response_model=UserDetailResponse)
def create_user(
    payload: UserCreateRequest,
    db: Session = Depends(get_db),
    id_generator: SnowflakeIdGenerator = Depends(get_id_generator),
) -> UserDetailResponse:
    validate(payload, USER_CREATE_RULES)
    return success(user_service.create_user(db, payload, id_generator=id_generator))


@router.get("", response_model=UserPageResponse)
def list_users(
    username: Optional[str] = Query(None, description="用户名模糊匹配"),
    status: Optional[str] = Query(None, description="用户状态"),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
) -> UserPageResponse:
    return success(user_service.list_users(db, params, username=username, status=status))


@router.get("/{user_id}", response_model=UserDetailResponse)
def read_user(
    user_id: int = Path(..., ge=1, le=MAX_USER_ID),
    db: Session = Depends(get_db),
) -> UserDetailResponse:
    return success(user_service.get_user(db, user_id))


@router.put("/{user_id}", response_model=UserDetailResponse)
def update_user(
    payload: UserUpdateRequest,
    user_id: int = Path(..., ge=1, le=MAX_USER_ID),
    db: Session = Depends(get_db),
) -> UserDetailResponse:
    validate(payload, USER_UPDATE_RULES)
    return success(user_service.update_user(db, user_id, payload))


@router.delete("/{user_id}", response_model=UserDeletionResponse)
def delete_user(
    user_id: int = Path(..., ge=1, le=MAX_USER_ID),
    db: Session = Depends(get_db),
) -> UserDeletionResponse:
    return success(user_service.delete_user(db, user_id))
