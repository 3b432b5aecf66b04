"""依赖注入模块：封装 FastAPI 中复用度高的依赖函数。"""

from collections.abc import Generator
from typing import Optional

from fastapi import Query, Request
from sqlalchemy.orm import Session

from scaffold.core.config import get_settings
from scaffold.core.pagination import PageParams
from scaffold.core.snowflake import SnowflakeIdGenerator
from scaffold.db import session as db_session


def get_db() -> Generator[Session, None, None]:
    """生成一个数据库会话，并在请求结束后自动关闭。"""
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_id_generator(request: Request) -> SnowflakeIdGenerator:
    """返回应用启动时创建的唯一 ID 生成器实例。"""
    return request.app.state.id_generator


def get_page_params(
    page: int = Query(1, description="页码，从 1 开始"),
    size: Optional[int] = Query(None, description="每页数量，缺省时使用 PAGE_SIZE_DEFAULT"),
) -> PageParams:
    settings = get_settings()
    if size is None:
        size = settings.page_size_default
    return PageParams.of(page, size, max_size=settings.page_size_max)
