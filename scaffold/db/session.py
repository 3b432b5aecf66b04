"""Database engine and session factory configuration."""

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from scaffold.core.config import Settings, get_settings


def build_engine(settings: Settings) -> Engine:
    """按配置创建引擎；连接池参数仅作用于服务端数据库。"""
    options: dict[str, Any] = {"echo": settings.database_echo}
    if settings.is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
    else:
        # ``pool_pre_ping`` keeps the pool healthy; ``pool_recycle`` should stay
        # below the server side idle timeout.
        options.update(
            pool_pre_ping=True,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_recycle=settings.database_pool_recycle,
            pool_timeout=settings.database_pool_timeout,
        )
    return create_engine(settings.sql_database_url, **options)


engine = build_engine(get_settings())
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
